"""State models behind the simpledns screens: tabs, lists, the dashboard and sign-in."""
