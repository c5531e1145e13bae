"""simpledns - a terminal dashboard for DNSimple domains, zones and records."""

__version__ = "0.3.0"
