"""Shared fixtures for the simpledns test suite."""

import pytest

from simpledns.config import CredentialStore
from simpledns.demo_backend import DemoBackend
from simpledns.tui.messages import jobs


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def backend():
    return DemoBackend()


@pytest.fixture
def store(tmp_path):
    return CredentialStore(tmp_path / "config")


def run_job(job):
    """Run one job synchronously and return its result message."""
    assert job is not None
    return job()


def drain(model, *pending, limit=50):
    """Run *pending* jobs and hand each result to ``model.apply``, like the shell does.

    Follow-up jobs returned by ``apply`` run too.  Returns every delivered message.
    """
    delivered = []
    queue = jobs(*pending)
    while queue:
        assert len(delivered) < limit, "job loop did not settle"
        msg = queue.pop(0)()
        if msg is None:
            continue
        delivered.append(msg)
        queue.extend(jobs(model.apply(msg)))
    return delivered


async def settle(app, pilot):
    """Let worker threads finish and their messages land."""
    for _ in range(3):
        await app.workers.wait_for_complete()
        await pilot.pause()
