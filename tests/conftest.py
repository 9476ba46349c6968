# tests/conftest.py
import pytest

from _fakes import FakeClient, FakeClock, FakeDom

from resilient_browser import ConditionWaiter, SessionHandle, WaitSpec


@pytest.fixture
def dom():
    return FakeDom()


@pytest.fixture
def client(dom):
    return FakeClient(dom)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def make_session(client, clock):
    """Build a SessionHandle on the fake client, driven by the fake clock."""

    def _make(**overrides):
        kwargs = dict(
            default_wait=WaitSpec(timeout=0.5, poll_interval=0.05),
            reacquire_wait=WaitSpec(timeout=0.1, poll_interval=0.05),
            page_load_wait=WaitSpec(timeout=1.0, poll_interval=0.1),
            stale_retry_cycles=1,
            waiter=ConditionWaiter(clock=clock, sleep=clock.sleep),
            name="test-session",
        )
        kwargs.update(overrides)
        target = kwargs.pop("client", client)
        return SessionHandle(target, **kwargs)

    return _make


@pytest.fixture
def session(make_session):
    return make_session()
