# tests/test_config.py
import pytest

from resilient_browser import FailureKind, SessionHandle, WaitSpec
from resilient_browser.config import environment
from resilient_browser.config import get_env_config, default_wait_spec, reacquire_wait_spec, page_load_wait_spec

from _fakes import FakeClient


ENV_VARS = (
    "RB_POLL_INTERVAL_SECS",
    "RB_DEFAULT_WAIT_SECS",
    "RB_REACQUIRE_WAIT_SECS",
    "RB_PAGE_LOAD_WAIT_SECS",
    "RB_STALE_RETRY_CYCLES",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # No stray .env from the checkout; reload on first use.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(environment, "_DOTENV_LOADED", True)


def test_defaults():
    config = get_env_config()
    assert config["poll_interval"] == pytest.approx(0.1)
    assert config["default_wait"] == pytest.approx(10)
    assert config["reacquire_wait"] == pytest.approx(0.2)
    assert config["page_load_wait"] == pytest.approx(10)
    assert config["stale_retry_cycles"] == 1


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("RB_POLL_INTERVAL_SECS", "0.25")
    monkeypatch.setenv("RB_DEFAULT_WAIT_SECS", "3")
    monkeypatch.setenv("RB_STALE_RETRY_CYCLES", "4")
    monkeypatch.setenv("RB_REACQUIRE_WAIT_SECS", "0")

    config = get_env_config()

    assert default_wait_spec(config) == WaitSpec(timeout=3, poll_interval=0.25)
    assert reacquire_wait_spec(config).timeout == 0
    assert config["stale_retry_cycles"] == 4


def test_page_load_wait_ignores_script_errors():
    assert FailureKind.JAVASCRIPT in page_load_wait_spec().ignored


@pytest.mark.parametrize(
    "name, raw",
    [
        ("RB_POLL_INTERVAL_SECS", "0"),
        ("RB_POLL_INTERVAL_SECS", "fast"),
        ("RB_DEFAULT_WAIT_SECS", "-1"),
        ("RB_PAGE_LOAD_WAIT_SECS", "ten"),
        ("RB_STALE_RETRY_CYCLES", "-1"),
        ("RB_STALE_RETRY_CYCLES", "1.5"),
    ],
)
def test_invalid_values_raise_environment_error(monkeypatch, name, raw):
    monkeypatch.setenv(name, raw)
    with pytest.raises(EnvironmentError, match=name):
        get_env_config()


def test_dotenv_file_is_loaded_without_overriding_process_env(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("RB_DEFAULT_WAIT_SECS=7\nRB_STALE_RETRY_CYCLES=2\n")
    monkeypatch.setenv("RB_STALE_RETRY_CYCLES", "3")
    # Registered with monkeypatch so the value loaded from .env is removed afterwards.
    monkeypatch.setenv("RB_DEFAULT_WAIT_SECS", "")
    monkeypatch.delenv("RB_DEFAULT_WAIT_SECS")
    monkeypatch.setattr(environment, "_DOTENV_LOADED", False)

    config = get_env_config()

    assert config["default_wait"] == pytest.approx(7)
    assert config["stale_retry_cycles"] == 3


def test_session_uses_environment_for_missing_overrides(monkeypatch):
    monkeypatch.setenv("RB_DEFAULT_WAIT_SECS", "2")
    monkeypatch.setenv("RB_STALE_RETRY_CYCLES", "0")

    session = SessionHandle(FakeClient())

    assert session.default_wait.timeout == 2
    assert session.retrier.max_cycles == 0


def test_explicit_overrides_win_over_environment(monkeypatch):
    monkeypatch.setenv("RB_DEFAULT_WAIT_SECS", "not-a-number")
    wait = WaitSpec(timeout=1)

    session = SessionHandle(
        FakeClient(),
        default_wait=wait,
        reacquire_wait=wait,
        page_load_wait=wait,
        stale_retry_cycles=2,
    )

    assert session.default_wait is wait
    assert session.retrier.max_cycles == 2
