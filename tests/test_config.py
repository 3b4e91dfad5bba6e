from __future__ import annotations

import pytest

from pyonecta._retry import RetryPolicy
from pyonecta.config import OnectaConfig
from pyonecta.exceptions import OnectaConfigError

_ENV_KEYS = (
    "ONECTA_ACCESS_TOKEN",
    "ONECTA_BASE_URL",
    "ONECTA_REQUEST_TIMEOUT",
    "ONECTA_RETRY_INITIAL_DELAY",
    "ONECTA_RETRY_MAX_DELAY",
    "ONECTA_MAX_RETRIES",
    "ONECTA_RETRY_TRANSIENT_ONLY",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = OnectaConfig.from_env()
    assert config.access_token is None
    assert config.base_url == "https://api.onecta.daikineurope.com"
    assert config.max_retries == 3
    assert config.retry_initial_delay == 1.0
    assert config.retry_max_delay == 10.0
    assert config.retry_transient_only is True


def test_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ONECTA_ACCESS_TOKEN", "abc")
    monkeypatch.setenv("ONECTA_MAX_RETRIES", "5")
    monkeypatch.setenv("ONECTA_RETRY_INITIAL_DELAY", "0.5")
    monkeypatch.setenv("ONECTA_RETRY_TRANSIENT_ONLY", "no")

    config = OnectaConfig.from_env()

    assert config.access_token == "abc"
    assert config.max_retries == 5
    assert config.retry_initial_delay == 0.5
    assert config.retry_transient_only is False


def test_overrides_win(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ONECTA_MAX_RETRIES", "5")
    monkeypatch.setenv("ONECTA_BASE_URL", "https://env.test")

    config = OnectaConfig.from_env(max_retries=1, base_url="https://override.test")

    assert config.max_retries == 1
    assert config.base_url == "https://override.test"


def test_invalid_env_number(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ONECTA_MAX_RETRIES", "many")
    with pytest.raises(OnectaConfigError):
        OnectaConfig.from_env()


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_retries": -1},
        {"retry_initial_delay": -0.1},
        {"retry_max_delay": -1.0},
        {"request_timeout": 0},
    ],
)
def test_invalid_values_rejected(kwargs: dict[str, float]) -> None:
    with pytest.raises(OnectaConfigError):
        OnectaConfig(**kwargs)  # type: ignore[arg-type]


def test_retry_policy_from_config() -> None:
    policy = RetryPolicy.from_config(OnectaConfig(max_retries=2, retry_initial_delay=0.25, retry_transient_only=False))
    assert policy == RetryPolicy(max_retries=2, initial_delay=0.25, max_delay=10.0, retry_transient_only=False)
