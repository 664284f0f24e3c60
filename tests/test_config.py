from __future__ import annotations

import pytest

from lumnisai.config import Config
from lumnisai.constants import DEFAULT_BASE_URL
from lumnisai.errors import ConfigurationError

pytestmark = pytest.mark.unit


def test_explicit_values_win(monkeypatch) -> None:
    monkeypatch.setenv("LUMNISAI_API_KEY", "env-key")
    config = Config(api_key="arg-key", base_url="https://example.test")
    assert config.api_key == "arg-key"
    assert config.base_url == "https://example.test"


def test_environment_fills_unset_values(monkeypatch) -> None:
    monkeypatch.setenv("LUMNISAI_API_KEY", "env-key")
    monkeypatch.setenv("LUMNISAI_TENANT_ID", "tenant-1")
    monkeypatch.setenv("LUMNISAI_BASE_URL", "https://staging.test")

    config = Config()

    assert config.api_key == "env-key"
    assert config.tenant_id == "tenant-1"
    assert config.base_url == "https://staging.test"


def test_defaults() -> None:
    config = Config(api_key="k")
    assert config.base_url == DEFAULT_BASE_URL
    assert config.tenant_id is None
    assert config.scope == "tenant"
    assert config.timeout_s == 30.0
    assert config.max_retries == 3


def test_missing_api_key_has_hint() -> None:
    with pytest.raises(ConfigurationError) as exc_info:
        Config()
    assert exc_info.value.hint is not None
    assert "LUMNISAI_API_KEY" in exc_info.value.hint


@pytest.mark.parametrize(
    "kwargs",
    [
        {"scope": "global"},
        {"timeout_s": 0},
        {"max_retries": -1},
    ],
)
def test_invalid_values_are_rejected(kwargs) -> None:
    with pytest.raises(ConfigurationError):
        Config(api_key="k", **kwargs)


def test_repr_redacts_api_key() -> None:
    config = Config(api_key="super-secret")
    assert "super-secret" not in repr(config)
    assert "[REDACTED]" in str(config)
