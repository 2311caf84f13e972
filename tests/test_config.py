from __future__ import annotations

import pytest

from agentstore.config import Settings


def test_defaults() -> None:
    settings = Settings(_env_file=None)

    assert settings.action_type == "paymentRequest"
    assert settings.account_arg_name == "payment_account_id"


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENTSTORE_ACTION_TYPE", "storePurchase")
    monkeypatch.setenv("AGENTSTORE_LOG_LEVEL", "DEBUG")

    settings = Settings(_env_file=None)

    assert settings.action_type == "storePurchase"
    assert settings.log_level == "DEBUG"


def test_invalid_log_level_is_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("AGENTSTORE_LOG_LEVEL", "LOUD")

    with pytest.raises(ValueError):
        Settings(_env_file=None)
