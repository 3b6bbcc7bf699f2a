# tests/test_config.py

import pytest
from pydantic import ValidationError

from crm.core import config
from crm.core.config import Settings
from crm.core.exceptions import CRMError


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "settings", None)


def test_defaults() -> None:
    settings = Settings()
    assert settings.notifications_enabled is True
    assert settings.reminder_check_interval == 60
    assert settings.customer_roles == ["Client", "Prospect", "Partner"]
    assert settings.log_level == "INFO"


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("NOTIFICATIONS_ENABLED", "false")
    monkeypatch.setenv("REMINDER_CHECK_INTERVAL", "15")
    monkeypatch.setenv("log_level", "debug")

    settings = Settings()
    assert settings.notifications_enabled is False
    assert settings.reminder_check_interval == 15
    assert settings.log_level == "DEBUG"


def test_env_file(tmp_path) -> None:
    env_file = tmp_path / "custom.env"
    env_file.write_text("REMINDER_CHECK_INTERVAL=5\nLOAD_SAMPLE_DATA=false\n")

    settings = config.initialize_settings(str(env_file))
    assert settings.reminder_check_interval == 5
    assert settings.load_sample_data is False
    assert config.get_settings() is settings


def test_invalid_values_rejected() -> None:
    with pytest.raises(ValidationError):
        Settings(reminder_check_interval=0)
    with pytest.raises(ValidationError):
        Settings(log_level="loud")


def test_get_settings_falls_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("REMINDER_CHECK_INTERVAL", "-1")
    settings = config.get_settings()
    assert settings.reminder_check_interval == 60
    assert config.get_settings() is settings


def test_log_directory_is_created(tmp_path) -> None:
    Settings(log_file=str(tmp_path / "logs" / "crm.log"))
    assert (tmp_path / "logs").is_dir()


def test_crm_error_messages() -> None:
    error = CRMError("TASK_NOT_FOUND", task_id="t1")
    assert str(error) == "Task not found"
    assert error.data == {"task_id": "t1"}
    assert CRMError("VALIDATION_ERROR", "Name and email are required.").message == "Name and email are required."
    assert CRMError("SOMETHING_ELSE").message == "SOMETHING_ELSE"
