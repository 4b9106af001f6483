import importlib
import logging
import os

import pytest

from dinkhook.config import DEFAULT_WEBHOOK_PATH, Settings, load_settings
from dinkhook.main import create_app
from dinkhook.utils.logger_util import configure_logging


def test_defaults():
    s = load_settings(env={})
    assert s.webhook_path == DEFAULT_WEBHOOK_PATH
    assert s.dispatch_mode == "inline"
    assert s.queued is False
    assert s.require_token is False
    assert s.allowed_account_hashes == frozenset()


def test_env_values_are_parsed():
    s = load_settings(env={
        "DINKHOOK_PORT": "9001",
        "DINKHOOK_WEBHOOK_PATH": "/hooks/dink",
        "DINKHOOK_DISPATCH_MODE": "Queued",
        "DINKHOOK_WORKERS": "3",
        "DINKHOOK_DEDUP_WINDOW_SECONDS": "2.5",
        "DINKHOOK_REQUIRE_TOKEN": "yes",
        "DINKHOOK_TOKEN_SECRET": "s3cret",
        "DINKHOOK_ALLOWED_ACCOUNT_HASHES": " abc, def ,,",
        "DINKHOOK_LOG_LEVEL": "debug",
    })
    assert s.port == 9001
    assert s.webhook_path == "/hooks/dink"
    assert s.queued is True
    assert s.workers == 3
    assert s.dedup_window_seconds == 2.5
    assert s.require_token is True
    assert s.token_secret == "s3cret"
    assert s.allowed_account_hashes == frozenset({"abc", "def"})
    assert s.log_level == "DEBUG"


def test_environment_is_read_when_no_mapping_given(monkeypatch, tmp_path):
    monkeypatch.setenv("DINKHOOK_HISTORY_SIZE", "42")
    s = load_settings(dotenv_path=str(tmp_path / "missing.env"))
    assert s.history_size == 42


def test_dotenv_file_is_loaded(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DINKHOOK_QUEUE_MAXSIZE=7\n")
    try:
        s = load_settings(dotenv_path=str(env_file))
        assert s.queue_maxsize == 7
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("DINKHOOK_QUEUE_MAXSIZE", None)


@pytest.mark.parametrize("env", [
    {"DINKHOOK_PORT": "0"},
    {"DINKHOOK_PORT": "http"},
    {"DINKHOOK_DISPATCH_MODE": "later"},
    {"DINKHOOK_WEBHOOK_PATH": "dink"},
    {"DINKHOOK_WORKERS": "0"},
    {"DINKHOOK_DEDUP_WINDOW_SECONDS": "-1"},
    {"DINKHOOK_REQUIRE_TOKEN": "maybe"},
    {"DINKHOOK_REQUIRE_TOKEN": "1", "DINKHOOK_TOKEN_SECRET": ""},
])
def test_invalid_values_raise(env):
    with pytest.raises(ValueError):
        load_settings(env=env)


def test_all_problems_are_reported_together():
    with pytest.raises(ValueError) as ei:
        Settings(port=70000, history_size=0)
    msg = str(ei.value)
    assert "port" in msg and "history_size" in msg


def test_admin_key_and_log_dir_from_env():
    s = load_settings(env={"DINKHOOK_ADMIN_KEY": "ops-key", "DINKHOOK_LOG_DIR": ""})
    assert s.admin_key == "ops-key"
    assert s.log_dir == ""
    assert load_settings(env={}).log_dir is None


def test_unknown_log_level_is_rejected():
    with pytest.raises(ValueError):
        load_settings(env={"DINKHOOK_LOG_LEVEL": "chatty"})


def test_dotenv_log_settings_reach_package_loggers(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("DINKHOOK_LOG_LEVEL=DEBUG\n")
    intake_logger = logging.getLogger("dinkhook.intake")
    try:
        settings = load_settings(dotenv_path=str(env_file))
        assert settings.log_level == "DEBUG"
        create_app(settings)
        assert intake_logger.level == logging.DEBUG

        create_app(Settings(log_dir=str(tmp_path / "logs")))
        files = [h.baseFilename for h in intake_logger.handlers if isinstance(h, logging.FileHandler)]
        assert files == [str(tmp_path / "logs" / "dinkhook.intake.log")]
        assert intake_logger.level == logging.INFO
    finally:
        os.environ.pop("DINKHOOK_LOG_LEVEL", None)
        configure_logging("INFO", "")
    assert not any(isinstance(h, logging.FileHandler) for h in intake_logger.handlers)


def test_importing_main_does_not_read_settings(monkeypatch):
    import dinkhook.main

    monkeypatch.setenv("DINKHOOK_PORT", "not-a-port")
    importlib.reload(dinkhook.main)
    with pytest.raises(ValueError):
        dinkhook.main.create_app()
