import logging
from logging.handlers import RotatingFileHandler

import pytest
from pydantic import ValidationError

from tabbridge.config import Settings, get_settings, setup_logging


def test_defaults():
    settings = Settings()
    assert settings.UNKNOWN_VALUE_POLICY == "error"
    assert settings.DISTRIBUTION_FALLBACK == "one_hot"
    assert settings.DEFAULT_DATE_FORMAT == "%Y-%m-%dT%H:%M:%S"
    assert settings.LOG_LEVEL == "WARNING"


def test_environment_override(monkeypatch):
    monkeypatch.setenv("TABBRIDGE_UNKNOWN_VALUE_POLICY", "MISSING")
    monkeypatch.setenv("TABBRIDGE_LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.UNKNOWN_VALUE_POLICY == "missing"
    assert settings.LOG_LEVEL == "DEBUG"


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


@pytest.mark.parametrize(
    "name, value",
    [
        ("UNKNOWN_VALUE_POLICY", "ignore"),
        ("DISTRIBUTION_FALLBACK", "uniform"),
        ("LOG_LEVEL", "LOUD"),
    ],
)
def test_invalid_values(name, value):
    with pytest.raises(ValidationError):
        Settings(**{name: value})


class TestLogging:
    @pytest.fixture(autouse=True)
    def restore_logger(self):
        logger = logging.getLogger("tabbridge")
        handlers, level = logger.handlers[:], logger.level
        yield
        for handler in logger.handlers[:]:
            handler.close()
        logger.handlers = handlers
        logger.setLevel(level)

    def test_console_only(self):
        setup_logging("info")
        logger = logging.getLogger("tabbridge")
        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1

    def test_no_duplicate_handlers(self):
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        assert len(logging.getLogger("tabbridge").handlers) == 1

    def test_rotating_file(self, tmp_path):
        log_file = tmp_path / "logs" / "tabbridge.log"
        settings = Settings(LOG_LEVEL="INFO", LOG_FILE=str(log_file))
        settings.setup_logging()

        handlers = logging.getLogger("tabbridge").handlers
        assert any(isinstance(h, RotatingFileHandler) for h in handlers)
        logging.getLogger("tabbridge.modeling").info("hello")
        for h in handlers:
            h.flush()
        assert "hello" in log_file.read_text(encoding="utf-8")


def test_default_date_format_from_environment(monkeypatch):
    import pandas as pd

    from tabbridge.data.attributes import DateAttribute
    from tabbridge.data.host import HostSchema

    monkeypatch.setenv("TABBRIDGE_DEFAULT_DATE_FORMAT", "%d.%m.%Y")
    get_settings.cache_clear()
    assert DateAttribute("day").date_format == "%d.%m.%Y"
    schema = HostSchema.from_frame(pd.DataFrame({"day": pd.to_datetime(["2020-01-31"])}))
    assert schema.attributes[0].date_format == "%d.%m.%Y"
