from unittest import mock

import pytest

from palace.converter.config import ConverterConfiguration, get_user_agent
from palace.converter.exceptions import CannotLoadConfiguration
from palace.converter.util.log import LogLevel


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path) -> None:
    # Don't pick up a .env file or settings from the environment running the tests.
    monkeypatch.chdir(tmp_path)
    for name in ("HTTP_TIMEOUT", "USER_AGENT", "LOG_LEVEL", "INDENT"):
        monkeypatch.delenv(f"PALACE_CONVERTER_{name}", raising=False)


def test_get_user_agent():
    with mock.patch("palace.converter.__version__", "1.2.3"):
        assert get_user_agent() == "palace-opds-converter/1.2.3"
    with mock.patch("palace.converter.__version__", None):
        assert get_user_agent() == "palace-opds-converter/x.x.x"


class TestConverterConfiguration:
    def test_defaults(self):
        config = ConverterConfiguration()
        assert config.http_timeout == 20
        assert config.user_agent.startswith("palace-opds-converter/")
        assert config.log_level == LogLevel.info
        assert config.indent == 1

    def test_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PALACE_CONVERTER_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("PALACE_CONVERTER_USER_AGENT", "  my-agent/1.0  ")
        monkeypatch.setenv("PALACE_CONVERTER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PALACE_CONVERTER_INDENT", "4")

        config = ConverterConfiguration()
        assert config.http_timeout == 2.5
        assert config.user_agent == "my-agent/1.0"
        assert config.log_level == LogLevel.debug
        assert config.indent == 4

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("PALACE_CONVERTER_INDENT=2\n")
        assert ConverterConfiguration().indent == 2

    def test_frozen(self):
        config = ConverterConfiguration()
        with pytest.raises(ValueError):
            config.indent = 3  # type: ignore[misc]

    def test_invalid(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PALACE_CONVERTER_HTTP_TIMEOUT", "-1")
        monkeypatch.setenv("PALACE_CONVERTER_LOG_LEVEL", "loud")

        with pytest.raises(CannotLoadConfiguration) as excinfo:
            ConverterConfiguration()

        message = str(excinfo.value)
        assert message.startswith("Error loading settings from environment:")
        assert "PALACE_CONVERTER_HTTP_TIMEOUT:" in message
        assert "PALACE_CONVERTER_LOG_LEVEL:" in message
