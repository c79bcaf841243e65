"""
Utilbox Backend: Settings Tests
================================
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from utilbox.config import Settings


class TestSettings:

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("PORT", raising=False)
        s = Settings(_env_file=None)

        assert s.port == 3000
        assert s.cors_origins_list == ["*"]
        assert s.cors_allow_methods_list == ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
        assert s.cors_allow_headers_list == ["Content-Type", "Authorization"]
        assert s.cors_allow_credentials is False

    def test_port_from_environment(self, monkeypatch):
        monkeypatch.setenv("PORT", "8080")
        assert Settings(_env_file=None).port == 8080

    def test_invalid_port_rejected(self, monkeypatch):
        monkeypatch.setenv("PORT", "70000")
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)

    def test_log_level_is_normalized(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert Settings(_env_file=None).log_level == "DEBUG"

    def test_invalid_log_level_rejected(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)

    def test_comma_separated_lists(self, monkeypatch):
        monkeypatch.setenv("CORS_ORIGINS", "http://a.test, http://b.test,")
        assert Settings(_env_file=None).cors_origins_list == ["http://a.test", "http://b.test"]
