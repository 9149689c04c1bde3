"""
Termbook Backend: Settings Tests
==================================
"""

import pytest
from pydantic import ValidationError

from termbook.config import Settings


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None, jwt_secret_key="x")

        assert s.definition_edit_policy == "owner"
        assert s.delete_requires_auth is True
        assert s.jwt_algorithm == "HS256"

    def test_log_level_is_normalized(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, log_level="LOUD")

    def test_invalid_edit_policy(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, definition_edit_policy="everyone")

    def test_cors_origins_list(self):
        s = Settings(_env_file=None, cors_origins="http://a.test, http://b.test")

        assert s.cors_origins_list == ["http://a.test", "http://b.test"]

    def test_sqlite_detection(self):
        assert Settings(_env_file=None, database_url="sqlite+aiosqlite://").is_sqlite
        assert not Settings(
            _env_file=None, database_url="postgresql+asyncpg://u:p@h/db"
        ).is_sqlite

    def test_default_secret_fails_production_check(self):
        s = Settings(_env_file=None, jwt_secret_key="change-me")

        with pytest.raises(ValueError):
            s.validate_required_for_production()
