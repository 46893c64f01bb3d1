"""Unit tests for engine configuration."""

from telloom.config import AuthoritySettings, Settings
from telloom.persistence.database import engine_options


class TestEngineOptions:
    """Connections carry a server-side statement limit."""

    def test_statement_timeout_sits_inside_call_budget(self):
        """The database gives up before the client-side budget does."""
        # Arrange
        settings = Settings(authority=AuthoritySettings(query_timeout_seconds=1.5))

        # Act
        options = engine_options(settings)

        # Assert
        server_settings = options["connect_args"]["server_settings"]
        assert server_settings["statement_timeout"] == "1350"
        assert int(server_settings["statement_timeout"]) < 1500

    def test_pool_settings_pass_through(self):
        # Arrange
        settings = Settings()

        # Act
        options = engine_options(settings)

        # Assert
        assert options["pool_pre_ping"] is True
        assert options["pool_size"] == settings.database.pool_size
        assert options["max_overflow"] == settings.database.max_overflow
        assert options["echo"] == settings.debug

    def test_tiny_budget_still_sets_a_limit(self):
        """A zero statement_timeout would disable the limit entirely."""
        assert AuthoritySettings(query_timeout_seconds=0.0001).statement_timeout_ms == 1
