import pytest

from config import Settings


@pytest.mark.unit
class TestSettings:
    def test_defaults(self):
        s = Settings()
        assert s.supabase_url is None
        assert s.supabase_table == "oauth_tokens"
        assert s.token_ttl_seconds == 600
        assert s.require_durable is False
        assert s.sweep_enabled is False
        assert s.cors_origins == ["*"]

    def test_validate_lists_missing_vars(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        assert Settings().validate() == ["SUPABASE_ANON_KEY"]

    def test_validate_ok(self, monkeypatch):
        monkeypatch.setenv("SUPABASE_URL", "https://example.supabase.co")
        monkeypatch.setenv("SUPABASE_ANON_KEY", "anon")
        assert Settings().validate() == []

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("No", False), ("", False)])
    def test_bool_flags(self, monkeypatch, value, expected):
        monkeypatch.setenv("TOKEN_SWEEP_ENABLED", value)
        assert Settings().sweep_enabled is expected
