import pytest

from pos import factory
from pos.config import is_remote_configured
from pos.persistence import LocalBackend


class TestIsRemoteConfigured:
    @pytest.mark.parametrize(
        ("url", "key", "expected"),
        [
            ("", "", False),
            ("https://abc.supabase.co", "", False),
            ("YOUR_SUPABASE_URL", "YOUR_SUPABASE_ANON_KEY", False),
            ("https://abc.supabase.co", "YOUR_SUPABASE_ANON_KEY", False),
            ("https://abc.supabase.co", "anon-key", True),
        ],
    )
    def test_placeholders_and_blanks_are_not_configured(self, url, key, expected):
        assert is_remote_configured(url, key) is expected


class TestOpenBackend:
    async def test_falls_back_to_local(self, tmp_path):
        backend = await factory.open_backend("", "", tmp_path / "pos.db")
        assert isinstance(backend, LocalBackend)
        assert not backend.is_remote

    async def test_connects_remote_when_configured(self, monkeypatch, fake_supabase):
        calls = []

        async def fake_create_client(url, key):
            calls.append((url, key))
            return fake_supabase

        monkeypatch.setattr("pos.remote.acreate_client", fake_create_client)
        backend = await factory.open_backend("https://abc.supabase.co", "anon-key")
        assert backend.is_remote
        assert backend.client is fake_supabase
        assert calls == [("https://abc.supabase.co", "anon-key")]
