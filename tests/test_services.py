"""Unit tests for the local service implementations and catalog helpers."""

import asyncio

import pytest

from menudigital.services.auth.mock import MockAuthService
from menudigital.services.catalog import menu_url, normalize_color, slugify
from menudigital.services.kv.memory import MemoryKeyValueStore
from menudigital.services.storage.local import LocalStorageService


class TestSlugify:
    @pytest.mark.parametrize("text, expected", [
        ("Tacos Don Pepe", "tacos-don-pepe"),
        ("Café  Olé! Tacos", "cafe-ole-tacos"),
        ("  --Ñandú 2000--  ", "nandu-2000"),
        ("¡¡!!", ""),
    ])
    def test_slugify(self, text, expected):
        assert slugify(text) == expected


class TestNormalizeColor:
    @pytest.mark.parametrize("color, expected", [
        ("FF6B35", "#FF6B35"),
        ("#FF6B35", "#FF6B35"),
        (" abcdef ", "#abcdef"),
        ("red", "red"),
        ("", None),
        (None, None),
    ])
    def test_normalize_color(self, color, expected):
        assert normalize_color(color) == expected


def test_menu_url():
    assert menu_url("https://menu.app", "tacos") == "https://menu.app/menu/tacos"
    assert menu_url("https://menu.app", None) is None


class TestMemoryKeyValueStore:
    def test_set_get_delete(self):
        store = MemoryKeyValueStore()
        store.set("a", "1")
        assert store.get("a") == "1"

        store.delete("a")
        store.delete("a")
        assert store.get("a") is None

    def test_expired_keys_disappear(self, monkeypatch):
        store = MemoryKeyValueStore()
        now = [1000.0]
        monkeypatch.setattr("menudigital.services.kv.memory.time.monotonic", lambda: now[0])

        store.set("cart", "[]", ttl=60)
        now[0] += 59
        assert store.get("cart") == "[]"
        now[0] += 2
        assert store.get("cart") is None


class TestMockAuthService:
    def test_sign_up_sign_in_and_out(self):
        auth = MockAuthService()

        created = asyncio.run(auth.sign_up("Owner@Tacos.mx", "secret123", "Pepe"))
        assert created.success
        assert created.user.email == "owner@tacos.mx"

        signed_in = asyncio.run(auth.sign_in("owner@tacos.mx", "secret123"))
        assert signed_in.success
        assert asyncio.run(auth.get_user(signed_in.access_token)).id == created.user.id

        assert asyncio.run(auth.sign_out(signed_in.access_token)) is True
        assert asyncio.run(auth.get_user(signed_in.access_token)) is None

    def test_wrong_password(self):
        auth = MockAuthService()
        asyncio.run(auth.sign_up("owner@tacos.mx", "secret123"))

        result = asyncio.run(auth.sign_in("owner@tacos.mx", "nope-nope"))

        assert not result.success
        assert result.error_message == "Invalid login credentials"

    def test_duplicate_email(self):
        auth = MockAuthService()
        asyncio.run(auth.sign_up("owner@tacos.mx", "secret123"))

        result = asyncio.run(auth.sign_up("OWNER@tacos.mx", "secret123"))

        assert not result.success


class TestLocalStorageService:
    def test_upload_writes_file_and_builds_url(self, tmp_path):
        storage = LocalStorageService(root=str(tmp_path), bucket="company-logos")

        result = asyncio.run(storage.upload("c1/logo-1.png", b"png-bytes", "image/png"))

        assert result.success
        assert (tmp_path / "company-logos" / "c1" / "logo-1.png").read_bytes() == b"png-bytes"
        assert result.public_url == "http://testserver/static/uploads/company-logos/c1/logo-1.png"

    def test_path_traversal_rejected(self, tmp_path):
        storage = LocalStorageService(root=str(tmp_path), bucket="company-logos")

        result = asyncio.run(storage.upload("../escape.png", b"x"))

        assert not result.success


class TestEntryPoint:
    def test_run_serves_on_configured_host_and_port(self, monkeypatch):
        from menudigital import main

        calls = []
        monkeypatch.setattr(main.uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs)))

        main.run()

        assert calls == [(
            "menudigital.main:app",
            {
                "host": main.settings.api_host,
                "port": main.settings.api_port,
                "reload": main.settings.is_development,
            },
        )]
