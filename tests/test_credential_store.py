from __future__ import annotations

import json

import pytest

from services.credential_store import CredentialStore
from services.errors import AuthorizationError


def test_load_returns_none_without_token_file(tmp_path):
    assert CredentialStore(tmp_path / "token.json").load() is None


def test_save_then_load(tmp_path):
    store = CredentialStore(tmp_path / "nested" / "token.json")
    payload = {"type": "authorized_user", "client_id": "a", "client_secret": "b", "refresh_token": "c"}

    store.save(payload)

    assert store.load() == payload


def test_unreadable_token_file_raises(tmp_path):
    token = tmp_path / "token.json"
    token.write_text("not json", encoding="utf-8")

    with pytest.raises(AuthorizationError):
        CredentialStore(token).load()


def test_build_payload_accepts_web_clients(tmp_path):
    secrets = tmp_path / "credentials.json"
    secrets.write_text(json.dumps({"web": {"client_id": "web-id", "client_secret": "web-secret"}}), encoding="utf-8")

    payload = CredentialStore.build_payload(secrets, "rt")

    assert payload == {
        "type": "authorized_user",
        "client_id": "web-id",
        "client_secret": "web-secret",
        "refresh_token": "rt",
    }


def test_build_payload_rejects_unknown_layout(tmp_path):
    secrets = tmp_path / "credentials.json"
    secrets.write_text(json.dumps({"service_account": {}}), encoding="utf-8")

    with pytest.raises(AuthorizationError):
        CredentialStore.build_payload(secrets, "rt")
