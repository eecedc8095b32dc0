"""Tests de l'initialisation firebase_admin (identifiants, app nommée, ID tokens)."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from firebase_admin import auth

from backend.infra import firebase_app


def test_env_credentials_take_precedence(tmp_path, monkeypatch, settings) -> None:
    (tmp_path / "serviceAccountKey.json").write_text("{}", encoding="utf-8")
    monkeypatch.setenv("GOOGLE_APPLICATION_CREDENTIALS", "/secrets/key.json")

    path = firebase_app.resolve_credentials_path(settings, tmp_path)

    assert path == "/secrets/key.json"


def test_key_file_next_to_script(tmp_path, monkeypatch, settings) -> None:
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    key = tmp_path / "serviceAccountKey.json"
    key.write_text("{}", encoding="utf-8")

    assert firebase_app.resolve_credentials_path(settings, tmp_path) == str(key)


def test_no_key_means_default_credentials(tmp_path, monkeypatch, settings) -> None:
    monkeypatch.delenv("GOOGLE_APPLICATION_CREDENTIALS", raising=False)
    assert firebase_app.resolve_credentials_path(settings, tmp_path) is None


def test_init_uses_project_and_named_app(settings) -> None:
    custom = settings.model_copy(update={"FIRESTORE_PROJECT_ID": "demo"})
    with patch.object(firebase_app.firebase_admin, "initialize_app") as init:
        firebase_app.init_firebase_app(custom)

    cred, options = init.call_args.args
    assert cred is None
    assert options == {"projectId": "demo"}
    assert init.call_args.kwargs["name"].startswith(custom.APP_NAME)


def test_init_with_key_file(settings) -> None:
    with (
        patch.object(firebase_app.credentials, "Certificate") as cert,
        patch.object(firebase_app.firebase_admin, "initialize_app") as init,
    ):
        firebase_app.init_firebase_app(settings, "/k.json")

    cert.assert_called_once_with("/k.json")
    assert init.call_args.args[0] is cert.return_value


def test_verify_id_token_returns_uid() -> None:
    app = MagicMock()
    with patch.object(firebase_app.auth, "verify_id_token", return_value={"uid": "u1"}) as v:
        assert firebase_app.verify_id_token("tok", app) == "u1"
    v.assert_called_once_with("tok", app=app)


def test_verify_id_token_rejects_invalid() -> None:
    err = auth.InvalidIdTokenError("bad token")
    with patch.object(firebase_app.auth, "verify_id_token", side_effect=err):
        assert firebase_app.verify_id_token("tok", MagicMock()) is None
