import hashlib
import hmac
import json
import time
from urllib.parse import urlencode

import pytest

from lineup_app.auth import AuthError, _check_telegram_init_data, _user_from_fields, telegram_user_from_init_data
from lineup_app.config import Config


def _make_init_data(payload: dict, bot_token: str) -> str:
    data = dict(payload)
    data_check = "\n".join(f"{k}={v}" for k, v in sorted(data.items()))
    secret_key = hmac.new(b"WebAppData", bot_token.encode("utf-8"), hashlib.sha256).digest()
    data["hash"] = hmac.new(secret_key, data_check.encode("utf-8"), hashlib.sha256).hexdigest()
    return urlencode(data)


def test_check_telegram_init_data_valid():
    bot_token = "bot-token"
    payload = {
        "auth_date": str(int(time.time())),
        "user": json.dumps({"id": 123, "first_name": "Dev"}, separators=(",", ":")),
    }
    init_data = _make_init_data(payload, bot_token)
    parsed = _check_telegram_init_data(init_data, bot_token)
    assert parsed["user"]
    assert parsed["auth_date"] == payload["auth_date"]
    assert "hash" not in parsed


def test_check_telegram_init_data_missing():
    with pytest.raises(AuthError, match="init_data_missing"):
        _check_telegram_init_data("", "token")


def test_check_telegram_init_data_bot_token_missing():
    with pytest.raises(AuthError, match="bot_token_missing"):
        _check_telegram_init_data("auth_date=1&hash=abc", "")


def test_check_telegram_init_data_hash_missing():
    payload = {"auth_date": "1", "user": "{}"}
    init_data = urlencode(payload)
    with pytest.raises(AuthError, match="hash_missing"):
        _check_telegram_init_data(init_data, "token")


def test_check_telegram_init_data_hash_mismatch():
    payload = {"auth_date": str(int(time.time())), "user": "{}"}
    init_data = urlencode({**payload, "hash": "bad"})
    with pytest.raises(AuthError, match="hash_mismatch"):
        _check_telegram_init_data(init_data, "token")


def test_check_telegram_init_data_wrong_token():
    payload = {
        "auth_date": str(int(time.time())),
        "user": json.dumps({"id": 5}, separators=(",", ":")),
    }
    init_data = _make_init_data(payload, "real-token")
    with pytest.raises(AuthError, match="hash_mismatch"):
        _check_telegram_init_data(init_data, "other-token")


def test_check_telegram_init_data_auth_date_invalid():
    bot_token = "bot-token"
    payload = {
        "auth_date": "not-a-number",
        "user": json.dumps({"id": 1}, separators=(",", ":")),
    }
    init_data = _make_init_data(payload, bot_token)
    with pytest.raises(AuthError, match="auth_date_invalid"):
        _check_telegram_init_data(init_data, bot_token)


def test_check_telegram_init_data_auth_date_expired(monkeypatch):
    bot_token = "bot-token"
    old_timestamp = 1000
    monkeypatch.setattr(time, "time", lambda: old_timestamp + 60 * 60 * 24 * 2)
    payload = {
        "auth_date": str(old_timestamp),
        "user": json.dumps({"id": 1}, separators=(",", ":")),
    }
    init_data = _make_init_data(payload, bot_token)
    with pytest.raises(AuthError, match="auth_date_expired"):
        _check_telegram_init_data(init_data, bot_token)


def test_check_telegram_init_data_custom_max_age():
    bot_token = "bot-token"
    payload = {
        "auth_date": str(int(time.time()) - 120),
        "user": json.dumps({"id": 1}, separators=(",", ":")),
    }
    init_data = _make_init_data(payload, bot_token)
    assert _check_telegram_init_data(init_data, bot_token, max_age=600)
    with pytest.raises(AuthError, match="auth_date_expired"):
        _check_telegram_init_data(init_data, bot_token, max_age=60)


def test_auth_errors_are_value_errors():
    with pytest.raises(ValueError):
        _check_telegram_init_data("", "token")


def test_user_from_fields():
    assert _user_from_fields({"user": '{"id": 7, "first_name": "A"}'})["id"] == 7
    with pytest.raises(AuthError, match="user_missing"):
        _user_from_fields({})
    with pytest.raises(AuthError, match="user_invalid"):
        _user_from_fields({"user": "{not json"})
    with pytest.raises(AuthError, match="user_missing"):
        _user_from_fields({"user": '{"first_name": "NoId"}'})


def test_dev_bypass_without_init_data(monkeypatch):
    monkeypatch.setattr(Config, "DEV_AUTH_BYPASS", True)
    monkeypatch.setattr(Config, "DEV_TG_ID", 4242)
    user = telegram_user_from_init_data("")
    assert user["id"] == 4242


def test_signed_data_required_without_bypass(monkeypatch):
    monkeypatch.setattr(Config, "DEV_AUTH_BYPASS", False)
    monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", "bot-token")
    unsigned = urlencode({"user": json.dumps({"id": 1})})
    with pytest.raises(AuthError, match="hash_missing"):
        telegram_user_from_init_data(unsigned)

    payload = {
        "auth_date": str(int(time.time())),
        "user": json.dumps({"id": 31, "first_name": "Real"}, separators=(",", ":")),
    }
    user = telegram_user_from_init_data(_make_init_data(payload, "bot-token"))
    assert user["id"] == 31


def test_auth_route_rejects_bad_init_data(client, monkeypatch):
    monkeypatch.setattr(Config, "DEV_AUTH_BYPASS", False)
    monkeypatch.setattr(Config, "TELEGRAM_BOT_TOKEN", "bot-token")
    response = client.post("/api/auth/telegram", json={"initData": "user=%7B%7D&hash=bad"})
    assert response.status_code == 401
    assert response.get_json() == {"ok": False, "error": "hash_mismatch"}


def test_protected_route_without_auth_is_401(client, monkeypatch):
    monkeypatch.setattr(Config, "DEV_AUTH_BYPASS", False)
    response = client.get("/api/me")
    assert response.status_code == 401
    assert response.get_json()["error"] == "init_data_missing"


def test_auth_route_dev_login(client, admin_headers):
    response = client.post("/api/auth/telegram", json={"initData": admin_headers["X-Telegram-InitData"]})
    data = response.get_json()
    assert response.status_code == 200
    assert data["ok"] is True
    assert data["is_admin"] is True
    assert data["dev"] is True


def test_user_id_must_be_an_integer():
    assert _user_from_fields({"user": '{"id": "42"}'})["id"] == 42
    with pytest.raises(AuthError, match="user_invalid"):
        _user_from_fields({"user": '{"id": "abc"}'})
    with pytest.raises(AuthError, match="user_invalid"):
        _user_from_fields({"user": '{"id": [1]}'})


def test_non_numeric_dev_user_is_401(client):
    headers = {"X-Telegram-InitData": urlencode({"user": json.dumps({"id": "abc"})})}
    response = client.get("/api/me", headers=headers)
    assert response.status_code == 401
    assert response.get_json() == {"ok": False, "error": "user_invalid"}
