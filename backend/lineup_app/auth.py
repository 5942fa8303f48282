import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass
from urllib.parse import parse_qsl

from flask import g, request

from .config import Config
from .db import get_db
from .services.players import ensure_player

logger = logging.getLogger(__name__)


class AuthError(ValueError):
    pass


@dataclass(frozen=True)
class AuthenticatedUser:
    tg_id: int
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    is_admin: bool = False
    is_super_admin: bool = False


def _check_telegram_init_data(init_data: str, bot_token: str, max_age: int | None = None) -> dict:
    if not init_data:
        raise AuthError("init_data_missing")
    if not bot_token:
        raise AuthError("bot_token_missing")
    try:
        data = dict(parse_qsl(init_data, strict_parsing=True))
    except ValueError:
        raise AuthError("init_data_invalid")
    provided_hash = data.pop("hash", None)
    if not provided_hash:
        raise AuthError("hash_missing")

    auth_date = data.get("auth_date")
    if auth_date:
        try:
            auth_timestamp = int(auth_date)
        except ValueError:
            raise AuthError("auth_date_invalid")
        limit = Config.AUTH_MAX_AGE_SECONDS if max_age is None else max_age
        if time.time() - auth_timestamp > limit:
            raise AuthError("auth_date_expired")

    data_check = "\n".join(f"{k}={v}" for k, v in sorted(data.items()))
    secret_key = hmac.new(b"WebAppData", bot_token.encode("utf-8"), hashlib.sha256).digest()
    computed = hmac.new(secret_key, data_check.encode("utf-8"), hashlib.sha256).hexdigest()
    if not hmac.compare_digest(computed, provided_hash):
        raise AuthError("hash_mismatch")
    return data


def _user_from_fields(data: dict) -> dict:
    user_raw = data.get("user")
    if not user_raw:
        raise AuthError("user_missing")
    try:
        user = json.loads(user_raw)
    except json.JSONDecodeError:
        raise AuthError("user_invalid")
    if not isinstance(user, dict) or not user.get("id"):
        raise AuthError("user_missing")
    try:
        user["id"] = int(user["id"])
    except (TypeError, ValueError):
        raise AuthError("user_invalid")
    return user


def get_init_data() -> str:
    return request.headers.get("X-Telegram-InitData", "")


def telegram_user_from_init_data(init_data: str) -> dict:
    if Config.DEV_AUTH_BYPASS:
        if not init_data:
            return {"id": Config.DEV_TG_ID, "first_name": Config.DEV_TG_NAME}
        if "hash=" not in init_data:
            logger.warning("dev auth bypass: accepting unsigned init data")
            return _user_from_fields(dict(parse_qsl(init_data)))
    data = _check_telegram_init_data(init_data, Config.TELEGRAM_BOT_TOKEN)
    return _user_from_fields(data)


def is_env_admin(tg_id: int, admin_ids: frozenset[int]) -> bool:
    return tg_id in admin_ids


def authenticate(init_data: str, admin_ids: frozenset[int]) -> AuthenticatedUser:
    try:
        user_data = telegram_user_from_init_data(init_data)
    except AuthError as exc:
        logger.info("auth rejected: %s", exc)
        raise
    player = ensure_player(get_db(), user_data, admin_ids)
    root = is_env_admin(player.tg_id, admin_ids)
    return AuthenticatedUser(
        tg_id=player.tg_id,
        first_name=player.first_name,
        last_name=player.last_name,
        username=player.username,
        is_admin=root or bool(player.is_admin),
        is_super_admin=root,
    )


def require_user() -> AuthenticatedUser:
    user = g.get("current_user")
    if user is None:
        user = authenticate(get_init_data(), Config.ADMIN_IDS)
        g.current_user = user
    return user


def is_admin(user: AuthenticatedUser) -> bool:
    return user.is_admin
