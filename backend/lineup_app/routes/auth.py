from flask import Blueprint, request

from ..auth import AuthError, authenticate
from ..config import Config
from ..utils import err, ok

bp = Blueprint("auth", __name__, url_prefix="/auth")


@bp.post("/telegram")
def auth_telegram():
    data = request.get_json(silent=True) or {}
    init_data = data.get("initData", "")
    try:
        user = authenticate(init_data, Config.ADMIN_IDS)
    except AuthError as exc:
        return err(str(exc), 401)
    return ok({"tg_id": user.tg_id, "is_admin": user.is_admin, "dev": Config.DEV_AUTH_BYPASS})
