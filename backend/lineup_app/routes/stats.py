from flask import Blueprint, request

from ..auth import require_user
from ..db import get_db
from ..services.roster import attendance
from ..utils import ok

bp = Blueprint("stats", __name__, url_prefix="/stats")

ALL_TIME_DAYS = 100000


@bp.get("/attendance")
def attendance_stats():
    require_user()
    days = request.args.get("days", 365, type=int)
    if days is None or days < 0:
        days = 365
    if days >= ALL_TIME_DAYS:
        days = 0
    return ok({"days": days, "rows": attendance(get_db(), days)})
