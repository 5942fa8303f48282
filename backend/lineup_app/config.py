import os

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _load_env() -> None:
    candidates = [
        os.path.join(BASE_DIR, ".env"),
        os.path.join(BASE_DIR, "backend", ".env"),
    ]
    for path in candidates:
        if not os.path.exists(path):
            continue
        with open(path, "r", encoding="utf-8") as handle:
            for raw in handle:
                line = raw.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip().strip('"').strip("'")
                if key and key not in os.environ:
                    os.environ[key] = value


def parse_admin_ids(raw: str) -> frozenset[int]:
    ids = set()
    for chunk in raw.split(","):
        chunk = chunk.strip()
        if chunk.lstrip("-").isdigit():
            ids.add(int(chunk))
    return frozenset(ids)


_load_env()


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "")
    SQLALCHEMY_ECHO = os.getenv("SQLALCHEMY_ECHO", "0") == "1"
    TELEGRAM_BOT_TOKEN = os.getenv("TELEGRAM_BOT_TOKEN", "")
    AUTH_MAX_AGE_SECONDS = int(os.getenv("AUTH_MAX_AGE_SECONDS", str(24 * 60 * 60)))
    ADMIN_IDS = parse_admin_ids(os.getenv("ADMIN_IDS", ""))
    DEV_AUTH_BYPASS = os.getenv("DEV_AUTH_BYPASS", "0") == "1"
    DEV_TG_ID = int(os.getenv("DEV_TG_ID", "999000"))
    DEV_TG_NAME = os.getenv("DEV_TG_NAME", "Dev User")
    MIN_PLAYERS_FOR_TEAMS = int(os.getenv("MIN_PLAYERS_FOR_TEAMS", "2"))
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
    ALLOWED_ORIGINS = [o.strip() for o in os.getenv("ALLOWED_ORIGINS", "*").split(",") if o.strip()]
