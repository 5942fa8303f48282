import logging
import pathlib

from flask import Flask, abort, send_from_directory
from flask_cors import CORS

from team_maker import TeamMakerError

from .auth import AuthError
from .config import Config
from .db import SessionLocal
from .schema import ensure_schema
from .utils import err

logger = logging.getLogger(__name__)


def _configure_logging() -> None:
    logging.basicConfig(
        level=Config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def create_app() -> Flask:
    _configure_logging()
    dist_dir = pathlib.Path(__file__).resolve().parents[2] / "webapp" / "dist"
    app = Flask(
        __name__,
        static_folder=str(dist_dir),
        static_url_path="",
    )
    app.url_map.strict_slashes = False
    CORS(
        app,
        resources={r"/api/*": {"origins": Config.ALLOWED_ORIGINS}},
        allow_headers=["Content-Type", "X-Telegram-InitData"],
        methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    )

    from .routes import admin, auth, games, me, players, rsvp, stats, teams

    api_prefix = "/api"
    app.register_blueprint(auth.bp, url_prefix=f"{api_prefix}/auth")
    app.register_blueprint(me.bp, url_prefix=api_prefix)
    app.register_blueprint(games.bp, url_prefix=api_prefix)
    app.register_blueprint(rsvp.bp, url_prefix=f"{api_prefix}/rsvp")
    app.register_blueprint(teams.bp, url_prefix=f"{api_prefix}/teams")
    app.register_blueprint(players.bp, url_prefix=f"{api_prefix}/players")
    app.register_blueprint(admin.bp, url_prefix=f"{api_prefix}/admin")
    app.register_blueprint(stats.bp, url_prefix=f"{api_prefix}/stats")

    @app.get("/api/health")
    def healthcheck():
        return {"ok": True}

    @app.get("/")
    def serve_index():
        if not dist_dir.exists():
            abort(404)
        return app.send_static_file("index.html")

    @app.get("/<path:path>")
    def serve_static(path: str):
        if path == "api" or path.startswith("api/"):
            abort(404)
        if dist_dir.exists():
            file_path = dist_dir / path
            if file_path.is_file():
                return send_from_directory(dist_dir, path)
            return app.send_static_file("index.html")
        abort(404)

    @app.teardown_appcontext
    def shutdown_session(_exc=None):
        SessionLocal.remove()

    @app.errorhandler(AuthError)
    def handle_auth_error(exc):
        return err(str(exc), 401)

    @app.errorhandler(TeamMakerError)
    def handle_team_maker_error(exc):
        return err(exc.code, 404)

    ensure_schema()
    logger.info("app created, %d env admins", len(Config.ADMIN_IDS))

    return app
