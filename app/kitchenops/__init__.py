import logging
import os

from dotenv import load_dotenv
from flask import Flask, g, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from app.kitchenops.config import load_config
from app.kitchenops.db import init_db, teardown_db_session
from app.kitchenops.routes import bp as routes_bp
from app.kitchenops.auth import bp as auth_bp, load_current_user
from app.kitchenops.modules.sales.api import bp as sales_bp
from app.kitchenops.modules.upt.api import bp as upt_bp
from app.kitchenops.modules.buffers.api import bp as buffers_bp
from app.kitchenops.modules.adjustments.api import bp as adjustments_bp
from app.kitchenops.modules.closures.api import bp as closures_bp
from app.kitchenops.modules.instructions.api import bp as instructions_bp
from app.kitchenops.modules.truck.api import bp as truck_bp
from app.kitchenops.modules.allocations.api import bp as allocations_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.json.sort_keys = False

    # Production guardrails (fail fast with clear logs)
    env = (app.config.get("ENV") or "").strip().lower()
    if env in ("prod", "production"):
        if not app.config.get("DATABASE_URL") or str(app.config["DATABASE_URL"]).strip() == "":
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    # The dashboard is served from a different origin and sends a bearer token.
    CORS(
        app,
        resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}},
        supports_credentials=True,
        allow_headers=["Authorization", "Content-Type", "X-Request-ID"],
    )

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose()
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(sales_bp, url_prefix="/api")
    app.register_blueprint(upt_bp, url_prefix="/api")
    app.register_blueprint(buffers_bp, url_prefix="/api")
    app.register_blueprint(adjustments_bp, url_prefix="/api")
    app.register_blueprint(closures_bp, url_prefix="/api")
    app.register_blueprint(instructions_bp, url_prefix="/api")
    app.register_blueprint(truck_bp, url_prefix="/api")
    app.register_blueprint(allocations_bp, url_prefix="/api")

    def _load_user_wrapper():
        if request.path.startswith(("/health", "/healthz")) or request.method == "OPTIONS":
            g.current_user = None
            return None
        return load_current_user()

    app.before_request(_load_user_wrapper)
    app.teardown_appcontext(teardown_db_session)

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):
        return {"message": e.description}, e.code

    @app.errorhandler(500)
    def _err_500(e):  # type: ignore[no-redef]
        rid = getattr(g, "request_id", None)
        app.logger.exception("Unhandled 500 (request_id=%s)", rid)
        return {"message": "Internal server error."}, 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
