import logging
import os

from flask import Flask, request
from dotenv import load_dotenv
from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from werkzeug.exceptions import HTTPException

from app.customerdb.config import is_production, load_config
from app.customerdb.db import init_db, teardown_db_session
from app.customerdb.logging_config import configure_logging
from app.customerdb.models import Base
from app.customerdb.routes import bp as routes_bp
from app.customerdb.modules.customers.api import bp as customers_bp


def create_app() -> Flask:
    load_dotenv()
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    app.json.sort_keys = False  # type: ignore[attr-defined]
    configure_logging(app.config["LOG_LEVEL"])

    # Production guardrails (fail fast with clear logs)
    if is_production(app.config.get("ENV")):
        if not os.environ.get("DATABASE_URL", "").strip():
            raise RuntimeError("DATABASE_URL is required in production.")
        if str(app.config["DATABASE_URL"]).startswith("sqlite"):
            raise RuntimeError("DATABASE_URL must be Postgres in production (not sqlite).")
        if not app.config.get("SECRET_KEY") or str(app.config["SECRET_KEY"]) in ("", "change-me"):
            raise RuntimeError("SECRET_KEY must be set to a strong value in production (not default).")

    init_db(app)

    def _dispose_engine_on_fork() -> None:
        if hasattr(os, "register_at_fork"):
            def _after_fork_child():
                engine = app.extensions.get("sqlalchemy_engine")
                if engine:
                    engine.dispose(close=False)
                    app.logger.info("Disposed DB engine after fork (pid=%s)", os.getpid())

            os.register_at_fork(after_in_child=_after_fork_child)

    _dispose_engine_on_fork()

    app.register_blueprint(routes_bp)
    app.register_blueprint(customers_bp, url_prefix="/customers")
    app.teardown_appcontext(teardown_db_session)

    # Schema health: detect drift between the mapped tables and the database.
    app.config.setdefault("_schema_health_ok", True)
    app.config.setdefault("_schema_health_missing", [])

    def _run_schema_health_check() -> None:
        missing: list[str] = []
        try:
            insp = sa_inspect(app.extensions["sqlalchemy_engine"])
            for table in Base.metadata.sorted_tables:
                if not insp.has_table(table.name):
                    missing.append(f"{table.name} (table)")
                    continue
                cols = {c["name"] for c in insp.get_columns(table.name)}
                missing.extend(f"{table.name}.{col.name}" for col in table.columns if col.name not in cols)
        except SQLAlchemyError as e:
            app.logger.exception("Schema health check failed: %s", e)
            return

        app.config["_schema_health_missing"] = missing
        app.config["_schema_health_ok"] = not missing
        if missing:
            app.logger.error("DB schema out of date; run `alembic upgrade head`. Missing: %s", ", ".join(missing))

    _run_schema_health_check()

    @app.before_request
    def _schema_health_guardrail():
        if app.config.get("_schema_health_ok"):
            return None
        if request.blueprint == "customers":
            # Tables may have been created after startup (tests, init_db script).
            _run_schema_health_check()
            if not app.config.get("_schema_health_ok"):
                return {"error": "schema_out_of_date", "missing": app.config["_schema_health_missing"]}, 500
        return None

    @app.errorhandler(HTTPException)
    def _err_http(e: HTTPException):
        return {"error": e.name, "status": e.code}, e.code

    @app.errorhandler(IntegrityError)
    def _err_integrity(e: IntegrityError):
        app.logger.warning("Constraint violation: %s", e.orig)
        return {"error": "constraint_violation"}, 409

    @app.errorhandler(Exception)
    def _err_500(e: Exception):
        app.logger.exception("Unhandled error on %s %s", request.method, request.path)
        return {"error": "internal_server_error"}, 500

    logging.getLogger(__name__).info("create_app() complete; app ready to serve")

    return app
