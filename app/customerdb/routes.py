from flask import Blueprint, current_app
from sqlalchemy.exc import SQLAlchemyError

from app.customerdb.db import db_session, ping

bp = Blueprint("routes", __name__)


@bp.get("/health")
def health():
    """Health check endpoint. Returns JSON; touches the database."""
    try:
        ping(db_session())
    except SQLAlchemyError as e:
        current_app.logger.error("Health check DB ping failed: %s", e)
        return {"ok": False, "database": "unreachable"}, 503
    return {"ok": True, "database": "ok"}


@bp.get("/healthz")
def healthz():
    """
    Fast liveness endpoint for container health checks. No DB access, minimal overhead.
    """
    return "ok", 200
