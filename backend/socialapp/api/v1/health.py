"""Health check endpoint."""

from __future__ import annotations

from flask import Blueprint, current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from socialapp.api.deps import json_response, timing
from socialapp.core.extensions import db

bp = Blueprint("health", __name__)


@bp.get("/health")
@timing
def healthcheck():
    """Return application, database and signing key status."""

    db_status = "ok"
    try:
        db.session.execute(text("SELECT 1"))
    except SQLAlchemyError:
        current_app.logger.exception("healthcheck.db_error")
        db.session.rollback()
        db_status = "fail"
    auth = current_app.extensions["auth"]
    payload = {
        "status": "ok",
        "db": db_status,
        "refresh_backend": current_app.config.get("REFRESH_TOKEN_BACKEND", "sql"),
        "key_id": auth.key_pair.key_id,
        "version": current_app.config.get("APP_VERSION", "dev"),
    }
    return json_response(payload)
