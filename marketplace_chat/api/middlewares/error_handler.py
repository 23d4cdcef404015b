# marketplace_chat/api/middlewares/error_handler.py
import logging

from flask import Flask, g, jsonify, request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import HTTPException

from marketplace_chat.core.exceptions import AppError, InternalError

logger = logging.getLogger(__name__)


def _correlation() -> dict:
    identity = getattr(g, "auth", None)
    view_args = request.view_args or {}
    return {
        "method": request.method,
        "path": request.path,
        "conversation_id": view_args.get("conversation_id"),
        "user_id": getattr(identity, "user_id", None),
    }


def _validation_message(err: ValidationError) -> str:
    first = err.errors()[0] if err.errors() else None
    if not first:
        return "Invalid request body"
    loc = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logger.error("Application error %s: %s", _correlation(), err)
        elif err.status_code == 401:
            logger.warning("Rejected credentials %s: %s", _correlation(), err)
        elif err.status_code == 403:
            logger.info("Forbidden %s: %s", _correlation(), err)
        return jsonify({"error": str(err)}), err.status_code

    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return jsonify({"error": _validation_message(err)}), 400

    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return jsonify({"error": err.description}), err.code

    @app.errorhandler(SQLAlchemyError)
    def handle_storage_error(err: SQLAlchemyError):
        logger.exception("Storage failure %s", _correlation())
        return _internal(app, err)

    @app.errorhandler(Exception)
    def handle_unexpected_error(err: Exception):
        logger.exception("Unhandled error %s", _correlation())
        return _internal(app, err)


def _internal(app: Flask, err: Exception):
    if app.config.get("DEBUG"):
        return jsonify({"error": str(err)}), 500
    return jsonify({"error": str(InternalError())}), 500
