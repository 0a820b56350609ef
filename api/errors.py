from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
import logging

from utils.errors import AppError


def error_response(message: str, status: int, errors: list | None = None):
    payload = {"success": False, "message": message}
    if errors:
        payload["errors"] = errors
    return jsonify(payload), status


def _field_errors(messages) -> list:
    """Flatten marshmallow's {field: [msg, ...]} into [{field, message}]."""
    if not isinstance(messages, dict):
        return [{"field": "_schema", "message": str(messages)}]
    out = []
    for field, msgs in messages.items():
        for msg in msgs if isinstance(msgs, list) else [msgs]:
            out.append({"field": field, "message": msg if isinstance(msg, str) else str(msg)})
    return out


def register_error_handlers(app):
    # Typed failures from the session layer and auth gate
    @app.errorhandler(AppError)
    def handle_app_error(err: AppError):
        if err.status_code >= 500:
            logging.exception("Application error", exc_info=err)
        return error_response(err.message, err.status_code)

    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        return error_response("Validation failed", 422, errors=_field_errors(err.messages))

    # Werkzeug HTTPExceptions (404 routes, 405, abort(...)) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        return error_response(err.description or err.name, err.code or 400)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        message = "An unexpected error occurred"
        if current_app and current_app.debug:
            message = f"{message}: {err.__class__.__name__}: {err}"
        return error_response(message, 500)
