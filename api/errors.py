from flask import jsonify, current_app
from werkzeug.exceptions import HTTPException
from marshmallow import ValidationError
from redis.exceptions import RedisError
from sqlalchemy.exc import IntegrityError
import logging
import re

from utils.security import TokenError

# Status code -> error name used in the response envelope
ERROR_NAMES = {
    400: "BadRequest",
    401: "Unauthorized",
    403: "Forbidden",
    404: "NotFound",
    405: "MethodNotAllowed",
    409: "Conflict",
    415: "UnsupportedMediaType",
    422: "ValidationError",
    500: "InternalServerError",
}


def error_response(error: str, message: str, status: int, details: dict | None = None):
    payload = {"success": False, "error": error, "message": message}
    if details:
        payload["details"] = details
    return jsonify(payload), status


# sqlite: "unique constraint failed: users.email"
# postgres: 'duplicate key ... "ix_users_email" DETAIL: Key (email)=(...)'
# users.email_token must not match either form
_EMAIL_VIOLATION = re.compile(r"users\.email\b|\bix_users_email\b|key \(email\)=")


def _is_email_violation(lower_msg: str) -> bool:
    return bool(_EMAIL_VIOLATION.search(lower_msg))


def register_error_handlers(app):
    # Marshmallow validation errors map to 422
    @app.errorhandler(ValidationError)
    def handle_validation_error(err: ValidationError):
        # err.messages contains field-level details
        if current_app and current_app.debug:
            logging.debug("Validation failed: %s", err.messages)
        return error_response("ValidationError", "Invalid input", 422, details=err.messages)

    # Bad, expired, superseded or consumed tokens
    @app.errorhandler(TokenError)
    def handle_token_error(err: TokenError):
        return error_response("Unauthorized", str(err), 401)

    # Unique constraints; an email clash means a register raced past the existence check
    @app.errorhandler(IntegrityError)
    def handle_integrity_error(err: IntegrityError):
        message = str(getattr(err, "orig", err))
        lower_msg = message.lower()
        if "unique" in lower_msg or "duplicate key" in lower_msg:
            if _is_email_violation(lower_msg):
                return error_response("Conflict", "Email already registered", 409)
            logging.warning("Unique constraint violated: %s", message)
            return error_response("Conflict", "Resource conflicts with an existing record", 409)
        logging.exception("Integrity error", exc_info=err)
        return error_response("BadRequest", "Integrity error.", 400)

    @app.errorhandler(RedisError)
    def handle_cache_error(err: RedisError):
        logging.exception("Token cache unavailable", exc_info=err)
        return error_response("InternalServerError", "Token store unavailable", 500)

    # Werkzeug HTTPExceptions (abort(...)) map to their status codes
    @app.errorhandler(HTTPException)
    def handle_http_exception(err: HTTPException):
        status = err.code or 500
        return error_response(ERROR_NAMES.get(status, err.name.replace(" ", "")), err.description, status)

    # 500 Internal Error (catch-all)
    @app.errorhandler(Exception)
    def internal_error(err: Exception):
        logging.exception("Unhandled exception", exc_info=err)
        details = None
        if current_app and current_app.debug:
            details = {"type": err.__class__.__name__, "message": str(err)}
        return error_response("InternalServerError", "An unexpected error occurred", 500, details=details)
