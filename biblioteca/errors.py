from flask import jsonify, g, current_app, request
from werkzeug.exceptions import HTTPException

from .services.exceptions import PollServiceError


def error_payload(code: str, message: str, details=None, status=400):
    return (
        jsonify({
            "success": False,
            "error": {
                "code": code,
                "message": message,
                "details": details or None,
            },
            "request_id": getattr(g, "request_id", None),
        }),
        status,
    )


def register_error_handlers(app):
    @app.errorhandler(PollServiceError)
    def handle_poll_error(e: PollServiceError):
        response, status = error_payload(e.code, e.message, e.details, status=e.status)
        if e.retryable:
            response.headers["Retry-After"] = "1"
        return response, status

    # Generic HTTP errors (404, 403, 401, etc.)
    @app.errorhandler(HTTPException)
    def handle_http_exception(e: HTTPException):
        desc = e.description

        # If we pass structured error info via abort(description=dict)
        if isinstance(desc, dict):
            code = desc.get("code") or e.name.replace(" ", "_").upper()
            message = desc.get("message") or e.name
            details = desc.get("errors") or desc.get("details")
            return error_payload(code=code, message=message, details=details, status=e.code or 400)

        return error_payload(
            code=e.name.replace(" ", "_").upper(),
            message=desc or e.name,
            details=None,
            status=e.code or 400
        )

    @app.errorhandler(Exception)
    def handle_unexpected(e: Exception):
        current_app.logger.exception(
            "Unhandled exception request_id=%s path=%s", getattr(g, "request_id", None), request.path
        )
        # Don't leak internals
        return error_payload("INTERNAL_SERVER_ERROR", "An unexpected error occurred", status=500)
