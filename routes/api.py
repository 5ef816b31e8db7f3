"""
Print API routes.

Handles:
- GET  /health - Liveness check with server time
- POST /print  - Validate, notify, dispatch one print job

Responses for /print always have the shape {"success": bool, "message": str}.
"""

from datetime import datetime
from typing import Any, Dict

from flask import (
    Blueprint,
    current_app,
    jsonify,
    request,
)

from core.exceptions import PrintRelayError, ValidationError
from logging_config import get_logger, log_print_error, log_print_request
from models.print_job import PrintJob
from services.events import PRINT_ERROR, PRINT_RECEIVED, PRINT_SUCCESS


# Module logger
logger = get_logger(__name__)

api_bp = Blueprint("api", __name__)

INVALID_JSON_MESSAGE = "Invalid JSON payload"
MISSING_FIELDS_MESSAGE = "Missing required fields: type and content"


def _now() -> str:
    """Local time as RFC 3339."""
    return datetime.now().astimezone().isoformat(timespec="seconds")


def _reply(success: bool, message: str, status: int = 200):
    return jsonify({"success": success, "message": message}), status


def validate_print_request(data: Any) -> Dict[str, str]:
    """
    Check a parsed /print body.

    Args:
        data: Result of JSON parsing (None if the body was not JSON)

    Returns:
        The body as a dict with non-empty string "type" and "content"

    Raises:
        ValidationError: With the message to send back as HTTP 400
    """
    if not isinstance(data, dict):
        raise ValidationError(INVALID_JSON_MESSAGE)

    job_type = data.get("type", "")
    content = data.get("content", "")

    # A field of the wrong JSON type is a shape error, not a missing field
    if not isinstance(job_type, str) or not isinstance(content, str):
        raise ValidationError(INVALID_JSON_MESSAGE)

    if not job_type or not content:
        raise ValidationError(
            MISSING_FIELDS_MESSAGE,
            {"type": bool(job_type), "content": bool(content)}
        )

    return {"type": job_type, "content": content}


@api_bp.route("/health", methods=["GET"])
def health():
    """Health check endpoint. Always 200 while the listener is up."""
    return jsonify({"status": "ok", "time": _now()})


@api_bp.route("/print", methods=["POST"])
def submit_print():
    """
    Accept one print job.

    Flow:
    1. Parse and validate the JSON body (400 on failure)
    2. Resolve the target printer from the current config ("" = OS default)
    3. Emit print-received
    4. Dispatch synchronously on this request thread
    5. Emit print-success / print-error and answer 200 / 500
    """
    data = request.get_json(force=True, silent=True)

    try:
        body = validate_print_request(data)
    except ValidationError as e:
        if e.message == INVALID_JSON_MESSAGE:
            logger.error("Failed to parse print request")
        return _reply(False, e.message, 400)

    config_store = current_app.config["CONFIG_STORE"]
    dispatcher = current_app.config["DISPATCHER"]
    notifier = current_app.config["NOTIFIER"]

    printer_name = config_store.get_config().selected_printer
    job = PrintJob.from_request(body, target_printer=printer_name)

    log_print_request(job.job_type, len(job.content), request.remote_addr)

    notifier.emit(PRINT_RECEIVED, {
        "type": job.job_type,
        "content": job.content,
        "time": _now(),
        "printer": printer_name,
    })

    try:
        result = dispatcher.dispatch(job)
    except PrintRelayError as e:
        log_print_error("Print job failed", e)
        notifier.emit(PRINT_ERROR, {
            "error": e.message,
            "time": _now(),
        })
        return _reply(False, f"Print failed: {e.message}", 500)

    notifier.emit(PRINT_SUCCESS, {
        "type": job.job_type,
        "printer": result.printer,
        "time": _now(),
    })

    return _reply(True, "Print job completed")
