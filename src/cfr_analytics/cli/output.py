"""JSON envelope output for CLI commands.

Every command prints exactly one envelope to stdout::

    {"success": true, "data": {...}, "error": null}

Errors exit with status 1.
"""

import json
import sys
from typing import Any, Dict, NoReturn, Optional

from cfr_analytics.core.errors import (
    AnalyticsServiceError,
    ClientRequestError,
    MalformedFragmentError,
    ServerRequestError,
    TransportUnreachableError,
    user_message,
)


def _emit(payload: Dict[str, Any]) -> None:
    sys.stdout.write(json.dumps(payload, indent=2, default=str))
    sys.stdout.write("\n")
    sys.stdout.flush()


def emit_success(data: Any) -> None:
    _emit({"success": True, "data": data, "error": None})


def emit_error(
    message: str,
    *,
    code: str,
    error_type: str,
    remediation: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
) -> NoReturn:
    data: Dict[str, Any] = {"error_code": code, "error_type": error_type}
    if remediation:
        data["remediation"] = remediation
    if details:
        data["details"] = details
    _emit({"success": False, "data": data, "error": message})
    sys.exit(1)


def emit_service_error(error: AnalyticsServiceError) -> NoReturn:
    """Emit an envelope for a backend failure, keyed by its failure class."""
    details: Dict[str, Any] = {"source": error.source}
    if error.status_code is not None:
        details["status_code"] = error.status_code

    if isinstance(error, TransportUnreachableError):
        emit_error(
            user_message(error),
            code="UNAVAILABLE",
            error_type="connectivity",
            remediation="Start the backend or pass --api-url",
            details=details,
        )
    if isinstance(error, ClientRequestError):
        emit_error(user_message(error), code="CLIENT_ERROR", error_type="validation", details=details)
    if isinstance(error, ServerRequestError):
        emit_error(user_message(error), code="SERVER_ERROR", error_type="server", details=details)
    if isinstance(error, MalformedFragmentError):
        emit_error(user_message(error), code="MALFORMED_RESPONSE", error_type="server", details=details)
    emit_error(user_message(error), code="SERVICE_ERROR", error_type="internal", details=details)
