import json
import logging
import time
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


def request_start(
    endpoint: str,
    session_id: Optional[str] = None,
    attempt_number: Optional[int] = None,
    **additional_fields: Any,
) -> float:
    """
    Emit a structured request_start log and return the start_time (epoch seconds) for duration calculation.
    """
    start_time = time.time()
    payload: Dict[str, Any] = {
        "event": "request_start",
        "endpoint": endpoint,
        "session_id": session_id,
        "attempt_number": attempt_number,
    }
    if additional_fields:
        payload.update(additional_fields)
    logger.info(json.dumps(payload))
    return start_time


def request_end(
    endpoint: str,
    start_time: float,
    session_id: Optional[str] = None,
    attempt_number: Optional[int] = None,
    http_status: int = 200,
    **additional_fields: Any,
) -> None:
    """
    Emit a structured request_end log with response_time_ms.
    """
    payload: Dict[str, Any] = {
        "event": "request_end",
        "endpoint": endpoint,
        "session_id": session_id,
        "attempt_number": attempt_number,
        "http_status": http_status,
        "response_time_ms": int((time.time() - start_time) * 1000),
    }
    if additional_fields:
        payload.update(additional_fields)
    logger.info(json.dumps(payload, default=str))


def request_error(
    endpoint: str,
    start_time: float,
    session_id: Optional[str] = None,
    attempt_number: Optional[int] = None,
    http_status: int = 500,
    error: Optional[str] = None,
    **additional_fields: Any,
) -> None:
    """
    Emit a structured request_error log with response_time_ms and error message.
    """
    payload: Dict[str, Any] = {
        "event": "request_error",
        "endpoint": endpoint,
        "session_id": session_id,
        "attempt_number": attempt_number,
        "http_status": http_status,
        "response_time_ms": int((time.time() - start_time) * 1000),
    }
    if error is not None:
        payload["error"] = error
    if additional_fields:
        payload.update(additional_fields)
    # Use warning for 4xx, error for 5xx
    if 400 <= http_status < 500:
        logger.warning(json.dumps(payload, default=str))
    else:
        logger.error(json.dumps(payload, default=str))
