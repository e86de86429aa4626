from typing import Any, Dict, Iterable, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def _envelope(status_code: int, message: str, data) -> JSONResponse:
    response_data = {
        "status": "SUCCESS",
        "status_code": status_code,
        "message": message,
        "data": data,
    }
    return JSONResponse(status_code=status_code, content=jsonable_encoder(response_data))


def success_response(status_code: int, message: str, data: Optional[dict | list] = None):
    """
    Create a standardized JSON response for successful requests.

    Args:
        status_code (int): HTTP status code to return (e.g. 200, 201).
        message (str): Human-readable description of the result.
        data (Optional[dict | list]): Payload; an empty dict when omitted.

    Returns:
        JSONResponse: ``{"status": "SUCCESS", "status_code", "message", "data"}``
    """
    return _envelope(status_code, message, data if data is not None else {})


def paginated_response(
    message: str,
    key: str,
    items: Iterable[Any],
    pagination: Dict[str, Any],
    status_code: int = 200,
) -> JSONResponse:
    """
    Success envelope for one page of a listing.

    ``data`` holds the serialized ``items`` under ``key`` next to the
    ``total``, ``page``, ``limit`` and ``total_pages`` counters.
    """
    return _envelope(status_code, message, {key: list(items), **pagination})


def auth_response(status_code: int, message: str, access_token: str, data: Optional[dict] = None):
    """
    Success envelope carrying a freshly issued bearer token.

    The token and ``token_type`` sit inside ``data`` alongside any extra payload.
    """
    return _envelope(
        status_code,
        message,
        {"access_token": access_token, "token_type": "bearer", **(data or {})},
    )


def error_response(
    *,
    status_code: int,
    message: str,
    error: str = "ERROR",
    errors: Optional[Dict[str, List[str]]] = None,
) -> JSONResponse:
    """
    Create a standardized JSON response for failed requests.

    Args:
        status_code (int): HTTP status code of the failure (e.g. 401, 404, 409, 422).
        message (str): High-level human-readable error description.
        error (str): Machine-readable code such as "VALIDATION_ERROR" or "CONCURRENCY_CONFLICT".
        errors (Optional[Dict[str, List[str]]]): Field name to messages, e.g.
            ``{"assigned_to_id": ["Assignee has too many open work items"]}``

    Returns:
        JSONResponse: ``{"error", "message", "status_code", "errors"}``
    """
    response_data = {
        "error": error,
        "message": message,
        "status_code": status_code,
        "errors": errors or {},
    }

    return JSONResponse(status_code=status_code, content=jsonable_encoder(response_data))
