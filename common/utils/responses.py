"""
Standard API response helpers.

Success bodies are the raw payload; error bodies carry a ``message`` plus
any echoed fields.

Example:
    from common.utils import message_response, error_response

    @app.post("/auth/logout")
    async def logout():
        return message_response("User logged out.")

    return JSONResponse(
        status_code=404,
        content=error_response("User not found.", code="USER_NOT_FOUND"),
    )
"""

from typing import Any, Optional, Dict


def message_response(message: str, **fields: Any) -> Dict[str, Any]:
    """
    Create a plain acknowledgement body.

    Args:
        message: Human-readable confirmation
        **fields: Extra fields returned next to the message

    Returns:
        Dictionary with the message and any extra fields
    """
    return {"message": message, **fields}


def error_response(
    message: Any,
    code: Optional[str] = None,
    **fields: Any,
) -> Dict[str, Any]:
    """
    Create a standard error body.

    Args:
        message: Human-readable error message (or a list of field errors)
        code: Machine-readable error code (e.g., "USER_NOT_FOUND")
        **fields: Echoed request fields

    Returns:
        Dictionary with the message, code and echoed fields
    """
    body: Dict[str, Any] = {**fields, "message": message}

    if code:
        body["code"] = code

    return body


def list_response(
    items: list,
    page: Optional[int] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Create a list body with optional paging metadata.

    Args:
        items: List of items
        page: Current page number (1-indexed)
        limit: Items per page

    Returns:
        Dictionary with the items and their count
    """
    response: Dict[str, Any] = {
        "data": items,
        "count": len(items),
    }

    if page is not None:
        response["page"] = page
    if limit is not None:
        response["limit"] = limit

    return response
