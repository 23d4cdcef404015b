# marketplace_chat/api/routes/_params.py
from flask import request

from marketplace_chat.core.exceptions import InvalidInputError
from marketplace_chat.core.messaging_types import ConversationStatus


def query_limit() -> int | None:
    raw = request.args.get("limit")
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidInputError("limit must be an integer") from e


def query_cursor() -> str | None:
    return request.args.get("cursor") or None


def query_status() -> ConversationStatus | None:
    raw = request.args.get("status")
    if not raw:
        return None
    try:
        return ConversationStatus(raw)
    except ValueError as e:
        raise InvalidInputError(f"Unknown status: {raw}") from e


def json_body() -> dict:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidInputError("Request body must be a JSON object")
    return data
