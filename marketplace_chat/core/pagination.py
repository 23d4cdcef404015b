# marketplace_chat/core/pagination.py
"""
Opaque keyset cursors.

A cursor is the sort key of the last row of a page, JSON encoded and then
base64url encoded without padding. Datetimes travel as ISO-8601 strings.
"""
from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass
from datetime import datetime
from typing import Generic, TypeVar

from marketplace_chat.core.clock import as_utc
from marketplace_chat.core.exceptions import InvalidInputError

T = TypeVar("T")


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    next_cursor: str | None


def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def _b64decode(token: str) -> bytes:
    padded = token + "=" * (-len(token) % 4)
    return base64.urlsafe_b64decode(padded.encode("ascii"))


@dataclass(frozen=True)
class ConversationCursor:
    last_message_at: datetime
    conversation_id: str

    def encode(self) -> str:
        data = {"t": as_utc(self.last_message_at).isoformat(), "id": self.conversation_id}
        return _b64encode(json.dumps(data, separators=(",", ":")).encode())

    @classmethod
    def decode(cls, token: str) -> ConversationCursor:
        try:
            data = json.loads(_b64decode(token))
            return cls(
                last_message_at=as_utc(datetime.fromisoformat(data["t"])),
                conversation_id=str(data["id"]),
            )
        except (binascii.Error, ValueError, TypeError, KeyError, UnicodeError) as e:
            raise InvalidInputError("Invalid cursor") from e


@dataclass(frozen=True)
class MessageCursor:
    created_at: datetime
    seq: int

    def encode(self) -> str:
        data = {"t": as_utc(self.created_at).isoformat(), "s": int(self.seq)}
        return _b64encode(json.dumps(data, separators=(",", ":")).encode())

    @classmethod
    def decode(cls, token: str) -> MessageCursor:
        try:
            data = json.loads(_b64decode(token))
            return cls(
                created_at=as_utc(datetime.fromisoformat(data["t"])),
                seq=int(data["s"]),
            )
        except (binascii.Error, ValueError, TypeError, KeyError, UnicodeError) as e:
            raise InvalidInputError("Invalid cursor") from e


def clamp_limit(limit: int | None, *, default: int, maximum: int) -> int:
    if limit is None:
        return default
    return max(1, min(int(limit), maximum))
