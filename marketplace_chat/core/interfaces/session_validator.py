# marketplace_chat/core/interfaces/session_validator.py
from __future__ import annotations

from typing import Protocol

from marketplace_chat.entities.session_identity import SessionIdentity


class SessionValidator(Protocol):
    def validate(self, token: str) -> SessionIdentity:
        """Resolves an opaque credential or raises UnauthorizedError."""
        ...
