# marketplace_chat/entities/session_identity.py
from dataclasses import dataclass
from typing import Optional

from marketplace_chat.core.roles import Role


@dataclass(frozen=True)
class SessionIdentity:
    user_id: str
    role: Role
    session_id: Optional[str] = None
