# marketplace_chat/core/roles.py
from __future__ import annotations

from enum import StrEnum
from typing import assert_never


class Role(StrEnum):
    BUYER = "buyer"
    VENDOR = "vendor"
    ADMIN = "admin"

    @classmethod
    def from_claim(cls, raw: object) -> Role | None:
        """Maps a stored role string to a Role; master admins are admins."""
        if not isinstance(raw, str):
            return None
        value = raw.strip().lower()
        if value == "master_admin":
            return cls.ADMIN
        try:
            return cls(value)
        except ValueError:
            return None


class Side(StrEnum):
    """One half of a conversation's per-participant columns."""

    BUYER = "buyer"
    VENDOR = "vendor"

    @property
    def other(self) -> Side:
        match self:
            case Side.BUYER:
                return Side.VENDOR
            case Side.VENDOR:
                return Side.BUYER
            case _:
                assert_never(self)


def participant_side(role: Role) -> Side | None:
    match role:
        case Role.BUYER:
            return Side.BUYER
        case Role.VENDOR:
            return Side.VENDOR
        case Role.ADMIN:
            return None
        case _:
            assert_never(role)
