from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Issuer:
    """An identity that may issue badges while ``authorized`` is true."""

    identity: str
    name: str
    authorized: bool
    authorized_at: int


@dataclass(frozen=True, slots=True)
class Admin:
    identity: str
    added_at: int
