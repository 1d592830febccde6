# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


def normalize_identifier(identifier: str | None) -> str:
    """Canonical form used for every lookup and insert: trimmed, lowercased."""
    return (identifier or "").strip().lower()


@dataclass(slots=True, frozen=True)
class User:

    id: int
    identifier: str
    password_hash: str
    created_at: datetime


@dataclass(slots=True, frozen=True)
class Identity:
    """Claims carried by a verified session token."""

    user_id: str
    issued_at: datetime
    expires_at: datetime
