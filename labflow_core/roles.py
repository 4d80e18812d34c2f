# labflow_core/roles.py
"""
Role hierarchy used to gate workflow transitions.

Roles form a single total order from most to least privileged.
A role satisfies a requirement when it ranks at or above it.

Unknown roles are "unranked": they never satisfy any requirement,
not even another unknown role.
"""

from __future__ import annotations

import re
import sys
from enum import Enum
from typing import Dict, List, Optional, Tuple, Union


class Role(str, Enum):
    SUPER_ADMIN = "SUPER_ADMIN"
    LAB_DIRECTOR = "LAB_DIRECTOR"
    LAB_MANAGER = "LAB_MANAGER"
    BILLING_ADMIN = "BILLING_ADMIN"
    SENIOR_ANALYST = "SENIOR_ANALYST"
    ANALYST = "ANALYST"
    SAMPLE_RECEIVER = "SAMPLE_RECEIVER"
    DATA_ENTRY = "DATA_ENTRY"
    BILLING_VIEWER = "BILLING_VIEWER"
    CLIENT_ADMIN = "CLIENT_ADMIN"
    CLIENT_USER = "CLIENT_USER"
    READONLY = "READONLY"

    def __str__(self) -> str:
        return self.value


# Highest privilege first. Enum definition order is the hierarchy.
ROLE_HIERARCHY: Tuple[Role, ...] = tuple(Role)

# Rank reported for anything outside ROLE_HIERARCHY.
UNRANKED: int = sys.maxsize

_RANKS: Dict[Role, int] = {role: index for index, role in enumerate(ROLE_HIERARCHY)}


# ===============================================================
# Role normalization
# ===============================================================
ROLE_ALIASES: Dict[str, Role] = {
    "ADMIN": Role.SUPER_ADMIN,
    "SUPERUSER": Role.SUPER_ADMIN,
    "SYSTEM_ADMIN": Role.SUPER_ADMIN,
    "DIRECTOR": Role.LAB_DIRECTOR,
    "MANAGER": Role.LAB_MANAGER,
    "SENIOR": Role.SENIOR_ANALYST,
    "RECEIVER": Role.SAMPLE_RECEIVER,
    "VIEWER": Role.READONLY,
    "READ_ONLY": Role.READONLY,
}


def normalize_role(value: Union[Role, str, None]) -> Optional[Role]:
    """
    Canonicalize a role so small formatting differences do not break
    permission logic. Returns None when the value names no known role.

    "lab manager", "Lab-Manager" and "LAB_MANAGER" all resolve to
    Role.LAB_MANAGER.
    """
    if isinstance(value, Role):
        return value

    raw = str(value or "").strip().upper()
    if not raw:
        return None

    raw = re.sub(r"[\s\-]+", "_", raw)
    raw = re.sub(r"_+", "_", raw)

    if raw in Role.__members__:
        return Role(raw)
    return ROLE_ALIASES.get(raw)


# ===============================================================
# Ranking
# ===============================================================

def role_rank(role: Union[Role, str, None]) -> int:
    """
    Position of `role` in ROLE_HIERARCHY (0 = most privileged),
    or UNRANKED when the role is unknown. Never raises.
    """
    resolved = normalize_role(role)
    if resolved is None:
        return UNRANKED
    return _RANKS[resolved]


def is_ranked(role: Union[Role, str, None]) -> bool:
    return normalize_role(role) is not None


def has_minimum_role(user_role: Union[Role, str, None], required_role: Union[Role, str, None]) -> bool:
    """
    True when `user_role` ranks at or above `required_role`.

    Unranked on either side fails closed.
    """
    user = normalize_role(user_role)
    required = normalize_role(required_role)

    if user is None or required is None:
        return False

    return _RANKS[user] <= _RANKS[required]


def roles_at_or_above(required_role: Union[Role, str, None]) -> List[Role]:
    """
    Every role that satisfies `required_role`, most privileged first.
    Empty for an unknown requirement.
    """
    required = normalize_role(required_role)
    if required is None:
        return []
    return list(ROLE_HIERARCHY[: _RANKS[required] + 1])


__all__ = [
    "Role",
    "ROLE_HIERARCHY",
    "ROLE_ALIASES",
    "UNRANKED",
    "normalize_role",
    "role_rank",
    "is_ranked",
    "has_minimum_role",
    "roles_at_or_above",
]
