"""
User roles.

Role resolution belongs to the external identity provider; this module
only normalizes the role it reports.
"""
from typing import Optional

OWNER = "owner"
AGENT = "agent"

VALID_ROLES = (OWNER, AGENT)

# Users without an explicit role assignment
DEFAULT_ROLE = AGENT


def is_valid_role(role: Optional[str]) -> bool:
    return role in VALID_ROLES


def resolve_role(role: Optional[str]) -> str:
    """Normalize a reported role, defaulting to agent for missing or unknown values."""
    if role is None:
        return DEFAULT_ROLE
    role = str(role).strip().lower()
    return role if is_valid_role(role) else DEFAULT_ROLE


def is_owner(role: Optional[str]) -> bool:
    return resolve_role(role) == OWNER
