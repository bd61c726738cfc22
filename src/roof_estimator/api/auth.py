"""
Request identity.

Authentication is done upstream by the identity provider, which forwards
the user id and role as headers.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Header, HTTPException

from ..services.roles import is_owner, resolve_role


@dataclass
class CurrentUser:
    user_id: str
    role: str

    @property
    def is_owner(self) -> bool:
        return is_owner(self.role)


async def current_user(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
) -> CurrentUser:
    """Resolve the calling user, rejecting unauthenticated requests."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Unauthorized")
    return CurrentUser(user_id=x_user_id, role=resolve_role(x_user_role))
