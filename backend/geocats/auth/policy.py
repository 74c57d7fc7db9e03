"""
GeoCats Backend — Authorization Policy
========================================

What:  One predicate deciding whether an identity holds a capability.
How:   ``is_authorized(identity, capability, owner_id)`` answers pass/fail;
       ``authorize`` raises ``AuthorizationError`` (403) on fail. Handlers
       call ``authorize`` before any write, and admin-only routes also use
       the ``require_admin`` dependency so non-admins are refused before the
       store is touched.

Capabilities:
    OWNER  caller's id equals the resource owner's id (compared as strings)
    ADMIN  caller's role is 'admin'
"""

import enum
import logging
import uuid
from typing import Optional, Union

from fastapi import Depends

from geocats.auth.identity import Identity, get_current_identity
from geocats.exceptions import AuthorizationError

logger = logging.getLogger(__name__)


class Capability(str, enum.Enum):
    OWNER = "owner"
    ADMIN = "admin"


def is_authorized(
    identity: Identity,
    capability: Capability,
    owner_id: Optional[Union[str, uuid.UUID]] = None,
) -> bool:
    if capability is Capability.ADMIN:
        return identity.is_admin
    if capability is Capability.OWNER:
        return owner_id is not None and str(owner_id) == str(identity.id)
    return False


def authorize(
    identity: Identity,
    capability: Capability,
    owner_id: Optional[Union[str, uuid.UUID]] = None,
) -> None:
    """Raise ``AuthorizationError`` unless ``identity`` holds ``capability``."""
    if not is_authorized(identity, capability, owner_id):
        logger.warning(
            "Denied %s capability to user %s", capability.value, identity.id,
        )
        message = "Not admin" if capability is Capability.ADMIN else "Not authorized"
        raise AuthorizationError(
            message=message,
            context={"capability": capability.value, "user_id": str(identity.id)},
        )


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    """Dependency form of ``authorize(identity, Capability.ADMIN)``."""
    authorize(identity, Capability.ADMIN)
    return identity
