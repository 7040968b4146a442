"""Access decisions over a manifest's owner and allowed-user list.

Pure: no I/O, no side effects. Precedence, first match wins:
admin role, owner, allowed user, otherwise denied.
"""

from common.constants import ROLE_ADMIN
from common.types import AccessDecision, AccessReason, ChunkManifest


def is_owner(identity: str, manifest: ChunkManifest) -> bool:
    return identity == manifest.owner


def is_allowed_user(identity: str, manifest: ChunkManifest) -> bool:
    return identity in manifest.allowed_users


def evaluate(identity: str, role: str, manifest: ChunkManifest) -> AccessDecision:
    """
    Decide whether ``identity`` acting as ``role`` may operate on a file.

    Args:
        identity: Requesting identity
        role: ``"admin"`` or ``"user"``
        manifest: Manifest of the file

    Returns:
        AccessDecision carrying the reason when allowed
    """
    if role == ROLE_ADMIN:
        return AccessDecision.allow(AccessReason.ADMIN_OVERRIDE)
    if is_owner(identity, manifest):
        return AccessDecision.allow(AccessReason.OWNER)
    if is_allowed_user(identity, manifest):
        return AccessDecision.allow(AccessReason.ALLOWED_USER)
    return AccessDecision.deny()
