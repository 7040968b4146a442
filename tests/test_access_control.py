"""Tests for access decisions."""

import pytest

from chunkstore.access_control import evaluate, is_allowed_user, is_owner
from common.types import AccessReason, ChunkManifest

MANIFEST = ChunkManifest(owner='alice', allowed_users=('bob',))


@pytest.mark.parametrize('identity,role,allowed,reason', [
    ('alice', 'user', True, AccessReason.OWNER),
    ('bob', 'user', True, AccessReason.ALLOWED_USER),
    ('carol', 'user', False, None),
    ('carol', 'admin', True, AccessReason.ADMIN_OVERRIDE),
    ('alice', 'admin', True, AccessReason.ADMIN_OVERRIDE),
])
def test_decision_matrix(identity, role, allowed, reason):
    decision = evaluate(identity, role, MANIFEST)
    assert decision.allowed is allowed
    assert decision.reason == reason


def test_owner_not_required_in_allowed_users():
    assert is_owner('alice', MANIFEST)
    assert not is_allowed_user('alice', MANIFEST)


def test_identity_match_is_exact():
    assert evaluate('Bob', 'user', MANIFEST).allowed is False


def test_describe():
    assert evaluate('alice', 'user', MANIFEST).describe() == 'ALLOWED (Owner)'
    assert evaluate('carol', 'user', MANIFEST).describe() == 'DENIED (Not owner or allowed user)'


def test_grant_and_revoke_helpers():
    granted = MANIFEST.with_allowed_user('carol')
    assert granted.allowed_users == ('bob', 'carol')
    assert granted.with_allowed_user('carol') is granted
    assert granted.with_allowed_user('alice') is granted
    assert granted.without_allowed_user('bob').allowed_users == ('carol',)
