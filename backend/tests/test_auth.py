"""
GeoCats Backend — Authorization and Token Tests
=================================================

What:  The capability predicate, password hashing, and token round-trips.
"""

import uuid
from datetime import timedelta

import pytest

from geocats.auth.identity import Identity
from geocats.auth.policy import Capability, authorize, is_authorized
from geocats.auth.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from geocats.exceptions import AuthenticationError, AuthorizationError
from geocats.models import User, UserRole


def make_identity(role: UserRole = UserRole.USER) -> Identity:
    return Identity(id=uuid.uuid4(), user_name="mia", email="mia@example.com", role=role)


class TestPolicy:

    def test_owner_matches_own_id(self):
        me = make_identity()
        assert is_authorized(me, Capability.OWNER, me.id)

    def test_owner_compares_ids_as_strings(self):
        me = make_identity()
        assert is_authorized(me, Capability.OWNER, str(me.id))

    def test_owner_rejects_other_id(self):
        assert not is_authorized(make_identity(), Capability.OWNER, uuid.uuid4())

    def test_owner_rejects_missing_owner(self):
        assert not is_authorized(make_identity(), Capability.OWNER, None)

    def test_admin_requires_admin_role(self):
        assert is_authorized(make_identity(UserRole.ADMIN), Capability.ADMIN)
        assert not is_authorized(make_identity(UserRole.USER), Capability.ADMIN)

    def test_admin_is_not_implicitly_owner(self):
        assert not is_authorized(make_identity(UserRole.ADMIN), Capability.OWNER, uuid.uuid4())

    def test_authorize_raises_not_authorized(self):
        with pytest.raises(AuthorizationError, match="Not authorized"):
            authorize(make_identity(), Capability.OWNER, uuid.uuid4())

    def test_authorize_raises_not_admin(self):
        with pytest.raises(AuthorizationError, match="Not admin"):
            authorize(make_identity(), Capability.ADMIN)


class TestPasswords:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_same_password_hashes_differently(self):
        assert hash_password("hunter22") != hash_password("hunter22")

    def test_verify(self):
        hashed = hash_password("hunter22")
        assert verify_password("hunter22", hashed)
        assert not verify_password("hunter23", hashed)

    def test_verify_malformed_hash(self):
        assert not verify_password("hunter22", "not-a-bcrypt-hash")


class TestTokens:

    def setup_method(self):
        self.user = User(
            id=uuid.uuid4(),
            user_name="mia",
            email="mia@example.com",
            role=UserRole.ADMIN.value,
            password="unused",
        )

    def test_claims_round_trip(self):
        claims = decode_access_token(create_access_token(self.user))
        assert claims["sub"] == str(self.user.id)
        assert claims["user_name"] == "mia"
        assert claims["email"] == "mia@example.com"
        assert claims["role"] == "admin"
        assert "password" not in claims

    def test_expired_token_rejected(self):
        token = create_access_token(self.user, expires_delta=timedelta(seconds=-1))
        with pytest.raises(AuthenticationError, match="Invalid or expired"):
            decode_access_token(token)

    def test_tampered_token_rejected(self):
        token = create_access_token(self.user)
        with pytest.raises(AuthenticationError):
            decode_access_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))
