"""
GeoCats Backend — User Service Tests
======================================

What:  Registration, self-service update/delete, token echo and login.
How:   Runs against the in-memory SQLite schema from conftest.
"""

import uuid

import pytest
from sqlalchemy import select

from geocats.auth.security import verify_password
from geocats.exceptions import AuthenticationError, CreationError, NotFoundError
from geocats.models import Cat, User
from geocats.schemas.user import UserCreate, UserUpdate
from geocats.services.user_service import UserService


class TestUserRegistration:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    async def test_create_stores_hash_and_user_role(self, db_session):
        payload = UserCreate(user_name="mia", email="mia@example.com", password="meow-meow")

        response = await self.service.create(db_session, payload)

        assert response.message == "User created"
        assert response.data.model_dump() == {"user_name": "mia", "email": "mia@example.com"}
        stored = (await db_session.execute(select(User))).scalars().one()
        assert stored.role == "user"
        assert stored.password != "meow-meow"
        assert verify_password("meow-meow", stored.password)

    @pytest.mark.asyncio
    async def test_role_in_body_is_ignored(self, db_session):
        payload = UserCreate.model_validate(
            {"user_name": "mia", "email": "mia@example.com", "password": "meow-meow", "role": "admin"}
        )
        await self.service.create(db_session, payload)
        stored = (await db_session.execute(select(User))).scalars().one()
        assert stored.role == "user"

    @pytest.mark.asyncio
    async def test_duplicate_user_name_fails(self, db_session, alice):
        payload = UserCreate(user_name="alice", email="other@example.com", password="meow-meow")
        with pytest.raises(CreationError, match="Error creating user"):
            await self.service.create(db_session, payload)

    @pytest.mark.asyncio
    async def test_duplicate_email_fails(self, db_session, alice):
        payload = UserCreate(user_name="alice2", email="alice@example.com", password="meow-meow")
        with pytest.raises(CreationError):
            await self.service.create(db_session, payload)


class TestCurrentUser:

    def setup_method(self):
        self.service = UserService()

    def test_check_token_echoes_identity(self, alice, identity_of):
        out = self.service.check_token(identity_of(alice))
        assert out.model_dump(by_alias=True) == {
            "_id": alice.id, "user_name": "alice", "email": "alice@example.com",
        }

    @pytest.mark.asyncio
    async def test_update_rehashes_password(self, db_session, alice, identity_of):
        response = await self.service.update_current(
            db_session, identity_of(alice), UserUpdate(password="brand-new")
        )

        assert response.message == "User updated"
        stored = await db_session.get(User, alice.id)
        assert verify_password("brand-new", stored.password)

    @pytest.mark.asyncio
    async def test_update_vanished_user(self, db_session, identity_of):
        ghost = User(id=uuid.uuid4(), user_name="ghost", email="ghost@example.com", role="user")
        with pytest.raises(NotFoundError, match="User not found"):
            await self.service.update_current(db_session, identity_of(ghost), UserUpdate(user_name="boo"))

    @pytest.mark.asyncio
    async def test_delete_cascades_to_cats(self, db_session, alice, bob, make_cat, identity_of):
        await make_cat(alice, "Alice's")
        await make_cat(bob, "Bob's")

        response = await self.service.delete_current(db_session, identity_of(alice))

        assert response.message == "User deleted"
        assert response.data.user_name == "alice"
        names = (await db_session.execute(select(Cat.cat_name))).scalars().all()
        assert names == ["Bob's"]


class TestLogin:

    def setup_method(self):
        self.service = UserService()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("username", ["alice", "alice@example.com"])
    async def test_login_by_name_or_email(self, db_session, alice, username):
        response = await self.service.authenticate(db_session, username, "alice-secret")
        assert response.message == "Login successful"
        assert response.user.id == alice.id
        assert response.token

    @pytest.mark.asyncio
    async def test_wrong_password(self, db_session, alice):
        with pytest.raises(AuthenticationError, match="Incorrect username/password"):
            await self.service.authenticate(db_session, "alice", "wrong-secret")

    @pytest.mark.asyncio
    async def test_unknown_user(self, db_session):
        with pytest.raises(AuthenticationError, match="Incorrect username/password"):
            await self.service.authenticate(db_session, "nobody", "whatever")
