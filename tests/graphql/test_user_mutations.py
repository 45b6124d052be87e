"""
Tests for the createUser mutation
"""

import uuid
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import strawberry

from eventbook.errors import DuplicateError, ValidationError
from eventbook.graphql.resolvers.user import create_user
from eventbook.graphql.schema import execute
from eventbook.passwords import verify_password
from eventbook.store import Collection

CREATE_USER_MUTATION = """
mutation CreateUser($userInput: UserInput!) {
  createUser(userInput: $userInput) {
    id
    email
    password
    createdEvents { id }
  }
}
"""


@pytest.fixture
def mock_info(make_context):
    info = MagicMock(spec=strawberry.Info)
    info.context = make_context()
    return info


class TestCreateUserMutation:
    """End-to-end tests through the schema."""

    @pytest.mark.asyncio
    async def test_creates_user(self, gateway, make_context):
        result = await execute(
            CREATE_USER_MUTATION,
            variables={"userInput": {"email": "a@b.com", "password": "pw"}},
            context=make_context(),
        )

        assert "errors" not in result
        created = result["data"]["createUser"]
        assert created["email"] == "a@b.com"
        assert created["password"] is None
        assert created["createdEvents"] == []
        assert gateway.count(Collection.USERS) == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_reports_error(self, gateway, make_context):
        first = await execute(
            CREATE_USER_MUTATION,
            variables={"userInput": {"email": "a@b.com", "password": "secret123"}},
            context=make_context(),
        )
        assert "errors" not in first
        first_id = uuid.UUID(first["data"]["createUser"]["id"])
        stored_before = await gateway.fetch_by_id(Collection.USERS, first_id)

        result = await execute(
            CREATE_USER_MUTATION,
            variables={"userInput": {"email": "a@b.com", "password": "other"}},
            context=make_context(),
        )

        assert result["data"] == {"createUser": None}
        assert result["errors"][0]["message"] == "User exists already."
        assert gateway.count(Collection.USERS) == 1

        stored_after = await gateway.fetch_by_id(Collection.USERS, first_id)
        assert stored_after == stored_before
        assert stored_after["email"] == "a@b.com"
        assert verify_password("secret123", stored_after["password_hash"])
        assert not verify_password("other", stored_after["password_hash"])


class TestCreateUserResolver:
    """Direct tests of the registration resolver."""

    @pytest.mark.asyncio
    async def test_stores_salted_hash_only(self, gateway, mock_info):
        user = await create_user(mock_info, SimpleNamespace(email="a@b.com", password="pw"))

        stored = await gateway.find_one(Collection.USERS, email="a@b.com")
        assert str(stored["id"]) == user.id
        assert stored["password_hash"] != "pw"
        assert stored["password_hash"].startswith("pbkdf2_sha256$1000$")
        assert verify_password("pw", stored["password_hash"])
        assert not verify_password("wrong", stored["password_hash"])

    @pytest.mark.asyncio
    async def test_same_password_hashes_differently(self, gateway, mock_info):
        await create_user(mock_info, SimpleNamespace(email="a@b.com", password="pw"))
        await create_user(mock_info, SimpleNamespace(email="c@d.com", password="pw"))

        first = await gateway.find_one(Collection.USERS, email="a@b.com")
        second = await gateway.find_one(Collection.USERS, email="c@d.com")
        assert first["password_hash"] != second["password_hash"]

    @pytest.mark.asyncio
    async def test_duplicate_checked_before_hashing(self, gateway, make_user, mock_info):
        await make_user(email="a@b.com")

        with patch(
            "eventbook.graphql.resolvers.user.hash_password_async", new_callable=AsyncMock
        ) as mock_hash:
            with pytest.raises(DuplicateError, match="User exists already."):
                await create_user(mock_info, SimpleNamespace(email="a@b.com", password="pw"))

        mock_hash.assert_not_called()
        assert gateway.calls[("insert", Collection.USERS)] == 0

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_rejected_by_store(self, gateway, make_user, mock_info):
        await make_user(email="a@b.com")

        with patch.object(gateway, "find_one", AsyncMock(return_value=None)):
            with pytest.raises(DuplicateError):
                await create_user(mock_info, SimpleNamespace(email="a@b.com", password="pw"))

        assert gateway.count(Collection.USERS) == 1

    @pytest.mark.asyncio
    async def test_blank_password_rejected(self, gateway, mock_info):
        with pytest.raises(ValidationError) as exc_info:
            await create_user(mock_info, SimpleNamespace(email="a@b.com", password=""))

        assert exc_info.value.field == "password"
        assert sum(gateway.calls.values()) == 0

    @pytest.mark.asyncio
    async def test_blank_email_rejected(self, gateway, mock_info):
        with pytest.raises(ValidationError, match="email"):
            await create_user(mock_info, SimpleNamespace(email="   ", password="pw"))

        assert gateway.count(Collection.USERS) == 0

    @pytest.mark.asyncio
    async def test_email_is_trimmed(self, gateway, mock_info):
        user = await create_user(mock_info, SimpleNamespace(email=" a@b.com ", password="pw"))

        assert user.email == "a@b.com"
