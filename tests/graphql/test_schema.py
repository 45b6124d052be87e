"""
Tests for the schema surface
"""

import pytest

from eventbook.graphql.schema import execute, print_schema, validate_schema


class TestSchema:
    def test_schema_is_valid(self):
        validate_schema()

    def test_sdl_describes_entities_and_operations(self):
        sdl = print_schema()

        assert "events: [Event!]!" in sdl
        assert "creator: User" in sdl
        assert "createdEvents: [Event!]" in sdl
        assert "password: String" in sdl
        assert "createEvent(eventInput: EventInput!): Event" in sdl
        assert "createUser(userInput: UserInput!): User" in sdl
        assert "scalar Price" in sdl
        assert "price: Price!" in sdl

    def test_sdl_hides_internal_keys(self):
        sdl = print_schema()

        assert "creatorId" not in sdl
        assert "createdEventIds" not in sdl
        assert "passwordHash" not in sdl

    @pytest.mark.asyncio
    async def test_syntax_error_is_reported(self, gateway, make_context):
        result = await execute("{ events { title ", context=make_context())

        assert result["data"] is None
        assert "Syntax Error" in result["errors"][0]["message"]
        assert sum(gateway.calls.values()) == 0

    @pytest.mark.asyncio
    async def test_unknown_argument_is_reported(self, gateway, make_context):
        result = await execute(
            'mutation { createUser(userInput: {email: "a@b.com", password: "pw", name: "x"}) '
            "{ id } }",
            context=make_context(),
        )

        assert result["data"] is None
        assert "name" in result["errors"][0]["message"]
        assert sum(gateway.calls.values()) == 0
