"""
Schema-level tests: validation and errors as seen by GraphQL clients
"""

import uuid
from unittest.mock import MagicMock, patch

import pytest

from chatter.graphql.schema import create_graphql_router, schema, validate_schema

from .helpers import make_info, make_user


def test_schema_validates():
    validate_schema()


def test_schema_exposes_operations():
    sdl = schema.as_str()
    for name in ("createMessage", "createGroup", "deleteGroup", "leaveGroup", "updateGroup"):
        assert name in sdl
    for name in ("messageAdded", "groupAdded", "signup", "login"):
        assert name in sdl
    assert "from: User!" in sdl
    assert "unreadCount: Int!" in sdl


@pytest.mark.asyncio
async def test_unauthorized_is_surfaced_verbatim():
    context = make_info(None).context
    result = await schema.execute(
        "query ($id: UUID!) { user(id: $id) { id } }",
        variable_values={"id": str(uuid.uuid4())},
        context_value=context,
    )

    assert result.errors is not None
    assert result.errors[0].message == "Unauthorized"


@pytest.mark.asyncio
async def test_user_query_for_self():
    user = make_user()
    context = make_info(user).context
    result = await schema.execute(
        "query ($email: String) { user(email: $email) { id username jwt } }",
        variable_values={"email": user.email},
        context_value=context,
    )

    assert result.errors is None
    assert result.data == {"user": {"id": str(user.id), "username": "alice", "jwt": None}}


@pytest.mark.asyncio
async def test_ws_connect_uses_connection_params_token():
    router = create_graphql_router()
    pending = MagicMock()
    context = {"user": None, "loaders": object(), "connection_params": {"jwt": "abc"}}

    with patch("chatter.graphql.schema.create_pending_user", return_value=pending) as create:
        await router.on_ws_connect(context)

    create.assert_called_once_with("abc")
    assert context["user"] is pending
    assert "loaders" not in context


@pytest.mark.asyncio
async def test_ws_connect_without_token_keeps_header_caller():
    router = create_graphql_router()
    caller = object()
    context = {"user": caller, "connection_params": {}}

    await router.on_ws_connect(context)

    assert context["user"] is caller
