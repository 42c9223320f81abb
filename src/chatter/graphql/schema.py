"""
Main GraphQL schema definition using Strawberry
"""

from typing import Any

import strawberry
from graphql import validate_schema as gql_validate_schema
from starlette.requests import HTTPConnection
from strawberry import UNSET
from strawberry.fastapi import GraphQLRouter
from strawberry.subscriptions import GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL

from ..auth.context import create_pending_user, extract_bearer_token, extract_connection_token
from ..logging import get_logger, set_request_context
from .loaders import Loaders
from .mutations.root import Mutation
from .queries.root import Query
from .subscriptions.root import Subscription

logger = get_logger(__name__)

schema = strawberry.Schema(
    query=Query,
    mutation=Mutation,
    subscription=Subscription,
)


def validate_schema() -> None:
    """Validate the GraphQL schema at startup.

    Fails fast on unresolved type references instead of erroring at runtime.

    Raises:
        Exception: If the schema is invalid or has unresolved types
    """
    try:
        graphql_schema = schema._schema

        errors = gql_validate_schema(graphql_schema)
        if errors:
            error_messages = [str(e) for e in errors]
            raise Exception(f"GraphQL schema validation failed: {'; '.join(error_messages)}")

        from graphql import get_introspection_query, graphql_sync

        result = graphql_sync(graphql_schema, get_introspection_query())
        if result.errors:
            error_messages = [str(e) for e in result.errors]
            raise Exception(f"GraphQL introspection failed: {'; '.join(error_messages)}")

        logger.info("GraphQL schema validation successful")

    except Exception as e:
        logger.error("GraphQL schema validation failed", error=str(e))
        raise


async def get_context(connection: HTTPConnection) -> dict[str, Any]:
    """Build the per-request context: the pending caller and fresh loaders."""
    token = extract_bearer_token(connection.headers.get("authorization"))
    return {
        "user": create_pending_user(token),
        "loaders": Loaders(),
    }


class ChatGraphQLRouter(GraphQLRouter[dict[str, Any], None]):
    """GraphQL router that re-derives the caller from websocket connection params."""

    async def on_ws_connect(self, context: dict[str, Any]):
        set_request_context()
        token = extract_connection_token(context.get("connection_params"))
        if token:
            context["user"] = create_pending_user(token)
        # Subscription events resolve their fields without a connection-wide cache
        context.pop("loaders", None)
        return UNSET


def create_graphql_router() -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI."""
    return ChatGraphQLRouter(
        schema,
        path="/graphql",
        graphiql=True,
        context_getter=get_context,
        subscription_protocols=[GRAPHQL_TRANSPORT_WS_PROTOCOL, GRAPHQL_WS_PROTOCOL],
    )
