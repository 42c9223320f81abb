"""Resolver package for the GraphQL schema.

Each module holds the authorization-then-delegate functions behind one
part of the schema: message, group, user, auth and subscription.
"""
