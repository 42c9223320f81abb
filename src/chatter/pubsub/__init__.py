"""Realtime events for GraphQL subscriptions."""
