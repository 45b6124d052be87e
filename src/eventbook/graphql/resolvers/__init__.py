"""Resolver package for GraphQL schema.

Resolver functions referenced by the GraphQL types, queries and mutations.
Reads go through the request's relation loader; writes go through the
record store held in the request context.
"""
