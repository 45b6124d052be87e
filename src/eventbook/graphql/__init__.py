"""GraphQL schema, types and resolvers for Eventbook."""
