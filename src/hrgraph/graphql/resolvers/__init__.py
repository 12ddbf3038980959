"""GraphQL resolvers package."""
