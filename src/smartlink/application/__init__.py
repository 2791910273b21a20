"""Application layer - services, sources, caching and use cases."""
