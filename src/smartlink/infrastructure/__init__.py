"""Infrastructure layer - persistence, caching, HTTP helpers and observability."""
