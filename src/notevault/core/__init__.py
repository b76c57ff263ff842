"""Domain core: models, persistence, access rules and services."""
