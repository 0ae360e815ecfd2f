"""Core infrastructure: configuration, logging and application lifespan."""
