"""Infrastructure layer for the identity bounded context."""
