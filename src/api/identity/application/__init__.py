"""Application layer for the identity bounded context."""
