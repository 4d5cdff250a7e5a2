"""Identity presentation layer."""

from identity.presentation.routes import router

__all__ = ["router"]
