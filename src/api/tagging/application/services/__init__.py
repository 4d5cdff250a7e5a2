"""Application services for the tagging bounded context."""

from tagging.application.services.tagging_service import TaggingService

__all__ = ["TaggingService"]
