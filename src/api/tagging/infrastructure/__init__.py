"""Infrastructure layer for the tagging bounded context."""
