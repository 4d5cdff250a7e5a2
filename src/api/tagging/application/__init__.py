"""Application layer for the tagging bounded context."""
