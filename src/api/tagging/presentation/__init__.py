"""Tagging presentation layer."""

from tagging.presentation.routes import router

__all__ = ["router"]
