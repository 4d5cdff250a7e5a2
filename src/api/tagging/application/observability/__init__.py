"""Domain-Oriented Observability for the tagging application layer."""

from tagging.application.observability.tagging_service_probe import (
    DefaultTaggingServiceProbe,
    TaggingServiceProbe,
)

__all__ = ["DefaultTaggingServiceProbe", "TaggingServiceProbe"]
