"""Domain exceptions for the tagging bounded context."""


class TagNotFoundError(Exception):
    """Raised when a tag does not exist or is not owned by the caller.

    Both cases are reported the same way so callers cannot probe for
    other users' tags.
    """

    def __init__(self, tag_id: int):
        self.tag_id = tag_id
        super().__init__(f"Tag {tag_id} not found")


class SongTagNotFoundError(Exception):
    """Raised when a track is not tagged with the given tag for the caller."""

    def __init__(self, track_id: str, tag_id: int):
        self.track_id = track_id
        self.tag_id = tag_id
        super().__init__(f"Track {track_id} is not tagged with tag {tag_id}")


class DuplicateTagNameError(Exception):
    """Raised when the caller already owns a tag with the same name.

    Tag names are unique per user.
    """

    pass
