class MalformedBlockError(Exception):
    """Raised when a raw backend block cannot be mapped to a Block."""
