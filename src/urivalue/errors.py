from typing import Any


class InvalidUriError(ValueError):
    """
    Raised when a string cannot be turned into a Uri.

    :ivar uri: The rejected input, exactly as it was given.
    :ivar reason: Human readable explanation of why it was rejected.
    """

    def __init__(self, uri: Any, reason: str) -> None:
        self.uri = uri
        self.reason = reason
        super().__init__(f"Invalid URI {uri!r}: {reason}")
