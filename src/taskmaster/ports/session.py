"""Session interface."""

from typing import Protocol


class Session(Protocol):
    """Holds the current credential. The core never reads it directly."""

    def get_token(self) -> str | None:
        """Current bearer token, or None when signed out."""
        ...

    def set_token(self, token: str) -> None:
        """Store a new token."""
        ...

    def clear(self) -> None:
        """Forget the token (e.g. after an authorization failure)."""
        ...
