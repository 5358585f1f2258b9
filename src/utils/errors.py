# src/utils/errors.py
"""Exception types shared by the letter pipeline, the admin view and ticket lookup."""

from __future__ import annotations


class SantaError(Exception):
    """Base class for errors raised by this app."""


class ConfigError(SantaError, RuntimeError):
    """Supabase credentials (or other required settings) are missing."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(
            "Missing required secrets: "
            + ", ".join(self.missing)
            + "\nAdd them in Streamlit Cloud → Settings → Secrets (TOML) or export as env vars."
        )


class ValidationError(SantaError):
    """User input rejected before any network call."""


class ImageProcessingError(SantaError):
    """The picture could not be decoded or re-encoded as JPEG."""


class SubmissionError(SantaError):
    """Sending a letter failed; carries the message shown to the user."""

    USER_MESSAGE = "The snowstorm blocked the connection. Please try again."

    def __init__(self, message: str | None = None, *, stage: str = "insert"):
        self.stage = stage
        super().__init__(message or self.USER_MESSAGE)


class InvalidTransition(SantaError):
    """A wizard or camera step was requested from the wrong state."""
