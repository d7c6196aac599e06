from __future__ import annotations


class InvalidConfiguration(ValueError):
    """Raised when a board or piece is built from unusable parameters."""
