"""Domain exceptions.

Only generation failures are exceptional; refused selections and placements
are reported as ``False`` by the mobility engine.
"""

from __future__ import annotations


class GenerationFailure(RuntimeError):
    """A generation attempt could not produce a complete board.

    The caller must re-seed or abort; a truncated board is never returned.
    """

    def __init__(self, message: str, *, remaining: int | None = None) -> None:
        super().__init__(message)
        self.remaining = remaining
