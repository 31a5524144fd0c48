"""
Error taxonomy for the pitch-deck generation pipeline.

Only ``ValidationError``, ``CompositionInvariantError`` and a fatal
``PipelineTimeoutError`` ever reach the caller.  Fetch and asset failures are
recovered where they happen and surface only as degradation reasons on the
returned deck.
"""

from __future__ import annotations

from typing import Any


class PitchDeckError(Exception):
    """Base class for every pipeline error."""

    code = "pitch_deck_error"

    def __init__(self, message: str, details: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        payload: dict[str, Any] = {"error": self.code, "message": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class ValidationError(PitchDeckError):
    """Malformed request: missing company name, unknown theme / aspect ratio, ..."""

    code = "validation_error"


class ResearchFetchError(PitchDeckError):
    """One research source could not be fetched or had no usable text."""

    code = "research_fetch_error"

    def __init__(self, url: str, message: str) -> None:
        super().__init__(message, details={"url": url})
        self.url = url


class AssetResolutionError(PitchDeckError):
    """One image/chart block could not be resolved to a concrete asset."""

    code = "asset_resolution_error"

    def __init__(self, block_id: str, message: str) -> None:
        super().__init__(message, details={"blockId": block_id})
        self.block_id = block_id


class PipelineTimeoutError(PitchDeckError):
    """The end-to-end deadline passed before an outline could be built."""

    code = "pipeline_timeout"


class CompositionInvariantError(PitchDeckError):
    """A contract between pipeline stages was broken.  Always fatal."""

    code = "composition_invariant"
