"""
Exceptions raised by the mosaic pipeline.

Every error carries the :py:class:`~mosaic_blend.constants.PipelineStage`
in which it happened, so callers can tell a bad request from a broken
source or a failed encoder.
"""
from typing import Any, Optional

from mosaic_blend.constants import PipelineStage


class MosaicError(Exception):
    """Base class of mosaic_blend errors."""

    stage = PipelineStage.FAILED

    def __init__(self, message: str, stage: Optional[PipelineStage] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class ConfigError(MosaicError, ValueError):
    """Invalid configuration or empty source list."""

    stage = PipelineStage.VALIDATING


class LoadError(MosaicError):
    """A source could not be fetched or decoded."""

    stage = PipelineStage.LOADING

    def __init__(self, source: Any, reason: str):
        super().__init__("Failed to load %s: %s" % (describe_source(source), reason))
        self.source = source
        self.reason = reason


class EncodingError(MosaicError):
    """The finished surface could not be serialized."""

    stage = PipelineStage.ENCODING


def describe_source(source: Any) -> str:
    """Short printable form of a source, without dumping payloads."""
    if isinstance(source, (bytes, bytearray)):
        return "<%d bytes>" % len(source)
    if isinstance(source, str) and source.startswith("data:"):
        return "%s..." % source[:32]
    return repr(source)
