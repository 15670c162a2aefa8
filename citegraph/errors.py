# citegraph/errors.py

from __future__ import annotations


class CiteGraphError(Exception):
    """Base class for errors raised outside the analytics core."""


class CorpusLoadError(CiteGraphError):
    """The corpus file is missing, malformed, or contains no papers."""


class AnalysisTooLargeError(CiteGraphError):
    """The visible set exceeds the configured limit for an analysis."""

    def __init__(self, analysis: str, size: int, limit: int) -> None:
        self.analysis = analysis
        self.size = size
        self.limit = limit
        super().__init__(
            f"{analysis} refused: {size} visible papers exceeds the limit of {limit}"
        )
