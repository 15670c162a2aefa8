# citegraph/models/paper.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

UNKNOWN_AUTHORS = "Unknown"
SHORT_TITLE_LIMIT = 80


@dataclass(frozen=True)
class Paper:
    """
    One corpus entry, immutable after ingestion.

    - `id` is the unique node id in the citation graph (usually an
      OpenAlex-style URL such as "https://openalex.org/W2741809807").
    - `referenced_works` holds the ids this paper cites. Ids that are not
      part of the corpus are kept here but never become graph edges.
    - `in_json_reference_count` is whatever the source reported; it is only
      used for diagnostics.
    """

    id: str
    doi: str = ""
    title: str = ""
    year: int = 0
    authors: Tuple[str, ...] = field(default_factory=tuple)
    venue: str = ""
    keywords: Tuple[str, ...] = field(default_factory=tuple)
    referenced_works: Tuple[str, ...] = field(default_factory=tuple)
    in_json_reference_count: int = 0

    @property
    def short_id(self) -> str:
        """Suffix after the last '/' in the id, or the full id."""
        if "/" in self.id:
            return self.id.rsplit("/", 1)[-1]
        return self.id

    @property
    def authors_text(self) -> str:
        return ", ".join(self.authors) if self.authors else UNKNOWN_AUTHORS

    @property
    def short_title(self) -> str:
        if len(self.title) > SHORT_TITLE_LIMIT:
            return self.title[: SHORT_TITLE_LIMIT - 3] + "..."
        return self.title
