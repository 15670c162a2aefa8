# citegraph/ingest/loader.py

"""
Corpus ingestion: JSON file -> list[Paper].

The expected input is a JSON array of objects shaped like

    {
      "id": "https://openalex.org/W2741809807",
      "doi": "https://doi.org/10.7717/peerj.4375",
      "title": "...",
      "year": 2018,
      "authors": ["Heather Piwowar", "..."],
      "venue": "PeerJ",
      "keywords": ["open access"],
      "referenced_works": ["https://openalex.org/W1234", "..."],
      "in_json_reference_count": 42
    }

Only `id` matters for graph structure. Every other field falls back to an
empty value when it is missing or null, and is otherwise passed through
without further checks.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from citegraph.config.settings import settings
from citegraph.errors import CorpusLoadError
from citegraph.models.paper import Paper

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PaperRecord(BaseModel):
    """Lenient view of one raw corpus record."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = ""
    doi: str = ""
    title: str = ""
    year: int = 0
    authors: List[str] = Field(default_factory=list)
    venue: str = ""
    keywords: List[str] = Field(default_factory=list)
    referenced_works: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("referenced_works", "referencedWorks"),
    )
    in_json_reference_count: int = Field(
        default=0,
        validation_alias=AliasChoices("in_json_reference_count", "inJsonReferenceCount"),
    )

    @field_validator("id", "doi", "title", "venue", mode="before")
    @classmethod
    def _text_or_empty(cls, value: Any) -> str:
        if value is None:
            return ""
        return value if isinstance(value, str) else str(value)

    @field_validator("year", "in_json_reference_count", mode="before")
    @classmethod
    def _int_or_zero(cls, value: Any) -> int:
        if value is None or isinstance(value, bool):
            return 0
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @field_validator("authors", "keywords", "referenced_works", mode="before")
    @classmethod
    def _string_list(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    def to_paper(self) -> Paper:
        return Paper(
            id=self.id.strip(),
            doi=self.doi,
            title=self.title,
            year=self.year,
            authors=tuple(self.authors),
            venue=self.venue,
            keywords=tuple(self.keywords),
            referenced_works=tuple(self.referenced_works),
            in_json_reference_count=self.in_json_reference_count,
        )


def parse_papers(raw: Any) -> List[Paper]:
    """
    Convert already-decoded JSON into papers.

    Raises CorpusLoadError when `raw` is not a list or yields no paper.
    """
    if not isinstance(raw, list):
        raise CorpusLoadError(
            f"Corpus must be a JSON array of paper objects, got {type(raw).__name__}"
        )

    papers: List[Paper] = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            logger.warning("Skipping corpus entry %d: not a JSON object", index)
            continue

        paper = PaperRecord.model_validate(item).to_paper()
        if not paper.id:
            logger.warning("Skipping corpus entry %d: missing id", index)
            continue
        papers.append(paper)

    if not papers:
        raise CorpusLoadError("Corpus contains no papers")

    return papers


def load_papers(path: PathLike) -> List[Paper]:
    """
    Read and parse a JSON corpus file.
    """
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8-sig")
    except FileNotFoundError as exc:
        raise CorpusLoadError(f"Corpus file not found: {p}") from exc
    except OSError as exc:
        raise CorpusLoadError(f"Cannot read corpus file {p}: {exc}") from exc

    try:
        raw = json.loads(text)
    except json.JSONDecodeError as exc:
        raise CorpusLoadError(f"Malformed JSON in {p}: {exc}") from exc

    papers = parse_papers(raw)
    logger.info("Read %d papers from %s", len(papers), p)
    return papers


def find_data_file(explicit: Optional[PathLike] = None) -> Path:
    """
    Resolve which corpus file to load:

      1. the explicit path, if given (it must exist),
      2. settings.DATA_FILE, if configured,
      3. ./data.json.
    """
    if explicit is not None:
        path = Path(explicit)
        if not path.is_file():
            raise CorpusLoadError(f"Corpus file not found: {path}")
        return path

    candidates = []
    if settings.DATA_FILE is not None:
        candidates.append(Path(settings.DATA_FILE))
    candidates.append(settings.default_data_file)

    for candidate in candidates:
        if candidate.is_file():
            return candidate

    tried = ", ".join(str(c) for c in candidates)
    raise CorpusLoadError(f"No corpus file found (tried: {tried})")
