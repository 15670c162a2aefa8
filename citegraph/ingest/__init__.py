# citegraph/ingest/__init__.py

"""
Corpus ingestion: JSON paper records -> immutable Paper objects ready for
GraphStore.load().
"""

from .loader import PaperRecord, find_data_file, load_papers, parse_papers

__all__ = ["PaperRecord", "find_data_file", "load_papers", "parse_papers"]
