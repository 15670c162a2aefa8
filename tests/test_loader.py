# tests/test_loader.py

import json

import pytest

import citegraph.ingest.loader as loader_module
from citegraph.errors import CorpusLoadError
from citegraph.ingest import PaperRecord, find_data_file, load_papers, parse_papers


def _write_corpus(tmp_path, records, name="data.json"):
    path = tmp_path / name
    path.write_text(json.dumps(records), encoding="utf-8")
    return path


def test_load_papers_reads_all_fields(tmp_path):
    path = _write_corpus(
        tmp_path,
        [
            {
                "id": "https://openalex.org/W1",
                "doi": "https://doi.org/10.1/abc",
                "title": "A study",
                "year": 2020,
                "authors": ["Ada", "Grace"],
                "venue": "Journal",
                "keywords": ["graphs"],
                "referenced_works": ["https://openalex.org/W2"],
                "in_json_reference_count": 1,
            },
            {"id": "https://openalex.org/W2"},
        ],
    )

    papers = load_papers(path)

    assert [p.id for p in papers] == ["https://openalex.org/W1", "https://openalex.org/W2"]
    first = papers[0]
    assert first.short_id == "W1"
    assert first.year == 2020
    assert first.authors == ("Ada", "Grace")
    assert first.keywords == ("graphs",)
    assert first.referenced_works == ("https://openalex.org/W2",)
    assert first.in_json_reference_count == 1


def test_missing_and_null_fields_get_presence_defaults():
    papers = parse_papers(
        [
            {
                "id": "W1",
                "title": None,
                "year": None,
                "authors": None,
                "doi": None,
                "referenced_works": None,
            }
        ]
    )

    p = papers[0]
    assert p.title == ""
    assert p.doi == ""
    assert p.year == 0
    assert p.authors == ()
    assert p.referenced_works == ()
    assert p.venue == ""


def test_camel_case_referenced_works_alias():
    record = PaperRecord.model_validate({"id": "W1", "referencedWorks": ["W2"]})
    assert record.referenced_works == ["W2"]


def test_non_numeric_year_and_non_string_list_items_are_tolerated():
    papers = parse_papers(
        [{"id": "W1", "year": "unknown", "authors": ["Ada", 3, None], "keywords": "oops"}]
    )

    p = papers[0]
    assert p.year == 0
    assert p.authors == ("Ada",)
    assert p.keywords == ()


def test_records_without_id_or_not_objects_are_skipped():
    papers = parse_papers([{"title": "no id"}, {"id": "  "}, 42, {"id": "W1"}])

    assert [p.id for p in papers] == ["W1"]


def test_empty_or_non_array_corpus_is_rejected():
    with pytest.raises(CorpusLoadError):
        parse_papers([])

    with pytest.raises(CorpusLoadError):
        parse_papers({"id": "W1"})

    with pytest.raises(CorpusLoadError):
        parse_papers([{"title": "only junk"}])


def test_malformed_json_raises_corpus_load_error(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("[{\"id\": \"W1\",", encoding="utf-8")

    with pytest.raises(CorpusLoadError) as excinfo:
        load_papers(path)

    assert "Malformed JSON" in str(excinfo.value)


def test_missing_file_raises_corpus_load_error(tmp_path):
    with pytest.raises(CorpusLoadError):
        load_papers(tmp_path / "nope.json")


def test_find_data_file_prefers_explicit_then_settings(tmp_path, monkeypatch):
    explicit = _write_corpus(tmp_path, [{"id": "W1"}], name="explicit.json")
    configured = _write_corpus(tmp_path, [{"id": "W2"}], name="configured.json")

    assert find_data_file(explicit) == explicit

    monkeypatch.setattr(loader_module.settings, "DATA_FILE", configured)
    assert find_data_file() == configured

    with pytest.raises(CorpusLoadError):
        find_data_file(tmp_path / "missing.json")


def test_find_data_file_falls_back_to_cwd_data_json(tmp_path, monkeypatch):
    monkeypatch.setattr(loader_module.settings, "DATA_FILE", None)
    monkeypatch.chdir(tmp_path)

    with pytest.raises(CorpusLoadError):
        find_data_file()

    _write_corpus(tmp_path, [{"id": "W1"}])
    assert find_data_file().name == "data.json"
