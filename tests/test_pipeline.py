"""Tests for document readers, report output and the pipeline."""

import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

import gzip
import json

import pytest

from vocab_masker import Document, DetectionRecord, build_vocabulary, iter_documents, run_pipeline
from vocab_masker.errors import InvalidDocumentIdError, MissingDocumentIdError, UnsupportedInputError
from vocab_masker.report import format_record, merge_parts


def _write_gz(path, lines):
    with gzip.open(path, "wt", encoding="utf-8") as f:
        for line in lines:
            f.write(line if isinstance(line, str) else json.dumps(line))
            f.write("\n")
    return path


def _leftover_parts(directory):
    return [p for p in directory.iterdir() if p.suffix == ".part"]


# ── Readers ──────────────────────────────────────────────────────────

def test_plain_text_is_one_document(tmp_path):
    path = tmp_path / "note.txt"
    path.write_text("first\n\nsecond", encoding="utf-8")
    assert list(iter_documents(path)) == [Document(raw_text="first\n\nsecond", document_id="")]


def test_jsonl_gz_skips_bad_lines(tmp_path):
    path = _write_gz(tmp_path / "corpus.jsonl.gz", [
        {"corpusid": 1, "content": {"text": "alpha"}},
        "",
        "{not json",
        {"corpusid": 2, "content": {"title": "no text"}},
        {"corpusid": 3, "content": {"text": "gamma"}},
    ])
    docs = list(iter_documents(path))
    assert docs == [Document("alpha", "1"), Document("gamma", "3")]


def test_jsonl_gz_custom_fields(tmp_path):
    path = _write_gz(tmp_path / "corpus.gz", [{"doc": 9, "body": {"text": "beta"}}])
    docs = list(iter_documents(path, text_field="body", id_field="doc"))
    assert docs == [Document("beta", "9")]


def test_jsonl_gz_missing_id_is_fatal(tmp_path):
    path = _write_gz(tmp_path / "corpus.gz", [{"content": {"text": "alpha"}}])
    with pytest.raises(MissingDocumentIdError) as info:
        list(iter_documents(path))
    assert info.value.line_no == 1


@pytest.mark.parametrize("doc_id", [None, "abc", 5.0, True])
def test_jsonl_gz_non_integer_id_is_fatal(tmp_path, doc_id):
    path = _write_gz(tmp_path / "corpus.gz", [{"corpusid": doc_id, "content": {"text": "alpha"}}])
    with pytest.raises(InvalidDocumentIdError) as info:
        list(iter_documents(path))
    assert info.value.value == doc_id


def test_jsonl_gz_line_cap(tmp_path):
    path = _write_gz(tmp_path / "corpus.gz", [
        {"corpusid": i, "content": {"text": f"doc {i}"}} for i in range(5)
    ])
    docs = list(iter_documents(path, max_lines=3))
    assert [d.document_id for d in docs] == ["0", "1", "2"]


def test_unsupported_extension(tmp_path):
    with pytest.raises(UnsupportedInputError):
        iter_documents(tmp_path / "paper.pdf")


# ── Report ───────────────────────────────────────────────────────────

def test_format_record_escapes_quotes():
    record = DetectionRecord('say "<MASK>"', "Glucose", 5, "77")
    assert format_record(record) == '"Glucose",5,"say \\"<MASK>\\"",77\n'


def test_merge_parts_removes_parts(tmp_path):
    a = tmp_path / "a.part"
    b = tmp_path / "b.part"
    a.write_text("one\n")
    b.write_text("two\n")
    out = tmp_path / "out.csv"
    assert merge_parts([b, a], out) == 8
    assert out.read_text() == "two\none\n"
    assert not a.exists() and not b.exists()


# ── Pipeline ─────────────────────────────────────────────────────────

def test_end_to_end_structured_input(tmp_path):
    vocab = build_vocabulary(["43\tPhenol peroxidase"])
    corpus = _write_gz(tmp_path / "corpus.jsonl.gz", [
        '{"corpusid":533,"content":{"text":"this is a Phenol peroxidase of \\"json\\""}}',
    ])
    out = tmp_path / "report.csv"

    summary = run_pipeline(vocab, [corpus], out, progress=False)

    assert out.read_text(encoding="utf-8") == (
        '"Phenol peroxidase",43,"this is a <MASK> of \\"json\\"",533\n'
    )
    assert summary.records == 1
    assert summary.documents == 1
    assert _leftover_parts(tmp_path) == []


def test_multiple_inputs_are_merged(tmp_path):
    vocab = build_vocabulary(["1\tapple", "2\torange"])
    note = tmp_path / "note.txt"
    note.write_text("an apple\n\nan orange", encoding="utf-8")
    corpus = _write_gz(tmp_path / "corpus.gz", [
        {"corpusid": 10, "content": {"text": "one orange"}},
        {"corpusid": 11, "content": {"text": "nothing here"}},
    ])
    out = tmp_path / "out" / "report.csv"

    summary = run_pipeline(vocab, [note, corpus], out, max_workers=2, progress=False)

    lines = sorted(out.read_text(encoding="utf-8").splitlines())
    assert lines == sorted([
        '"Apple",1,"an <MASK>",',
        '"Orange",2,"an <MASK>",',
        '"Orange",2,"one <MASK>",10',
    ])
    assert summary.files_processed == 2
    assert summary.documents == 3
    assert _leftover_parts(out.parent) == []


def test_unreadable_file_is_abandoned(tmp_path):
    vocab = build_vocabulary(["1\tapple"])
    note = tmp_path / "note.txt"
    note.write_text("an apple", encoding="utf-8")
    out = tmp_path / "report.csv"

    summary = run_pipeline(vocab, [tmp_path / "missing.txt", note], out, progress=False)

    assert summary.files_failed == 1
    assert summary.files_processed == 1
    assert out.read_text(encoding="utf-8") == '"Apple",1,"an <MASK>",\n'
    assert _leftover_parts(tmp_path) == []


def test_truncated_gz_is_abandoned(tmp_path):
    vocab = build_vocabulary(["1\tapple"])
    note = tmp_path / "note.txt"
    note.write_text("an apple", encoding="utf-8")
    whole = _write_gz(tmp_path / "whole.gz", [
        {"corpusid": i, "content": {"text": "an apple " * 50}} for i in range(20)
    ]).read_bytes()
    truncated = tmp_path / "truncated.gz"
    truncated.write_bytes(whole[: len(whole) // 2])
    (tmp_path / "whole.gz").unlink()
    out = tmp_path / "report.csv"

    summary = run_pipeline(vocab, [note, truncated], out, progress=False)

    assert summary.files_failed == 1
    assert summary.files_processed == 1
    assert out.read_text(encoding="utf-8") == '"Apple",1,"an <MASK>",\n'
    assert _leftover_parts(tmp_path) == []


def test_corrupt_gz_is_abandoned(tmp_path):
    vocab = build_vocabulary(["1\tapple"])
    whole = _write_gz(tmp_path / "corpus.gz", [{"corpusid": 1, "content": {"text": "an apple"}}])
    data = bytearray(whole.read_bytes())
    data[12:20] = b"\xff" * 8
    whole.write_bytes(bytes(data))
    out = tmp_path / "report.csv"

    summary = run_pipeline(vocab, [whole], out, progress=False)

    assert summary.files_failed == 1
    assert out.read_text(encoding="utf-8") == ""
    assert _leftover_parts(tmp_path) == []


def test_unsupported_input_aborts_run(tmp_path):
    vocab = build_vocabulary(["1\tapple"])
    note = tmp_path / "note.txt"
    note.write_text("an apple", encoding="utf-8")
    out = tmp_path / "report.csv"

    with pytest.raises(UnsupportedInputError):
        run_pipeline(vocab, [note, tmp_path / "paper.pdf"], out, progress=False)
    assert not out.exists()
    assert _leftover_parts(tmp_path) == []


def test_missing_id_aborts_run(tmp_path):
    vocab = build_vocabulary(["1\tapple"])
    corpus = _write_gz(tmp_path / "corpus.gz", [{"content": {"text": "an apple"}}])
    out = tmp_path / "report.csv"

    with pytest.raises(MissingDocumentIdError):
        run_pipeline(vocab, [corpus], out, progress=False)
    assert _leftover_parts(tmp_path) == []


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
