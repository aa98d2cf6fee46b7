"""
Tests for the annotations file store.

Validates:
- Path resolution from HOME
- Loading (empty, missing, malformed files)
- Append ordering
- Full rewrites on save
"""

import pytest

from annotate.annotation import Annotation
from annotate.errors import CorruptStoreError, HomeNotSetError, MissingDelimiterError
from annotate.store import AnnotationStore, resolve_path


@pytest.fixture
def store(tmp_path):
    return AnnotationStore(tmp_path / ".annotations")


class TestResolvePath:

    def test_home_based_path(self, tmp_path):
        assert resolve_path({"HOME": str(tmp_path)}) == tmp_path / ".annotations"

    def test_custom_filename(self, tmp_path):
        assert resolve_path({"HOME": str(tmp_path)}, ".notes") == tmp_path / ".notes"

    def test_missing_home(self):
        with pytest.raises(HomeNotSetError):
            resolve_path({})

    def test_empty_home(self):
        with pytest.raises(HomeNotSetError):
            resolve_path({"HOME": ""})

    def test_from_environment_uses_config_filename(self, tmp_path):
        config = {"store": {"filename": ".jots"}}
        store = AnnotationStore.from_environment({"HOME": str(tmp_path)}, config=config)
        assert store.path == tmp_path / ".jots"

    def test_from_environment_reads_default_config(self, tmp_path):
        store = AnnotationStore.from_environment({"HOME": str(tmp_path)})
        assert store.path == tmp_path / ".annotations"


class TestLoad:

    def test_missing_file_is_created_empty(self, store):
        assert not store.path.exists()
        assert store.load() == []
        assert store.path.exists()
        assert store.path.read_text() == ""

    def test_empty_file(self, store):
        store.path.write_text("")
        assert store.load() == []

    def test_two_records_in_file_order(self, store):
        store.path.write_text("1000 hello\n2000 world\n")
        annotations = store.load()
        assert [a.content for a in annotations] == ["hello", "world"]
        assert [a.created_at for a in annotations] == [1000, 2000]

    def test_blank_lines_skipped(self, store):
        store.path.write_text("\n1000 hello\n\n\n2000 world")
        assert len(store.load()) == 2

    def test_crlf_line_endings(self, store):
        store.path.write_bytes(b"1000 hello\r\n2000 world\r\n")
        assert [a.content for a in store.load()] == ["hello", "world"]

    def test_malformed_line_aborts_load(self, store):
        store.path.write_text("1000 hello\nhelloworld\n2000 world\n")
        with pytest.raises(CorruptStoreError) as excinfo:
            store.load()
        assert excinfo.value.lineno == 2
        assert isinstance(excinfo.value.__cause__, MissingDelimiterError)

    def test_invalid_utf8_aborts_load(self, store):
        store.path.write_bytes(b"1000 hello\n2000 caf\xe9\n")
        with pytest.raises(CorruptStoreError) as excinfo:
            store.load()
        assert excinfo.value.lineno == 2
        assert isinstance(excinfo.value.__cause__, UnicodeDecodeError)

    def test_bad_timestamp_aborts_load(self, store):
        store.path.write_text("soon hello\n")
        with pytest.raises(CorruptStoreError):
            store.load()


class TestAppend:

    def test_append_creates_file(self, store):
        annotation = store.append("first", now=1000)
        assert annotation == Annotation(content="first", created_at=1000)
        assert store.path.read_text() == "1000 first\n"

    def test_append_then_load_keeps_order(self, store):
        contents = [f"note {i}" for i in range(5)]
        for i, content in enumerate(contents):
            store.append(content, now=1000 + i)
        loaded = store.load()
        assert [a.content for a in loaded] == contents
        assert [a.created_at for a in loaded] == [1000, 1001, 1002, 1003, 1004]

    def test_append_stamps_current_time(self, store):
        annotation = store.append("now")
        assert store.load() == [annotation]

    def test_append_io_error_propagates(self, tmp_path):
        store = AnnotationStore(tmp_path / "missing-dir" / ".annotations")
        with pytest.raises(OSError):
            store.append("lost")

    def test_append_rejects_newlines_without_writing(self, store):
        with pytest.raises(ValueError):
            store.append("one\ntwo")
        assert not store.path.exists()


class TestSave:

    def test_save_overwrites(self, store):
        store.path.write_text("1000 hello\n2000 world\n3000 again\n")
        annotations = store.load()
        del annotations[1]
        store.save(annotations)
        assert store.path.read_text() == "1000 hello\n3000 again\n"

    def test_delete_first_scenario(self, store):
        store.path.write_text("1000 hello\n2000 world\n")
        annotations = store.load()
        annotations.pop(0)
        store.save(annotations)
        assert store.path.read_text() == "2000 world\n"

    def test_save_empty_truncates(self, store):
        store.path.write_text("1000 hello\n")
        store.save([])
        assert store.path.read_text() == ""
        assert store.load() == []
