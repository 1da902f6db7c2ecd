"""Tests for mimemap/registry.py."""

import gzip
import io
import logging
import threading

import httpx
import pytest

from src.config import Settings
from src.mimemap.constants import FALLBACK_MIME_TYPE
from src.mimemap.exceptions import ArgumentError, ParseError, ReadError
from src.mimemap.registry import MimeTypes, load_table
from src.mimemap.table import MimeTable

SAMPLE = """\
image/jpeg jpg jpeg jpe
video/jpg          # skipped: no suffix token
text/plain txt;text,log
audio/ogg oga ogg
video/ogg ogv ogg
"""


@pytest.fixture(scope="module")
def default_mime_types():
    return MimeTypes.from_default_dataset()


@pytest.fixture
def mime_types():
    registry = MimeTypes()
    registry.reload_from(SAMPLE.encode("utf-8"))
    return registry


class TestDefaultDataset:
    """Lookups against the bundled dataset."""

    def test_mp4_single_match(self, default_mime_types):
        assert default_mime_types.mime_types_for_file_name("test.mp4") == ["video/mp4"]

    def test_ogg_audio_and_video(self, default_mime_types):
        ogg = default_mime_types.mime_types_for_file_name("test.ogg")
        assert "video/ogg" in ogg
        assert "audio/ogg" in ogg
        assert len(ogg) == 2

    def test_no_extension_returns_fallback(self, default_mime_types):
        assert default_mime_types.mime_types_for_file_name("noextension") == [
            "application/octet-stream"
        ]

    def test_trailing_dot_returns_fallback(self, default_mime_types):
        assert default_mime_types.mime_types_for_file_name("trailing.") == [
            "application/octet-stream"
        ]

    def test_unknown_extension_returns_fallback(self, default_mime_types):
        assert default_mime_types.mime_types_for_file_name("file.notarealsuffix") == [
            "application/octet-stream"
        ]

    def test_case_insensitive(self, default_mime_types):
        assert default_mime_types.mime_types_for_file_name(
            "TEST.MP4"
        ) == default_mime_types.mime_types_for_file_name("test.mp4")

    def test_is_media(self, default_mime_types):
        assert default_mime_types.is_media("photo.png")
        assert not default_mime_types.is_media("book.pdf")

    def test_categories(self, default_mime_types):
        assert default_mime_types.is_image("photo.png")
        assert default_mime_types.is_video("clip.mp4")
        assert default_mime_types.is_audio("song.ogg")
        assert default_mime_types.is_video("song.ogg")
        assert not default_mime_types.is_audio("clip.mp4")
        assert not default_mime_types.is_text("photo.png")

    def test_extensions_for_png(self, default_mime_types):
        assert default_mime_types.mime_type_extensions("image/png") == ["png"]

    def test_extensions_for_mp4(self, default_mime_types):
        assert default_mime_types.mime_type_extensions("VIDEO/MP4") == ["mp4", "mpg4", "m4v"]

    def test_all_mime_types_distinct(self, default_mime_types):
        all_types = default_mime_types.all_mime_types()
        assert len(all_types) == len({t.lower() for t in all_types})
        assert "video/mp4" in all_types

    def test_bidirectional_consistency(self, default_mime_types):
        for mime_type in default_mime_types.all_mime_types():
            for suffix in default_mime_types.mime_type_extensions(mime_type):
                found, types = default_mime_types.types_for_suffix(suffix)
                assert found
                assert mime_type in types


class TestQueries:
    """Tests for lookups on a small table."""

    def test_types_for_suffix(self, mime_types):
        assert mime_types.types_for_suffix("ogg") == (True, ["audio/ogg", "video/ogg"])
        assert mime_types.types_for_suffix("mp4") == (False, [])

    def test_types_for_suffix_none_raises(self, mime_types):
        with pytest.raises(ArgumentError):
            mime_types.types_for_suffix(None)

    def test_try_found(self, mime_types):
        assert mime_types.try_mime_types_for_file_name("notes.log") == (True, ["text/plain"])

    def test_try_not_found(self, mime_types):
        assert mime_types.try_mime_types_for_file_name("clip.mp4") == (False, [])
        assert mime_types.try_mime_types_for_file_name("noextension") == (False, [])

    def test_try_none_is_not_an_error(self, mime_types):
        assert mime_types.try_mime_types_for_file_name(None) == (False, [])

    def test_file_name_none_raises(self, mime_types):
        with pytest.raises(ArgumentError) as exc_info:
            mime_types.mime_types_for_file_name(None)
        assert exc_info.value.argument == "file_name"

    def test_extensions_none_raises(self, mime_types):
        with pytest.raises(ArgumentError) as exc_info:
            mime_types.mime_type_extensions(None)
        assert exc_info.value.argument == "mime_type"

    def test_extensions_unknown_type(self, mime_types):
        assert mime_types.mime_type_extensions("video/jpg") == []

    def test_predicate_none_raises(self, mime_types):
        with pytest.raises(ArgumentError):
            mime_types.is_media(None)

    def test_comment_line_contributes_nothing(self, mime_types):
        assert "video/jpg" not in mime_types.all_mime_types()

    def test_all_mime_types_round_trip(self, mime_types):
        assert mime_types.all_mime_types() == [
            "image/jpeg",
            "text/plain",
            "audio/ogg",
            "video/ogg",
        ]

    def test_is_text(self, mime_types):
        assert mime_types.is_text("readme.txt")
        assert not mime_types.is_text("photo.jpg")

    def test_empty_registry(self):
        registry = MimeTypes()
        assert registry.all_mime_types() == []
        assert registry.mime_types_for_file_name("test.mp4") == [FALLBACK_MIME_TYPE]


class TestFallback:
    """Tests for fallback_mime_type."""

    def test_default(self):
        assert MimeTypes().fallback_mime_type == "application/octet-stream"

    def test_constructor_value(self):
        assert MimeTypes(fallback_mime_type="text/plain").fallback_mime_type == "text/plain"

    def test_set_and_used(self, mime_types):
        mime_types.fallback_mime_type = "application/x-unknown"
        assert mime_types.mime_types_for_file_name("clip.mp4") == ["application/x-unknown"]

    def test_set_none_restores_default(self, mime_types):
        mime_types.fallback_mime_type = "application/x-unknown"
        mime_types.fallback_mime_type = None
        assert mime_types.fallback_mime_type == "application/octet-stream"

    def test_empty_string_is_kept(self, mime_types):
        mime_types.fallback_mime_type = ""
        assert mime_types.fallback_mime_type == ""
        assert mime_types.mime_types_for_file_name("noextension") == [""]

    def test_predicates_use_fallback(self, mime_types):
        assert not mime_types.is_text("noextension")
        mime_types.fallback_mime_type = "text/plain"
        assert mime_types.is_text("noextension")


class TestReload:
    """Tests for reload_from and replace."""

    def test_reload_is_idempotent(self, mime_types):
        mime_types.reload_from(SAMPLE.encode("utf-8"))
        first = (
            mime_types.all_mime_types(),
            mime_types.mime_types_for_file_name("a.ogg"),
            mime_types.mime_type_extensions("text/plain"),
        )
        mime_types.reload_from(SAMPLE.encode("utf-8"))
        second = (
            mime_types.all_mime_types(),
            mime_types.mime_types_for_file_name("a.ogg"),
            mime_types.mime_type_extensions("text/plain"),
        )
        assert first == second

    def test_reload_keeps_form_feed_inside_suffix(self, mime_types):
        mime_types.reload_from(b"text/plain txt\x0clog\n")
        assert mime_types.types_for_suffix("txt\x0clog") == (True, ["text/plain"])
        assert mime_types.types_for_suffix("txt") == (False, [])

    def test_reload_replaces_everything(self, mime_types):
        mime_types.reload_from(b"image/png png\n")
        assert mime_types.all_mime_types() == ["image/png"]
        assert mime_types.try_mime_types_for_file_name("a.txt") == (False, [])

    def test_reload_from_gzip(self, mime_types):
        mime_types.reload_from(gzip.compress(b"image/png png\n"))
        assert mime_types.mime_types_for_file_name("a.png") == ["image/png"]

    def test_reload_from_path(self, mime_types, tmp_path):
        path = tmp_path / "mime.types"
        path.write_text("application/json json\n", encoding="utf-8")
        mime_types.reload_from(path)
        assert mime_types.mime_types_for_file_name("data.json") == ["application/json"]

    def test_reload_from_stream(self, mime_types):
        mime_types.reload_from(io.BytesIO(b"image/gif gif\n"))
        assert mime_types.mime_types_for_file_name("a.gif") == ["image/gif"]

    def test_reload_plain_hint(self, mime_types):
        mime_types.reload_from(b"image/gif gif\n", compressed=False)
        assert mime_types.all_mime_types() == ["image/gif"]

    def test_unreadable_source_keeps_table(self, mime_types, tmp_path):
        before = mime_types.table
        with pytest.raises(ReadError):
            mime_types.reload_from(tmp_path / "missing.types")
        assert mime_types.table is before
        assert mime_types.mime_types_for_file_name("a.ogg") == ["audio/ogg", "video/ogg"]

    def test_corrupt_source_keeps_table(self, mime_types):
        before = mime_types.table
        with pytest.raises(ParseError) as exc_info:
            mime_types.reload_from(b"\xff\xfe\x00\x81")
        assert exc_info.value.source == "<4 bytes>"
        assert mime_types.table is before

    def test_required_gzip_keeps_table(self, mime_types):
        before = mime_types.table
        with pytest.raises(ParseError):
            mime_types.reload_from(b"image/png png\n", compressed=True)
        assert mime_types.table is before

    def test_rejected_reload_logged(self, mime_types, caplog):
        with pytest.raises(ReadError):
            mime_types.reload_from(b"\xff\xff")
        assert "Reload rejected" in caplog.text

    def test_reload_logged(self, mime_types, caplog):
        caplog.set_level(logging.INFO, logger="src.mimemap.registry")
        mime_types.reload_from(b"image/png png\n")
        assert "1 suffixes, 1 types" in caplog.text

    def test_replace_publishes_table(self, mime_types):
        table = MimeTable.build({"bin": ["application/octet-stream"]})
        mime_types.replace(table)
        assert mime_types.table is table

    def test_replace_none_raises(self, mime_types):
        with pytest.raises(ArgumentError):
            mime_types.replace(None)

    def test_old_snapshot_unchanged_after_reload(self, mime_types):
        old = mime_types.table
        mime_types.reload_from(b"image/png png\n")
        assert old.types_for_suffix("ogg") == (True, ["audio/ogg", "video/ogg"])
        assert "png" not in old

    def test_concurrent_readers_see_whole_tables(self):
        table_a = load_table(b"a/one x\na/two x\n")
        table_b = load_table(b"b/one x\n")
        registry = MimeTypes(table_a)
        allowed = (["a/one", "a/two"], ["b/one"])
        errors: list[list[str]] = []
        stop = threading.Event()

        def reader():
            while not stop.is_set():
                result = registry.mime_types_for_file_name("file.x")
                if result not in allowed:
                    errors.append(result)

        readers = [threading.Thread(target=reader) for _ in range(4)]
        for thread in readers:
            thread.start()
        for i in range(500):
            registry.replace(table_b if i % 2 == 0 else table_a)
        stop.set()
        for thread in readers:
            thread.join()

        assert errors == []


class TestLifecycle:
    """Tests for initialize and the class constructors."""

    def test_initialize_loads_bundled_dataset(self):
        registry = MimeTypes()
        registry.initialize()
        assert registry.mime_types_for_file_name("test.mp4") == ["video/mp4"]

    def test_missing_dataset_gives_empty_table(self, monkeypatch, caplog):
        monkeypatch.setattr("src.mimemap.registry.default_dataset", lambda: None)
        registry = MimeTypes.from_default_dataset()
        assert registry.all_mime_types() == []
        assert registry.mime_types_for_file_name("test.mp4") == ["application/octet-stream"]
        assert "dataset not found" in caplog.text

    def test_corrupt_dataset_gives_empty_table(self, monkeypatch, caplog):
        monkeypatch.setattr("src.mimemap.registry.default_dataset", lambda: b"not gzip")
        registry = MimeTypes.from_default_dataset()
        assert registry.all_mime_types() == []
        assert "unreadable" in caplog.text

    def test_missing_dataset_then_reload(self, monkeypatch):
        monkeypatch.setattr("src.mimemap.registry.default_dataset", lambda: None)
        registry = MimeTypes.from_default_dataset()
        registry.reload_from(b"video/mp4 mp4\n")
        assert registry.mime_types_for_file_name("test.mp4") == ["video/mp4"]

    def test_from_settings_defaults(self):
        registry = MimeTypes.from_settings(Settings())
        assert registry.fallback_mime_type == "application/octet-stream"
        assert registry.mime_types_for_file_name("test.mp4") == ["video/mp4"]

    def test_from_settings_types_file(self, tmp_path):
        path = tmp_path / "custom.types"
        path.write_text("video/x-custom mp4\n", encoding="utf-8")
        registry = MimeTypes.from_settings(
            Settings(types_file=str(path), fallback_mime_type="application/x-none")
        )
        assert registry.mime_types_for_file_name("test.mp4") == ["video/x-custom"]
        assert registry.mime_types_for_file_name("noext") == ["application/x-none"]

    def test_from_settings_missing_types_file_raises(self, tmp_path):
        with pytest.raises(ReadError):
            MimeTypes.from_settings(Settings(types_file=str(tmp_path / "missing")))

    def test_repr(self, mime_types):
        assert repr(mime_types) == (
            "MimeTypes(MimeTable(suffixes=9, types=4), fallback='application/octet-stream')"
        )


class TestAsyncReload:
    """Tests for areload_from and areload_from_url."""

    async def test_areload_from(self, mime_types):
        await mime_types.areload_from(b"image/webp webp\n")
        assert mime_types.mime_types_for_file_name("a.webp") == ["image/webp"]

    async def test_areload_from_keeps_table_on_error(self, mime_types):
        before = mime_types.table
        with pytest.raises(ParseError):
            await mime_types.areload_from(b"\xff\xff")
        assert mime_types.table is before

    async def test_areload_from_url(self, mime_types):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, content=gzip.compress(b"font/woff2 woff2\n"))

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await mime_types.areload_from_url("https://example.com/mime.types.gz", client=client)
        assert mime_types.all_mime_types() == ["font/woff2"]

    async def test_areload_from_url_failure_keeps_table(self, mime_types):
        before = mime_types.table

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(500)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            with pytest.raises(ReadError):
                await mime_types.areload_from_url("https://example.com/mime.types", client=client)
        assert mime_types.table is before
