"""Tests for loading and reloading stylesheet files."""

import os

from restyle.css.properties import PropertyKind
from restyle.loader import WatchedStylesheet, decode_stylesheet, load_stylesheet


class TestDecode:
    def test_plain_utf8(self):
        assert decode_stylesheet(".a { font-family: \"Ñandú\" }".encode()) == '.a { font-family: "Ñandú" }'

    def test_bom(self):
        assert decode_stylesheet(b"\xef\xbb\xbf.a {}") == ".a {}"

    def test_charset_rule(self):
        data = '@charset "latin-1";.a { font-family: "é" }'.encode("latin-1")
        assert decode_stylesheet(data) == '.a { font-family: "é" }'

    def test_unknown_charset(self):
        assert decode_stylesheet(b'@charset "nope";.a {}') == ".a {}"


class TestLoad:
    def test_file_name_is_used(self, tmp_path, caplog):
        path = tmp_path / "theme.css"
        path.write_text(".a { color: nope }")
        sheet = load_stylesheet(path)
        assert sheet.options["file_name"] == str(path)
        assert f"{path}:1:13" in caplog.text

    def test_reload_on_change(self, tmp_path):
        path = tmp_path / "theme.css"
        path.write_text(".a { width: 1px }")
        watched = WatchedStylesheet(path)
        first = watched.sheet
        assert not watched.reload()

        path.write_text(".a { width: 2px } .b { height: 1px }")
        stat = path.stat()
        os.utime(path, ns=(stat.st_atime_ns, watched.mtime + 1_000_000_000))

        assert watched.reload()
        assert watched.sheet is not first
        assert len(watched.sheet) == 2
        assert len(first) == 1
        assert first.rules[0].properties[0].kind is PropertyKind.Width

    def test_missing_file_keeps_sheet(self, tmp_path):
        path = tmp_path / "theme.css"
        path.write_text(".a { width: 1px }")
        watched = WatchedStylesheet(path)
        path.unlink()
        assert not watched.reload()
        assert len(watched.sheet) == 1
