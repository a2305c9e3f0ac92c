"""Tests for the resolution of directory values."""

import os
from pathlib import Path, PurePosixPath

import pytest

from openmw_config.resolve import normalize_path, quote, resolve_directory, unquote


class TestUnquote:
    """Test suite for the quoting rules of directory values."""

    def test_unquoted_value(self):
        """Values without a leading quote are returned unchanged."""
        assert unquote("data files") == "data files"

    def test_quoted_value(self):
        """Quotes are stripped."""
        assert unquote('"/opt/Data Files"') == "/opt/Data Files"

    def test_escapes(self):
        """An ampersand escapes the character which follows it."""
        assert unquote('"a&"b"') == 'a"b'
        assert unquote('"Tom && Jerry"') == "Tom & Jerry"

    def test_text_after_closing_quote_is_dropped(self):
        assert unquote('"abc"def') == "abc"

    def test_missing_closing_quote(self):
        """A missing closing quote ends the value at the end of the string."""
        assert unquote('"/opt/data') == "/opt/data"

    def test_quote_is_inverse(self):
        """Quoting then unquoting gives back the path text."""
        path = PurePosixPath('/opt/Tom & "Jerry"')
        assert quote(path) == '"/opt/Tom && &"Jerry&""'
        assert unquote(quote(path)) == str(path)


class TestNormalizePath:
    """Test suite for the lexical path normalization."""

    def test_current_dir_dropped(self):
        assert normalize_path(Path("/a/./b/.")) == Path("/a/b")

    def test_parent_dir_pops(self):
        assert normalize_path(Path("/a/b/../c")) == Path("/a/c")

    def test_root_never_popped(self):
        """A `..` above the root is ignored."""
        assert normalize_path(Path("/../../a")) == Path("/a")

    def test_no_filesystem_access(self, tmp_path):
        """Nonexistent paths are normalized all the same."""
        path = tmp_path / "missing" / ".." / "other"
        assert normalize_path(path) == tmp_path / "other"


class TestResolveDirectory:
    """Test suite for the full directory value resolution."""

    def test_relative_to_config_dir(self, tmp_path):
        """Relative values are anchored on the declaring file directory."""
        assert resolve_directory("data", tmp_path) == tmp_path / "data"

    def test_absolute_value(self, tmp_path):
        assert resolve_directory('"/opt/morrowind"', tmp_path) == Path(
            "/opt/morrowind"
        )

    def test_relative_parent(self, tmp_path):
        cfg_dir = tmp_path / "a" / "b"
        assert resolve_directory('"../c"', cfg_dir) == tmp_path / "a" / "c"

    def test_userdata_token(self, tmp_path):
        userdata = tmp_path / "userdata"
        result = resolve_directory(
            '"?userdata?/saves"', tmp_path / "cfg", userdata_dir=userdata
        )
        assert result == userdata / "saves"

    def test_userconfig_token(self, tmp_path):
        userconfig = tmp_path / "userconfig"
        result = resolve_directory(
            "?userconfig?mods", tmp_path / "cfg", userconfig_dir=userconfig
        )
        assert result == userconfig / "mods"

    def test_bare_token(self, tmp_path):
        """A token alone resolves to the injected directory itself."""
        userdata = tmp_path / "userdata"
        result = resolve_directory("?userdata?", tmp_path, userdata_dir=userdata)
        assert result == userdata

    @pytest.mark.skipif(os.sep != "/", reason="POSIX separator expected")
    def test_backslashes(self, tmp_path):
        """Both separators are accepted."""
        result = resolve_directory('"mods\\Tamriel Data"', tmp_path)
        assert result == tmp_path / "mods" / "Tamriel Data"

    def test_result_is_absolute(self, tmp_path):
        assert resolve_directory("./x/../y", tmp_path).is_absolute()
