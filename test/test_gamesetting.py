"""Tests for the typed fallback settings."""

from pathlib import Path

import pytest

from openmw_config.errors import InvalidGameSettingError
from openmw_config.gamesetting import GameSetting, GameSettingType, parse_color_value
from openmw_config.meta import CommentBuffer


class TestGameSetting:
    """Test suite for the parsing of `fallback=` values."""

    def test_color(self):
        setting = GameSetting.parse("Weather_Sky_Color,128,64,255")
        assert setting.key == "Weather_Sky_Color"
        assert setting.kind is GameSettingType.COLOR
        assert setting.value == (128, 64, 255)

    def test_float(self):
        setting = GameSetting.parse("Water_Map_Alpha,1.5")
        assert setting.kind is GameSettingType.FLOAT
        assert setting.value == 1.5

    def test_int(self):
        setting = GameSetting.parse("Some_Count,7")
        assert setting.kind is GameSettingType.INT
        assert setting.value == 7

    def test_negative_int(self):
        setting = GameSetting.parse("Some_Offset,-3")
        assert setting.kind is GameSettingType.INT
        assert setting.value == -3

    def test_string_keeps_commas(self):
        """Only the first comma separates the key from the value."""
        setting = GameSetting.parse("Greeting,hi,there")
        assert setting.kind is GameSettingType.STRING
        assert setting.value == "hi,there"

    def test_out_of_range_color_is_string(self):
        setting = GameSetting.parse("Color,256,0,0")
        assert setting.kind is GameSettingType.STRING

    def test_int_out_of_range_is_string(self):
        setting = GameSetting.parse(f"Big,{2**63}")
        assert setting.kind is GameSettingType.STRING

    def test_missing_comma(self):
        with pytest.raises(InvalidGameSettingError) as excinfo:
            GameSetting.parse("NoValue", Path("/cfg/openmw.cfg"))
        assert excinfo.value.value == "NoValue"
        assert excinfo.value.config_path == Path("/cfg/openmw.cfg")

    def test_original_text_kept(self):
        """The value text is re-emitted exactly as written."""
        setting = GameSetting.parse("Water_Map_Alpha,1.50")
        assert setting.text == "Water_Map_Alpha,1.50"

    def test_canonical_text(self):
        """Settings built without original text render canonically."""
        setting = GameSetting("Fog", GameSettingType.COLOR, (1, 2, 3))
        assert setting.text == "Fog,1,2,3"

    def test_comment_is_taken(self):
        """A comment buffer is consumed by the parse."""
        comments = CommentBuffer()
        comments.push("# sky")
        setting = GameSetting.parse("Sky,1", comment=comments)
        assert setting.meta.comment == "# sky\n"
        assert not comments

    def test_equality(self):
        """Game settings are equal if their key and type are."""
        assert GameSetting.parse("A,1") == GameSetting.parse("A,2")
        assert GameSetting.parse("A,1") != GameSetting.parse("A,1.0")
        assert GameSetting.parse("A,1") != GameSetting.parse("B,1")
        assert GameSetting.parse("A,1") == "A"


def test_parse_color_value():
    assert parse_color_value("0, 10, 255") == (0, 10, 255)
    assert parse_color_value("0,10") is None
    assert parse_color_value("0,10,-1") is None
