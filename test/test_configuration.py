"""Tests for the configuration model mutation API."""

import pytest

from openmw_config import load_config
from openmw_config.errors import BadEncodingError, DuplicateEntryError
from openmw_config.gamesetting import GameSetting, GameSettingType
from openmw_config.settings import EncodingType, SettingKind


@pytest.fixture(name="chain")
def fixture_chain(write_cfg, user_dirs):
    """Two-file chain: a root config and a user config."""
    root = write_cfg(
        None,
        "resources=res\n"
        "data=base\n"
        "content=Morrowind.esm\n"
        "fallback-archive=Morrowind.bsa\n"
        "fallback=Water_Map_Alpha,0.4\n"
        "config=user\n",
    )
    write_cfg(
        "user",
        "data-local=local\n"
        "content=Tribunal.esm\n"
        "# alpha override\n"
        "fallback=Water_Map_Alpha,0.5\n",
    )

    return load_config(root, **user_dirs)


class TestConfiguration:
    """Test suite for the read and write accessors of a configuration."""

    def test_add_content_file(self, chain):
        chain.add_content_file("Bloodmoon.esm")

        assert chain.content_files() == [
            "Morrowind.esm",
            "Tribunal.esm",
            "Bloodmoon.esm",
        ]
        assert chain.has_content_file("Bloodmoon.esm")
        added = chain.content_files()[-1]
        assert added.meta.source_config == chain.user_config_file()
        assert added.meta.comment == ""

    def test_add_duplicate(self, chain):
        with pytest.raises(DuplicateEntryError) as excinfo:
            chain.add_content_file("Morrowind.esm")

        assert excinfo.value.from_api
        assert excinfo.value.first_config == chain.root_config

    def test_remove_content_file(self, chain):
        assert chain.remove_content_file("Morrowind.esm")
        assert not chain.remove_content_file("Morrowind.esm")
        assert chain.content_files() == ["Tribunal.esm"]

    def test_set_content_files(self, chain):
        chain.set_content_files(["Tribunal.esm", "Morrowind.esm"])

        assert chain.content_files() == ["Tribunal.esm", "Morrowind.esm"]
        for content in chain.content_files():
            assert content.meta.source_config == chain.user_config_file()

    def test_set_content_files_duplicate(self, chain):
        with pytest.raises(DuplicateEntryError):
            chain.set_content_files(["A.esp", "A.esp"])

    def test_archives_and_groundcover(self, chain):
        chain.add_archive_file("Tribunal.bsa")
        chain.add_groundcover_file("Grass.esp")

        assert chain.fallback_archives() == ["Morrowind.bsa", "Tribunal.bsa"]
        assert chain.has_groundcover_file("Grass.esp")
        assert chain.remove_groundcover_file("Grass.esp")
        assert chain.groundcover() == []

        chain.set_fallback_archives(["Bloodmoon.bsa"])
        assert chain.fallback_archives() == ["Bloodmoon.bsa"]
        assert not chain.has_archive_file("Morrowind.bsa")

    def test_data_directories(self, tmp_path, chain):
        chain.add_data_directory(tmp_path / "mods")

        assert chain.has_data_dir(tmp_path / "mods")
        assert chain.data_directories()[-1].parsed == tmp_path / "mods"
        assert chain.remove_data_directory(tmp_path / "base")
        assert not chain.has_data_dir(tmp_path / "base")

        chain.set_data_directories([tmp_path / "x", tmp_path / "y"])
        assert [d.parsed for d in chain.data_directories()] == [
            tmp_path / "x",
            tmp_path / "y",
        ]

    def test_game_settings(self, chain):
        """The effective game setting is the last one of its key."""
        assert len(chain.game_settings()) == 1
        assert chain.get_game_setting("Water_Map_Alpha").value == 0.5
        assert chain.get_game_setting("Missing") is None

    def test_set_game_setting_in_place(self, chain):
        """A user config entry of the same key is overwritten in place."""
        chain.set_game_setting("Water_Map_Alpha", "0.75")

        user_settings = chain.settings_for(chain.user_config_file())
        games = [s for s in user_settings if s.kind is SettingKind.GAME]
        assert len(games) == 1
        assert games[0].value.value == 0.75
        assert games[0].meta.comment == "# alpha override\n"

    def test_set_game_setting_append(self, chain):
        setting = GameSetting("Sky_Color", GameSettingType.COLOR, (1, 2, 3))
        chain.set_game_setting(setting)

        assert chain.get_game_setting("Sky_Color").value == (1, 2, 3)
        assert setting.meta.source_config == chain.user_config_file()
        assert "fallback=Sky_Color,1,2,3\n" in chain.serialize()

    def test_remove_and_set_game_settings(self, chain):
        assert chain.remove_game_setting("Water_Map_Alpha") == 2
        assert chain.game_settings() == []

        chain.set_game_settings([GameSetting.parse("A,1"), GameSetting.parse("B,x")])
        assert [g.key for g in chain.game_settings()] == ["A", "B"]

    def test_singletons(self, tmp_path, chain):
        assert chain.resources().parsed == tmp_path / "res"
        assert chain.userdata() is None

        chain.set_userdata(tmp_path / "saves")
        assert chain.userdata().parsed == tmp_path / "saves"

        # Overwrites the last entry in place
        chain.set_data_local(tmp_path / "other")
        assert len(list(chain.iter_kind(SettingKind.DATA_LOCAL))) == 1
        assert chain.data_local().parsed == tmp_path / "other"

        chain.set_resources(None)
        assert chain.resources() is None

    def test_encoding(self, chain):
        assert chain.encoding() is None

        chain.set_encoding(EncodingType.WIN1251)
        assert chain.encoding().encoding is EncodingType.WIN1251

        chain.set_encoding("win1250")
        assert len(list(chain.iter_kind(SettingKind.ENCODING))) == 1
        assert chain.encoding().encoding is EncodingType.WIN1250

        with pytest.raises(BadEncodingError):
            chain.set_encoding("utf-8")

        chain.set_encoding(None)
        assert chain.encoding() is None

    def test_clear_matching(self, chain):
        removed = chain.clear_matching(lambda s: s.kind is SettingKind.CONTENT)
        assert removed == 2
        assert chain.content_files() == []

    def test_settings_for(self, chain):
        """Each file only sees its own settings, synthetic ones are orphans."""
        root_kinds = [s.kind for s in chain.settings_for(chain.root_config)]
        assert root_kinds == [
            SettingKind.RESOURCES,
            SettingKind.DATA,
            SettingKind.CONTENT,
            SettingKind.ARCHIVE,
            SettingKind.GAME,
            SettingKind.SUBCONFIG,
        ]
        total = sum(len(chain.settings_for(p)) for p in chain.config_chain())
        assert total == len(chain) - 2

    def test_writability(self, chain):
        assert chain.is_user_config_writable()

    def test_repr_and_str(self, chain):
        assert "Configuration" in repr(chain)
        text = str(chain)
        assert "content=Morrowind.esm\ncontent=Tribunal.esm\n" in text
        assert "fallback=Water_Map_Alpha,0.5\n" in text

    def test_set_content_files_duplicate_keeps_list(self, chain):
        """A rejected bulk update leaves the previous list in place."""
        with pytest.raises(DuplicateEntryError) as excinfo:
            chain.set_content_files(["A.esp", "B.esp", "A.esp"])

        assert excinfo.value.value == "A.esp"
        assert excinfo.value.from_api
        assert chain.content_files() == ["Morrowind.esm", "Tribunal.esm"]

    def test_set_groundcover_duplicate_keeps_list(self, chain):
        chain.add_groundcover_file("Grass.esp")
        with pytest.raises(DuplicateEntryError):
            chain.set_groundcover(["Rocks.esp", "Rocks.esp"])

        assert chain.groundcover() == ["Grass.esp"]


def test_clear_singleton_across_chain(tmp_path, write_cfg, user_dirs):
    """Clearing a singleton does not bring back an earlier file's value."""
    root = write_cfg(None, "resources=r1\nconfig=user\n")
    write_cfg("user", "resources=r2\n")
    config = load_config(root, **user_dirs)
    assert config.resources().parsed == tmp_path / "user" / "r2"

    config.set_resources(None)

    assert config.resources() is None
    assert list(config.iter_kind(SettingKind.RESOURCES)) == []
