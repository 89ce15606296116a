"""Tests for settings file loading, migration and creation."""

import json

import pytest

from doom_launcher.catalog.catalog import CatalogKind, catalog_for
from doom_launcher.catalog.loader import (
    ConfigNotFoundError,
    ConfigParseError,
    create_default_settings,
    load_launcher_config,
    write_launcher_config,
)
from doom_launcher.catalog.schemas import Entry, LauncherConfig

V2_DATA = {
    "Executables": [{"Code": "GZ", "Description": "GZDoom", "Path": "/usr/bin/gzdoom"}],
    "Mods": {
        "Gameplay Mods": [
            {"Code": "M1", "Description": "Mod One", "Path": ["/a/m1.wad"]},
            {"Code": "M2", "Description": "Mod Two", "ParentCode": "M1", "Path": ["/a/m2.wad"]},
        ]
    },
    "Levels": {
        "Megawads": [
            {"Code": "L1", "Description": "Level One", "Path": ["/a/l1.wad"], "Year": 1996}
        ]
    },
    "Mutators": {},
}

V1_DATA = {
    "Executables": [{"Code": "GZ", "Path": "/usr/bin/gzdoom"}],
    "Mods": [
        {"Code": "BD", "Category": "Gameplay Mods", "Path": ["/m/bd.pk3"]},
        {"Code": "SW", "Path": ["/m/sw.pk3"], "IWad": "doom2.wad"},
        {"Code": "PB", "Category": "Gameplay Mods", "Path": ["/m/pb.pk3"]},
    ],
    "Levels": [{"Code": "SIG", "Category": "Episodes", "Path": ["/l/sigil.wad"]}],
    "Mutators": [],
}


def _write_v2(path, data=V2_DATA):
    path.write_text("v2\n" + json.dumps(data))
    return path


class TestLoadV2:
    def test_loads_catalogs(self, tmp_path):
        config = load_launcher_config(_write_v2(tmp_path / "s.json"))
        mods = catalog_for(config, CatalogKind.MODS)
        assert mods.lookup("m2").parent_code == "M1"
        assert catalog_for(config, CatalogKind.LEVELS).lookup("L1").year == 1996
        assert config.find_executable().code == "GZ"

    def test_header_case_insensitive(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("V2\n" + json.dumps(V2_DATA))
        assert load_launcher_config(path).executables[0].path == "/usr/bin/gzdoom"

    def test_snake_case_keys_accepted(self, tmp_path):
        data = {"mods": {"A": [{"code": "X", "paths": ["/x.wad"], "parent_code": None}]}}
        config = load_launcher_config(_write_v2(tmp_path / "s.json", data))
        assert catalog_for(config, CatalogKind.MODS).lookup("x").paths == ["/x.wad"]

    def test_null_lists_become_empty(self, tmp_path):
        data = {"Mods": {"A": [{"Code": "X", "Path": None, "Tags": None}]}, "Levels": None}
        config = load_launcher_config(_write_v2(tmp_path / "s.json", data))
        assert config.levels == {}
        assert config.mods["A"][0].paths == []


class TestLoadFailures:
    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigNotFoundError):
            load_launcher_config(tmp_path / "missing.json")

    def test_bad_json(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("v2\n{not json")
        with pytest.raises(ConfigParseError, match="Invalid JSON"):
            load_launcher_config(path)

    def test_wrong_shape(self, tmp_path):
        path = _write_v2(tmp_path / "s.json", {"Mods": {"A": [{"Path": "not-a-list"}]}})
        with pytest.raises(ConfigParseError):
            load_launcher_config(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("v2\n[1, 2]")
        with pytest.raises(ConfigParseError):
            load_launcher_config(path)

    def test_unsupported_version(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text("v3\n{}")
        with pytest.raises(ConfigParseError, match="v3"):
            load_launcher_config(path)

    def test_duplicate_codes_across_categories(self, tmp_path):
        data = {
            "Mods": {
                "A": [{"Code": "X", "Path": []}],
                "B": [{"Code": "x", "Path": []}],
            }
        }
        with pytest.raises(ConfigParseError, match="mods: x"):
            load_launcher_config(_write_v2(tmp_path / "s.json", data))

    def test_invalid_utf8(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_bytes(b'v2\n{"Mods": {"\xff\xfe": []}}')
        with pytest.raises(ConfigParseError, match="Invalid UTF-8"):
            load_launcher_config(path)

    def test_same_code_in_different_catalogs_is_fine(self, tmp_path):
        data = {
            "Mods": {"A": [{"Code": "X"}]},
            "Levels": {"A": [{"Code": "X"}]},
        }
        load_launcher_config(_write_v2(tmp_path / "s.json", data))


class TestMigrateV1:
    def test_groups_by_category(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps(V1_DATA, indent=2))

        config = load_launcher_config(path)

        assert list(config.mods) == ["Gameplay Mods", "Unknown"]
        assert [e.code for e in config.mods["Gameplay Mods"]] == ["BD", "PB"]
        assert config.mods["Unknown"][0].iwad == "doom2.wad"
        assert list(config.levels) == ["Episodes"]
        assert config.mutators == {}

    def test_rewrites_file_with_header(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps(V1_DATA))

        load_launcher_config(path)

        first_line, _, rest = path.read_text().partition("\n")
        assert first_line == "v2"
        assert "Gameplay Mods" in json.loads(rest)["Mods"]
        # Second load takes the v2 path and sees the same data
        again = load_launcher_config(path)
        assert [e.code for e in again.mods["Gameplay Mods"]] == ["BD", "PB"]

    def test_duplicate_codes_leave_file_untouched(self, tmp_path):
        path = tmp_path / "s.json"
        original = json.dumps(
            {"Mods": [{"Code": "BD", "Category": "A"}, {"Code": "bd", "Category": "B"}]}
        )
        path.write_text(original)

        with pytest.raises(ConfigParseError, match="mods: bd"):
            load_launcher_config(path)

        assert path.read_text() == original

    def test_single_line_v1(self, tmp_path):
        path = tmp_path / "s.json"
        path.write_text(json.dumps({"Mods": [{"Code": "A"}]}))
        assert load_launcher_config(path).mods["Unknown"][0].code == "A"


class TestWriteSettings:
    def test_round_trip_uses_pascal_case(self, tmp_path):
        config = LauncherConfig(mods={"A": [Entry(code="X", parent_code="Y", paths=["/x"])]})
        path = write_launcher_config(tmp_path / "s.json", config)
        body = json.loads(path.read_text().partition("\n")[2])
        assert body["Mods"]["A"][0] == {"Code": "X", "Description": "", "ParentCode": "Y", "Path": ["/x"], "Tags": []}

    def test_default_settings_show_every_key(self, tmp_path):
        path = create_default_settings(tmp_path / "s.json")
        header, _, rest = path.read_text().partition("\n")
        body = json.loads(rest)
        assert header == "v2"
        placeholder = body["Mods"]["CategoryName"][0]
        assert "IWad" in placeholder and placeholder["IWad"] is None
        assert body["Executables"] == [{"Code": "", "Description": "", "Path": ""}]

    def test_default_settings_load_as_empty_catalogs(self, tmp_path):
        path = create_default_settings(tmp_path / "s.json")
        config = load_launcher_config(path)
        assert catalog_for(config, CatalogKind.MODS).is_empty()
