"""
Tests for the pastens command-line interface.

All lookups run in simulation mode (--dry-run) against a configuration
file whose search history lives in a temporary directory.
"""

import json
from pathlib import Path

import pytest

from pastens.cli import create_parser, main
from pastens.config import create_default_config, load_config_from_file, save_config_to_file
from pastens.history_store import SearchHistoryStore
from pastens.local_storage import JsonFileStorage


ENV_VARS = ("PASTENS_API_URL", "PASTENS_LANGUAGE", "PASTENS_HISTORY_FILE", "PASTENS_LOG_LEVEL")


@pytest.fixture
def config_file(tmp_path: Path, monkeypatch) -> Path:
    for name in ENV_VARS:
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)

    path = tmp_path / "config.json"
    save_config_to_file(create_default_config(storage_path=tmp_path / "storage.json"), path)
    return path


def stored_history(tmp_path: Path) -> tuple:
    return SearchHistoryStore(JsonFileStorage(tmp_path / "storage.json")).list()


class TestLookupCommand:
    def test_dry_run_lookup_succeeds_and_records_history(self, config_file, tmp_path, capsys) -> None:
        code = main(["lookup", "ENS", "--dry-run", "--config", str(config_file)])
        out = capsys.readouterr().out

        assert code == 0
        assert "Simulation mode enabled" in out
        assert "Looking up ownership history for: ens.eth" in out
        assert "Ownership history" in out
        assert stored_history(tmp_path) == ("ens.eth",)

    def test_json_output(self, config_file, capsys) -> None:
        code = main(["lookup", "nick", "--dry-run", "--json", "--config", str(config_file)])
        out = capsys.readouterr().out

        assert code == 0
        data = json.loads(out[out.index("{"):])
        assert data["phase"] == "success"
        assert data["result"]["name"] == "nick.eth"
        assert data["history"] == ["nick.eth"]

    def test_route_path_lookup(self, config_file, tmp_path) -> None:
        code = main(["lookup", "/Vitalik.eth", "--dry-run", "--config", str(config_file)])
        assert code == 0
        assert stored_history(tmp_path) == ("vitalik.eth",)

    def test_missing_config_file(self, tmp_path, capsys) -> None:
        code = main(["lookup", "ens", "--dry-run", "--config", str(tmp_path / "absent.json")])
        assert code == 1
        assert "Config file not found" in capsys.readouterr().err

    def test_german_output(self, config_file, capsys) -> None:
        main(["lookup", "ens", "--dry-run", "--language", "de", "--config", str(config_file)])
        assert "Simulationsmodus aktiv" in capsys.readouterr().out


class TestHistoryCommand:
    def test_empty_history(self, config_file, capsys) -> None:
        assert main(["history", "list", "--config", str(config_file)]) == 0
        assert "No previous searches." in capsys.readouterr().out

    def test_list_remove_clear(self, config_file, tmp_path, capsys) -> None:
        for name in ("a", "b", "c"):
            main(["lookup", name, "--dry-run", "--config", str(config_file)])
        capsys.readouterr()

        assert main(["history", "list", "--config", str(config_file)]) == 0
        lines = capsys.readouterr().out.splitlines()
        assert [line.split(". ")[1] for line in lines] == ["c.eth", "b.eth", "a.eth"]

        assert main(["history", "remove", "B.ETH", "--config", str(config_file)]) == 0
        assert stored_history(tmp_path) == ("c.eth", "a.eth")

        assert main(["history", "remove", "a", "--config", str(config_file)]) == 0
        assert stored_history(tmp_path) == ("c.eth",)

        assert main(["history", "remove", "zzz.eth", "--config", str(config_file)]) == 1
        assert main(["history", "remove", "--config", str(config_file)]) == 1

        assert main(["history", "clear", "--config", str(config_file)]) == 0
        assert stored_history(tmp_path) == ()


class TestLeaderboardCommand:
    def test_lists_default_names(self, config_file, capsys) -> None:
        assert main(["leaderboard", "--config", str(config_file)]) == 0
        out = capsys.readouterr().out
        assert "1. vitalik.eth" in out
        assert "10. 000.eth" in out

    def test_pick_by_position(self, config_file, tmp_path) -> None:
        code = main(["leaderboard", "--pick", "2", "--dry-run", "--config", str(config_file)])
        assert code == 0
        assert stored_history(tmp_path) == ("nick.eth",)

    def test_invalid_pick(self, config_file, tmp_path, capsys) -> None:
        code = main(["leaderboard", "--pick", "99", "--dry-run", "--config", str(config_file)])
        assert code == 1
        assert "Invalid choice: 99" in capsys.readouterr().err
        assert stored_history(tmp_path) == ()


class TestConfigCommand:
    def test_init_show_validate(self, tmp_path, capsys) -> None:
        path = tmp_path / "pastens" / "config.json"

        assert main(["config", "init", "--path", str(path), "--language", "de"]) == 0
        assert load_config_from_file(path).language == "de"

        assert main(["config", "init", "--path", str(path)]) == 1
        assert main(["config", "init", "--path", str(path), "--force"]) == 0
        assert load_config_from_file(path).language == "en"

        assert main(["config", "show", "--path", str(path)]) == 0
        assert main(["config", "validate", "--path", str(path)]) == 0
        assert "is valid" in capsys.readouterr().out

    def test_validate_rejects_bad_values(self, tmp_path, capsys) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"history": {"capacity": 0}}), encoding="utf-8")

        assert main(["config", "validate", "--path", str(path)]) == 1
        assert "capacity" in capsys.readouterr().err

    def test_show_missing(self, tmp_path) -> None:
        assert main(["config", "show", "--path", str(tmp_path / "none.json")]) == 1


class TestParser:
    def test_no_command_prints_help(self, capsys) -> None:
        assert main([]) == 0
        assert "usage: pastens" in capsys.readouterr().out

    def test_lookup_flags(self) -> None:
        args = create_parser().parse_args(["lookup", "ens", "--dry-run", "--json", "-v"])
        assert args.name == "ens"
        assert args.dry_run and args.json and args.verbose
