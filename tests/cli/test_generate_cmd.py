"""Tests for the generate command."""

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

from click.testing import CliRunner

from entschema.cli.main import cli


def _classes(path: Path) -> dict[str, dict]:
    data = json.loads(path.read_text(encoding="utf-8"))
    return {cls["classname"]: cls for cls in data["classes"]}


class TestGenerate:
    def test_given_map_directory_when_generated_then_schema_written(
        self, runner: CliRunner, write_map, tmp_path: Path
    ) -> None:
        # Given
        write_map(
            "a.bsp",
            {"classname": "info_player_start", "origin": "0 0 8", "angles": "0 90 0"},
        )
        write_map("b.bsp", {"classname": "info_player_start", "origin": "64 0 8"})
        out = tmp_path / "out" / "schema.json"

        # When
        result = runner.invoke(cli, ["generate", str(tmp_path), "-o", str(out), "-j", "2"])

        # Then
        assert result.exit_code == 0, result.output
        props = {p["name"]: p for p in _classes(out)["info_player_start"]["properties"]}
        assert props["angles"] == {
            "name": "angles",
            "type": "angles",
            "optional": True,
            "rename_from": None,
        }
        assert props["origin"]["type"] == "vector"
        assert "1 class from 2 maps" in result.output

    def test_repeated_runs_are_byte_identical(
        self, runner: CliRunner, write_map, tmp_path: Path
    ) -> None:
        map_path = write_map("a.bsp", {"classname": "light", "_light": "255 255 255 200"})
        first, second = tmp_path / "1.json", tmp_path / "2.json"

        runner.invoke(cli, ["generate", str(map_path), "-o", str(first)])
        runner.invoke(cli, ["generate", str(map_path), "-o", str(second)])

        assert first.read_bytes() == second.read_bytes()

    def test_undecodable_map_is_reported_not_fatal(
        self, runner: CliRunner, write_map, tmp_path: Path
    ) -> None:
        good = write_map("good.bsp", {"classname": "light"})
        bad = tmp_path / "bad.bsp"
        bad.write_bytes(b"\x00\x01\x02\x03")
        out = tmp_path / "schema.json"

        result = runner.invoke(cli, ["generate", str(good), str(bad), "-o", str(out)])

        assert result.exit_code == 0, result.output
        assert "1 map failed to decode" in result.output
        assert set(_classes(out)) == {"light"}

    def test_sdk_options_are_mutually_exclusive(
        self, runner: CliRunner, write_map, tmp_path: Path
    ) -> None:
        map_path = write_map("a.bsp", {"classname": "light"})

        result = runner.invoke(
            cli,
            [
                "generate",
                str(map_path),
                "-o",
                str(tmp_path / "s.json"),
                "--sdk",
                str(tmp_path),
                "--sdk-data",
                str(tmp_path),
            ],
        )

        assert result.exit_code == 2
        assert "mutually exclusive" in result.output

    def test_compatible_policy_uses_exported_hints(
        self, runner: CliRunner, write_map, tmp_path: Path
    ) -> None:
        # Given exported static data hinting that speed is a float
        data = tmp_path / "sdkdata"
        data.mkdir()
        (data / "types.json").write_text(
            '[{"class": "CFuncDoor", "name": "speed", "ty": "f32"}]', encoding="utf-8"
        )
        (data / "classes.json").write_text(
            '[{"entity": "func_door", "class": "CFuncDoor"}]', encoding="utf-8"
        )
        map_path = write_map("a.bsp", {"classname": "func_door", "speed": "100"})
        out = tmp_path / "schema.json"

        # When
        result = runner.invoke(
            cli,
            [
                "generate",
                str(map_path),
                "-o",
                str(out),
                "--sdk-data",
                str(data),
                "--hint-policy",
                "compatible",
            ],
        )

        # Then
        assert result.exit_code == 0, result.output
        assert _classes(out)["func_door"]["properties"][0]["type"] == "f32"

    def test_formatter_failure_aborts_run(
        self, runner: CliRunner, write_map, tmp_path: Path, isolated_config: Path
    ) -> None:
        (isolated_config / "entschema.yaml").write_text(
            "output:\n  format_command: [fmt-tool]\n", encoding="utf-8"
        )
        map_path = write_map("a.bsp", {"classname": "light"})
        out = tmp_path / "schema.json"
        completed = MagicMock(returncode=3, stdout="", stderr="bad input")

        with patch("entschema.schema.emit.subprocess.run", return_value=completed):
            result = runner.invoke(cli, ["generate", str(map_path), "-o", str(out)])

        assert result.exit_code == 1
        assert "FORMATTER_FAILED" in result.output
        assert not out.exists()

    def test_invalid_config_is_reported(
        self, runner: CliRunner, write_map, tmp_path: Path, isolated_config: Path
    ) -> None:
        (isolated_config / "entschema.yaml").write_text("naming:\n  grammar: cobol\n")
        map_path = write_map("a.bsp", {"classname": "light"})

        result = runner.invoke(cli, ["generate", str(map_path), "-o", str(tmp_path / "s.json")])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_missing_input_is_usage_error(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(
            cli, ["generate", str(tmp_path / "nope.bsp"), "-o", str(tmp_path / "s.json")]
        )
        assert result.exit_code == 2
