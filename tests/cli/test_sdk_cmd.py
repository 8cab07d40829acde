"""Tests for the sdk command group."""

import json
from pathlib import Path

from click.testing import CliRunner

from entschema.cli.main import cli

SOURCE = """\
class CFuncDoor : public CBaseToggle
{
};

bool CFuncDoor::KeyValue( const char *szKeyName, const char *szValue )
{
    if ( FStrEq( szKeyName, "speed" ) )
    {
        m_flSpeed = atof( szValue );
    }
    return true;
}

LINK_ENTITY_TO_CLASS( func_door, CFuncDoor );
"""


def _sdk(tmp_path: Path) -> Path:
    root = tmp_path / "src"
    root.mkdir()
    (root / "doors.cpp").write_text(SOURCE, encoding="utf-8")
    return root


class TestSdkScan:
    def test_types_to_stdout(
        self, runner: CliRunner, tmp_path: Path, quiet_env: dict[str, str]
    ) -> None:
        result = runner.invoke(
            cli, ["sdk", "scan", str(_sdk(tmp_path)), "--mode", "types"], env=quiet_env
        )

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == [{"class": "CFuncDoor", "name": "speed", "ty": "f32"}]

    def test_inherits_to_file(self, runner: CliRunner, tmp_path: Path) -> None:
        out = tmp_path / "inherits.json"

        result = runner.invoke(
            cli, ["sdk", "scan", str(_sdk(tmp_path)), "--mode", "inherits", "-o", str(out)]
        )

        assert result.exit_code == 0, result.output
        assert json.loads(out.read_text()) == [{"name": "CFuncDoor", "inherits": ["CBaseToggle"]}]

    def test_mode_is_required(self, runner: CliRunner, tmp_path: Path) -> None:
        result = runner.invoke(cli, ["sdk", "scan", str(_sdk(tmp_path))])
        assert result.exit_code == 2


class TestSdkExport:
    def test_writes_all_three_files(self, runner: CliRunner, tmp_path: Path) -> None:
        out_dir = tmp_path / "data"

        result = runner.invoke(cli, ["sdk", "export", str(_sdk(tmp_path)), str(out_dir)])

        assert result.exit_code == 0, result.output
        assert json.loads((out_dir / "classes.json").read_text()) == [
            {"entity": "func_door", "class": "CFuncDoor"}
        ]
        assert (out_dir / "types.json").exists()
        assert (out_dir / "inherits.json").exists()
        assert "1 hint" in result.output
