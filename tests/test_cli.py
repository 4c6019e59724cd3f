import json
import logging

from click.testing import CliRunner

from physgraph.cli.main import cli


def test_units_command_prints_dimension():
    result = CliRunner().invoke(cli, ["units", "kg*m/s^2"])
    assert result.exit_code == 0
    payload = json.loads(result.output)
    assert payload == {"ok": True, "dimension": "L M T^-2", "units": "N"}


def test_units_command_reports_failure():
    result = CliRunner().invoke(cli, ["units", "kg*g"])
    assert result.exit_code == 1
    assert '"reason": "unknown-unit"' in result.output


def test_dims_command_lists_each_expression():
    result = CliRunner().invoke(cli, ["dims", "J/s", "1", "bogus"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines[0] == "J/s: L^2 M T^-3"
    assert lines[1] == "1: 1"
    assert lines[2].startswith("bogus: error:")


def test_expr_command_uses_declared_variables():
    result = CliRunner().invoke(
        cli, ["expr", "\\frac{1}{2} m v^2", "--var", "m=kg", "--var", "v=m/s"]
    )
    assert result.exit_code == 0
    assert json.loads(result.output)["dimension"] == "L^2 M T^-2"


def test_expr_command_rejects_bad_var_option():
    result = CliRunner().invoke(cli, ["expr", "m", "--var", "m"])
    assert result.exit_code != 0
    assert "SYMBOL=UNIT" in result.output


def test_check_command(tmp_path):
    project = {
        "vars": [{"latex": "F", "units": "N"}, {"latex": "m", "units": "kg"}, {"latex": "a", "units": "m/s^2"}],
        "eqs": [{"id": "n2", "latex": "F = m a"}, {"id": "oops", "latex": "F = m"}],
    }
    path = tmp_path / "project.json"
    path.write_text(json.dumps(project), encoding="utf-8")

    result = CliRunner().invoke(cli, ["check", str(path)])
    assert result.exit_code == 0
    assert "good     n2: units ok: L M T^-2" in result.output
    assert "2 equation(s): 1 good, 1 bad, 0 unknown" in result.output

    strict = CliRunner().invoke(cli, ["check", "--strict", str(path)])
    assert strict.exit_code == 1


def test_check_command_rejects_duplicate_ids(tmp_path):
    project = {"eqs": [{"id": "e", "latex": "x = x"}, {"id": "e", "latex": "x = q"}]}
    path = tmp_path / "project.json"
    path.write_text(json.dumps(project), encoding="utf-8")

    result = CliRunner().invoke(cli, ["check", str(path)])
    assert result.exit_code == 1
    assert "duplicate equation id 'e'" in result.output


def test_verbose_flag_enables_debug_logging(monkeypatch):
    levels = []
    monkeypatch.setattr("physgraph.cli.main.configure_logging", levels.append)

    result = CliRunner().invoke(cli, ["-v", "dims", "m"])
    assert result.exit_code == 0
    assert levels == [logging.DEBUG]
