"""
Unit tests for the CLI entry point.
"""

from click.testing import CliRunner

from neurolayout.cli.main import main


class TestMain:
    def test_registers_commands(self):
        result = CliRunner().invoke(main, ["--help"])
        assert result.exit_code == 0
        for command in ("simulate", "metrics", "focus", "demo"):
            assert command in result.output

    def test_verbose_flag_runs_subcommand(self, tmp_path):
        output = tmp_path / "graph.json"
        result = CliRunner().invoke(main, ["-v", "demo", "-o", str(output)])
        assert result.exit_code == 0
        assert output.exists()
