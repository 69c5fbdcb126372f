"""Tests for the command-line interface."""

from collections.abc import Callable
from pathlib import Path

import pyarrow as pa
from typer.testing import CliRunner

from pirload.cli import app

runner = CliRunner()


class TestDetectCommand:
    """Tests for `pirload detect`."""

    def test_csv(self, scenario_a: Path) -> None:
        """Test detection of a CSV file."""
        result = runner.invoke(app, ["detect", str(scenario_a)])

        assert result.exit_code == 0
        assert "csv" in result.stdout

    def test_unrecognized(self, tmp_path: Path) -> None:
        """Test that an unrecognized extension exits with 1."""
        result = runner.invoke(app, ["detect", str(tmp_path / "db.txt")])

        assert result.exit_code == 1


class TestValidateCommand:
    """Tests for `pirload validate`."""

    def test_valid(self, scenario_a: Path) -> None:
        """Test a passing column."""
        result = runner.invoke(app, ["validate", str(scenario_a), "-d", "2"])

        assert result.exit_code == 0
        assert "Pass" in result.stdout

    def test_invalid(self, scenario_b: Path) -> None:
        """Test that a violation exits with 1."""
        result = runner.invoke(app, ["validate", str(scenario_b), "-d", "2"])

        assert result.exit_code == 1
        assert "Row: 2" in result.stdout

    def test_wider_bit_width_passes(self, scenario_b: Path) -> None:
        """Test that the same column passes with a wider bit width."""
        result = runner.invoke(app, ["validate", str(scenario_b), "--bits", "3"])

        assert result.exit_code == 0

    def test_overflow_option(self, scenario_b: Path) -> None:
        """Test the clamp policy from the command line."""
        result = runner.invoke(app, ["validate", str(scenario_b), "--overflow", "clamp"])

        assert result.exit_code == 0

    def test_invalid_bit_width(self, scenario_a: Path) -> None:
        """Test that out-of-range bit widths are usage errors."""
        result = runner.invoke(app, ["validate", str(scenario_a), "-d", "65"])

        assert result.exit_code != 0


class TestLoadCommand:
    """Tests for `pirload load`."""

    def test_load_and_query(self, scenario_a: Path) -> None:
        """Test loading and reading back an entry."""
        result = runner.invoke(app, ["load", str(scenario_a), "-q", "2"])

        assert result.exit_code == 0
        assert "entry[2] = 3" in result.stdout
        assert "Ingestion Results" in result.stdout

    def test_query_out_of_bounds(self, scenario_a: Path) -> None:
        """Test that an index outside the database exits with 1."""
        result = runner.invoke(app, ["load", str(scenario_a), "-q", "3"])

        assert result.exit_code == 1

    def test_out_of_range_value(self, scenario_b: Path) -> None:
        """Test that a validation failure exits with 1."""
        result = runner.invoke(app, ["load", str(scenario_b)])

        assert result.exit_code == 1
        assert "Error" in result.stdout

    def test_clamp_policy(self, scenario_b: Path) -> None:
        """Test that the clamp policy loads the clamp value."""
        result = runner.invoke(app, ["load", str(scenario_b), "--overflow", "clamp", "-q", "1"])

        assert result.exit_code == 0
        assert "entry[1] = 3" in result.stdout

    def test_empty_source(self, write_csv: Callable[..., Path]) -> None:
        """Test that a header-only file exits with 1."""
        result = runner.invoke(app, ["load", str(write_csv("value\n"))])

        assert result.exit_code == 1

    def test_unrecognized_format(self, tmp_path: Path) -> None:
        """Test that an unrecognized extension exits with 1."""
        result = runner.invoke(app, ["load", str(tmp_path / "db.txt")])

        assert result.exit_code == 1

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test that a missing file exits with 1."""
        result = runner.invoke(app, ["load", str(tmp_path / "missing.csv")])

        assert result.exit_code == 1

    def test_no_header(self, write_csv: Callable[..., Path]) -> None:
        """Test loading a headerless file."""
        path = write_csv("1\n2\n")
        result = runner.invoke(app, ["load", str(path), "--no-header", "-q", "0"])

        assert result.exit_code == 0
        assert "entry[0] = 1" in result.stdout

    def test_parquet_named_column(self, write_parquet: Callable[..., Path]) -> None:
        """Test loading a named Parquet column."""
        path = write_parquet(
            {
                "a": pa.array([1, 2], type=pa.int64()),
                "b": pa.array([40, 41], type=pa.int64()),
            }
        )
        result = runner.invoke(app, ["load", str(path), "-c", "b", "-d", "6", "-q", "1"])

        assert result.exit_code == 0
        assert "entry[1] = 41" in result.stdout

    def test_config_file(self, tmp_path: Path, write_csv: Callable[..., Path]) -> None:
        """Test that settings are read from a config file."""
        path = write_csv("id,value\n1,200\n2,100\n")
        config_file = tmp_path / "run.yaml"
        config_file.write_text("ingestion:\n  bit_width: 8\n  column: value\n")

        result = runner.invoke(app, ["load", str(path), "--config", str(config_file)])

        assert result.exit_code == 0
        assert "entry[0] = 200" in result.stdout

    def test_cli_overrides_config(self, tmp_path: Path, write_csv: Callable[..., Path]) -> None:
        """Test that command-line options take precedence over the config file."""
        path = write_csv("value\n200\n")
        config_file = tmp_path / "run.yaml"
        config_file.write_text("ingestion:\n  bit_width: 8\n")

        result = runner.invoke(app, ["load", str(path), "--config", str(config_file), "-d", "4"])

        assert result.exit_code == 1

    def test_invalid_config(self, tmp_path: Path, scenario_a: Path) -> None:
        """Test that an invalid config file exits with 1."""
        config_file = tmp_path / "bad.yaml"
        config_file.write_text("ingestion:\n  bit_width: 0\n")

        result = runner.invoke(app, ["load", str(scenario_a), "--config", str(config_file)])

        assert result.exit_code == 1


class TestOtherCommands:
    """Tests for stats, bits and version."""

    def test_stats(self, scenario_a: Path) -> None:
        """Test the statistics table."""
        result = runner.invoke(app, ["stats", str(scenario_a), "-d", "8"])

        assert result.exit_code == 0
        assert "Database Statistics" in result.stdout
        assert "255" in result.stdout

    def test_stats_missing_file(self, tmp_path: Path) -> None:
        """Test that statistics for a missing file exit with 1."""
        result = runner.invoke(app, ["stats", str(tmp_path / "missing.csv")])

        assert result.exit_code == 1

    def test_bits(self) -> None:
        """Test the minimum bit width command."""
        result = runner.invoke(app, ["bits", "255"])

        assert result.exit_code == 0
        assert result.stdout.strip() == "8"

    def test_bits_zero(self) -> None:
        """Test that zero needs one bit."""
        result = runner.invoke(app, ["bits", "0"])

        assert result.stdout.strip() == "1"

    def test_version(self) -> None:
        """Test the version command."""
        result = runner.invoke(app, ["version"])

        assert result.exit_code == 0
        assert "pirload version" in result.stdout

    def test_global_logging_options(self, scenario_a: Path) -> None:
        """Test that global logging options are accepted."""
        result = runner.invoke(app, ["--log-level", "DEBUG", "--json-logs", "detect", str(scenario_a)])

        assert result.exit_code == 0
        assert "csv" in result.stdout

    def test_unknown_log_level(self, scenario_a: Path) -> None:
        """Test that an unknown log level exits with 1."""
        result = runner.invoke(app, ["--log-level", "LOUD", "detect", str(scenario_a)])

        assert result.exit_code == 1
        assert "Unknown log level" in result.stdout
