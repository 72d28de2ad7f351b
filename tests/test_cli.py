"""Tests for the command-line interface."""

from pathlib import Path

import orjson
import pytest
from click.testing import CliRunner

from incentivecalc.cli import main


def _write_request(path: Path, **overrides) -> Path:
    request = {
        "roster": {
            "authors": [
                {
                    "category": "internal",
                    "uid": "u1",
                    "name": "Asha Rao",
                    "role": "first",
                    "is_submitter": True,
                },
                {
                    "category": "internal",
                    "uid": "u2",
                    "name": "Ben Ode",
                    "role": "corresponding",
                },
            ]
        },
        "metadata": {
            "publication_type": "research_paper",
            "publication_date": "2025-06-15",
            "indexing_categories": ["scopus"],
            "quartile": "Q1",
        },
    }
    request.update(overrides)
    path.write_bytes(orjson.dumps(request))
    return path


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCalculateCommand:
    """Tests for `incentivecalc calculate`."""

    def test_text_output(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """Shares are printed per author."""
        request = _write_request(tmp_path / "paper.json")
        result = runner.invoke(
            main, ["-c", str(tmp_config), "calculate", str(request)]
        )
        assert result.exit_code == 0, result.output
        assert "Pool: 50000 (50 points) from scopus" in result.output
        assert "Asha Rao [internal]: 20000 / 20 pts" in result.output
        assert "Total: 40000 / 40 pts" in result.output

    def test_json_output(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """--json prints the serialized result."""
        request = _write_request(tmp_path / "paper.json")
        result = runner.invoke(
            main, ["-c", str(tmp_config), "calculate", "--json", str(request)]
        )
        assert result.exit_code == 0, result.output
        payload = orjson.loads(result.output)
        assert payload["shares"]["u2"]["incentive"] == 20000
        assert payload["distribution_method"] == "role_based"

    def test_multiple_inputs_json(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """Several inputs produce a JSON list."""
        first = _write_request(tmp_path / "a.json")
        second = _write_request(tmp_path / "b.json")
        result = runner.invoke(
            main,
            ["-c", str(tmp_config), "calculate", "--json", str(first), str(second)],
        )
        assert result.exit_code == 0, result.output
        assert len(orjson.loads(result.output)) == 2

    def test_inline_policy(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """An inline policy overrides the policy file."""
        request = _write_request(
            tmp_path / "paper.json",
            policy={
                "effective_from": "2025-01-01",
                "quartile_incentives": [
                    {"quartile": "Q1", "incentive_amount": 10000, "points": 10}
                ],
            },
        )
        result = runner.invoke(
            main, ["-c", str(tmp_config), "calculate", "--json", str(request)]
        )
        assert result.exit_code == 0, result.output
        assert orjson.loads(result.output)["pool_amount"] == 10000

    def test_validation_failure(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """Inconsistent rosters are refused unless validation is skipped."""
        request = _write_request(
            tmp_path / "paper.json",
            roster={"authors": [{"category": "internal", "uid": "u1"}]},
        )
        args = ["-c", str(tmp_config), "calculate", str(request)]
        result = runner.invoke(main, args)
        assert result.exit_code == 1
        assert "exactly one submitter" in result.output

        skipped = runner.invoke(
            main, ["-c", str(tmp_config), "calculate", "--skip-validation", str(request)]
        )
        assert skipped.exit_code == 0

    def test_invalid_json(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """Unparseable request files exit with an error."""
        request = tmp_path / "broken.json"
        request.write_text("{not json")
        result = runner.invoke(
            main, ["-c", str(tmp_config), "calculate", str(request)]
        )
        assert result.exit_code == 1
        assert "invalid request" in result.output

    def test_missing_config(self, runner: CliRunner, tmp_path: Path) -> None:
        """A missing config file is reported."""
        request = _write_request(tmp_path / "paper.json")
        result = runner.invoke(
            main,
            ["-c", str(tmp_path / "missing.yaml"), "calculate", str(request)],
        )
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestValidateCommand:
    """Tests for `incentivecalc validate`."""

    def test_consistent(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """Consistent rosters pass."""
        request = _write_request(tmp_path / "paper.json")
        result = runner.invoke(
            main, ["-c", str(tmp_config), "validate", str(request)]
        )
        assert result.exit_code == 0
        assert "Roster is consistent." in result.output

    def test_problems_listed(
        self, runner: CliRunner, tmp_config: Path, tmp_path: Path
    ) -> None:
        """Problems are printed and the command fails."""
        request = _write_request(
            tmp_path / "paper.json",
            roster={
                "authors": [
                    {"category": "internal", "uid": "u1", "is_submitter": True},
                    {"category": "internal", "uid": "u1"},
                ]
            },
        )
        result = runner.invoke(
            main, ["-c", str(tmp_config), "validate", str(request)]
        )
        assert result.exit_code == 1
        assert "Duplicate author identity: u1" in result.output


class TestPoliciesCommand:
    """Tests for `incentivecalc policies`."""

    def test_list_all(self, runner: CliRunner, tmp_config: Path) -> None:
        """All configured policies are listed."""
        result = runner.invoke(main, ["-c", str(tmp_config), "policies"])
        assert result.exit_code == 0
        assert "Research 2024: 2024-01-01 -> 2024-12-31" in result.output
        assert "Chapters (retired): 2025-01-01 -> open (inactive)" in result.output

    def test_filter_by_type(self, runner: CliRunner, tmp_config: Path) -> None:
        """--type restricts the listing."""
        result = runner.invoke(
            main, ["-c", str(tmp_config), "policies", "--type", "book"]
        )
        assert result.exit_code == 0
        assert "Books" in result.output
        assert "Research" not in result.output

    def test_none_configured(self, runner: CliRunner, tmp_path: Path) -> None:
        """An empty store says so."""
        config = tmp_path / "incentivecalc.yaml"
        config.write_text("institution: Test\n")
        result = runner.invoke(main, ["-c", str(config), "policies"])
        assert "No policies configured." in result.output
