"""Tests for the sample CLI command."""
import json
from unittest.mock import AsyncMock, patch

import pytest
import structlog
from click.testing import CliRunner

from void_feed.cli.cli import cli
from void_feed.core.errors import StoreUnavailable


@pytest.fixture(autouse=True)
def reset_logging():
    """The CLI binds structlog to the runner's stderr; undo that after each test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fixture_file(tmp_path):
    rows = [
        {
            "id": f"m-{i}",
            "title": f"Memo {i}",
            "summary": None,
            "transcript": f"Transcript {i}",
            "duration": 10 + i,
            "created_at": f"2025-03-0{i + 1}T09:00:00+00:00",
            "categories": ["journal"],
            "likes": i,
            "view_count": 2 * i,
            "author_name": None,
            "user_id": "u-ana" if i % 2 else None,
        }
        for i in range(5)
    ]
    path = tmp_path / "feed.json"
    path.write_text(
        json.dumps({"items": rows, "authors": {"u-ana": {"display_name": "Ana P.", "avatar_url": None}}})
    )
    return str(path)


def json_lines(output):
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


def test_sample_from_fixture_as_json(fixture_file):
    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["sample", "--fixture", fixture_file, "--page-size", "2", "--pages", "3", "--format", "json", "--seed", "3"],
    )

    assert result.exit_code == 0, result.output
    entries = json_lines(result.output)
    assert [entry["page"] for entry in entries] == [1, 1, 2, 2, 3, 3]
    assert entries[0]["id"] != entries[1]["id"]
    for entry in entries:
        expected = "Ana P." if int(entry["id"][-1]) % 2 else "Anonymous"
        assert entry["author"] == expected


def test_sample_text_output(fixture_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["sample", "--fixture", fixture_file, "--page-size", "5"])

    assert result.exit_code == 0, result.output
    assert "Memo 4 by Anonymous" in result.output
    assert "Memo 3 by Ana P." in result.output
    assert "Transcript 3" in result.output


def test_sample_requires_a_source():
    runner = CliRunner()
    result = runner.invoke(cli, ["sample"])

    assert result.exit_code == 2
    assert "Provide --fixture" in result.output


def test_sample_rejects_low_oversample_factor(fixture_file):
    runner = CliRunner()
    result = runner.invoke(cli, ["sample", "--fixture", fixture_file, "--oversample-factor", "0.5"])

    assert result.exit_code == 2


@patch("void_feed.cli.sample.RestClient")
@patch("void_feed.cli.sample.FeedSession")
def test_sample_reports_backend_failure(mock_session, mock_client):
    """Backend settings come from the environment and failures exit non-zero."""
    session = mock_session.return_value
    session.initialize = AsyncMock(return_value=False)
    session.last_error = StoreUnavailable("backend down")
    session.close = AsyncMock()
    mock_client.return_value.close = AsyncMock()

    runner = CliRunner()
    result = runner.invoke(
        cli,
        ["sample"],
        env={"VOID_FEED_BASE_URL": "https://db.test/rest/v1", "VOID_FEED_API_KEY": "anon"},
    )

    assert result.exit_code == 1
    assert "Error: backend down" in result.output
    config = mock_client.call_args[0][0]
    assert config.base_url == "https://db.test/rest/v1"
    session.close.assert_awaited_once()
    mock_client.return_value.close.assert_awaited_once()
