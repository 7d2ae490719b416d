"""Tests for the prcards command line."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, patch

import pytest
from typer.testing import CliRunner

from prcards.cli import app, execute, workflow_escape
from prcards.config import RunConfig
from prcards.errors import RemoteError
from prcards.event import PullRequestContext
from prcards.integrations.github.models import MergeState
from prcards.integrations.trello.models import Card
from prcards.orchestrator import CardOutcome, CardStatus, RunResult, RunState

runner = CliRunner()


@pytest.fixture
def event_file(tmp_path):
    path = tmp_path / "event.json"
    path.write_text(
        json.dumps(
            {
                "action": "submitted",
                "pull_request": {
                    "number": 7,
                    "body": "https://trello.com/c/abc123\r\nDone",
                    "base": {"repo": {"name": "webapp", "owner": {"login": "acme"}}},
                },
                "repository": {"name": "webapp", "owner": {"login": "acme"}},
            }
        )
    )
    return path


@pytest.fixture
def credentials(monkeypatch):
    monkeypatch.setenv("PRCARDS_TRELLO_KEY", "k")
    monkeypatch.setenv("PRCARDS_TRELLO_TOKEN", "t")


def _run_args(event_file, tmp_path):
    return [
        "run",
        "--event-path",
        str(event_file),
        "--event-name",
        "pull_request_review",
        "--config",
        str(tmp_path / "none.yaml"),
    ]


class TestRunCommand:
    def test_missing_credentials_exit_2(self, event_file, tmp_path):
        result = runner.invoke(app, _run_args(event_file, tmp_path))

        assert result.exit_code == 2
        assert "trello_key" in result.output

    def test_missing_event_exit_2(self, credentials, tmp_path):
        result = runner.invoke(app, ["run", "--config", str(tmp_path / "none.yaml")])

        assert result.exit_code == 2
        assert "GITHUB_EVENT_NAME" in result.output

    def test_success_exit_0(self, credentials, event_file, tmp_path):
        outcome = CardOutcome("abc123", CardStatus.MOVED, merge_state=MergeState.CLEAN)
        done = RunResult(state=RunState.DONE, outcomes=[outcome])

        with patch("prcards.cli.execute", new=AsyncMock(return_value=done)) as mock_execute:
            result = runner.invoke(app, _run_args(event_file, tmp_path))

        assert result.exit_code == 0
        assert "abc123" in result.output
        assert "1 moved" in result.output
        config, context = mock_execute.await_args.args
        assert config.trello_key == "k"
        assert context.number == 7
        assert context.owner == "acme"

    def test_failure_exit_1_with_error_annotation(self, credentials, event_file, tmp_path):
        failed = RunResult(state=RunState.FAILED, error=RemoteError("Cannot connect to Trello"))

        with patch("prcards.cli.execute", new=AsyncMock(return_value=failed)):
            result = runner.invoke(app, _run_args(event_file, tmp_path))

        assert result.exit_code == 1
        assert "::error::Cannot connect to Trello" in result.output

    def test_multiline_error_is_escaped_in_annotation(self, credentials, event_file, tmp_path):
        error = RemoteError("Trello PUT /cards/abc123 returned 400: line one\r\nline two 100%")
        failed = RunResult(state=RunState.FAILED, error=error)

        with patch("prcards.cli.execute", new=AsyncMock(return_value=failed)):
            result = runner.invoke(app, _run_args(event_file, tmp_path))

        assert result.exit_code == 1
        assert "::error::Trello PUT /cards/abc123 returned 400: line one%0D%0Aline two 100%25" in result.output

    def test_error_text_is_not_read_as_markup(self, credentials, event_file, tmp_path):
        failed = RunResult(state=RunState.FAILED, error=RemoteError("bad body [/bold] here"))

        with patch("prcards.cli.execute", new=AsyncMock(return_value=failed)):
            result = runner.invoke(app, _run_args(event_file, tmp_path))

        assert result.exit_code == 1
        assert "Failed: bad body [/bold] here" in result.output

    def test_reads_runner_environment(self, credentials, event_file, tmp_path, monkeypatch):
        monkeypatch.setenv("GITHUB_EVENT_NAME", "pull_request_review")
        monkeypatch.setenv("GITHUB_EVENT_PATH", str(event_file))
        done = RunResult(state=RunState.DONE)

        with patch("prcards.cli.execute", new=AsyncMock(return_value=done)) as mock_execute:
            result = runner.invoke(app, ["run", "--config", str(tmp_path / "none.yaml")])

        assert result.exit_code == 0
        _, context = mock_execute.await_args.args
        assert context.event_name == "pull_request_review"


class TestWorkflowEscape:
    def test_escapes_percent_and_line_breaks(self):
        assert workflow_escape("50% done\r\nnext") == "50%25 done%0D%0Anext"

    def test_plain_message_unchanged(self):
        assert workflow_escape("Cannot connect to Trello") == "Cannot connect to Trello"


class TestExtractCommand:
    def test_extract_from_file(self, tmp_path):
        path = tmp_path / "body.txt"
        path.write_bytes(b"https://trello.com/c/abc123\r\nhttps://trello.com/c/def456\r\nprose")

        result = runner.invoke(app, ["extract", str(path)])

        assert result.exit_code == 0
        assert result.output.split() == ["abc123", "def456"]

    def test_extract_all_lines(self, tmp_path):
        path = tmp_path / "body.txt"
        path.write_bytes(b"prose\r\nhttps://trello.com/c/abc123")

        assert runner.invoke(app, ["extract", str(path)]).output.split() == []
        result = runner.invoke(app, ["extract", "--all-lines", str(path)])
        assert result.output.split() == ["abc123"]

    def test_extract_lf_option(self, tmp_path):
        path = tmp_path / "body.txt"
        path.write_bytes(b"https://trello.com/c/abc123\nhttps://trello.com/c/def456\n")

        assert runner.invoke(app, ["extract", str(path)]).output.split() == []
        result = runner.invoke(app, ["extract", "--lf", str(path)])
        assert result.output.split() == ["abc123", "def456"]

    def test_extract_tolerates_invalid_utf8(self, tmp_path):
        path = tmp_path / "body.txt"
        path.write_bytes(b"https://trello.com/c/abc123\r\n\xff\xfe prose")

        result = runner.invoke(app, ["extract", str(path)])

        assert result.exit_code == 0
        assert result.output.split() == ["abc123"]

    def test_extract_from_stdin(self):
        result = runner.invoke(app, ["extract"], input=b"https://trello.com/c/abc123\r\nprose")

        assert result.exit_code == 0
        assert result.output.split() == ["abc123"]


class FakeTrello:
    instances: list[FakeTrello] = []

    def __init__(self, key, token, base_url=""):
        self.key = key
        self.token = token
        self.closed = False
        self.moves: list[tuple[str, str]] = []
        FakeTrello.instances.append(self)

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    async def get_card(self, card_id):
        return Card(id=card_id, board_id="board-1")

    async def get_list_id_by_name(self, name, board_id):
        return "list-ready"

    async def move_card(self, card_id, list_id):
        self.moves.append((card_id, list_id))


class FakeGitHub:
    def __init__(self, token="", base_url=""):
        self.token = token

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        pass

    async def fetch_merge_state(self, owner, repo, number):
        return MergeState.UNSTABLE


class TestExecute:
    @pytest.mark.asyncio
    async def test_execute_wires_clients_from_config(self):
        FakeTrello.instances.clear()
        config = RunConfig(trello_key="k", trello_token="t", github_token="g")
        context = PullRequestContext(
            event_name="pull_request_review",
            action="submitted",
            body="https://trello.com/c/abc123",
            owner="acme",
            repo="webapp",
            number=7,
        )

        with patch("prcards.cli.TrelloClient", FakeTrello), patch("prcards.cli.GitHubClient", FakeGitHub):
            result = await execute(config, context)

        assert result.ok
        trello = FakeTrello.instances[0]
        assert (trello.key, trello.token) == ("k", "t")
        assert trello.moves == [("abc123", "list-ready")]
        assert trello.closed
