"""Tests for cli.py — global flags, argument parsing and the main() flow."""

import json
from unittest.mock import patch

import pytest
from _payloads import ARTIFACT_PAYLOAD, PIPELINE_LIGHT_PAYLOAD

from circleci_cli.cli import (
    ParsedArgs,
    _emit_cli_error,
    _error_type_from_message,
    _extract_global_flags,
    main,
    parse_args,
)
from circleci_cli.exceptions import CliError, SetupError, TaskParseError
from circleci_cli.tasks import Task

# ---------------------------------------------------------------------------
# _extract_global_flags
# ---------------------------------------------------------------------------


class TestExtractGlobalFlags:
    def test_no_flags(self):
        fmt, verbose, quiet, config_file, log_config, remaining = _extract_global_flags(
            ["list_all"]
        )
        assert fmt == "json"
        assert verbose is False
        assert quiet is False
        assert config_file is None
        assert log_config is None
        assert remaining == ["list_all"]

    def test_format_after_task(self):
        fmt, *_, remaining = _extract_global_flags(["list_all", "--format", "table"])
        assert fmt == "table"
        assert remaining == ["list_all"]

    def test_invalid_format(self):
        with pytest.raises(CliError) as exc_info:
            _extract_global_flags(["--format", "xml", "list_all"])
        assert "Invalid format" in str(exc_info.value)

    def test_config_and_log_config(self):
        _, _, _, config_file, log_config, remaining = _extract_global_flags(
            ["--config", "/tmp/c.yml", "get_me", "--log-config", "/tmp/l.yml"]
        )
        assert config_file == "/tmp/c.yml"
        assert log_config == "/tmp/l.yml"
        assert remaining == ["get_me"]

    def test_verbose_and_quiet_exclusive(self):
        with pytest.raises(CliError):
            _extract_global_flags(["-v", "-q", "get_me"])

    def test_task_options_untouched(self):
        *_, remaining = _extract_global_flags(["trigger", "-p", "repoA", "-t", "v1", "-v"])
        assert remaining == ["trigger", "-p", "repoA", "-t", "v1"]

    def test_version_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _extract_global_flags(["--version"])
        assert exc_info.value.code == 0
        assert "circleci-cli" in capsys.readouterr().out

    def test_help_exits(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            _extract_global_flags(["trigger", "--help"])
        assert exc_info.value.code == 0
        assert "get_latest_artifacts" in capsys.readouterr().out


# ---------------------------------------------------------------------------
# parse_args
# ---------------------------------------------------------------------------


class TestParseArgs:
    def test_task_only(self):
        assert parse_args(["get_me"]) == ParsedArgs(task=Task.GET_ME)

    def test_short_options(self):
        args = parse_args(["trigger", "-p", "repoA", "-t", "v1", "-b", "main"])
        assert args == ParsedArgs(task=Task.TRIGGER, project="repoA", tag="v1", branch="main")

    def test_long_options(self):
        args = parse_args(["get_latest_artifacts", "--project", "repoA", "--branch", "dev"])
        assert args.project == "repoA"
        assert args.branch == "dev"
        assert args.tag is None

    def test_case_insensitive_task(self):
        assert parse_args(["TRIGGER"]).task is Task.TRIGGER

    def test_unknown_task(self):
        with pytest.raises(TaskParseError) as exc_info:
            parse_args(["build"])
        assert "build" in str(exc_info.value)

    def test_missing_task(self):
        with pytest.raises(CliError) as exc_info:
            parse_args(["--project", "repoA"])
        assert "Missing task" in str(exc_info.value)

    def test_unknown_option(self):
        with pytest.raises(CliError) as exc_info:
            parse_args(["get_me", "--nope"])
        assert "unrecognized arguments" in str(exc_info.value)


# ---------------------------------------------------------------------------
# Error output
# ---------------------------------------------------------------------------


class TestEmitCliError:
    def test_error_types(self):
        assert _error_type_from_message("[TOKEN_INVALID] x") == "token_invalid"
        assert _error_type_from_message("[SETUP_NEEDED] x") == "setup_needed"
        assert _error_type_from_message("[ERROR] x") == "error"
        assert _error_type_from_message("x") == "cli_error"

    def test_json_envelope(self, capsys):
        _emit_cli_error(SetupError("[SETUP_NEEDED] no config"), "json")
        payload = json.loads(capsys.readouterr().err)
        assert payload["ok"] is False
        assert payload["error"]["type"] == "setup_needed"
        assert payload["error"]["exit_code"] == 2

    def test_table_plain(self, capsys):
        _emit_cli_error(CliError("[ERROR] boom"), "table")
        assert capsys.readouterr().err.strip() == "[ERROR] boom"


# ---------------------------------------------------------------------------
# main()
# ---------------------------------------------------------------------------


class TestMain:
    def test_no_args_prints_help_and_fails(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert "Usage: circleci-cli" in captured.err
        assert captured.out == ""

    @patch("circleci_cli.client.api_request")
    def test_artifacts_scenario(self, mock_request, write_config, capsys):
        write_config('circleci_token: "abc"\nproject: "repoA"\n')
        mock_request.return_value = [ARTIFACT_PAYLOAD]
        main(["get_latest_artifacts", "--branch", "main"])
        mock_request.assert_called_once_with(
            "https://circleci.com/api/v1.1/project/github/MeinDach/repoA/latest/artifacts"
            "?circle-token=abc&branch=main"
        )
        assert json.loads(capsys.readouterr().out) == [ARTIFACT_PAYLOAD]

    @patch("circleci_cli.client.api_request")
    def test_owner_from_config(self, mock_request, write_config):
        write_config("circleci_token: abc\nowner: acme\n")
        mock_request.return_value = PIPELINE_LIGHT_PAYLOAD
        main(["trigger", "-p", "repoB"])
        assert mock_request.call_args.args[0] == (
            "https://circleci.com/api/v2/project/github/acme/repoB/pipeline"
        )

    @patch("circleci_cli.client.api_request")
    def test_config_flag(self, mock_request, tmp_path, capsys):
        cfg = tmp_path / "elsewhere.yml"
        cfg.write_text("circleci_token: xyz\n", encoding="utf-8")
        mock_request.return_value = {"login": "alice", "id": 1}
        main(["get_me", "--config", str(cfg), "--format", "table"])
        assert "alice" in capsys.readouterr().out
        assert mock_request.call_args.args[0].endswith("/me?circle-token=xyz")

    def test_missing_config_exit_code(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["get_me"])
        assert exc_info.value.code == 2
        payload = json.loads(capsys.readouterr().err)
        assert payload["error"]["type"] == "setup_needed"

    def test_unknown_task_exit_code(self, write_config, capsys):
        write_config("circleci_token: abc\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["build"])
        assert exc_info.value.code == 1
        assert "build" in capsys.readouterr().err

    @patch("circleci_cli.client.api_request")
    def test_missing_required_field(self, mock_request, write_config, capsys):
        write_config("circleci_token: abc\n")
        with pytest.raises(SystemExit) as exc_info:
            main(["get_all_pipelines"])
        assert exc_info.value.code == 1
        assert "--project" in capsys.readouterr().err
        mock_request.assert_not_called()

    @patch("circleci_cli.api._http_request")
    def test_api_failure_exit_code(self, mock_http, write_config, capsys):
        from circleci_cli.exceptions import ApiError

        write_config("circleci_token: abc\n")
        mock_http.side_effect = ApiError("[ERROR] Connection failed: boom")
        with pytest.raises(SystemExit) as exc_info:
            main(["list_all"])
        assert exc_info.value.code == 1
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "Connection failed" in captured.err
