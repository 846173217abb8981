"""
circleci-cli — run one CircleCI API task per invocation
"""

import argparse
import json
import logging
import sys
from dataclasses import dataclass

from circleci_cli import config
from circleci_cli.api import _mask_token
from circleci_cli.client import CircleCiClient
from circleci_cli.commands import cmd_run
from circleci_cli.config import load_config, merge
from circleci_cli.exceptions import CliError
from circleci_cli.log_utils import init_logging
from circleci_cli.tasks import Task

logger = logging.getLogger(__name__)

HELP_TEXT = f"""\
Usage: circleci-cli <task> [-p PROJECT] [-t TAG] [-b BRANCH]

Tasks (case-insensitive):
  list_all                - List all followed projects with branch summaries
  get_all_pipelines       - List the latest page of pipelines for a project
                            (needs project)
  get_latest_artifacts    - List artifacts of the latest build on a branch
                            (needs project and branch)
  get_me                  - Show the user the token belongs to
  trigger                 - Trigger a new pipeline (needs project; branch
                            and tag are sent when set)

Options (override the config file):
  -p, --project <name>    Repository name under the owner account
  -t, --tag <name>        Git tag
  -b, --branch <name>     Git branch

Global flags:
  --format table          Output as readable text instead of JSON (default: json)
  --config <path>         Config file (default: ~/{config.CONFIG_FILENAME},
                            or ${config.CONFIG_ENV_VAR})
  --log-config <path>     YAML logging config (dictConfig schema,
                            or ${config.LOG_CONFIG_ENV_VAR})
  --quiet, -q             Only log errors
  --verbose, -v           Log requests, config merging and results
  --version               Show version number

Config file (YAML):
  circleci_token: <token>   (required)
  project: <name>           (optional, same for tag / branch)
  owner: <account>          (optional, default {config.DEFAULT_OWNER})
"""


@dataclass(frozen=True)
class ParsedArgs:
    task: Task
    project: str | None = None
    tag: str | None = None
    branch: str | None = None


# ---------------------------------------------------------------------------
# Global flag extraction (before argparse, so flags work after the task)
# ---------------------------------------------------------------------------


def _extract_global_flags(argv):
    """Extract global flags from argv regardless of position.

    Returns (format_str, verbose, quiet, config_file, log_config, remaining_argv).
    Handles --version and --help directly.
    """
    fmt = "json"
    verbose = False
    quiet = False
    config_file = None
    log_config = None
    remaining = []
    i = 0
    while i < len(argv):
        arg = argv[i]
        if arg == "--version":
            print(f"circleci-cli {config.VERSION}")
            sys.exit(0)
        elif arg in ("--help", "-h"):
            print(HELP_TEXT)
            sys.exit(0)
        elif arg in ("--quiet", "-q"):
            quiet = True
        elif arg in ("--verbose", "-v"):
            verbose = True
        elif arg == "--format" and i + 1 < len(argv):
            fmt = argv[i + 1]
            if fmt not in ("json", "table"):
                raise CliError(f"[ERROR] Invalid format '{fmt}'. Use: json, table")
            i += 1
        elif arg == "--config" and i + 1 < len(argv):
            config_file = argv[i + 1]
            i += 1
        elif arg == "--log-config" and i + 1 < len(argv):
            log_config = argv[i + 1]
            i += 1
        else:
            remaining.append(arg)
        i += 1
    if quiet and verbose:
        raise CliError("[ERROR] --quiet and --verbose are mutually exclusive.")
    return fmt, verbose, quiet, config_file, log_config, remaining


def _log_level(verbose, quiet):
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


class _CliParser(argparse.ArgumentParser):
    """Parser that raises CliError instead of printing usage and exiting."""

    def error(self, message):
        raise CliError(f"[ERROR] {message}")


def build_parser():
    parser = _CliParser(prog="circleci-cli", add_help=False)
    parser.add_argument("task", nargs="?")
    parser.add_argument("--project", "-p")
    parser.add_argument("--tag", "-t")
    parser.add_argument("--branch", "-b")
    return parser


def parse_args(argv):
    """Parse task and overrides. Unknown task keywords raise TaskParseError."""
    ns = build_parser().parse_args(argv)
    if ns.task is None:
        raise CliError(f"[ERROR] Missing task. Valid: {', '.join(Task.keywords())}")
    return ParsedArgs(
        task=Task.parse(ns.task),
        project=ns.project,
        tag=ns.tag,
        branch=ns.branch,
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def _error_type_from_message(message):
    if message.startswith("[TOKEN_INVALID]"):
        return "token_invalid"
    if message.startswith("[SETUP_NEEDED]"):
        return "setup_needed"
    if message.startswith("[ERROR]"):
        return "error"
    return "cli_error"


def _emit_cli_error(err, fmt):
    msg = str(err)
    if fmt == "json":
        payload = {
            "ok": False,
            "error": {
                "type": _error_type_from_message(msg),
                "message": msg,
                "exit_code": getattr(err, "exit_code", 1),
            },
        }
        print(json.dumps(payload, ensure_ascii=False), file=sys.stderr)
        return
    print(msg, file=sys.stderr)


def main(argv=None):
    if hasattr(sys.stdout, "reconfigure"):
        sys.stdout.reconfigure(encoding="utf-8", errors="replace")
    argv = sys.argv[1:] if argv is None else list(argv)

    if not argv:
        print(HELP_TEXT, file=sys.stderr)
        sys.exit(1)

    fmt = "json"
    try:
        fmt, verbose, quiet, config_file, log_config, remaining = _extract_global_flags(argv)
        init_logging(_log_level(verbose, quiet), log_config)
        args = parse_args(remaining)
        cfg = merge(load_config(config_file), args)
        logger.debug(
            "Received project %s tag %s and branch %s (token %s)",
            cfg.project or "",
            cfg.tag or "",
            cfg.branch or "",
            _mask_token(cfg.token),
        )
        client = CircleCiClient(cfg.token, owner=cfg.owner)
        cmd_run(args.task, cfg, client, fmt)
    except CliError as e:
        logger.debug("Exiting with code %s", e.exit_code)
        _emit_cli_error(e, fmt)
        sys.exit(e.exit_code)


if __name__ == "__main__":
    main()
