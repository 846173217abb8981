"""
Task dispatcher for circleci-cli.
Each cmd_*() function maps one Task onto exactly one CircleCiClient call.

Required config fields are checked before any request is made; the merged
configuration and the client are passed in explicitly.
"""

import logging

from circleci_cli.exceptions import MissingConfigError
from circleci_cli.formatters import (
    format_artifacts_table,
    format_me_table,
    format_pipelines_table,
    format_projects_table,
    format_trigger_table,
    output,
)
from circleci_cli.tasks import Task

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = {
    Task.GET_ALL_PIPELINES: ("project",),
    Task.GET_LATEST_ARTIFACTS: ("project", "branch"),
    Task.GET_ME: (),
    Task.TRIGGER: ("project",),
    Task.LIST_ALL: (),
}


def require_fields(task, cfg):
    """Raise MissingConfigError listing every required field that is unset or empty."""
    missing = [name for name in REQUIRED_FIELDS[task] if not getattr(cfg, name)]
    if missing:
        raise MissingConfigError(task.value, missing)


# ---------------------------------------------------------------------------
# Task handlers
# ---------------------------------------------------------------------------


def cmd_get_all_pipelines(client, cfg):
    return client.get_all_pipelines(cfg.project)


def cmd_get_latest_artifacts(client, cfg):
    return client.get_latest_artifacts(cfg.project, cfg.branch)


def cmd_get_me(client, cfg):
    return client.get_me()


def cmd_trigger(client, cfg):
    return client.trigger_build_for(cfg.project, branch=cfg.branch, tag=cfg.tag)


def cmd_list_all(client, cfg):
    return client.get_all_projects()


TASK_HANDLERS = {
    Task.GET_ALL_PIPELINES: (cmd_get_all_pipelines, format_pipelines_table),
    Task.GET_LATEST_ARTIFACTS: (cmd_get_latest_artifacts, format_artifacts_table),
    Task.GET_ME: (cmd_get_me, format_me_table),
    Task.TRIGGER: (cmd_trigger, format_trigger_table),
    Task.LIST_ALL: (cmd_list_all, format_projects_table),
}


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


def run_task(task, cfg, client):
    """Validate, make the one API call for *task*, log and return its result."""
    require_fields(task, cfg)
    handler, _ = TASK_HANDLERS[task]
    logger.debug("Running task %s", task)
    result = handler(client, cfg)
    logger.info("%s: %r", task, result)
    return result


def cmd_run(task, cfg, client, fmt="json"):
    """run_task() plus printing in the requested format."""
    result = run_task(task, cfg, client)
    _, formatter = TASK_HANDLERS[task]
    output(result, formatter, fmt)
    return result
