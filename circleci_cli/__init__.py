"""circleci-cli — CLI tool for listing, inspecting and triggering CircleCI pipelines."""

from circleci_cli.client import CircleCiClient
from circleci_cli.config import VERSION, Configuration
from circleci_cli.exceptions import (
    ApiError,
    CliError,
    MissingConfigError,
    SetupError,
    TaskParseError,
)
from circleci_cli.models import (
    Actor,
    Artifact,
    Branch,
    Build,
    Commit,
    Pipeline,
    PipelineError,
    PipelineLight,
    PipelineList,
    Project,
    Trigger,
    TriggerRequest,
    User,
    Vcs,
)
from circleci_cli.tasks import Task

__all__ = [
    "VERSION",
    "CircleCiClient",
    "Configuration",
    "Task",
    "ApiError",
    "CliError",
    "MissingConfigError",
    "SetupError",
    "TaskParseError",
    "Actor",
    "Artifact",
    "Branch",
    "Build",
    "Commit",
    "Pipeline",
    "PipelineError",
    "PipelineLight",
    "PipelineList",
    "Project",
    "Trigger",
    "TriggerRequest",
    "User",
    "Vcs",
]
