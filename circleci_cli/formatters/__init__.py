"""Output formatting package for circleci-cli.

Re-exports all public names so consumers can do:
    from circleci_cli.formatters import format_projects_table
"""

from circleci_cli.formatters._core import output, pretty_print, to_jsonable
from circleci_cli.formatters._entities import (
    format_artifacts_table,
    format_me_table,
    format_pipelines_table,
    format_projects_table,
    format_trigger_table,
)

__all__ = [
    "format_artifacts_table",
    "format_me_table",
    "format_pipelines_table",
    "format_projects_table",
    "format_trigger_table",
    "output",
    "pretty_print",
    "to_jsonable",
]
