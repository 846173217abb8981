"""The closed set of tasks a single invocation can run."""

from enum import Enum

from circleci_cli.exceptions import TaskParseError


class Task(Enum):
    GET_ALL_PIPELINES = "get_all_pipelines"
    GET_LATEST_ARTIFACTS = "get_latest_artifacts"
    GET_ME = "get_me"
    LIST_ALL = "list_all"
    TRIGGER = "trigger"

    @classmethod
    def keywords(cls):
        return [task.value for task in cls]

    @classmethod
    def parse(cls, value):
        """Case-insensitive keyword lookup. Raises TaskParseError carrying the raw value."""
        try:
            return cls(str(value).lower())
        except ValueError:
            raise TaskParseError(value, cls.keywords()) from None

    def __str__(self):
        return self.value
