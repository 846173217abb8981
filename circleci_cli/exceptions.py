"""
circleci-cli exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class CliError(Exception):
    """Exit code 1 — argument, task, missing-field and API errors."""

    exit_code = 1


class SetupError(CliError):
    """Exit code 2 — no home directory, missing or malformed config file."""

    exit_code = 2


class TaskParseError(CliError):
    """Raised when a task keyword is not one of the recognized tasks."""

    def __init__(self, value, valid=()):
        self.value = value
        message = f"[ERROR] Unknown task {value!r}."
        if valid:
            message += f" Valid: {', '.join(valid)}"
        super().__init__(message)


class MissingConfigError(CliError):
    """Raised when a task needs a config field that neither the file nor the CLI set."""

    def __init__(self, task, fields):
        self.task = task
        self.fields = tuple(fields)
        flags = ", ".join(f"--{name}" for name in self.fields)
        super().__init__(
            f"[ERROR] Task '{task}' requires {', '.join(self.fields)}. "
            f"Set it in the config file or pass {flags}."
        )


class ApiError(CliError):
    """Any transport, HTTP or decoding failure talking to the CircleCI API."""

    def __init__(self, message, status=None):
        self.status = status
        super().__init__(message)


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
