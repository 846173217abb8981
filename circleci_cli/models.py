"""
Typed records for CircleCI API responses and request bodies.

Each response record is built from decoded JSON with ``from_dict`` and turned
back into JSON-ready data with ``to_dict`` (API key names preserved).
A payload that does not match the expected shape raises ApiError.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar

from circleci_cli.exceptions import ApiError

# ---------------------------------------------------------------------------
# Shape helpers
# ---------------------------------------------------------------------------

_MISSING = object()


def _shape_error(context, expected, value):
    return ApiError(
        f"[ERROR] Unexpected {context} response shape: "
        f"expected {expected}, got {type(value).__name__}."
    )


def expect_object(value, context):
    """Ensure a decoded payload is a JSON object (dict)."""
    if isinstance(value, dict):
        return value
    raise _shape_error(context, "JSON object", value)


def expect_list(value, context):
    """Ensure a decoded payload is a JSON array (list)."""
    if isinstance(value, list):
        return value
    raise _shape_error(context, "JSON array", value)


def _get(d, key, kind, context, default=_MISSING):
    """Fetch d[key] checking its type. Missing or null falls back to *default* if given."""
    value = d.get(key)
    if value is None:
        if default is not _MISSING:
            return default
        raise ApiError(f"[ERROR] Unexpected {context} response shape: missing field '{key}'.")
    # bool is an int subclass; a JSON true is never a build number.
    if kind is int and isinstance(value, bool):
        raise _shape_error(f"{context}.{key}", "integer", value)
    if not isinstance(value, kind):
        raise _shape_error(f"{context}.{key}", kind.__name__, value)
    return value


def _to_json(value):
    if isinstance(value, _Record):
        return value.to_dict()
    if isinstance(value, list):
        return [_to_json(v) for v in value]
    if isinstance(value, dict):
        return {k: _to_json(v) for k, v in value.items()}
    return value


class _Record:
    """Mixin giving dataclass records a JSON view with the API's key names."""

    _renames: ClassVar[dict[str, str]] = {}

    def to_dict(self) -> dict[str, Any]:
        return {
            self._renames.get(f.name, f.name): _to_json(getattr(self, f.name))
            for f in fields(self)  # type: ignore[arg-type]
        }


# ---------------------------------------------------------------------------
# Legacy API (v1.1) records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Build(_Record):
    pushed_at: str
    vcs_revision: str
    build_num: int
    outcome: str

    @classmethod
    def from_dict(cls, d, context="build"):
        d = expect_object(d, context)
        return cls(
            pushed_at=_get(d, "pushed_at", str, context),
            vcs_revision=_get(d, "vcs_revision", str, context),
            build_num=_get(d, "build_num", int, context),
            outcome=_get(d, "outcome", str, context),
        )


@dataclass(frozen=True)
class Branch(_Record):
    """Per-branch summary inside a project. List fields may be absent in the payload."""

    pusher_logins: list[str] = field(default_factory=list)
    last_non_success: Build | None = None
    last_success: Build | None = None
    recent_builds: list[Build] = field(default_factory=list)
    running_builds: list[Build] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d, context="branch"):
        d = expect_object(d, context)

        def builds(key):
            raw = _get(d, key, list, context, default=[])
            return [Build.from_dict(b, f"{context}.{key}") for b in raw]

        def optional_build(key):
            raw = d.get(key)
            return None if raw is None else Build.from_dict(raw, f"{context}.{key}")

        return cls(
            pusher_logins=list(_get(d, "pusher_logins", list, context, default=[])),
            last_non_success=optional_build("last_non_success"),
            last_success=optional_build("last_success"),
            recent_builds=builds("recent_builds"),
            running_builds=builds("running_builds"),
        )


@dataclass(frozen=True)
class Project(_Record):
    _renames: ClassVar[dict[str, str]] = {"repo_name": "reponame"}

    vcs_url: str
    following: bool
    username: str
    repo_name: str
    branches: dict[str, Branch] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, d, context="project"):
        d = expect_object(d, context)
        raw_branches = _get(d, "branches", dict, context, default={})
        return cls(
            vcs_url=_get(d, "vcs_url", str, context),
            following=_get(d, "following", bool, context),
            username=_get(d, "username", str, context),
            repo_name=_get(d, "reponame", str, context),
            branches={
                name: Branch.from_dict(branch, f"{context}.branches[{name}]")
                for name, branch in raw_branches.items()
            },
        )


@dataclass(frozen=True)
class Artifact(_Record):
    path: str
    pretty_path: str
    node_index: int
    url: str

    @classmethod
    def from_dict(cls, d, context="artifact"):
        d = expect_object(d, context)
        return cls(
            path=_get(d, "path", str, context),
            pretty_path=_get(d, "pretty_path", str, context),
            node_index=_get(d, "node_index", int, context),
            url=_get(d, "url", str, context),
        )


@dataclass(frozen=True)
class User(_Record):
    login: str
    id: int

    @classmethod
    def from_dict(cls, d, context="me"):
        d = expect_object(d, context)
        return cls(login=_get(d, "login", str, context), id=_get(d, "id", int, context))


# ---------------------------------------------------------------------------
# Current API (v2) records
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PipelineLight(_Record):
    """Shape returned when a pipeline is triggered."""

    id: str
    state: str
    number: int
    created_at: str

    @classmethod
    def from_dict(cls, d, context="trigger"):
        d = expect_object(d, context)
        return cls(
            id=_get(d, "id", str, context),
            state=_get(d, "state", str, context),
            number=_get(d, "number", int, context),
            created_at=_get(d, "created_at", str, context),
        )


@dataclass(frozen=True)
class PipelineError(_Record):
    _renames: ClassVar[dict[str, str]] = {"error_type": "type"}

    error_type: str
    message: str

    @classmethod
    def from_dict(cls, d, context="pipeline.errors"):
        d = expect_object(d, context)
        return cls(
            error_type=_get(d, "type", str, context),
            message=_get(d, "message", str, context),
        )


@dataclass(frozen=True)
class Actor(_Record):
    login: str
    avatar_url: str | None

    @classmethod
    def from_dict(cls, d, context="actor"):
        d = expect_object(d, context)
        return cls(
            login=_get(d, "login", str, context),
            avatar_url=_get(d, "avatar_url", str, context, default=None),
        )


@dataclass(frozen=True)
class Trigger(_Record):
    _renames: ClassVar[dict[str, str]] = {"trigger_type": "type"}

    trigger_type: str
    received_at: str
    actor: Actor

    @classmethod
    def from_dict(cls, d, context="pipeline.trigger"):
        d = expect_object(d, context)
        return cls(
            trigger_type=_get(d, "type", str, context),
            received_at=_get(d, "received_at", str, context),
            actor=Actor.from_dict(d.get("actor"), f"{context}.actor"),
        )


@dataclass(frozen=True)
class Commit(_Record):
    subject: str
    body: str

    @classmethod
    def from_dict(cls, d, context="vcs.commit"):
        d = expect_object(d, context)
        return cls(
            subject=_get(d, "subject", str, context, default=""),
            body=_get(d, "body", str, context, default=""),
        )


@dataclass(frozen=True)
class Vcs(_Record):
    provider_name: str
    origin_repository_url: str
    target_repository_url: str
    revision: str
    branch: str | None = None
    tag: str | None = None
    commit: Commit | None = None

    @classmethod
    def from_dict(cls, d, context="pipeline.vcs"):
        d = expect_object(d, context)
        raw_commit = d.get("commit")
        commit = None if raw_commit is None else Commit.from_dict(raw_commit, f"{context}.commit")
        return cls(
            provider_name=_get(d, "provider_name", str, context),
            origin_repository_url=_get(d, "origin_repository_url", str, context),
            target_repository_url=_get(d, "target_repository_url", str, context),
            revision=_get(d, "revision", str, context),
            branch=_get(d, "branch", str, context, default=None),
            tag=_get(d, "tag", str, context, default=None),
            commit=commit,
        )


@dataclass(frozen=True)
class Pipeline(_Record):
    id: str
    errors: list[PipelineError]
    project_slug: str
    updated_at: str | None
    number: int
    state: str
    created_at: str
    trigger: Trigger
    vcs: Vcs

    @classmethod
    def from_dict(cls, d, context="pipeline"):
        d = expect_object(d, context)
        return cls(
            id=_get(d, "id", str, context),
            errors=[
                PipelineError.from_dict(e, f"{context}.errors")
                for e in _get(d, "errors", list, context, default=[])
            ],
            project_slug=_get(d, "project_slug", str, context),
            updated_at=_get(d, "updated_at", str, context, default=None),
            number=_get(d, "number", int, context),
            state=_get(d, "state", str, context),
            created_at=_get(d, "created_at", str, context),
            trigger=Trigger.from_dict(d.get("trigger"), f"{context}.trigger"),
            vcs=Vcs.from_dict(d.get("vcs"), f"{context}.vcs"),
        )


@dataclass(frozen=True)
class PipelineList(_Record):
    """One page of pipelines. ``next_page_token`` is decoded but never followed."""

    items: list[Pipeline]
    next_page_token: str | None = None

    @classmethod
    def from_dict(cls, d, context="pipelines"):
        d = expect_object(d, context)
        items = expect_list(d.get("items"), f"{context}.items")
        return cls(
            items=[Pipeline.from_dict(p, f"{context}.items[{i}]") for i, p in enumerate(items)],
            next_page_token=_get(d, "next_page_token", str, context, default=None),
        )


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TriggerRequest:
    """Body of a pipeline trigger. Only the supplied keys are sent."""

    branch: str | None = None
    tag: str | None = None

    def to_body(self):
        body = {}
        if self.branch is not None:
            body["branch"] = self.branch
        if self.tag is not None:
            body["tag"] = self.tag
        return body
