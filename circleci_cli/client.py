"""
CircleCiClient — public Python API for the CircleCI REST endpoints this tool uses.

Two API generations are involved and they authenticate differently:
legacy v1.1 takes the token as the ``circle-token`` query parameter,
v2 takes it as the ``Circle-Token`` header.
"""

from __future__ import annotations

import urllib.parse
from typing import Any

from circleci_cli import config
from circleci_cli.api import TOKEN_QUERY_PARAM, api_request, create_url
from circleci_cli.models import (
    Artifact,
    PipelineLight,
    PipelineList,
    Project,
    TriggerRequest,
    User,
    expect_list,
)


class CircleCiClient:
    """Thin client over the CircleCI v1.1 and v2 APIs.

    Args:
        token: CircleCI personal API token.
        owner: Account that owns the targeted repositories.
        vcs_type: VCS provider segment of project paths.
    """

    def __init__(self, token, owner=None, vcs_type=config.VCS_TYPE):
        self.token = token
        self.owner = owner or config.DEFAULT_OWNER
        self.vcs_type = vcs_type

    def __repr__(self):
        return f"CircleCiClient(owner={self.owner!r}, vcs_type={self.vcs_type!r})"

    # -------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------

    def get_me(self) -> Any:
        """Current user, as the raw decoded JSON."""
        return self._get_v1_1("/me")

    def get_user(self) -> User:
        return User.from_dict(self.get_me())

    def get_all_projects(self) -> list[Project]:
        raw = expect_list(self._get_v1_1("/projects"), "projects")
        return [Project.from_dict(p, f"projects[{i}]") for i, p in enumerate(raw)]

    def get_all_pipelines(self, project) -> PipelineList:
        """First page of pipelines for *project*."""
        return PipelineList.from_dict(self._get_v2(f"{self._project_path(project)}/pipeline"))

    def get_latest_artifacts(self, project, branch) -> list[Artifact]:
        raw = expect_list(
            self._get_v1_1(
                f"{self._project_path(project)}/latest/artifacts",
                [("branch", branch)],
            ),
            "artifacts",
        )
        return [Artifact.from_dict(a, f"artifacts[{i}]") for i, a in enumerate(raw)]

    def trigger_build_for(self, project, branch=None, tag=None) -> PipelineLight:
        """Trigger a pipeline. Branch and tag are sent only when given."""
        request = TriggerRequest(branch=branch, tag=tag)
        return PipelineLight.from_dict(
            self._post_v2(f"{self._project_path(project)}/pipeline", request.to_body())
        )

    # -------------------------------------------------------------------
    # Request helpers
    # -------------------------------------------------------------------

    def _project_path(self, project):
        segments = (self.vcs_type, self.owner, project)
        return "/project/" + "/".join(urllib.parse.quote(s, safe="") for s in segments)

    def url_v1_1(self, path, params=()):
        """Legacy URL; the token param always comes first."""
        return create_url(
            config.BASE_URL_V1_1, path, [(TOKEN_QUERY_PARAM, self.token), *params]
        )

    def url_v2(self, path, params=()):
        return create_url(config.BASE_URL_V2, path, list(params))

    def _get_v1_1(self, path, params=()):
        return api_request(self.url_v1_1(path, params))

    def _get_v2(self, path, params=()):
        return api_request(self.url_v2(path, params), token=self.token)

    def _post_v2(self, path, body):
        return api_request(self.url_v2(path), data=body, method="POST", token=self.token)
