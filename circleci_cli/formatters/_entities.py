"""Readable tables for each task result."""

from circleci_cli.formatters._table import _sanitize_str, _table, _trunc


def format_projects_table(projects):
    """Format list_all results, one row per project."""
    if not projects:
        return "No projects found."
    cols = [("Project", 30), ("User", 16), ("Following", 10), ("Branches", 0)]
    rows = []
    for p in projects:
        rows.append(
            (
                _trunc(p.repo_name, 30),
                _trunc(p.username, 16),
                "yes" if p.following else "no",
                ", ".join(sorted(p.branches)) or "-",
            )
        )
    return _table(cols, rows, f"Total: {len(projects)} projects")


def format_pipelines_table(pipelines):
    """Format one page of pipelines."""
    if not pipelines.items:
        return "No pipelines found."
    cols = [("#", 7), ("State", 10), ("Ref", 24), ("Created", 26), ("Subject", 0)]
    rows = []
    for p in pipelines.items:
        ref = f"tag:{p.vcs.tag}" if p.vcs.tag else (p.vcs.branch or "-")
        subject = p.vcs.commit.subject if p.vcs.commit else ""
        rows.append(
            (
                str(p.number),
                p.state,
                _trunc(ref, 24),
                p.created_at,
                _trunc(subject.splitlines()[0] if subject else "-", 60),
            )
        )
    footer = f"Total: {len(pipelines.items)} pipelines"
    if pipelines.next_page_token:
        footer += " (more available)"
    return _table(cols, rows, footer)


def format_artifacts_table(artifacts):
    if not artifacts:
        return "No artifacts found."
    cols = [("Node", 5), ("Path", 40), ("URL", 0)]
    rows = [(str(a.node_index), _trunc(a.pretty_path, 40), a.url) for a in artifacts]
    return _table(cols, rows, f"Total: {len(artifacts)} artifacts")


def format_trigger_table(pipeline):
    return (
        f"Triggered pipeline #{pipeline.number}\n"
        f"  ID:      {pipeline.id}\n"
        f"  State:   {pipeline.state}\n"
        f"  Created: {pipeline.created_at}"
    )


def format_me_table(me):
    """Raw /me payload; show the well-known keys when present."""
    if not isinstance(me, dict):
        return _sanitize_str(str(me))
    lines = []
    for key in ("login", "name", "id", "selected_email"):
        if me.get(key) is not None:
            lines.append(f"{key + ':':<16}{_sanitize_str(str(me[key]))}")
    return "\n".join(lines) or "No user details returned."
