"""Per-invocation service container shared by CLI commands."""

from __future__ import annotations

import click

from mapcraft.infrastructure.bootstrap import Container, container


def services() -> Container:
    """Build the container once per CLI invocation and cache it on the context."""
    ctx = click.get_current_context()
    root = ctx.find_root()
    root.ensure_object(dict)
    if "container" not in root.obj:
        root.obj["container"] = container(root.obj.get("database_url"))
    return root.obj["container"]
