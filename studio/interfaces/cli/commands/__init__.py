"""CLI command groups for Studio.

Command groups (registered with ``app.add_typer``):
- workspace: create, list, delete and switch workspaces
- extension: install and uninstall extensions
- config: show and change global configuration

Top-level commands come from:
- files: files, cat, write, rm, mv
- task: ask, tasks, show, approve, reject, build
- autopilot: autopilot
- serve: serve
"""

from studio.interfaces.cli.commands import autopilot, config, extension, files, serve, task, workspace

__all__ = ["workspace", "extension", "config", "files", "task", "autopilot", "serve"]
