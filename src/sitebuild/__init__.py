"""Task runner for building the jto.github.io site.

Provides Task and Pipeline primitives, the LESS / Jekyll / asset-copy / watch
tasks under `sitebuild.tasks`, and a Typer CLI.
"""

from .core import TaskSpec, Pipeline, task, alias  # re-export for convenience

__all__ = ["TaskSpec", "Pipeline", "task", "alias"]
