from __future__ import annotations

import inspect
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Optional

from .logging import get_logger


@dataclass
class TaskSpec:
    name: str
    fn: Optional[Callable[..., object]] = None
    description: str = ""
    # Alias tasks run these, in order, instead of a function
    subtasks: List[str] = field(default_factory=list)

    @property
    def is_alias(self) -> bool:
        return self.fn is None


def task(name: str, description: str = ""):
    """Decorator to declare a task on a function.

    The wrapped function receives the loaded `SiteConfig` as `config`. If it
    also declares a `pipeline` parameter it gets the running Pipeline, which
    lets long-lived tasks (watch) dispatch to other tasks.
    """

    def deco(fn: Callable[..., object]):
        doc = (inspect.getdoc(fn) or "").splitlines()
        spec = TaskSpec(name=name, fn=fn, description=description or (doc[0] if doc else ""))
        setattr(fn, "_task_spec", spec)
        return fn

    return deco


def alias(name: str, subtasks: Iterable[str], description: str = "") -> TaskSpec:
    """Declare a task that runs other tasks in the given order."""
    subtasks = list(subtasks)
    if not subtasks:
        raise ValueError(f"Alias task {name!r} needs at least one subtask")
    return TaskSpec(
        name=name,
        description=description or "Alias for " + ", ".join(subtasks),
        subtasks=subtasks,
    )


def register(specs: Dict[str, TaskSpec], spec: TaskSpec) -> None:
    existing = specs.get(spec.name)
    if existing is not None and existing is not spec:
        raise ValueError(f"Duplicate task name: {spec.name}")
    specs[spec.name] = spec


def expand(tasks: Dict[str, TaskSpec], names: Iterable[str]) -> list[str]:
    """Flatten alias tasks into the ordered list of runnable steps."""
    ordered: list[str] = []

    def visit(n: str, stack: tuple[str, ...]) -> None:
        if n not in tasks:
            raise KeyError(n)
        if n in stack:
            raise ValueError("Cycle detected in task aliases: " + " → ".join(stack + (n,)))
        spec = tasks[n]
        if spec.is_alias:
            for sub in spec.subtasks:
                visit(sub, stack + (n,))
        else:
            ordered.append(n)

    for n in names:
        visit(n, ())
    return ordered


class Pipeline:
    def __init__(self, tasks: dict[str, TaskSpec], name: str = "pipeline"):
        self.name = name
        self.tasks = tasks
        self.logger = get_logger(f"sitebuild.{self.name}")

    def run(self, config, names: Iterable[str]) -> list[str]:
        """Run the named tasks in order, stopping at the first failure.

        Returns the steps that ran. The failing step's exception propagates
        and no later step is started.
        """
        selected = expand(self.tasks, names)
        self.logger.info("Selected steps: %s", " → ".join(selected))

        for step_name in selected:
            spec = self.tasks[step_name]
            step_logger = get_logger(f"sitebuild.{self.name}.{step_name}")
            kwargs = {"config": config}
            if "pipeline" in inspect.signature(spec.fn).parameters:
                kwargs["pipeline"] = self
            started = time.perf_counter()
            try:
                step_logger.info("Run: %s", step_name)
                spec.fn(**kwargs)
            except Exception:
                step_logger.exception("Step failed (%s)", step_name)
                raise
            step_logger.info("Finished %s in %.2fs", step_name, time.perf_counter() - started)
        return selected
