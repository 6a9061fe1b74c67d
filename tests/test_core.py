"""Tests for task declaration, alias expansion and the sequential pipeline."""

from __future__ import annotations

import pytest

from sitebuild.cli import discover_tasks
from sitebuild.core import Pipeline, TaskSpec, alias, expand, register, task


def _specs(calls):
    @task(name="a")
    def a(config):
        calls.append("a")

    @task(name="b")
    def b(config):
        calls.append("b")
        raise RuntimeError("b broke")

    @task(name="c")
    def c(config, pipeline):
        calls.append(("c", pipeline.name))

    specs = {}
    for spec in (a._task_spec, b._task_spec, c._task_spec, alias("ab", ["a", "b", "c"])):
        register(specs, spec)
    return specs


def test_task_decorator_attaches_spec():
    @task(name="hello")
    def hello(config):
        """Say hello.

        Longer text.
        """

    assert hello._task_spec.name == "hello"
    assert hello._task_spec.description == "Say hello."
    assert not hello._task_spec.is_alias


def test_duplicate_names_rejected():
    specs = {}
    register(specs, TaskSpec(name="x", fn=lambda config: None))
    with pytest.raises(ValueError, match="Duplicate"):
        register(specs, TaskSpec(name="x", fn=lambda config: None))


def test_alias_needs_subtasks():
    with pytest.raises(ValueError):
        alias("empty", [])


def test_expand_keeps_declared_order():
    specs = {
        "x": TaskSpec(name="x", fn=lambda config: None),
        "y": TaskSpec(name="y", fn=lambda config: None),
        "xy": alias("xy", ["y", "x"]),
        "all": alias("all", ["xy", "x"]),
    }
    assert expand(specs, ["all"]) == ["y", "x", "x"]


def test_expand_unknown_and_cycle():
    specs = {"loop": alias("loop", ["loop2"]), "loop2": alias("loop2", ["loop"])}
    with pytest.raises(KeyError):
        expand(specs, ["missing"])
    with pytest.raises(ValueError, match="Cycle"):
        expand(specs, ["loop"])


def test_pipeline_stops_at_first_failure():
    calls = []
    pipe = Pipeline(tasks=_specs(calls), name="t")
    with pytest.raises(RuntimeError, match="b broke"):
        pipe.run(config=None, names=["ab"])
    assert calls == ["a", "b"]


def test_pipeline_passes_itself_when_requested():
    calls = []
    pipe = Pipeline(tasks=_specs(calls), name="t")
    assert pipe.run(config=None, names=["a", "c"]) == ["a", "c"]
    assert calls == ["a", ("c", "t")]


def test_discovered_tasks():
    specs = discover_tasks()
    assert {"less-build", "assets-copy", "shell:jekyll", "jekyll-build", "watch", "default"} <= set(specs)
    assert specs["jekyll-build"].subtasks == ["shell:jekyll", "less-build", "assets-copy"]
    assert expand(specs, ["default"]) == ["watch"]
