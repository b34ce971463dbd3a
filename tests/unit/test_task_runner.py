"""Unit tests for the task runner."""

import pytest

from nightcap.errors import TaskCycleError, UnknownTaskError
from nightcap.tasks.models import TaskContext, TaskDefinition
from nightcap.tasks.registry import TaskRegistry
from nightcap.tasks.runner import TaskRunner


@pytest.fixture
def registry():
    """Create an empty registry."""
    return TaskRegistry()


@pytest.fixture
def runner(registry):
    """Create a runner over the registry."""
    return TaskRunner(registry)


@pytest.fixture
def context():
    """Create a minimal task context."""
    return TaskContext(config={}, network={}, network_name="localnet")


def recording_task(name, calls, dependencies=None, fail=False):
    """Task that appends its name to ``calls`` when run."""

    def action(ctx):
        calls.append(name)
        if fail:
            raise RuntimeError(f"{name} broke")

    return TaskDefinition(name=name, dependencies=dependencies or [], action=action)


class TestExecutionOrder:
    """Test dependency resolution."""

    def test_dependency_runs_first(self, registry, runner):
        """Test B depending on A resolves to [A, B]."""
        registry.register(TaskDefinition(name="a", action=lambda ctx: None))
        registry.register(TaskDefinition(name="b", dependencies=["a"], action=lambda ctx: None))

        assert runner.resolve_execution_order("b") == ["a", "b"]

    def test_shared_dependency_runs_once(self, registry, runner):
        """Test a diamond only schedules the shared task once."""
        registry.register(TaskDefinition(name="base", action=lambda ctx: None))
        registry.register(TaskDefinition(name="left", dependencies=["base"], action=lambda ctx: None))
        registry.register(TaskDefinition(name="right", dependencies=["base"], action=lambda ctx: None))
        registry.register(
            TaskDefinition(name="top", dependencies=["left", "right"], action=lambda ctx: None)
        )

        assert runner.resolve_execution_order("top") == ["base", "left", "right", "top"]

    def test_self_cycle(self, registry, runner):
        """Test a task depending on itself is rejected."""
        registry.register(TaskDefinition(name="a", dependencies=["a"], action=lambda ctx: None))

        with pytest.raises(TaskCycleError) as exc_info:
            runner.resolve_execution_order("a")

        assert exc_info.value.cycle == ["a", "a"]

    def test_two_node_cycle(self, registry, runner):
        """Test A -> B -> A is rejected."""
        registry.register(TaskDefinition(name="a", dependencies=["b"], action=lambda ctx: None))
        registry.register(TaskDefinition(name="b", dependencies=["a"], action=lambda ctx: None))

        with pytest.raises(TaskCycleError) as exc_info:
            runner.resolve_execution_order("a")

        assert exc_info.value.cycle == ["a", "b", "a"]
        assert "a -> b -> a" in str(exc_info.value)

    def test_three_node_cycle(self, registry, runner):
        """Test A -> B -> C -> A is rejected with every member."""
        registry.register(TaskDefinition(name="a", dependencies=["b"], action=lambda ctx: None))
        registry.register(TaskDefinition(name="b", dependencies=["c"], action=lambda ctx: None))
        registry.register(TaskDefinition(name="c", dependencies=["a"], action=lambda ctx: None))

        with pytest.raises(TaskCycleError) as exc_info:
            runner.resolve_execution_order("a")

        assert exc_info.value.cycle == ["a", "b", "c", "a"]

    def test_cycle_path_excludes_entry_prefix(self, registry, runner):
        """Test the cycle only lists the looping tasks."""
        registry.register(TaskDefinition(name="entry", dependencies=["a"], action=lambda ctx: None))
        registry.register(TaskDefinition(name="a", dependencies=["b"], action=lambda ctx: None))
        registry.register(TaskDefinition(name="b", dependencies=["a"], action=lambda ctx: None))

        with pytest.raises(TaskCycleError) as exc_info:
            runner.resolve_execution_order("entry")

        assert exc_info.value.cycle == ["a", "b", "a"]

    def test_unknown_task_has_suggestions(self, registry, runner):
        """Test unknown names carry close matches."""
        registry.register(TaskDefinition(name="compile", action=lambda ctx: None))

        with pytest.raises(UnknownTaskError) as exc_info:
            runner.resolve_execution_order("compil")

        assert exc_info.value.name == "compil"
        assert exc_info.value.suggestions == ["compile"]

    def test_unknown_dependency(self, registry, runner):
        """Test a missing dependency is reported by its own name."""
        registry.register(TaskDefinition(name="deploy", dependencies=["compile"], action=lambda ctx: None))

        with pytest.raises(UnknownTaskError, match="Unknown task: compile"):
            runner.resolve_execution_order("deploy")


class TestRun:
    """Test running tasks."""

    @pytest.mark.asyncio
    async def test_runs_dependencies_in_order(self, registry, runner, context):
        """Test both tasks execute, dependency first."""
        calls = []
        registry.register(recording_task("a", calls))
        registry.register(recording_task("b", calls, dependencies=["a"]))

        results = await runner.run("b", context)

        assert calls == ["a", "b"]
        assert [r.name for r in results] == ["a", "b"]
        assert all(r.success for r in results)
        assert all(r.duration >= 0 for r in results)

    @pytest.mark.asyncio
    async def test_stops_at_first_failure(self, registry, runner, context):
        """Test a failure at position k yields k results and skips the rest."""
        calls = []
        registry.register(recording_task("one", calls))
        registry.register(recording_task("two", calls, dependencies=["one"], fail=True))
        registry.register(recording_task("three", calls, dependencies=["two"]))
        registry.register(recording_task("four", calls, dependencies=["three"]))

        results = await runner.run("four", context)

        assert calls == ["one", "two"]
        assert len(results) == 2
        assert results[0].success
        assert not results[1].success
        assert isinstance(results[1].error, RuntimeError)
        assert str(results[1].error) == "two broke"

    @pytest.mark.asyncio
    async def test_async_actions_are_awaited(self, registry, runner, context):
        """Test coroutine actions are awaited."""
        calls = []

        async def action(ctx):
            calls.append(ctx.network_name)

        registry.register(TaskDefinition(name="async", action=action))

        results = await runner.run("async", context)

        assert calls == ["localnet"]
        assert results[0].success

    @pytest.mark.asyncio
    async def test_context_passed_to_every_task(self, registry, runner, context):
        """Test dependencies receive the same context."""
        seen = []
        registry.register(TaskDefinition(name="a", action=lambda ctx: seen.append(ctx)))
        registry.register(TaskDefinition(name="b", dependencies=["a"], action=lambda ctx: seen.append(ctx)))

        await runner.run("b", context)

        assert seen == [context, context]

    @pytest.mark.asyncio
    async def test_cycle_raises_before_running(self, registry, runner, context):
        """Test nothing runs when the graph has a cycle."""
        calls = []
        registry.register(recording_task("a", calls, dependencies=["b"]))
        registry.register(recording_task("b", calls, dependencies=["a"]))

        with pytest.raises(TaskCycleError):
            await runner.run("a", context)

        assert calls == []

    @pytest.mark.asyncio
    async def test_context_factory_builds_context_per_task(self, registry, runner, context):
        """Test each planned task gets the context built for its own name."""
        seen = []
        registry.register(TaskDefinition(name="a", action=lambda ctx: seen.append(ctx.params["task"])))
        registry.register(
            TaskDefinition(name="b", dependencies=["a"], action=lambda ctx: seen.append(ctx.params["task"]))
        )

        def factory(task_name):
            return TaskContext(config={}, network={}, network_name="localnet", params={"task": task_name})

        await runner.run("b", context, context_factory=factory)

        assert seen == ["a", "b"]
