"""Unit tests for the task registry."""

import pytest

from nightcap.errors import TaskRegistrationError
from nightcap.tasks.models import TaskDefinition, TaskParam
from nightcap.tasks.registry import TaskRegistry, levenshtein_distance


def make_task(name, action=None, **kwargs):
    return TaskDefinition(name=name, action=action or (lambda ctx: None), **kwargs)


class TestTaskRegistry:
    """Test TaskRegistry registration and lookup."""

    @pytest.fixture
    def registry(self):
        """Create an empty registry."""
        return TaskRegistry()

    def test_register_and_get(self, registry):
        """Test registering a task and looking it up."""
        task = make_task("compile", description="Compile contracts")
        registry.register(task)

        assert registry.has("compile")
        assert registry.get("compile") is task
        assert registry.get("missing") is None
        assert not registry.has("missing")

    def test_get_all_tasks_keeps_registration_order(self, registry):
        """Test listing tasks in registration order."""
        for name in ["compile", "deploy", "test"]:
            registry.register(make_task(name))

        assert [t.name for t in registry.get_all_tasks()] == ["compile", "deploy", "test"]

    def test_register_twice_keeps_previous_as_original(self, registry):
        """Test re-registration records the replaced definition."""
        first = make_task("foo", description="first")
        second = make_task("foo", description="second")

        registry.register(first)
        assert not registry.has_original("foo")

        registry.register(second)
        assert registry.get("foo") is second
        assert registry.get_original("foo") is first

    def test_third_registration_points_at_second(self, registry):
        """Test only the immediately previous definition is kept."""
        first = make_task("foo", description="first")
        second = make_task("foo", description="second")
        third = make_task("foo", description="third")

        registry.register(first)
        registry.register(second)
        registry.register(third)

        assert registry.get("foo") is third
        assert registry.get_original("foo") is second


class TestOverride:
    """Test TaskRegistry.override."""

    def test_override_missing_task_fails(self):
        """Test overriding an unknown task raises."""
        registry = TaskRegistry()
        with pytest.raises(TaskRegistrationError, match="non-existent task: nope"):
            registry.override("nope", {"description": "x"})

    def test_override_keeps_action_when_not_given(self):
        """Test override merges fields and keeps the action."""
        registry = TaskRegistry()
        action = lambda ctx: "ran"
        registry.register(make_task("build", action=action, description="old"))

        registry.override("build", {"description": "new", "params": {"fast": {"type": "boolean"}}})

        task = registry.get("build")
        assert task.description == "new"
        assert task.action is action
        assert isinstance(task.params["fast"], TaskParam)
        assert task.params["fast"].type == "boolean"

    def test_override_records_history_once(self):
        """Test the first override's predecessor stays the original."""
        registry = TaskRegistry()
        original = make_task("build", description="v1")
        registry.register(original)

        registry.override("build", {"description": "v2"})
        registry.override("build", {"description": "v3"})

        assert registry.get("build").description == "v3"
        assert registry.get_original("build") is original


class TestRegisterCustom:
    """Test registering tasks from configuration."""

    def test_new_custom_task(self):
        """Test creating a task from a config entry."""
        registry = TaskRegistry()
        action = lambda ctx: None

        registry.register_custom("hello", {"action": action, "params": {"name": {"required": True}}})

        task = registry.get("hello")
        assert task.description == "Custom task: hello"
        assert task.action is action
        assert task.params["name"].required is True

    def test_new_custom_task_without_action_fails(self):
        """Test a new custom task needs an action."""
        registry = TaskRegistry()
        with pytest.raises(TaskRegistrationError, match="no action provided"):
            registry.register_custom("hello", {"description": "Says hello"})

    def test_custom_merges_onto_existing(self):
        """Test a config entry extends an existing task."""
        registry = TaskRegistry()
        action = lambda ctx: None
        registry.register(
            make_task(
                "deploy",
                action=action,
                description="Deploy",
                params={"network": TaskParam(description="Target")},
            )
        )

        registry.register_custom(
            "deploy",
            {"dependencies": ["compile"], "params": {"verify": {"type": "boolean"}}},
        )

        task = registry.get("deploy")
        assert task.description == "Deploy"
        assert task.action is action
        assert task.dependencies == ["compile"]
        assert set(task.params) == {"network", "verify"}
        assert registry.get_original("deploy").dependencies == []


class TestSuggestions:
    """Test fuzzy task name suggestions."""

    @pytest.fixture
    def registry(self):
        """Create a registry with a few tasks."""
        registry = TaskRegistry()
        for name in ["compile", "deploy", "doctor", "clean"]:
            registry.register(make_task(name))
        return registry

    def test_typo_within_distance_two(self, registry):
        """Test misspelled names are suggested."""
        assert registry.get_suggestions("compiel") == ["compile"]
        assert registry.get_suggestions("dploy") == ["deploy"]

    def test_substring_match_is_case_insensitive(self, registry):
        """Test substring matches in either direction."""
        assert registry.get_suggestions("DOC") == ["doctor"]
        assert "clean" in registry.get_suggestions("clean-all")

    def test_no_suggestions_for_unrelated_name(self, registry):
        """Test unrelated names give no suggestions."""
        assert registry.get_suggestions("zzzzzzzz") == []


class TestLevenshteinDistance:
    """Test edit distance helper."""

    @pytest.mark.parametrize(
        "a,b,expected",
        [
            ("", "", 0),
            ("abc", "", 3),
            ("kitten", "sitting", 3),
            ("deploy", "dploy", 1),
            ("compile", "compiel", 2),
        ],
    )
    def test_distance(self, a, b, expected):
        """Test known distances."""
        assert levenshtein_distance(a, b) == expected
        assert levenshtein_distance(b, a) == expected
