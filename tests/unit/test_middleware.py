"""Tests for learning/middleware.py - exception capture wrappers."""

from __future__ import annotations

import pytest

from errorlearning.learning.middleware import with_error_learning
from errorlearning.learning.models import ErrorKind
from errorlearning.learning.registry import ErrorLearningRegistry


class ProjectStorage:
    def save(self, name: str) -> str:
        if not name:
            raise ValueError("project name must not be empty")
        return name

    async def load(self, project_id: int) -> int:
        raise LookupError(f"project {project_id} not found")


class TestSyncWrapper:
    def test_success_passes_through(self, registry: ErrorLearningRegistry) -> None:
        save = with_error_learning(registry, ProjectStorage().save)
        assert save("Brücke Nord") == "Brücke Nord"
        assert registry.get_statistics().total_errors == 0

    def test_exception_is_logged_and_reraised(self, registry: ErrorLearningRegistry) -> None:
        save = with_error_learning(registry, ProjectStorage().save)

        with pytest.raises(ValueError, match="must not be empty"):
            save("")

        (entry,) = registry.entries
        assert entry.kind is ErrorKind.RUNTIME
        assert entry.original_message == "project name must not be empty"
        assert entry.affected_file == "ProjectStorage.save"
        assert entry.context == "Method execution: save"
        assert entry.stack_trace is not None
        assert "ValueError" in entry.stack_trace

    def test_explicit_owner(self, registry: ErrorLearningRegistry) -> None:
        save = with_error_learning(registry, ProjectStorage().save, owner="Storage")
        with pytest.raises(ValueError):
            save("")
        assert registry.entries[0].affected_file == "Storage.save"

    def test_nested_function_uses_qualname_owner(self, registry: ErrorLearningRegistry) -> None:
        def explode() -> None:
            raise RuntimeError("boom")

        wrapped = with_error_learning(registry, explode)
        with pytest.raises(RuntimeError):
            wrapped()
        affected = registry.entries[0].affected_file
        assert affected.endswith(".explode")
        assert affected.startswith("TestSyncWrapper.test_nested_function_uses_qualname_owner")

    def test_wrapper_keeps_metadata(self, registry: ErrorLearningRegistry) -> None:
        save = with_error_learning(registry, ProjectStorage().save)
        assert save.__name__ == "save"


class TestAsyncWrapper:
    @pytest.mark.asyncio
    async def test_exception_is_logged_and_reraised(self, registry: ErrorLearningRegistry) -> None:
        load = with_error_learning(registry, ProjectStorage().load)

        with pytest.raises(LookupError):
            await load(7)

        (entry,) = registry.entries
        assert entry.kind is ErrorKind.RUNTIME
        assert entry.original_message == "project 7 not found"
        assert entry.affected_file == "ProjectStorage.load"
        assert entry.context == "Method execution: load"

    @pytest.mark.asyncio
    async def test_repeated_failures_recur(self, registry: ErrorLearningRegistry) -> None:
        load = with_error_learning(registry, ProjectStorage().load)
        for _ in range(3):
            with pytest.raises(LookupError):
                await load(7)

        counts = [entry.occurrence_count for entry in registry.entries]
        assert counts == [1, 2, 3]
