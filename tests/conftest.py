import pytest

from vclass.services import CommandDispatcher, ConcurrencyManager, Registry


@pytest.fixture
def registry() -> Registry:
    """Fixture for an empty registry with its own lock."""
    return Registry(ConcurrencyManager())


@pytest.fixture
def math_registry(registry: Registry) -> Registry:
    """Fixture for a registry holding Math101 with student S1 and assignment HW1."""
    registry.create_classroom("Math101")
    registry.enroll_student("S1", "Math101")
    registry.schedule_assignment("Math101", "HW1")
    return registry


@pytest.fixture
def dispatcher(registry: Registry) -> CommandDispatcher:
    """Fixture for a dispatcher bound to the empty registry."""
    return CommandDispatcher(registry)
