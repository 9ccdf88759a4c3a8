"""Test factories for generating test data.

Re-exports all factories for convenient imports:
    from tests.factories import UserFactory, ProjectFactory, ...
"""

from tests.factories.base import BaseFactory
from tests.factories.project import ProjectFactory
from tests.factories.user import DEFAULT_TEST_PASSWORD, UserFactory

__all__ = [
    "BaseFactory",
    "ProjectFactory",
    "UserFactory",
    "DEFAULT_TEST_PASSWORD",
]
