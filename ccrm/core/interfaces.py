"""
Core interfaces and abstract base classes for the CCRM platform.
"""

from abc import ABC, abstractmethod
from typing import Callable, Generic, List, Optional, TypeVar


T = TypeVar('T')


class Describable(ABC):
    """Interface for entities that render a human-readable profile."""

    @abstractmethod
    def details(self) -> str:
        """Return a multi-line description of the entity."""
        pass


class Searchable(ABC, Generic[T]):
    """Interface for registries that can be filtered with a predicate."""

    @abstractmethod
    def search(self, predicate: Callable[[T], bool]) -> List[T]:
        """Return every item matching the predicate, in registry order."""
        pass

    def find_first(self, predicate: Callable[[T], bool]) -> Optional[T]:
        """Return the first item matching the predicate, or None."""
        results = self.search(predicate)
        return results[0] if results else None
