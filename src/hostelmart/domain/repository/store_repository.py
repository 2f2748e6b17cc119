"""Abstract repository for the StoreState snapshot.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON file, in-memory)
live in the infrastructure layer and in the tests.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from hostelmart.domain.model.store import StoreState


class StoreRepository(ABC):

    @abstractmethod
    def get(self) -> StoreState:
        """Return the live in-memory snapshot shared by every request."""

    @abstractmethod
    def save(self, state: StoreState) -> None:
        """Mirror the snapshot to durable storage.

        Failures are logged by the implementation and never undo the
        in-memory change.
        """
