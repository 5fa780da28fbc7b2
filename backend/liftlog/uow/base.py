"""
Unit of Work contract shared by the service layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class UnitOfWork(ABC):
    """
    One transactional scope for a service call.

    Implementations expose ``exercises``, ``workouts``, ``workout_exercises``
    and ``sets`` repositories bound to the same session, so an ownership check
    and the write it guards see the same snapshot.
    """

    @abstractmethod
    def __enter__(self) -> UnitOfWork: ...
    @abstractmethod
    def __exit__(self, exc_type, exc, tb) -> None: ...
    @abstractmethod
    def commit(self) -> None: ...
    @abstractmethod
    def rollback(self) -> None: ...
