"""Interface for frontend lifters."""
from abc import ABC, abstractmethod
from typing import Callable, Dict, TypeVar

from autoderef.structures.hir.nodes import HirNode


class Lifter(ABC):
    """Represents a basic lifter emitting nodes of the intermediate representation."""

    @abstractmethod
    def lift(self, data, **kwargs) -> HirNode:
        """Lift the given data to a node."""


V = TypeVar("V")


class ObserverLifter(Lifter):
    """
    Base class for lifters following the observer-pattern.
    Handlers are registered per kind of node, so every lifter instance owns its own registry.
    """

    def __init__(self):
        self.HANDLERS: Dict[str, Callable[..., V]] = {}

    @abstractmethod
    def kind_of(self, data) -> str:
        """Return the kind the handler of the given data is registered for."""

    def lift(self, data, **kwargs) -> V:
        """Lift the given data based on the registered handlers."""
        handler = self.HANDLERS.get(self.kind_of(data), self.lift_unknown)
        return handler(data, **kwargs)

    @abstractmethod
    def lift_unknown(self, data, **kwargs) -> V:
        """Handle data when there is no registered handler for it."""


class Handler:
    """Base class for handlers to be registered in an ObserverLifter."""

    def __init__(self, lifter: ObserverLifter):
        self._lifter = lifter

    def register(self):
        """Register the handler at its parent lifter."""
        raise NotImplementedError(f"{self.__class__.__name__} does not register any kind")
