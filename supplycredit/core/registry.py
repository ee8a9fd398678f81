"""Stage registry for the supplycredit runtime."""
from __future__ import annotations

from typing import Callable, Dict, Iterator, List

from .stage import StageCallable, StageDefinition


class StageRegistry:
    """Keeps track of the available stages and their run order."""

    def __init__(self) -> None:
        self._stages: Dict[str, StageDefinition] = {}

    def register(
        self, name: str, func: StageCallable, description: str = "", order: int = 100
    ) -> StageCallable:
        """Register *func* under *name* and return it for decorator usage.

        Stages run by *order*, ties broken by registration order.
        """

        if name in self._stages:
            raise ValueError(f"Stage '{name}' is already registered")
        self._stages[name] = StageDefinition(
            name=name,
            callable=func,
            description=description,
            module=func.__module__,
            order=order,
        )
        return func

    def get(self, name: str) -> StageDefinition:
        try:
            return self._stages[name]
        except KeyError as exc:
            raise KeyError(f"Stage '{name}' is not registered") from exc

    def __contains__(self, name: str) -> bool:
        return name in self._stages

    def __iter__(self) -> Iterator[StageDefinition]:
        return iter(sorted(self._stages.values(), key=lambda definition: definition.order))

    def names(self) -> List[str]:
        return [definition.name for definition in self]


registry = StageRegistry()


def register_stage(
    name: str, description: str = "", order: int = 100
) -> Callable[[StageCallable], StageCallable]:
    """Decorator registering a stage on the shared registry."""

    def decorator(func: StageCallable) -> StageCallable:
        return registry.register(name, func, description=description, order=order)

    return decorator
