"""Records the argument dimensions a callable was already typed with."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Sequence


@dataclass(frozen=True)
class TypeInstance:
    """One typed use of a callable: its argument dimensions and what it returns."""

    argument_dimensions: tuple
    returned_dimension: Any


@dataclass
class TypeRegister:
    """Typed instances of every callable, keyed by name."""

    id_to_instances: dict = field(default_factory=dict)

    def get_instance(self, id: str, look_for: Sequence) -> Optional[TypeInstance]:
        """The instance typed with exactly these argument dimensions, if any."""
        wanted = tuple(look_for)
        for instance in self.id_to_instances.get(id, ()):
            if instance.argument_dimensions == wanted:
                return instance
        return None

    def add_instance(self, id: str, argument_dimensions: Sequence, returned_dimension) -> None:
        """Record an instance unless one with these arguments is already known."""
        if self.get_instance(id, argument_dimensions) is not None:
            return
        self.id_to_instances.setdefault(id, []).append(
            TypeInstance(tuple(argument_dimensions), returned_dimension)
        )