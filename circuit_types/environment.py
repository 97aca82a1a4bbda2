"""Block-scoped symbol environments used by the analyses."""

from __future__ import annotations

from itertools import zip_longest
from typing import Any, Callable, Optional


class SymbolNotFound(LookupError):
    """Raised when a symbol is looked up but was never declared."""

    def __init__(self, name: str) -> None:
        super().__init__(f"symbol {name!r} is not declared")
        self.name = name


def _merge_dicts(left: dict, right: dict, combine: Callable[[Any, Any], Any]) -> dict:
    merged = dict(left)
    for name, value in right.items():
        merged[name] = combine(left[name], value) if name in left else value
    return merged


class _ScopedTable:
    """A stack of dictionaries; lookups prefer the innermost block."""

    def __init__(self, blocks: Optional[list] = None) -> None:
        self._blocks = blocks if blocks is not None else [{}]

    def push(self) -> None:
        self._blocks.append({})

    def pop(self) -> None:
        if len(self._blocks) == 1:
            raise RuntimeError("cannot remove the outermost block")
        self._blocks.pop()

    def add(self, name: str, value: Any) -> None:
        self._blocks[-1][name] = value

    def __contains__(self, name: str) -> bool:
        return any(name in block for block in self._blocks)

    def _block_of(self, name: str) -> dict:
        for block in reversed(self._blocks):
            if name in block:
                return block
        raise SymbolNotFound(name)

    def get(self, name: str) -> Any:
        return self._block_of(name)[name]

    def set(self, name: str, value: Any) -> None:
        self._block_of(name)[name] = value

    def copy(self) -> "_ScopedTable":
        return _ScopedTable([dict(block) for block in self._blocks])

    @staticmethod
    def merge(left: "_ScopedTable", right: "_ScopedTable", combine) -> "_ScopedTable":
        return _ScopedTable(
            [
                _merge_dicts(l_block, r_block, combine)
                for l_block, r_block in zip_longest(left._blocks, right._blocks, fillvalue={})
            ]
        )


class VarEnvironment:
    """Variables organised in nested blocks."""

    def __init__(self) -> None:
        self._variables = _ScopedTable()

    def add_variable(self, name: str, value: Any) -> None:
        self._variables.add(name, value)

    def has_variable(self, name: str) -> bool:
        return name in self._variables

    def get_variable(self, name: str) -> Any:
        return self._variables.get(name)

    def set_variable(self, name: str, value: Any) -> None:
        self._variables.set(name, value)

    def add_variable_block(self) -> None:
        self._variables.push()

    def remove_variable_block(self) -> None:
        self._variables.pop()

    def copy(self) -> "VarEnvironment":
        clone = self.__class__.__new__(self.__class__)
        clone._variables = self._variables.copy()
        return clone


class CircomEnvironment(VarEnvironment):
    """Variables, signals and components of a template or function body."""

    def __init__(self) -> None:
        super().__init__()
        self._inputs: dict = {}
        self._outputs: dict = {}
        self._intermediates = _ScopedTable()
        self._components = _ScopedTable()

    def add_variable_block(self) -> None:
        super().add_variable_block()
        self._intermediates.push()
        self._components.push()

    def remove_variable_block(self) -> None:
        super().remove_variable_block()
        self._intermediates.pop()
        self._components.pop()

    def add_input(self, name: str, value: Any) -> None:
        self._inputs[name] = value

    def add_output(self, name: str, value: Any) -> None:
        self._outputs[name] = value

    def add_intermediate(self, name: str, value: Any) -> None:
        self._intermediates.add(name, value)

    def add_component(self, name: str, value: Any) -> None:
        self._components.add(name, value)

    def has_signal(self, name: str) -> bool:
        return name in self._inputs or name in self._outputs or name in self._intermediates

    def has_intermediate(self, name: str) -> bool:
        return name in self._intermediates

    def has_component(self, name: str) -> bool:
        return name in self._components

    def has_symbol(self, name: str) -> bool:
        return self.has_variable(name) or self.has_signal(name) or self.has_component(name)

    def get_signal(self, name: str) -> Any:
        if name in self._inputs:
            return self._inputs[name]
        if name in self._outputs:
            return self._outputs[name]
        return self._intermediates.get(name)

    def get_intermediate(self, name: str) -> Any:
        return self._intermediates.get(name)

    def get_component(self, name: str) -> Any:
        return self._components.get(name)

    def set_component(self, name: str, value: Any) -> None:
        self._components.set(name, value)

    def copy(self) -> "CircomEnvironment":
        clone = super().copy()
        clone._inputs = dict(self._inputs)
        clone._outputs = dict(self._outputs)
        clone._intermediates = self._intermediates.copy()
        clone._components = self._components.copy()
        return clone

    @staticmethod
    def merge(
        left: "CircomEnvironment",
        right: "CircomEnvironment",
        combine: Callable[[Any, Any], Any],
    ) -> "CircomEnvironment":
        """Join two environments; symbols present in both get combined values."""
        merged = CircomEnvironment.__new__(CircomEnvironment)
        merged._variables = _ScopedTable.merge(left._variables, right._variables, combine)
        merged._inputs = _merge_dicts(left._inputs, right._inputs, combine)
        merged._outputs = _merge_dicts(left._outputs, right._outputs, combine)
        merged._intermediates = _ScopedTable.merge(
            left._intermediates, right._intermediates, combine
        )
        merged._components = _ScopedTable.merge(left._components, right._components, combine)
        return merged