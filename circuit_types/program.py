"""Templates, functions and the program that holds them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from circuit_types.ast import Block


def _block_statements(body, owner: str) -> list:
    if not isinstance(body, Block):
        raise TypeError(f"the body of {owner} must be a block")
    return body.stmts


@dataclass
class FunctionData:
    name: str
    body: object
    name_of_params: list = field(default_factory=list)
    file_id: int = 0
    param_location: range = range(0, 0)

    @property
    def num_of_params(self) -> int:
        return len(self.name_of_params)

    def body_as_list(self) -> list:
        """The statements of the function's body block."""
        return _block_statements(self.body, self.name)


@dataclass
class TemplateData:
    name: str
    body: object
    name_of_params: list = field(default_factory=list)
    file_id: int = 0
    param_location: range = range(0, 0)
    inputs: dict = field(default_factory=dict)
    outputs: dict = field(default_factory=dict)
    is_custom_gate: bool = False

    @property
    def num_of_params(self) -> int:
        return len(self.name_of_params)

    def body_as_list(self) -> list:
        """The statements of the template's body block."""
        return _block_statements(self.body, self.name)

    def input_info(self, name: str) -> Optional[tuple]:
        """Dimensions and tags of an input signal, or None."""
        return self.inputs.get(name)

    def output_info(self, name: str) -> Optional[tuple]:
        """Dimensions and tags of an output signal, or None."""
        return self.outputs.get(name)


@dataclass
class ProgramArchive:
    main_expression: object
    file_id_main: int = 0
    public_inputs: list = field(default_factory=list)
    templates: dict = field(default_factory=dict)
    functions: dict = field(default_factory=dict)

    @property
    def function_names(self) -> set:
        return set(self.functions)

    @property
    def template_names(self) -> set:
        return set(self.templates)

    def contains_template(self, name: str) -> bool:
        return name in self.templates

    def contains_function(self, name: str) -> bool:
        return name in self.functions

    def remove_function(self, name: str) -> None:
        self.functions.pop(name, None)

    def remove_template(self, name: str) -> None:
        self.templates.pop(name, None)