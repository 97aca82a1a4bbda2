"""Abstract syntax tree for circuit programs: metadata, expressions and statements."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Union


class TypeReduction(enum.Enum):
    """What a symbol access reduces to once types are known."""

    VARIABLE = "variable"
    COMPONENT = "component"
    SIGNAL = "signal"
    TAG = "tag"


@dataclass
class Meta:
    """Source position and analysis annotations attached to every node."""

    start: int = 0
    end: int = 0
    file_id: Optional[int] = None
    location: Optional[range] = None
    component_inference: Optional[str] = None
    reduces_to: Optional[TypeReduction] = None

    def __post_init__(self) -> None:
        if self.location is None:
            self.location = range(self.start, self.end)

    def change_location(self, location: range, file_id: Optional[int]) -> None:
        """Point this node at another place in the sources."""
        self.location = location
        self.file_id = file_id

    def file_location(self) -> range:
        """The span of source text this node covers."""
        return self.location


class SignalType(enum.Enum):
    OUTPUT = "output"
    INPUT = "input"
    INTERMEDIATE = "intermediate"


class AssignOp(enum.Enum):
    ASSIGN_VAR = "="
    ASSIGN_SIGNAL = "<--"
    ASSIGN_CONSTRAINT_SIGNAL = "<=="

    def is_signal_operator(self) -> bool:
        """True for the operators that only signals accept."""
        return self in (AssignOp.ASSIGN_SIGNAL, AssignOp.ASSIGN_CONSTRAINT_SIGNAL)


class VariableKind(enum.Enum):
    VAR = "var"
    SIGNAL = "signal"
    COMPONENT = "component"
    ANONYMOUS_COMPONENT = "anonymous_component"


@dataclass(frozen=True)
class VariableType:
    """Kind of a declared symbol; signals also carry a signal type and tags."""

    kind: VariableKind
    signal_type: Optional[SignalType] = None
    tags: tuple = ()

    def __post_init__(self) -> None:
        if self.kind is VariableKind.SIGNAL and self.signal_type is None:
            raise ValueError("a signal declaration needs a signal type")
        if self.kind is not VariableKind.SIGNAL and self.signal_type is not None:
            raise ValueError("only signals have a signal type")
        if self.kind is not VariableKind.SIGNAL and self.tags:
            raise ValueError("only signals carry tags")
        object.__setattr__(self, "tags", tuple(self.tags))

    def is_signal(self) -> bool:
        return self.kind is VariableKind.SIGNAL


@dataclass
class ArrayAccess:
    index: "Expression"


@dataclass
class ComponentAccess:
    name: str


@dataclass
class LogStr:
    text: str


@dataclass
class LogExp:
    expr: "Expression"


@dataclass
class Number:
    value: int
    meta: Meta = field(default_factory=Meta)


@dataclass
class Variable:
    name: str
    access: list = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class InfixOp:
    lhe: "Expression"
    infix_op: str
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class PrefixOp:
    prefix_op: str
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class ParallelOp:
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class InlineSwitchOp:
    cond: "Expression"
    if_true: "Expression"
    if_false: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class Call:
    id: str
    args: list = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class ArrayInLine:
    values: list = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class UniformArray:
    value: "Expression"
    dimension: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class AnonymousComp:
    id: str
    params: list = field(default_factory=list)
    signals: list = field(default_factory=list)
    names: Optional[list] = None
    is_parallel: bool = False
    meta: Meta = field(default_factory=Meta)


@dataclass
class IfThenElse:
    cond: "Expression"
    if_case: "Statement"
    else_case: Optional["Statement"] = None
    meta: Meta = field(default_factory=Meta)


@dataclass
class While:
    cond: "Expression"
    stmt: "Statement"
    meta: Meta = field(default_factory=Meta)


@dataclass
class Return:
    value: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class InitializationBlock:
    xtype: VariableType
    initializations: list = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class Declaration:
    xtype: VariableType
    name: str
    dimensions: list = field(default_factory=list)
    is_constant: bool = True
    meta: Meta = field(default_factory=Meta)


@dataclass
class Substitution:
    var: str
    access: list
    op: AssignOp
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class MultSubstitution:
    lhe: "Expression"
    op: AssignOp
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class UnderscoreSubstitution:
    op: AssignOp
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class ConstraintEquality:
    lhe: "Expression"
    rhe: "Expression"
    meta: Meta = field(default_factory=Meta)


@dataclass
class LogCall:
    args: list = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class Block:
    stmts: list = field(default_factory=list)
    meta: Meta = field(default_factory=Meta)


@dataclass
class Assert:
    arg: "Expression"
    meta: Meta = field(default_factory=Meta)


Access = Union[ArrayAccess, ComponentAccess]
LogArgument = Union[LogStr, LogExp]
Expression = Union[
    Number,
    Variable,
    InfixOp,
    PrefixOp,
    ParallelOp,
    InlineSwitchOp,
    Call,
    ArrayInLine,
    UniformArray,
    AnonymousComp,
]
Statement = Union[
    IfThenElse,
    While,
    Return,
    InitializationBlock,
    Declaration,
    Substitution,
    MultSubstitution,
    UnderscoreSubstitution,
    ConstraintEquality,
    LogCall,
    Block,
    Assert,
]