"""Shared pieces of the type checker: folded types, access information and typing reports."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Optional, Sequence

from circuit_types.environment import CircomEnvironment
from circuit_types.reports import Report, ReportCode
from circuit_types.type_register import TypeRegister


class TypingFailure(Exception):
    """Typing could not go on; the reason has already been added to the reports."""


@dataclass(frozen=True)
class FoldedType:
    """The type an expression folds to: an array of some dimensions or a template."""

    arithmetic: Optional[int] = None
    template: Optional[str] = None

    @staticmethod
    def arithmetic_type(dimensions: int) -> "FoldedType":
        return FoldedType(arithmetic=dimensions)

    @staticmethod
    def template_type(name: str) -> "FoldedType":
        return FoldedType(template=name)

    def is_template(self) -> bool:
        return self.template is not None and self.arithmetic is None

    def dim(self) -> int:
        return self.arithmetic if self.arithmetic is not None else 0

    @staticmethod
    def same_type(left: "FoldedType", right: "FoldedType") -> bool:
        equal = False
        if left.template is not None and right.template is not None:
            equal = left.template == right.template
        if left.arithmetic is not None and right.arithmetic is not None:
            equal = left.arithmetic == right.arithmetic
        return equal


@dataclass(frozen=True)
class SymbolInformation:
    """What an accessed symbol turns out to be once its accesses are applied."""

    class Kind(enum.Enum):
        COMPONENT = "component"
        VAR = "var"
        SIGNAL = "signal"
        TAG = "tag"

    kind: "SymbolInformation.Kind"
    value: object = None

    @classmethod
    def component(cls, template: Optional[str]) -> "SymbolInformation":
        return cls(cls.Kind.COMPONENT, template)

    @classmethod
    def var(cls, dimensions: int) -> "SymbolInformation":
        return cls(cls.Kind.VAR, dimensions)

    @classmethod
    def signal(cls, dimensions: int) -> "SymbolInformation":
        return cls(cls.Kind.SIGNAL, dimensions)

    @classmethod
    def tag(cls) -> "SymbolInformation":
        return cls(cls.Kind.TAG)


@dataclass
class AccessInfo:
    """Dimensions accessed on a symbol, the signal reached through it and any tag."""

    array_dims: int = 0
    signal: Optional[str] = None
    signal_dims: int = 0
    tag: Optional[str] = None


@dataclass
class AnalysisInformation:
    """State carried through the typing of a program."""

    file_id: Optional[int] = None
    reached: set = field(default_factory=set)
    reports: list = field(default_factory=list)
    registered_calls: TypeRegister = field(default_factory=TypeRegister)
    environment: CircomEnvironment = field(default_factory=CircomEnvironment)
    return_type: Optional[int] = None


_MESSAGES = {
    ReportCode.EMPTY_ARRAY_INLINE_DECLARATION: "Empty arrays can not be declared inline",
    ReportCode.NON_HOMOGENEOUS_ARRAY: (
        "All the elements in a array must have the same type.\n"
        " Found elements in the array with {} and {} dimensions."
    ),
    ReportCode.INVALID_ARRAY_SIZE: (
        "Array indexes and lengths must be single arithmetic expressions.\n"
        " Found expression with {} dimensions."
    ),
    ReportCode.INVALID_ARRAY_SIZE_T: (
        "Array indexes and lengths must be single arithmetic expressions.\n"
        " Found component instead of expression."
    ),
    ReportCode.INVALID_ARRAY_ACCESS: (
        "Array access does not match the dimensions of the expression. \n"
        " Expected {} dimensions, given {}."
    ),
    ReportCode.INVALID_SIGNAL_ACCESS: (
        "Signal not found in component: only accesses to input/output signals are allowed"
    ),
    ReportCode.INVALID_SIGNAL_TAG_ACCESS: "Invalid tag access: could not find the tag",
    ReportCode.INVALID_TAG_ACCESS: (
        "Tag not found in signal: only accesses to tags that appear in the definition "
        "of the signal are allowed"
    ),
    ReportCode.INVALID_TAG_ACCESS_AFTER_ARRAY: (
        "Invalid access to the tag of an array element: tags belong to complete arrays, "
        "not to individual positions.\n Hint: instead of signal[pos].tag use signal.tag"
    ),
    ReportCode.INVALID_ARRAY_TYPE: "Components can not be declared inside inline arrays",
    ReportCode.INFIX_OPERATOR_WITH_WRONG_TYPES: "Type not allowed by the operator",
    ReportCode.PREFIX_OPERATOR_WITH_WRONG_TYPES: "Type not allowed by the operator",
    ReportCode.PARALLEL_OPERATOR_WITH_WRONG_TYPES: (
        "Type not allowed by the operator parallel "
        "(parallel operator can only be applied to templates)"
    ),
    ReportCode.INVALID_PARTIAL_ARRAY: "Only variable arrays can be accessed partially",
    ReportCode.UNINITIALIZED_SYMBOL_IN_EXPRESSION: "The type of this symbol is not known",
    ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_OPERATOR_SIGNAL: (
        "The operator does not match the types of the assigned elements.\n"
        " Assignments to signals do not allow the operator =, try using <== or <-- instead"
    ),
    ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_OPERATOR_NO_SIGNAL: (
        "The operator does not match the types of the assigned elements.\n"
        " Only assignments to signals allow the operators <== and <--, try using = instead"
    ),
    ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_ARRAY_TEMPLATES: (
        "Assignee and assigned types do not match.\n"
        " All componentes of an array must be instances of the same template."
    ),
    ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_TEMPLATE: (
        "Assignee and assigned types do not match.\n Expected template found expression."
    ),
    ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_EXPRESSION: (
        "Assignee and assigned types do not match.\n Expected expression found template."
    ),
    ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_DIMS: (
        "Assignee and assigned types do not match. \n Expected dimensions: {}, found {}"
    ),
    ReportCode.INVALID_ARGUMENT_IN_CALL: "Components can not be passed as arguments",
    ReportCode.UNABLE_TO_TYPE_FUNCTION: "Unable to infer the type of this function",
    ReportCode.MUST_BE_SINGLE_ARITHMETIC: (
        "Must be a single arithmetic expression.\n Found expression of {} dimensions"
    ),
    ReportCode.MUST_BE_SINGLE_ARITHMETIC_T: (
        "Must be a single arithmetic expression.\n Found component"
    ),
    ReportCode.MUST_BE_ARITHMETIC: (
        "Must be a single arithmetic expression or an array of arithmetic expressions. \n"
        " Found component"
    ),
    ReportCode.OUTPUT_TAG_CANNOT_BE_MODIFIED_OUTSIDE: (
        "Output tag from a subcomponent cannot be modified"
    ),
    ReportCode.MUST_BE_SAME_DIMENSION: (
        "Must be two arrays of the same dimensions.\n Found {} and {} dimensions"
    ),
    ReportCode.MAIN_COMPONENT_WITH_TAGS: "Main component cannot have inputs with tags",
    ReportCode.EXPECTED_DIM_DIFF_GOT_DIM: "Function should return {} but returns {}",
    ReportCode.WRONG_NUMBER_OF_ARGUMENTS: "Expecting {} arguments, {} where obtained",
    ReportCode.UNINITIALIZED_COMPONENT: (
        "Trying to access to a signal of a component that has not been initialized"
    ),
}


def typing_message(code: ReportCode, args: Sequence = ()) -> str:
    """The label text of a typing report; raises ValueError for codes it does not cover."""
    try:
        template = _MESSAGES[code]
    except KeyError:
        raise ValueError(f"no typing message for {code.name}") from None
    args = tuple(args)
    expected = template.count("{}")
    if len(args) != expected:
        raise ValueError(f"{code.name} takes {expected} arguments, got {len(args)}")
    return template.format(*args)


def add_typing_report(reports: list, code: ReportCode, meta, *args) -> Report:
    """Append a typing error for the node described by meta and return it."""
    report = Report.error("Typing error found", code)
    report.add_primary(range(meta.start, meta.end), meta.file_id, typing_message(code, args))
    reports.append(report)
    return report


def _fail(reports: list, code: ReportCode, meta, *args):
    add_typing_report(reports, code, meta, *args)
    raise TypingFailure(code.name)


def apply_access_to_symbol(
    symbol: str,
    meta,
    access_information: AccessInfo,
    environment: CircomEnvironment,
    reports: list,
    program,
) -> SymbolInformation:
    """Resolve what an accessed symbol is; raise TypingFailure after reporting a misuse."""
    tags: Sequence = ()
    template: Optional[str] = None
    if environment.has_component(symbol):
        template, current_dim = environment.get_component(symbol)
    elif environment.has_signal(symbol):
        current_dim, tags = environment.get_signal(symbol)
    else:
        current_dim = environment.get_variable(symbol)

    if access_information.array_dims > current_dim:
        _fail(
            reports,
            ReportCode.INVALID_ARRAY_ACCESS,
            meta,
            current_dim,
            access_information.array_dims,
        )
    current_dim -= access_information.array_dims

    signal_name = access_information.signal
    if signal_name is not None:
        dims_accessed = access_information.signal_dims
        if template is not None:
            if current_dim != 0:
                _fail(reports, ReportCode.INVALID_PARTIAL_ARRAY, meta)
            template_data = program.templates[template]
            info = template_data.input_info(signal_name)
            if info is None:
                info = template_data.output_info(signal_name)
            if info is None:
                _fail(reports, ReportCode.INVALID_SIGNAL_ACCESS, meta)
            signal_dim, signal_tags = info
            if access_information.tag is not None:
                if dims_accessed > 0:
                    _fail(reports, ReportCode.INVALID_TAG_ACCESS_AFTER_ARRAY, meta)
                if access_information.tag not in signal_tags:
                    _fail(reports, ReportCode.INVALID_TAG_ACCESS, meta)
                return SymbolInformation.tag()
            if dims_accessed > signal_dim:
                _fail(reports, ReportCode.INVALID_ARRAY_ACCESS, meta, signal_dim, dims_accessed)
            return SymbolInformation.signal(signal_dim - dims_accessed)
        if environment.has_signal(symbol):
            if access_information.array_dims != 0:
                _fail(reports, ReportCode.INVALID_TAG_ACCESS_AFTER_ARRAY, meta)
            if dims_accessed > 0:
                _fail(reports, ReportCode.INVALID_ARRAY_ACCESS, meta, 0, dims_accessed)
            if signal_name not in tags:
                _fail(reports, ReportCode.INVALID_TAG_ACCESS, meta)
            return SymbolInformation.tag()
        if environment.has_component(symbol):
            _fail(reports, ReportCode.UNINITIALIZED_COMPONENT, meta)
        _fail(reports, ReportCode.INVALID_SIGNAL_TAG_ACCESS, meta)

    if environment.has_variable(symbol):
        return SymbolInformation.var(current_dim)
    if environment.has_signal(symbol):
        return SymbolInformation.signal(current_dim)
    if environment.has_component(symbol) and current_dim == 0:
        return SymbolInformation.component(template)
    _fail(reports, ReportCode.INVALID_PARTIAL_ARRAY, meta)


def prepare_environment_for_call(
    meta, call_id: str, args_dims: Sequence, program, reports: list
) -> CircomEnvironment:
    """A fresh environment binding the callee's parameters to the argument dimensions."""
    if program.contains_function(call_id):
        args_names = program.functions[call_id].name_of_params
    else:
        args_names = program.templates[call_id].name_of_params
    if len(args_dims) != len(args_names):
        _fail(
            reports,
            ReportCode.WRONG_NUMBER_OF_ARGUMENTS,
            meta,
            len(args_names),
            len(args_dims),
        )
    environment = CircomEnvironment()
    for name, dim in zip(args_names, args_dims):
        environment.add_variable(name, dim)
    return environment