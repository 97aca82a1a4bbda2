"""Type checking of a whole program, starting from its main component."""

from __future__ import annotations

from dataclasses import dataclass, field

from circuit_types.ast import (
    AssignOp,
    Assert,
    Block,
    Call,
    ConstraintEquality,
    Declaration,
    IfThenElse,
    InitializationBlock,
    LogCall,
    LogExp,
    MultSubstitution,
    Return,
    SignalType,
    Substitution,
    UnderscoreSubstitution,
    VariableKind,
    While,
)
from circuit_types.expression_typing import (
    treat_access,
    type_array_of_expressions,
    type_expression,
)
from circuit_types.reports import AnalysisError, ReportCode
from circuit_types.typing_support import (
    AnalysisInformation,
    FoldedType,
    SymbolInformation,
    TypingFailure,
    add_typing_report,
    apply_access_to_symbol,
)

_Kind = SymbolInformation.Kind


@dataclass
class TypeCheckResult:
    """Outcome of a successful type check: the callables reached from main."""

    reached: set = field(default_factory=set)


class TypeCheckError(AnalysisError):
    """Raised when the program has typing errors."""


def type_check(program) -> TypeCheckResult:
    """Type the program from its main expression; raise TypeCheckError on any error."""
    initial = program.main_expression
    analysis = AnalysisInformation(file_id=initial.meta.file_id)
    try:
        first_type = type_expression(initial, program, analysis)
    except TypingFailure:
        raise TypeCheckError(analysis.reports) from None
    if not first_type.is_template():
        add_typing_report(
            analysis.reports, ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_TEMPLATE, initial.meta
        )
    if _main_has_tags(initial, program):
        add_typing_report(analysis.reports, ReportCode.MAIN_COMPONENT_WITH_TAGS, initial.meta)
    if analysis.reports:
        raise TypeCheckError(analysis.reports)
    return TypeCheckResult(reached=analysis.reached)


def _main_has_tags(initial, program) -> bool:
    if not isinstance(initial, Call) or not program.contains_template(initial.id):
        raise ValueError("the main expression must be a call to a template")
    inputs = program.templates[initial.id].inputs
    return any(len(tags) > 0 for _, tags in inputs.values())


def _try_type(expression, program, analysis):
    try:
        return type_expression(expression, program, analysis)
    except TypingFailure:
        return None


def _check_single_arithmetic(folded: FoldedType, meta, analysis) -> None:
    if folded.is_template():
        add_typing_report(analysis.reports, ReportCode.MUST_BE_SINGLE_ARITHMETIC_T, meta)
    elif folded.dim() > 0:
        add_typing_report(
            analysis.reports, ReportCode.MUST_BE_SINGLE_ARITHMETIC, meta, folded.dim()
        )


def type_statement(statement, program, analysis: AnalysisInformation) -> None:
    """Type one statement, adding any errors found to analysis.reports."""
    match statement:
        case InitializationBlock():
            for initialization in statement.initializations:
                type_statement(initialization, program, analysis)
        case Declaration():
            _type_declaration(statement, program, analysis)
        case Substitution():
            _type_substitution(statement, program, analysis)
        case ConstraintEquality():
            lhe_type = _try_type(statement.lhe, program, analysis)
            rhe_type = _try_type(statement.rhe, program, analysis)
            if lhe_type is None or rhe_type is None:
                return
            if lhe_type.is_template():
                add_typing_report(analysis.reports, ReportCode.MUST_BE_ARITHMETIC, statement.lhe.meta)
            if rhe_type.is_template():
                add_typing_report(analysis.reports, ReportCode.MUST_BE_ARITHMETIC, statement.rhe.meta)
            if rhe_type.dim() != lhe_type.dim():
                add_typing_report(
                    analysis.reports,
                    ReportCode.MUST_BE_SAME_DIMENSION,
                    statement.rhe.meta,
                    rhe_type.dim(),
                    lhe_type.dim(),
                )
        case LogCall():
            for arg in statement.args:
                if isinstance(arg, LogExp):
                    arg_type = _try_type(arg.expr, program, analysis)
                    if arg_type is None:
                        return
                    _check_single_arithmetic(arg_type, statement.meta, analysis)
        case Assert():
            arg_type = _try_type(statement.arg, program, analysis)
            if arg_type is None:
                return
            _check_single_arithmetic(arg_type, statement.meta, analysis)
        case Return():
            value_type = _try_type(statement.value, program, analysis)
            if value_type is None:
                return
            if analysis.return_type is None:
                raise ValueError("return statement outside of a function")
            if analysis.return_type != value_type.dim():
                add_typing_report(
                    analysis.reports,
                    ReportCode.EXPECTED_DIM_DIFF_GOT_DIM,
                    statement.meta,
                    analysis.return_type,
                    value_type.dim(),
                )
        case IfThenElse():
            cond_type = _try_type(statement.cond, program, analysis)
            type_statement(statement.if_case, program, analysis)
            if statement.else_case is not None:
                type_statement(statement.else_case, program, analysis)
            if cond_type is not None:
                _check_single_arithmetic(cond_type, statement.cond.meta, analysis)
        case While():
            cond_type = _try_type(statement.cond, program, analysis)
            type_statement(statement.stmt, program, analysis)
            if cond_type is not None:
                _check_single_arithmetic(cond_type, statement.cond.meta, analysis)
        case Block():
            analysis.environment.add_variable_block()
            try:
                for inner in statement.stmts:
                    type_statement(inner, program, analysis)
            finally:
                analysis.environment.remove_variable_block()
        case MultSubstitution():
            raise ValueError("multiple substitutions must be removed before typing")
        case UnderscoreSubstitution():
            rhe_type = _try_type(statement.rhe, program, analysis)
            if rhe_type is not None and rhe_type.is_template():
                add_typing_report(analysis.reports, ReportCode.MUST_BE_ARITHMETIC, statement.rhe.meta)


def _type_declaration(statement: Declaration, program, analysis: AnalysisInformation) -> None:
    try:
        dimension_types = type_array_of_expressions(statement.dimensions, program, analysis)
    except TypingFailure:
        dimension_types = []
    for dimension, dimension_type in zip(statement.dimensions, dimension_types):
        if dimension_type.is_template():
            add_typing_report(analysis.reports, ReportCode.INVALID_ARRAY_SIZE_T, dimension.meta)
        elif dimension_type.dim() > 0:
            add_typing_report(
                analysis.reports, ReportCode.INVALID_ARRAY_SIZE, dimension.meta, dimension_type.dim()
            )
    environment = analysis.environment
    xtype = statement.xtype
    dims = len(statement.dimensions)
    if xtype.kind is VariableKind.SIGNAL:
        value = (dims, tuple(xtype.tags))
        if xtype.signal_type is SignalType.INPUT:
            environment.add_input(statement.name, value)
        elif xtype.signal_type is SignalType.OUTPUT:
            environment.add_output(statement.name, value)
        else:
            environment.add_intermediate(statement.name, value)
    elif xtype.kind is VariableKind.VAR:
        environment.add_variable(statement.name, dims)
    else:
        environment.add_component(statement.name, (statement.meta.component_inference, dims))


def _operator_matches(symbol: SymbolInformation, op) -> bool:
    if symbol.kind is _Kind.SIGNAL:
        return op in (AssignOp.ASSIGN_CONSTRAINT_SIGNAL, AssignOp.ASSIGN_SIGNAL)
    return op is AssignOp.ASSIGN_VAR


def _type_substitution(statement: Substitution, program, analysis: AnalysisInformation) -> None:
    rhe_type = _try_type(statement.rhe, program, analysis)
    if rhe_type is None:
        return
    meta = statement.meta
    access_information = treat_access(statement.access, meta, program, analysis)
    environment = analysis.environment
    if environment.has_component(statement.var) and access_information.tag is not None:
        add_typing_report(analysis.reports, ReportCode.OUTPUT_TAG_CANNOT_BE_MODIFIED_OUTSIDE, meta)
        return
    try:
        symbol = apply_access_to_symbol(
            statement.var, meta, access_information, environment, analysis.reports, program
        )
    except TypingFailure:
        return

    if not _operator_matches(symbol, statement.op):
        code = (
            ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_OPERATOR_SIGNAL
            if symbol.kind is _Kind.SIGNAL and statement.op is AssignOp.ASSIGN_VAR
            else ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_OPERATOR_NO_SIGNAL
        )
        add_typing_report(analysis.reports, code, meta)
        return

    if symbol.kind is _Kind.COMPONENT:
        if not rhe_type.is_template():
            add_typing_report(
                analysis.reports, ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_TEMPLATE, meta
            )
        elif symbol.value is None:
            _, dims = environment.get_component(statement.var)
            environment.set_component(statement.var, (rhe_type.template, dims))
        elif symbol.value != rhe_type.template:
            add_typing_report(
                analysis.reports, ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_ARRAY_TEMPLATES, meta
            )
        return

    expected = 0 if symbol.kind is _Kind.TAG else symbol.value
    if rhe_type.is_template():
        add_typing_report(
            analysis.reports, ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_EXPRESSION, meta
        )
    elif expected != rhe_type.dim():
        add_typing_report(
            analysis.reports,
            ReportCode.WRONG_TYPES_IN_ASSIGN_OPERATION_DIMS,
            meta,
            expected,
            rhe_type.dim(),
        )