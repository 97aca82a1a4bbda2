"""Typing of expressions: the dimensions or template each expression folds to."""

from __future__ import annotations

from typing import Optional

from circuit_types.ast import (
    AnonymousComp,
    ArrayAccess,
    ArrayInLine,
    Call,
    ComponentAccess,
    InfixOp,
    InlineSwitchOp,
    Number,
    ParallelOp,
    PrefixOp,
    UniformArray,
    Variable,
)
from circuit_types.reports import ReportCode
from circuit_types.type_given_function import type_given_function
from circuit_types.typing_support import (
    AccessInfo,
    AnalysisInformation,
    FoldedType,
    SymbolInformation,
    TypingFailure,
    add_typing_report,
    apply_access_to_symbol,
    prepare_environment_for_call,
)


def type_expression(expression, program, analysis: AnalysisInformation) -> FoldedType:
    """Fold an expression to its type; raise TypingFailure once the problem is reported."""
    match expression:
        case Number():
            return FoldedType.arithmetic_type(0)
        case ArrayInLine():
            return _type_array_in_line(expression, program, analysis)
        case UniformArray():
            return _type_uniform_array(expression, program, analysis)
        case InfixOp():
            return _type_infix(expression, program, analysis)
        case PrefixOp():
            rhe_type = type_expression(expression.rhe, program, analysis)
            if rhe_type.is_template() or rhe_type.dim() > 0:
                _fail(analysis, ReportCode.PREFIX_OPERATOR_WITH_WRONG_TYPES, expression.rhe.meta)
            return FoldedType.arithmetic_type(0)
        case ParallelOp():
            rhe_type = type_expression(expression.rhe, program, analysis)
            if rhe_type.is_template():
                return rhe_type
            _fail(analysis, ReportCode.PARALLEL_OPERATOR_WITH_WRONG_TYPES, expression.rhe.meta)
        case InlineSwitchOp():
            return _type_inline_switch(expression, program, analysis)
        case Variable():
            return _type_variable(expression, program, analysis)
        case Call():
            return _type_call(expression, program, analysis)
        case AnonymousComp() | _:
            raise ValueError("anonymous component calls must be removed before typing")


def type_array_of_expressions(expressions, program, analysis: AnalysisInformation) -> list:
    """Type every expression; raise TypingFailure if any of them failed."""
    types = []
    successful = True
    for expression in expressions:
        folded = _try_type(expression, program, analysis)
        if folded is None:
            successful = False
        else:
            types.append(folded)
    if not successful:
        raise TypingFailure("array of expressions")
    return types


def treat_access(accesses, meta, program, analysis: AnalysisInformation) -> AccessInfo:
    """Count the array dimensions accessed and find the signal and tag reached."""
    info = AccessInfo()
    for access in accesses:
        if isinstance(access, ArrayAccess):
            index = access.index
            index_type = _try_type(index, program, analysis)
            if info.tag is not None:
                add_typing_report(
                    analysis.reports, ReportCode.INVALID_ARRAY_ACCESS, index.meta, 0, 1
                )
                continue
            if info.signal is not None:
                info.signal_dims += 1
            else:
                info.array_dims += 1
            if index_type is None:
                continue
            if index_type.is_template():
                add_typing_report(analysis.reports, ReportCode.INVALID_ARRAY_SIZE_T, index.meta)
            elif index_type.dim() > 0:
                add_typing_report(
                    analysis.reports, ReportCode.INVALID_ARRAY_SIZE, index.meta, index_type.dim()
                )
        elif isinstance(access, ComponentAccess):
            if info.signal is not None:
                if info.tag is None:
                    info.tag = access.name
                else:
                    add_typing_report(analysis.reports, ReportCode.INVALID_SIGNAL_TAG_ACCESS, meta)
            else:
                info.signal = access.name
                info.signal_dims = 0
    return info


def _fail(analysis: AnalysisInformation, code: ReportCode, meta, *args):
    add_typing_report(analysis.reports, code, meta, *args)
    raise TypingFailure(code.name)


def _try_type(expression, program, analysis) -> Optional[FoldedType]:
    try:
        return type_expression(expression, program, analysis)
    except TypingFailure:
        return None


def _type_array_in_line(expression: ArrayInLine, program, analysis) -> FoldedType:
    values_types = type_array_of_expressions(expression.values, program, analysis)
    if not values_types:
        _fail(analysis, ReportCode.EMPTY_ARRAY_INLINE_DECLARATION, expression.meta)
    inferred_dim = values_types[0].dim()
    for value, value_type in zip(expression.values, values_types):
        if value_type.is_template():
            add_typing_report(analysis.reports, ReportCode.INVALID_ARRAY_TYPE, value.meta)
        elif inferred_dim != value_type.dim():
            add_typing_report(
                analysis.reports,
                ReportCode.NON_HOMOGENEOUS_ARRAY,
                value.meta,
                inferred_dim,
                value_type.dim(),
            )
    return FoldedType.arithmetic_type(inferred_dim + 1)


def _type_uniform_array(expression: UniformArray, program, analysis) -> FoldedType:
    value_type = type_expression(expression.value, program, analysis)
    if value_type.is_template():
        add_typing_report(analysis.reports, ReportCode.INVALID_ARRAY_TYPE, expression.meta)
    dim_type = type_expression(expression.dimension, program, analysis)
    if dim_type.is_template() or dim_type.dim() != 0:
        add_typing_report(analysis.reports, ReportCode.INVALID_ARRAY_TYPE, expression.meta)
    return FoldedType.arithmetic_type(value_type.dim() + 1)


def _type_infix(expression: InfixOp, program, analysis) -> FoldedType:
    lhe_type = _try_type(expression.lhe, program, analysis)
    rhe_type = _try_type(expression.rhe, program, analysis)
    if lhe_type is None or rhe_type is None:
        raise TypingFailure("infix operand")
    successful = True
    for operand, operand_type in ((expression.lhe, lhe_type), (expression.rhe, rhe_type)):
        if operand_type.is_template() or operand_type.dim() > 0:
            add_typing_report(
                analysis.reports, ReportCode.INFIX_OPERATOR_WITH_WRONG_TYPES, operand.meta
            )
            successful = False
    if not successful:
        raise TypingFailure(ReportCode.INFIX_OPERATOR_WITH_WRONG_TYPES.name)
    return FoldedType.arithmetic_type(0)


def _type_inline_switch(expression: InlineSwitchOp, program, analysis) -> FoldedType:
    cond_type = _try_type(expression.cond, program, analysis)
    if_true_type = _try_type(expression.if_true, program, analysis)
    if_false_type = _try_type(expression.if_false, program, analysis)
    if if_true_type is None:
        raise TypingFailure("inline switch branch")
    if cond_type is None:
        return if_true_type
    if cond_type.is_template():
        add_typing_report(
            analysis.reports, ReportCode.MUST_BE_SINGLE_ARITHMETIC_T, expression.cond.meta
        )
    elif cond_type.dim() > 0:
        add_typing_report(
            analysis.reports,
            ReportCode.MUST_BE_SINGLE_ARITHMETIC,
            expression.cond.meta,
            cond_type.dim(),
        )
    if if_false_type is None:
        return if_true_type
    if not FoldedType.same_type(if_true_type, if_false_type):
        add_typing_report(
            analysis.reports, ReportCode.NON_COMPATIBLE_BRANCH_TYPES, expression.if_false.meta
        )
    return if_true_type


def _type_variable(expression: Variable, program, analysis) -> FoldedType:
    access_information = treat_access(expression.access, expression.meta, program, analysis)
    symbol = apply_access_to_symbol(
        expression.name,
        expression.meta,
        access_information,
        analysis.environment,
        analysis.reports,
        program,
    )
    kind = SymbolInformation.Kind
    if symbol.kind is kind.COMPONENT:
        if symbol.value is None:
            _fail(analysis, ReportCode.UNINITIALIZED_SYMBOL_IN_EXPRESSION, expression.meta)
        return FoldedType.template_type(symbol.value)
    if symbol.kind is kind.TAG:
        return FoldedType.arithmetic_type(0)
    return FoldedType.arithmetic_type(symbol.value)


def _type_call(expression: Call, program, analysis: AnalysisInformation) -> FoldedType:
    call_id = expression.id
    analysis.reached.add(call_id)
    is_template = program.contains_template(call_id)
    try:
        arg_types = type_array_of_expressions(expression.args, program, analysis)
    except TypingFailure:
        if is_template:
            return FoldedType.template_type(call_id)
        raise
    concrete_types = []
    successful = True
    for arg, arg_type in zip(expression.args, arg_types):
        if arg_type.is_template():
            add_typing_report(analysis.reports, ReportCode.INVALID_ARGUMENT_IN_CALL, arg.meta)
            successful = False
        concrete_types.append(arg_type.dim())
    if not successful:
        if is_template:
            return FoldedType.template_type(call_id)
        raise TypingFailure(ReportCode.INVALID_ARGUMENT_IN_CALL.name)

    previous_file_id = analysis.file_id
    if program.contains_function(call_id):
        analysis.file_id = program.functions[call_id].file_id
    else:
        analysis.file_id = program.templates[call_id].file_id
    try:
        new_environment = prepare_environment_for_call(
            expression.meta, call_id, concrete_types, program, analysis.reports
        )
    except TypingFailure:
        return FoldedType.template_type(call_id)

    previous_environment = analysis.environment
    analysis.environment = new_environment
    try:
        if program.contains_function(call_id):
            returned = _type_function(call_id, concrete_types, expression.meta, analysis, program)
            return FoldedType.arithmetic_type(returned)
        return FoldedType.template_type(_type_template(call_id, concrete_types, analysis, program))
    finally:
        analysis.environment = previous_environment
        analysis.file_id = previous_file_id


def _type_statements(stmts, program, analysis) -> None:
    from circuit_types.type_check import type_statement

    for stmt in stmts:
        type_statement(stmt, program, analysis)


def _type_template(call_id: str, args_dims: list, analysis, program) -> str:
    if analysis.registered_calls.get_instance(call_id, args_dims) is None:
        analysis.registered_calls.add_instance(call_id, args_dims, 0)
        _type_statements(program.templates[call_id].body_as_list(), program, analysis)
    return call_id


def _type_function(call_id: str, args_dims: list, meta, analysis, program) -> int:
    instance = analysis.registered_calls.get_instance(call_id, args_dims)
    if instance is not None:
        return instance.returned_dimension
    given_type = type_given_function(call_id, program.functions, args_dims)
    if given_type is None:
        _fail(analysis, ReportCode.UNABLE_TO_TYPE_FUNCTION, meta)
    analysis.registered_calls.add_instance(call_id, args_dims, given_type)
    previous_type = analysis.return_type
    analysis.return_type = given_type
    try:
        _type_statements(program.functions[call_id].body_as_list(), program, analysis)
    finally:
        analysis.return_type = previous_type
    return given_type