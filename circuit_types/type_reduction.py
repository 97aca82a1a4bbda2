"""Annotates every symbol access with what it reduces to: variable, component, signal or tag."""

from __future__ import annotations

from circuit_types.ast import (
    AnonymousComp,
    ArrayAccess,
    ArrayInLine,
    Assert,
    Block,
    Call,
    ConstraintEquality,
    Declaration,
    IfThenElse,
    InfixOp,
    InitializationBlock,
    InlineSwitchOp,
    LogCall,
    LogExp,
    MultSubstitution,
    Number,
    ParallelOp,
    PrefixOp,
    Return,
    Substitution,
    TypeReduction,
    UnderscoreSubstitution,
    UniformArray,
    Variable,
    VariableKind,
    While,
)
from circuit_types.environment import CircomEnvironment


def reduce_function(function_data) -> None:
    """Annotate the accesses in a function body."""
    _reduce_body(function_data.name_of_params, function_data.body)


def reduce_template(template_data) -> None:
    """Annotate the accesses in a template body."""
    _reduce_body(template_data.name_of_params, template_data.body)


def _reduce_body(params, body) -> None:
    environment = CircomEnvironment()
    for param in params:
        environment.add_variable(param, None)
    _reduce_statement(body, environment)


def _reduce_statement(stmt, environment: CircomEnvironment) -> None:
    match stmt:
        case Substitution():
            _reduce_variable(stmt.var, environment, stmt.access, stmt.meta)
            _reduce_expression(stmt.rhe, environment)
        case Declaration():
            kind = stmt.xtype.kind
            if kind is VariableKind.VAR:
                environment.add_variable(stmt.name, None)
            elif kind in (VariableKind.COMPONENT, VariableKind.ANONYMOUS_COMPONENT):
                environment.add_component(stmt.name, None)
            else:
                environment.add_intermediate(stmt.name, None)
            for dimension in stmt.dimensions:
                _reduce_expression(dimension, environment)
        case While():
            _reduce_expression(stmt.cond, environment)
            _reduce_statement(stmt.stmt, environment)
        case Block():
            for inner in stmt.stmts:
                _reduce_statement(inner, environment)
        case InitializationBlock():
            for inner in stmt.initializations:
                _reduce_statement(inner, environment)
        case IfThenElse():
            _reduce_expression(stmt.cond, environment)
            _reduce_statement(stmt.if_case, environment)
            if stmt.else_case is not None:
                _reduce_statement(stmt.else_case, environment)
        case LogCall():
            for arg in stmt.args:
                if isinstance(arg, LogExp):
                    _reduce_expression(arg.expr, environment)
        case Assert():
            _reduce_expression(stmt.arg, environment)
        case Return():
            _reduce_expression(stmt.value, environment)
        case ConstraintEquality():
            _reduce_expression(stmt.lhe, environment)
            _reduce_expression(stmt.rhe, environment)
        case MultSubstitution():
            raise ValueError("multiple substitutions must be removed before type reduction")
        case UnderscoreSubstitution():
            _reduce_expression(stmt.rhe, environment)


def _reduce_expression(expr, environment: CircomEnvironment) -> None:
    match expr:
        case Variable():
            _reduce_variable(expr.name, environment, expr.access, expr.meta)
        case InfixOp():
            _reduce_expression(expr.lhe, environment)
            _reduce_expression(expr.rhe, environment)
        case PrefixOp() | ParallelOp():
            _reduce_expression(expr.rhe, environment)
        case InlineSwitchOp():
            _reduce_expression(expr.cond, environment)
            _reduce_expression(expr.if_true, environment)
            _reduce_expression(expr.if_false, environment)
        case Call():
            for arg in expr.args:
                _reduce_expression(arg, environment)
        case ArrayInLine():
            for value in expr.values:
                _reduce_expression(value, environment)
        case UniformArray():
            _reduce_expression(expr.value, environment)
            _reduce_expression(expr.dimension, environment)
        case Number():
            pass
        case AnonymousComp() | _:
            raise ValueError("anonymous component calls must be removed before type reduction")


def _reduce_variable(name: str, environment: CircomEnvironment, access: list, meta) -> None:
    if environment.has_signal(name):
        reduction = TypeReduction.SIGNAL
    elif environment.has_component(name):
        reduction = TypeReduction.COMPONENT
    else:
        reduction = TypeReduction.VARIABLE
    for acc in access:
        if isinstance(acc, ArrayAccess):
            _reduce_expression(acc.index, environment)
        elif reduction is TypeReduction.SIGNAL:
            reduction = TypeReduction.TAG
        else:
            reduction = TypeReduction.SIGNAL
    meta.reduces_to = reduction