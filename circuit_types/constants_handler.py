"""Constant inference, array-length checks and constant expansion."""

from __future__ import annotations

from copy import deepcopy

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
    UnderscoreSubstitution,
    UniformArray,
    Variable,
    VariableKind,
    While,
)
from circuit_types.environment import VarEnvironment
from circuit_types.reports import Report, ReportCode


def handle_function_constants(function_data) -> list:
    """Mark constant variables of a function, check array lengths and expand constants."""
    environment = VarEnvironment()
    for param in function_data.name_of_params:
        environment.add_variable(param, False)
    return _handle(function_data.body, environment, VarEnvironment())


def handle_template_constants(template_data) -> list:
    """Same as for functions, with template parameters treated as constants."""
    environment = VarEnvironment()
    holder = VarEnvironment()
    for param in template_data.name_of_params:
        environment.add_variable(param, True)
        holder.add_variable(param, Variable(param, [], deepcopy(template_data.body.meta)))
    return _handle(template_data.body, environment, holder)


def _handle(body, environment: VarEnvironment, holder: VarEnvironment) -> list:
    _infer_statement(body, environment)
    reports = _check_statement(body, environment)
    _expand_statement(body, holder)
    return reports


# Constant inference on declarations

def _infer_statement(stmt, environment: VarEnvironment) -> None:
    match stmt:
        case IfThenElse():
            _infer_statement(stmt.if_case, environment)
            if stmt.else_case is not None:
                _infer_statement(stmt.else_case, environment)
        case Substitution():
            environment.set_variable(stmt.var, False)
        case InitializationBlock():
            _infer_initializations(stmt.initializations, environment)
        case While():
            _infer_statement(stmt.stmt, environment)
        case Block():
            _infer_block(stmt.stmts, environment)


def _infer_initializations(initializations: list, environment: VarEnvironment) -> None:
    initialized = {s.var for s in initializations if isinstance(s, Substitution)}
    for stmt in initializations:
        if isinstance(stmt, Declaration):
            constant = (
                not stmt.dimensions
                and stmt.name in initialized
                and stmt.xtype.kind is VariableKind.VAR
            )
            environment.add_variable(stmt.name, constant)


def _apply_inference(stmts: list, environment: VarEnvironment) -> None:
    for stmt in stmts:
        if isinstance(stmt, Substitution):
            was_constant = environment.get_variable(stmt.var)
            remains_constant = has_constant_value(stmt.rhe, environment)
            environment.set_variable(stmt.var, was_constant and remains_constant)
    for stmt in stmts:
        if isinstance(stmt, Declaration):
            stmt.is_constant = environment.get_variable(stmt.name)


def _infer_block(stmts: list, environment: VarEnvironment) -> None:
    environment.add_variable_block()
    for stmt in stmts:
        _infer_statement(stmt, environment)
    for stmt in stmts:
        if isinstance(stmt, InitializationBlock):
            _apply_inference(stmt.initializations, environment)
    environment.remove_variable_block()


# Array length invariant

def _check_statement(stmt, environment: VarEnvironment) -> list:
    match stmt:
        case InitializationBlock():
            return _check_initializations(stmt.initializations, environment)
        case IfThenElse():
            reports = _check_statement(stmt.if_case, environment)
            if stmt.else_case is not None:
                reports.extend(_check_statement(stmt.else_case, environment))
            return reports
        case While():
            return _check_statement(stmt.stmt, environment)
        case Block():
            environment.add_variable_block()
            reports = [r for s in stmt.stmts for r in _check_statement(s, environment)]
            environment.remove_variable_block()
            return reports
        case MultSubstitution():
            raise ValueError("multiple substitutions must be removed before constant handling")
    return []


def _check_initializations(initializations: list, environment: VarEnvironment) -> list:
    declarations = [s for s in initializations if isinstance(s, Declaration)]
    reports = [
        _broken_invariant_error(dimension.meta)
        for declaration in declarations
        for dimension in declaration.dimensions
        if not has_constant_value(dimension, environment)
    ]
    for declaration in declarations:
        environment.add_variable(declaration.name, declaration.is_constant)
    return reports


def has_constant_value(expr, environment: VarEnvironment) -> bool:
    """Whether an expression only depends on constants under the environment."""
    match expr:
        case Number():
            return True
        case Call():
            return all(has_constant_value(arg, environment) for arg in expr.args)
        case InfixOp():
            return has_constant_value(expr.lhe, environment) and has_constant_value(
                expr.rhe, environment
            )
        case PrefixOp() | ParallelOp():
            return has_constant_value(expr.rhe, environment)
        case InlineSwitchOp():
            return (
                has_constant_value(expr.cond, environment)
                and has_constant_value(expr.if_true, environment)
                and has_constant_value(expr.if_false, environment)
            )
        case Variable():
            return environment.get_variable(expr.name)
        case ArrayInLine() | UniformArray():
            return False
    raise ValueError("anonymous component calls must be removed before constant handling")


# Constant expansion

def _expand_statement(stmt, holder: VarEnvironment) -> None:
    match stmt:
        case IfThenElse():
            stmt.cond = _expand_expression(stmt.cond, holder)
            _expand_statement(stmt.if_case, holder)
            if stmt.else_case is not None:
                _expand_statement(stmt.else_case, holder)
        case While():
            stmt.cond = _expand_expression(stmt.cond, holder)
            _expand_statement(stmt.stmt, holder)
        case Return():
            stmt.value = _expand_expression(stmt.value, holder)
        case InitializationBlock():
            _expand_initializations(stmt.initializations, holder)
        case Declaration():
            stmt.dimensions = [_expand_expression(d, holder) for d in stmt.dimensions]
        case Substitution():
            stmt.rhe = _expand_expression(stmt.rhe, holder)
            _expand_accesses(stmt.access, holder)
        case ConstraintEquality():
            stmt.lhe = _expand_expression(stmt.lhe, holder)
            stmt.rhe = _expand_expression(stmt.rhe, holder)
        case LogCall():
            for arg in stmt.args:
                if isinstance(arg, LogExp):
                    arg.expr = _expand_expression(arg.expr, holder)
        case Assert():
            stmt.arg = _expand_expression(stmt.arg, holder)
        case Block():
            holder.add_variable_block()
            for inner in stmt.stmts:
                _expand_statement(inner, holder)
            holder.remove_variable_block()
        case MultSubstitution():
            raise ValueError("multiple substitutions must be removed before constant handling")
        case UnderscoreSubstitution():
            stmt.rhe = _expand_expression(stmt.rhe, holder)


def _expand_initializations(initializations: list, holder: VarEnvironment) -> None:
    for stmt in initializations:
        _expand_statement(stmt, holder)
    constants = {
        s.name for s in initializations if isinstance(s, Declaration) and s.is_constant
    }
    for stmt in initializations:
        if isinstance(stmt, Substitution) and stmt.var in constants:
            holder.add_variable(stmt.var, deepcopy(stmt.rhe))


def _expand_accesses(accesses: list, holder: VarEnvironment) -> None:
    for access in accesses:
        if isinstance(access, ArrayAccess):
            access.index = _expand_expression(access.index, holder)


def _expand_expression(expr, holder: VarEnvironment):
    match expr:
        case Number():
            pass
        case ArrayInLine():
            expr.values = [_expand_expression(v, holder) for v in expr.values]
        case UniformArray():
            expr.value = _expand_expression(expr.value, holder)
            expr.dimension = _expand_expression(expr.dimension, holder)
        case Call():
            expr.args = [_expand_expression(a, holder) for a in expr.args]
        case InfixOp():
            expr.lhe = _expand_expression(expr.lhe, holder)
            expr.rhe = _expand_expression(expr.rhe, holder)
        case PrefixOp() | ParallelOp():
            expr.rhe = _expand_expression(expr.rhe, holder)
        case InlineSwitchOp():
            expr.cond = _expand_expression(expr.cond, holder)
            expr.if_true = _expand_expression(expr.if_true, holder)
            expr.if_false = _expand_expression(expr.if_false, holder)
        case Variable():
            return _expand_variable(expr, holder)
        case AnonymousComp() | _:
            raise ValueError("anonymous component calls must be removed before constant handling")
    return expr


def _expand_variable(expr: Variable, holder: VarEnvironment):
    if holder.has_variable(expr.name) and not expr.access:
        replacement = deepcopy(holder.get_variable(expr.name))
        replacement.meta.change_location(expr.meta.location, expr.meta.file_id)
        return replacement
    _expand_accesses(expr.access, holder)
    return expr


def _broken_invariant_error(meta) -> Report:
    report = Report.error("Variable array length", ReportCode.NON_CONSTANT_ARRAY_LENGTH)
    report.add_primary(meta.file_location(), meta.file_id, "Non constant expression")
    return report