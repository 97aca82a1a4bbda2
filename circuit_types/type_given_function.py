"""Infers the dimension a function returns for given argument dimensions."""

from __future__ import annotations

from typing import Optional

from circuit_types.ast import (
    AnonymousComp,
    ArrayInLine,
    Block,
    Call,
    Declaration,
    IfThenElse,
    InfixOp,
    InitializationBlock,
    InlineSwitchOp,
    Number,
    ParallelOp,
    PrefixOp,
    Return,
    UniformArray,
    Variable,
    While,
)
from circuit_types.environment import SymbolNotFound


def type_given_function(function_name: str, function_info: dict, params_types) -> Optional[int]:
    """The number of dimensions of the first return found, or None if it cannot be told."""
    return _ReturnSearch(function_info).start(function_name, list(params_types))


class _ReturnSearch:
    def __init__(self, function_info: dict) -> None:
        self.function_info = function_info
        self.explored: set = set()

    def start(self, function_name: str, params_types: list) -> Optional[int]:
        function_data = self.function_info[function_name]
        self.explored.add(function_name)
        environment = [dict(zip(function_data.name_of_params, params_types))]
        for stmt in function_data.body_as_list():
            found = self.statement(stmt, environment)
            if found is not None:
                return found
        return None

    @staticmethod
    def _lookup(environment: list, name: str) -> int:
        for block in reversed(environment):
            if name in block:
                return block[name]
        raise SymbolNotFound(name)

    def statement(self, stmt, environment: list) -> Optional[int]:
        match stmt:
            case IfThenElse():
                found = self.statement(stmt.if_case, environment)
                if found is not None:
                    return found
                if stmt.else_case is not None:
                    return self.statement(stmt.else_case, environment)
                return None
            case While():
                return self.statement(stmt.stmt, environment)
            case Return():
                return self.expression(stmt.value, environment)
            case InitializationBlock():
                for initialization in stmt.initializations:
                    self.statement(initialization, environment)
                return None
            case Declaration():
                environment[-1][stmt.name] = len(stmt.dimensions)
                return None
            case Block():
                environment.append({})
                try:
                    for inner in stmt.stmts:
                        found = self.statement(inner, environment)
                        if found is not None:
                            return found
                    return None
                finally:
                    environment.pop()
        return None

    def expression(self, expr, environment: list) -> Optional[int]:
        match expr:
            case InfixOp():
                found = self.expression(expr.lhe, environment)
                if found is not None:
                    return found
                return self.expression(expr.rhe, environment)
            case PrefixOp() | ParallelOp():
                return self.expression(expr.rhe, environment)
            case InlineSwitchOp():
                found = self.expression(expr.if_true, environment)
                if found is not None:
                    return found
                return self.expression(expr.if_false, environment)
            case Variable():
                var_type = self._lookup(environment, expr.name)
                if len(expr.access) > var_type:
                    return None
                return var_type - len(expr.access)
            case Number():
                return 0
            case ArrayInLine():
                found = self.expression(expr.values[0], environment)
                return None if found is None else found + 1
            case UniformArray():
                found = self.expression(expr.value, environment)
                return None if found is None else found + 1
            case Call():
                if expr.id in self.explored:
                    return None
                params_types = []
                for arg in expr.args:
                    arg_type = self.expression(arg, environment)
                    if arg_type is None:
                        return None
                    params_types.append(arg_type)
                return self.start(expr.id, params_types)
            case AnonymousComp() | _:
                raise ValueError("anonymous component calls must be removed before typing")