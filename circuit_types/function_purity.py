"""Checks that function bodies use no template-only constructs."""

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
    UnderscoreSubstitution,
    UniformArray,
    Variable,
    VariableKind,
    While,
)
from circuit_types.reports import AnalysisError, Report, ReportCode


def free_of_template_elements(function_data, function_names) -> None:
    """Raise AnalysisError if the function declares signals, components or uses their operators."""
    checker = _PurityChecker(set(function_names))
    checker.statement(function_data.body)
    if checker.reports:
        raise AnalysisError(checker.reports)


class _PurityChecker:
    def __init__(self, function_names: set) -> None:
        self.function_names = function_names
        self.reports: list = []

    def _report(self, message: str, meta, file_id, label: str) -> None:
        report = Report.error(message, ReportCode.UNDEFINED_FUNCTION)
        report.add_primary(range(meta.start, meta.end), file_id, label)
        self.reports.append(report)

    def statement(self, stmt) -> None:
        file_id = stmt.meta.file_id
        match stmt:
            case MultSubstitution():
                raise ValueError("multiple substitutions must be removed before this analysis")
            case IfThenElse():
                self.expression(stmt.cond)
                self.statement(stmt.if_case)
                if stmt.else_case is not None:
                    self.statement(stmt.else_case)
            case While():
                self.expression(stmt.cond)
                self.statement(stmt.stmt)
            case Block():
                for inner in stmt.stmts:
                    self.statement(inner)
            case InitializationBlock():
                if stmt.xtype.is_signal():
                    self._report(
                        "Template elements declared inside the function",
                        stmt.meta,
                        file_id,
                        "Declaring template element",
                    )
                    return
                for initialization in stmt.initializations:
                    self.statement(initialization)
            case Declaration():
                if stmt.xtype.kind is VariableKind.VAR:
                    for dimension in stmt.dimensions:
                        self.expression(dimension)
                else:
                    self._report(
                        "Template elements declared inside the function",
                        stmt.meta,
                        file_id,
                        "Declaring template element",
                    )
            case Substitution():
                if stmt.op.is_signal_operator():
                    self._report(
                        "Function uses template operators",
                        stmt.meta,
                        file_id,
                        "Template operator found",
                    )
                self.access(stmt.access, stmt.meta)
                self.expression(stmt.rhe)
            case ConstraintEquality():
                self._report(
                    "Function uses template operators",
                    stmt.meta,
                    file_id,
                    "Template operator found",
                )
                self.expression(stmt.lhe)
                self.expression(stmt.rhe)
            case LogCall():
                for arg in stmt.args:
                    if isinstance(arg, LogExp):
                        self.expression(arg.expr)
            case Assert():
                self.expression(stmt.arg)
            case Return():
                self.expression(stmt.value)
            case UnderscoreSubstitution():
                if stmt.op.is_signal_operator():
                    self._report(
                        "Function uses template operators",
                        stmt.meta,
                        file_id,
                        "Template operator found",
                    )
                self.expression(stmt.rhe)

    def access(self, accesses: list, meta) -> None:
        for acc in accesses:
            if isinstance(acc, ArrayAccess):
                self.expression(acc.index)
            else:
                self._report(
                    "Function uses component operators",
                    meta,
                    meta.file_id,
                    "Template operator found",
                )

    def expression(self, expr) -> None:
        match expr:
            case InfixOp():
                self.expression(expr.lhe)
                self.expression(expr.rhe)
            case PrefixOp() | ParallelOp():
                self.expression(expr.rhe)
            case InlineSwitchOp():
                self.expression(expr.cond)
                self.expression(expr.if_true)
                self.expression(expr.if_false)
            case Variable():
                self.access(expr.access, expr.meta)
            case Number():
                pass
            case Call():
                if expr.id not in self.function_names:
                    self._report(
                        "Unknown call in function",
                        expr.meta,
                        expr.meta.file_id,
                        "Is not a function call",
                    )
                for arg in expr.args:
                    self.expression(arg)
            case ArrayInLine():
                for value in expr.values:
                    self.expression(value)
            case UniformArray():
                self.expression(expr.value)
                self.expression(expr.dimension)
            case AnonymousComp() | _:
                raise ValueError("anonymous component calls must be removed before this analysis")