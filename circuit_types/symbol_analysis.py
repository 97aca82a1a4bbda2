"""Checks that every symbol is declared once and every call targets a known callable."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from circuit_types.ast import (
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
    ParallelOp,
    PrefixOp,
    Return,
    Substitution,
    UnderscoreSubstitution,
    UniformArray,
    Variable,
    While,
)
from circuit_types.reports import AnalysisError, Report, ReportCode


def check_naming_correctness(program) -> None:
    """Check the main call and every template and function body; raise on any error."""
    instances = [
        (data.file_id, data.param_location, data.name_of_params, data.body_as_list())
        for data in (*program.templates.values(), *program.functions.values())
    ]
    reports = _analyze_main(program)
    for file_id, param_location, params_names, body in instances:
        reports.extend(
            _symbol_reports(
                file_id, param_location, params_names, body, program.functions, program.templates
            )
        )
    if reports:
        raise AnalysisError(reports)


def analyze_symbols(
    file_id, param_location, params_names, body, function_info, template_info
) -> None:
    """Check one body against its parameters; raise AnalysisError on any error."""
    reports = _symbol_reports(
        file_id, param_location, params_names, body, function_info, template_info
    )
    if reports:
        raise AnalysisError(reports)


def _analyze_main(program) -> list:
    call = program.main_expression
    reports: list = []
    if isinstance(call, Call) and program.contains_template(call.id):
        inputs = program.templates[call.id].inputs
        for signal in program.public_inputs:
            if signal not in inputs:
                report = Report.error("Invalid public list", ReportCode.SAME_SYMBOL_DECLARED_TWICE)
                report.add_primary(
                    call.meta.location, call.meta.file_id, f"{signal} is not an input signal"
                )
                reports.append(report)
    analyzer = _Analyzer(call.meta.file_id, program.functions, program.templates, reports, [])
    analyzer.expression(call)
    return reports


def _symbol_reports(
    file_id, param_location, params_names, body, function_info, template_info
) -> list:
    analyzer = _Analyzer(file_id, function_info, template_info, [], [set()])
    collision = False
    for param in params_names:
        collision = not analyzer.declare(param) or collision
    if collision:
        report = Report.error("Symbol declared twice", ReportCode.SAME_SYMBOL_DECLARED_TWICE)
        report.add_primary(param_location, file_id, "Declaring same symbol twice")
        analyzer.reports.append(report)
    for stmt in body:
        analyzer.statement(stmt)
    return analyzer.reports


@dataclass
class _Analyzer:
    file_id: Optional[int]
    function_info: dict
    template_info: dict
    reports: list = field(default_factory=list)
    blocks: list = field(default_factory=list)

    def declare(self, symbol: str) -> bool:
        last = self.blocks[-1]
        if symbol in last:
            return False
        last.add(symbol)
        return True

    def is_declared(self, symbol: str) -> bool:
        return any(symbol in block for block in self.blocks)

    def _error(self, message: str, code: ReportCode, location, label: str) -> None:
        report = Report.error(message, code)
        report.add_primary(location, self.file_id, label)
        self.reports.append(report)

    def statement(self, stmt) -> None:
        match stmt:
            case MultSubstitution():
                raise ValueError("multiple substitutions must be removed before symbol analysis")
            case Return():
                self.expression(stmt.value)
            case UnderscoreSubstitution():
                self.expression(stmt.rhe)
            case Substitution():
                self.expression(stmt.rhe)
                self.variable(stmt.meta, stmt.var, stmt.access)
            case ConstraintEquality():
                self.expression(stmt.lhe)
                self.expression(stmt.rhe)
            case InitializationBlock():
                for initialization in stmt.initializations:
                    self.statement(initialization)
            case Declaration():
                for dimension in stmt.dimensions:
                    self.expression(dimension)
                if not self.declare(stmt.name):
                    self._error(
                        "Symbol declared twice",
                        ReportCode.SAME_SYMBOL_DECLARED_TWICE,
                        stmt.meta.location,
                        "Declaring same symbol twice",
                    )
            case LogCall():
                for arg in stmt.args:
                    if isinstance(arg, LogExp):
                        self.expression(arg.expr)
            case Assert():
                self.expression(stmt.arg)
            case Block():
                self.blocks.append(set())
                for inner in stmt.stmts:
                    self.statement(inner)
                self.blocks.pop()
            case While():
                self.expression(stmt.cond)
                self.statement(stmt.stmt)
            case IfThenElse():
                self.expression(stmt.cond)
                self.statement(stmt.if_case)
                if stmt.else_case is not None:
                    self.statement(stmt.else_case)

    def variable(self, meta, name: str, access: list) -> None:
        if not self.is_declared(name):
            self._error(
                "Undeclared symbol",
                ReportCode.NON_EXISTENT_SYMBOL,
                range(meta.start, meta.end),
                "Using unknown symbol",
            )
        for acc in access:
            if isinstance(acc, ArrayAccess):
                self.expression(acc.index)

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
                self.variable(expr.meta, expr.name, expr.access)
            case Call():
                self.call(expr)
            case ArrayInLine():
                for value in expr.values:
                    self.expression(value)
            case UniformArray():
                self.expression(expr.value)
                self.expression(expr.dimension)

    def call(self, expr: Call) -> None:
        location = range(expr.meta.start, expr.meta.end)
        if expr.id in self.function_info:
            expected = self.function_info[expr.id].num_of_params
        elif expr.id in self.template_info:
            expected = self.template_info[expr.id].num_of_params
        else:
            self._error(
                "Calling symbol",
                ReportCode.NON_EXISTENT_SYMBOL,
                location,
                "Calling unknown symbol",
            )
            return
        if len(expr.args) != expected:
            self._error(
                "Calling function with wrong number of arguments",
                ReportCode.FUNCTION_WRONG_NUMBER_OF_ARGUMENTS,
                location,
                f"Got {len(expr.args)} params, {expected} where expected",
            )
            return
        for arg in expr.args:
            self.expression(arg)