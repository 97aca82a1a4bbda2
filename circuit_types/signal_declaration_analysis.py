"""Checks that signals and components are only declared outside loops."""

from __future__ import annotations

from circuit_types.ast import Block, IfThenElse, InitializationBlock, VariableKind, While
from circuit_types.reports import AnalysisError, Report, ReportCode

_DECLARATION_KINDS = (VariableKind.SIGNAL, VariableKind.COMPONENT)


def check_signal_correctness(template_data) -> None:
    """Raise AnalysisError for every signal or component declared inside a while loop."""
    reports: list = []
    for stmt in template_data.body_as_list():
        _treat_statement(stmt, True, template_data.file_id, reports)
    if reports:
        raise AnalysisError(reports)


def _treat_statement(stmt, declaration_allowed: bool, file_id, reports: list) -> None:
    match stmt:
        case IfThenElse():
            _treat_statement(stmt.if_case, declaration_allowed, file_id, reports)
            if stmt.else_case is not None:
                _treat_statement(stmt.else_case, declaration_allowed, file_id, reports)
        case While():
            _treat_statement(stmt.stmt, False, file_id, reports)
        case Block():
            for inner in stmt.stmts:
                _treat_statement(inner, declaration_allowed, file_id, reports)
        case InitializationBlock():
            if stmt.xtype.kind in _DECLARATION_KINDS and not declaration_allowed:
                report = Report.error(
                    "Signal or component declaration inside While scope. Signal and component "
                    "can only be defined in the initial scope or in If scopes with known "
                    "condition",
                    ReportCode.SIGNAL_OUTSIDE_ORIGINAL_SCOPE,
                )
                report.add_primary(
                    range(stmt.meta.start, stmt.meta.end),
                    file_id,
                    "Is outside the initial scope",
                )
                reports.append(report)