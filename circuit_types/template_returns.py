"""Checks that template bodies hold no return statements."""

from __future__ import annotations

from circuit_types.ast import Block, IfThenElse, Return, While
from circuit_types.reports import AnalysisError, Report, ReportCode


def free_of_returns(template_data) -> None:
    """Raise AnalysisError listing every return found in the template's body."""
    reports: list = []
    _look_for_return(template_data.body, template_data.file_id, reports)
    if reports:
        raise AnalysisError(reports)


def _look_for_return(stmt, file_id, reports: list) -> None:
    match stmt:
        case IfThenElse():
            _look_for_return(stmt.if_case, file_id, reports)
            if stmt.else_case is not None:
                _look_for_return(stmt.else_case, file_id, reports)
        case While():
            _look_for_return(stmt.stmt, file_id, reports)
        case Block():
            for inner in stmt.stmts:
                _look_for_return(inner, file_id, reports)
        case Return():
            report = Report.error(
                "Return found in template", ReportCode.TEMPLATE_WITH_RETURN_STATEMENT
            )
            report.add_primary(
                range(stmt.meta.start, stmt.meta.end),
                file_id,
                "This return statement is inside a template",
            )
            reports.append(report)