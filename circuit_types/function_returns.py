"""Checks that every path through a function ends in a return."""

from __future__ import annotations

from circuit_types.ast import Block, IfThenElse, Return
from circuit_types.reports import AnalysisError, Report, ReportCode


def all_paths_with_return_check(function_data) -> None:
    """Raise AnalysisError if some path through the function has no return."""
    if not _returns(function_data.body):
        raise AnalysisError(
            [
                Report.error(
                    f"In {function_data.name} there are paths without return",
                    ReportCode.FUNCTION_RETURN_ERROR,
                )
            ]
        )


def _returns(stmt) -> bool:
    match stmt:
        case Return():
            return True
        case IfThenElse():
            return (
                stmt.else_case is not None
                and _returns(stmt.else_case)
                and _returns(stmt.if_case)
            )
        case Block():
            return any(_returns(inner) for inner in stmt.stmts)
    return False