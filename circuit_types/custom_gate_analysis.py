"""Checks the restrictions on the body of a custom template."""

from __future__ import annotations

from circuit_types.ast import (
    AssignOp,
    Block,
    ConstraintEquality,
    Declaration,
    IfThenElse,
    InitializationBlock,
    SignalType,
    Substitution,
    UnderscoreSubstitution,
    VariableKind,
    While,
)
from circuit_types.reports import AnalysisError, Report, ReportCode


class CustomGateError(AnalysisError):
    """Raised when a custom template breaks its restrictions."""


def custom_gate_analysis(custom_gate_name: str, body) -> list:
    """Return the warnings for a custom template; raise CustomGateError on errors."""
    warnings: list = []
    errors: list = []
    # The collections swap roles at the top level and in every if branch.
    _walk(custom_gate_name, body, warnings, errors)
    if errors:
        raise CustomGateError(errors)
    return warnings


def _constraint_error(meta) -> Report:
    error = Report.error(
        "Added constraint inside custom template", ReportCode.CUSTOM_GATE_CONSTRAINT_ERROR
    )
    error.add_primary(meta.location, meta.file_id, "Added constraint")
    return error


def _walk(name: str, stmt, errors: list, warnings: list) -> None:
    match stmt:
        case IfThenElse():
            _walk(name, stmt.if_case, warnings, errors)
            if stmt.else_case is not None:
                _walk(name, stmt.else_case, errors, warnings)
        case While():
            _walk(name, stmt.stmt, errors, warnings)
        case InitializationBlock():
            for inner in stmt.initializations:
                _walk(name, inner, errors, warnings)
        case Declaration():
            kind = stmt.xtype.kind
            meta = stmt.meta
            if kind is VariableKind.SIGNAL and stmt.xtype.signal_type is SignalType.INTERMEDIATE:
                warning = Report.warning(
                    "Intermediate signal inside custom template",
                    ReportCode.CUSTOM_GATE_INTERMEDIATE_SIGNAL_WARNING,
                )
                warning.add_primary(
                    meta.location,
                    meta.file_id,
                    f"Intermediate signal {stmt.name} declared in custom template {name}",
                )
                warnings.append(warning)
            elif kind in (VariableKind.COMPONENT, VariableKind.ANONYMOUS_COMPONENT):
                error = Report.error(
                    "Component inside custom template",
                    ReportCode.CUSTOM_GATE_SUB_COMPONENT_ERROR,
                )
                error.add_primary(
                    meta.location,
                    meta.file_id,
                    f"Component {stmt.name} declared in custom template {name}",
                )
                errors.append(error)
        case Substitution() | UnderscoreSubstitution():
            if stmt.op is AssignOp.ASSIGN_CONSTRAINT_SIGNAL:
                errors.append(_constraint_error(stmt.meta))
        case ConstraintEquality():
            errors.append(_constraint_error(stmt.meta))
        case Block():
            for inner in stmt.stmts:
                _walk(name, inner, errors, warnings)