"""Diagnostics produced by the analyses."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Iterable, Optional


class Severity(enum.Enum):
    ERROR = "error"
    WARNING = "warning"


class ReportCode(enum.Enum):
    CUSTOM_GATE_INTERMEDIATE_SIGNAL_WARNING = enum.auto()
    CUSTOM_GATE_SUB_COMPONENT_ERROR = enum.auto()
    CUSTOM_GATE_CONSTRAINT_ERROR = enum.auto()
    FUNCTION_RETURN_ERROR = enum.auto()
    UNDEFINED_FUNCTION = enum.auto()
    TEMPLATE_WITH_RETURN_STATEMENT = enum.auto()
    SIGNAL_OUTSIDE_ORIGINAL_SCOPE = enum.auto()
    SAME_SYMBOL_DECLARED_TWICE = enum.auto()
    NON_EXISTENT_SYMBOL = enum.auto()
    FUNCTION_WRONG_NUMBER_OF_ARGUMENTS = enum.auto()
    WRONG_TYPES_IN_ASSIGN_OPERATION_TEMPLATE = enum.auto()
    WRONG_TYPES_IN_ASSIGN_OPERATION_OPERATOR_SIGNAL = enum.auto()
    WRONG_TYPES_IN_ASSIGN_OPERATION_OPERATOR_NO_SIGNAL = enum.auto()
    WRONG_TYPES_IN_ASSIGN_OPERATION_ARRAY_TEMPLATES = enum.auto()
    WRONG_TYPES_IN_ASSIGN_OPERATION_EXPRESSION = enum.auto()
    WRONG_TYPES_IN_ASSIGN_OPERATION_DIMS = enum.auto()
    MAIN_COMPONENT_WITH_TAGS = enum.auto()
    INVALID_ARRAY_SIZE_T = enum.auto()
    INVALID_ARRAY_SIZE = enum.auto()
    OUTPUT_TAG_CANNOT_BE_MODIFIED_OUTSIDE = enum.auto()
    MUST_BE_ARITHMETIC = enum.auto()
    MUST_BE_SAME_DIMENSION = enum.auto()
    MUST_BE_SINGLE_ARITHMETIC_T = enum.auto()
    MUST_BE_SINGLE_ARITHMETIC = enum.auto()
    EXPECTED_DIM_DIFF_GOT_DIM = enum.auto()
    EMPTY_ARRAY_INLINE_DECLARATION = enum.auto()
    INVALID_ARRAY_TYPE = enum.auto()
    NON_HOMOGENEOUS_ARRAY = enum.auto()
    INFIX_OPERATOR_WITH_WRONG_TYPES = enum.auto()
    PREFIX_OPERATOR_WITH_WRONG_TYPES = enum.auto()
    PARALLEL_OPERATOR_WITH_WRONG_TYPES = enum.auto()
    NON_COMPATIBLE_BRANCH_TYPES = enum.auto()
    UNINITIALIZED_SYMBOL_IN_EXPRESSION = enum.auto()
    INVALID_ARGUMENT_IN_CALL = enum.auto()
    INVALID_ARRAY_ACCESS = enum.auto()
    INVALID_SIGNAL_TAG_ACCESS = enum.auto()
    INVALID_PARTIAL_ARRAY = enum.auto()
    INVALID_SIGNAL_ACCESS = enum.auto()
    INVALID_TAG_ACCESS_AFTER_ARRAY = enum.auto()
    INVALID_TAG_ACCESS = enum.auto()
    UNINITIALIZED_COMPONENT = enum.auto()
    WRONG_NUMBER_OF_ARGUMENTS = enum.auto()
    UNABLE_TO_TYPE_FUNCTION = enum.auto()
    UNKNOWN_DIMENSION = enum.auto()
    UNKNOWN_TEMPLATE = enum.auto()
    NON_QUADRATIC = enum.auto()
    UNREACHABLE_CONSTRAINTS = enum.auto()
    UNREACHABLE_TAGS = enum.auto()
    UNREACHABLE_SIGNALS = enum.auto()
    NON_CONSTANT_ARRAY_LENGTH = enum.auto()
    WRONG_SIGNAL_TAGS = enum.auto()


@dataclass
class Label:
    """A span of source text with an explanation."""

    location: range
    file_id: Optional[int]
    message: str


@dataclass
class Report:
    """One diagnostic: a message, a code, a severity and its labels."""

    message: str
    code: ReportCode
    severity: Severity
    labels: list = field(default_factory=list)

    @classmethod
    def error(cls, message: str, code: ReportCode) -> "Report":
        return cls(message, code, Severity.ERROR)

    @classmethod
    def warning(cls, message: str, code: ReportCode) -> "Report":
        return cls(message, code, Severity.WARNING)

    def add_primary(self, location: range, file_id: Optional[int], message: str) -> None:
        """Attach a primary label pointing at the offending source."""
        self.labels.append(Label(location, file_id, message))


class AnalysisError(Exception):
    """Raised when an analysis finds errors; carries the reports."""

    def __init__(self, reports: Iterable[Report]) -> None:
        self.reports = list(reports)
        summary = "; ".join(report.message for report in self.reports)
        super().__init__(summary or "analysis failed")