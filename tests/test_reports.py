import pytest

from circuit_types.reports import AnalysisError, Label, Report, ReportCode, Severity


def test_error_constructor():
    report = Report.error("Return found in template", ReportCode.TEMPLATE_WITH_RETURN_STATEMENT)
    assert report.severity is Severity.ERROR
    assert report.code is ReportCode.TEMPLATE_WITH_RETURN_STATEMENT
    assert report.message == "Return found in template"
    assert report.labels == []


def test_warning_constructor():
    report = Report.warning(
        "Intermediate signal inside custom template",
        ReportCode.CUSTOM_GATE_INTERMEDIATE_SIGNAL_WARNING,
    )
    assert report.severity is Severity.WARNING


def test_add_primary_appends_labels_in_order():
    report = Report.error("Symbol declared twice", ReportCode.SAME_SYMBOL_DECLARED_TWICE)
    report.add_primary(range(1, 4), 0, "first")
    report.add_primary(range(5, 8), 1, "second")
    assert report.labels == [Label(range(1, 4), 0, "first"), Label(range(5, 8), 1, "second")]


def test_analysis_error_carries_reports():
    reports = [
        Report.error("Undeclared symbol", ReportCode.NON_EXISTENT_SYMBOL),
        Report.error("Calling symbol", ReportCode.NON_EXISTENT_SYMBOL),
    ]
    with pytest.raises(AnalysisError) as info:
        raise AnalysisError(reports)
    assert info.value.reports == reports
    assert "Undeclared symbol" in str(info.value)
    assert "Calling symbol" in str(info.value)