import pytest

from circuit_types.ast import (
    Block,
    IfThenElse,
    InitializationBlock,
    Meta,
    Number,
    Return,
    VariableKind,
    VariableType,
    While,
)
from circuit_types.program import TemplateData
from circuit_types.reports import AnalysisError, ReportCode
from circuit_types.template_returns import free_of_returns


def test_return_inside_loop_is_reported_with_template_file():
    ret = Return(Number(1), Meta(start=4, end=9, file_id=99))
    body = Block([IfThenElse(Number(1), While(Number(1), Block([ret])))])
    template = TemplateData("T", body, file_id=3)
    with pytest.raises(AnalysisError) as caught:
        free_of_returns(template)
    [report] = caught.value.reports
    assert report.code is ReportCode.TEMPLATE_WITH_RETURN_STATEMENT
    assert report.message == "Return found in template"
    label = report.labels[0]
    assert label.file_id == 3
    assert label.location == range(4, 9)
    assert label.message == "This return statement is inside a template"


def test_every_return_is_reported():
    body = Block(
        [
            IfThenElse(Number(1), Return(Number(1)), Return(Number(2))),
            Return(Number(3)),
        ]
    )
    with pytest.raises(AnalysisError) as caught:
        free_of_returns(TemplateData("T", body))
    assert len(caught.value.reports) == 3


def test_initialization_blocks_are_not_searched():
    init = InitializationBlock(VariableType(VariableKind.VAR), [Return(Number(0))])
    body = Block([init, While(Number(1), Return(Number(1)))])
    with pytest.raises(AnalysisError) as caught:
        free_of_returns(TemplateData("T", body))
    assert len(caught.value.reports) == 1


def test_template_without_returns_passes():
    body = Block([While(Number(1), Block([]))])
    assert free_of_returns(TemplateData("T", body)) is None