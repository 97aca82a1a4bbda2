import pytest

from circuit_types.ast import (
    AnonymousComp,
    ArrayAccess,
    AssignOp,
    Block,
    Call,
    ComponentAccess,
    ConstraintEquality,
    Declaration,
    InitializationBlock,
    LogCall,
    LogExp,
    LogStr,
    Meta,
    MultSubstitution,
    Number,
    Return,
    SignalType,
    Substitution,
    UnderscoreSubstitution,
    Variable,
    VariableKind,
    VariableType,
)
from circuit_types.function_purity import free_of_template_elements
from circuit_types.program import FunctionData
from circuit_types.reports import AnalysisError, ReportCode

VAR = VariableType(VariableKind.VAR)
SIGNAL = VariableType(VariableKind.SIGNAL, SignalType.INTERMEDIATE)
COMPONENT = VariableType(VariableKind.COMPONENT)


def _function(*stmts, name="f"):
    return FunctionData(name, Block(list(stmts)), ["x"])


def _errors(function_data, names=("f",)):
    with pytest.raises(AnalysisError) as info:
        free_of_template_elements(function_data, set(names))
    return info.value.reports


def test_signal_declaration_is_reported_with_location():
    meta = Meta(start=4, end=9, file_id=2)
    fn = _function(Declaration(SIGNAL, "s", [], meta=meta), Return(Variable("x")))
    reports = _errors(fn)
    assert len(reports) == 1
    report = reports[0]
    assert report.code is ReportCode.UNDEFINED_FUNCTION
    assert report.message == "Template elements declared inside the function"
    assert report.labels[0].message == "Declaring template element"
    assert report.labels[0].location == range(4, 9)
    assert report.labels[0].file_id == 2


def test_component_declaration_is_reported():
    fn = _function(Declaration(COMPONENT, "c"))
    reports = _errors(fn)
    assert [r.message for r in reports] == ["Template elements declared inside the function"]


def test_signal_initialization_block_is_reported_once():
    block = InitializationBlock(
        SIGNAL,
        [Declaration(SIGNAL, "a"), Declaration(SIGNAL, "b")],
    )
    reports = _errors(_function(block))
    assert len(reports) == 1
    assert reports[0].labels[0].message == "Declaring template element"


def test_var_initialization_block_is_inspected():
    block = InitializationBlock(
        VAR,
        [
            Declaration(VAR, "a"),
            Substitution("a", [], AssignOp.ASSIGN_VAR, Call("unknown")),
        ],
    )
    reports = _errors(_function(block))
    assert [r.message for r in reports] == ["Unknown call in function"]


@pytest.mark.parametrize("op", [AssignOp.ASSIGN_SIGNAL, AssignOp.ASSIGN_CONSTRAINT_SIGNAL])
def test_signal_operators_are_reported(op):
    fn = _function(Substitution("x", [], op, Number(1)))
    reports = _errors(fn)
    assert [r.message for r in reports] == ["Function uses template operators"]
    assert reports[0].labels[0].message == "Template operator found"


def test_underscore_substitution_with_signal_operator_is_reported():
    fn = _function(UnderscoreSubstitution(AssignOp.ASSIGN_CONSTRAINT_SIGNAL, Number(1)))
    reports = _errors(fn)
    assert [r.message for r in reports] == ["Function uses template operators"]


def test_component_access_is_reported():
    fn = _function(Return(Variable("x", [ComponentAccess("out")])))
    reports = _errors(fn)
    assert [r.message for r in reports] == ["Function uses component operators"]


def test_constraint_equality_reports_and_inspects_operands():
    fn = _function(ConstraintEquality(Variable("x"), Call("g")))
    reports = _errors(fn)
    assert [r.message for r in reports] == [
        "Function uses template operators",
        "Unknown call in function",
    ]


def test_unknown_call_reported_but_known_calls_accepted():
    meta = Meta(start=1, end=3, file_id=7)
    fn = _function(
        Return(Call("f", [Variable("x", [ArrayAccess(Call("g", meta=meta))])]))
    )
    reports = _errors(fn, names=("f",))
    assert len(reports) == 1
    assert reports[0].labels[0].message == "Is not a function call"
    assert reports[0].labels[0].file_id == 7


def test_dimension_and_log_arguments_are_inspected():
    fn = _function(
        Declaration(VAR, "a", [Call("h")]),
        LogCall([LogStr("value"), LogExp(Call("k"))]),
    )
    reports = _errors(fn)
    assert [r.message for r in reports] == [
        "Unknown call in function",
        "Unknown call in function",
    ]


def test_pure_function_passes_while_faulty_one_fails():
    pure = _function(Declaration(VAR, "a", [Number(3)]), Return(Call("f", [Variable("x")])))
    assert free_of_template_elements(pure, {"f"}) is None
    faulty = _function(Declaration(VAR, "a", [Number(3)]), Declaration(SIGNAL, "s"))
    assert len(_errors(faulty)) == 1


def test_multiple_substitution_is_rejected():
    fn = _function(MultSubstitution(Variable("x"), AssignOp.ASSIGN_VAR, Number(1)))
    with pytest.raises(ValueError):
        free_of_template_elements(fn, {"f"})


def test_anonymous_component_is_rejected():
    fn = _function(Return(AnonymousComp("T")))
    with pytest.raises(ValueError):
        free_of_template_elements(fn, {"f"})