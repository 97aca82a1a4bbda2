import pytest

from circuit_types.ast import (
    AssignOp,
    Block,
    Call,
    Declaration,
    InitializationBlock,
    Meta,
    MultSubstitution,
    Number,
    Return,
    SignalType,
    Substitution,
    Variable,
    VariableKind,
    VariableType,
)
from circuit_types.program import FunctionData, ProgramArchive, TemplateData
from circuit_types.reports import AnalysisError, ReportCode
from circuit_types.symbol_analysis import analyze_symbols, check_naming_correctness

VAR = VariableType(VariableKind.VAR)
INPUT = VariableType(VariableKind.SIGNAL, SignalType.INPUT)


def declare(name, xtype=VAR):
    return InitializationBlock(xtype, [Declaration(xtype, name)])


def make_program(body_stmts, params=("n",), public=(), inputs=None, functions=None):
    template = TemplateData(
        "Main",
        Block(list(body_stmts)),
        name_of_params=list(params),
        inputs=inputs if inputs is not None else {"a": (0, [])},
    )
    return ProgramArchive(
        main_expression=Call("Main", [Number(1) for _ in params], Meta(0, 5, file_id=0)),
        public_inputs=list(public),
        templates={"Main": template},
        functions=functions or {},
    )


def errors_of(program):
    with pytest.raises(AnalysisError) as info:
        check_naming_correctness(program)
    return info.value.reports


def test_undeclared_symbol_is_reported_once_with_shadowing_allowed():
    body = [
        declare("x"),
        Block([declare("x"), Substitution("x", [], AssignOp.ASSIGN_VAR, Variable("n"))]),
        Substitution("y", [], AssignOp.ASSIGN_VAR, Number(0), Meta(3, 7, file_id=0)),
    ]
    reports = errors_of(make_program(body))
    assert len(reports) == 1
    assert reports[0].code is ReportCode.NON_EXISTENT_SYMBOL
    assert reports[0].labels[0].message == "Using unknown symbol"
    assert reports[0].labels[0].location == range(3, 7)


def test_symbol_declared_in_block_is_not_visible_after_it():
    body = [
        Block([declare("x")]),
        Substitution("x", [], AssignOp.ASSIGN_VAR, Number(1)),
    ]
    reports = errors_of(make_program(body))
    assert [r.code for r in reports] == [ReportCode.NON_EXISTENT_SYMBOL]


def test_same_symbol_declared_twice_in_one_block():
    body = [declare("x"), declare("x")]
    reports = errors_of(make_program(body))
    assert [r.code for r in reports] == [ReportCode.SAME_SYMBOL_DECLARED_TWICE]
    assert reports[0].labels[0].message == "Declaring same symbol twice"


def test_duplicate_parameters_are_reported_at_parameter_location():
    with pytest.raises(AnalysisError) as info:
        analyze_symbols(4, range(10, 20), ["a", "a"], [], {}, {})
    reports = info.value.reports
    assert len(reports) == 1
    assert reports[0].code is ReportCode.SAME_SYMBOL_DECLARED_TWICE
    assert reports[0].labels[0].location == range(10, 20)
    assert reports[0].labels[0].file_id == 4


def test_public_signal_must_be_an_input():
    program = make_program([], public=["a", "b"])
    reports = errors_of(program)
    assert len(reports) == 1
    assert reports[0].labels[0].message == "b is not an input signal"


def test_unknown_call_is_reported():
    body = [declare("x"), Substitution("x", [], AssignOp.ASSIGN_VAR, Call("missing", []))]
    reports = errors_of(make_program(body))
    assert [r.code for r in reports] == [ReportCode.NON_EXISTENT_SYMBOL]
    assert reports[0].labels[0].message == "Calling unknown symbol"


def test_wrong_number_of_arguments_stops_argument_analysis():
    function = FunctionData("f", Block([Return(Variable("k"))]), name_of_params=["k"])
    call = Call("f", [Variable("undeclared1"), Variable("undeclared2")])
    body = [declare("x"), Substitution("x", [], AssignOp.ASSIGN_VAR, call)]
    reports = errors_of(make_program(body, functions={"f": function}))
    assert [r.code for r in reports] == [ReportCode.FUNCTION_WRONG_NUMBER_OF_ARGUMENTS]
    assert reports[0].labels[0].message == "Got 2 params, 1 where expected"


def test_function_bodies_are_checked_too():
    function = FunctionData("f", Block([Return(Variable("z"))]), name_of_params=["k"], file_id=9)
    reports = errors_of(make_program([], functions={"f": function}))
    assert len(reports) == 1
    assert reports[0].labels[0].file_id == 9


def test_signal_declaration_counts_as_symbol():
    body = [
        declare("s", INPUT),
        Substitution("s", [], AssignOp.ASSIGN_CONSTRAINT_SIGNAL, Variable("n")),
        Substitution("t", [], AssignOp.ASSIGN_CONSTRAINT_SIGNAL, Variable("s")),
    ]
    reports = errors_of(make_program(body))
    assert len(reports) == 1


def test_multiple_substitution_is_rejected():
    stmt = MultSubstitution(Variable("a"), AssignOp.ASSIGN_VAR, Number(1))
    with pytest.raises(ValueError):
        analyze_symbols(0, range(0, 0), [], [stmt], {}, {})