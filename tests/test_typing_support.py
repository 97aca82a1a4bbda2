import pytest

from circuit_types.ast import Block, Meta
from circuit_types.environment import CircomEnvironment, SymbolNotFound
from circuit_types.program import FunctionData, ProgramArchive, TemplateData
from circuit_types.reports import ReportCode, Severity
from circuit_types.typing_support import (
    AccessInfo,
    AnalysisInformation,
    FoldedType,
    SymbolInformation,
    TypingFailure,
    add_typing_report,
    apply_access_to_symbol,
    prepare_environment_for_call,
    typing_message,
)


@pytest.fixture
def meta():
    return Meta(start=3, end=7, file_id=1)


@pytest.fixture
def program():
    sub = TemplateData(
        name="Sub",
        body=Block(),
        name_of_params=["n"],
        inputs={"a": (1, ("binary",))},
        outputs={"out": (0, ())},
    )
    func = FunctionData(name="f", body=Block(), name_of_params=["x", "y"])
    return ProgramArchive(main_expression=None, templates={"Sub": sub}, functions={"f": func})


def test_arithmetic_folded_type():
    folded = FoldedType.arithmetic_type(2)
    assert folded.dim() == 2
    assert folded.is_template() is False


def test_template_folded_type():
    folded = FoldedType.template_type("Sub")
    assert folded.is_template() is True
    assert folded.dim() == 0


@pytest.mark.parametrize(
    "left, right, expected",
    [
        (FoldedType.arithmetic_type(1), FoldedType.arithmetic_type(1), True),
        (FoldedType.arithmetic_type(1), FoldedType.arithmetic_type(2), False),
        (FoldedType.template_type("A"), FoldedType.template_type("A"), True),
        (FoldedType.template_type("A"), FoldedType.template_type("B"), False),
        (FoldedType.template_type("A"), FoldedType.arithmetic_type(0), False),
    ],
)
def test_same_type(left, right, expected):
    assert FoldedType.same_type(left, right) is expected


def test_typing_message_with_arguments():
    assert typing_message(ReportCode.INVALID_ARRAY_ACCESS, (1, 2)) == (
        "Array access does not match the dimensions of the expression. \n"
        " Expected 1 dimensions, given 2."
    )


def test_typing_message_without_arguments():
    assert typing_message(ReportCode.EMPTY_ARRAY_INLINE_DECLARATION) == (
        "Empty arrays can not be declared inline"
    )


def test_typing_message_rejects_uncovered_code():
    with pytest.raises(ValueError):
        typing_message(ReportCode.NON_QUADRATIC, ())


def test_typing_message_rejects_wrong_argument_count():
    with pytest.raises(ValueError):
        typing_message(ReportCode.INVALID_ARRAY_SIZE, ())


def test_add_typing_report(meta):
    reports = []
    report = add_typing_report(reports, ReportCode.EXPECTED_DIM_DIFF_GOT_DIM, meta, 0, 1)
    assert reports == [report]
    assert report.message == "Typing error found"
    assert report.severity is Severity.ERROR
    assert report.code is ReportCode.EXPECTED_DIM_DIFF_GOT_DIM
    label = report.labels[0]
    assert label.location == range(3, 7)
    assert label.file_id == 1
    assert label.message == "Function should return 0 but returns 1"


def test_variable_partial_access(meta, program):
    environment = CircomEnvironment()
    environment.add_variable("v", 2)
    result = apply_access_to_symbol("v", meta, AccessInfo(array_dims=1), environment, [], program)
    assert result == SymbolInformation.var(1)


def test_variable_over_access_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_variable("v", 1)
    reports = []
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("v", meta, AccessInfo(array_dims=2), environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.INVALID_ARRAY_ACCESS]


def test_signal_access(meta, program):
    environment = CircomEnvironment()
    environment.add_input("s", (3, ()))
    result = apply_access_to_symbol("s", meta, AccessInfo(array_dims=1), environment, [], program)
    assert result == SymbolInformation.signal(2)


def test_component_without_access(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 0))
    result = apply_access_to_symbol("c", meta, AccessInfo(), environment, [], program)
    assert result == SymbolInformation.component("Sub")


def test_component_array_partial_access_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 2))
    reports = []
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("c", meta, AccessInfo(array_dims=1), environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.INVALID_PARTIAL_ARRAY]


def test_component_signal_access(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 0))
    access = AccessInfo(signal="a", signal_dims=1)
    result = apply_access_to_symbol("c", meta, access, environment, [], program)
    assert result == SymbolInformation.signal(0)


def test_component_output_access(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 0))
    result = apply_access_to_symbol("c", meta, AccessInfo(signal="out"), environment, [], program)
    assert result == SymbolInformation.signal(0)


def test_component_unknown_signal_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 0))
    reports = []
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("c", meta, AccessInfo(signal="zzz"), environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.INVALID_SIGNAL_ACCESS]


def test_component_signal_tag(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 0))
    access = AccessInfo(signal="a", tag="binary")
    result = apply_access_to_symbol("c", meta, access, environment, [], program)
    assert result == SymbolInformation.tag()


def test_component_signal_tag_after_array_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", ("Sub", 0))
    reports = []
    access = AccessInfo(signal="a", signal_dims=1, tag="binary")
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("c", meta, access, environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.INVALID_TAG_ACCESS_AFTER_ARRAY]


def test_own_signal_tag(meta, program):
    environment = CircomEnvironment()
    environment.add_input("s", (0, ("maxbit",)))
    result = apply_access_to_symbol("s", meta, AccessInfo(signal="maxbit"), environment, [], program)
    assert result == SymbolInformation.tag()


def test_own_signal_unknown_tag_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_input("s", (0, ("maxbit",)))
    reports = []
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("s", meta, AccessInfo(signal="other"), environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.INVALID_TAG_ACCESS]


def test_uninitialized_component_access_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_component("c", (None, 0))
    reports = []
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("c", meta, AccessInfo(signal="a"), environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.UNINITIALIZED_COMPONENT]


def test_variable_dot_access_fails(meta, program):
    environment = CircomEnvironment()
    environment.add_variable("v", 0)
    reports = []
    with pytest.raises(TypingFailure):
        apply_access_to_symbol("v", meta, AccessInfo(signal="a"), environment, reports, program)
    assert [r.code for r in reports] == [ReportCode.INVALID_SIGNAL_TAG_ACCESS]


def test_undeclared_symbol_raises(meta, program):
    with pytest.raises(SymbolNotFound):
        apply_access_to_symbol("ghost", meta, AccessInfo(), CircomEnvironment(), [], program)


def test_prepare_environment_for_function(meta, program):
    environment = prepare_environment_for_call(meta, "f", [1, 0], program, [])
    assert environment.get_variable("x") == 1
    assert environment.get_variable("y") == 0


def test_prepare_environment_for_template(meta, program):
    environment = prepare_environment_for_call(meta, "Sub", [0], program, [])
    assert environment.get_variable("n") == 0
    assert environment.has_signal("n") is False


def test_prepare_environment_wrong_count(meta, program):
    reports = []
    with pytest.raises(TypingFailure):
        prepare_environment_for_call(meta, "f", [1], program, reports)
    assert [r.code for r in reports] == [ReportCode.WRONG_NUMBER_OF_ARGUMENTS]
    assert reports[0].labels[0].message == "Expecting 2 arguments, 1 where obtained"


def test_analysis_information_starts_empty():
    analysis = AnalysisInformation(file_id=4)
    analysis.reached.add("f")
    other = AnalysisInformation()
    assert analysis.file_id == 4
    assert other.reached == set()
    assert other.reports == []
    assert other.return_type is None