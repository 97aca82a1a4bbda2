# circuit_types

Static analyses for programs that describe arithmetic circuits as templates
and functions. You hand the package a syntax tree, gathered in a
`ProgramArchive`, and it checks the program before any code is generated.

## What it checks

- **Symbols** (`circuit_types.symbol_analysis`):
  `check_naming_correctness(program)` checks that every name is declared
  before use and that no name is declared twice in one block. It also checks
  that calls target a known template or function with the right number of
  arguments, and that the public inputs of the main component are its input
  signals. `analyze_symbols(...)` runs the same checks on a single body.
- **Templates**: `free_of_returns(template_data)`
  (`circuit_types.template_returns`) rejects `return` statements in templates.
  `check_signal_correctness(template_data)`
  (`circuit_types.signal_declaration_analysis`) rejects signal and component
  declarations inside `while` loops.
- **Functions**: `free_of_template_elements(function_data, function_names)`
  (`circuit_types.function_purity`) rejects signals, components, constraint
  operators, component accesses and calls to anything but functions.
  `all_paths_with_return_check(function_data)`
  (`circuit_types.function_returns`) requires every path to end in a return.
- **Types** (`circuit_types.type_check`): `type_check(program)` types the
  program from its main call onward. It checks array dimensions and indexes,
  component, signal and tag accesses, assignment operators, conditions,
  constraint sides and the dimensions functions return. It rejects a main
  component whose inputs carry tags. It returns a `TypeCheckResult` whose
  `reached` set names the templates and functions reached from main.
- **Custom gates** (`circuit_types.custom_gate_analysis`):
  `custom_gate_analysis(name, body)` returns warnings for intermediate signals
  and raises `CustomGateError` for subcomponents or added constraints.

## What it changes in the tree

- `reduce_function` and `reduce_template` (`circuit_types.type_reduction`) set
  `Meta.reduces_to` on every symbol use to a `TypeReduction`: variable,
  component, signal or tag.
- `handle_function_constants` and `handle_template_constants`
  (`circuit_types.constants_handler`) mark declarations with `is_constant`.
  They report array lengths that are not constant, with
  `ReportCode.NON_CONSTANT_ARRAY_LENGTH`, and replace uses of constant
  variables with the expressions they hold. `has_constant_value` answers the
  question for a single expression.

## Supporting pieces

- `circuit_types.ast`: the syntax tree. It has the expressions `Number`,
  `Variable`, `InfixOp`, `PrefixOp`, `ParallelOp`, `InlineSwitchOp`, `Call`,
  `ArrayInLine`, `UniformArray` and `AnonymousComp`. It has the statements
  `IfThenElse`, `While`, `Return`, `InitializationBlock`, `Declaration`,
  `Substitution`, `MultSubstitution`, `UnderscoreSubstitution`,
  `ConstraintEquality`, `LogCall`, `Block` and `Assert`. Each node carries a
  `Meta` with its position and file id.
- `circuit_types.program`: `FunctionData`, `TemplateData` and
  `ProgramArchive`.
- `circuit_types.environment`: the block-scoped `VarEnvironment` and
  `CircomEnvironment`. A lookup of an undeclared name raises `SymbolNotFound`.
- `circuit_types.type_given_function`: `type_given_function` finds the
  dimension a function returns for given argument dimensions.
- `circuit_types.type_register`: `TypeRegister` remembers which argument
  dimensions each callable was already typed with.
- `circuit_types.typing_support` and `circuit_types.expression_typing`:
  `FoldedType`, the typing messages and expression typing used by
  `type_check`.

## Reports

Diagnostics are `Report` objects from `circuit_types.reports`. Each has a
`message`, a `ReportCode`, a `Severity` and a list of `Label`s that point at a
location in a file.

An analysis that finds errors raises `AnalysisError`, or its subclass
`TypeCheckError` or `CustomGateError`, and the reports are on its `reports`
attribute. Warnings are returned.

## Example

```python
from circuit_types.ast import (
    AssignOp, Block, Call, Declaration, InfixOp, InitializationBlock,
    SignalType, Substitution, Variable, VariableKind, VariableType,
)
from circuit_types.program import ProgramArchive, TemplateData
from circuit_types.type_check import TypeCheckError, type_check

inp = VariableType(VariableKind.SIGNAL, SignalType.INPUT)
out = VariableType(VariableKind.SIGNAL, SignalType.OUTPUT)
body = Block([
    InitializationBlock(inp, [Declaration(inp, "a")]),
    InitializationBlock(out, [Declaration(out, "b")]),
    Substitution("b", [], AssignOp.ASSIGN_CONSTRAINT_SIGNAL,
                 InfixOp(Variable("a"), "*", Variable("a"))),
])
main = TemplateData("Main", body, inputs={"a": (0, ())}, outputs={"b": (0, ())})
program = ProgramArchive(Call("Main", []), templates={"Main": main})

try:
    result = type_check(program)
except TypeCheckError as error:
    for report in error.reports:
        print(report.message, [label.message for label in report.labels])
else:
    print(sorted(result.reached))   # ['Main']
```

## What it does not do

- It does not parse source text. You build the syntax tree yourself.
- It has no command-line tool.
- It has no single entry point that runs every pass in order. Call the checks
  and the tree rewrites you need yourself.
- It does not work out which template a component declaration instantiates.
  `type_check` uses `Meta.component_inference` on a component declaration when
  it is set. Otherwise it learns the template from the first assignment to the
  component.
- It has no analysis of which values are known or unknown when constraints are
  generated.
- `MultSubstitution` and `AnonymousComp` must be rewritten away before the
  analyses run. The analyses raise `ValueError` when they meet them.

## Installation

```
pip install .
```

For the test suite:

```
pip install ".[test]"
pytest
```