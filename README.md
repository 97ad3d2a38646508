# addrlang

`addrlang` holds the building blocks of an interpreter for the address
language. In this small language, variables name heap addresses and programs
dereference those addresses explicitly. The package provides:

- runtime values and their operations
- token kinds and symbol tables
- a syntax tree with a visitor and a JSON round trip
- a heap and scopes
- a stack-based bytecode virtual machine with a few built-in functions

It uses only the standard library.

## Modules

| Module | Contents |
| --- | --- |
| `addrlang.typings` | `Type`, the value types (`NULL`, `FLOAT`, `STRING`, `BOOL`, `INT`, `FUNCTION`, `ERROR`, `UNRESOLVED`), and `parse_type` |
| `addrlang.value` | Operations on runtime values, the `extract_*` helpers, and the errors `ValueOperationError`, `IncompatibleTypesError` and `UnexpectedTypeError` |
| `addrlang.tokens` | `TokenKind`, `Token`, and `match_single_symbol`, `match_double_symbol`, `match_triple_symbol` |
| `addrlang.lex_errors` | `LexError` and its subclasses `UnexpectedCharacterError`, `UnterminatedStringError`, `FloatFormatError`, `IntegerFormatError` |
| `addrlang.ast` | Syntax-tree node classes and the `Visitor` base class |
| `addrlang.serializer` | `serialize_ast`, `deserialize_ast`, `serialize_ast_to_file`, `deserialize_ast_from_file` |
| `addrlang.heap` | `Heap`, split into a general and a reserved partition, and the errors `HeapError`, `InvalidAddressError`, `PartitionLimitExceededError`, `OutOfMemoryError` |
| `addrlang.scope` | `Scope`, which maps names to addresses, and `VariableNotFoundError` |
| `addrlang.builtins` | `builtin_print`, `builtin_char_at`, `builtin_concat`, `builtin_replace`, `builtin_substring`, and `BuiltinError` |
| `addrlang.vm` | `VM`, `Opcode`, `Instruction`, `execute_bytecode`, and the `VMError` family |

The `addrlang.ast` node classes are:

- `Algorithm`, `FileLine`, `Located`, `Label`, `Path`
- expressions: `NullLiteral`, `FloatLiteral`, `BoolLiteral`, `IntLiteral`, `StringLiteral`, `Var`, `ListExpr`, `Call`, `UnaryOp`, `BinaryOp`
- statements: `Import`, `Del`, `Assign`, `Send`, `Exchange`, `ExpressionStatement`, `SubProgram`, `Loop`, `Predicate`, `Exit`, `Return`, `UnconditionalJump`

## Installing

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Values

Runtime values are plain Python objects:

- `None` is null.
- `bool`, `int`, `float` and `str` stand for themselves.
- A callable is a function value.

The operations follow the language's rules rather than Python's:

- Both operands must have the same type.
- Integers stay within the signed 64-bit range. `sub` wraps around; `add`, `mul`, `div` and `negate` raise `OverflowError`.
- Integer division and remainder truncate toward zero.

```python
from addrlang import value

value.add(2, 3)                 # 5
value.add("ab", "cd")           # "abcd"
value.div(-7, 2)                # -3
value.equal(1, 1.0)             # False: different types
value.format_value(True)        # "true"
value.format_value(None)        # "Null"
value.add(1, "a")               # raises IncompatibleTypesError
value.extract_int("x")          # raises UnexpectedTypeError
```

`parse_type` maps a declarable type name to its `Type`. Any other name gives
`None`:

```python
from addrlang.typings import Type, parse_type

parse_type("int") is Type.INT   # True
parse_type("matrix")            # None
```

## Tokens

```python
from addrlang.tokens import Token, TokenKind, match_double_symbol, match_triple_symbol

match_double_symbol("<", "=")        # TokenKind.LESS_THAN_EQUAL
match_triple_symbol("<", "=", ">")   # TokenKind.EXCHANGE
str(Token(TokenKind.STRING_LITERAL, "hi"))   # '"hi"'
str(Token(TokenKind.SEND))                   # "=>"
```

A `Token` checks its payload:

- Identifiers and literals need a value of the matching type.
- Every other kind takes no value.

## Syntax tree and JSON

Each node can be wrapped in `Located` together with its start and end
locations. A line's statements are either one `Located` one-line statement or a
list of `Located` simple statements.

```python
from addrlang.ast import Algorithm, FileLine, Located, Return
from addrlang.serializer import deserialize_ast, serialize_ast

algorithm = Algorithm([FileLine(["label1"], Located(Return()))])
text = serialize_ast(algorithm)
assert deserialize_ast(text) == algorithm
```

The JSON is externally tagged:

- A variant without fields is written as its tag string.
- Any other variant is an object with one key, its tag.

`deserialize_ast` raises `ValueError` on malformed input.

A `Visitor` calls `visit_<snake_case class name>` for each node it is handed.
Nodes without such a method go to `generic_visit`, which visits their children:

```python
from addrlang.ast import Visitor

class VarNames(Visitor):
    def __init__(self):
        self.names = []

    def visit_var(self, node):
        self.names.append(node.name)

collector = VarNames()
algorithm.accept(collector)
```

## Running bytecode

A program is a list of `Instruction`s. An `Opcode` that takes no operands may
be given on its own. `VM.run` executes until the end of the program or a
`HALT`. The stack remains available afterwards as `vm.stack`.

```python
from addrlang.vm import VM, Instruction, Opcode

vm = VM([
    Instruction(Opcode.CONSTANT, 5),
    Instruction(Opcode.BIND_ADDR, "x"),   # bind x to address 5
    Instruction(Opcode.LOAD_VAR, "x"),    # push x's address
    Instruction(Opcode.CONSTANT, 3),
    Opcode.ADD,
    Opcode.HALT,
])
vm.run()
vm.stack[-1]   # 8
```

`execute_bytecode` runs a program on a fresh `VM` with these built-ins
registered:

- `Print`
- `CharAt`
- `Concat`
- `Replace`
- `SubString`

```python
from addrlang.vm import Instruction, Opcode, execute_bytecode

execute_bytecode([
    Instruction(Opcode.CONSTANT, "hello"),
    Instruction(Opcode.CONSTANT, 42),
    Instruction(Opcode.CALL_BUILTIN, "Print", 2),
])   # prints "hello42"
```

Every `VM` uses a `Heap` of 4000 addresses, a quarter of them reserved.

When a program fails, `run` raises one of these:

- `StackUnderflowError`, `BadAddressError`, `InvalidOperationError` or `UndefinedFunctionError`, all subclasses of `VMError`.
- A plain `VMError`, which wraps value, heap and scope errors.
- `BuiltinError`, raised by a built-in function.
- `ZeroDivisionError` or `OverflowError` from integer arithmetic.

Each step is logged at debug level on the `addrlang.vm` logger.

## What it does not do

The package has no lexer that turns source text into tokens. `addrlang.tokens`
and `addrlang.lex_errors` only supply the token kinds, the symbol tables and the
errors.

There is also:

- no parser from source text to an `Algorithm`;
- no compiler from a syntax tree to `Instruction`s;
- no command-line program.

Programs are run by building instruction lists directly.