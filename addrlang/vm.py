"""A stack-based virtual machine executing address-language bytecode."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from enum import Enum
from typing import Any

from . import value as values
from .builtins import (
    BuiltinFunction,
    builtin_char_at,
    builtin_concat,
    builtin_print,
    builtin_replace,
    builtin_substring,
)
from .heap import Heap, HeapError
from .scope import Scope, ScopeError, VariableNotFoundError
from .typings import Type
from .value import Value, ValueOperationError, type_of

_log = logging.getLogger(__name__)

HEAP_SIZE = 4000
RESERVED_RATIO = 0.25


class VMError(Exception):
    """An error raised while executing bytecode."""


class StackUnderflowError(VMError):
    """An instruction needed more values than the stack (or call stack) held."""

    def __init__(self, message: str = "stack underflow") -> None:
        super().__init__(message)


class BadAddressError(VMError):
    """A value used as an address is not an integer."""

    def __init__(self, message: str = "invalid address") -> None:
        super().__init__(message)


class InvalidOperationError(VMError):
    """An instruction was applied to a value it cannot handle."""

    def __init__(self, message: str = "invalid operation") -> None:
        super().__init__(message)


class UndefinedFunctionError(VMError):
    """A builtin was called that has not been registered."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"undefined function: {name}")


class Opcode(Enum):
    """Instruction codes; each carries its mnemonic and operand count."""

    CONSTANT = ("Constant", 1)
    LOAD_VAR = ("LoadVar", 1)
    STORE_VAR = ("StoreVar", 1)
    ADD = ("Add", 0)
    SUB = ("Sub", 0)
    MUL = ("Mul", 0)
    DIV = ("Div", 0)
    MOD = ("Mod", 0)
    AND = ("And", 0)
    OR = ("Or", 0)
    EQUAL = ("Equal", 0)
    NOT_EQUAL = ("NotEqual", 0)
    GREATER = ("Greater", 0)
    LESS = ("Less", 0)
    NOT = ("Not", 0)
    NEGATE = ("Negate", 0)
    JUMP = ("Jump", 1)
    JUMP_IF_FALSE = ("JumpIfFalse", 1)
    LABEL = ("Label", 1)
    CALL_BUILTIN = ("CallBuiltin", 2)
    CALL_SUB_PROGRAM = ("CallSubProgram", 2)
    RETURN = ("Return", 0)
    HALT = ("Halt", 0)
    POP = ("Pop", 0)
    DEREF = ("Deref", 0)
    MUL_DEREF = ("MulDeref", 0)
    STORE = ("Store", 0)
    ALLOC = ("Alloc", 0)
    ALLOC_MANY = ("AllocMany", 1)
    DUP = ("Dup", 0)
    STORE_ADDR = ("StoreAddr", 0)
    BIND_ADDR = ("BindAddr", 1)
    PUSH_SCOPE = ("PushScope", 0)
    POP_SCOPE = ("PopScope", 0)
    FREE_ADDR = ("FreeAddr", 0)
    SWAP = ("Swap", 0)

    def __init__(self, mnemonic: str, arity: int) -> None:
        self.mnemonic = mnemonic
        self.arity = arity


class Instruction:
    """One bytecode instruction: an opcode and its operands."""

    __slots__ = ("opcode", "operands")

    def __init__(self, opcode: Opcode, *operands: Any) -> None:
        if len(operands) != opcode.arity:
            raise ValueError(
                f"{opcode.mnemonic} takes {opcode.arity} operand(s), got {len(operands)}"
            )
        self.opcode = opcode
        self.operands = operands

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Instruction):
            return NotImplemented
        return self.opcode is other.opcode and self.operands == other.operands

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if not self.operands:
            return self.opcode.mnemonic
        return f"{self.opcode.mnemonic}({', '.join(map(repr, self.operands))})"


def _is_int(value: Value) -> bool:
    return type_of(value) is Type.INT


class VM:
    """Executes a program of instructions against a stack, scopes and a heap."""

    def __init__(self, program: Iterable[Instruction | Opcode]) -> None:
        self.program: list[Instruction] = [
            Instruction(item) if isinstance(item, Opcode) else item for item in program
        ]
        self.pc = 0
        self.stack: list[Value] = []
        self.scopes: list[Scope] = [Scope()]
        self.heap = Heap(HEAP_SIZE, RESERVED_RATIO)
        self.builtins: dict[str, BuiltinFunction] = {}
        self.call_stack: list[int] = []
        self._handlers: dict[Opcode, Callable[..., None]] = {
            Opcode.CONSTANT: self.stack.append,
            Opcode.LOAD_VAR: self._load_var,
            Opcode.STORE_VAR: self._store_var,
            Opcode.ADD: lambda: self._binary(values.add),
            Opcode.SUB: lambda: self._binary(values.sub),
            Opcode.MUL: lambda: self._binary(values.mul),
            Opcode.DIV: lambda: self._binary(values.div),
            Opcode.MOD: lambda: self._binary(values.modulus),
            Opcode.AND: lambda: self._binary(values.logical_and),
            Opcode.OR: lambda: self._binary(values.logical_or),
            Opcode.EQUAL: lambda: self._binary(values.equal),
            Opcode.NOT_EQUAL: lambda: self._binary(values.not_equal),
            Opcode.GREATER: lambda: self._binary(values.greater),
            Opcode.LESS: lambda: self._binary(values.less),
            Opcode.NOT: lambda: self._unary(values.logical_not),
            Opcode.NEGATE: lambda: self._unary(values.negate),
            Opcode.JUMP: self._jump,
            Opcode.JUMP_IF_FALSE: self._jump_if_false,
            Opcode.LABEL: lambda _name: None,
            Opcode.CALL_BUILTIN: self._call_builtin,
            Opcode.CALL_SUB_PROGRAM: self._call_subprogram,
            Opcode.RETURN: self._return,
            Opcode.POP: self._pop,
            Opcode.DEREF: self._deref,
            Opcode.MUL_DEREF: self._mul_deref,
            Opcode.STORE: self._store,
            Opcode.ALLOC: lambda: self.stack.append(self.heap.allocate_address(False)),
            Opcode.ALLOC_MANY: self._alloc_many,
            Opcode.DUP: self._dup,
            Opcode.STORE_ADDR: self._store_addr,
            Opcode.BIND_ADDR: self._bind_addr,
            Opcode.PUSH_SCOPE: lambda: self.scopes.append(Scope()),
            Opcode.POP_SCOPE: self._pop_scope,
            Opcode.FREE_ADDR: self._free_addr,
            Opcode.SWAP: self._swap,
        }

    def register_builtin(self, name: str, func: BuiltinFunction) -> None:
        """Make ``func`` callable by ``CallBuiltin`` under ``name``."""
        self.builtins[name] = func

    def run(self) -> None:
        """Execute instructions until the program ends or halts."""
        while self.pc < len(self.program):
            instruction = self.program[self.pc]
            self.pc += 1
            _log.debug("pc=%d instruction=%r", self.pc, instruction)
            if instruction.opcode is Opcode.HALT:
                break
            try:
                self._handlers[instruction.opcode](*instruction.operands)
            except (ValueOperationError, HeapError, ScopeError) as err:
                raise VMError(str(err)) from err
            _log.debug("stack=%r scope=%r", self.stack, self.scopes[-1] if self.scopes else None)

    # Stack and scope helpers

    def _pop(self) -> Value:
        if not self.stack:
            raise StackUnderflowError()
        return self.stack.pop()

    def _current_scope(self) -> Scope:
        if not self.scopes:
            raise VMError("No scope available")
        return self.scopes[-1]

    def _pop_scope(self) -> None:
        if not self.scopes:
            raise VMError("No scope to pop")
        self.scopes.pop()

    def _swap(self) -> None:
        if len(self.stack) < 2:
            raise StackUnderflowError()
        self.stack[-1], self.stack[-2] = self.stack[-2], self.stack[-1]

    def _dup(self) -> None:
        if not self.stack:
            raise StackUnderflowError()
        top = self.stack[-1]
        self.stack.extend((top, top))

    # Variables and memory

    def _load_var(self, name: str) -> None:
        scope = self._current_scope()
        try:
            address = scope.get_var(name)
        except VariableNotFoundError:
            address = self.heap.allocate_address(False)
            scope.set_var(name, address)
        self.stack.append(address)

    def _store_var(self, name: str) -> None:
        address = self.heap.allocate_address(False)
        self._current_scope().set_var(name, address)

    def _bind_addr(self, name: str) -> None:
        address = self._pop()
        if not _is_int(address):
            raise BadAddressError()
        self._current_scope().set_var(name, address)

    def _store(self) -> None:
        address = self._pop()
        if not _is_int(address):
            raise BadAddressError()
        self.heap.store(address, self._pop())

    def _store_addr(self) -> None:
        self.stack.append(self.heap.store_value(self._pop(), False))

    def _alloc_many(self, count: int) -> None:
        self.stack.extend(self.heap.allocate_consecutive_addresses(count, False))

    def _free_addr(self) -> None:
        address = self._pop()
        if not _is_int(address):
            raise BadAddressError()
        self.heap.free(address, False)

    def _deref(self) -> None:
        address = self._pop()
        if not _is_int(address):
            raise BadAddressError()
        try:
            self.stack.append(self.heap.lookup_address(address))
        except HeapError:
            self.stack.append(None)

    def _mul_deref(self) -> None:
        n = values.extract_int(self._pop())
        address = self._pop()
        if n == 0:
            self.stack.append(address)
        elif n < 0:
            fathers = self._referrers([address], n)
            self.stack.append(self._allocate_list(fathers, True) if fathers else None)
        else:
            pointer = values.extract_int(address)
            for _ in range(1, n):
                pointer = values.extract_int(self.heap.lookup_address(pointer))
            self.stack.append(self.heap.lookup_address(pointer))

    def _referrers(self, targets: list[Value], depth: int) -> list[Value]:
        """Follow ``-depth`` steps backwards: addresses holding the targets."""
        current: list[Value] = list(targets)
        for _ in range(-depth):
            current = list(self.heap.lookup_values_general(current))
        return current

    def _allocate_list(self, elements: list[Value], reserved: bool) -> int:
        """Store ``elements`` as a linked list of (next, value) cells."""
        cell = self.heap.allocate_consecutive_addresses(2, reserved)
        head = cell[0]
        for position, element in enumerate(elements, start=1):
            self.heap.store(cell[0], None)
            self.heap.store(cell[1], element)
            if position != len(elements):
                following = self.heap.allocate_consecutive_addresses(2, reserved)
                self.heap.store(cell[0], following[0])
                cell = following
        return head

    # Control flow

    def _jump(self, address: int) -> None:
        self.pc = address

    def _jump_if_false(self, address: int) -> None:
        condition = self._pop()
        if type_of(condition) is not Type.BOOL:
            raise InvalidOperationError()
        if not condition:
            self.pc = address

    def _call_builtin(self, name: str, argc: int) -> None:
        args = [self._pop() for _ in range(argc)]
        args.reverse()
        func = self.builtins.get(name)
        if func is None:
            raise UndefinedFunctionError(name)
        self.stack.append(func(self, args))

    def _call_subprogram(self, label: int, argc: int) -> None:
        self.call_stack.append(self.pc + 1)
        self.pc = label

    def _return(self) -> None:
        self._pop_scope()
        if not self.call_stack:
            raise StackUnderflowError()
        self.pc = self.call_stack.pop()

    # Operators

    def _binary(self, op: Callable[[Value, Value], Value]) -> None:
        rhs = self._pop()
        lhs = self._pop()
        self.stack.append(op(lhs, rhs))

    def _unary(self, op: Callable[[Value], Value]) -> None:
        self.stack.append(op(self._pop()))


def execute_bytecode(program: Iterable[Instruction | Opcode]) -> None:
    """Run ``program`` on a fresh machine with the standard builtins registered."""
    vm = VM(program)
    vm.register_builtin("Print", builtin_print)
    vm.register_builtin("CharAt", builtin_char_at)
    vm.register_builtin("Concat", builtin_concat)
    vm.register_builtin("Replace", builtin_replace)
    vm.register_builtin("SubString", builtin_substring)
    vm.run()