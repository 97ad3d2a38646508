"""Address-keyed storage split into a general and a reserved partition."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .value import Type, Value, equal, type_of


class HeapError(Exception):
    """Base class of heap errors."""


class OutOfMemoryError(HeapError):
    """The heap has no room left."""


class InvalidAddressError(HeapError):
    """An address holds no value or lies outside the heap."""

    def __init__(self, address: int) -> None:
        self.address = address
        super().__init__(f"invalid address {address}")


class PartitionLimitExceededError(HeapError):
    """A partition cannot hold the requested number of addresses."""

    def __init__(self, reserved: bool) -> None:
        self.reserved = reserved
        name = "reserved" if reserved else "general"
        super().__init__(f"{name} partition limit exceeded")


@dataclass
class _Partition:
    limit: int
    next_address: int
    allocated: int = 0
    free: list[int] = field(default_factory=list)


def _same_value(a: Value, b: Value) -> bool:
    if type_of(a) is Type.FUNCTION and type_of(b) is Type.FUNCTION:
        return a is b
    return equal(a, b)


class Heap:
    """A heap of values addressed by integers.

    The reserved partition takes ``reserved_ratio`` of ``total_limit``; its
    addresses are counted from ``reserved_limit`` upwards, while general
    addresses are counted from zero.
    """

    def __init__(self, total_limit: int, reserved_ratio: float) -> None:
        self.total_limit = total_limit
        self.reserved_limit = int(total_limit * reserved_ratio)
        self.general_limit = total_limit - self.reserved_limit
        self._values: dict[int, Value] = {}
        self._general = _Partition(self.general_limit, 0)
        self._reserved = _Partition(self.reserved_limit, self.reserved_limit)

    def _partition(self, reserved: bool) -> _Partition:
        return self._reserved if reserved else self._general

    def allocate_address(self, reserved: bool) -> int:
        """Allocate one address holding null and return it."""
        part = self._partition(reserved)
        while True:
            if part.allocated >= part.limit:
                raise PartitionLimitExceededError(reserved)
            if part.free:
                address = part.free.pop()
            else:
                address = part.next_address
                part.next_address += 1
            part.allocated += 1
            if address not in self._values:
                self._values[address] = None
                return address

    def lookup_address(self, address: int) -> Value:
        """Return the value stored at ``address``."""
        try:
            return self._values[address]
        except KeyError:
            raise InvalidAddressError(address) from None

    def allocate_consecutive_addresses(self, count: int, reserved: bool) -> list[int]:
        """Reserve ``count`` consecutive addresses and return them in order.

        The first free block below the next general address is taken if one
        exists; otherwise the block is carved from the partition's end.
        """
        if count < 0:
            raise ValueError("count must not be negative")
        part = self._partition(reserved)
        if part.allocated + count > part.limit:
            raise PartitionLimitExceededError(reserved)

        for start in range(self._general.next_address):
            if self._is_block_free(start, count):
                block = list(range(start, start + count))
                taken = set(block)
                part.free[:] = [a for a in part.free if a not in taken]
                part.allocated += count
                return block

        start = part.next_address
        part.next_address += count
        part.allocated += count
        return list(range(start, start + count))

    def _is_block_free(self, start: int, count: int) -> bool:
        return all(
            address not in self._values
            and address not in self._general.free
            and address not in self._reserved.free
            for address in range(start, start + count)
        )

    def store(self, address: int, value: Value) -> None:
        """Store ``value`` at ``address``, which must lie below the total limit."""
        if address >= self.total_limit:
            raise InvalidAddressError(address)
        self._values[address] = value

    def store_value(self, value: Value, reserved: bool) -> int:
        """Allocate an address, store ``value`` there and return the address."""
        address = self.allocate_address(reserved)
        self._values[address] = value
        return address

    def free(self, address: int, reserved: bool) -> None:
        """Release ``address`` back to the given partition."""
        if address not in self._values:
            raise InvalidAddressError(address)
        del self._values[address]
        part = self._partition(reserved)
        part.free.append(address)
        part.allocated -= 1

    def lookup_values_general(self, values: Iterable[Value]) -> list[int]:
        """Return, in ascending order, the addresses below the reserved limit
        that hold one of ``values``."""
        wanted = list(values)
        return sorted(
            address
            for address, stored in self._values.items()
            if address < self.reserved_limit
            and any(_same_value(stored, w) for w in wanted)
        )