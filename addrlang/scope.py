"""Name-to-address bindings of one scope."""

from __future__ import annotations


class ScopeError(Exception):
    """Base class of scope errors."""


class VariableNotFoundError(ScopeError):
    """A name has no binding in the scope."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"variable not found: {name}")


class Scope:
    """A mapping from variable names to heap addresses."""

    def __init__(self) -> None:
        self._addresses: dict[str, int] = {}

    def get_var(self, name: str) -> int:
        """Return the address bound to ``name``."""
        try:
            return self._addresses[name]
        except KeyError:
            raise VariableNotFoundError(name) from None

    def set_var(self, name: str, address: int) -> None:
        """Bind ``name`` to ``address``, replacing any earlier binding."""
        self._addresses[name] = address

    def __repr__(self) -> str:
        return f"Scope({self._addresses!r})"