"""Runtime values of Tofu, and the Environments that bind names to them.

Booleans and null are interned: TRUE, FALSE and NULL are the only instances the evaluator ever hands out, so they can
be compared by identity. ReturnValue never escapes the evaluator; it only carries a returned value up to the call
that unwraps it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from tofu.core.ast import BlockStatement, Identifier


class Object(ABC):
    """Superclass of every runtime value."""
    type_name = "OBJECT"

    @abstractmethod
    def inspect(self):
        """String form of this value, as printed by the shell."""

    def __str__(self):
        return self.inspect()


@dataclass(frozen=True)
class Integer(Object):
    value: int
    type_name = "INTEGER"

    def inspect(self):
        return str(self.value)


@dataclass(frozen=True, eq=False)
class Boolean(Object):
    value: bool
    type_name = "BOOLEAN"

    def inspect(self):
        return "true" if self.value else "false"


class Null(Object):
    type_name = "NULL"

    def inspect(self):
        return "null"

    def __repr__(self):
        return "Null()"


TRUE = Boolean(True)
FALSE = Boolean(False)
NULL = Null()


def native_bool(value):
    """Returns the interned Boolean for a Python bool."""
    return TRUE if value else FALSE


@dataclass(eq=False)
class Function(Object):
    """A closure: parameters and body of a function literal, plus the Environment it was evaluated in."""
    parameters: List[Identifier]
    body: BlockStatement
    environment: "Environment" = field(repr=False)
    type_name = "FUNCTION"

    def inspect(self):
        return f"fn({', '.join(str(parameter) for parameter in self.parameters)}) {{\n{self.body}\n}}"


@dataclass(frozen=True)
class ReturnValue(Object):
    value: Object
    type_name = "RETURN_VALUE"

    def inspect(self):
        return self.value.inspect()


@dataclass(frozen=True)
class Error(Object):
    message: str
    type_name = "ERROR"

    def inspect(self):
        return f"ERROR: {self.message}"


class Environment:
    """Binds names to Objects. Lookups fall through to the outer Environment; bindings never do, so an inner scope
    can shadow an outer name but never overwrite it.
    """

    def __init__(self, outer=None):
        self.store: Dict[str, Object] = {}
        self.outer: Optional[Environment] = outer

    def get(self, name):
        """Returns the Object bound to name here or in an outer Environment, or None if it is bound nowhere."""
        env = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name, value):
        self.store[name] = value
        return value

    def __contains__(self, name):
        return self.get(name) is not None

    def __repr__(self):
        return f"Environment({', '.join(self.store)}{', outer' if self.outer is not None else ''})"


def new_environment():
    """Returns a fresh top-level Environment."""
    return Environment()


def new_enclosed_environment(outer):
    """Returns a fresh Environment chained to outer."""
    return Environment(outer)
