"""
Value providers for generic parameters.

A Binding is the current value-producing strategy for one parameter of one
class. Bindings are immutable; changing a parameter means swapping the
Binding in the owning registry while the Accessor stays the same object.

Variants:
- Constant: returns a stored value
- Function: calls a zero-argument provider on every read (never cached)
- Forwarding: tracks the same-named parameter of a base class
- Unset: declared without a value; reading it raises

Forwarding does not evaluate itself. The registry follows the chain of
Forwarding bindings so it can detect cycles (see core.ClassRegistry.evaluate).
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Union

from .exceptions import UninitializedParameterError, describe_owner


@dataclass(frozen=True)
class Constant:
    """A fixed value."""
    value: Any

    def get(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Function:
    """A zero-argument provider, re-evaluated on every read."""
    provider: Callable[[], Any]

    def get(self) -> Any:
        return self.provider()


@dataclass(frozen=True)
class Forwarding:
    """Live link to the parameter `name` of class `base`."""
    base: type
    name: str

    def get(self) -> Any:
        # Resolved by ClassRegistry.evaluate, which owns cycle detection
        raise TypeError("Forwarding bindings are resolved by their registry")


@dataclass(frozen=True)
class Unset:
    """Placeholder for a declared parameter that has no value yet."""
    owner: type
    name: str
    location: Optional[Any] = None

    def get(self) -> Any:
        where = f" (declared at {self.location})" if self.location else ""
        raise UninitializedParameterError(
            f"{describe_owner(self.owner)}.{self.name} is an undefined parameter "
            f"and has no default{where}",
            owner=self.owner,
            name=self.name,
            location=self.location,
        )


Binding = Union[Constant, Function, Forwarding, Unset]
BINDING_TYPES = (Constant, Function, Forwarding, Unset)


def make_binding(value: Any) -> Binding:
    """
    Build a Binding from a user-supplied value.

    Explicit Binding instances pass through unchanged, which is how a caller
    stores a function as a plain value: ``Constant(my_function)``.
    Other callables become Function providers, except classes, which are
    stored as constants since calling them would instantiate them.

    Args:
        value: Constant value, zero-argument callable, or Binding

    Returns:
        The Binding to install
    """
    if isinstance(value, BINDING_TYPES):
        return value
    if callable(value) and not isinstance(value, type):
        return Function(value)
    return Constant(value)
