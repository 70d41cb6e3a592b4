"""Exceptions for class-generics."""

from typing import Any, Optional, Sequence


class GenericsError(Exception):
    """
    Base exception for generic parameter errors.

    Attributes:
        owner: Class whose registry was involved (None when unknown)
        name: Parameter name involved (None when not tied to one name)
        location: CallSite of the offending call (None when unknown)
    """

    def __init__(
        self,
        message: str,
        owner: Optional[type] = None,
        name: Optional[str] = None,
        location: Optional[Any] = None
    ):
        super().__init__(message)
        self.owner = owner
        self.name = name
        self.location = location


class DuplicateParameterError(GenericsError):
    """Exception raised when a parameter name is declared twice."""
    pass


class UninitializedParameterError(GenericsError):
    """Exception raised when a declared parameter is read before any value is bound."""
    pass


class UnevenArgumentsError(GenericsError):
    """Exception raised when a name/value pair list has an odd length."""
    pass


class UnknownParameterError(GenericsError):
    """Exception raised when binding or looking up an undeclared parameter."""
    pass


class CyclicInheritanceError(GenericsError):
    """Exception raised when forwarding bindings loop back to a class already visited."""

    def __init__(
        self,
        message: str,
        owner: Optional[type] = None,
        name: Optional[str] = None,
        location: Optional[Any] = None,
        chain: Sequence[type] = ()
    ):
        super().__init__(message, owner=owner, name=name, location=location)
        self.chain = tuple(chain)


def describe_owner(owner: Any) -> str:
    """Return 'module.QualName' for a class, or repr() for anything else."""
    if isinstance(owner, type):
        return f"{owner.__module__}.{owner.__qualname__}"
    return repr(owner)
