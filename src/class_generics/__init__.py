"""
class-generics: class-level configuration parameters.

A class declares named "generic parameters", optionally with defaults, and
other code binds constants or zero-argument providers to them before or
after the class is used. Inside the class each parameter reads like a
constant, and derived classes can track a base class's values live.
"""

__version__ = "0.1.0"

from ._callsite import CallSite
from .bindings import Binding, Constant, Forwarding, Function, Unset, make_binding
from .core import (
    ClassRegistry,
    ParameterAccessor,
    accessor,
    change_params,
    configure,
    declare,
    declare_with_defaults,
    dump_params,
    generics,
    get_registry,
    has_registry,
    inherit,
    param_names,
    resolve_owner,
)
from .meta import GenericParams, GenericParamsMeta, ParamsConfig
from .exceptions import (
    GenericsError,
    DuplicateParameterError,
    UninitializedParameterError,
    UnevenArgumentsError,
    UnknownParameterError,
    CyclicInheritanceError,
)

__all__ = [
    # Operations
    "declare",
    "declare_with_defaults",
    "inherit",
    "configure",
    "change_params",
    "generics",
    # Introspection
    "has_registry",
    "dump_params",
    "param_names",
    "accessor",
    "get_registry",
    "resolve_owner",
    # Types
    "ClassRegistry",
    "ParameterAccessor",
    "CallSite",
    # Bindings
    "Binding",
    "Constant",
    "Function",
    "Forwarding",
    "Unset",
    "make_binding",
    # Class-body declarations
    "GenericParams",
    "GenericParamsMeta",
    "ParamsConfig",
    # Exceptions
    "GenericsError",
    "DuplicateParameterError",
    "UninitializedParameterError",
    "UnevenArgumentsError",
    "UnknownParameterError",
    "CyclicInheritanceError",
]
