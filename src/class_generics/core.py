"""
Per-class generic parameter registries.

A class declares a fixed set of named parameters, optionally with defaults,
and other code binds values to those names before or after the class is used.
Inside the class each parameter reads like a constant::

    class Session:
        def new_id(self):
            return random_string(self.SESSION_ID_LENGTH())

    declare(Session, 'SESSION_TIMEOUT', 'SESSION_ID_LENGTH')
    configure(Session, SESSION_TIMEOUT=30, SESSION_ID_LENGTH=20)

Architecture:
------------
- One ClassRegistry per class, held in a process-wide table keyed by the
  class object. Registries are created by declare / declare_with_defaults /
  inherit and never removed.
- Each registry maps name -> Binding (see bindings.py) and name -> Accessor.
- The Accessor is installed on the class under the parameter name and is the
  same object for the life of the registry; only the Binding behind it changes.
- inherit() installs Forwarding bindings, so a derived class tracks the base
  class's current value until it is given its own.

Thread safety:
-------------
Every registry has its own RLock. Writes hold it for the whole call, so a
configure() either applies all of its pairs or none. Reads hold it only long
enough to fetch the current Binding; providers run outside the lock.
"""

import importlib
import logging
import threading
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from ._callsite import CallSite, caller_location
from .bindings import Binding, Forwarding, Unset, make_binding
from .exceptions import (
    CyclicInheritanceError,
    DuplicateParameterError,
    GenericsError,
    UnevenArgumentsError,
    UnknownParameterError,
    describe_owner,
)

logger = logging.getLogger(__name__)

# Type aliases for clarity
OwnerRef = Union[type, str]
Pairs = List[Tuple[str, Any]]

# Modes accepted by generics()
PARAMS = 'params'
DEFAULT_PARAMS = 'default_params'
INHERIT = 'inherit'
DECLARATION_MODES = (PARAMS, DEFAULT_PARAMS, INHERIT)

_REGISTRIES: Dict[type, 'ClassRegistry'] = {}
_REGISTRIES_LOCK = threading.Lock()


class ParameterAccessor:
    """
    Zero-argument callable that reads one parameter of one class.

    Installed as a class attribute, so both ``Owner.NAME()`` and
    ``self.NAME()`` work. Every call evaluates the current Binding.
    """

    __slots__ = ('_registry', 'name')

    def __init__(self, registry: 'ClassRegistry', name: str):
        self._registry = registry
        self.name = name

    @property
    def owner(self) -> type:
        return self._registry.owner

    def __call__(self) -> Any:
        return self._registry.evaluate(self.name)

    def __repr__(self) -> str:
        return f"<ParameterAccessor {describe_owner(self.owner)}.{self.name}>"


class ClassRegistry:
    """
    Name -> Binding mapping owned by a single class.

    Names keep their declaration order. Use the module-level functions
    (declare, configure, ...) to mutate registries; they validate their
    arguments before touching anything.
    """

    def __init__(self, owner: type):
        self.owner = owner
        self._bindings: Dict[str, Binding] = {}
        self._accessors: Dict[str, ParameterAccessor] = {}
        self._lock = threading.RLock()

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._bindings

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __len__(self) -> int:
        with self._lock:
            return len(self._bindings)

    def __repr__(self) -> str:
        return f"<ClassRegistry {describe_owner(self.owner)} {list(self.names())}>"

    def names(self) -> Tuple[str, ...]:
        """Declared parameter names, in declaration order."""
        with self._lock:
            return tuple(self._bindings)

    def binding(self, name: str) -> Binding:
        """Return the current Binding for `name`."""
        with self._lock:
            try:
                return self._bindings[name]
            except KeyError:
                raise _unknown(self.owner, name, caller_location()) from None

    def accessor(self, name: str) -> ParameterAccessor:
        """Return the stable Accessor for `name`."""
        with self._lock:
            try:
                return self._accessors[name]
            except KeyError:
                raise _unknown(self.owner, name, caller_location()) from None

    def bind(self, name: str, binding: Binding) -> None:
        """Set the Binding for `name`, installing its Accessor if missing."""
        with self._lock:
            self._bindings[name] = binding
            if name not in self._accessors:
                accessor = ParameterAccessor(self, name)
                self._accessors[name] = accessor
                setattr(self.owner, name, accessor)

    def evaluate(self, name: str) -> Any:
        """
        Produce the current value of `name`.

        Forwarding bindings are followed through base class registries until
        a non-forwarding binding is found.

        Raises:
            CyclicInheritanceError: If the forwarding chain revisits a parameter
            UninitializedParameterError: If the chain ends at an Unset binding
            UnknownParameterError: If a forwarding target has no such parameter
        """
        registry = self
        lookup = name
        chain = [(self.owner, name)]
        while True:
            binding = registry.binding(lookup)
            if not isinstance(binding, Forwarding):
                return binding.get()

            target = (binding.base, binding.name)
            if target in chain:
                owners = [owner for owner, _ in chain] + [binding.base]
                path = " -> ".join(describe_owner(owner) for owner in owners)
                raise CyclicInheritanceError(
                    f"Cyclic inheritance of parameter '{name}': {path}",
                    owner=self.owner,
                    name=name,
                    location=caller_location(),
                    chain=owners,
                )
            chain.append(target)

            base_registry = _REGISTRIES.get(binding.base)
            if base_registry is None:
                raise _unknown(binding.base, binding.name, caller_location())
            registry = base_registry
            lookup = binding.name


def _unknown(owner: type, name: str, location: Optional[CallSite]) -> UnknownParameterError:
    where = f" at {location}" if location else ""
    return UnknownParameterError(
        f"'{name}' is not a valid generic parameter for {describe_owner(owner)}{where}",
        owner=owner,
        name=name,
        location=location,
    )


def resolve_owner(target: OwnerRef) -> type:
    """
    Resolve a class or a dotted import path to a class.

    Accepts ``"package.module.ClassName"`` and ``"package.module:Outer.Inner"``.

    Raises:
        TypeError: If target is neither a class nor a string
        ValueError: If the path cannot be resolved to a class
    """
    if isinstance(target, type):
        return target
    if not isinstance(target, str):
        raise TypeError(
            f"Generic parameter owner must be a class or import path, got {target!r}"
        )

    if ':' in target:
        module_name, _, attr_path = target.partition(':')
        candidates = [(module_name, attr_path.split('.'))]
    else:
        parts = target.split('.')
        # Longest module prefix first: "a.b.C" tries module "a.b" then "a"
        candidates = [('.'.join(parts[:i]), parts[i:]) for i in range(len(parts) - 1, 0, -1)]

    for module_name, attrs in candidates:
        try:
            obj: Any = importlib.import_module(module_name)
        except ModuleNotFoundError as e:
            # Only a missing candidate module means "try a shorter prefix"
            if e.name is None or not (module_name == e.name or module_name.startswith(e.name + '.')):
                raise
            continue
        try:
            for attr in attrs:
                obj = getattr(obj, attr)
        except AttributeError:
            continue
        if isinstance(obj, type):
            return obj

    raise ValueError(f"Cannot resolve '{target}' to a class")


def _duplicate(owner: type, name: str, location: Optional[CallSite]) -> DuplicateParameterError:
    where = f" at {location}" if location else ""
    return DuplicateParameterError(
        f"Attempted duplicate parameter creation of '{name}' in {describe_owner(owner)}{where}",
        owner=owner,
        name=name,
        location=location,
    )


def _check_name(name: Any) -> None:
    if not isinstance(name, str):
        raise TypeError(f"Parameter names must be strings, got {name!r}")
    if not name.isidentifier():
        raise ValueError(f"Parameter name '{name}' is not a valid identifier")


def _split_pairs(owner: type, pairs: tuple, values: Dict[str, Any],
                 location: Optional[CallSite]) -> Pairs:
    """Turn a flat name/value list plus keyword values into (name, value) pairs."""
    if len(pairs) % 2:
        where = f" at {location}" if location else ""
        raise UnevenArgumentsError(
            f"Uneven parameter assignments for {describe_owner(owner)}: "
            f"{len(pairs)} positional values{where}",
            owner=owner,
            location=location,
        )
    items = list(zip(pairs[0::2], pairs[1::2]))
    items.extend(values.items())
    for name, _ in items:
        _check_name(name)
    return items


def get_registry(owner: OwnerRef) -> Optional[ClassRegistry]:
    """Return the registry of `owner`, or None if it never declared parameters."""
    return _REGISTRIES.get(resolve_owner(owner))


def _registry_for(owner: type) -> ClassRegistry:
    with _REGISTRIES_LOCK:
        registry = _REGISTRIES.get(owner)
        if registry is None:
            registry = _REGISTRIES[owner] = ClassRegistry(owner)
            logger.debug(f"Created generic parameter registry for {describe_owner(owner)}")
        return registry


def declare(owner: OwnerRef, /, *names: str) -> None:
    """
    Declare parameters without values.

    Reading one of them before it is configured raises
    UninitializedParameterError.

    Args:
        owner: Class (or import path) that owns the parameters
        *names: Parameter names

    Raises:
        DuplicateParameterError: If a name is already declared on owner or
            repeated in this call. Nothing is declared in that case.
    """
    location = caller_location()
    owner = resolve_owner(owner)
    seen = set()
    for name in names:
        _check_name(name)
        if name in seen:
            raise _duplicate(owner, name, location)
        seen.add(name)

    # Repeats within the call are rejected before the registry is created
    registry = _registry_for(owner)
    with registry._lock:
        for name in names:
            if name in registry:
                raise _duplicate(owner, name, location)

        for name in names:
            registry.bind(name, Unset(owner, name, location))

    logger.debug(f"Declared {list(names)} on {describe_owner(owner)}")


def declare_with_defaults(owner: OwnerRef, /, *pairs: Any, **defaults: Any) -> None:
    """
    Declare parameters together with default values.

    Existing entries are overwritten, so defaults can be layered by calling
    this more than once, or on top of inherit().

    Args:
        owner: Class (or import path) that owns the parameters
        *pairs: Flat ``name, value, name, value`` list
        **defaults: Further name=value defaults, applied after *pairs

    Raises:
        UnevenArgumentsError: If *pairs has an odd length
    """
    location = caller_location()
    owner = resolve_owner(owner)
    items = _split_pairs(owner, pairs, defaults, location)

    registry = _registry_for(owner)
    with registry._lock:
        for name, value in items:
            registry.bind(name, make_binding(value))

    logger.debug(f"Declared defaults {[name for name, _ in items]} on {describe_owner(owner)}")


def inherit(owner: OwnerRef, base: OwnerRef, /) -> None:
    """
    Make `owner` track the parameters of `base`.

    Every name currently declared on base is added to owner with a
    Forwarding binding, so owner reads base's value at call time until
    owner gets its own value for that name.

    Raises:
        CyclicInheritanceError: If owner and base are the same class
    """
    location = caller_location()
    owner = resolve_owner(owner)
    base = resolve_owner(base)
    if owner is base:
        raise CyclicInheritanceError(
            f"{describe_owner(owner)} cannot inherit generic parameters from itself",
            owner=owner,
            location=location,
            chain=(owner, base),
        )

    base_registry = _REGISTRIES.get(base)
    if base_registry is None:
        logger.warning(
            f"{describe_owner(owner)} inherits from {describe_owner(base)}, "
            f"which has no generic parameters"
        )
        names: Tuple[str, ...] = ()
    else:
        names = base_registry.names()

    registry = _registry_for(owner)
    with registry._lock:
        for name in names:
            registry.bind(name, Forwarding(base, name))

    logger.debug(f"{describe_owner(owner)} inherited {list(names)} from {describe_owner(base)}")


def configure(owner: OwnerRef, /, *pairs: Any, **values: Any) -> None:
    """
    Bind values to parameters that owner has already declared.

    All names are checked before anything is bound. Previously bound values
    (defaults included) are overwritten and never restored.

    Args:
        owner: Class or import path (e.g. "myapp.session.Session")
        *pairs: Flat ``name, value, name, value`` list
        **values: Further name=value bindings, applied after *pairs

    Raises:
        UnevenArgumentsError: If *pairs has an odd length
        UnknownParameterError: If any name is not declared on owner
    """
    location = caller_location()
    owner = resolve_owner(owner)
    items = _split_pairs(owner, pairs, values, location)
    if not items:
        return

    registry = _REGISTRIES.get(owner)
    if registry is None:
        raise _unknown(owner, items[0][0], location)

    with registry._lock:
        for name, _ in items:
            if name not in registry:
                raise _unknown(owner, name, location)
        bindings = [(name, make_binding(value)) for name, value in items]
        for name, binding in bindings:
            registry.bind(name, binding)

    logger.debug(f"Configured {[name for name, _ in items]} on {describe_owner(owner)}")


# Run-time reconfiguration reads better under its own name
change_params = configure


def has_registry(owner: OwnerRef) -> bool:
    """True if owner itself (not a base class) ever declared or inherited parameters."""
    return get_registry(owner) is not None


def param_names(owner: OwnerRef) -> Tuple[str, ...]:
    """Declared parameter names of owner, in declaration order."""
    registry = get_registry(owner)
    return registry.names() if registry is not None else ()


def accessor(owner: OwnerRef, name: str) -> ParameterAccessor:
    """
    Return the Accessor for one parameter.

    Raises:
        UnknownParameterError: If name is not declared on owner
    """
    owner = resolve_owner(owner)
    registry = _REGISTRIES.get(owner)
    if registry is None:
        raise _unknown(owner, name, caller_location())
    return registry.accessor(name)


def dump_params(owner: OwnerRef) -> Dict[str, Any]:
    """
    Evaluate every parameter of owner now.

    Function-backed parameters are called, side effects included; nothing
    is cached, so two dumps can differ.

    Returns:
        Mapping of parameter name to current value ({} when owner has no registry)
    """
    registry = get_registry(owner)
    if registry is None:
        return {}
    return {name: registry.accessor(name)() for name in registry.names()}


def generics(mode: OwnerRef, /, *args: Any, owner: Optional[OwnerRef] = None) -> None:
    """
    Single entry point dispatching on `mode`.

    - ``generics('params', *names, owner=Cls)``
    - ``generics('default_params', name, value, ..., owner=Cls)``
    - ``generics('inherit', BaseCls, owner=Cls)``
    - ``generics(Cls, name, value, ...)`` or ``generics('pkg.mod.Cls', ...)``
      configures Cls

    Raises:
        TypeError: If a declaration mode has no owner, inherit gets
            anything but exactly one base, or owner is given with a
            configure target
        GenericsError: If mode is a string that is neither a mode nor a
            dotted import path
    """
    if isinstance(mode, str) and mode in DECLARATION_MODES:
        if owner is None:
            raise TypeError(f"generics('{mode}', ...) requires owner=")
        if mode == PARAMS:
            declare(owner, *args)
        elif mode == DEFAULT_PARAMS:
            declare_with_defaults(owner, *args)
        else:
            if len(args) != 1:
                raise TypeError(
                    f"generics('{INHERIT}', ...) takes exactly one base class, got {len(args)}"
                )
            inherit(owner, args[0])
        return

    if isinstance(mode, str) and '.' not in mode:
        raise GenericsError(
            f"Unknown generics mode '{mode}'; expected one of {list(DECLARATION_MODES)} "
            f"or a class"
        )

    if owner is not None:
        raise TypeError(f"generics({mode!r}, ...) configures its target; owner= is not accepted")

    configure(mode, *args)
