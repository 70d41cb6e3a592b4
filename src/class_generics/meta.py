"""
Class-body declaration of generic parameters.

Instead of calling declare()/declare_with_defaults()/inherit() after a class
statement, a class can state its parameters in its own body and let the
metaclass apply them at class creation time::

    class Session(GenericParams):
        __generic_params__ = ('SESSION_TIMEOUT',)
        __default_params__ = {'SESSION_ID_LENGTH': 20}

    class SecureSession(Session):
        __inherit_params__ = True           # nearest base with parameters
        __default_params__ = {'SESSION_ID_LENGTH': 64}

Only attributes written in the class body are read; a subclass that declares
nothing gets no registry of its own (its instances still see the base
class's accessors through normal attribute lookup).

Order of application: inherit, then params, then default_params, so
defaults in the body override inherited forwarding for the same names.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Optional, Tuple

from .core import declare, declare_with_defaults, has_registry, inherit, resolve_owner

logger = logging.getLogger(__name__)

INHERIT_ATTR = '__inherit_params__'
PARAMS_ATTR = '__generic_params__'
DEFAULTS_ATTR = '__default_params__'


@dataclass(frozen=True)
class ParamsConfig:
    """
    Generic parameter configuration read from a class body.

    Attributes:
        params: Names to declare without values
        default_params: Flat ``name, value, ...`` tuple of defaults
        inherit_from: Class whose parameters are inherited, if any
    """
    params: Tuple[str, ...] = ()
    default_params: Tuple[Any, ...] = ()
    inherit_from: Optional[type] = None

    @classmethod
    def from_namespace(cls, new_class: type, attrs: dict) -> Optional['ParamsConfig']:
        """
        Build the config from class-body attributes.

        Returns:
            ParamsConfig, or None if the body declares no generic parameters
        """
        inherit_attr = attrs.get(INHERIT_ATTR)
        if inherit_attr is False:
            inherit_attr = None
        params_attr = attrs.get(PARAMS_ATTR)
        defaults_attr = attrs.get(DEFAULTS_ATTR)
        if inherit_attr is None and params_attr is None and defaults_attr is None:
            return None

        inherit_from = None
        if inherit_attr is True:
            # Nearest base in the MRO that has parameters
            for base in new_class.__mro__[1:]:
                if has_registry(base):
                    inherit_from = base
                    break
            else:
                raise TypeError(
                    f"{new_class.__name__} sets {INHERIT_ATTR} = True "
                    f"but none of its bases has generic parameters"
                )
        elif inherit_attr is not None:
            inherit_from = resolve_owner(inherit_attr)

        if isinstance(params_attr, str):
            params: Tuple[str, ...] = (params_attr,)
        else:
            params = tuple(params_attr or ())

        if isinstance(defaults_attr, Mapping):
            default_params: Tuple[Any, ...] = tuple(
                item for pair in defaults_attr.items() for item in pair
            )
        else:
            default_params = tuple(defaults_attr or ())

        return cls(params=params, default_params=default_params, inherit_from=inherit_from)


class GenericParamsMeta(type):
    """
    Metaclass that applies class-body generic parameter declarations.

    Recognised class attributes:
    - __inherit_params__: base class, import path, or True
    - __generic_params__: names (a single string is one name)
    - __default_params__: mapping or flat name/value sequence
    """

    def __new__(mcs, name: str, bases: tuple, attrs: dict, **kwargs: Any):
        new_class = super().__new__(mcs, name, bases, attrs, **kwargs)

        config = ParamsConfig.from_namespace(new_class, attrs)
        if config is None:
            return new_class

        mcs._apply_config(new_class, config)
        logger.debug(
            f"Auto-configured generic parameters for {name}: "
            f"inherit_from={getattr(config.inherit_from, '__name__', None)}, "
            f"params={list(config.params)}, "
            f"defaults={list(config.default_params[0::2])}"
        )
        return new_class

    @staticmethod
    def _apply_config(new_class: type, config: ParamsConfig) -> None:
        if config.inherit_from is not None:
            inherit(new_class, config.inherit_from)
        # An empty declaration still gives the class an (empty) registry
        if config.params or not (config.inherit_from or config.default_params):
            declare(new_class, *config.params)
        if config.default_params:
            declare_with_defaults(new_class, *config.default_params)


class GenericParams(metaclass=GenericParamsMeta):
    """
    Convenience base class for classes with generic parameters.

    Examples:
        >>> class Session(GenericParams):
        ...     __default_params__ = {'SESSION_TIMEOUT': 30}
        ...
        ...     def expires_in(self):
        ...         return self.SESSION_TIMEOUT()

        >>> Session().expires_in()
        30

        >>> configure(Session, SESSION_TIMEOUT=120)
        >>> Session().expires_in()
        120
    """
