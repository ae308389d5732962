from __future__ import annotations

import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, get_origin, get_type_hints


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParameterInfo:
    name: str
    kind: Any
    declared_type: Any = None
    has_type: bool = False
    default: Any = inspect.Parameter.empty

    @property
    def is_optional(self) -> bool:
        return self.is_variadic or self.default is not inspect.Parameter.empty

    @property
    def is_variadic(self) -> bool:
        return self.kind in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)


@dataclass(frozen=True)
class TypeInfo:
    cls: Any
    is_instantiable: bool
    has_constructor: bool
    parameters: tuple[ParameterInfo, ...] = ()

    @property
    def name(self) -> str:
        return getattr(self.cls, "__qualname__", repr(self.cls))

    @property
    def accepts_var_keyword(self) -> bool:
        return any(p.kind is inspect.Parameter.VAR_KEYWORD for p in self.parameters)


class Reflector:
    """Reads constructor signatures and creates instances.

    This is the only place that knows how Python exposes a class' constructor,
    everything else works with `TypeInfo` and `ParameterInfo`.
    """

    def reflect(self, cls: Any) -> TypeInfo:
        if not is_class(cls):
            return TypeInfo(cls=cls, is_instantiable=False, has_constructor=False)

        return TypeInfo(
            cls=cls,
            is_instantiable=is_instantiable(cls),
            has_constructor=_has_constructor(cls),
            parameters=self.get_constructor_parameters(cls),
        )

    def get_constructor_parameters(self, cls: type) -> tuple[ParameterInfo, ...]:
        if not _has_constructor(cls):
            return ()

        try:
            sig = inspect.signature(getattr(cls, _constructor_name(cls)))
        except (TypeError, ValueError):
            # Some builtins and extension types expose no signature
            return ()

        hints = _get_init_type_hints(cls)
        params = list(sig.parameters.values())
        if params and params[0].kind in (params[0].POSITIONAL_ONLY, params[0].POSITIONAL_OR_KEYWORD):
            # self, or cls for __new__
            params = params[1:]

        return tuple(
            ParameterInfo(
                name=p.name,
                kind=p.kind,
                declared_type=hints.get(p.name),
                has_type=p.name in hints,
                default=p.default,
            )
            for p in params
        )

    def has_required_parameters(self, info: TypeInfo) -> bool:
        return any(not p.is_optional for p in info.parameters)

    def new_instance(self, info: TypeInfo, args: list[Any] | None = None, kwargs: dict[str, Any] | None = None) -> Any:
        return info.cls(*(args or ()), **(kwargs or {}))

    def new_instance_without_constructor(self, info: TypeInfo) -> Any:
        return info.cls.__new__(info.cls)


def is_class(tp: Any) -> bool:
    # Parametrized generics such as list[int] look like classes on some versions
    return inspect.isclass(tp) and get_origin(tp) is None


def is_instantiable(tp: Any) -> bool:
    return is_class(tp) and not inspect.isabstract(tp) and not is_protocol(tp)


def is_autowirable(tp: Any) -> bool:
    """A class the builder may construct on its own: concrete and not a builtin."""
    return is_instantiable(tp) and getattr(tp, "__module__", "") != "builtins"


if hasattr(typing, "is_protocol"):
    # https://docs.python.org/3/library/typing.html#typing.is_protocol
    def is_protocol(tp: Any) -> bool:
        return inspect.isclass(tp) and typing.is_protocol(tp)

else:

    def is_protocol(tp: Any) -> bool:
        # Concrete subclasses of a protocol get _is_protocol reset to False
        return inspect.isclass(tp) and bool(getattr(tp, "_is_protocol", False))


def _has_constructor(cls: type) -> bool:
    return cls.__init__ is not object.__init__ or cls.__new__ is not object.__new__


def _constructor_name(cls: type) -> str:
    # Python calls __init__ with the arguments given to the class, so it wins over __new__
    return "__init__" if cls.__init__ is not object.__init__ else "__new__"


def _get_init_type_hints(cls: type) -> dict[str, Any]:
    try:
        func = inspect.getattr_static(cls, _constructor_name(cls))
        if isinstance(func, (staticmethod, classmethod)):
            func = func.__func__
        hints = get_type_hints(func)
    except (AttributeError, TypeError):
        hints = {}
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s (%s) type hints", exc.name, cls.__name__, cls.__qualname__)
        hints = {}

    hints.pop("return", None)
    return hints
