from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any

from ._exceptions import CircularDependencyError, MissingConstructorArgumentError, NonInstantiableError
from ._injection import get_injected_attributes
from ._reflector import is_autowirable


if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._container import Container
    from ._reflector import ParameterInfo, TypeInfo
    from ._resolvers import BindResolver


logger = logging.getLogger(__name__)

_UNRESOLVED = object()


class DependencyBuilder:
    """Builds one object by resolving its constructor dependencies.

    A builder is created for a single `build` call and carries that call's
    explicit arguments and local binds. Autowired dependencies are built by
    nested builders that receive no arguments and no local binds, only the
    chain of classes already under construction.

    Parameter resolution precedence:
    1. explicit argument, keyed by parameter name
    2. bind registered for the declared type (local binds, then container binds)
    3. autowiring of the declared type, when enabled
    4. default value, or `MissingConstructorArgumentError`.
    """

    def __init__(
        self,
        container: Container,
        arguments: Mapping[str, Any] | None = None,
        binds: Mapping[Any, BindResolver] | None = None,
        *,
        chain: tuple[type, ...] = (),
    ) -> None:
        self._container = container
        self._reflector = container.reflector
        self._arguments = dict(arguments or {})
        self._binds = binds or {}
        self._chain = chain

    def build(self, cls: Any) -> Any:
        if cls in self._chain:
            raise CircularDependencyError((*self._chain, cls))

        info = self._reflector.reflect(cls)
        if not info.is_instantiable:
            msg = f"Class {info.name!r} cannot be instantiated."
            raise NonInstantiableError(msg)

        logger.debug("Building %s", info.name)

        if not info.has_constructor:
            self._get_unmatched_arguments(info)
            instance = self._reflector.new_instance_without_constructor(info)
        elif not self._reflector.has_required_parameters(info):
            # Only explicit arguments reach a constructor that needs nothing
            instance = self._create_instance(info, self._get_explicit_arguments(info))
        else:
            resolved = self._get_constructor_arguments(info)
            self._ensure_no_missing_argument(info, resolved)
            instance = self._create_instance(info, resolved)

        if self._container.can_use_annotations():
            self._inject_properties(info, instance)

        return instance

    def _get_explicit_arguments(self, info: TypeInfo) -> dict[str, Any]:
        return {
            p.name: self._arguments[p.name]
            for p in info.parameters
            if not p.is_variadic and p.name in self._arguments
        }

    def _get_constructor_arguments(self, info: TypeInfo) -> dict[str, Any]:
        resolved: dict[str, Any] = {}

        for param in info.parameters:
            if param.is_variadic:
                continue

            value = self._resolve_parameter(info, param)
            if value is not _UNRESOLVED:
                resolved[param.name] = value

        return resolved

    def _resolve_parameter(self, info: TypeInfo, param: ParameterInfo) -> Any:
        if param.name in self._arguments:
            return self._arguments[param.name]

        if param.has_type:
            bind = self._find_bind(param.declared_type)
            if bind is not None:
                return bind.resolve()

            if self._container.can_autowire() and is_autowirable(param.declared_type):
                return self._inner_build(info.cls, param.declared_type)

        return _UNRESOLVED

    def _find_bind(self, declared_type: Any) -> BindResolver | None:
        bind = self._binds.get(declared_type)
        if bind is None:
            bind = self._container.get_bind_resolver(declared_type)
        return bind

    def _inner_build(self, owner: type, cls: type) -> Any:
        return DependencyBuilder(self._container, chain=(*self._chain, owner)).build(cls)

    def _ensure_no_missing_argument(self, info: TypeInfo, resolved: dict[str, Any]) -> None:
        for param in info.parameters:
            if not param.is_optional and param.name not in resolved:
                raise MissingConstructorArgumentError(param.name, info.cls)

    def _create_instance(self, info: TypeInfo, resolved: dict[str, Any]) -> Any:
        args, kwargs = self._materialize_call(info, resolved)
        return self._reflector.new_instance(info, args, kwargs)

    def _materialize_call(self, info: TypeInfo, resolved: dict[str, Any]) -> tuple[list[Any], dict[str, Any]]:
        args: list[Any] = []
        kwargs: dict[str, Any] = {}

        for p in info.parameters:
            if p.kind is inspect.Parameter.POSITIONAL_ONLY:
                if p.name not in resolved and p.is_optional:
                    # Later positional-only values still need this slot filled
                    args.append(p.default)
                else:
                    args.append(resolved[p.name])
            elif p.kind in (inspect.Parameter.POSITIONAL_OR_KEYWORD, inspect.Parameter.KEYWORD_ONLY):
                if p.name in resolved:
                    kwargs[p.name] = resolved[p.name]

        kwargs.update(self._get_unmatched_arguments(info))
        return args, kwargs

    def _get_unmatched_arguments(self, info: TypeInfo) -> dict[str, Any]:
        names = {p.name for p in info.parameters if not p.is_variadic}
        extras = {k: v for k, v in self._arguments.items() if k not in names}
        if extras and not info.accepts_var_keyword:
            msg = f"Arguments {sorted(extras)} don't match {info.name} signature"
            raise TypeError(msg)
        return extras

    def _inject_properties(self, info: TypeInfo, instance: Any) -> None:
        for attr in get_injected_attributes(info.cls):
            if attr.name in getattr(instance, "__dict__", {}):
                continue

            if attr.marker.id is not None:
                value = self._container.get(attr.marker.id)
            else:
                bind = self._find_bind(attr.declared_type)
                if bind is not None:
                    value = bind.resolve()
                elif self._container.can_autowire() and is_autowirable(attr.declared_type):
                    value = self._inner_build(info.cls, attr.declared_type)
                else:
                    logger.debug("Nothing to inject into %s.%s", info.name, attr.name)
                    continue

            setattr(instance, attr.name, value)
