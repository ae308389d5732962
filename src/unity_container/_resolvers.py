from __future__ import annotations

import inspect
import logging
from collections.abc import Mapping
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, overload

from ._builder import DependencyBuilder
from ._exceptions import CircularDependencyError, ConstructionError, ResolutionError


if TYPE_CHECKING:
    from collections.abc import Callable

    from ._container import Container


logger = logging.getLogger(__name__)

_EMPTY = object()

# Resolvers currently inside make(), outermost first
_resolving: ContextVar[tuple[DependencyResolver, ...]] = ContextVar("unity_container_resolving", default=())


@dataclass(frozen=True)
class ValueEntry:
    value: Any


@dataclass(frozen=True)
class FactoryEntry:
    factory: Callable[[Container], Any]


@dataclass(frozen=True)
class ClassEntry:
    cls: type


Entry = ValueEntry | FactoryEntry | ClassEntry


def to_entry(entry: Any) -> Entry:
    """Classify a registered object once, at registration time.

    Classes come first since they are callable too. Strings are always values.
    """
    if isinstance(entry, (ValueEntry, FactoryEntry, ClassEntry)):
        return entry
    if inspect.isclass(entry):
        return ClassEntry(entry)
    if callable(entry):
        return FactoryEntry(entry)
    return ValueEntry(entry)


class BindResolver:
    """Produces the value bound to a type by invoking its callback on every call."""

    def __init__(self, callback: Callable[[Container], Any], container: Container) -> None:
        if not callable(callback):
            msg = f"Bind callback must be callable, got {callback!r}"
            raise TypeError(msg)
        self._callback = callback
        self._container = container

    def resolve(self) -> Any:
        return self._callback(self._container)


class DependencyResolver:
    """Represents and resolves one registered entry.

    `resolve()` builds the entry once and caches it, `make()` builds it
    again on every call. Constructor arguments given with `give()` and local
    binds given with `bind()` only apply to this entry.
    """

    def __init__(self, id: Any, entry: Any, container: Container) -> None:  # noqa: A002
        self._id = id
        self._entry = to_entry(entry)
        self._container = container
        self._singleton: Any = _EMPTY
        self._arguments: dict[str, Any] = {}
        self._binds: dict[Any, BindResolver] = {}
        self._protected = False

    @property
    def id(self) -> Any:
        return self._id

    @property
    def entry(self) -> Any:
        """The registered object, as given to the container."""
        entry = self._entry
        if isinstance(entry, ClassEntry):
            return entry.cls
        if isinstance(entry, FactoryEntry):
            return entry.factory
        return entry.value

    @property
    def arguments(self) -> dict[str, Any]:
        return dict(self._arguments)

    @property
    def binds(self) -> dict[Any, BindResolver]:
        return dict(self._binds)

    @property
    def is_protected(self) -> bool:
        return self._protected

    def has_singleton(self) -> bool:
        return self._singleton is not _EMPTY

    def resolve(self) -> Any:
        """Resolve the entry on the first call, return the same object afterwards.

        A failed attempt leaves nothing cached, so the next call tries again.
        """
        if self._singleton is _EMPTY:
            self._singleton = self.make()
        return self._singleton

    def make(self, arguments: Mapping[str, Any] | None = None) -> Any:
        """Resolve the entry into a new object.

        - protected: the registered object itself
        - factory: called with the container
        - class: built with constructor injection
        - anything else: returned as is.

        `arguments` are merged over the ones given with `give()`.
        """
        if self._protected:
            return self.entry

        entry = self._entry
        if isinstance(entry, ValueEntry):
            return entry.value

        stack = _resolving.get()
        if self in stack:
            chain = stack[stack.index(self) :]
            raise CircularDependencyError((*(r.id for r in chain), self._id))

        merged = {**self._arguments, **(arguments or {})}
        token = _resolving.set((*stack, self))

        try:
            if isinstance(entry, FactoryEntry):
                return entry.factory(self._container)
            return DependencyBuilder(self._container, merged, self._binds).build(entry.cls)
        except ResolutionError:
            raise
        except Exception as exc:
            # Includes container errors such as a NotFoundError from a nested get()
            logger.debug("Failed to build %r", self._id, exc_info=True)
            raise ConstructionError(self._id, exc) from exc
        finally:
            _resolving.reset(token)

    def give(self, arguments: Mapping[str, Any]) -> DependencyResolver:
        """Set constructor arguments used every time this entry is built."""
        self._arguments = dict(arguments)
        return self

    @overload
    def bind(self, type_: Mapping[Any, Callable[[Container], Any]]) -> DependencyResolver: ...

    @overload
    def bind(self, type_: Any, callback: Callable[[Container], Any]) -> DependencyResolver: ...

    def bind(self, type_: Any, callback: Callable[[Container], Any] | None = None) -> DependencyResolver:
        """Bind callbacks to types for this entry's constructor only.

        Example:
          resolver.bind(Cache, lambda c: c.get("redis"))
          resolver.bind({Cache: make_cache, Clock: lambda _: FixedClock()})

        """
        if callback is None:
            if not isinstance(type_, Mapping):
                msg = "Pass either a type and a callback, or a mapping of types to callbacks."
                raise TypeError(msg)
            binds = type_
        else:
            binds = {type_: callback}

        for bound_type, bound_callback in binds.items():
            self._binds[bound_type] = BindResolver(bound_callback, self._container)
        return self

    def protect(self, enabled: bool = True) -> DependencyResolver:  # noqa: FBT001, FBT002
        """Make `make()` return the registered object without resolving it."""
        self._protected = enabled
        return self
