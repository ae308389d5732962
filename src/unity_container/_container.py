from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ._builder import DependencyBuilder
from ._exceptions import DuplicateIdError, NotFoundError
from ._reflector import Reflector
from ._resolvers import BindResolver, DependencyResolver


if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping


logger = logging.getLogger(__name__)


class Container:
    """Dependency container.

    - register values, factories and classes under string ids
    - resolve with constructor injection (autowiring)
    - bind callbacks to types for constructor parameters of that type
    - `get` caches (singleton), `make` builds fresh (transient).
    """

    def __init__(
        self,
        *,
        autowiring: bool = True,
        use_annotations: bool = False,
        reflector: Reflector | None = None,
    ) -> None:
        self._resolvers: dict[Any, DependencyResolver] = {}
        self._binds: dict[Any, BindResolver] = {}
        self._autowiring = autowiring
        self._use_annotations = use_annotations
        self._reflector = reflector or Reflector()
        self._lock = threading.RLock()

    @property
    def reflector(self) -> Reflector:
        return self._reflector

    def register(self, id: Any, entry: Any) -> DependencyResolver:  # noqa: A002
        """Register an entry under `id`.

        Example:
          container.register("greeting", "Hello")
          container.register("db", lambda c: connect(c.get("dsn")))
          container.register("mailer", Mailer).give({"retries": 3})

        """
        with self._lock:
            if id in self._resolvers:
                msg = f"The container already has a dependency resolver for id {id!r}."
                raise DuplicateIdError(msg)

            logger.debug("Registering %r", id)
            resolver = self._resolvers[id] = DependencyResolver(id, entry, self)
            return resolver

    def unregister(self, id: Any) -> Container:  # noqa: A002
        with self._lock:
            if id not in self._resolvers:
                raise NotFoundError(_not_found_message(id))

            logger.debug("Unregistering %r", id)
            del self._resolvers[id]
            return self

    def replace(self, id: Any, entry: Any) -> DependencyResolver:  # noqa: A002
        """Register `entry` under `id`, discarding any previous resolver.

        Objects already resolved from the previous resolver are left untouched.
        """
        with self._lock:
            logger.debug("Replacing %r", id)
            resolver = self._resolvers[id] = DependencyResolver(id, entry, self)
            return resolver

    def get(self, id: Any) -> Any:  # noqa: A002
        """Resolve `id` on the first call, return the same object afterwards."""
        with self._lock:
            return self.get_resolver(id).resolve()

    def has(self, id: Any) -> bool:  # noqa: A002
        return id in self._resolvers

    def make(self, id: Any, params: Mapping[str, Any] | None = None) -> Any:  # noqa: A002
        """Resolve `id` into a new object on every call.

        `params` take precedence over arguments given to the resolver with `give()`.
        """
        with self._lock:
            return self.get_resolver(id).make(params)

    def get_resolver(self, id: Any) -> DependencyResolver:  # noqa: A002
        try:
            return self._resolvers[id]
        except KeyError:
            raise NotFoundError(_not_found_message(id)) from None

    def build(self, cls: type, arguments: Mapping[str, Any] | None = None) -> Any:
        """Build `cls` with constructor injection, without registering it."""
        with self._lock:
            return DependencyBuilder(self, arguments).build(cls)

    def bind(self, type_: Any, callback: Callable[[Container], Any]) -> Container:
        """Bind `callback` to `type_`.

        Every time a constructor needs an argument declared as `type_`, the
        callback is invoked with the container and its return value injected.
        Binding the same type twice replaces the previous bind.
        """
        with self._lock:
            logger.debug("Binding %r", type_)
            self._binds[type_] = BindResolver(callback, self)
            return self

    def is_bound(self, type_: Any) -> bool:
        return type_ in self._binds

    def get_bound_value(self, type_: Any) -> Any:
        bind = self.get_bind_resolver(type_)
        if bind is None:
            msg = f"No resolver was bound to {type_!r} on the container."
            raise NotFoundError(msg)
        return bind.resolve()

    def get_bind_resolver(self, type_: Any) -> BindResolver | None:
        return self._binds.get(type_)

    def enable_autowiring(self, enabled: bool) -> Container:  # noqa: FBT001
        self._autowiring = enabled
        return self

    def can_autowire(self) -> bool:
        return self._autowiring

    def enable_use_annotations(self, enabled: bool) -> Container:  # noqa: FBT001
        """Enable or disable property injection through `Inject` annotations."""
        self._use_annotations = enabled
        return self

    def can_use_annotations(self) -> bool:
        return self._use_annotations

    def __contains__(self, id: Any) -> bool:  # noqa: A002
        return self.has(id)

    def __len__(self) -> int:
        return len(self._resolvers)

    def __iter__(self) -> Iterator[Any]:
        return iter(list(self._resolvers))

    def __getitem__(self, id: Any) -> Any:  # noqa: A002
        return self.get(id)

    def __setitem__(self, id: Any, entry: Any) -> None:  # noqa: A002
        self.register(id, entry)

    def __delitem__(self, id: Any) -> None:  # noqa: A002
        self.unregister(id)


class ContainerBuilder:
    """Collects container options and builds a configured `Container`.

    Example:
      container = ContainerBuilder().autowiring(False).use_annotations(True).build()

    """

    def __init__(self) -> None:
        self._autowiring = True
        self._use_annotations = False
        self._reflector: Reflector | None = None

    def autowiring(self, enabled: bool) -> ContainerBuilder:  # noqa: FBT001
        self._autowiring = enabled
        return self

    def use_annotations(self, enabled: bool) -> ContainerBuilder:  # noqa: FBT001
        self._use_annotations = enabled
        return self

    def reflector(self, reflector: Reflector) -> ContainerBuilder:
        self._reflector = reflector
        return self

    def build(self) -> Container:
        return Container(
            autowiring=self._autowiring,
            use_annotations=self._use_annotations,
            reflector=self._reflector,
        )


def _not_found_message(id: Any) -> str:  # noqa: A002
    return f"No dependency resolver was found for id {id!r} on the container."
