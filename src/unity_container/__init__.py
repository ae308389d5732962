"""Dependency injection container.

This package maps string ids to entries (plain values, factories taking the
container, or classes) and resolves them on demand, building classes by
inspecting their constructor type hints and resolving each dependency in turn.

Exports:
- `Container`: Registry of entries with cached (`get`) and fresh (`make`) resolution,
  plus type binds used to satisfy constructor parameters.
- `ContainerBuilder`: Builds a `Container` from options (autowiring, annotations).
- `DependencyResolver`: One registered entry; configure it with `give`, `bind` and `protect`.
- `DependencyBuilder`: Builds one object by resolving its constructor dependencies.
- `Inject`: Marker for property injection through `typing.Annotated`.
- `Reflector`: Reads constructor signatures; replace it to customize introspection.
"""

from ._builder import DependencyBuilder
from ._container import Container, ContainerBuilder
from ._exceptions import (
    CircularDependencyError,
    ConstructionError,
    ContainerError,
    DuplicateIdError,
    MissingConstructorArgumentError,
    NonInstantiableError,
    NotFoundError,
    ResolutionError,
)
from ._injection import Inject
from ._reflector import ParameterInfo, Reflector, TypeInfo
from ._resolvers import BindResolver, ClassEntry, DependencyResolver, FactoryEntry, ValueEntry


__all__ = [
    "BindResolver",
    "CircularDependencyError",
    "ClassEntry",
    "ConstructionError",
    "Container",
    "ContainerBuilder",
    "ContainerError",
    "DependencyBuilder",
    "DependencyResolver",
    "DuplicateIdError",
    "FactoryEntry",
    "Inject",
    "MissingConstructorArgumentError",
    "NonInstantiableError",
    "NotFoundError",
    "ParameterInfo",
    "Reflector",
    "ResolutionError",
    "TypeInfo",
    "ValueEntry",
]
