from __future__ import annotations

from typing import Any


class ContainerError(Exception):
    """Base class for every error raised by the container."""


class DuplicateIdError(ContainerError):
    pass


class NotFoundError(ContainerError, LookupError):
    pass


class ResolutionError(ContainerError, RuntimeError):
    """Raised when a registered entry is found but cannot be turned into an object."""


class NonInstantiableError(ResolutionError):
    pass


class MissingConstructorArgumentError(ResolutionError):
    def __init__(self, parameter: str, cls: type) -> None:
        self.parameter = parameter
        self.cls = cls
        super().__init__(f"Missing argument '{parameter}' for {cls.__qualname__}.__init__()")


class CircularDependencyError(ResolutionError):
    """`chain` holds the classes being built, or the ids being resolved, ending with the repeated one."""

    def __init__(self, chain: tuple[Any, ...]) -> None:
        self.chain = chain
        names = " -> ".join(getattr(link, "__qualname__", repr(link)) for link in chain)
        super().__init__(f"Circular dependency detected: {names}")


class ConstructionError(ResolutionError):
    """Wraps a lower-level failure raised while making a registered entry."""

    def __init__(self, id: Any, error: BaseException) -> None:  # noqa: A002
        self.id = id
        self.error = error
        super().__init__(f"An error occurred while trying to build {id!r}: {error}")
