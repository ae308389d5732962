"""Property injection markers.

A class attribute annotated with ``Annotated[T, Inject()]`` is filled by the
container right after the object is constructed, provided annotation use is
enabled on the container::

    class Mailer:
        transport: Annotated[Transport, Inject()]
        sender: Annotated[str, Inject("mail.sender")]

``Inject()`` resolves ``T`` (bound value first, then autowiring), while
``Inject("mail.sender")`` fetches a registered entry by id.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, NamedTuple, get_args, get_origin, get_type_hints


logger = logging.getLogger(__name__)


class Inject(NamedTuple):
    id: str | None = None


class InjectedAttribute(NamedTuple):
    name: str
    declared_type: Any
    marker: Inject


def get_injected_attributes(cls: type) -> list[InjectedAttribute]:
    try:
        hints = get_type_hints(cls, include_extras=True)
    except NameError as exc:
        logger.warning("'%s' name error retrieving %s attribute type hints", exc.name, cls.__qualname__)
        return []
    except TypeError:
        return []

    attributes = []
    for name, hint in hints.items():
        if get_origin(hint) is not Annotated:
            continue

        declared_type, *metadata = get_args(hint)
        for marker in metadata:
            if isinstance(marker, Inject):
                attributes.append(InjectedAttribute(name, declared_type, marker))
                break

    return attributes
