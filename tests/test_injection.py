import unittest
from typing import Annotated, Protocol

import pytest

from unity_container import Container, Inject, NotFoundError


class Bar: ...


class Notifier(Protocol):
    def notify(self, msg: str) -> None: ...


class EmailNotifier:
    def notify(self, msg: str) -> None:
        pass


class WithProperties:
    bar: Annotated[Bar, Inject()]
    greeting: Annotated[str, Inject("greeting")]
    notifier: Annotated[Notifier, Inject()]
    retries: Annotated[int, Inject()]
    plain: int = 0


class TestPropertyInjection(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container(use_annotations=True)
        self.cont.register("greeting", "Hello")
        self.cont.bind(Notifier, lambda _: EmailNotifier())

    def test_marked_attributes_are_injected(self):
        obj = self.cont.build(WithProperties)

        assert isinstance(obj.bar, Bar)
        assert obj.greeting == "Hello"
        assert isinstance(obj.notifier, EmailNotifier)

    def test_unresolvable_attribute_is_left_alone(self):
        obj = self.cont.build(WithProperties)

        assert not hasattr(obj, "retries")
        assert obj.plain == 0

    def test_nothing_is_injected_when_annotations_are_disabled(self):
        self.cont.enable_use_annotations(False)

        obj = self.cont.build(WithProperties)

        assert not hasattr(obj, "bar")
        assert not hasattr(obj, "greeting")

    def test_attribute_set_by_constructor_is_kept(self):
        class Preset:
            bar: Annotated[Bar, Inject()]

            def __init__(self):
                self.bar = "from constructor"

        assert self.cont.build(Preset).bar == "from constructor"

    def test_injected_attribute_with_unknown_id_raises(self):
        class Broken:
            missing: Annotated[str, Inject("missing")]

        with pytest.raises(NotFoundError):
            self.cont.build(Broken)

    def test_registered_entries_get_injected_attributes(self):
        self.cont.register("props", WithProperties)

        assert self.cont.get("props").greeting == "Hello"

    def test_autowired_dependencies_get_injected_attributes(self):
        class Owner:
            def __init__(self, props: WithProperties):
                self.props = props

        owner = self.cont.build(Owner)
        assert isinstance(owner.props.bar, Bar)

    def test_autowiring_disabled_skips_unbound_attribute_types(self):
        self.cont.enable_autowiring(False)

        obj = self.cont.build(WithProperties)

        assert not hasattr(obj, "bar")
        assert isinstance(obj.notifier, EmailNotifier)
