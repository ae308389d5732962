import unittest
from typing import Protocol
from unittest.mock import MagicMock

from unity_container import Container


class Contains:  # noqa: PLW1641
    def __init__(self, substring):
        self.substring = substring

    def __repr__(self):
        return f"Contains({self.substring!r})"

    def __eq__(self, other):
        return isinstance(other, str) and self.substring in other


class PaymentClient(Protocol):
    def charge(self, order_id: str, amount_cents: int) -> None: ...


class InfoLogger(Protocol):
    def info(self, msg: object, *args: object) -> None: ...


class NullLogger:
    def info(self, msg: object, *args: object) -> None:
        pass


class StripeSdk:
    def pay(self, amount_usd: float, reference: str) -> bool:
        return True


class StripeAdapter:
    def __init__(
        self, sdk: StripeSdk, logger: InfoLogger, usd_per_cent: float = 0.01
    ) -> None:
        self._logger = logger
        self._sdk = sdk
        self._usd_per_cent = usd_per_cent

    def charge(self, order_id: str, amount_cents: int) -> None:
        self._logger.info("adapting to stripe sdk api")
        amount_usd = amount_cents * self._usd_per_cent
        ok = self._sdk.pay(amount_usd, reference=order_id)
        if not ok:
            msg = "Stripe payment failed"
            raise RuntimeError(msg)


class Checkout:
    def __init__(self, client: PaymentClient) -> None:
        self.client = client

    def pay(self, order_id: str, amount_cents: int) -> None:
        self.client.charge(order_id, amount_cents)


class TestWiringAdapterThirdPartySDK(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()
        self.stripe_sdk = StripeSdk()
        self.stripe_sdk.pay = MagicMock(wraps=self.stripe_sdk.pay)
        self.logger = NullLogger()
        self.logger.info = MagicMock(wraps=self.logger.info)

        self.cont.register("payments", StripeAdapter).give({"sdk": self.stripe_sdk, "usd_per_cent": 0.0125})
        self.cont.bind(InfoLogger, lambda _: self.logger)
        self.cont.bind(PaymentClient, lambda c: c.get("payments"))

    def test_adapter_calls_adaptee(self):
        client: PaymentClient = self.cont.get("payments")
        client.charge("order-123", 5000)

        assert self.stripe_sdk.pay.call_count == 1
        assert self.stripe_sdk.pay.call_args[0][0] == 0.0125 * 5000
        assert self.stripe_sdk.pay.call_args[1]["reference"] == "order-123"

        assert self.logger.info.call_args[0][0] == Contains("stripe sdk")

    def test_bound_protocol_reaches_consumer(self):
        self.cont.register("checkout", Checkout)

        checkout = self.cont.get("checkout")
        checkout.pay("order-7", 100)

        assert checkout.client is self.cont.get("payments")
        assert self.stripe_sdk.pay.call_args[1]["reference"] == "order-7"


class TestAutoWiringAdapterThirdPartySDK(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()
        self.cont.bind(InfoLogger, lambda _: NullLogger())
        self.cont.bind(PaymentClient, lambda c: c.build(StripeAdapter, {"usd_per_cent": 0.0125}))

    def test_adapter_calls_adaptee(self):
        self.cont.register("checkout", Checkout)

        checkout = self.cont.get("checkout")
        checkout.pay("order-123", 5000)

        assert isinstance(checkout.client, StripeAdapter)
        assert isinstance(checkout.client._sdk, StripeSdk)
