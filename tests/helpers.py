"""Test doubles shared across the test suite."""

import asyncio
from collections.abc import Callable
from typing import Any

import httpx

from cpa_dashboard.models.configuration import Configuration
from cpa_dashboard.services.clickdealer.client import ClickDealerClient

TEST_ENDPOINT = "https://clickdealer.test/api/v1"


class FakeClickDealer:
    """Scripted ClickDealer API served through httpx.MockTransport.

    Set ``conversions``/``clicks`` to the records to return, the ``*_status``
    attributes to fail with an HTTP status, ``*_exc`` to fail at transport
    level, or clear ``gate`` to hold every request until it is set again.
    """

    def __init__(self) -> None:
        self.conversions: list[Any] = []
        self.clicks: list[Any] = []
        self.conversions_status = 200
        self.clicks_status = 200
        self.conversions_exc: Exception | None = None
        self.clicks_exc: Exception | None = None
        self.conversions_raw: str | None = None
        self.requests: list[httpx.Request] = []
        self.gate = asyncio.Event()
        self.gate.set()

    def count(self, path: str) -> int:
        return sum(1 for r in self.requests if r.url.path.endswith(path))

    async def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        await self.gate.wait()

        if request.url.path.endswith("/conversions"):
            if self.conversions_exc is not None:
                raise self.conversions_exc
            if self.conversions_status != 200:
                return httpx.Response(self.conversions_status, json={"error": "denied"})
            if self.conversions_raw is not None:
                return httpx.Response(200, text=self.conversions_raw)
            return httpx.Response(200, json={"conversions": self.conversions})

        if request.url.path.endswith("/clicks"):
            if self.clicks_exc is not None:
                raise self.clicks_exc
            if self.clicks_status != 200:
                return httpx.Response(self.clicks_status, json={"error": "denied"})
            return httpx.Response(200, json={"clicks": self.clicks})

        return httpx.Response(404)

    def client_factory(self, config: Configuration) -> ClickDealerClient:
        return ClickDealerClient(config, transport=httpx.MockTransport(self.handler))


async def wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    """Poll ``predicate`` on the event loop until it holds."""
    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout
    while not predicate():
        if loop.time() > deadline:
            raise AssertionError("condition not met in time")
        await asyncio.sleep(0.01)


