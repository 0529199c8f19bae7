from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Callable, List, Tuple

import httpx
import pytest

from fake_api import BASE_URL, FakeParishApi

from parish_admin.aggregator import AdminAggregator
from parish_admin.client import ParishApiClient

FIXED_NOW = datetime(2025, 1, 15, 9, 30, 0)


class RecordingDelivery:
    """Delivery double: keeps what it was handed and writes nothing to the browser."""

    def __init__(self, root: Path, *, popups_blocked: bool = False) -> None:
        self.root = root
        self.popups_blocked = popups_blocked
        self.downloads: List[Tuple[str, bytes]] = []
        self.printed: List[Tuple[str, str]] = []

    def deliver(self, data: bytes, filename: str) -> Path:
        self.downloads.append((filename, data))
        path = self.root / filename
        path.write_bytes(data)
        return path

    def present_printable(self, html: str, title: str) -> Path:
        from parish_admin.reporting import PopupBlockedError

        if self.popups_blocked:
            raise PopupBlockedError()
        self.printed.append((title, html))
        path = self.root / "print.html"
        path.write_text(html, encoding="utf-8")
        return path

    def text(self, index: int = -1) -> str:
        return self.downloads[index][1].decode("utf-8")


@pytest.fixture
def fake_api() -> FakeParishApi:
    return FakeParishApi()


@pytest.fixture
def make_client(fake_api: FakeParishApi) -> Callable[..., ParishApiClient]:
    def _make(**kwargs) -> ParishApiClient:
        kwargs.setdefault("token", "test-token")
        return ParishApiClient(BASE_URL, transport=httpx.ASGITransport(app=fake_api.app), **kwargs)

    return _make


@pytest.fixture
def make_aggregator(make_client) -> Callable[..., AdminAggregator]:
    """
    Build inside the coroutine under test; close with `await agg.api.aclose()`.
    """

    def _make(role="admin") -> AdminAggregator:
        return AdminAggregator(make_client(), role=role)

    return _make


@pytest.fixture
def delivery(tmp_path: Path) -> RecordingDelivery:
    return RecordingDelivery(tmp_path)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    return lambda: FIXED_NOW


@pytest.fixture
def blocked_delivery(tmp_path: Path) -> RecordingDelivery:
    return RecordingDelivery(tmp_path, popups_blocked=True)
