from __future__ import annotations

from concurrent.futures import Executor, Future
from typing import TYPE_CHECKING, Any

import httpx
import pytest

from pnendpoint import PNConfiguration, PubSubContext

if TYPE_CHECKING:
    from collections.abc import Callable, Generator

TEST_UUID = "test-uuid"


class ImmediateExecutor(Executor):
    """Executor running every submitted task inline."""

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        future: Future = Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as exc:  # noqa: BLE001
            future.set_exception(exc)
        return future


class ManualExecutor(Executor):
    """Executor queuing submitted tasks until ``run_pending`` is
    called."""

    def __init__(self) -> None:
        self.pending: list[tuple[Callable[..., Any], tuple[Any, ...], dict[str, Any]]] = []

    def submit(self, fn: Callable[..., Any], /, *args: Any, **kwargs: Any) -> Future:
        self.pending.append((fn, args, kwargs))
        return Future()

    def run_pending(self) -> None:
        pending, self.pending = self.pending, []
        for fn, args, kwargs in pending:
            fn(*args, **kwargs)


@pytest.fixture
def config() -> PNConfiguration:
    """Create a configuration without request identifiers."""
    return PNConfiguration(
        uuid=TEST_UUID,
        publish_key="pub-key",
        subscribe_key="sub-key",
        include_request_identifier=False,
    )


@pytest.fixture
def immediate_dispatcher() -> ImmediateExecutor:
    """Create a dispatcher delivering callbacks on the calling thread."""
    return ImmediateExecutor()


@pytest.fixture
def manual_dispatcher() -> ManualExecutor:
    """Create a dispatcher delivering callbacks only when asked."""
    return ManualExecutor()


@pytest.fixture
def make_context(
    config: PNConfiguration, immediate_dispatcher: ImmediateExecutor
) -> Generator[Callable[..., PubSubContext], None, None]:
    """Create a factory of contexts backed by a mock transport.

    The factory takes the handler answering every request, and optionally
    a dispatcher and configuration overrides.
    """
    clients: list[httpx.Client] = []

    def factory(
        handler: Callable[[httpx.Request], httpx.Response],
        *,
        dispatcher: Executor | None = None,
        **overrides: Any,
    ) -> PubSubContext:
        context_config = config.merge(**overrides)
        client = httpx.Client(
            base_url=context_config.base_url, transport=httpx.MockTransport(handler)
        )
        clients.append(client)
        return PubSubContext(
            context_config,
            client=client,
            dispatcher=dispatcher or immediate_dispatcher,
            version="1.2.3",
        )

    yield factory

    for client in clients:
        client.close()
