"""Load-state controller for the daily image."""

import asyncio
import logging
from collections.abc import Callable
from typing import Any

from apod_client.api_client import ApodAPIClient
from apod_client.models import Error, FetchResult, Loading, LoadState, Success
from apod_client.notifier import Notifier

logger = logging.getLogger(__name__)

UNKNOWN_ERROR_MESSAGE = "An unknown error occurred"
UNPARSEABLE_RESPONSE_MESSAGE = "Response could not be parsed"

Observer = Callable[[LoadState], None]


class DailyImageController:
    """Owns the Loading/Success/Error state of the daily image.

    Each load replaces the state wholesale: Loading first, then Success or
    Error once the client returns. Loads are not serialized; if two overlap,
    whichever finishes last sets the final state.
    """

    def __init__(
        self,
        api_client: ApodAPIClient,
        notifier: Notifier | None = None,
        autoload: bool = True,
    ) -> None:
        """Initialize the controller.

        Args:
            api_client: Client used to fetch the latest record
            notifier: Optional diagnostic sink for state changes
            autoload: Schedule an initial load on the running event loop

        Raises:
            RuntimeError: If autoload is set and no event loop is running
        """
        self.api_client = api_client
        self.notifier = notifier
        self._state: LoadState = Loading()
        self._observers: list[Observer] = []
        self._tasks: set[asyncio.Task[LoadState]] = set()
        self._closed = False

        if autoload:
            self.start()

    async def __aenter__(self) -> "DailyImageController":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @property
    def state(self) -> LoadState:
        """Current load state."""
        return self._state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer called with every new state.

        Args:
            observer: Callable receiving the new state

        Returns:
            A callable that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def start(self) -> "asyncio.Task[LoadState]":
        """Run a load in the background.

        Returns:
            The task running the load
        """
        task = asyncio.get_running_loop().create_task(self.load())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def load(self) -> LoadState:
        """Fetch the latest record and publish the outcome.

        Returns:
            The state after the load
        """
        if self._closed:
            return self._state

        self._set_state(Loading())
        logger.debug("Loading today's image")

        try:
            result = await self.api_client.fetch_latest()
        except Exception as e:
            logger.error(f"Fetching today's image raised: {e}", exc_info=True)
            result = FetchResult.fail(e)

        if self._closed:
            logger.debug("Controller closed during load, dropping result")
            return self._state

        self._set_state(self._resolve(result))
        return self._state

    async def refresh(self) -> LoadState:
        """Reload on user request."""
        return await self.load()

    async def wait(self) -> None:
        """Wait for every background load to finish."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def aclose(self) -> None:
        """Stop publishing and cancel background loads."""
        self._closed = True
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _resolve(self, result: FetchResult) -> LoadState:
        """Map a fetch result to the state it produces."""
        if result.success:
            if result.record is None:
                logger.error(UNPARSEABLE_RESPONSE_MESSAGE)
                self._notify(UNPARSEABLE_RESPONSE_MESSAGE)
                return Error(UNPARSEABLE_RESPONSE_MESSAGE)
            logger.info(f"Loaded image: {result.record.title}")
            self._notify(f"Loaded {result.record.title} ({result.record.date})")
            return Success(result.record)

        message = str(result.error) if result.error is not None else ""
        message = message or UNKNOWN_ERROR_MESSAGE
        logger.error(f"Failed to load image: {message}")
        self._notify(message)
        return Error(message)

    def _set_state(self, state: LoadState) -> None:
        self._state = state
        for observer in list(self._observers):
            try:
                observer(state)
            except Exception as e:
                logger.error(f"State observer failed: {e}", exc_info=True)

    def _notify(self, message: str) -> None:
        if self.notifier is not None:
            self.notifier.notify(message)
