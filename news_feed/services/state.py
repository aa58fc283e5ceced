"""View state machine.

Every view holds exactly one FeedState. All changes go through ``reduce``,
which only accepts completions carrying the generation of the fetch that is
currently loading; results of superseded fetches are dropped on arrival.
"""

import asyncio
from dataclasses import dataclass, field
from typing import Awaitable, Callable, ClassVar, List, Optional, Union

from news_feed.exceptions import QueryError, StoreError
from news_feed.logging_config import get_logger
from news_feed.models.schemas import Document


@dataclass(frozen=True)
class Loading:
    generation: int = 0

    tag: ClassVar[str] = "loading"


@dataclass(frozen=True)
class Loaded:
    generation: int
    documents: List[Document] = field(default_factory=list)

    tag: ClassVar[str] = "loaded"


@dataclass(frozen=True)
class Failed:
    generation: int
    error: Exception

    tag: ClassVar[str] = "failed"

    @property
    def retryable(self) -> bool:
        return bool(getattr(self.error, "retryable", False))


FeedState = Union[Loading, Loaded, Failed]


@dataclass(frozen=True)
class FetchStarted:
    generation: int


@dataclass(frozen=True)
class FetchSucceeded:
    generation: int
    documents: List[Document]


@dataclass(frozen=True)
class FetchFailed:
    generation: int
    error: Exception


FeedEvent = Union[FetchStarted, FetchSucceeded, FetchFailed]


def reduce(state: FeedState, event: FeedEvent) -> FeedState:
    """Apply one event to a state.

    Allowed transitions are a reset to Loading by a newer fetch, and
    Loading -> Loaded / Loading -> Failed for the fetch being waited on.
    Anything else returns the state unchanged.
    """
    if isinstance(event, FetchStarted):
        if event.generation <= state.generation:
            return state
        return Loading(event.generation)

    if not isinstance(state, Loading) or event.generation != state.generation:
        return state

    if isinstance(event, FetchSucceeded):
        return Loaded(event.generation, list(event.documents))
    if isinstance(event, FetchFailed):
        return Failed(event.generation, event.error)

    return state


Listener = Callable[[FeedState], None]


class View:
    """Base for views that drive one FeedState from their own fetches."""

    def __init__(self):
        self._generation = 0
        self._state: FeedState = Loading(0)
        self._listeners: List[Listener] = []

    @property
    def state(self) -> FeedState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback for state changes.

        Returns:
            Callable that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def deactivate(self) -> None:
        """Discard the current state; in-flight results will be ignored."""
        self._generation += 1
        self._dispatch(FetchStarted(self._generation))

    def _dispatch(self, event: FeedEvent) -> bool:
        previous = self._state
        self._state = reduce(previous, event)

        if self._state is previous:
            return False

        # Loading -> Loading (a newer fetch) is a reset, not a visible change
        if type(self._state) is not type(previous):
            self._notify()
        return True

    def _notify(self) -> None:
        logger = get_logger(__name__)
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception:
                logger.exception("State listener failed")

    async def _run(self, load: Callable[[], Awaitable[List[Document]]]) -> Optional[List[Document]]:
        """Run one fetch through the state machine.

        Cancelling the awaiting task counts as deactivating the view: the
        generation is bumped, the state stays Loading and the cancellation
        propagates.

        Returns:
            The documents if this fetch's result was applied, None otherwise
        """
        logger = get_logger(__name__)
        self._generation += 1
        generation = self._generation
        self._dispatch(FetchStarted(generation))

        try:
            documents = await load()
        except asyncio.CancelledError:
            logger.debug(f"Fetch {generation} cancelled")
            if generation == self._generation:
                self.deactivate()
            raise
        except QueryError as e:
            logger.error(f"Query failed: {e}")
            event = FetchFailed(generation, e)
        except StoreError as e:
            logger.warning(f"Fetch failed: {e}")
            event = FetchFailed(generation, e)
        except Exception as e:
            logger.error(f"Unexpected error during fetch: {e}", exc_info=True)
            event = FetchFailed(generation, e)
        else:
            event = FetchSucceeded(generation, documents)

        if not self._dispatch(event):
            logger.debug(f"Discarded result of superseded fetch {generation} (current {self._generation})")
            return None

        if isinstance(self._state, Loaded):
            return self._state.documents
        return None
