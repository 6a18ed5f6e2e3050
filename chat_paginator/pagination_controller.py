"""Controller for paginated chat messages.

PaginationController drives page requests against a PaginationStore. It wraps
the caller's fetch coroutine with the loading / has-more / preload guards,
tracks the page pointer, computes the scroll trigger threshold used by the
list widget, and asks an attached view to scroll to the newest message.
"""

import asyncio
import logging
from typing import TYPE_CHECKING, Awaitable, Callable, Generic, Iterable, List, Optional, Set, Tuple

from chat_paginator.config import PaginationConfig
from chat_paginator.exceptions import ConfigError
from chat_paginator.pagination_state import M, PaginationState
from chat_paginator.pagination_store import PaginationStore
from chat_paginator.utils import scroll_utils

if TYPE_CHECKING:
    from chat_paginator.ui.chat_pagination_widget import ChatPaginationWidget

logger = logging.getLogger(__name__)

PageRequest = Callable[[int, int], Awaitable[None]]
PostFrame = Callable[[Callable[[], None]], None]


def _call_now(callback: Callable[[], None]) -> None:
    callback()


class PaginationController(Generic[M]):
    """Loads chat messages page by page and keeps the list scrolled.

    The fetch coroutine receives ``(page_index, page_size)`` and is expected
    to call :meth:`add_messages` with what it retrieved; its return value is
    ignored.

    Attributes:
        page_size: Messages requested per page
        preload_offset: Page count after which requests stop (None = unlimited)
        item_key: Optional function returning a stable key for a message
        clear_loading_on_error: Release the loading flag when a fetch raises
    """

    DEFAULT_PAGE_SIZE = 50

    def __init__(
        self,
        on_page_request: Optional[PageRequest] = None,
        page_size: Optional[int] = None,
        preload_offset: Optional[int] = None,
        store: Optional[PaginationStore[M]] = None,
        item_key: Optional[Callable[[M], str]] = None,
        clear_loading_on_error: Optional[bool] = None,
        config: Optional[PaginationConfig] = None,
    ):
        """Initialize the controller.

        Values given explicitly take precedence over those in ``config``.

        Args:
            on_page_request: Coroutine function called for each allowed page request
            page_size: Messages per page (default 50)
            preload_offset: Page count limit; <= 0 disables fetching entirely
            store: State container to drive (a new one is created if omitted)
            item_key: Function returning a stable key for a message
            clear_loading_on_error: Release the loading flag on fetch failure
            config: Settings supplying defaults for the values above

        Raises:
            ConfigError: If page_size is not a positive integer
        """
        self.config = config or PaginationConfig()
        self.page_size = page_size if page_size is not None else (
            self.config.page_size if config else self.DEFAULT_PAGE_SIZE
        )
        if isinstance(self.page_size, bool) or not isinstance(self.page_size, int) or self.page_size <= 0:
            raise ConfigError(f"page_size must be a positive integer, got {self.page_size!r}")
        self.preload_offset = preload_offset if preload_offset is not None else self.config.preload_offset
        self.clear_loading_on_error = (
            clear_loading_on_error if clear_loading_on_error is not None
            else self.config.clear_loading_on_error
        )
        self.item_key = item_key

        self._store: PaginationStore[M] = store if store is not None else PaginationStore()
        self._on_page_request = on_page_request

        self._view: Optional["ChatPaginationWidget"] = None
        self._post_frame: PostFrame = _call_now
        self._tasks: Set[asyncio.Task] = set()

    # ─── State access ─────────────────────────────────────────────────

    @property
    def store(self) -> PaginationStore[M]:
        return self._store

    @property
    def state(self) -> PaginationState[M]:
        return self._store.state

    @property
    def messages(self) -> Tuple[M, ...]:
        return self.state.messages

    @property
    def current_page(self) -> int:
        return self.state.current_page

    @property
    def last_index(self) -> int:
        return self.state.last_index

    @property
    def initial_index(self) -> int:
        """Row to show first: the last one while a single page fits, else the top."""
        last_index = self.last_index
        return last_index if last_index <= self.page_size - 1 else 0

    @property
    def has_fetcher(self) -> bool:
        return self._on_page_request is not None

    # ─── View binding ─────────────────────────────────────────────────

    @property
    def is_attached(self) -> bool:
        return self._view is not None

    def attach_view(self, view: "ChatPaginationWidget", post_frame: Optional[PostFrame] = None) -> None:
        """Bind the scroll target used by scroll_to_bottom.

        Args:
            view: Object exposing has_content_dimensions, scroll_offset,
                max_scroll_offset, jump_to_index and animate_to_index
            post_frame: Schedules a callback after the view's next render pass
        """
        self._view = view
        self._post_frame = post_frame or _call_now

    def detach_view(self) -> None:
        self._view = None
        self._post_frame = _call_now

    # ─── Page requests ────────────────────────────────────────────────

    async def load_first_page(self) -> bool:
        """Reset the page pointer and request page 0."""
        self._store.reset_current_page()
        return await self.request_page(self.state.current_page)

    def schedule_first_page(self) -> Optional[asyncio.Task]:
        """Run load_first_page once the attached view has rendered.

        Returns:
            The task running load_first_page when it was started right away
            (no view attached), otherwise None. Without a running event loop
            nothing is scheduled.
        """
        spawned: List[Optional[asyncio.Task]] = []
        self._post_frame(lambda: spawned.append(self._spawn(self.load_first_page)))
        return spawned[0] if spawned else None

    async def request_page(self, page_index: int) -> bool:
        """Request a page through the guarded fetch.

        Args:
            page_index: Zero-based page index

        Returns:
            True if the fetch coroutine ran, False if a guard skipped it
        """
        if self._on_page_request is None:
            return False
        return await self._guarded_request(page_index)

    async def request_next_page(self) -> None:
        """Request page current_page + 1, then advance the page pointer.

        The pointer advances whenever the request returns, even if the fetch
        added nothing or a guard skipped it.
        """
        state = self.state
        if state.is_loading or not state.has_more:
            return
        await self.request_page(state.current_page + 1)
        self._store.increment_page()

    async def _guarded_request(self, page_index: int) -> bool:
        state = self.state
        if state.is_loading:
            logger.debug(f"Skipping page {page_index}: a request is already in flight")
            return False
        if not state.has_more:
            logger.debug(f"Skipping page {page_index}: no more pages")
            return False
        if self._cannot_load:
            logger.debug(f"Skipping page {page_index}: preload_offset={self.preload_offset} disables loading")
            return False

        self._store.set_loading(True)
        self._check_preload_and_mark_has_more(page_index)

        if self.clear_loading_on_error:
            try:
                await self._fetch(page_index)
            finally:
                self._store.set_loading(False)
        else:
            # A failing fetch leaves is_loading set until clear_loading() is called
            await self._fetch(page_index)
            self._store.set_loading(False)
        return True

    async def _fetch(self, page_index: int) -> None:
        logger.debug(f"Requesting page {page_index} (page_size={self.page_size})")
        try:
            await self._on_page_request(page_index, self.page_size)
        except Exception as e:
            logger.warning(f"Page {page_index} request failed: {e}")
            raise

    @property
    def _cannot_load(self) -> bool:
        return self.preload_offset is not None and self.preload_offset <= 0

    def _check_preload_and_mark_has_more(self, page_index: int) -> None:
        if self.preload_offset is not None and (page_index + 1) >= self.preload_offset:
            self.mark_has_more(False)

    def _spawn(self, coro_fn: Callable[[], Awaitable[bool]]) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.warning("No running event loop, first page request not scheduled")
            return None
        task = loop.create_task(coro_fn())
        self._tasks.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Scheduled page request failed", exc_info=error)

    # ─── State mutation ───────────────────────────────────────────────

    def add_messages(self, messages: Iterable[M], prepend: bool = False) -> None:
        self._store.add_messages(messages, prepend=prepend)

    def add_message(self, message: M, prepend: bool = False) -> None:
        """Add one message and scroll to the newest one."""
        self._store.add_message(message, prepend=prepend)
        self.scroll_to_bottom()

    def mark_has_more(self, value: bool) -> None:
        self._store.set_has_more(value)

    def clear_loading(self) -> None:
        """Release a loading flag left set by a failed fetch."""
        if self.state.is_loading:
            logger.info("Clearing loading flag")
        self._store.set_loading(False)

    def reset(self) -> None:
        """Reset the page pointer and drop all messages.

        The loading and has-more flags are left as they are.
        """
        self._store.reset_current_page()
        self._store.reset_messages()

    # ─── Scrolling ────────────────────────────────────────────────────

    def trigger_threshold(self, min_offset: float, max_offset: float) -> float:
        return scroll_utils.trigger_threshold(self.current_page, min_offset, max_offset)

    def should_trigger(self, offset: float, min_offset: float, max_offset: float) -> bool:
        """Whether a scroll offset (px from the loading edge) should request the next page."""
        return 0 <= offset <= self.trigger_threshold(min_offset, max_offset)

    def scroll_to_bottom(self, animated: bool = True) -> None:
        """Scroll the attached view to the newest message after the next render pass."""
        self._post_frame(lambda: self._scroll_to_bottom_now(animated))

    def _scroll_to_bottom_now(self, animated: bool) -> None:
        view = self._view
        if view is None or not view.has_content_dimensions():
            return
        last_index = self.last_index
        if last_index < 0:
            return

        distance = abs(view.max_scroll_offset() - view.scroll_offset())
        if scroll_utils.should_animate(distance, animated):
            view.animate_to_index(last_index, scroll_utils.scroll_duration_ms(distance), align_bottom=True)
        else:
            view.jump_to_index(last_index, align_bottom=True)
