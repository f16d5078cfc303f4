"""Interface for browser session management."""

from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Optional, TypeVar

from playwright.async_api import BrowserContext

T = TypeVar("T")


class IBrowserManager(ABC):
    """Interface for owning one browser process and its contexts."""

    @abstractmethod
    async def new_context(self, options=None) -> BrowserContext:
        """Open an isolated browser context, launching the browser if needed."""

    @abstractmethod
    async def with_page(
        self, handler: Callable[[BrowserContext], Awaitable[T]], options=None
    ) -> T:
        """Run ``handler`` inside a fresh context, disposing it afterwards by default."""

    @abstractmethod
    async def dispose(self) -> None:
        """Close every tracked context and the browser. Never raises."""

    @property
    @abstractmethod
    def is_launched(self) -> bool:
        """Check if the browser process is running."""

    @property
    def tracked_context_count(self) -> Optional[int]:
        """Number of contexts tracked for bulk cleanup, if the manager tracks them."""
        return None
