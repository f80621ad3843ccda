"""
CallbackDispatcher - One online slot, one offline slot

Registering a handler replaces the previous one. None clears the slot.
Handlers may be plain functions or coroutine functions; they run inline
in the check cycle, so a slow handler delays the next checks.
"""
import inspect
import logging
from typing import Any, Awaitable, Callable, Optional, Union

from twitch_online.core.stream_types import Stream

LOGGER = logging.getLogger(__name__)

OnlineHandler = Callable[[Stream], Union[None, Awaitable[None]]]
OfflineHandler = Callable[[str], Union[None, Awaitable[None]]]


def _handler_name(handler: Callable) -> str:
    return getattr(handler, "__name__", repr(handler))


class CallbackDispatcher:

    def __init__(self):
        self._on_online: Optional[OnlineHandler] = None
        self._on_offline: Optional[OfflineHandler] = None

    def set_online(self, handler: Optional[OnlineHandler]):
        self._on_online = handler

    def set_offline(self, handler: Optional[OfflineHandler]):
        self._on_offline = handler

    @property
    def online_handler(self) -> Optional[OnlineHandler]:
        return self._on_online

    @property
    def offline_handler(self) -> Optional[OfflineHandler]:
        return self._on_offline

    async def online(self, stream: Stream):
        """Notify that stream.user_id is live"""
        if self._on_online is not None:
            await self._safe_call(self._on_online, stream)

    async def offline(self, channel_id: str):
        """Notify that channel_id is not live"""
        if self._on_offline is not None:
            await self._safe_call(self._on_offline, channel_id)

    async def _safe_call(self, handler: Callable, arg: Any):
        """A failing handler is logged and skipped; the cycle goes on"""
        try:
            result = handler(arg)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            LOGGER.error(f"❌ Handler {_handler_name(handler)} failed: {e}", exc_info=True)
