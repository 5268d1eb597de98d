from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from pydantic import BaseModel

from .quran_client import PassageSummary, PassageUnavailable, QuranClient


logger = logging.getLogger(__name__)


LOADING_TEXT = "Memuat teks bacaan..."
FALLBACK_TEXT = "Teks bacaan tidak dapat dimuat. Periksa koneksi internet lalu pilih surah kembali."


class ReadingStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


class ReadingView(BaseModel):
    passage_id: Optional[str] = None
    status: ReadingStatus = ReadingStatus.IDLE
    text: str = ""


class ReadingMaterialResolver:
    """Looks up passage text for the reading panel.

    Successful lookups are cached for the lifetime of the resolver; failures
    are never cached, so selecting the same passage again retries the API.
    Every background load is tagged with the passage id it was started for
    and only touches the view if that id is still the live selection.
    """

    def __init__(
        self,
        client: QuranClient,
        *,
        on_update: Optional[Callable[[ReadingView], None]] = None,
    ) -> None:
        self._client = client
        self._cache: Dict[str, str] = {}
        self._inflight: Dict[str, asyncio.Task] = {}
        self._loads: Set[asyncio.Task] = set()
        self._passages: Optional[List[PassageSummary]] = None
        self._selected: Optional[str] = None
        self._view = ReadingView()
        self.on_update = on_update

    def cached(self, passage_id) -> Optional[str]:
        return self._cache.get(str(passage_id))

    def current(self) -> ReadingView:
        return self._view

    async def resolve(self, passage_id) -> str:
        text = await self._lookup(str(passage_id))
        return FALLBACK_TEXT if text is None else text

    def select(self, passage_id) -> ReadingView:
        """Make ``passage_id`` the live selection and return the new view.

        Must be called from within the running event loop; uncached passages
        are loaded by a background task.
        """
        key = str(passage_id)
        self._selected = key
        text = self._cache.get(key)
        if text is not None:
            self._view = ReadingView(passage_id=key, status=ReadingStatus.LOADED, text=text)
            return self._view
        self._view = ReadingView(passage_id=key, status=ReadingStatus.LOADING, text=LOADING_TEXT)
        task = asyncio.get_running_loop().create_task(self._load(key))
        self._loads.add(task)
        task.add_done_callback(self._loads.discard)
        return self._view

    async def list_passages(self) -> List[PassageSummary]:
        if self._passages is not None:
            return self._passages
        try:
            passages = await self._client.list_passages()
        except PassageUnavailable as exc:
            logger.warning("Passage list unavailable: %s", exc)
            return []
        self._passages = passages
        return passages

    async def wait_idle(self) -> None:
        while self._loads:
            await asyncio.gather(*list(self._loads))

    async def aclose(self) -> None:
        pending = list(self._loads) + list(self._inflight.values())
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    async def _lookup(self, key: str) -> Optional[str]:
        text = self._cache.get(key)
        if text is not None:
            return text
        task = self._inflight.get(key)
        if task is None:
            task = asyncio.ensure_future(self._fetch(key))
            self._inflight[key] = task
            task.add_done_callback(lambda done, key=key: self._forget(key, done))
        # One caller giving up must not cancel the shared request
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task) -> None:
        if self._inflight.get(key) is task:
            del self._inflight[key]

    async def _fetch(self, key: str) -> Optional[str]:
        try:
            text = await self._client.fetch_passage(key)
        except PassageUnavailable as exc:
            logger.warning("Passage %s unavailable: %s", key, exc)
            return None
        self._cache[key] = text
        return text

    async def _load(self, key: str) -> None:
        text = await self._lookup(key)
        if key != self._selected:
            logger.info("Discarding stale passage %s, selection is now %s", key, self._selected)
            return
        if text is None:
            self._view = ReadingView(passage_id=key, status=ReadingStatus.FAILED, text=FALLBACK_TEXT)
        else:
            self._view = ReadingView(passage_id=key, status=ReadingStatus.LOADED, text=text)
        if self.on_update is not None:
            self.on_update(self._view)
