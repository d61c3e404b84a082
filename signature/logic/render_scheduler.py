# signature/logic/render_scheduler.py
"""
Cancellable background page renders.

Each surface (e.g. the page canvas of a view) has at most one outstanding
render. Requesting a new one cancels the previous task first, so a slow
render of an old page can never paint over a newer one.
"""
from __future__ import annotations
import logging
import threading
from typing import Callable, Dict, Optional

from PIL import Image

from .page_renderer import PageRenderer

logger = logging.getLogger(__name__)

RenderCallback = Callable[[int, Image.Image], None]
ErrorCallback = Callable[[int, Exception], None]


class RenderTask:
    def __init__(self, surface: str, page_index: int, scale: float) -> None:
        self.surface = surface
        self.page_index = page_index
        self.scale = scale
        self._cancelled = threading.Event()
        self._done = threading.Event()
        self.image: Optional[Image.Image] = None
        self.error: Optional[Exception] = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    @property
    def done(self) -> bool:
        return self._done.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        return self._done.wait(timeout)

    def _run(self, renderer: PageRenderer, on_done: Optional[RenderCallback],
             on_error: Optional[ErrorCallback]) -> None:
        try:
            if self.cancelled:
                return
            try:
                image = renderer.render(self.page_index, self.scale)
            except Exception as e:  # delivered to the caller, not swallowed
                self.error = e
                if not self.cancelled and on_error is not None:
                    on_error(self.page_index, e)
                else:
                    logger.warning("Render of page %d failed: %s", self.page_index, e)
                return
            if self.cancelled:
                logger.debug("Discarding cancelled render of page %d", self.page_index)
                return
            self.image = image
            if on_done is not None:
                on_done(self.page_index, image)
        finally:
            self._done.set()


class RenderScheduler:
    def __init__(self, renderer: PageRenderer) -> None:
        self._renderer = renderer
        self._lock = threading.Lock()
        self._tasks: Dict[str, RenderTask] = {}

    def request(self, surface: str, page_index: int, scale: float,
                on_done: Optional[RenderCallback] = None,
                on_error: Optional[ErrorCallback] = None) -> RenderTask:
        task = RenderTask(surface, page_index, scale)
        with self._lock:
            previous = self._tasks.get(surface)
            if previous is not None and not previous.done:
                previous.cancel()
            self._tasks[surface] = task
        threading.Thread(target=task._run, args=(self._renderer, on_done, on_error),
                         name=f"render-{surface}-{page_index}", daemon=True).start()
        return task

    def current(self, surface: str) -> Optional[RenderTask]:
        with self._lock:
            return self._tasks.get(surface)

    def cancel_all(self) -> None:
        with self._lock:
            for task in self._tasks.values():
                task.cancel()
            self._tasks.clear()
