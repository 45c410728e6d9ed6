import threading
from typing import Callable, List, Optional

from cbuf.decoder import Row, decode_cbuf
from cbuf.delta import Invalid, NoNewData, locate_start
from cbuf.header import Header
from cbuf.logger import logger

Fetch = Callable[[], Optional[str]]
Handler = Callable[[Header, List[Row]], None]


def new_rows(rows: List[Row], start_idx: int) -> List[Row]:
    """Rows from 1-based ``start_idx`` on, minus the last (incomplete) row."""
    if start_idx < 1:
        return []
    return rows[start_idx - 1:-1]


class CbufPoller:
    def __init__(self, fetch: Fetch, handler: Handler, interval: float = 60.0, name: str = 'cbuf'):
        self.fetch = fetch
        self.handler = handler
        self.interval = float(interval)
        self.name = name
        self._lock = threading.Lock()
        self._last_time: Optional[float] = None
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def last_time(self) -> Optional[float]:
        with self._lock:
            return self._last_time

    def reset(self) -> None:
        with self._lock:
            self._last_time = None

    def poll_once(self) -> int:
        text = self.fetch()
        if text is None:
            logger.debug('%s: nothing fetched', self.name)
            return 0

        result = decode_cbuf(text)
        if not result.ok:
            logger.warning('%s: dropping payload, %s', self.name, result.reason)
            return 0
        header, rows = result.snapshot

        with self._lock:
            start = locate_start(self._last_time, header)
            if isinstance(start, NoNewData):
                logger.debug('%s: no new data since %r', self.name, header.time)
                return 0
            previous = self._last_time
            self._last_time = header.time

        if isinstance(start, Invalid):
            logger.warning('%s: cannot align payload (%s), resyncing to %r', self.name, start.reason, header.time)
            return 0

        fresh = new_rows(rows, start.index)
        logger.debug('%s: last_time=%r time=%r start=%d new_rows=%d',
                     self.name, previous, header.time, start.index, len(fresh))
        if fresh:
            self.handler(header, fresh)
        return len(fresh)

    def _run(self) -> None:
        logger.debug('%s: poller thread started', self.name)
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception:
                logger.exception('%s: poll failed; retrying in %.1f seconds', self.name, self.interval)
            self._stop_event.wait(self.interval)
        logger.debug('%s: poller thread exiting', self.name)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name='%s-poller' % self.name, daemon=True)
        self._thread.start()
        logger.debug('started poller thread')

    def stop(self, timeout: float = 1.0) -> None:
        self._stop_event.set()
        if self._thread is None:
            return

        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning('poller thread is still alive')
        else:
            self._thread = None
            logger.debug('poller thread stopped')

    def wait(self) -> None:
        thread = self._thread
        while thread is not None and thread.is_alive():
            thread.join(timeout=1.0)
