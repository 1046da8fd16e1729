"""chan.py – Bridges between line channels and byte streams.

A *channel* is a :class:`queue.Queue` of text lines closed by putting the
:data:`EOF` sentinel.  :class:`ChanReader` turns the receiving side into a
readable byte stream (for a child's standard input) and :class:`ChanWriter`
turns the sending side into a writable byte stream (for its output).

Usage::

    ch: queue.Queue = queue.Queue()
    cmd = command(Find(dirnames=["."], name="*.py"))
    cmd.channel_stdout(ch)
    threading.Thread(target=cmd.run).start()
    for line in iter_channel(ch):
        print(line)
"""

from __future__ import annotations

import io
import queue
import threading
from collections.abc import Iterator
from typing import Any

_ENCODING = "utf-8"
_POLL_INTERVAL = 0.05


class _Closed:
    def __repr__(self) -> str:
        return "EOF"


EOF: Any = _Closed()
"""Sentinel marking the end of a channel."""


def close_channel(ch: queue.Queue) -> None:
    """Mark *ch* as closed."""
    ch.put(EOF)


def iter_channel(ch: queue.Queue) -> Iterator[str]:
    """Yield lines from *ch* until it is closed."""
    while True:
        item = ch.get()
        if item is EOF:
            return
        yield item


class ChanReader(io.RawIOBase):
    """Readable byte stream fed by lines received from a channel.

    Each line gets a trailing newline if it lacks one.  Once the channel is
    closed and the buffer is drained, reads return ``b""``.  :meth:`stop`
    ends the stream early for a channel that will never be closed.
    """

    def __init__(self, ch: queue.Queue) -> None:
        super().__init__()
        self._ch = ch
        self._buffer = bytearray()
        self._eof = False
        self._stop = threading.Event()

    def stop(self) -> None:
        """Make reads return ``b""`` once no more lines are waiting."""
        self._stop.set()

    def readable(self) -> bool:
        return True

    def readinto(self, b: Any) -> int:
        view = memoryview(b).cast("B")
        while not self._buffer:
            if self._eof:
                return 0
            try:
                line = self._ch.get(timeout=_POLL_INTERVAL)
            except queue.Empty:
                if self._stop.is_set():
                    self._eof = True
                continue
            if line is EOF:
                self._eof = True
                continue
            self._buffer += line.encode(_ENCODING)
            if not line.endswith("\n"):
                self._buffer += b"\n"
        n = min(len(view), len(self._buffer))
        view[:n] = self._buffer[:n]
        del self._buffer[:n]
        return n


class ChanWriter(io.RawIOBase):
    """Writable byte stream that sends each complete line to a channel.

    Lines are sent without their trailing newline.  :meth:`close` sends any
    unterminated remainder and then closes the channel, exactly once.  A writer
    discarded without :meth:`close` leaves its channel open.
    """

    def __init__(self, ch: queue.Queue) -> None:
        super().__init__()
        self._ch = ch
        self._buffer = bytearray()
        self._lock = threading.Lock()

    def writable(self) -> bool:
        return True

    def write(self, b: Any) -> int:
        data = bytes(b)
        with self._lock:
            if self.closed:
                raise ValueError("write to closed ChanWriter")
            self._buffer += data
            while True:
                idx = self._buffer.find(b"\n")
                if idx < 0:
                    break
                line = bytes(self._buffer[:idx])
                del self._buffer[: idx + 1]
                self._ch.put(line.decode(_ENCODING, errors="replace"))
        return len(data)

    def __del__(self) -> None:
        # Only an explicit close() ends the channel.
        pass

    def close(self) -> None:
        with self._lock:
            if self.closed:
                return
            if self._buffer:
                self._ch.put(bytes(self._buffer).decode(_ENCODING, errors="replace"))
                self._buffer.clear()
            self._ch.put(EOF)
            super().close()
