from dataclasses import dataclass
from typing import Optional, Union

from cbuf.header import Header

INVALID = -1
NO_NEW_DATA = -2


@dataclass(frozen=True)
class Start:
    index: int


@dataclass(frozen=True)
class NoNewData:
    pass


@dataclass(frozen=True)
class Invalid:
    reason: str


StartResult = Union[Start, NoNewData, Invalid]


def locate_start(last_time: Optional[float], header: Header) -> StartResult:
    """Find the 1-based index of the first row newer than ``last_time``."""
    if last_time is None:
        # first payload from this source
        return Start(1)

    time = header.time
    if last_time > time:
        return Invalid('last time %r is newer than payload time %r' % (last_time, time))
    if last_time == time:
        return NoNewData()

    seconds_per_row = header.seconds_per_row
    if seconds_per_row <= 0:
        return Invalid('seconds_per_row must be positive, got %r' % seconds_per_row)

    elapsed = time - last_time
    if elapsed % seconds_per_row != 0:
        return Invalid('%r seconds elapsed is not a multiple of %r' % (elapsed, seconds_per_row))

    rows_elapsed = int(elapsed // seconds_per_row)
    if rows_elapsed >= header.rows - 1:
        # whole window rolled over, take everything still visible
        return Start(1)
    return Start(int(header.rows - rows_elapsed))


def get_start_idx(last_time: Optional[float], header: Header) -> int:
    """Legacy integer form of :func:`locate_start`.

    Returns the start index, ``-2`` when the payload has not advanced, or
    ``-1`` when the two timestamps cannot be reconciled.
    """
    result = locate_start(last_time, header)
    if isinstance(result, Start):
        return result.index
    if isinstance(result, NoNewData):
        return NO_NEW_DATA
    return INVALID
