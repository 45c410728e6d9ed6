import numbers
from dataclasses import dataclass, field
from typing import Any, Optional

REQUIRED_FIELDS = ('time', 'rows', 'seconds_per_row', 'columns', 'column_info')
NUMERIC_FIELDS = ('time', 'rows', 'seconds_per_row', 'columns')


@dataclass(frozen=True)
class Header:
    """Metadata line of a circular buffer payload.

    ``time`` is the timestamp of the last row, in seconds. ``extra`` keeps
    any keys beyond the required ones (units, aggregation, ...) untouched.
    """
    time: float
    rows: int
    seconds_per_row: float
    columns: int = 0
    column_info: list = field(default_factory=list)
    extra: dict = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: dict) -> 'Header':
        extra = {k: v for k, v in data.items() if k not in REQUIRED_FIELDS}
        return cls(
            time=data['time'],
            rows=data['rows'],
            seconds_per_row=data['seconds_per_row'],
            columns=data['columns'],
            column_info=list(data['column_info']),
            extra=extra,
        )


def header_problem(data: Any) -> Optional[str]:
    """Return why ``data`` is not a usable header, or None if it is."""
    if not isinstance(data, dict):
        return 'header is %s, not an object' % type(data).__name__
    missing = [name for name in REQUIRED_FIELDS if data.get(name) is None]
    if missing:
        return 'missing header field(s): %s' % ', '.join(missing)
    for name in NUMERIC_FIELDS:
        value = data[name]
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return '%s is not a number: %r' % (name, value)
    column_info = data['column_info']
    if not isinstance(column_info, list):
        return 'column_info is not a list'
    if data['columns'] != len(column_info):
        return 'columns=%r but column_info has %d entries' % (data['columns'], len(column_info))
    return None


def is_valid_header(data: Any) -> bool:
    return header_problem(data) is None
