import enum
import json
import math
import re
from dataclasses import dataclass
from typing import List, NamedTuple, Optional, Union

from cbuf.header import Header, header_problem
from cbuf.logger import logger

MIN_ROWS = 3
NAN_TOKEN = 'nan'
NUMBER_RE = re.compile(r'^[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?$', re.ASCII)

Value = Union[float, int]
Row = List[Value]


class Snapshot(NamedTuple):
    header: Header
    rows: List[Row]


class DecodeFailure(enum.Enum):
    DECODE_ERROR = 'decode_error'
    INVALID_HEADER = 'invalid_header'
    ROW_COUNT_MISMATCH = 'row_count_mismatch'


@dataclass(frozen=True)
class DecodeResult:
    snapshot: Optional[Snapshot] = None
    failure: Optional[DecodeFailure] = None
    reason: str = ''

    @property
    def ok(self) -> bool:
        return self.snapshot is not None


def _fail(failure: DecodeFailure, reason: str) -> DecodeResult:
    logger.debug('cbuf decode failed (%s): %s', failure.value, reason)
    return DecodeResult(failure=failure, reason=reason)


def _parse_value(token: str) -> Value:
    token = token.strip()
    # plain decimal only; inf, hex and 1_000 are not numbers here
    if token == NAN_TOKEN or not NUMBER_RE.match(token):
        return math.nan
    value = float(token)
    if math.isinf(value):
        return math.nan
    return value


def _is_annotation(decoded) -> bool:
    if not isinstance(decoded, dict):
        return False
    marker = decoded.get('annotations')
    return marker is not None and marker is not False


def _parse_row(line: str) -> Row:
    return [_parse_value(token) for token in line.split('\t') if token]


def decode_cbuf(text: str) -> DecodeResult:
    """Decode a circular buffer payload, reporting why it failed if it did.

    The first line holds the JSON header; a single leading line carrying an
    ``annotations`` key is skipped. Every later line is a tab separated row.
    Tokens that are not numbers become NaN instead of failing the payload.
    """
    header = None
    annotations_skipped = False
    rows: List[Row] = []

    for line in text.split('\n'):
        if not line:
            continue
        if header is not None:
            rows.append(_parse_row(line))
            continue

        try:
            decoded = json.loads(line)
        except (ValueError, RecursionError) as exc:
            return _fail(DecodeFailure.DECODE_ERROR, 'header line is not JSON: %s' % exc)

        if not annotations_skipped and _is_annotation(decoded):
            annotations_skipped = True
            continue

        problem = header_problem(decoded)
        if problem:
            return _fail(DecodeFailure.INVALID_HEADER, problem)
        header = Header.from_dict(decoded)

    if header is None:
        return _fail(DecodeFailure.DECODE_ERROR, 'no header line')

    num_rows = len(rows)
    if num_rows < MIN_ROWS:
        return _fail(DecodeFailure.ROW_COUNT_MISMATCH,
                     'only %d rows, need at least %d' % (num_rows, MIN_ROWS))
    if num_rows != header.rows:
        return _fail(DecodeFailure.ROW_COUNT_MISMATCH,
                     'header declares %r rows but %d were found' % (header.rows, num_rows))

    return DecodeResult(snapshot=Snapshot(header, rows))


def parse_cbuf(text: str) -> Optional[Snapshot]:
    """Return ``(header, rows)`` for a valid payload, otherwise None.

    The last row is usually still being filled by the producer and should
    not be consumed; that is left to the caller.
    """
    return decode_cbuf(text).snapshot
