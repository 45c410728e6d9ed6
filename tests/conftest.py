import json

import pytest


def make_payload(time=100, rows=None, seconds_per_row=10, column_info=None, annotations=None, header=None):
    if rows is None:
        rows = [[1, 2], [3, 4], [5, 6]]
    if column_info is None:
        column_info = [{'name': 'a', 'unit': 'count'}, {'name': 'b', 'unit': 'count'}]
    if header is None:
        header = {
            'time': time,
            'rows': len(rows),
            'seconds_per_row': seconds_per_row,
            'columns': len(column_info),
            'column_info': column_info,
        }
    lines = []
    if annotations is not None:
        lines.append(json.dumps({'annotations': annotations}))
    lines.append(json.dumps(header))
    lines.extend('\t'.join(str(v) for v in row) for row in rows)
    return '\n'.join(lines) + '\n'


@pytest.fixture
def payload():
    return make_payload


@pytest.fixture
def window(payload):
    """Single-column payload whose cells hold each row's own timestamp."""
    def build(end_time, rows=5, seconds_per_row=10):
        values = [[end_time - (rows - 1 - i) * seconds_per_row] for i in range(rows)]
        return payload(time=end_time, rows=values, seconds_per_row=seconds_per_row, column_info=[{}])
    return build
