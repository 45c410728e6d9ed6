import math
import os
import signal
import sys
from typing import Optional

from dotenv import load_dotenv

load_dotenv()

from cbuf.header import Header
from cbuf.logger import logger
from cbuf.poller import CbufPoller

CBUF_FILE = os.getenv('CBUF_FILE')
CBUF_POLL_INTERVAL = float(os.getenv('CBUF_POLL_INTERVAL', 60))

poller = None


def read_payload() -> Optional[str]:
    try:
        with open(CBUF_FILE, encoding='utf-8') as f:
            return f.read()
    except FileNotFoundError:
        logger.warning('%s does not exist yet', CBUF_FILE)
        return None


def log_rows(header: Header, rows: list) -> None:
    # rows end just before the last, still-filling row
    n = len(rows)
    for i, row in enumerate(rows):
        ts = header.time - (n - i) * header.seconds_per_row
        cells = ['nan' if math.isnan(v) else '%g' % v for v in row]
        logger.info('%s %s', ts, '\t'.join(cells))


def shutdown_handler(sig: int = None, frame: int = None):
    logger.info('Shutdown initiated')
    poller.stop()
    if sig is not None:
        sys.exit(0)


if __name__ == '__main__':
    if not CBUF_FILE:
        logger.error('CBUF_FILE is not set')
        sys.exit(1)

    poller = CbufPoller(fetch=read_payload, handler=log_rows, interval=CBUF_POLL_INTERVAL,
                        name=os.path.basename(CBUF_FILE))
    poller.start()

    signal.signal(signal.SIGINT, shutdown_handler)
    signal.signal(signal.SIGTERM, shutdown_handler)

    poller.wait()
