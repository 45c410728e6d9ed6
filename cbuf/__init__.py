from cbuf.decoder import parse_cbuf
from cbuf.delta import get_start_idx

__all__ = ['parse_cbuf', 'get_start_idx']
