from __future__ import annotations

import logging

from ._version import __version__
from ._utility import InvariantError, get_logger
from ._fral import PRandomAccessList, \
	PFral, pfral, rl, PLocalFral, plocalfral, lrl

get_logger().addHandler(logging.NullHandler())

__all__ = ('rl', 'pfral', 'PFral', 'lrl', 'plocalfral', 'PLocalFral',
	'PRandomAccessList', 'InvariantError')
