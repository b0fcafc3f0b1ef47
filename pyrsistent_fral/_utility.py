from abc import abstractmethod
from typing import Any, Iterator, TypeVar, Optional, Union, Tuple
from typing_extensions import Protocol

import builtins
import logging
import os

class Comparable(Protocol):
	@abstractmethod
	def __lt__(self, other: Any) -> bool: ...
	@abstractmethod
	def __eq__(self, other: Any) -> bool: ...

K = TypeVar('K', bound=Comparable)

class InvariantError(AssertionError):
	'''
	Raised when the internal structure of a list is broken.

	This always indicates a bug in :mod:`pyrsistent_fral`, never bad input.
	'''

def get_logger(name:Optional[str]=None) -> logging.Logger:
	if name is None: return logging.getLogger('pyrsistent_fral')
	return logging.getLogger('pyrsistent_fral.' + name)

def compare_single(x:K, y:K, equality:bool) -> int:
	if x == y: return 0
	if equality or x < y: return -1
	return 1

def compare_next(xs:Iterator[Any], ys:Iterator[Any]) -> Union[int,Tuple[Any,Any]]:
	try:
		x = next(xs)
	except StopIteration:
		try:
			next(ys)
		except StopIteration:
			return 0
		else:
			return -1
	try:
		y = next(ys)
	except StopIteration:
		return 1
	return x, y

def compare_iter(xs:Any, ys:Any, equality:bool) -> int:
	if equality:
		if xs is ys: return 0
		try:
			xl, yl = len(xs), len(ys)
		except TypeError:
			pass
		else:
			if xl != yl: return 1
	try:
		xs, ys = iter(xs), iter(ys)
	except TypeError:
		return NotImplemented
	while True:
		n = compare_next(xs, ys)
		if isinstance(n, int): return n
		c = compare_single(*n, equality)
		if c != 0: return c

def normalize_index(length:int, index:int) -> Optional[int]:
	if not isinstance(index, int):
		raise TypeError('list indices must be integers, not '
			+ type(index).__name__)
	idx = index
	if idx < 0:
		idx += length
	if not (0 <= idx < length):
		return None
	return idx

def check_index(length:int, index:int) -> int:
	idx = normalize_index(length, index)
	if idx is None:
		raise IndexError('index out of range: ' + str(index))
	return idx

sphinx_build: bool = getattr(builtins, '__sphinx_build__', False)

debug_checks: bool = bool(os.environ.get('PYRSISTENT_FRAL_DEBUG'))
