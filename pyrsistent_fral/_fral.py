from __future__ import annotations
from typing import Sequence, Iterable, Iterator, Hashable, ContextManager, \
	ClassVar, TypeVar, Generic, Optional, Tuple, List, Any, cast, overload

import contextlib
import threading

from ._utility import InvariantError, compare_iter, normalize_index, \
	check_index, get_logger, sphinx_build, debug_checks

T = TypeVar('T')

logger = get_logger('fral')

class Tree(Generic[T]):
	# complete binary tree holding a value at every node
	# sizes are always 2^k-1 and both children have the same size

	# indices are assigned in preorder, so for a tree of size 7
	#       0
	#     /   \
	#    1     4
	#   / \   / \
	#  2   3 5   6

	__slots__ = ('_size', '_value', '_left', '_right')

	_size: int
	_value: T
	_left: Optional[Tree[T]]
	_right: Optional[Tree[T]]

	def __new__(cls, size:int, value:T,
			left:Optional[Tree[T]], right:Optional[Tree[T]]):
		self = super().__new__(cls)
		self._size = size
		self._value = value
		self._left = left
		self._right = right
		return self

	@staticmethod
	def leaf(value:T) -> Tree[T]:
		return Tree(1, value, None, None)

	@staticmethod
	def merge(value:T, left:Tree[T], right:Tree[T]) -> Tree[T]:
		if left._size != right._size:
			raise InvariantError('cannot merge trees of sizes {} and {}'
				.format(left._size, right._size))
		return Tree(2 * left._size + 1, value, left, right)

	def split(self) -> Tuple[T, Tree[T], Tree[T]]:
		if self._left is None or self._right is None:
			raise InvariantError('leaf tree is not splittable')
		return self._value, self._left, self._right

	def get(self, index:int) -> T:
		tree = self
		while index != 0:
			if tree._left is None or tree._right is None:
				raise InvariantError('index past the end of a tree')
			half = tree._size // 2
			if index <= half:
				tree, index = tree._left, index - 1
			else:
				tree, index = tree._right, index - 1 - half
		return tree._value

	def update(self, index:int, value:T) -> Tree[T]:
		if index == 0:
			return Tree(self._size, value, self._left, self._right)
		if self._left is None or self._right is None:
			raise InvariantError('index past the end of a tree')
		half = self._size // 2
		if index <= half:
			return Tree(self._size, self._value,
				self._left.update(index - 1, value), self._right)
		return Tree(self._size, self._value,
			self._left, self._right.update(index - 1 - half, value))

	def __iter__(self) -> Iterator[T]:
		stack = [self]
		while stack:
			tree = stack.pop()
			yield tree._value
			if tree._left is not None and tree._right is not None:
				stack.append(tree._right)
				stack.append(tree._left)

	def __reversed__(self) -> Iterator[T]:
		stack = [(self, False)]
		while stack:
			tree, visited = stack.pop()
			if visited or tree._left is None or tree._right is None:
				yield tree._value
				continue
			stack.append((tree, True))
			stack.append((tree._left, False))
			stack.append((tree._right, False))

class Forest(Generic[T]):
	# one digit of the skew binary numeral, linked to the next larger digit

	# only the first two digits may have the same size,
	# every later digit is strictly larger than the one before it

	__slots__ = ('_size', '_tree', '_next')

	_size: int
	_tree: Tree[T]
	_next: Optional[Forest[T]]

	def __new__(cls, size:int, tree:Tree[T], next:Optional[Forest[T]]):
		self = super().__new__(cls)
		self._size = size
		self._tree = tree
		self._next = next
		return self

	def cons(self:Optional[Forest[T]], value:T) -> Forest[T]:
		if self is not None and self._next is not None \
				and self._size == self._next._size:
			rest = self._next
			return Forest(2 * self._size + 1,
				Tree.merge(value, self._tree, rest._tree), rest._next)
		return Forest(1, Tree.leaf(value), self)

	def uncons(self:Forest[T]) -> Tuple[T, Optional[Forest[T]]]:
		if self._size == 1:
			return self._tree._value, self._next
		value, left, right = self._tree.split()
		half = self._size // 2
		return value, Forest(half, left, Forest(half, right, self._next))

	def get(self:Forest[T], index:int) -> T:
		forest: Optional[Forest[T]] = self
		while forest is not None:
			if index < forest._size:
				return forest._tree.get(index)
			index -= forest._size
			forest = forest._next
		raise InvariantError('index past the end of a forest')

	def update(self:Forest[T], index:int, value:T) -> Forest[T]:
		if index < self._size:
			return Forest(self._size,
				self._tree.update(index, value), self._next)
		if self._next is None:
			raise InvariantError('index past the end of a forest')
		return Forest(self._size, self._tree,
			self._next.update(index - self._size, value))

	def __iter__(self) -> Iterator[Forest[T]]:
		forest: Optional[Forest[T]] = self
		while forest is not None:
			yield forest
			forest = forest._next

def check_forest(size:int, forest:Optional[Forest[Any]]) -> None:
	'''
	Validate the digit sizes of a forest against the skew binary invariant

	:math:`O(\\log{n})`, the trees themselves are not walked.
	'''
	total, sizes = 0, []
	for digit in forest or ():
		if digit._size != digit._tree._size:
			logger.error('digit of size %d holds a tree of size %d',
				digit._size, digit._tree._size)
			raise InvariantError('digit and tree sizes differ')
		if digit._size < 1 or (digit._size + 1) & digit._size != 0:
			logger.error('digit size %d is not of the form 2^k-1', digit._size)
			raise InvariantError('digit size is not of the form 2^k-1')
		sizes.append(digit._size)
		total += digit._size
	for n in range(1, len(sizes)):
		if sizes[n - 1] > sizes[n] or (n > 1 and sizes[n - 1] == sizes[n]):
			logger.error('digit sizes %s are not a skew binary numeral', sizes)
			raise InvariantError('digit sizes are not a skew binary numeral')
	if total != size:
		logger.error('list of size %d holds %d items', size, total)
		raise InvariantError('list size does not match its digits')

class PRandomAccessList(Generic[T], Sequence[T], Hashable):
	r'''
	Persistent random-access list

	Meant for cases where a persistent stack also needs fast
	indexing and point updates.

	Do not instantiate directly, instead use the factory
	functions :func:`rl` or :func:`pfral` to create a thread-safe
	:class:`PFral`, and :func:`lrl` or :func:`plocalfral`
	to create a single-threaded :class:`PLocalFral`.

	Both variants implement the :class:`python:typing.Sequence`
	protocol and are :class:`python:typing.Hashable`.

	The implementation is a skew binary random-access list described in

		Chris Okasaki,
		"Purely Functional Random-Access Lists",
		Functional Programming Languages and Computer Architecture (1995)
		pp 86-95.

	Adding or removing an item at the front (:meth:`cons`, :meth:`uncons`)
	is :math:`O(1)`, while getting or replacing an item anywhere
	(:meth:`get`, :meth:`update`) is :math:`O(\log{n})`.
	No operation modifies an existing list: every new list shares
	all unchanged structure with the list it came from.

	The following are examples of some common operations on random-access lists:

	>>> xs1 = pfral([2, 3])
	>>> xs2 = xs1.cons(1)
	>>> xs1
	pfral([2, 3])
	>>> xs2
	pfral([1, 2, 3])
	>>> xs2.get(2)
	3
	>>> xs2.update(0, 0)
	pfral([0, 2, 3])
	>>> head, tail = xs2.uncons()
	>>> (head, tail)
	(1, pfral([2, 3]))
	'''

	__slots__ = ('_size', '_forest', '_hash')

	if not sphinx_build:
		_size: int
		_forest: Optional[Forest[T]]
		_hash: Optional[int]

	_name: ClassVar[str] = cast(Any, None)
	_lock: ClassVar[ContextManager[Any]] = cast(Any, None)
	_empty: ClassVar[PRandomAccessList[Any]] = cast(Any, None)

	def __new__(cls, _size, _forest):
		if debug_checks:
			check_forest(_size, _forest)
		self = super().__new__(cls)
		self._size = _size
		self._forest = _forest
		self._hash = None
		return self

	def cons(self, value:T) -> PRandomAccessList[T]:
		r'''
		Insert an item at the front of the list

		:math:`O(1)`

		>>> pfral([2, 3]).cons(1)
		pfral([1, 2, 3])
		'''
		return type(self)(self._size + 1, Forest.cons(self._forest, value))

	def uncons(self) -> Optional[Tuple[T, PRandomAccessList[T]]]:
		r'''
		Split the list into its first item and the rest

		:math:`O(1)`

		Returns ``None`` if the list is empty, see :meth:`viewleft`
		for a version that raises instead.

		>>> pfral([1, 2, 3]).uncons()
		(1, pfral([2, 3]))
		>>> pfral().uncons() is None
		True
		'''
		if self._forest is None:
			return None
		value, forest = self._forest.uncons()
		if forest is None:
			return value, self._empty
		return value, type(self)(self._size - 1, forest)

	def viewleft(self) -> Tuple[T, PRandomAccessList[T]]:
		r'''
		Split the list into its first item and the rest

		:math:`O(1)`

		:raises IndexError: if the list is empty

		>>> pfral([1, 2, 3]).viewleft()
		(1, pfral([2, 3]))
		>>> pfral().viewleft()
		Traceback (most recent call last):
		...
		IndexError: ...
		'''
		result = self.uncons()
		if result is None:
			raise IndexError('uncons from empty list')
		return result

	@property
	def left(self) -> T:
		r'''
		The first item of the list

		:math:`O(1)`

		:raises IndexError: if the list is empty

		>>> pfral([1, 2, 3]).left
		1
		'''
		if self._forest is None:
			raise IndexError('peek from empty list')
		return self._forest._tree._value

	def get(self, index:int, default:Optional[T]=None) -> Optional[T]:
		r'''
		Get the item at the specified position

		:math:`O(\log{n})`

		Negative indices count from the back of the list.
		Returns ``default`` if the index is out of range.

		>>> pfral([1, 2, 3]).get(1)
		2
		>>> pfral([1, 2, 3]).get(-1)
		3
		>>> pfral([1, 2, 3]).get(3) is None
		True
		'''
		idx = normalize_index(self._size, index)
		if idx is None:
			return default
		return cast(Forest[T], self._forest).get(idx)

	def update(self, index:int, value:T) -> Optional[PRandomAccessList[T]]:
		r'''
		Replace the item at the specified position

		:math:`O(\log{n})`

		Negative indices count from the back of the list.
		Returns ``None`` if the index is out of range,
		see :meth:`set` for a version that raises instead.

		>>> pfral([1, 2, 3]).update(1, 0)
		pfral([1, 0, 3])
		>>> pfral([1, 2, 3]).update(3, 0) is None
		True
		'''
		idx = normalize_index(self._size, index)
		if idx is None:
			return None
		return type(self)(self._size,
			cast(Forest[T], self._forest).update(idx, value))

	def set(self, index:int, value:T) -> PRandomAccessList[T]:
		r'''
		Replace the item at the specified position

		:math:`O(\log{n})`

		:raises IndexError: if the index is out of range

		>>> pfral([1, 2, 3]).set(-1, 0)
		pfral([1, 2, 0])
		>>> pfral([1, 2, 3]).set(3, 0)
		Traceback (most recent call last):
		...
		IndexError: ...
		'''
		idx = check_index(self._size, index)
		return type(self)(self._size,
			cast(Forest[T], self._forest).update(idx, value))

	@overload
	def __getitem__(self, index:int) -> T: ...
	@overload
	def __getitem__(self, index:slice) -> PRandomAccessList[T]: ...
	def __getitem__(self, index):
		r'''
		Get the item(s) at the specified position(s)

		:math:`O(\log{n})` getting a single item,
		:math:`O(n)` getting a slice

		:raises IndexError: if the index is out of range

		>>> pfral([1, 2, 3, 4])[2]
		3
		>>> pfral([1, 2, 3, 4])[1:3]
		pfral([2, 3])
		>>> pfral([1, 2, 3, 4])[4]
		Traceback (most recent call last):
		...
		IndexError: ...
		'''
		if isinstance(index, slice):
			return type(self)._fromitems(self.tolist()[index])
		idx = check_index(self._size, index)
		return cast(Forest[T], self._forest).get(idx)

	def __len__(self) -> int:
		r'''
		Get the length of the list

		:math:`O(1)`

		>>> len(pfral([1, 2, 3]))
		3
		'''
		return self._size

	def __bool__(self) -> bool:
		return self._size != 0

	def __iter__(self) -> Iterator[T]:
		r'''
		Iterate through the list from front to back

		:math:`O(1)` per item, without modifying the list

		>>> list(pfral([1, 2, 3]))
		[1, 2, 3]
		'''
		for digit in self._forest or ():
			yield from digit._tree

	def __reversed__(self) -> Iterator[T]:
		r'''
		Iterate through the list from back to front

		>>> list(reversed(pfral([1, 2, 3])))
		[3, 2, 1]
		'''
		digits: List[Forest[T]] = list(self._forest or ())
		for digit in reversed(digits):
			yield from reversed(digit._tree)

	def __contains__(self, value) -> bool:
		return any(value is item or value == item for item in self)

	def index(self, value:Any, start:int=0, stop:Optional[int]=None) -> int:
		r'''
		Find the position of the first occurrence of a value

		:math:`O(n)`

		:raises ValueError: if the value is not present

		>>> pfral([1, 2, 3, 2]).index(2)
		1
		'''
		start, stop, _ = slice(start, stop).indices(self._size)
		for idx, item in enumerate(self):
			if idx >= stop: break
			if idx >= start and (value is item or value == item):
				return idx
		raise ValueError('{!r} is not in list'.format(value))

	def tolist(self) -> List[T]:
		return list(self)

	def totuple(self) -> Tuple[T, ...]:
		return tuple(self)

	def __eq__(self, other) -> bool:
		r'''
		:math:`O(n)`. Return self == other.

		Compares equal to any iterable with the same items.

		>>> pfral([1, 2, 3]) == plocalfral([1, 2, 3])
		True
		>>> pfral([1, 2, 3]) == [1, 2, 4]
		False
		'''
		result = compare_iter(self, other, True)
		if result is NotImplemented: return NotImplemented
		return result == 0
	def __ne__(self, other) -> bool:
		result = compare_iter(self, other, True)
		if result is NotImplemented: return NotImplemented
		return result != 0
	def __gt__(self, other) -> bool:
		result = compare_iter(self, other, False)
		if result is NotImplemented: return NotImplemented
		return result > 0
	def __ge__(self, other) -> bool:
		result = compare_iter(self, other, False)
		if result is NotImplemented: return NotImplemented
		return result >= 0
	def __lt__(self, other) -> bool:
		result = compare_iter(self, other, False)
		if result is NotImplemented: return NotImplemented
		return result < 0
	def __le__(self, other) -> bool:
		result = compare_iter(self, other, False)
		if result is NotImplemented: return NotImplemented
		return result <= 0

	def __hash__(self) -> int:
		r'''
		Calculate the hash of the list.

		:math:`O(n)` the first time, :math:`O(1)` afterwards

		>>> hash(pfral([1, 2, 3])) == hash(plocalfral([1, 2, 3]))
		True
		'''
		if self._hash is None:
			value = hash(self.totuple())
			with self._lock:
				if self._hash is None:
					self._hash = value
		return cast(int, self._hash)

	def __repr__(self) -> str:
		return '{}({})'.format(self._name, self.tolist())

	__str__ = __repr__

	def __reduce__(self):
		r'''
		Support method for :mod:`python:pickle`

		:math:`O(n)`

		>>> import pickle
		>>> pickle.loads(pickle.dumps(pfral([1, 2, 3])))
		pfral([1, 2, 3])
		'''
		return globals()[self._name], (self.tolist(),)

	@classmethod
	def _fromitems(cls, items:Optional[Iterable[T]]) -> PRandomAccessList[T]:
		if items is None:
			return cls._empty
		if isinstance(items, cls):
			return items
		if isinstance(items, PRandomAccessList):
			if items._forest is None: return cls._empty
			return cls(items._size, items._forest)
		values = list(items)
		if not values:
			return cls._empty
		forest: Optional[Forest[T]] = None
		for value in reversed(values):
			forest = Forest.cons(forest, value)
		logger.debug('built %s of size %d', cls._name, len(values))
		return cls(len(values), forest)

class PFral(PRandomAccessList[T]):
	__doc__ = PRandomAccessList.__doc__
	__slots__ = ()
	_name: ClassVar[str] = 'pfral'
	_lock: ClassVar[ContextManager[Any]] = threading.Lock()
	_empty: ClassVar[PFral[Any]] = cast(Any, None)
PFral._empty = PFral(0, None)

def pfral(items:Optional[Iterable[T]]=None) -> PFral[T]:
	r'''
	Create a thread-safe :class:`PFral` from the given items

	:math:`O(n)`, or :math:`O(1)` when converting a :class:`PLocalFral`

	The first item of ``items`` becomes index 0.

	>>> pfral()
	pfral([])
	>>> pfral([1, 2, 3])
	pfral([1, 2, 3])
	'''
	return cast(PFral, PFral._fromitems(items))

def rl(*items:T) -> PFral[T]:
	'''
	Shorthand for :func:`pfral`

	Mnemonic: Random-access List

	>>> rl(1, 2, 3)
	pfral([1, 2, 3])
	'''
	return pfral(items)

class PLocalFral(PRandomAccessList[T]):
	__doc__ = PRandomAccessList.__doc__
	__slots__ = ()
	_name: ClassVar[str] = 'plocalfral'
	_lock: ClassVar[ContextManager[Any]] = contextlib.nullcontext()
	_empty: ClassVar[PLocalFral[Any]] = cast(Any, None)
PLocalFral._empty = PLocalFral(0, None)

def plocalfral(items:Optional[Iterable[T]]=None) -> PLocalFral[T]:
	r'''
	Create a single-threaded :class:`PLocalFral` from the given items

	:math:`O(n)`, or :math:`O(1)` when converting a :class:`PFral`

	A :class:`PLocalFral` must not be shared between threads,
	convert it with :func:`pfral` first.

	>>> plocalfral()
	plocalfral([])
	>>> plocalfral([1, 2, 3])
	plocalfral([1, 2, 3])
	'''
	return cast(PLocalFral, PLocalFral._fromitems(items))

def lrl(*items:T) -> PLocalFral[T]:
	'''
	Shorthand for :func:`plocalfral`

	Mnemonic: Local Random-access List

	>>> lrl(1, 2, 3)
	plocalfral([1, 2, 3])
	'''
	return plocalfral(items)

__all__: Tuple[str, ...] = ('rl', 'pfral', 'PFral',
	'lrl', 'plocalfral', 'PLocalFral', 'PRandomAccessList')
if sphinx_build: __all__ += ('Tree', 'Forest')
