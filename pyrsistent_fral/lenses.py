from __future__ import annotations

from typing import *

from ._fral import PRandomAccessList

from lenses import hooks

T = TypeVar('T')

@hooks.setitem.register(PRandomAccessList)
def _fral_setitem(self:PRandomAccessList[T], index:int, value:T) -> PRandomAccessList[T]:
	return self.set(index, value)
@hooks.contains_add.register(PRandomAccessList)
def _fral_contains_add(self:PRandomAccessList[T], item:T) -> PRandomAccessList[T]:
	return self.cons(item)
@hooks.contains_remove.register(PRandomAccessList)
def _fral_contains_remove(self:PRandomAccessList[T], item:T) -> PRandomAccessList[T]:
	return type(self)._fromitems(i for i in self if item != i)
@hooks.to_iter.register(PRandomAccessList)
def _fral_to_iter(self:PRandomAccessList[T]) -> Iterator[T]:
	return iter(self)
@hooks.from_iter.register(PRandomAccessList)
def _fral_from_iter(self:PRandomAccessList[T], items:Iterator[T]) -> PRandomAccessList[T]:
	return type(self)._fromitems(items)
