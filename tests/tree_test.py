from pyrsistent_fral import pfral, PFral, PLocalFral, InvariantError
from pyrsistent_fral._fral import Tree, Forest, check_forest
import pyrsistent_fral._fral

import logging
import pytest

def make_tree(depth, start=0):
	'''
	build a tree of size 2^depth-1 holding start, start+1, ... in index order
	'''
	if depth == 1:
		return Tree.leaf(start)
	half = (1 << (depth - 1)) - 1
	return Tree.merge(start,
		make_tree(depth - 1, start + 1),
		make_tree(depth - 1, start + 1 + half))

@pytest.mark.parametrize('depth', [1, 2, 3, 4, 5])
def test_get(depth):
	tree = make_tree(depth)
	assert tree._size == (1 << depth) - 1
	for n in range(tree._size):
		assert tree.get(n) == n
	assert list(tree) == list(range(tree._size))
	assert list(reversed(tree)) == list(reversed(range(tree._size)))

def test_get_past_end():
	with pytest.raises(InvariantError): Tree.leaf(0).get(1)
	with pytest.raises(InvariantError): make_tree(2).get(3)

def test_update():
	tree = make_tree(3)
	tree1 = tree.update(5, 'x')
	assert list(tree1) == [0, 1, 2, 3, 4, 'x', 6]
	assert list(tree) == [0, 1, 2, 3, 4, 5, 6]
	assert tree1._left is tree._left
	assert tree1._right is not tree._right
	assert tree1._right._right is tree._right._right
	tree2 = tree.update(0, 'y')
	assert tree2._value == 'y'
	assert tree2._left is tree._left
	assert tree2._right is tree._right
	with pytest.raises(InvariantError): Tree.leaf(0).update(1, 'z')

def test_merge_split():
	left, right = make_tree(2, 1), make_tree(2, 4)
	tree = Tree.merge(0, left, right)
	assert tree._size == 7
	assert tree.split() == (0, left, right)
	with pytest.raises(InvariantError): Tree.merge(0, left, Tree.leaf(4))
	with pytest.raises(InvariantError): Tree.leaf(0).split()

def test_forest():
	forest = None
	for value in reversed(range(10)):
		forest = Forest.cons(forest, value)
	assert [digit._size for digit in forest] == [3, 7]
	assert [forest.get(n) for n in range(10)] == list(range(10))
	with pytest.raises(InvariantError): forest.get(10)
	with pytest.raises(InvariantError): forest.update(10, 'x')
	forest1 = forest.update(8, 'x')
	assert forest1._tree is forest._tree
	assert forest1._next is not forest._next
	assert forest1.get(8) == 'x'
	value, rest = forest.uncons()
	assert value == 0
	assert [digit._size for digit in rest] == [1, 1, 7]
	assert rest._next._next is forest._next

@pytest.mark.parametrize('sizes', [
	[2], [3, 1], [1, 3, 3], [1, 1, 1], [7, 3],
])
def test_check_forest(sizes, caplog):
	forest = None
	for size in reversed(sizes):
		depth = size.bit_length()
		tree = make_tree(depth) if (size + 1) & size == 0 \
			else Tree(size, 0, None, None)
		forest = Forest(size, tree, forest)
	with caplog.at_level(logging.ERROR, logger='pyrsistent_fral'):
		with pytest.raises(InvariantError):
			check_forest(sum(sizes), forest)
	assert any(record.levelno == logging.ERROR for record in caplog.records)

def test_check_size():
	forest = Forest(1, Tree.leaf(0), None)
	check_forest(1, forest)
	with pytest.raises(InvariantError): check_forest(2, forest)
	with pytest.raises(InvariantError):
		check_forest(3, Forest(3, Tree.leaf(0), None))

@pytest.mark.parametrize('cls', [PFral, PLocalFral])
def test_debug_checks(cls, monkeypatch):
	monkeypatch.setattr(pyrsistent_fral._fral, 'debug_checks', True)
	forest = Forest(1, Tree.leaf(0), Forest(1, Tree.leaf(1), None))
	assert cls(2, forest) == [0, 1]
	with pytest.raises(InvariantError): cls(3, forest)
	bad = Forest(3, make_tree(2), Forest(1, Tree.leaf(3), None))
	with pytest.raises(InvariantError): cls(4, bad)
	assert pfral(range(100)).update(50, 'x').get(50) == 'x'

def test_invariant_error():
	assert issubclass(InvariantError, AssertionError)
