#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
red_black_tree.py
-----------------

A self‑balancing binary search tree based on the **Red‑Black** algorithm.
It behaves like a mutable mapping (key → value) while guaranteeing O(log n)
operations for insert, delete and lookup.

Features
~~~~~~~~
* `tree.insert(key, value)` – returns True if the key was new
* `tree.find(key)`          – ``(value, True)`` or ``(None, False)``
* `tree.remove(key)`        – returns True if something was removed
* `tree[key] = value`, `tree[key]`, `del tree[key]`, `key in tree`
* `len(tree)`, iteration over keys in ascending order, `tree.items()`
* `tree.min_key()`, `tree.max_key()`
* `tree.validate()` – sanity‑check that the red‑black invariants hold

All absent children are the reserved ``NIL`` handle, which always reads as
black and doubles as the parent of the root.  It is never written to, so a
removal fix‑up starting at an empty position tracks that position's parent
explicitly instead of storing it on the sentinel.

Typical usage
~~~~~~~~~~~~~
>>> from red_black_tree import RedBlackTree
>>> rbt = RedBlackTree(lambda a, b: (a > b) - (a < b))
>>> rbt[5] = "five"
>>> rbt[2] = "two"
>>> rbt[8] = "eight"
>>> rbt.min_key()
2
>>> rbt.find(8)
('eight', True)
>>> rbt.remove(5)
True
>>> 5 in rbt
False
"""

from __future__ import annotations

import logging

from binary_search_tree import NIL, BinarySearchTree, K, V

logger = logging.getLogger(__name__)

# ----------------------------------------------------------------------
#  Node colour constants – using simple booleans is fastest
# ----------------------------------------------------------------------
RED = True
BLACK = False


class RedBlackTree(BinarySearchTree[K, V]):
    """
    A mutable mapping implemented with a red‑black binary search tree.

    Invariants kept between calls: the root is black, a red node never has a
    red child, and every root‑to‑``NIL`` path crosses the same number of
    black nodes.
    """

    __slots__ = ()

    _NIL_META = BLACK
    _NEW_META = RED

    # ------------------------------------------------------------------
    #   Insert fix‑up (preserves red‑black properties)
    # ------------------------------------------------------------------
    def _fix_insert(self, z: int) -> None:
        """Restore red‑black properties after inserting node `z` (which is RED)."""
        pool = self._pool
        color = pool.meta
        parent_of = pool.parent
        while color[parent_of[z]] == RED:
            p = parent_of[z]
            g = parent_of[p]  # exists: a red parent is never the root
            if p == pool.left[g]:
                y = pool.right[g]  # uncle
                if color[y] == RED:
                    # Case 1 – recolour and continue from the grandparent
                    color[p] = BLACK
                    color[y] = BLACK
                    color[g] = RED
                    z = g
                    continue
                if z == pool.right[p]:
                    # Case 2 – left‑rotate at parent
                    z = p
                    self._rotate_left(z)
                    p = parent_of[z]
                # Case 3 – right‑rotate at grandparent
                logger.debug("Red-black insert rotation at %r", pool.key[g])
                color[p] = BLACK
                color[g] = RED
                self._rotate_right(g)
            else:  # Mirror of the above (parent is a right child)
                y = pool.left[g]
                if color[y] == RED:
                    color[p] = BLACK
                    color[y] = BLACK
                    color[g] = RED
                    z = g
                    continue
                if z == pool.left[p]:
                    z = p
                    self._rotate_right(z)
                    p = parent_of[z]
                logger.debug("Red-black insert rotation at %r", pool.key[g])
                color[p] = BLACK
                color[g] = RED
                self._rotate_left(g)
        color[self._root] = BLACK

    # ------------------------------------------------------------------
    #   Delete fix‑up (preserves red‑black properties)
    # ------------------------------------------------------------------
    def _fix_remove(self, x: int, parent: int, was_left: bool, removed_meta: int) -> None:
        """
        Restore red‑black properties after unlinking a node.

        Only a black removal can break the black‑height rule.  `x` is the node
        that moved into the removed node's place (possibly ``NIL``) and now
        carries an extra black; `parent` and `was_left` locate it.
        """
        if removed_meta != BLACK:
            return

        pool = self._pool
        color = pool.meta
        left, right = pool.left, pool.right
        is_left = was_left
        while x != self._root and color[x] == BLACK:
            if is_left:
                w = right[parent]  # sibling, never NIL here
                if color[w] == RED:
                    # Case 1 – sibling is red
                    color[w] = BLACK
                    color[parent] = RED
                    self._rotate_left(parent)
                    w = right[parent]
                if color[left[w]] == BLACK and color[right[w]] == BLACK:
                    # Case 2 – both of sibling's children are black
                    color[w] = RED
                    x = parent
                else:
                    if color[right[w]] == BLACK:
                        # Case 3 – sibling's right child is black, left child is red
                        color[left[w]] = BLACK
                        color[w] = RED
                        self._rotate_right(w)
                        w = right[parent]
                    # Case 4 – sibling's right child is red
                    logger.debug("Red-black remove rotation at %r", pool.key[parent])
                    color[w] = color[parent]
                    color[parent] = BLACK
                    color[right[w]] = BLACK
                    self._rotate_left(parent)
                    x = self._root
            else:
                # Mirror of the above, with "left" and "right" swapped
                w = left[parent]
                if color[w] == RED:
                    color[w] = BLACK
                    color[parent] = RED
                    self._rotate_right(parent)
                    w = left[parent]
                if color[right[w]] == BLACK and color[left[w]] == BLACK:
                    color[w] = RED
                    x = parent
                else:
                    if color[left[w]] == BLACK:
                        color[right[w]] = BLACK
                        color[w] = RED
                        self._rotate_left(w)
                        w = left[parent]
                    logger.debug("Red-black remove rotation at %r", pool.key[parent])
                    color[w] = color[parent]
                    color[parent] = BLACK
                    color[left[w]] = BLACK
                    self._rotate_right(parent)
                    x = self._root
            parent = pool.parent[x]
            is_left = parent != NIL and left[parent] == x
        if x != NIL:
            color[x] = BLACK

    # ------------------------------------------------------------------
    #   Validation
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Verify that the tree satisfies all red‑black invariants.
        Raises ``AssertionError`` with a descriptive message if something is broken.
        """
        assert self._pool.meta[NIL] == BLACK, "Sentinel is not black"
        assert self._pool.meta[self._root] == BLACK, "Root is not black"
        super().validate()

    def _check_subtree(self, node: int, left: int, right: int) -> int:
        """Check colours at `node` and return its black height."""
        pool = self._pool
        color = pool.meta
        if color[node] == RED:
            assert color[pool.left[node]] == BLACK, "Red node has red left child"
            assert color[pool.right[node]] == BLACK, "Red node has red right child"
        assert left == right, "Black-height mismatch"
        return left + (1 if color[node] == BLACK else 0)
