#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
binary_search_tree.py
---------------------

Shared machinery for the balanced ordered maps in this package
(``AVLTree``, ``RedBlackTree`` and ``SplayTree``).

Nodes do not exist as Python objects.  Every tree owns a small **node pool**
(an arena of parallel lists) and a node is just an integer *handle* into it.
Handle ``0`` (``NIL``) is reserved: it stands for "no node", it is the parent
of the root, and nothing ever writes to it.  Child and parent links are plain
handles, so the cyclic parent/child relation never creates reference cycles.

What lives here
~~~~~~~~~~~~~~~
* ``_NodePool``          – slot storage with a free list
* ``BinarySearchTree``   – the ordered‑map shell: descent, rotations,
  successor, deletion reduction, iterative in‑order walk, the public
  ``insert`` / ``find`` / ``remove`` contract and the ``dict``‑like protocol.

Subclasses plug in a balancing strategy through three hooks:

* ``_fix_insert(node)``                              – after a new node is linked
* ``_fix_remove(child, parent, was_left, meta)``     – after a node is unlinked
* ``_touch(node)``                                   – after any access (splay)

Keys are ordered by a caller supplied three‑way function ``cmp(a, b)``
returning a negative number, zero or a positive number.  There is no default
ordering; an inconsistent ``cmp`` leaves the tree in an undefined shape.
"""

from __future__ import annotations

import logging
from typing import (
    Callable,
    Dict,
    Generic,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")

#: The reserved empty handle.
NIL = 0


class _NodePool(Generic[K, V]):
    """Arena of node slots addressed by integer handles.  Slot 0 is ``NIL``."""

    __slots__ = ("key", "value", "left", "right", "parent", "meta", "_free")

    def __init__(self, nil_meta: int = 0) -> None:
        self.key: List[Optional[K]] = [None]
        self.value: List[Optional[V]] = [None]
        self.left: List[int] = [NIL]
        self.right: List[int] = [NIL]
        self.parent: List[int] = [NIL]
        # Strategy metadata: balance factor (AVL) or colour (red‑black).
        self.meta: List[int] = [nil_meta]
        self._free: List[int] = []

    def allocate(self, key: K, value: V, parent: int, meta: int) -> int:
        """Return the handle of a fresh childless node."""
        if self._free:
            handle = self._free.pop()
            self.key[handle] = key
            self.value[handle] = value
            self.parent[handle] = parent
            self.meta[handle] = meta
            return handle

        handle = len(self.key)
        self.key.append(key)
        self.value.append(value)
        self.left.append(NIL)
        self.right.append(NIL)
        self.parent.append(parent)
        self.meta.append(meta)
        return handle

    def release(self, handle: int) -> None:
        """Return *handle* to the free list and drop its payload references."""
        self.key[handle] = None
        self.value[handle] = None
        self.left[handle] = NIL
        self.right[handle] = NIL
        self.parent[handle] = NIL
        self._free.append(handle)

    def __len__(self) -> int:
        """Number of slots currently handed out."""
        return len(self.key) - 1 - len(self._free)


class BinarySearchTree(Generic[K, V]):
    """
    An ordered mapping over a binary search tree with pluggable rebalancing.

    This class on its own never rebalances; use one of the concrete trees.
    None of the trees are thread safe: callers sharing one instance between
    threads must serialise every call (including iteration) themselves.

    Parameters
    ----------
    cmp : callable ``(a, b) -> int``
        Three‑way ordering on keys: negative if ``a < b``, zero if equal,
        positive if ``a > b``.  Must be a strict total order.
    """

    __slots__ = ("_cmp", "_pool", "_root", "_size")

    # Metadata stored in the NIL slot and given to every new node.
    _NIL_META: int = 0
    _NEW_META: int = 0

    def __init__(self, cmp: Callable[[K, K], int]) -> None:
        if not callable(cmp):
            raise TypeError(f"cmp must be callable, got {type(cmp).__name__}")
        self._cmp = cmp
        self._pool: _NodePool[K, V] = _NodePool(self._NIL_META)
        self._root: int = NIL
        self._size: int = 0

    # ------------------------------------------------------------------
    #   Core contract
    # ------------------------------------------------------------------
    def insert(self, key: K, value: V) -> bool:
        """
        Store *value* under *key*.

        Returns ``True`` if *key* was new.  An existing key keeps its node;
        only the value is overwritten and ``False`` is returned.
        """
        node, parent, comp = self._locate(key)
        pool = self._pool
        if node != NIL:
            pool.value[node] = value
            self._touch(node)
            return False

        node = pool.allocate(key, value, parent, self._NEW_META)
        if parent == NIL:
            self._root = node
        elif comp < 0:
            pool.left[parent] = node
        else:
            pool.right[parent] = node

        self._size += 1
        self._fix_insert(node)
        return True

    def find(self, key: K) -> Tuple[Optional[V], bool]:
        """
        Look up *key*.

        Returns ``(value, True)`` on a hit and ``(None, False)`` on a miss.
        The flag is authoritative: a stored ``None`` comes back as
        ``(None, True)``.
        """
        node, parent, _ = self._locate(key)
        if node == NIL:
            self._touch(parent)
            return None, False
        self._touch(node)
        return self._pool.value[node], True

    def remove(self, key: K) -> bool:
        """Delete *key*.  Returns ``False`` (and changes nothing) if absent."""
        node, parent, _ = self._locate(key)
        # Splay trees bring the region around *key* to the top first.
        self._touch(parent)
        if node == NIL:
            return False
        self._unlink(node)
        return True

    def __len__(self) -> int:
        return self._size

    def items(self) -> Iterator[Tuple[K, V]]:
        """
        Lazily yield ``(key, value)`` pairs in ascending key order.

        Uses an explicit stack, so memory is bounded by the tree height and
        deep or chain shaped trees never hit the recursion limit.  Every call
        starts a new walk.  The tree must not be modified (and a splay tree
        must not be searched) while a walk is in progress.
        """
        pool = self._pool
        stack: List[int] = []
        cur = self._root
        while stack or cur != NIL:
            while cur != NIL:
                stack.append(cur)
                cur = pool.left[cur]
            cur = stack.pop()
            yield pool.key[cur], pool.value[cur]  # type: ignore[misc]
            cur = pool.right[cur]

    # ------------------------------------------------------------------
    #   dict‑like protocol
    # ------------------------------------------------------------------
    def __contains__(self, key: object) -> bool:
        return self.find(key)[1]  # type: ignore[arg-type]

    def __getitem__(self, key: K) -> V:
        value, found = self.find(key)
        if not found:
            raise KeyError(key)
        return value  # type: ignore[return-value]

    def __setitem__(self, key: K, value: V) -> None:
        self.insert(key, value)

    def __delitem__(self, key: K) -> None:
        if not self.remove(key):
            raise KeyError(key)

    def __bool__(self) -> bool:
        return self._size > 0

    def __iter__(self) -> Iterator[K]:
        """Yield keys in ascending order."""
        for key, _ in self.items():
            yield key

    def keys(self) -> List[K]:
        """Return a list of all keys in sorted order."""
        return list(self)

    def values(self) -> List[V]:
        """Return a list of all values in key order."""
        return [value for _, value in self.items()]

    def min_key(self) -> K:
        """Return the smallest key stored in the tree."""
        return self._pool.key[self._extreme(self._pool.left)]  # type: ignore[return-value]

    def max_key(self) -> K:
        """Return the largest key stored in the tree."""
        return self._pool.key[self._extreme(self._pool.right)]  # type: ignore[return-value]

    def __repr__(self) -> str:
        items = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return f"{type(self).__name__}({{{items}}})"

    # ------------------------------------------------------------------
    #   Shared primitives
    # ------------------------------------------------------------------
    def _locate(self, key: K) -> Tuple[int, int, int]:
        """
        Iterative descent from the root.

        Returns ``(node, parent, comp)``.  On a hit *node* is the matching
        handle and *parent* its parent.  On a miss *node* is ``NIL``,
        *parent* is the last node visited (where *key* would attach) and
        *comp* tells the side: negative for left, positive for right.
        """
        pool = self._pool
        cmp = self._cmp
        parent = NIL
        comp = 0
        cur = self._root
        while cur != NIL:
            comp = cmp(key, pool.key[cur])  # type: ignore[arg-type]
            if comp == 0:
                return cur, pool.parent[cur], comp
            parent = cur
            cur = pool.left[cur] if comp < 0 else pool.right[cur]
        return NIL, parent, comp

    def _extreme(self, side: List[int]) -> int:
        cur = self._root
        if cur == NIL:
            raise ValueError("Tree is empty")
        while side[cur] != NIL:
            cur = side[cur]
        return cur

    def _successor(self, node: int) -> int:
        """Smallest node in the right subtree of *node*, or ``NIL``."""
        pool = self._pool
        cur = pool.right[node]
        if cur == NIL:
            return NIL
        while pool.left[cur] != NIL:
            cur = pool.left[cur]
        return cur

    def _rotate_left(self, pivot: int) -> int:
        """
        Left‑rotate around *pivot*; its right child takes its place.

        Returns the new subtree root, or ``NIL`` (and does nothing) if
        *pivot* or its right child is missing.
        """
        pool = self._pool
        if pivot == NIL or pool.right[pivot] == NIL:
            return NIL
        child = pool.right[pivot]

        inner = pool.left[child]
        pool.right[pivot] = inner
        if inner != NIL:
            pool.parent[inner] = pivot

        parent = pool.parent[pivot]
        pool.parent[child] = parent
        if parent == NIL:
            self._root = child
        elif pool.left[parent] == pivot:
            pool.left[parent] = child
        else:
            pool.right[parent] = child

        pool.left[child] = pivot
        pool.parent[pivot] = child
        return child

    def _rotate_right(self, pivot: int) -> int:
        """Mirror of ``_rotate_left``; the left child takes *pivot*'s place."""
        pool = self._pool
        if pivot == NIL or pool.left[pivot] == NIL:
            return NIL
        child = pool.left[pivot]

        inner = pool.right[child]
        pool.left[pivot] = inner
        if inner != NIL:
            pool.parent[inner] = pivot

        parent = pool.parent[pivot]
        pool.parent[child] = parent
        if parent == NIL:
            self._root = child
        elif pool.right[parent] == pivot:
            pool.right[parent] = child
        else:
            pool.left[parent] = child

        pool.right[child] = pivot
        pool.parent[pivot] = child
        return child

    def _unlink(self, node: int) -> None:
        """
        Physically remove *node*, reducing the two‑children case first.

        A node with two children takes over its successor's payload and the
        successor (which has no left child) is removed instead.
        """
        pool = self._pool
        if pool.left[node] != NIL and pool.right[node] != NIL:
            succ = self._successor(node)
            logger.debug("Removing %r via successor %r", pool.key[node], pool.key[succ])
            pool.key[node] = pool.key[succ]
            pool.value[node] = pool.value[succ]
            node = succ

        child = pool.left[node] if pool.left[node] != NIL else pool.right[node]
        parent = pool.parent[node]
        was_left = parent != NIL and pool.left[parent] == node

        if child != NIL:
            pool.parent[child] = parent
        if parent == NIL:
            self._root = child
        elif was_left:
            pool.left[parent] = child
        else:
            pool.right[parent] = child

        removed_meta = pool.meta[node]
        pool.release(node)
        self._size -= 1
        self._fix_remove(child, parent, was_left, removed_meta)

    # ------------------------------------------------------------------
    #   Strategy hooks
    # ------------------------------------------------------------------
    def _fix_insert(self, node: int) -> None:
        """Restore the strategy invariant after *node* was linked in."""

    def _fix_remove(self, child: int, parent: int, was_left: bool, removed_meta: int) -> None:
        """
        Restore the strategy invariant after a node was unlinked.

        *child* is the node that moved into the vacated position (may be
        ``NIL``), *parent* its new parent, *was_left* the side of *parent*
        that shrank and *removed_meta* the metadata of the removed node.
        """

    def _touch(self, node: int) -> None:
        """Called with the accessed node (or last visited node, may be ``NIL``)."""

    # ------------------------------------------------------------------
    #   Validation
    # ------------------------------------------------------------------
    def validate(self) -> None:
        """
        Verify the structural invariants of the tree.

        Raises ``AssertionError`` describing the first violation found.
        Subclasses add their own checks through ``_check_subtree``.
        """
        pool = self._pool
        root = self._root
        assert pool.parent[root] == NIL, "Root has a parent"

        # Post‑order walk with an explicit stack.
        summary: Dict[int, int] = {}
        stack: List[Tuple[int, bool]] = [(root, False)] if root != NIL else []
        count = 0
        while stack:
            node, expanded = stack.pop()
            left, right = pool.left[node], pool.right[node]
            if not expanded:
                stack.append((node, True))
                for child in (right, left):
                    if child != NIL:
                        assert pool.parent[child] == node, (
                            f"Parent link of {pool.key[child]!r} is broken"
                        )
                        stack.append((child, False))
                continue
            count += 1
            summary[node] = self._check_subtree(
                node,
                summary.pop(left) if left != NIL else 0,
                summary.pop(right) if right != NIL else 0,
            )

        assert count == self._size, f"Size is {self._size} but {count} nodes are reachable"
        assert len(pool) == self._size, "Node pool leaked slots"

        previous: Optional[Tuple[K, V]] = None
        for pair in self.items():
            if previous is not None:
                assert self._cmp(previous[0], pair[0]) < 0, (
                    f"BST property violated ({previous[0]!r} before {pair[0]!r})"
                )
            previous = pair

    def _check_subtree(self, node: int, left: int, right: int) -> int:
        """
        Check *node* given the summaries of its subtrees and return its own.

        The base summary is the subtree height (``NIL`` has height 0).
        """
        return 1 + max(left, right)
