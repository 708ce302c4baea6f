#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
splay_tree.py
-------------

A self‑adjusting (splay) ordered map.

Splay trees keep no balance information.  Every access rotates the touched
node all the way to the root, so recently used keys are cheap to reach and
any sequence of operations costs O(log n) amortised per operation, even
though a single operation can be linear and the tree can become a chain.

* a successful ``find`` / ``insert`` splays the node holding the key
* a failed ``find`` splays the last node visited on the way down
* ``remove`` splays the removed node's parent before excising it
"""

from __future__ import annotations

from binary_search_tree import NIL, BinarySearchTree, K, V


class SplayTree(BinarySearchTree[K, V]):
    """Ordered map that moves every accessed node to the root."""

    __slots__ = ()

    def _splay(self, node: int) -> None:
        """Rotate *node* up until it is the root."""
        pool = self._pool
        left = pool.left
        while True:
            parent = pool.parent[node]
            if parent == NIL:
                return
            grand = pool.parent[parent]
            node_is_left = left[parent] == node

            if grand == NIL:
                # zig
                if node_is_left:
                    self._rotate_right(parent)
                else:
                    self._rotate_left(parent)
            elif node_is_left and left[grand] == parent:
                # zig-zig: the grandparent goes first
                self._rotate_right(grand)
                self._rotate_right(parent)
            elif not node_is_left and pool.right[grand] == parent:
                self._rotate_left(grand)
                self._rotate_left(parent)
            elif not node_is_left:
                # zig-zag
                self._rotate_left(parent)
                self._rotate_right(grand)
            else:
                self._rotate_right(parent)
                self._rotate_left(grand)

    def _fix_insert(self, node: int) -> None:
        self._splay(node)

    def _touch(self, node: int) -> None:
        if node != NIL:
            self._splay(node)

    def root_key(self) -> K:
        """Key currently at the root, i.e. the most recently accessed one."""
        if self._root == NIL:
            raise ValueError("Tree is empty")
        return self._pool.key[self._root]  # type: ignore[return-value]
