#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
avl_tree.py
-----------

A height‑balanced (AVL) ordered map.

Every node stores its balance factor ``height(right) - height(left)``,
which stays in ``{-1, 0, 1}``.  Insertions need at most one single or
double rotation; deletions may rotate at every level on the way up.
Rebalancing walks follow parent links, so no recursion is involved.

>>> from avl_tree import AVLTree
>>> tree = AVLTree(lambda a, b: (a > b) - (a < b))
>>> for key in (1, 10, 5):
...     tree.insert(key, str(key))
True
True
True
>>> list(tree)
[1, 5, 10]
"""

from __future__ import annotations

import logging

from binary_search_tree import NIL, BinarySearchTree, K, V

logger = logging.getLogger(__name__)


class AVLTree(BinarySearchTree[K, V]):
    """Ordered map kept height balanced by AVL rotations."""

    __slots__ = ()

    # ------------------------------------------------------------------
    #   Rotations that keep the stored balance factors exact
    # ------------------------------------------------------------------
    def _rotate_left(self, pivot: int) -> int:
        child = super()._rotate_left(pivot)
        if child != NIL:
            balance = self._pool.meta
            p = balance[pivot] - 1 - max(balance[child], 0)
            balance[child] = balance[child] - 1 + min(p, 0)
            balance[pivot] = p
        return child

    def _rotate_right(self, pivot: int) -> int:
        child = super()._rotate_right(pivot)
        if child != NIL:
            balance = self._pool.meta
            p = balance[pivot] + 1 - min(balance[child], 0)
            balance[child] = balance[child] + 1 + max(p, 0)
            balance[pivot] = p
        return child

    # ------------------------------------------------------------------
    #   Insert fix‑up
    # ------------------------------------------------------------------
    def _fix_insert(self, node: int) -> None:
        """Walk up from the new leaf until some subtree stops growing."""
        pool = self._pool
        balance = pool.meta
        child = node
        parent = pool.parent[child]
        while parent != NIL:
            balance[parent] += -1 if child == pool.left[parent] else 1

            if balance[parent] == 0:
                # Growth cancelled an existing lean, height unchanged.
                return
            if balance[parent] == -2:
                logger.debug("AVL insert rebalance at %r", pool.key[parent])
                if balance[child] == 1:
                    self._rotate_left(child)
                self._rotate_right(parent)
                return
            if balance[parent] == 2:
                logger.debug("AVL insert rebalance at %r", pool.key[parent])
                if balance[child] == -1:
                    self._rotate_right(child)
                self._rotate_left(parent)
                return

            child = parent
            parent = pool.parent[child]

    # ------------------------------------------------------------------
    #   Remove fix‑up
    # ------------------------------------------------------------------
    def _fix_remove(self, child: int, parent: int, was_left: bool, removed_meta: int) -> None:
        """
        Walk up from *parent*, whose *was_left* side just lost one level.

        Unlike insertion a rotation does not end the walk: it only does so
        when the sibling was balanced, because then the rotated subtree keeps
        its height.
        """
        pool = self._pool
        balance = pool.meta
        node = parent
        shrank_left = was_left
        while node != NIL:
            up = pool.parent[node]
            up_left = up != NIL and pool.left[up] == node

            balance[node] += 1 if shrank_left else -1
            lean = balance[node]
            if lean in (-1, 1):
                return
            if lean == 2:
                sibling = pool.right[node]
                sibling_lean = balance[sibling]
                logger.debug("AVL remove rebalance at %r", pool.key[node])
                if sibling_lean == -1:
                    self._rotate_right(sibling)
                self._rotate_left(node)
                if sibling_lean == 0:
                    return
            elif lean == -2:
                sibling = pool.left[node]
                sibling_lean = balance[sibling]
                logger.debug("AVL remove rebalance at %r", pool.key[node])
                if sibling_lean == 1:
                    self._rotate_left(sibling)
                self._rotate_right(node)
                if sibling_lean == 0:
                    return

            node = up
            shrank_left = up_left

    # ------------------------------------------------------------------
    #   Validation
    # ------------------------------------------------------------------
    def _check_subtree(self, node: int, left: int, right: int) -> int:
        stored = self._pool.meta[node]
        key = self._pool.key[node]
        assert stored in (-1, 0, 1), f"Balance factor {stored} out of range at {key!r}"
        assert stored == right - left, (
            f"Stored balance {stored} at {key!r} but subtree heights differ by {right - left}"
        )
        return super()._check_subtree(node, left, right)
