#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
test_red_black_tree.py
---------------------

Exercises the RedBlackTree implementation with tests covering:

* basic CRUD (insert, lookup, delete) through both APIs
* duplicate‑key replacement
* shape and colours after the classic insertion cases
* randomised bulk insert/delete compared against Python's built‑in dict
* validation of red‑black invariants after each operation
* detection of hand‑made colour corruption
"""

import itertools
import random
import unittest

from binary_search_tree import NIL
from red_black_tree import RedBlackTree, RED, BLACK


def compare(a, b):
    return (a > b) - (a < b)


class TestRedBlackTree(unittest.TestCase):
    def make(self, keys=()):
        rbt = RedBlackTree[int, str](compare)
        for k in keys:
            rbt[k] = str(k)
        return rbt

    def node(self, rbt, key):
        handle, _, _ = rbt._locate(key)
        return handle

    def color(self, rbt, key):
        return rbt._pool.meta[self.node(rbt, key)]

    # ------------------------------------------------------------------
    #  Basic CRUD
    # ------------------------------------------------------------------
    def test_insert_and_lookup(self):
        rbt = self.make()
        rbt[10] = "ten"
        rbt[5] = "five"
        rbt[20] = "twenty"

        self.assertEqual(rbt[10], "ten")
        self.assertEqual(rbt[5], "five")
        self.assertEqual(rbt[20], "twenty")
        self.assertEqual(len(rbt), 3)

    def test_duplicate_key_replaces_value(self):
        rbt = self.make()
        self.assertTrue(rbt.insert(1, "a"))
        self.assertFalse(rbt.insert(1, "b"))  # replace
        self.assertEqual(rbt[1], "b")
        self.assertEqual(len(rbt), 1)

    def test_delete(self):
        rbt = self.make(range(5))
        del rbt[2]
        self.assertNotIn(2, rbt)
        self.assertEqual(len(rbt), 4)

        # Deleting non‑existent key must raise, remove() just reports it
        with self.assertRaises(KeyError):
            del rbt[99]
        self.assertFalse(rbt.remove(99))
        self.assertEqual(len(rbt), 4)

    # ------------------------------------------------------------------
    #  Shape and colours
    # ------------------------------------------------------------------
    def test_three_keys_in_every_order(self):
        for order in itertools.permutations((1, 10, 5)):
            with self.subTest(order=order):
                rbt = self.make(order)
                pool = rbt._pool
                root = rbt._root
                self.assertEqual(
                    (pool.key[root], pool.key[pool.left[root]], pool.key[pool.right[root]]),
                    (5, 1, 10),
                )
                self.assertEqual(self.color(rbt, 5), BLACK)
                self.assertEqual(self.color(rbt, 1), RED)
                self.assertEqual(self.color(rbt, 10), RED)
                rbt.validate()

    def test_red_uncle_recolours(self):
        rbt = self.make([10, 5, 15, 2])
        self.assertEqual(rbt._pool.key[rbt._root], 10)
        self.assertEqual(self.color(rbt, 10), BLACK)
        self.assertEqual(self.color(rbt, 5), BLACK)
        self.assertEqual(self.color(rbt, 15), BLACK)
        self.assertEqual(self.color(rbt, 2), RED)
        rbt.validate()

    def test_new_root_is_black(self):
        rbt = self.make([42])
        self.assertEqual(self.color(rbt, 42), BLACK)
        self.assertEqual(rbt._pool.parent[rbt._root], NIL)

    def test_removing_red_leaf_needs_no_fix(self):
        rbt = self.make([10, 5, 15, 2])
        rbt.remove(2)
        self.assertEqual(self.color(rbt, 5), BLACK)
        self.assertEqual(self.color(rbt, 15), BLACK)
        rbt.validate()

    def test_removing_black_leaf_rebalances(self):
        rbt = self.make([10, 5, 15, 12, 20])
        rbt.remove(5)
        pool = rbt._pool
        root = rbt._root
        self.assertEqual(pool.key[root], 15)
        self.assertEqual(pool.key[pool.left[root]], 10)
        self.assertEqual(pool.key[pool.right[root]], 20)
        self.assertEqual(self.color(rbt, 12), RED)
        rbt.validate()

    # ------------------------------------------------------------------
    #  Iteration / order
    # ------------------------------------------------------------------
    def test_inorder_iteration(self):
        rbt = self.make()
        for k, v in [(7, "seven"), (3, "three"), (9, "nine"), (1, "one")]:
            rbt[k] = v

        # Keys should be emitted in ascending order
        self.assertEqual(list(rbt), [1, 3, 7, 9])

        # Items should be sorted by key as well
        self.assertEqual(
            list(rbt.items()), [(1, "one"), (3, "three"), (7, "seven"), (9, "nine")]
        )

    # ------------------------------------------------------------------
    #  Randomised stress test vs. Python dict
    # ------------------------------------------------------------------
    def test_random_operations_against_dict(self):
        random.seed(12345)
        rbt = RedBlackTree[int, int](compare)
        reference = {}  # normal dict for ground truth

        ops = 10_000
        key_range = range(0, 500)

        for step in range(ops):
            op = random.choice(["insert", "delete"])
            k = random.choice(key_range)
            if op == "insert":
                v = random.randint(-1_000, 1_000)
                rbt[k] = v
                reference[k] = v
            else:  # delete
                if k in reference:
                    del rbt[k]
                    del reference[k]

            # Validate red‑black invariants every few mutations
            if step % 10 == 0:
                rbt.validate()

        rbt.validate()

        # Final check – the entire contents must match
        self.assertEqual(set(rbt.keys()), set(reference.keys()))
        for k in reference:
            self.assertEqual(rbt[k], reference[k])

        # Verify iteration order matches sorted order of keys
        self.assertEqual(list(rbt), sorted(reference.keys()))

    # ------------------------------------------------------------------
    #  Explicit validation of invariants on a crafted tree
    # ------------------------------------------------------------------
    def test_validate_simple_tree(self):
        rbt = self.make([10, 5, 15, 2, 7, 12, 20])
        meta = rbt._pool.meta

        # Should not raise
        rbt.validate()

        # Manually corrupt the tree and ensure validate detects it
        # (example: make root red)
        meta[rbt._root] = RED
        with self.assertRaises(AssertionError):
            rbt.validate()

        # Restore proper colour
        meta[rbt._root] = BLACK
        rbt.validate()

        # Violate black‑height: 2 and 7 are red leaves under 5, blacken one
        two = self.node(rbt, 2)
        self.assertEqual(meta[two], RED)
        meta[two] = BLACK
        with self.assertRaises(AssertionError):
            rbt.validate()
        meta[two] = RED

        # Red parent with red children
        meta[self.node(rbt, 5)] = RED
        with self.assertRaises(AssertionError):
            rbt.validate()

    # ------------------------------------------------------------------
    #  Clear operation
    # ------------------------------------------------------------------
    def test_clear_by_deleting_all(self):
        rbt = self.make(range(20))

        # Delete everything one by one
        for i in range(20):
            del rbt[i]
            rbt.validate()

        self.assertEqual(len(rbt), 0)
        self.assertFalse(bool(rbt))

        # Even after deleting everything the sentinel is still healthy
        self.assertEqual(rbt._pool.meta[NIL], BLACK)
        rbt.validate()


if __name__ == "__main__":
    unittest.main(verbosity=2)
