import unittest
import math


import amlpy as ap
from amlpy.expressions.core import Comparison, Operator
from amlpy.expressions.functions import FunctionCall, UserFunction
from amlpy.expressions.utils import eval_comparison, flatlist, argvals


class TestComparison(unittest.TestCase):
    def setUp(self):
        self.x = ap.floatvar(0, 10, name="x")
        self.y = ap.floatvar(0, 10, name="y")

    def test_operators(self):
        for op, name in [(self.x == self.y, "=="), (self.x <= self.y, "<="), (self.x < self.y, "<"),
                         (self.x >= self.y, ">="), (self.x > self.y, ">")]:
            self.assertIsInstance(op, Comparison)
            self.assertEqual(op.name, name)
            self.assertTrue(op.is_bool())

    def test_reversed_constant(self):
        # python swaps the operands, 3 <= x becomes x >= 3
        cons = 3 <= self.x
        self.assertEqual(cons.name, ">=")
        self.assertEqual(str(cons), "x >= 3")

    def test_not_equal(self):
        with self.assertRaises(TypeError):
            self.x != self.y

    def test_no_truth_value(self):
        with self.assertRaises(ValueError):
            if self.x + self.y:
                pass

    def test_value(self):
        self.x._value, self.y._value = 2, 3
        self.assertTrue((self.x <= self.y).value())
        self.assertFalse((self.x == self.y).value())
        self.assertTrue((self.x + 1 == self.y).value())

    def test_description(self):
        cons = (self.x + self.y >= 4).set_description("capacity")
        self.assertEqual(str(cons), "capacity")
        self.assertEqual(cons.desc, "capacity")
        self.assertEqual(repr(cons), "(x) + (y) >= 4")

    def test_hashable(self):
        cons = self.x <= self.y
        s = {cons, self.x >= 1}
        self.assertIn(cons, s)


class TestOperators(unittest.TestCase):
    def setUp(self):
        self.x = ap.floatvar(0, 10, name="x")
        self.y = ap.floatvar(0, 10, name="y")
        self.z = ap.intvar(0, 10, name="z")

    def test_wsum(self):
        expr = 6*self.x + 8*self.y
        self.assertIsInstance(expr, Operator)
        self.assertEqual(expr.name, "wsum")
        self.assertEqual(expr.args[0], [6, 8])
        self.assertEqual(str(expr), "sum([6, 8] * [x, y])")

    def test_sum_merge(self):
        expr = self.x + self.y + self.z
        self.assertEqual(expr.name, "sum")
        self.assertEqual(len(expr.args), 3)

    def test_add_zero(self):
        self.assertIs(self.x + 0, self.x)
        self.assertIs(0 + self.x, self.x)

    def test_mul_constant_first(self):
        expr = self.x * 3
        self.assertEqual(expr.name, "mul")
        self.assertEqual(expr.args[0], 3)

    def test_div(self):
        expr = self.x / 2
        self.assertEqual(expr.name, "div")
        with self.assertRaises(TypeError):
            self.x // 2

    def test_neg(self):
        expr = -self.x
        self.assertEqual(expr.name, "-")
        self.assertEqual(str(expr), "-(x)")

    def test_value(self):
        self.x._value, self.y._value, self.z._value = 1.5, 2, 3
        self.assertEqual((2*self.x + 4*self.y).value(), 11)
        self.assertEqual((self.x * self.y).value(), 3)
        self.assertEqual((self.y ** 2).value(), 4)
        self.assertEqual((self.z / 2).value(), 1.5)
        self.assertEqual((-self.z).value(), -3)
        self.assertEqual((self.z - self.y).value(), 1)

    def test_value_none(self):
        self.x.clear()
        self.assertIsNone((self.x + self.y).value())


class TestUserFunctions(unittest.TestCase):
    def setUp(self):
        self.sqrt = ap.register("sqrt", math.sqrt)
        self.x = ap.floatvar(0, 10, name="x")

    def test_register(self):
        self.assertIsInstance(self.sqrt, UserFunction)
        self.assertEqual(self.sqrt.arity, 1)
        with self.assertRaises(TypeError):
            ap.register("not_callable", 42)

    def test_call(self):
        expr = self.sqrt(self.x**2 + 1)
        self.assertIsInstance(expr, FunctionCall)
        self.assertFalse(expr.is_bool())
        self.assertEqual(str(expr), "sqrt(((x) ** 2) + 1)")

    def test_constant_folding(self):
        self.assertEqual(self.sqrt(16), 4)

    def test_arity(self):
        with self.assertRaises(TypeError):
            self.sqrt(self.x, self.x)
        hypot = ap.register("hypot", math.hypot, arity=2)
        self.x._value = 3
        self.assertEqual(hypot(self.x, 4).value(), 5)

    def test_value_and_gradient(self):
        self.x._value = 3
        expr = self.sqrt(self.x**2 + 16)
        self.assertEqual(expr.value(), 5)
        self.assertIsNone(expr.gradient())  # no derivative registered

        dsqrt = ap.register("dsqrt", math.sqrt, derivative=lambda v: [0.5 / math.sqrt(v)])
        self.assertEqual(dsqrt(self.x + 1).gradient(), [0.25])


class TestUtils(unittest.TestCase):
    def test_eval_comparison(self):
        self.assertTrue(eval_comparison("<=", 1, 2))
        self.assertTrue(eval_comparison("==", 2, 2))
        self.assertFalse(eval_comparison(">", 1, 2))
        with self.assertRaises(ValueError):
            eval_comparison("!=", 1, 2)

    def test_flatlist(self):
        self.assertEqual(flatlist([1, [2, [3, 4]], (5,)]), [1, 2, 3, 4, 5])

    def test_argvals(self):
        x = ap.intvar(0, 3, name="x")
        x._value = 2
        self.assertEqual(argvals([x, [x, 1]]), [2, [2, 1]])
