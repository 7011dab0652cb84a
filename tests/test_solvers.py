import unittest
import math
from unittest import mock

import pytest

import amlpy as ap
from amlpy.exceptions import NotSupportedError
from amlpy.solvers.ortools import AML_ortools
from amlpy.solvers.scipy import AML_scipy
from amlpy.solvers.solver_interface import ExitStatus, SolverInterface
from amlpy.solvers.utils import SolverLookup


class TestSolverLookup(unittest.TestCase):
    def test_lookup(self):
        self.assertIs(SolverLookup.lookup(), AML_ortools)
        self.assertIs(SolverLookup.lookup("ortools:glop"), AML_ortools)
        self.assertIs(SolverLookup.lookup("scipy:slsqp"), AML_scipy)
        with self.assertRaises(ValueError):
            SolverLookup.lookup("gurobi")

    def test_supported(self):
        names = SolverLookup.supported()
        self.assertIn("ortools", names)
        self.assertIn("ortools:glop", names)
        self.assertIn("scipy", names)
        self.assertIn("scipy:trust-constr", names)

    def test_version(self):
        versions = {v["name"]: v for v in SolverLookup.version()}
        self.assertTrue(versions["ortools"]["installed"])
        self.assertIsNotNone(versions["ortools"]["version"])
        self.assertIn("scipy:slsqp", versions)

    def test_print_version(self):
        SolverLookup.print_version()  # should not crash

    def test_default_for(self):
        x = ap.floatvar(0, 5, name="x")
        self.assertEqual(SolverLookup.default_for(ap.Model(x >= 1, minimize=x)), "ortools")
        self.assertEqual(SolverLookup.default_for(ap.Model(x*x >= 1, minimize=x)), "scipy")
        self.assertEqual(SolverLookup.default_for(ap.Model(x >= 1, minimize=x**2)), "scipy")

    def test_unknown_subsolver(self):
        with self.assertRaises(ValueError):
            SolverLookup.get("ortools:nonexisting")
        with self.assertRaises(ValueError):
            SolverLookup.get("scipy:nonexisting")

    def test_interface(self):
        s = SolverLookup.get("ortools:glop")
        self.assertIsInstance(s, SolverInterface)
        self.assertEqual(s.status().exitstatus, ExitStatus.NOT_RUN)
        x = ap.floatvar(shape=2, name="x")
        native = s.solver_vars([x[0], [x[1], 3]])
        self.assertEqual(native[0].name(), "x[0]")
        self.assertEqual(native[1][1], 3)


@pytest.mark.requires_solver("ortools")
class TestOrtools(unittest.TestCase):
    def setUp(self):
        self.x = ap.floatvar(name="x")
        self.y = ap.floatvar(0, 3, name="y")
        self.c1 = (6*self.x + 8*self.y >= 100).set_description("c1")
        self.c2 = (7*self.x + 12*self.y >= 120).set_description("c2")
        self.model = ap.Model([self.c1, self.c2], minimize=12*self.x + 20*self.y)

    def test_default_subsolver(self):
        self.assertEqual(AML_ortools(self.model).subsolver, "glop")
        b = ap.boolvar(name="b")
        self.assertEqual(AML_ortools(ap.Model(b)).subsolver, "scip")

    def test_lp(self):
        s = SolverLookup.get("ortools:glop", self.model)
        self.assertTrue(s.solve())
        self.assertEqual(s.status().exitstatus, ExitStatus.OPTIMAL)
        self.assertAlmostEqual(s.objective_value(), 205)
        self.assertAlmostEqual(self.x.value(), 15)
        self.assertAlmostEqual(self.y.value(), 1.25)
        self.assertIsNotNone(s.status().runtime)

    def test_duals(self):
        s = SolverLookup.get("ortools:glop", self.model)
        s.solve()
        self.assertAlmostEqual(abs(s.dual_value(self.c1)), 0.25)
        self.assertAlmostEqual(abs(s.dual_value(self.c2)), 1.5)
        # by description
        self.assertAlmostEqual(s.dual_value("c2"), s.dual_value(self.c2))
        # relaxing a >= constraint can only lower the cost
        self.assertAlmostEqual(s.shadow_price(self.c1), -0.25)
        self.assertAlmostEqual(s.shadow_price("c2"), -1.5)
        # x is basic, y is basic
        self.assertAlmostEqual(s.reduced_cost(self.x), 0)
        with self.assertRaises(KeyError):
            s.dual_value("c3")

    def test_duplicate_description(self):
        c3 = (self.x >= 1).set_description("c1")
        s = SolverLookup.get("ortools:glop", self.model)
        with pytest.warns(UserWarning, match="more than once"):
            s += c3
        self.assertTrue(s.solve())
        with self.assertRaises(ValueError):
            s.dual_value("c1")
        # the constraints themselves still identify their rows
        self.assertAlmostEqual(abs(s.dual_value(self.c1)), 0.25)
        self.assertAlmostEqual(s.dual_value(c3), 0)
        self.assertAlmostEqual(s.shadow_price("c2"), -1.5)

    def test_duals_mip(self):
        s = SolverLookup.get("ortools:scip", self.model)
        self.assertTrue(s.solve())
        with self.assertRaises(NotSupportedError):
            s.dual_value(self.c1)

    def test_incremental(self):
        s = SolverLookup.get("ortools:glop", self.model)
        self.assertTrue(s.solve())
        s += self.x <= 14
        self.assertTrue(s.solve())
        self.assertAlmostEqual(self.x.value(), 14)
        self.assertAlmostEqual(self.y.value(), 2)
        self.assertGreater(s.objective_value(), 205)

    def test_maximize(self):
        s = SolverLookup.get("ortools:glop")
        s += [self.x + self.y <= 4, self.x <= 2]
        s.maximize(self.x + 2*self.y)
        self.assertTrue(s.solve())
        self.assertAlmostEqual(s.objective_value(), 7)

    def test_unbounded(self):
        s = SolverLookup.get("ortools:glop")
        s += self.x >= 1
        s.maximize(self.x)
        self.assertFalse(s.solve())
        self.assertIn(s.status().exitstatus, (ExitStatus.UNBOUNDED, ExitStatus.UNSATISFIABLE, ExitStatus.ERROR))

    def test_infeasible(self):
        s = SolverLookup.get("ortools:glop")
        s += [self.x >= 5, self.x <= 4]
        self.assertFalse(s.solve())
        self.assertEqual(s.status().exitstatus, ExitStatus.UNSATISFIABLE)
        self.assertIsNone(self.x.value())

    def test_trivially_false(self):
        s = SolverLookup.get("ortools:scip")
        s += [self.x >= 0, False]
        self.assertFalse(s.solve())
        self.assertEqual(s.status().exitstatus, ExitStatus.UNSATISFIABLE)

    def test_integer_in_lp_solver(self):
        iv = ap.intvar(0, 3, name="iv")
        with self.assertRaises(NotSupportedError):
            SolverLookup.get("ortools:glop", ap.Model(iv >= 1))

    def test_nonlinear_rejected(self):
        with self.assertRaises(NotSupportedError):
            SolverLookup.get("ortools:glop", ap.Model(self.x * self.y >= 1))

    def test_mip(self):
        iv = ap.intvar(0, 10, shape=2, name="iv")
        s = SolverLookup.get("ortools:scip", ap.Model(3*iv[0] + 2*iv[1] <= 11, maximize=iv[0] + iv[1]))
        self.assertTrue(s.solve())
        self.assertEqual(s.objective_value(), 5)
        self.assertIsInstance(iv[0].value(), int)

    def test_fixed_bounds(self):
        b = ap.boolvar(shape=3, name="b")
        b[1].fix(1)
        s = SolverLookup.get("ortools:scip", ap.Model(b.sum() == 1))
        self.assertTrue(s.solve())
        self.assertEqual(b.value().tolist(), [0, 1, 0])
        self.assertEqual(s.status().exitstatus, ExitStatus.FEASIBLE)

    @pytest.mark.requires_solver("ortools:cbc")
    def test_cbc(self):
        iv = ap.intvar(0, 10, name="iv")
        s = SolverLookup.get("ortools:cbc", ap.Model(2*iv <= 7, maximize=iv))
        self.assertTrue(s.solve())
        self.assertEqual(iv.value(), 3)

    def test_sat_continuous(self):
        with self.assertRaises(NotSupportedError):
            SolverLookup.get("ortools:sat", ap.Model(self.x >= 1))

    def test_time_limit(self):
        s = SolverLookup.get("ortools:glop", self.model)
        with self.assertRaises(ValueError):
            s.solve(time_limit=-1)
        self.assertTrue(s.solve(time_limit=5))
        # a later solve without a limit clears it
        s.ort_solver = mock.Mock(wraps=s.ort_solver)
        self.assertTrue(s.solve())
        s.ort_solver.SetTimeLimit.assert_called_once_with(0)


@pytest.mark.requires_solver("scipy")
class TestScipy(unittest.TestCase):
    def setUp(self):
        self.x = ap.floatvar(-math.inf, math.inf, shape=2, name="x", start=0.5)

    def test_quadratic(self):
        m = ap.Model(self.x[0] + self.x[1] >= 2, minimize=self.x[0]**2 + self.x[1]**2)
        s = SolverLookup.get("scipy", m)
        self.assertTrue(s.solve())
        self.assertEqual(s.status().exitstatus, ExitStatus.OPTIMAL)
        self.assertAlmostEqual(self.x[0].value(), 1, places=4)
        self.assertAlmostEqual(s.objective_value(), 2, places=4)

    def test_barrier_options(self):
        m = ap.Model(self.x[0] + self.x[1] >= 2, minimize=self.x[0]**2 + self.x[1]**2)
        s = SolverLookup.get("scipy:trust-constr", m)
        self.assertTrue(s.solve())
        self.assertLessEqual(s.scipy_result.barrier_parameter, 1e-4)
        self.assertAlmostEqual(self.x[1].value(), 1, places=4)
        # options given to solve() take precedence
        s.solve(initial_barrier_parameter=0.5, maxiter=1)
        self.assertGreater(s.scipy_result.barrier_parameter, 1e-4)

    def test_slsqp(self):
        m = ap.Model(self.x[0] + self.x[1] >= 2, minimize=self.x[0]**2 + self.x[1]**2)
        s = SolverLookup.get("scipy:slsqp", m)
        self.assertTrue(s.solve())
        self.assertAlmostEqual(self.x[1].value(), 1, places=4)

    def test_bounds(self):
        y = ap.floatvar(1, 4, name="y", start=3)
        s = SolverLookup.get("scipy:slsqp", ap.Model(minimize=y**2))
        self.assertTrue(s.solve())
        self.assertAlmostEqual(y.value(), 1, places=5)

    def test_equality(self):
        m = ap.Model(self.x[0] == 2*self.x[1], self.x[1] == 1, minimize=self.x[0]**2)
        s = SolverLookup.get("scipy:slsqp", m)
        self.assertTrue(s.solve())
        self.assertAlmostEqual(self.x[0].value(), 2, places=5)

    def test_feasibility(self):
        s = SolverLookup.get("scipy", ap.Model(self.x[0] >= 1, self.x[1] <= -1))
        self.assertTrue(s.solve())
        self.assertEqual(s.status().exitstatus, ExitStatus.FEASIBLE)
        self.assertIsNone(s.objective_value())

    def test_integer_rejected(self):
        iv = ap.intvar(0, 3, name="iv")
        with self.assertRaises(NotSupportedError):
            SolverLookup.get("scipy", ap.Model(iv >= 1))

    def test_false_rejected(self):
        with self.assertRaises(NotSupportedError):
            SolverLookup.get("scipy", ap.Model(self.x[0] >= 1, False))

    def test_strict_warns(self):
        with pytest.warns(UserWarning):
            SolverLookup.get("scipy", ap.Model(self.x[0] > 1))
