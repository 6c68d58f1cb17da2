import jax
import jax.numpy as np

from hyperep import ScalarRootFind
from hyperep.test import TestFixture


def f_and_fprime(x):
    return x**3 - 4.0, 3.0*x**2


class ScalarRootFindTestFixture(TestFixture.TestFixture):

    def setUp(self):
        self.settings = ScalarRootFind.get_settings(max_iters=25, x_tol=1e-10)
        self.rootExpected = np.cbrt(4.0)

    def test_newton_solve(self):
        root, status = ScalarRootFind.newton_solve(f_and_fprime, 1.0, self.settings)
        self.assertTrue(status.converged)
        self.assertNear(root, self.rootExpected, 12)
        self.assertLess(int(status.iterations), 10)

    def test_newton_solve_with_jit(self):
        solve = jax.jit(ScalarRootFind.newton_solve, static_argnums=(0,2))
        root, status = solve(f_and_fprime, 1.0, self.settings)
        self.assertTrue(status.converged)
        self.assertNear(root, self.rootExpected, 12)

    def test_newton_solve_with_vmap(self):
        solve = jax.vmap(lambda x0: ScalarRootFind.newton_solve(f_and_fprime, x0, self.settings))
        roots, status = solve(np.array([1.0, 2.0, 5.0]))
        self.assertTrue(np.all(status.converged))
        self.assertArrayNear(roots, self.rootExpected*np.ones(3), 12)

    def test_iteration_cap_reports_failure(self):
        settings = ScalarRootFind.get_settings(max_iters=2, x_tol=1e-14)
        _, status = ScalarRootFind.newton_solve(f_and_fprime, 100.0, settings)
        self.assertFalse(status.converged)
        self.assertEqual(int(status.iterations), 2)

    def test_residual_tolerance(self):
        settings = ScalarRootFind.get_settings(max_iters=25, x_tol=0.0, r_tol=1e-8)
        root, status = ScalarRootFind.newton_solve(f_and_fprime, 1.0, settings)
        self.assertTrue(status.converged)
        self.assertNear(root, self.rootExpected, 8)
