from collections import namedtuple

import jax
import jax.numpy as np

SolutionInfo = namedtuple('SolutionInfo', ['converged', 'iterations', 'residual_norm', 'correction_norm'])

Settings = namedtuple('Settings', ['max_iters', 'x_tol', 'r_tol'])


def get_settings(max_iters=25, x_tol=1e-6, r_tol=0):
    """Get numerical settings for the root finder.

    Parameters
    ==========
    max_iters : int
        Maximum number of Newton iterations before giving up.
    x_tol : real
        Tolerance on the independent variable. The iteration terminates
        when the squared correction falls below ``x_tol**2``.
    r_tol : real
        Tolerance on absolute value of residual for convergence. Zero
        disables the residual check.

    Returns
    =======
    settings : A Settings object, which can be used in `newton_solve`.
    """
    return Settings(max_iters, x_tol, r_tol)


def newton_solve(f_and_fprime, x0, settings):
    """Find a root of a scalar equation with an unsafeguarded Newton method.

    The iteration is written with ``jax.lax.while_loop`` so it can be
    composed with ``jit`` and ``vmap``. It never raises: callers inspect
    ``SolutionInfo.converged`` and translate failure into an error code.

    Parameters
    ==========
    f_and_fprime : callable
        Maps ``x`` to the tuple ``(f(x), f'(x))``.
    x0 : real
        Initial guess.
    settings : A settings object from this module

    Returns
    =======
    x : real
        Last iterate. Meaningful only when ``converged`` is true.
    info : SolutionInfo
    """
    max_iters = settings.max_iters
    x_tol_squared = settings.x_tol*settings.x_tol
    r_tol = settings.r_tol

    def cond(carry):
        x, dx, F, converged, i = carry
        return (~converged) & (i < max_iters)

    def loop_body(carry):
        x, dx, F, converged, i = carry
        F, DF = f_and_fprime(x)
        dx = -F/DF
        x = x + dx
        i += 1
        converged = (dx*dx < x_tol_squared) | (np.abs(F) < r_tol)
        return x, dx, F, converged, i

    x0 = np.asarray(x0, dtype=np.float64)
    init = (x0, np.inf*np.ones_like(x0), np.inf*np.ones_like(x0), np.array(False), 0)
    x, dx, F, converged, iters = jax.lax.while_loop(cond, loop_body, init)

    return x, SolutionInfo(converged=converged, iterations=iters,
                           residual_norm=np.abs(F), correction_norm=np.abs(dx))
