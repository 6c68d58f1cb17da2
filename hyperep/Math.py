from hyperep.JaxConfig import *
from jax import custom_jvp

# value substituted for non-positive arguments of log, 1/x and 1/sqrt(x)
SMALL_ARGUMENT = 1e-8


@custom_jvp
def safe_sqrt(x):
    return np.sqrt(x)


@safe_sqrt.defjvp
def safe_sqrt_jvp(xt, vt):
    x, = xt
    v, = vt
    f = safe_sqrt(x)
    df = v * np.where(x <= 0, 0., 0.5/np.where(x <= 0, 1.0, f))
    return f, df


def guard_positive(x):
    """Replace non-positive values by ``SMALL_ARGUMENT``."""
    return np.where(x <= 0.0, SMALL_ARGUMENT, x)


def safe_log(x):
    return np.log(guard_positive(x))


def safe_reciprocal(x):
    return 1.0/guard_positive(x)


def safe_rsqrt(x):
    return 1.0/np.sqrt(guard_positive(x))


def is_finite_parameter(value):
    """Host-side presence test for optional model parameters.

    Parameters that may be absent are stored as ``None``. Legacy inputs
    encode "absent" with the largest double; both count as not set.
    """
    if value is None:
        return False
    maxDouble = np.finfo(np.float64).max
    return abs(float(value) - float(maxDouble)) + 1.0 != 1.0
