import jax.numpy as np
from jax import jit, vmap, lax
from jax.lax import while_loop


def if_then_else(cond, val1, val2):
    return lax.cond(cond,
                    lambda x: val1,
                    lambda x: val2,
                    None)


def select_first(conditions, values, default):
    """Pick the value paired with the first true condition.

    Traced analogue of an if/elif/else chain over scalar predicates.
    """
    result = default
    for cond, val in reversed(list(zip(conditions, values))):
        result = np.where(cond, val, result)
    return result
