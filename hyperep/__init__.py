from jax import config

# force double precision floating point arithmetic
# the radial return and damage tolerances (1e-12) are meaningless in single precision
config.update("jax_enable_x64", True)

# silence warnings about no gpu/tpu
config.update("jax_platforms", "cpu")

# debugging options
#config.update("jax_debug_nans", True)
#config.update("jax_disable_jit", True)

del config
