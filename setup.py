import setuptools

setuptools.setup(
    name='hyperep',
    description='Hyperelastic-plastic material point update with Johnson-Cook damage for explicit dynamics',
    author="Michael Tupek and Brandon Talamini",
    author_email='talamini1@llnl.gov',
    packages=setuptools.find_packages(include=['hyperep', 'hyperep.*']),
    package_data={'hyperep.helper_methods.test': ['*.yaml']},
    install_requires=['equinox',
                      'jax[cpu]',
                      'jaxtyping',
                      'matplotlib',
                      'numpy',
                      'pyyaml'],
    extras_require={'test': ['pytest', 'pytest-cov', 'pytest-xdist', 'scipy']},
    python_requires='>=3.10',
    version='0.0.1',
    license='MIT'
)
