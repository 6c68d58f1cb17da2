"""Provide operations on 3x3 tensors used by the material point kernels."""

import jax.numpy as np
from jaxtyping import Array, Float

from hyperep import Math


Tensor = Float[Array, "3 3"]


def trace(A):
    return A[0, 0] + A[1, 1] + A[2, 2]

def det(A: Tensor) -> Float[Array, ""]:
    return A[0, 0]*A[1, 1]*A[2, 2] + A[0, 1]*A[1, 2]*A[2, 0] + A[0, 2]*A[1, 0]*A[2, 1] \
        - A[0, 0]*A[1, 2]*A[2, 1] - A[0, 1]*A[1, 0]*A[2, 2] - A[0, 2]*A[1, 1]*A[2, 0]

def inv(A: Tensor) -> Tensor:
    invA00 = A[1, 1]*A[2, 2] - A[1, 2]*A[2, 1]
    invA01 = A[0, 2]*A[2, 1] - A[0, 1]*A[2, 2]
    invA02 = A[0, 1]*A[1, 2] - A[0, 2]*A[1, 1]
    invA10 = A[1, 2]*A[2, 0] - A[1, 0]*A[2, 2]
    invA11 = A[0, 0]*A[2, 2] - A[0, 2]*A[2, 0]
    invA12 = A[0, 2]*A[1, 0] - A[0, 0]*A[1, 2]
    invA20 = A[1, 0]*A[2, 1] - A[1, 1]*A[2, 0]
    invA21 = A[0, 1]*A[2, 0] - A[0, 0]*A[2, 1]
    invA22 = A[0, 0]*A[1, 1] - A[0, 1]*A[1, 0]
    invA = (1.0/det(A)) * np.array([[invA00, invA01, invA02],
                                    [invA10, invA11, invA12],
                                    [invA20, invA21, invA22]])
    return invA

def deviator(A: Tensor) -> Tensor:
    dil = trace(A)
    return A - (dil/3)*np.identity(3)

def dev(A): return deviator(A)

def spherical(A):
    return (trace(A)/3.0)*np.identity(3)

def sym(A: Tensor) -> Tensor:
    return 0.5*(A + A.T)

def norm(A):
    return Math.safe_sqrt(A.ravel() @ A.ravel())

def norm_of_deviator(tensor):
    return norm( deviator(tensor) )

def mean_stress(stress):
    return trace(stress)/3.0

def pressure(stress):
    """Mean pressure, positive in compression."""
    return -mean_stress(stress)

def mises_invariant(stress):
    return np.sqrt(1.5)*norm_of_deviator(stress)

def triaxiality(stress: Tensor, tol=1e-16) -> Float[Array, ""]:
    """Ratio of mean stress to Mises stress, zero for a spherical tensor."""
    meanStress = mean_stress(stress)
    misesStress = mises_invariant(stress)
    isSpherical = np.abs(misesStress) <= tol
    return np.where(isSpherical, 0.0,
                    meanStress/np.where(isSpherical, 1.0, misesStress))

def symmetric_matrix_function(A, func):
    """Create a function on symmetric matrices from a scalar function."""
    lam, V = np.linalg.eigh(sym(A))
    return V@np.diag(func(lam))@V.T

def sqrt_spd(A: Tensor) -> Tensor:
    """Square root of a symmetric positive definite tensor."""
    return symmetric_matrix_function(A, Math.safe_sqrt)
