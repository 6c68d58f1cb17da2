import jax.numpy as np

from hyperep import ScalarRootFind
from hyperep import TensorMath
from hyperep.material.Properties import ErrorCode

_FIND_BBE_SETTINGS = ScalarRootFind.get_settings(max_iters=25, x_tol=1e-6)


def find_bbe(tau: TensorMath.Tensor, mu):
    """Determine the isochoric square of the elastic left stretch.

    Parameters
    ----------
    tau : 3x3 array
        The Kirchhoff stress
    mu : float
        The shear modulus

    Returns
    -------
    Bbe : 3x3 array
        Isochoric elastic left Cauchy-Green tensor ``J**(-2/3) Ve Ve``.
    errorCode : ErrorCode
        ``SUCCESS``, or ``ELASTIC_DEFORMATION_UPDATE_FAILURE`` when the
        Newton iteration did not converge.

    Notes
    -----
    On unloading from the current configuration the left stretch ``Ve`` is
    recovered. For an isotropic elastic response the stress and stretch are
    related by

                       dev(tau) = mu dev(Bbe)                 (1)

    and since det(Bbe) = 1, (1) can be solved for Bbe uniquely. The
    deviatoric equations fix every component of Bbe in terms of the single
    unknown ``bzz``; the unimodular constraint is solved for ``bzz`` with
    local Newton iterations started from ``bzz = 1``.
    """
    txx = tau[0, 0]
    tyy = tau[1, 1]
    tzz = tau[2, 2]
    txy = 0.5*(tau[0, 1] + tau[1, 0])
    txz = 0.5*(tau[0, 2] + tau[2, 0])
    tyz = 0.5*(tau[1, 2] + tau[2, 1])

    def det_residual_and_slope(bzz):
        a = bzz*mu + txx - tzz
        b = bzz*mu + tyy - tzz
        c = bzz*mu
        detBbe = (c*(a*b - txy*txy) + 2.0*txy*txz*tyz - txz*txz*b - tyz*tyz*a)/(mu*mu*mu)
        dDetBbe = (c*(a + b) - txy*txy - txz*txz - tyz*tyz + a*b)/(mu*mu)
        return detBbe - 1.0, dDetBbe

    bzz, info = ScalarRootFind.newton_solve(det_residual_and_slope, 1.0, _FIND_BBE_SETTINGS)

    Bbe = TensorMath.sym(tau)/mu
    Bbe = Bbe.at[0, 0].set((mu*bzz + txx - tzz)/mu)
    Bbe = Bbe.at[1, 1].set((mu*bzz + tyy - tzz)/mu)
    Bbe = Bbe.at[2, 2].set(bzz)

    errorCode = np.where(info.converged,
                         int(ErrorCode.SUCCESS),
                         int(ErrorCode.ELASTIC_DEFORMATION_UPDATE_FAILURE))
    return Bbe, errorCode


def recover_plastic_distortion(T, F, mu):
    """Plastic distortion ``Fp = Ve^-1 F`` consistent with the stress ``T``."""
    J = TensorMath.det(F)
    Bbe, errorCode = find_bbe(T, mu)
    Be = Bbe*J**(2.0/3.0)
    Ve = TensorMath.sqrt_spd(Be)
    Fp = TensorMath.inv(Ve)@F
    return Fp, errorCode
