"""Radial return mapping of the hyper-EP model.

Yield function::

    f = |S|/sqrt(2) - Y/sqrt(3)

where S is the stress deviator and Y the flow stress. The equivalent
plastic strain is the time integral of ``sqrt(2/3)*|Dp|``.
"""

from collections import namedtuple

import jax
import jax.numpy as np

from hyperep import TensorMath
from hyperep.JaxConfig import select_first
from hyperep.material.Properties import ErrorCode, StateFlag
from hyperep.material.FlowStress import flow_stress, dflow_stress
from hyperep.material.Damage import scalar_damage
from hyperep.material.ElasticStretch import recover_plastic_distortion

RadialReturnResult = namedtuple('RadialReturnResult',
                                ['T', 'Fp', 'ep', 'epdot', 'dp', 'flag', 'error',
                                 'convergence', 'iterations'])

# convergence status of the return mapping
NOT_CONVERGED = 0
CONVERGED = 1
WEAKLY_CONVERGED = 2

MAX_ITERATIONS = 100
WEAK_CONVERGENCE_ITERATION = 24

_YIELD_TOLERANCE = 1e-12
_WEAK_YIELD_TOLERANCE = 1e3*_YIELD_TOLERANCE

_SQRT2 = np.sqrt(2.0)
_SQRT3 = np.sqrt(3.0)
_SQRT23 = _SQRT2/_SQRT3
_SQRT32 = 1.0/_SQRT23


def _int(x):
    return np.asarray(x, dtype=np.int32)


def _float(x):
    return np.asarray(x, dtype=np.float64)


def radial_return(props, Te, F, temp, dtime, T, Fp, ep, epdot, dp, flag):
    """Project the trial stress onto the yield surface.

    Parameters
    ----------
    props : Properties
    Te : 3x3 array
        Trial (elastic predictor) Cauchy stress.
    F : 3x3 array
        Total deformation gradient.
    temp, dtime : float
        Temperature and time step.
    T, Fp : 3x3 arrays
        Stress and plastic distortion at the start of the step.
    ep, epdot, dp : float
        Equivalent plastic strain, its rate and the scalar damage.
    flag : StateFlag
        ``REMAPPED`` is preserved, any other value is overwritten.

    Returns
    -------
    RadialReturnResult
        Updated fields, the state flag, an ``ErrorCode`` and the convergence
        status of the Newton iteration. ``WEAKLY_CONVERGED`` marks steps that
        were accepted with the relaxed ``1e-9`` tolerance.
    """
    ep = _float(ep)
    epdot = _float(epdot)
    dp = _float(dp)
    Fp = _float(Fp)

    mu = props.shear_modulus
    twomu = 2.0*mu
    tol2 = np.minimum(dtime, 1e-6)

    isRemapped = _int(flag) == StateFlag.REMAPPED.value
    flag = np.where(isRemapped, StateFlag.REMAPPED.value, StateFlag.TRIAL.value)

    Y = flow_stress(props, temp, ep, epdot, dp)
    S0 = TensorMath.dev(Te)
    normS0 = TensorMath.norm(S0)
    f = normS0/_SQRT2 - Y/_SQRT3

    def elastic_branch(_):
        flagNew = np.where(isRemapped, flag, StateFlag.ELASTIC.value)
        return (1.0*Te, ep, epdot, dp, _int(flagNew), _int(ErrorCode.SUCCESS.value),
                _int(CONVERGED), _int(0))

    def plastic_branch(_):
        N = S0/np.where(normS0 > 0.0, normS0, 1.0)

        def cond(carry):
            gamma, epNew, epdotNew, conv, i = carry
            return (conv == NOT_CONVERGED) & (i < MAX_ITERATIONS)

        def loop_body(carry):
            gamma, epNew, epdotNew, conv, i = carry
            Y = flow_stress(props, temp, epNew, epdotNew, dp)
            dYdg = dflow_stress(props, temp, epNew, epdotNew, dtime, dp)
            g = normS0 - _SQRT23*Y - twomu*gamma
            # dflow_stress carries a factor sqrt(2/3)
            dg = -(2.0/3.0)*dYdg/_SQRT23 - twomu
            dgamma = -g/dg
            gamma = gamma + dgamma

            dep = np.maximum(_SQRT23*gamma, 0.0)
            epdotNew = dep/dtime
            epNew = ep + dep

            S = S0 - twomu*gamma*N
            f = TensorMath.norm(S)/_SQRT2 - Y/_SQRT3
            conv = select_first([(f < _YIELD_TOLERANCE) | (np.abs(dgamma) < tol2),
                                 (i > WEAK_CONVERGENCE_ITERATION) & (f <= _WEAK_YIELD_TOLERANCE)],
                                [CONVERGED, WEAKLY_CONVERGED],
                                NOT_CONVERGED)
            return gamma, epNew, epdotNew, _int(conv), i + 1

        gamma0 = epdot*dtime*_SQRT32
        gamma, epNew, epdotNew, conv, iters = jax.lax.while_loop(
            cond, loop_body, (gamma0, ep, epdot, _int(NOT_CONVERGED), _int(0)))

        TNew = Te - twomu*gamma*N
        isConverged = conv != NOT_CONVERGED
        dpNew = np.where(isConverged,
                         scalar_damage(props, TNew, dp, temp, epdotNew, dtime),
                         dp)
        error = np.where(isConverged, ErrorCode.SUCCESS.value, ErrorCode.RADIAL_RETURN_FAILURE.value)
        flagNew = np.where(isRemapped, flag, StateFlag.PLASTIC.value)
        return TNew, epNew, epdotNew, dpNew, _int(flagNew), _int(error), conv, iters

    T, ep, epdot, dp, flag, error, convergence, iterations = jax.lax.cond(
        f <= _YIELD_TOLERANCE, elastic_branch, plastic_branch, None)

    def recover_elastic_configuration(_):
        FpNew, bbeError = recover_plastic_distortion(T, F, mu)
        isRecovered = bbeError == ErrorCode.SUCCESS.value
        TNew = np.where(isRemapped, _neo_hookean_pressure_correction(props, T, F), T)
        return TNew, np.where(isRecovered, FpNew, Fp), _int(bbeError)

    def keep_configuration(_):
        return T, Fp, error

    needsRecovery = (flag != StateFlag.ELASTIC.value) & (error == ErrorCode.SUCCESS.value)
    T, Fp, error = jax.lax.cond(needsRecovery, recover_elastic_configuration, keep_configuration, None)

    return RadialReturnResult(T=T, Fp=Fp, ep=ep, epdot=epdot, dp=dp, flag=flag, error=error,
                              convergence=convergence, iterations=iterations)


def _neo_hookean_pressure_correction(props, T, F):
    # swap the spherical part of T for the Neo-Hookean pressure response
    J = TensorMath.det(F)
    D1 = 6.0*(1.0 - 2.0*props.nu)/props.E
    p = 2.0*J/D1*(J - 1.0) - TensorMath.trace(T)/3.0
    return T + p*np.identity(3)
