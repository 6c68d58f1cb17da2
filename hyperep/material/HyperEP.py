"""Finite strain hyperelastic-plastic material with Johnson-Cook damage.

``update`` is the per material point constitutive update consumed by an
explicit Lagrangian code. It is a pure function of its arguments and can be
jitted and vmapped over material points; failures are reported through the
returned ``ErrorCode`` and never raised.
"""

from collections import namedtuple

import jax
import jax.numpy as np

from hyperep import TensorMath
from hyperep.material.MaterialModel import MaterialModel
from hyperep.material.Properties import Damage, ErrorCode, StateFlag, parse_properties
from hyperep.material.StressPredictor import compute_wave_speed, elastic_predictor, predictor_error_code
from hyperep.material.RadialReturn import radial_return
from hyperep.material.Damage import scalar_damage, tepla_criterion, erode

# internal variables
STRESS = slice(0, 9)
PLASTIC_DISTORTION = slice(9, 18)
EQPS = 18
EQPS_RATE = 19
DAMAGE = 20
LOCALIZED = 21
NUM_STATE_VARS = 22

UpdateResult = namedtuple('UpdateResult',
                          ['T', 'wave_speed', 'Fp', 'ep', 'epdot', 'dp', 'localized',
                           'error', 'convergence'])

UpdateInfo = namedtuple('UpdateInfo', ['error', 'convergence', 'wave_speed'])


def create_material_model_functions(properties):
    props = parse_properties(properties)
    if 'density' not in properties:
        raise ValueError('Material properties must include the density')
    density = float(properties['density'])
    if not density > 0.0:
        raise ValueError('Density must be positive, got %s' % density)

    def compute_state_new(F, state, dt, temp=0.0):
        return _compute_state_new(F, state, dt, temp, props, density)

    def compute_wave_speed_function(rho=None):
        rho = density if rho is None else rho
        return compute_wave_speed(props, rho)

    return MaterialModel(compute_initial_state=make_initial_state,
                         compute_state_new=compute_state_new,
                         compute_wave_speed=compute_wave_speed_function,
                         properties=props,
                         density=density)


def make_initial_state(shape=(1,)):
    stress = np.zeros((3,3))
    Fp = np.identity(3)
    pointState = np.hstack((stress.ravel(), Fp.ravel(), np.zeros(4)))
    if shape == (1,):
        return pointState
    return np.tile(pointState, shape + (1,))


def _compute_state_new(F, stateOld, dt, temp, props, density):
    result = update(props, density, F, dt, temp,
                    stateOld[STRESS].reshape((3,3)),
                    stateOld[PLASTIC_DISTORTION].reshape((3,3)),
                    stateOld[EQPS],
                    stateOld[EQPS_RATE],
                    stateOld[DAMAGE],
                    stateOld[LOCALIZED])
    stateNew = np.hstack((result.T.ravel(), result.Fp.ravel(),
                          result.ep, result.epdot, result.dp, result.localized))
    return stateNew, UpdateInfo(error=result.error, convergence=result.convergence,
                                wave_speed=result.wave_speed)


def update(props, rho, F, dtime, temp, T, Fp, ep, epdot, dp, localized):
    """Update the stress and internal variables of one material point.

    Parameters
    ----------
    props : Properties
    rho : float
        Current density.
    F : 3x3 array
        Total deformation gradient at the end of the step.
    dtime : float
        Time step.
    temp : float
        Temperature.
    T, Fp : 3x3 arrays
        Cauchy stress and plastic distortion at the start of the step.
    ep, epdot, dp, localized : float
        Equivalent plastic strain, its rate, scalar damage and the
        localization flag (0.0 or 1.0).

    Returns
    -------
    UpdateResult
        New values of every field, the wave speed, an ``ErrorCode`` and the
        convergence status of the radial return.
    """
    localized = np.asarray(localized, dtype=np.float64)
    waveSpeed = compute_wave_speed(props, rho)

    J = TensorMath.det(F)
    Fe = F@TensorMath.inv(Fp)
    Te = elastic_predictor(props, Fe, J)
    predictorOk = np.all(np.isfinite(Te))

    rr = radial_return(props, Te, F, temp, dtime, T, Fp, ep, epdot, dp,
                       StateFlag.TRIAL.value)

    def apply_failure_model(_):
        TNew, dpNew, localizedNew = _damage_and_erosion(props, rr.T, rr.dp, temp,
                                                         rr.epdot, dtime, localized)
        return TNew, dpNew, localizedNew

    def skip_failure_model(_):
        return rr.T, rr.dp, localized

    isReturned = rr.error == ErrorCode.SUCCESS.value
    TNew, dpNew, localizedNew = jax.lax.cond(isReturned, apply_failure_model,
                                             skip_failure_model, None)

    isFinite = np.all(np.isfinite(TNew)) & np.all(np.isfinite(rr.Fp)) & np.isfinite(rr.ep)
    error = np.where(~predictorOk, predictor_error_code(props).value,
                     np.where(isReturned & ~isFinite, ErrorCode.MODEL_EVAL_FAILURE.value,
                              rr.error))

    return UpdateResult(T=TNew, wave_speed=waveSpeed, Fp=rr.Fp, ep=rr.ep, epdot=rr.epdot,
                        dp=dpNew, localized=localizedNew, error=np.asarray(error, dtype=np.int32),
                        convergence=rr.convergence)


def _damage_and_erosion(props, T, dp, temp, epdot, dtime, localized):
    if props.damage == Damage.NONE:
        return T, dp, localized

    # pressure of the returned stress, positive in compression
    p = TensorMath.pressure(T)
    isLocalized = localized > 0.0

    # points that failed earlier keep eroding
    T = np.where(isLocalized, erode(props, T, p), T)

    dp = scalar_damage(props, T, dp, temp, epdot, dtime)
    failsNow = tepla_criterion(props, dp) > 1.0

    # a point failing a second time loses all strength
    TFailed = np.where(isLocalized, np.zeros((3,3)), erode(props, T, p))
    T = np.where(failsNow, TFailed, T)
    dp = np.where(failsNow, 0.0, dp)
    localized = np.where(failsNow, 1.0, localized)
    return T, dp, localized
