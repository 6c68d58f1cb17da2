import jax.numpy as np

from hyperep import TensorMath
from hyperep.material.Properties import Damage
from hyperep.material.FlowStress import johnson_cook_homologous_temperature

# triaxiality at and above which the point is in spall
SPALL_TRIAXIALITY = 1.5

_DAMAGE_TOLERANCE = 1e-10


def scalar_damage(props, T, dp, temp, epdot, dtime):
    """Johnson-Cook scalar damage after a step of length ``dtime``.

    The failure strain is assembled from stress triaxiality, strain rate and
    temperature contributions. Under spall conditions (triaxiality of at
    least 1.5) it is the minimum failure strain ``eps_f_min``. The damage
    increment is the plastic strain increment over the failure strain.
    """
    if props.damage == Damage.NONE:
        return np.zeros_like(np.asarray(dp, dtype=np.float64))

    sigStar = TensorMath.triaxiality(T)
    # hydrostatic tension has unbounded triaxiality
    isHydrostaticTension = (TensorMath.mises_invariant(T) <= 1e-16) & (TensorMath.mean_stress(T) > 0.0)
    isSpall = (sigStar >= SPALL_TRIAXIALITY) | isHydrostaticTension
    sigStar = np.clip(sigStar, -SPALL_TRIAXIALITY, SPALL_TRIAXIALITY)

    stressContrib = props.D1 + props.D2*np.exp(props.D3*sigStar)

    isSlow = epdot < 1.0
    epdotSafe = np.where(isSlow, 1.0, epdot)
    rateContrib = np.where(isSlow, (1.0 + epdot)**props.D4, 1.0 + props.D4*np.log(epdotSafe))

    tempContrib = 1.0
    if props.temp_melt is not None:
        tstar = johnson_cook_homologous_temperature(props, temp)
        tempContrib = np.where(temp <= props.temp_melt, 1.0 + props.D5*tstar, 1.0)

    epsF = np.where(isSpall, props.eps_f_min, stressContrib*rateContrib*tempContrib)

    ddp = epdot*dtime/np.where(epsF < _DAMAGE_TOLERANCE, 1.0, epsF)
    dpNew = np.where(dp + ddp < _DAMAGE_TOLERANCE, 0.0, np.minimum(dp + ddp, 1.0))
    return np.where(epsF < _DAMAGE_TOLERANCE, dp, dpNew)


def tepla_criterion(props, dp, por=0.0, por_crit=1.0):
    """Modified TEPLA failure measure; the point localizes when it exceeds one.

    Porosity does not evolve in this model so ``por`` is zero and the
    criterion reduces to ``(D0 + dp)/DC > 1``.
    """
    return (por/por_crit)**2 + ((props.D0 + dp)/props.DC)**2


def erode(props, T, p):
    """Collapse the stress of a failed point.

    Parameters
    ----------
    props : Properties
    T : 3x3 array
        Current Cauchy stress, returned unchanged when no erosion flag is set.
    p : float
        Mean pressure (positive in compression) used for the spherical stress.

    The first set flag of ``allow_no_tension``, ``allow_no_shear`` and
    ``set_stress_to_zero`` decides the rule.
    """
    I = np.identity(3)
    if props.allow_no_tension:
        return np.where(p < 0.0, 0.0*I, -p*I)
    elif props.allow_no_shear:
        return -p*I
    elif props.set_stress_to_zero:
        return 0.0*I
    return T
