import jax.numpy as np

from hyperep import Math
from hyperep.material.Properties import Hardening, RateDependence

SQRT_TWO_THIRDS = np.sqrt(2.0/3.0)


def flow_stress(props, temp, ep, epdot, dp):
    """Uniaxial yield strength of the (damaged) material.

    Parameters
    ----------
    props : Properties
    temp : float
        Temperature.
    ep : float
        Equivalent plastic strain.
    epdot : float
        Equivalent plastic strain rate.
    dp : float
        Scalar damage. The undamaged strength is scaled by ``1 - dp``.
    """
    if props.hardening == Hardening.NONE:
        Y = props.A * np.ones_like(ep)
    elif props.hardening == Hardening.LINEAR_ISOTROPIC:
        Y = props.A + props.B*ep
    elif props.hardening == Hardening.POWER_LAW:
        Y = _power_law(props, ep)
    elif props.hardening == Hardening.ZERILLI_ARMSTRONG:
        alpha = _zerilli_armstrong_alpha(props, epdot)
        Y = _power_law(props, ep) + \
            (props.C1 + props.C2*np.sqrt(np.maximum(ep, 0.0)))*np.exp(-alpha*temp)
    elif props.hardening == Hardening.JOHNSON_COOK:
        Y = props.A + _johnson_cook_strain_term(props, ep)
        Y *= johnson_cook_temperature_factor(props, temp)
    else:
        raise ValueError('Unknown hardening model %s' % props.hardening)

    # FIXME: the plastic strain rate stands in for the total strain rate
    if props.rate_dep == RateDependence.JOHNSON_COOK:
        Y *= _johnson_cook_rate_factor(props, epdot)

    return (1.0 - dp)*Y


def dflow_stress(props, temp, ep, epdot, dtime, dp):
    """Scaled hardening slope ``sqrt(2/3)*(1 - dp)*dY/dep`` used by the radial return."""
    if props.hardening == Hardening.JOHNSON_COOK:
        deriv = _johnson_cook_slope(props, temp, ep, epdot, dtime)
    else:
        deriv = _hardening_slope(props, temp, ep, epdot, dtime)
    return (1.0 - dp)*SQRT_TWO_THIRDS*deriv


def johnson_cook_homologous_temperature(props, temp):
    tempRef = props.temp_ref
    tempMelt = props.temp_melt
    return np.where(temp > tempMelt, 1.0, (temp - tempRef)/(tempMelt - tempRef))


def johnson_cook_temperature_factor(props, temp):
    if props.temp_melt is None:
        return 1.0
    tstar = johnson_cook_homologous_temperature(props, temp)
    isBelowReference = tstar < 0.0
    tstarSafe = np.where(isBelowReference, 0.0, tstar)
    return np.where(isBelowReference, 1.0 - tstar, 1.0 - tstarSafe**props.C3)


def _power_law(props, ep):
    isPositive = ep > 0.0
    epSafe = np.where(isPositive, ep, 1.0)
    return np.where(isPositive, props.A + props.B*epSafe**props.n, props.A)


def _power_law_slope(props, ep):
    isPositive = ep > 0.0
    epSafe = np.where(isPositive, ep, 1.0)
    return np.where(isPositive, props.B*props.n*epSafe**(props.n - 1.0), 0.0)


def _zerilli_armstrong_alpha(props, epdot):
    alpha = props.C3
    if props.rate_dep == RateDependence.ZERILLI_ARMSTRONG:
        alpha = alpha - props.C4*Math.safe_log(epdot)
    return alpha


def _hardening_slope(props, temp, ep, epdot, dtime):
    if props.hardening == Hardening.NONE:
        return np.zeros_like(ep)
    if props.hardening == Hardening.LINEAR_ISOTROPIC:
        return props.B*np.ones_like(ep)
    deriv = _power_law_slope(props, ep)
    if props.hardening == Hardening.POWER_LAW:
        return deriv

    # Zerilli-Armstrong
    alpha = _zerilli_armstrong_alpha(props, epdot)
    thermal = np.exp(-alpha*temp)
    deriv += 0.5*props.C2*Math.safe_rsqrt(ep)*thermal
    if props.rate_dep == RateDependence.ZERILLI_ARMSTRONG:
        term1 = props.C1*props.C4*temp*thermal
        term2 = props.C2*np.sqrt(np.maximum(ep, 0.0))*props.C4*temp*thermal
        deriv += (term1 + term2)*Math.safe_reciprocal(epdot)/dtime
    return deriv


def _johnson_cook_strain_term(props, ep):
    # zero exponent means a constant strain contribution
    isConstant = np.abs(props.n) <= 0.0
    term = props.B*np.where(isConstant, 1.0, np.maximum(ep, 0.0)**props.n)
    return np.where(props.B > 0.0, term, 0.0)


def _johnson_cook_rate_factor(props, epdot):
    cjo = props.C4
    rfac = epdot/props.ep_dot_0
    isSlow = rfac < 1.0
    rfacSafe = np.where(isSlow, 1.0, rfac)
    factor = np.where(isSlow, (1.0 + rfac)**cjo, 1.0 + cjo*np.log(rfacSafe))
    return np.where(cjo > 0.0, factor, 1.0)


def _johnson_cook_slope(props, temp, ep, epdot, dtime):
    tempFactor = johnson_cook_temperature_factor(props, temp)
    deriv = _power_law_slope(props, ep)*tempFactor
    if props.rate_dep == RateDependence.JOHNSON_COOK:
        cjo = props.C4
        rfac = epdot/props.ep_dot_0
        isSlow = rfac < 1.0
        rfacSafe = np.where(isSlow, 1.0, rfac)
        term1 = np.where(isSlow, (1.0 + rfac)**cjo, 1.0 + cjo*np.log(rfacSafe))
        term2 = (props.A + props.B*np.maximum(ep, 0.0)**props.n)*tempFactor
        term2 *= np.where(isSlow, cjo*(1.0 + rfac)**(cjo - 1.0), cjo/rfacSafe)
        deriv = deriv*term1 + term2/dtime
    return deriv
