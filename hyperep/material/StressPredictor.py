import jax.numpy as np

from hyperep import TensorMath
from hyperep.material.Properties import Elastic, ErrorCode


def compute_wave_speed(props, rho):
    """Elastic (plane) wave speed ``sqrt((K + 4G/3)/rho)``."""
    planeWaveModulus = props.bulk_modulus + (4.0/3.0)*props.shear_modulus
    return np.sqrt(planeWaveModulus/rho)


def linear_elastic_stress(props, Fe):
    """Small strain isotropic elastic trial stress from the elastic deformation gradient."""
    K = props.bulk_modulus
    G = props.shear_modulus
    strain = TensorMath.sym(Fe - np.identity(3))
    isotropicStrain = TensorMath.spherical(strain)
    deviatoricStrain = strain - isotropicStrain
    return (3.0*K)*isotropicStrain + (2.0*G)*deviatoricStrain


def neo_hookean_stress(props, Fe, J):
    """Compressible Neo-Hookean trial Cauchy stress.

    Parameters
    ----------
    props : Properties
    Fe : 3x3 array
        Elastic deformation gradient.
    J : float
        Jacobian of the total deformation gradient.
    """
    E = props.E
    nu = props.nu
    C10 = E/(4.0*(1.0 + nu))
    D1 = 6.0*(1.0 - 2.0*nu)/E

    Fbar = J**(-1.0/3.0)*Fe
    devBbar = TensorMath.dev(Fbar@Fbar.T)
    pressureResponse = 2.0/D1*(J - 1.0)
    return (2.0*C10/J)*devBbar + pressureResponse*np.identity(3)


def elastic_predictor(props, Fe, J):
    if props.elastic == Elastic.LINEAR_ELASTIC:
        return linear_elastic_stress(props, Fe)
    elif props.elastic == Elastic.NEO_HOOKEAN:
        return neo_hookean_stress(props, Fe, J)
    else:
        raise ValueError('Unknown elastic model %s' % props.elastic)


def predictor_error_code(props):
    """Error code reported when the predictor produces a non-finite stress."""
    if props.elastic == Elastic.NEO_HOOKEAN:
        return ErrorCode.HYPERELASTIC_FAILURE
    return ErrorCode.LINEAR_ELASTIC_FAILURE
