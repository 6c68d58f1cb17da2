from collections import namedtuple
import warnings

import numpy as onp

from hyperep.JaxConfig import *
from hyperep.material import HyperEP
from hyperep.material.Properties import ErrorCode, get_error_code_string
from hyperep.material.RadialReturn import WEAKLY_CONVERGED


MaterialPointOutput = namedtuple('MaterialPointOutput',
                                 ['times', 'strainHistory', 'stressHistory', 'eqpsHistory',
                                  'damageHistory', 'localizedHistory', 'waveSpeed', 'errorCodes'])


def uniaxial_strain(strain):
    return np.diag(np.array([1.0 + strain, 1.0, 1.0]))


def isochoric_uniaxial(strain):
    stretch = 1.0 + strain
    lateral = 1.0/np.sqrt(stretch)
    return np.diag(np.array([stretch, lateral, lateral]))


def simple_shear(strain):
    return np.identity(3).at[0, 1].set(strain)


LOADINGS = {'uniaxial strain': uniaxial_strain,
            'isochoric uniaxial': isochoric_uniaxial,
            'simple shear': simple_shear}


class MaterialPointSimulator:
    """Drives a single material point through a prescribed deformation history.

    The deformation gradient is prescribed completely (no stress boundary
    conditions), so every step is one call of the constitutive update.

    Methods
    -------
    run():
      Launches the simulation with the given parameters
    """

    def __init__(self, materialModel, maxStrain, strainRate, steps=10, temperature=298.0,
                 loading='uniaxial strain'):
        """Constructor

        Args
        ----
          materialModel: MaterialModel
            Model built by ``HyperEP.create_material_model_functions``
          maxStrain: float
            Final value of the loading parameter (engineering strain or shear)
          strainRate: float
            Rate of the loading parameter
          steps: int
            Number of time steps to take
          temperature: float
            Constant temperature of the point
          loading: str
            One of 'uniaxial strain', 'isochoric uniaxial', 'simple shear'
        """
        if loading not in LOADINGS:
            raise ValueError('Unknown loading "%s", expected one of %s' % (loading, sorted(LOADINGS)))
        self.strainHistory, self.strainInc = np.linspace(0.0, maxStrain, num=steps, retstep=True)
        self.steps = steps
        self.dt = np.abs(self.strainInc/strainRate)
        self.times = np.abs(self.strainHistory/strainRate)
        self.temperature = temperature
        self.deformation_gradient = LOADINGS[loading]
        self.update = jit(materialModel.compute_state_new)
        self.compute_initial_state = materialModel.compute_initial_state
        self.waveSpeed = materialModel.compute_wave_speed()

    def run(self):
        state = self.compute_initial_state()

        stressHistory = []
        eqpsHistory = []
        damageHistory = []
        localizedHistory = []
        errorCodes = []
        for i in range(self.steps):
            F = self.deformation_gradient(self.strainHistory[i])
            stateNew, info = self.update(F, state, self.dt, self.temperature)
            error = int(info.error)
            errorCodes.append(error)
            if error != ErrorCode.SUCCESS:
                warnings.warn('MaterialPointSimulator: update failed at step %d with %s'
                              % (i, get_error_code_string(error)))
                break
            if int(info.convergence) == WEAKLY_CONVERGED:
                warnings.warn('MaterialPointSimulator: radial return only weakly converged at step %d' % i)
            state = stateNew

            stress = state[HyperEP.STRESS].reshape((3,3))
            stressHistory.append(onp.array(stress))
            eqpsHistory.append(float(state[HyperEP.EQPS]))
            damageHistory.append(float(state[HyperEP.DAMAGE]))
            localizedHistory.append(float(state[HyperEP.LOCALIZED]))

        n = len(stressHistory)
        return MaterialPointOutput(onp.array(self.times[:n]), onp.array(self.strainHistory[:n]),
                                   onp.array(stressHistory).reshape((n, 3, 3)),
                                   onp.array(eqpsHistory), onp.array(damageHistory),
                                   onp.array(localizedHistory), self.waveSpeed,
                                   onp.array(errorCodes, dtype=int))
