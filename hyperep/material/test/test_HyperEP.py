import unittest

import jax
import jax.numpy as np

from hyperep import TensorMath
from hyperep.material import FlowStress
from hyperep.material import HyperEP
from hyperep.material import MaterialModelFactory
from hyperep.material.Properties import ErrorCode, get_error_code_string
from hyperep.material.RadialReturn import CONVERGED
from hyperep.test.TestFixture import TestFixture


def isochoric_stretch(stretch):
    lateral = 1.0/np.sqrt(stretch)
    return np.diag(np.array([stretch, lateral, lateral]))


class HyperEPFixture(TestFixture):

    def setUp(self):
        self.rho = 7800.0
        self.properties = {'elastic modulus': 200.0e9,
                           'poisson ratio': 0.3,
                           'hardening model': 'linear',
                           'yield strength': 250.0e6,
                           'hardening modulus': 1.0e9,
                           'density': self.rho}
        self.model = HyperEP.create_material_model_functions(self.properties)
        self.props = self.model.properties

    def update(self, props, F, dtime, T=np.zeros((3,3)), Fp=np.identity(3), ep=0.0, epdot=0.0,
               dp=0.0, localized=0.0, temp=298.0):
        return HyperEP.update(props, self.rho, F, dtime, temp, T, Fp, ep, epdot, dp, localized)

    def test_elastic_shear(self):
        properties = {'elastic modulus': 200.0e9,
                      'poisson ratio': 0.3,
                      'yield strength': 1.0e9,
                      'density': self.rho}
        props = HyperEP.create_material_model_functions(properties).properties
        F = np.identity(3).at[0,1].set(1e-4)
        result = self.update(props, F, 1e-6)
        self.assertEqual(int(result.error), ErrorCode.SUCCESS)
        S = TensorMath.dev(result.T)
        self.assertLess(TensorMath.norm(S)/np.sqrt(2.0), 1.0e9/np.sqrt(3.0))
        self.assertEqual(float(result.ep), 0.0)
        self.assertArrayEqual(result.Fp, np.identity(3))
        E = 200.0e9
        nu = 0.3
        K = E/(3.0*(1.0 - 2.0*nu))
        G = E/(2.0*(1.0 + nu))
        self.assertRelativelyNear(result.wave_speed, np.sqrt((K + 4.0*G/3.0)/self.rho), 1e-14)
        self.assertRelativelyNear(result.T[0,1], G*1e-4, 1e-12)

    def test_uniaxial_stretch_past_yield(self):
        result = self.update(self.props, isochoric_stretch(1.01), 1e-3)
        self.assertEqual(int(result.error), ErrorCode.SUCCESS)
        self.assertEqual(int(result.convergence), CONVERGED)
        self.assertGreater(float(result.ep), 0.0)
        Y = FlowStress.flow_stress(self.props, 298.0, result.ep, result.epdot, result.dp)
        f = TensorMath.norm(TensorMath.dev(result.T))/np.sqrt(2.0) - Y/np.sqrt(3.0)
        self.assertLess(np.abs(f), 1e-6)
        self.assertSymmetric(result.T/Y, 12)

    def test_zero_deformation_gives_zero_stress(self):
        for elasticModel in ['linear elastic', 'neo hookean']:
            properties = dict(self.properties, **{'elastic model': elasticModel})
            props = HyperEP.create_material_model_functions(properties).properties
            result = self.update(props, np.identity(3), 1e-3)
            self.assertEqual(int(result.error), ErrorCode.SUCCESS)
            self.assertArrayNear(result.T/props.E, np.zeros((3,3)), 14)

    def test_pure_dilation_has_no_deviator(self):
        for elasticModel in ['linear elastic', 'neo hookean']:
            properties = dict(self.properties, **{'elastic model': elasticModel})
            props = HyperEP.create_material_model_functions(properties).properties
            result = self.update(props, 1.002*np.identity(3), 1e-3)
            self.assertEqual(int(result.error), ErrorCode.SUCCESS)
            self.assertEqual(float(result.ep), 0.0)
            S = TensorMath.dev(result.T)
            self.assertLess(TensorMath.norm(S), 1e-12*TensorMath.norm(result.T))

    def test_non_finite_deformation_reports_predictor_failure(self):
        F = np.full((3,3), np.nan)
        result = self.update(self.props, F, 1e-3)
        self.assertEqual(int(result.error), ErrorCode.LINEAR_ELASTIC_FAILURE)

        properties = dict(self.properties, **{'elastic model': 'neo hookean'})
        props = HyperEP.create_material_model_functions(properties).properties
        result = self.update(props, F, 1e-3)
        self.assertEqual(int(result.error), ErrorCode.HYPERELASTIC_FAILURE)
        self.assertEqual(get_error_code_string(result.error), 'HYPERELASTIC FAILURE')


class StateHistoryFixture(TestFixture):

    def setUp(self):
        self.properties = {'elastic model': 'neo hookean',
                           'elastic modulus': 200.0e9,
                           'poisson ratio': 0.3,
                           'hardening model': 'johnson cook',
                           'rate dependence': 'johnson cook',
                           'yield strength': 350.0e6,
                           'hardening modulus': 275.0e6,
                           'hardening exponent': 0.36,
                           'reference temperature': 298.0,
                           'melt temperature': 1793.0,
                           'temperature exponent': 1.0,
                           'rate constant': 0.022,
                           'damage model': 'johnson cook',
                           'damage d1': 0.05,
                           'damage d2': 3.44,
                           'damage d3': -2.12,
                           'damage d4': 0.002,
                           'damage d5': 0.61,
                           'minimum failure strain': 0.01,
                           'density': 7800.0}
        self.model = HyperEP.create_material_model_functions(self.properties)

    def test_initial_state(self):
        state = self.model.compute_initial_state()
        self.assertEqual(state.shape, (HyperEP.NUM_STATE_VARS,))
        self.assertArrayEqual(state[HyperEP.PLASTIC_DISTORTION], np.identity(3).ravel())
        self.assertEqual(float(state[HyperEP.LOCALIZED]), 0.0)
        states = self.model.compute_initial_state((4,))
        self.assertEqual(states.shape, (4, HyperEP.NUM_STATE_VARS))

    def test_monotone_history(self):
        compute_state_new = jax.jit(self.model.compute_state_new)
        state = self.model.compute_initial_state()
        dt = 1e-5
        epOld = 0.0
        for stretch in np.linspace(1.0, 1.05, 11)[1:]:
            state, info = compute_state_new(isochoric_stretch(stretch), state, dt, 298.0)
            self.assertEqual(int(info.error), ErrorCode.SUCCESS)
            ep = float(state[HyperEP.EQPS])
            self.assertGreaterEqual(ep, epOld)
            self.assertGreaterEqual(float(state[HyperEP.EQPS_RATE]), 0.0)
            dp = float(state[HyperEP.DAMAGE])
            self.assertGreaterEqual(dp, 0.0)
            self.assertLessEqual(dp, 1.0)
            Fp = state[HyperEP.PLASTIC_DISTORTION].reshape((3,3))
            self.assertGreater(float(TensorMath.det(Fp)), 0.0)
            epOld = ep
        self.assertGreater(epOld, 0.0)
        self.assertGreater(float(state[HyperEP.DAMAGE]), 0.0)

    def test_vmap_over_points(self):
        compute_state_new = jax.jit(jax.vmap(self.model.compute_state_new, (0, 0, None, None)))
        states = self.model.compute_initial_state((3,))
        Fs = np.stack([np.identity(3), isochoric_stretch(1.0001), isochoric_stretch(1.02)])
        statesNew, info = compute_state_new(Fs, states, 1e-5, 298.0)
        self.assertTrue(np.all(info.error == ErrorCode.SUCCESS.value))
        self.assertEqual(float(statesNew[0, HyperEP.EQPS]), 0.0)
        self.assertEqual(float(statesNew[1, HyperEP.EQPS]), 0.0)
        self.assertGreater(float(statesNew[2, HyperEP.EQPS]), 0.0)
        self.assertArrayNear(info.wave_speed, info.wave_speed[0]*np.ones(3), 12)

    def test_wave_speed_function(self):
        props = self.model.properties
        c = self.model.compute_wave_speed()
        self.assertRelativelyNear(c, np.sqrt((props.bulk_modulus + 4.0*props.shear_modulus/3.0)/7800.0), 1e-14)
        self.assertRelativelyNear(self.model.compute_wave_speed(4.0*7800.0), 0.5*c, 1e-14)

    def test_state_update_reports_wave_speed_for_model_density(self):
        state = self.model.compute_initial_state()
        _, info = self.model.compute_state_new(np.identity(3), state, 1e-5, 298.0)
        self.assertRelativelyNear(info.wave_speed, self.model.compute_wave_speed(), 1e-14)

    def test_density_is_required(self):
        properties = dict(self.properties)
        del properties['density']
        with self.assertRaises(ValueError):
            HyperEP.create_material_model_functions(properties)
        properties['density'] = 0.0
        with self.assertRaises(ValueError):
            HyperEP.create_material_model_functions(properties)


class LocalizationFixture(TestFixture):

    def setUp(self):
        # initial damage beyond the critical value fails the point on its first update
        self.properties = {'elastic modulus': 200.0e9,
                           'poisson ratio': 0.3,
                           'yield strength': 250.0e6,
                           'damage model': 'johnson cook',
                           'damage d1': 0.5,
                           'initial damage': 1.5,
                           'critical damage': 1.0,
                           'density': 7800.0}
        self.rho = 7800.0
        self.F = np.diag(np.array([0.999, 1.0, 1.0]))

    def update(self, props, T=np.zeros((3,3)), localized=0.0):
        return HyperEP.update(props, self.rho, self.F, 1e-6, 298.0, T, np.identity(3),
                              0.0, 0.0, 0.3, localized)

    def test_first_failure_erodes_to_pressure(self):
        props = HyperEP.create_material_model_functions(self.properties).properties
        result = self.update(props)
        self.assertEqual(int(result.error), ErrorCode.SUCCESS)
        self.assertEqual(float(result.localized), 1.0)
        self.assertEqual(float(result.dp), 0.0)
        # compressive trial state keeps its pressure
        self.assertLess(float(TensorMath.mean_stress(result.T)), 0.0)
        self.assertLess(TensorMath.norm(TensorMath.dev(result.T)), 1e-6)

    def test_tension_erodes_to_zero(self):
        props = HyperEP.create_material_model_functions(self.properties).properties
        result = HyperEP.update(props, self.rho, np.diag(np.array([1.001, 1.0, 1.0])), 1e-6, 298.0,
                                np.zeros((3,3)), np.identity(3), 0.0, 0.0, 0.0, 0.0)
        self.assertEqual(float(result.localized), 1.0)
        self.assertArrayEqual(result.T, np.zeros((3,3)))

    def test_second_failure_removes_all_stress(self):
        props = HyperEP.create_material_model_functions(self.properties).properties
        result = self.update(props, localized=1.0)
        self.assertEqual(float(result.localized), 1.0)
        self.assertEqual(float(result.dp), 0.0)
        self.assertArrayEqual(result.T, np.zeros((3,3)))

    def test_no_shear_erosion(self):
        properties = dict(self.properties, **{'allow no tension': False, 'allow no shear': True})
        props = HyperEP.create_material_model_functions(properties).properties
        result = HyperEP.update(props, self.rho, np.diag(np.array([1.001, 1.0, 1.0])), 1e-6, 298.0,
                                np.zeros((3,3)), np.identity(3), 0.0, 0.0, 0.0, 0.0)
        self.assertEqual(float(result.localized), 1.0)
        self.assertGreater(float(TensorMath.mean_stress(result.T)), 0.0)
        self.assertLess(TensorMath.norm(TensorMath.dev(result.T)), 1e-6)

    def test_undamaged_point_does_not_localize(self):
        properties = dict(self.properties, **{'initial damage': 0.0})
        props = HyperEP.create_material_model_functions(properties).properties
        result = HyperEP.update(props, self.rho, self.F, 1e-6, 298.0, np.zeros((3,3)),
                                np.identity(3), 0.0, 0.0, 0.0, 0.0)
        self.assertEqual(float(result.localized), 0.0)
        self.assertEqual(float(result.dp), 0.0)


class MaterialModelFactoryFixture(TestFixture):

    def test_factory_builds_hyper_ep(self):
        properties = {'elastic modulus': 10.0, 'poisson ratio': 0.25, 'density': 2.5}
        for name in ['hyper ep', 'Hyperelastic Plastic']:
            model = MaterialModelFactory.material_model_factory(name, properties)
            self.assertEqual(model.properties.E, 10.0)
            self.assertEqual(model.density, 2.5)

    def test_unknown_name_raises(self):
        with self.assertRaises(MaterialModelFactory.MaterialModelNameError):
            MaterialModelFactory.material_model_factory('j2 plastic', {})


if __name__ == '__main__':
    unittest.main()
