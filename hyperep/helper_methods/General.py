from hyperep.material import MaterialModelFactory
from hyperep.material.MaterialModel import MaterialModel
from hyperep.material.MaterialPointSimulator import LOADINGS
from hyperep.material.MaterialPointSimulator import MaterialPointOutput
from hyperep.material.MaterialPointSimulator import MaterialPointSimulator
from hyperep.material.Properties import ErrorCode
from hyperep.material.Properties import get_error_code_string

from matplotlib import pyplot as plt
import numpy as onp

from typing import Optional


class MaterialModelBlockError(Exception): pass
class SimulationBlockError(Exception): pass


def setup_material_model(material_model_block: dict) -> MaterialModel:
    print('Setting up material model...')
    try:
        model_name = material_model_block['model name']
        model_props = material_model_block['model properties']
        print('    Model name = %s' % model_name)
        for key, value in model_props.items():
            print('    %-28s = %s' % (key, value))
        model = MaterialModelFactory.material_model_factory(model_name, model_props)
    except (AttributeError, KeyError, TypeError, ValueError,
            MaterialModelFactory.MaterialModelNameError) as e:
        print('\n\n')
        print('Error parsing material model block: %s' % e)
        print('Correct syntax is:\n\nmaterial model:\n  model name:       <str>\n  model properties: <dict_of_properties>\n\n')
        raise MaterialModelBlockError(str(e))
    print()
    return model


def setup_simulation(simulation_block: dict, material_model: MaterialModel) -> MaterialPointSimulator:
    print('Setting up material point simulation...')
    try:
        loading = simulation_block.get('loading', 'uniaxial strain')
        max_strain = float(simulation_block['maximum strain'])
        strain_rate = float(simulation_block['strain rate'])
        steps = int(simulation_block.get('steps', 10))
        temperature = float(simulation_block.get('temperature', 298.0))
        print('    Loading        = %s' % loading)
        print('    Maximum strain = %s' % max_strain)
        print('    Strain rate    = %s' % strain_rate)
        print('    Steps          = %s' % steps)
        print('    Temperature    = %s' % temperature)
        if strain_rate <= 0.0:
            raise ValueError('strain rate must be positive')
        if steps < 2:
            raise ValueError('at least two steps are required')
        simulator = MaterialPointSimulator(material_model, max_strain, strain_rate,
                                           steps=steps, temperature=temperature,
                                           loading=loading)
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        print('\n\n')
        print('Error parsing simulation block: %s' % e)
        print('Correct syntax is:\n\nsimulation:\n  loading:        <%s>' % ' | '.join(LOADINGS))
        print('  maximum strain: <float>\n  strain rate:    <float>\n  steps:          <int>\n  temperature:    <float>\n\n')
        raise SimulationBlockError(str(e))
    print()
    return simulator


def print_history(output: MaterialPointOutput) -> None:
    print('%5s %14s %14s %14s %14s %14s %10s' %
          ('step', 'time', 'strain', 'stress xx', 'eqps', 'damage', 'localized'))
    for i in range(len(output.times)):
        print('%5d %14.6e %14.6e %14.6e %14.6e %14.6e %10d' %
              (i, output.times[i], output.strainHistory[i], output.stressHistory[i, 0, 0],
               output.eqpsHistory[i], output.damageHistory[i], int(output.localizedHistory[i])))
    if output.waveSpeed is not None:
        print('\nWave speed = %s' % float(output.waveSpeed))
    if len(output.errorCodes) and output.errorCodes[-1] != ErrorCode.SUCCESS:
        print('Simulation stopped with %s' % get_error_code_string(output.errorCodes[-1]))
    print()


def write_history(output: MaterialPointOutput, csv_file: str) -> None:
    print('Writing history to %s' % csv_file)
    n = len(output.times)
    stress = output.stressHistory.reshape((n, 9))
    data = onp.column_stack((output.times, output.strainHistory, stress,
                             output.eqpsHistory, output.damageHistory, output.localizedHistory))
    header = ','.join(['time', 'strain'] +
                      ['stress_%s%s' % (i, j) for i in 'xyz' for j in 'xyz'] +
                      ['eqps', 'damage', 'localized'])
    onp.savetxt(csv_file, data, delimiter=',', header=header, comments='')


def plot_history(output: MaterialPointOutput, plot_file: str, title: Optional[str] = None) -> None:
    print('Plotting history to %s' % plot_file)
    fig, axes = plt.subplots(1, 2, figsize=(10, 4))
    axes[0].plot(output.strainHistory, output.stressHistory[:, 0, 0], marker='o')
    axes[0].set_xlabel('strain')
    axes[0].set_ylabel('stress xx')
    axes[1].plot(output.strainHistory, output.eqpsHistory, label='eqps')
    axes[1].plot(output.strainHistory, output.damageHistory, label='damage')
    axes[1].set_xlabel('strain')
    axes[1].legend()
    if title is not None:
        fig.suptitle(title)
    fig.tight_layout()
    fig.savefig(plot_file)
    plt.close(fig)
