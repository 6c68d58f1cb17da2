import argparse

from hyperep.helper_methods.General import plot_history
from hyperep.helper_methods.General import print_history
from hyperep.helper_methods.General import setup_material_model
from hyperep.helper_methods.General import setup_simulation
from hyperep.helper_methods.General import write_history

from hyperep.helper_methods.Parser import dump_input_file
from hyperep.helper_methods.Parser import parse_yaml_input_file


print('\nhyperep v0.0.1\n')

# create a parser
parser = argparse.ArgumentParser(
    prog='hyperep',
    description='Material point driver for a hyperelastic-plastic model with Johnson-Cook damage')
parser.add_argument('-i', '--input_file', required=True,
                    help='File name of input file <input_file.yml>')

# parser the input arguments
args = parser.parse_args()
print('Input file = %s\n' % args.input_file)

# dump input file
dump_input_file(args.input_file)

print('######################################################################')
print('# BEGIN HYPEREP LOGGING')
print('######################################################################\n')
# parse the input file
inputs = parse_yaml_input_file(args.input_file)

# setup the material model
model = setup_material_model(inputs['material model'])

# setup the simulation
simulator = setup_simulation(inputs['simulation'], model)

output = simulator.run()
print_history(output)

outputs = inputs.get('output') or {}
if 'csv file' in outputs:
    write_history(output, outputs['csv file'])
if 'plot file' in outputs:
    plot_history(output, outputs['plot file'], title=inputs['material model']['model name'])

print('######################################################################')
print('# END HYPEREP LOGGING')
print('######################################################################\n')
