import re
import yaml


REQUIRED_BLOCKS = ('material model', 'simulation')


def parse_yaml_input_file(input_file: str) -> dict:
    with open(input_file, 'rb') as f:
        try:
            d = yaml.safe_load(f)
        except yaml.YAMLError:
            raise ValueError('Issue with yaml input file yaml format!')
    if not isinstance(d, dict):
        raise ValueError('Input file %s does not contain a yaml mapping!' % input_file)

    missing = [block for block in REQUIRED_BLOCKS if not isinstance(d.get(block), dict)]
    if missing:
        raise ValueError('Input file %s is missing the block(s): %s'
                         % (input_file, ', '.join(missing)))
    return d


def dump_input_file(input_file: str) -> None:
    with open(input_file, 'r') as f:
        lines = f.readlines()

    print('######################################################################')
    print('# BEGIN INPUT FILE DUMP')
    print('######################################################################\n')
    for line in lines:
        print(re.sub('\n', '', line))
    print()
    print('######################################################################')
    print('# END INPUT FILE DUMP')
    print('######################################################################\n')
