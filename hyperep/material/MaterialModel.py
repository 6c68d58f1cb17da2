from collections import namedtuple

MaterialModel = namedtuple('MaterialModel',
                           ['compute_initial_state', 'compute_state_new', 'compute_wave_speed',
                            'properties', 'density'],
                           defaults=(None, None))
