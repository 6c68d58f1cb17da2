"""Material properties, model switches and result codes of the hyper-EP model.

The ``Properties`` record is an equinox module: the model switches and the
erosion flags are static fields, so a jitted update is specialized on the
chosen models and the case analysis over them happens at trace time. The
numeric parameters are ordinary pytree leaves.
"""

from enum import Enum, IntEnum, auto
from typing import Optional

import equinox as eqx

from hyperep import Math


class Elastic(Enum):
    LINEAR_ELASTIC = auto()
    NEO_HOOKEAN = auto()


class Hardening(Enum):
    NONE = auto()
    LINEAR_ISOTROPIC = auto()
    POWER_LAW = auto()
    ZERILLI_ARMSTRONG = auto()
    JOHNSON_COOK = auto()


class RateDependence(Enum):
    NONE = auto()
    ZERILLI_ARMSTRONG = auto()
    JOHNSON_COOK = auto()


class Damage(Enum):
    NONE = auto()
    JOHNSON_COOK = auto()


class ErrorCode(IntEnum):
    NOT_SET = 0
    SUCCESS = 1
    LINEAR_ELASTIC_FAILURE = 2
    HYPERELASTIC_FAILURE = 3
    RADIAL_RETURN_FAILURE = 4
    ELASTIC_DEFORMATION_UPDATE_FAILURE = 5
    MODEL_EVAL_FAILURE = 6


class StateFlag(IntEnum):
    NONE = 0
    TRIAL = 1
    ELASTIC = 2
    PLASTIC = 3
    REMAPPED = 4


_ERROR_CODE_STRINGS = {
    ErrorCode.NOT_SET: 'NOT SET',
    ErrorCode.SUCCESS: 'SUCCESS',
    ErrorCode.LINEAR_ELASTIC_FAILURE: 'LINEAR ELASTIC FAILURE',
    ErrorCode.HYPERELASTIC_FAILURE: 'HYPERELASTIC FAILURE',
    ErrorCode.RADIAL_RETURN_FAILURE: 'RADIAL RETURN FAILURE',
    ErrorCode.ELASTIC_DEFORMATION_UPDATE_FAILURE: 'ELASTIC DEFORMATION UPDATE FAILURE',
    ErrorCode.MODEL_EVAL_FAILURE: 'MODEL EVALUATION FAILURE',
}


def get_error_code_string(code):
    """Human readable name of an error code.

    Accepts ``ErrorCode`` members, plain integers and (concrete) jax scalars.
    """
    try:
        return _ERROR_CODE_STRINGS[ErrorCode(int(code))]
    except ValueError:
        return 'UNKNOWN'


class Properties(eqx.Module):
    """Per material point configuration.

    The meaning of ``C1`` .. ``C4`` and ``ep_dot_0`` depends on the hardening
    and rate models:

    ================  =====  =======  =====  =============
    hardening         C1     C2       C3     C4
    ================  =====  =======  =====  =============
    ZerilliArmstrong  c1     c2       c3     c4 (rate)
    JohnsonCook       T_ref  T_melt   m      C (rate)
    ================  =====  =======  =====  =============

    For Johnson-Cook an absent melt temperature is ``C2 = None``.
    """
    elastic: Elastic = eqx.field(static=True, default=Elastic.LINEAR_ELASTIC)
    E: float = 1.0
    nu: float = 0.0

    hardening: Hardening = eqx.field(static=True, default=Hardening.NONE)
    rate_dep: RateDependence = eqx.field(static=True, default=RateDependence.NONE)
    A: float = 0.0
    B: float = 0.0
    n: float = 1.0
    C1: float = 0.0
    C2: Optional[float] = None
    C3: float = 0.0
    C4: float = 0.0
    ep_dot_0: float = 1.0

    damage: Damage = eqx.field(static=True, default=Damage.NONE)
    allow_no_tension: bool = eqx.field(static=True, default=True)
    allow_no_shear: bool = eqx.field(static=True, default=False)
    set_stress_to_zero: bool = eqx.field(static=True, default=False)
    D1: float = 0.0
    D2: float = 0.0
    D3: float = 0.0
    D4: float = 0.0
    D5: float = 0.0
    D0: float = 0.0
    DC: float = 1.0
    eps_f_min: float = 0.0

    @property
    def shear_modulus(self):
        return self.E/2.0/(1.0 + self.nu)

    @property
    def bulk_modulus(self):
        return self.E/3.0/(1.0 - 2.0*self.nu)

    @property
    def temp_ref(self):
        return self.C1

    @property
    def temp_melt(self):
        """Johnson-Cook melt temperature, or ``None`` when not given."""
        if self.hardening != Hardening.JOHNSON_COOK or self.C2 is None:
            return None
        return self.C2


def make_properties(**kwargs):
    """Construct a validated ``Properties`` record.

    Raises
    ------
    ValueError
        If the elastic constants are inadmissible, the hardening and rate
        models are incompatible or the damage parameters are invalid.
    """
    if 'C2' in kwargs and kwargs['C2'] is not None and not Math.is_finite_parameter(kwargs['C2']):
        kwargs['C2'] = None
    props = Properties(**kwargs)
    validate_properties(props)
    return props


def validate_properties(props):
    if not props.E > 0.0:
        raise ValueError('Elastic modulus must be positive, got %s' % props.E)
    if not -1.0 < props.nu < 0.5:
        raise ValueError('Poisson ratio must lie in (-1, 0.5), got %s' % props.nu)

    if props.rate_dep == RateDependence.ZERILLI_ARMSTRONG and \
       props.hardening != Hardening.ZERILLI_ARMSTRONG:
        raise ValueError('Zerilli-Armstrong rate dependence requires Zerilli-Armstrong hardening')
    if props.rate_dep == RateDependence.JOHNSON_COOK:
        if props.hardening != Hardening.JOHNSON_COOK:
            raise ValueError('Johnson-Cook rate dependence requires Johnson-Cook hardening')
        if not props.ep_dot_0 > 0.0:
            raise ValueError('Reference plastic strain rate must be positive')
    if props.hardening == Hardening.ZERILLI_ARMSTRONG and props.C2 is None:
        raise ValueError('Zerilli-Armstrong hardening requires the constant c2')

    if props.damage != Damage.NONE:
        if not props.DC > 0.0:
            raise ValueError('Critical damage must be positive, got %s' % props.DC)
        if not props.eps_f_min >= 0.0:
            raise ValueError('Minimum failure strain must be non-negative, got %s' % props.eps_f_min)


_ELASTIC_MODELS = {'linear elastic': Elastic.LINEAR_ELASTIC,
                   'neo hookean': Elastic.NEO_HOOKEAN}

_HARDENING_MODELS = {'none': Hardening.NONE,
                     'linear': Hardening.LINEAR_ISOTROPIC,
                     'linear isotropic': Hardening.LINEAR_ISOTROPIC,
                     'power law': Hardening.POWER_LAW,
                     'zerilli armstrong': Hardening.ZERILLI_ARMSTRONG,
                     'johnson cook': Hardening.JOHNSON_COOK}

_RATE_MODELS = {'none': RateDependence.NONE,
                'zerilli armstrong': RateDependence.ZERILLI_ARMSTRONG,
                'johnson cook': RateDependence.JOHNSON_COOK}

_DAMAGE_MODELS = {'none': Damage.NONE,
                  'johnson cook': Damage.JOHNSON_COOK}


def _lookup(table, properties, key, default):
    name = str(properties.get(key, default)).lower()
    if name not in table:
        raise ValueError('Unknown %s "%s", expected one of %s' % (key, name, sorted(table)))
    return table[name]


def parse_properties(properties):
    """Read a property dictionary (as found in an input file) into ``Properties``."""
    kwargs = {}

    kwargs['elastic'] = _lookup(_ELASTIC_MODELS, properties, 'elastic model', 'linear elastic')
    kwargs['E'] = float(properties['elastic modulus'])
    kwargs['nu'] = float(properties['poisson ratio'])

    hardening = _lookup(_HARDENING_MODELS, properties, 'hardening model', 'none')
    kwargs['hardening'] = hardening
    kwargs['rate_dep'] = _lookup(_RATE_MODELS, properties, 'rate dependence', 'none')
    kwargs['A'] = float(properties.get('yield strength', 0.0))
    kwargs['B'] = float(properties.get('hardening modulus', 0.0))
    kwargs['n'] = float(properties.get('hardening exponent', 1.0))
    if hardening == Hardening.ZERILLI_ARMSTRONG:
        kwargs['C1'] = float(properties.get('za c1', 0.0))
        kwargs['C2'] = float(properties['za c2']) if 'za c2' in properties else None
        kwargs['C3'] = float(properties.get('za c3', 0.0))
        kwargs['C4'] = float(properties.get('za c4', 0.0))
    elif hardening == Hardening.JOHNSON_COOK:
        kwargs['C1'] = float(properties.get('reference temperature', 0.0))
        if 'melt temperature' in properties:
            kwargs['C2'] = float(properties['melt temperature'])
        kwargs['C3'] = float(properties.get('temperature exponent', 1.0))
        kwargs['C4'] = float(properties.get('rate constant', 0.0))
    kwargs['ep_dot_0'] = float(properties.get('reference plastic strain rate', 1.0))

    damage = _lookup(_DAMAGE_MODELS, properties, 'damage model', 'none')
    kwargs['damage'] = damage
    kwargs['allow_no_tension'] = bool(properties.get('allow no tension', True))
    kwargs['allow_no_shear'] = bool(properties.get('allow no shear', False))
    kwargs['set_stress_to_zero'] = bool(properties.get('set stress to zero', False))
    if damage != Damage.NONE:
        for i in range(1, 6):
            kwargs['D%d' % i] = float(properties.get('damage d%d' % i, 0.0))
        kwargs['D0'] = float(properties.get('initial damage', 0.0))
        kwargs['DC'] = float(properties.get('critical damage', 1.0))
        kwargs['eps_f_min'] = float(properties.get('minimum failure strain', 0.0))

    return make_properties(**kwargs)
