from .MaterialModel import MaterialModel


class MaterialModelNameError(Exception): pass


_HYPER_EP_NAMES = ('hyper ep', 'hyperelastic plastic', 'hyper elastic plastic')


def material_model_factory(model_name: str, props: dict) -> MaterialModel:
    if model_name.lower() in _HYPER_EP_NAMES:
        from .HyperEP import create_material_model_functions
    else:
        print('\n\n')
        print('Invalid material model name "%s"\n' % model_name)
        raise MaterialModelNameError(model_name)
    return create_material_model_functions(props)
