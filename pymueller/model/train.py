import os
import logging
import yaml
import numpy as np
from datetime import datetime
from pymueller.paths import config_path
from pymueller.tools.config_tools import IndentDumper
from pymueller.model import components as _components
from pymueller.model.components import Component
from pymueller.model.mueller import mueller_product, mueller_identity

logger = logging.getLogger(__name__)


def _to_builtin(value):
    """ numpy scalars -> plain python values, so that the safe yaml dumper accepts them """
    if isinstance(value, (np.generic, np.ndarray)):
        return value.item()
    return value


def get_component_class(name):
    """
    Look up a component class by name, e.g. 'LinearPolarizer'.
    """
    cls = getattr(_components, name, None)
    if not (isinstance(cls, type) and issubclass(cls, Component)):
        raise ValueError('pymueller: unknown component \'{0}\''.format(name))
    return cls


class OpticalTrain:
    """
    A sequence of inline (collinear) optical components sharing one reference basis

    :param str config: \
        Path to a .yaml optical train configuration file.

    :param list components: \
        A list of instances of pymueller.Component, where the first entry is the first component that the light
        passes through.

    """
    def __init__(self, config=None, components=None):

        if config is not None:
            self.components = self.read_config(config)
        else:
            self.components = list(components) if components is not None else []

        self.check_inputs()

    def read_config(self, config):
        """
        Tries loading config as an absolute path to a .yaml file. Failing that, try it as a relative path to a .yaml file
        from the current working directory. Finally, try looking for config as a .yaml file saved in
        pymueller/model/config/.
        """

        fpaths = [
            config,
            os.path.join(os.getcwd(), config),
            os.path.join(config_path, config),
        ]
        for fpath in fpaths:
            if os.path.isfile(fpath):
                break
        else:
            raise FileNotFoundError('pymueller: could not find config file \'{0}\''.format(config))

        logger.info('reading optical train config from %s', fpath)
        try:
            with open(fpath) as f:
                config = yaml.safe_load(f)

            components = []
            for entry in config['components']:
                (name, kwargs), = entry.items()
                components.append(get_component_class(name)(**(kwargs or {})))

        except (yaml.YAMLError, KeyError, TypeError, AttributeError, ValueError) as e:
            raise ValueError('pymueller: could not interpret config file \'{0}\''.format(fpath)) from e

        return components

    def write_config(self, fpath):
        """
        Write the current optical train to a .yaml config file that can then be reloaded at a later date.

        :param str fpath: Path ending in '.yaml'.
        """
        if not fpath.endswith('.yaml'):
            raise ValueError('pymueller: config file must have a .yaml suffix')

        config = {
            'components': [{type(c).__name__: {k: _to_builtin(v) for k, v in vars(c).items()}}
                           for c in self.components],
        }

        logger.info('writing optical train config to %s', fpath)
        with open(fpath, 'w') as f:
            f.write('# This file was generated automatically at ' + datetime.now().strftime("%H:%M:%S, %m/%d/%Y") + '\n')
            yaml.dump(config, f, Dumper=IndentDumper, sort_keys=False)

    def check_inputs(self):
        if not all(isinstance(c, Component) for c in self.components):
            raise ValueError('pymueller: optical train components must be instances of pymueller.Component')

    def get_mueller_matrix(self):
        """
        Calculate total Mueller matrix for the optical train

        :return: (xr.DataArray) Mueller matrix.
        """
        logger.debug('composing Mueller matrix of %d components', len(self.components))
        mat_total = mueller_identity()
        for component in self.components:
            mat_total = mueller_product(component.get_mueller_matrix(), mat_total)
        return mat_total

    def propagate(self, stokes):
        """
        Pass light through the optical train.

        :param xr.DataArray stokes: Stokes vector of the incident light.
        :return: (xr.DataArray) Stokes vector of the transmitted light.
        """
        return mueller_product(self.get_mueller_matrix(), stokes)

    def __eq__(self, train_other):
        if not isinstance(train_other, OpticalTrain) or len(self.components) != len(train_other.components):
            return False
        return all([c == c_other for c, c_other in zip(self.components, train_other.components)])
