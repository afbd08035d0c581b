import numpy as np
from math import radians
from pymueller.model.mueller import depolarizer, absorber, linear_polarizer, diattenuator, linear_retarder, \
    rotator, rotated_element, left_circular_polarizer, right_circular_polarizer


class Component:
    """
    Base class for an inline optical component

    """

    def __eq__(self, other_component):
        if type(self) == type(other_component) \
                and list(vars(self).values()) == list(vars(other_component).values()):
            return True
        else:
            return False

    def get_mueller_matrix(self):
        raise NotImplementedError


class OrientableComponent(Component):
    """
    Base class for component with orientation-dependent behaviour

    :param float orientation: Orientation in degrees, anti-clockwise from the reference basis.
    """
    def __init__(self, orientation=0, **kwargs):
        super().__init__(**kwargs)
        self.orientation = orientation

    def orient(self, matrix):
        """
        Calculate component Mueller matrix at the set orientation.

        :param xr.DataArray matrix: Component Mueller matrix.
        :return: (xr.DataArray) Component Mueller matrix at the set orientation.
        """
        return rotated_element(radians(self.orientation), matrix)


def _check_transmission(*tx):
    if not all(0 <= t <= 1 for t in tx):
        raise ValueError('pymueller: transmission must be in [0, 1]')


class Depolarizer(Component):
    """
    Ideal depolarizer

    :param float value: Fraction of intensity transmitted. [0, 1] - default is 1.
    """
    def __init__(self, value=1):
        super().__init__()
        _check_transmission(value)
        self.value = value

    def get_mueller_matrix(self):
        return depolarizer(self.value)


class Absorber(Component):
    """
    Neutral density attenuator with no polarisation-dependent behaviour.

    :param float value: Fraction of intensity transmitted. [0, 1] - default is 1.
    """
    def __init__(self, value=1):
        super().__init__()
        _check_transmission(value)
        self.value = value

    def get_mueller_matrix(self):
        return absorber(self.value)


class LinearPolarizer(OrientableComponent):
    """
    Linear polarizer

    :param float value: \
        Transmission of the polarised component. [0, 1] - default is 1.

    :param float orientation: \
        Orientation in degrees of the transmission axis relative to the reference basis.

    """
    def __init__(self, value=1, **kwargs):
        super().__init__(**kwargs)
        _check_transmission(value)
        self.value = value

    def get_mueller_matrix(self):
        return self.orient(linear_polarizer(self.value))


class Diattenuator(OrientableComponent):
    """
    Linear diattenuator

    :param float tx_x: \
        Transmission, primary component. [0, 1] - default is 1.

    :param float tx_y: \
        Transmission, secondary (orthogonal) component. [0, 1] - default is 0.

    :param float orientation: \
        Orientation in degrees of the primary axis relative to the reference basis.

    """
    def __init__(self, tx_x=1, tx_y=0, **kwargs):
        super().__init__(**kwargs)
        _check_transmission(tx_x, tx_y)
        self.tx_x = tx_x
        self.tx_y = tx_y

    def get_mueller_matrix(self):
        return self.orient(diattenuator(self.tx_x, self.tx_y))


class LinearRetarder(OrientableComponent):
    """
    Base class for a general linear retarder
    """

    def get_mueller_matrix(self):
        return self.orient(linear_retarder(self.get_delay()))

    def get_delay(self):
        raise NotImplementedError


class IdealWaveplate(LinearRetarder):
    """
    Ideal waveplate imparting a given delay.

    :param float delay: Imparted delay in radians.
    :param float orientation: Orientation of component fast axis in degrees, relative to the reference basis.
    """
    def __init__(self, delay, **kwargs):
        super().__init__(**kwargs)
        self.delay = delay

    def get_delay(self):
        return self.delay


class QuarterWaveplate(LinearRetarder):
    """
    Ideal quarter-wave plate.
    """

    def get_delay(self):
        return np.pi / 2


class HalfWaveplate(LinearRetarder):
    """
    Ideal half-wave plate.
    """

    def get_delay(self):
        return np.pi


class Rotator(Component):
    """
    Rotation of the reference frame, e.g. an optically active medium.

    :param float angle: Rotation angle in degrees, anti-clockwise facing the beam from the sensor side.
    """
    def __init__(self, angle=0):
        super().__init__()
        self.angle = angle

    def get_mueller_matrix(self):
        return rotator(radians(self.angle))


class CircularPolarizer(Component):
    """
    Ideal circular polarizer

    :param str handedness: 'right' or 'left'.
    """
    def __init__(self, handedness='right'):
        super().__init__()
        if handedness not in ['right', 'left']:
            raise ValueError('pymueller: handedness must be \'right\' or \'left\'')
        self.handedness = handedness

    def get_mueller_matrix(self):
        if self.handedness == 'right':
            return right_circular_polarizer()
        return left_circular_polarizer()
