"""
Mueller matrices for idealised optical elements, and the helpers used to compose them.

A Mueller matrix is an xr.DataArray with dimensions ('mueller_v', 'mueller_h', ...). Any further dimensions are
broadcast, so a single call can evaluate many rays / pixels / samples at once. A Stokes vector has dimension 'stokes'.

The polarisation ellipse, and so the Stokes vector, is observed from the sensor, looking back along the propagation
direction of the beam.
"""
import numpy as np
import xarray as xr

MUELLER_DIMS = ('mueller_v', 'mueller_h', )


def _as_array(value):
    """ scalar, np.ndarray or xr.DataArray -> unnamed xr.DataArray """
    if isinstance(value, xr.DataArray):
        return xr.DataArray(value.data, dims=value.dims, coords=value.coords, )
    return xr.DataArray(value)


def assemble_mueller_matrix(m):
    """
    Build a Mueller matrix from a nested list of its 16 entries

    Entries can be any mix of scalars and xr.DataArrays; they are broadcast against each other first.

    :param list m: 4 x 4 nested list, m[row][column].
    :return: (xr.DataArray) Mueller matrix.
    """
    entries = xr.broadcast(*[_as_array(e) for row in m for e in row])
    m = [list(entries[4 * i:4 * i + 4]) for i in range(4)]
    mat = xr.combine_nested(m, concat_dim=MUELLER_DIMS, )
    return mat.transpose(*MUELLER_DIMS, ...).astype(float)


def mueller_product(mat1, mat2):
    """
    Compute the product of a Mueller matrix with a Mueller matrix / Stokes vector

    :param xarray.DataArray mat1: Mueller matrix.
    :param xarray.DataArray mat2: Mueller matrix or Stokes vector.
    :return: (xarray.DataArray) mat1 @ mat2, a Mueller matrix or a Stokes vector, depending on the dimensions of mat2.
    """

    if not all(d in mat1.dims for d in MUELLER_DIMS):
        raise ValueError('pymueller: first argument must be a Mueller matrix')

    if all(d in mat2.dims for d in MUELLER_DIMS):
        mat2_i = mat2.rename({'mueller_h': 'mueller_i'}).rename({'mueller_v': 'mueller_h'})
        prod = xr.dot(mat1, mat2_i, dim='mueller_h').rename({'mueller_i': 'mueller_h'})
        return prod.transpose(*MUELLER_DIMS, ...)

    elif 'stokes' in mat2.dims:
        mat2_i = mat2.rename({'stokes': 'mueller_h'})
        prod = xr.dot(mat1, mat2_i, dim='mueller_h').rename({'mueller_v': 'stokes'})
        return prod.transpose('stokes', ...)

    else:
        raise ValueError('pymueller: arguments not understood')


def mueller_transpose(mat):
    """
    Swap the input and output Stokes dimensions of a Mueller matrix.
    """
    mat = mat.rename({'mueller_v': 'mueller_t'}).rename({'mueller_h': 'mueller_v'}).rename({'mueller_t': 'mueller_h'})
    return mat.transpose(*MUELLER_DIMS, ...)


def mueller_identity():
    return xr.DataArray(np.identity(4), dims=MUELLER_DIMS, )


def depolarizer(value=1.):
    """
    Mueller matrix of an ideal depolarizer

    :param value: The (0, 0) element, i.e. the fraction of intensity transmitted.
    :type value: float, xr.DataArray
    :return: (xr.DataArray) Mueller matrix.
    """
    m0 = 0 * _as_array(value)
    return assemble_mueller_matrix([[value, m0, m0, m0],
                                    [m0, m0, m0, m0],
                                    [m0, m0, m0, m0],
                                    [m0, m0, m0, m0]])


def absorber(value):
    """
    Mueller matrix of an ideal absorber: uniform attenuation with no effect on polarisation.

    :param value: Fraction of intensity transmitted.
    :type value: float, xr.DataArray
    :return: (xr.DataArray) value * identity.
    """
    return assemble_mueller_matrix([[value, 0, 0, 0],
                                    [0, value, 0, 0],
                                    [0, 0, value, 0],
                                    [0, 0, 0, value]])


def linear_polarizer(value=1.):
    """
    Mueller matrix of a linear polarizer transmitting linear polarisation at 0 degrees.

    "Polarized Light" by Edward Collett, Ch. 5 eq. (13)

    :param value: Attenuation of the transmitted component (1 is an ideal polarizer).
    :type value: float, xr.DataArray
    :return: (xr.DataArray) Mueller matrix.
    """
    a = 0.5 * _as_array(value)
    return assemble_mueller_matrix([[a, a, 0, 0],
                                    [a, a, 0, 0],
                                    [0, 0, 0, 0],
                                    [0, 0, 0, 0]])


def linear_retarder(phase):
    """
    Mueller matrix of a linear retarder with its fast axis aligned vertically.

    Quarter-wave and half-wave plates are the special cases phase = pi / 2 and phase = pi.

    "Polarized Light" by Edward Collett, Ch. 5 eq. (27)

    :param phase: Phase difference in radians between the fast and slow axes.
    :type phase: float, xr.DataArray
    :return: (xr.DataArray) Mueller matrix.
    """
    phase = _as_array(phase)
    s = np.sin(phase)
    c = np.cos(phase)
    return assemble_mueller_matrix([[1, 0, 0, 0],
                                    [0, 1, 0, 0],
                                    [0, 0, c, -s],
                                    [0, 0, s, c]])


def diattenuator(x, y):
    """
    Mueller matrix of a linear diattenuator, attenuating the components at 0 and 90 degrees by x and y respectively.

    :param x: Transmission at 0 degrees.
    :type x: float, xr.DataArray
    :param y: Transmission at 90 degrees.
    :type y: float, xr.DataArray
    :return: (xr.DataArray) Mueller matrix.
    """
    x = _as_array(x)
    y = _as_array(y)
    a = 0.5 * (x + y)
    b = 0.5 * (x - y)
    c = np.sqrt(x * y)
    return assemble_mueller_matrix([[a, b, 0, 0],
                                    [b, a, 0, 0],
                                    [0, 0, c, 0],
                                    [0, 0, 0, c]])


def left_circular_polarizer():
    return 0.5 * xr.DataArray([[1, 0, 0, -1],
                               [0, 0, 0, 0],
                               [0, 0, 0, 0],
                               [-1, 0, 0, 1]], dims=MUELLER_DIMS, ).astype(float)


def right_circular_polarizer():
    return 0.5 * xr.DataArray([[1, 0, 0, 1],
                               [0, 0, 0, 0],
                               [0, 0, 0, 0],
                               [1, 0, 0, 1]], dims=MUELLER_DIMS, ).astype(float)


def rotator(theta):
    """
    Mueller matrix of an ideal rotator

    Rotates the reference frame of the Stokes vector anti-clockwise by theta (facing the beam from the sensor side).
    e.g. horizontally polarised light [1, 1, 0, 0] looks like -45 degree polarised light [1, 0, -1, 0] after a +45
    degree rotator.

    "Polarized Light" by Edward Collett, Ch. 5 eq. (43)

    :param theta: Rotation angle in radians.
    :type theta: float, xr.DataArray
    :return: (xr.DataArray) Mueller matrix.
    """
    theta2 = 2 * _as_array(theta)
    s = np.sin(theta2)
    c = np.cos(theta2)
    return assemble_mueller_matrix([[1, 0, 0, 0],
                                    [0, c, s, 0],
                                    [0, -s, c, 0],
                                    [0, 0, 0, 1]])


def rotated_element(theta, mat):
    """
    Rotate an optical element anti-clockwise by theta

    :param theta: Rotation angle in radians.
    :type theta: float, xr.DataArray
    :param xr.DataArray mat: Mueller matrix of the element in its canonical orientation.
    :return: (xr.DataArray) Mueller matrix of the rotated element.
    """
    rot = rotator(theta)
    return mueller_product(mueller_transpose(rot), mueller_product(mat, rot))


def reverse(mat):
    """
    Reverse the direction of propagation. Also used for reflecting reference frames.

    :param xr.DataArray mat: Mueller matrix.
    :return: (xr.DataArray) Mueller matrix.
    """
    flip = xr.DataArray(np.diag([1., 1., -1., -1.]), dims=MUELLER_DIMS, )
    return mueller_product(flip, mat)
