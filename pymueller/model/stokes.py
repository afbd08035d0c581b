import numpy as np
import xarray as xr
from pymueller.model.mueller import _as_array


def stokes_vector(s0, s1=0., s2=0., s3=0.):
    """
    Stokes vector

    :param s0: Total intensity.
    :param s1: Linear polarisation, 0 degrees minus 90 degrees.
    :param s2: Linear polarisation, +45 degrees minus -45 degrees.
    :param s3: Circular polarisation, right minus left.
    :return: (xr.DataArray) with dimension 'stokes', broadcast over the dimensions of the inputs.
    """
    params = xr.broadcast(*[_as_array(s) for s in [s0, s1, s2, s3]])
    return xr.combine_nested(list(params), concat_dim=('stokes', )).transpose('stokes', ...).astype(float)


def unpolarized(intensity=1.):
    return stokes_vector(intensity)


def stokes_to_mueller(stokes):
    """
    Express a Stokes vector as a Mueller matrix whose first column holds the Stokes parameters

    :param xr.DataArray stokes: Stokes vector.
    :return: (xr.DataArray) Mueller matrix.
    """
    col = stokes.rename({'stokes': 'mueller_v'})
    cols = [col] + [xr.zeros_like(col)] * 3
    return xr.concat(cols, dim='mueller_h').transpose('mueller_v', 'mueller_h', ...)


def mueller_to_stokes(mat):
    return mat.isel(mueller_h=0, drop=True).rename({'mueller_v': 'stokes'}).transpose('stokes', ...)


def degree_of_polarization(stokes):
    """
    Degree of polarisation, sqrt(s1 ** 2 + s2 ** 2 + s3 ** 2) / s0

    :param xr.DataArray stokes: Stokes vector.
    :return: (xr.DataArray) in [0, 1] for physically realisable light, 0 where there is no light.
    """
    s0 = stokes.isel(stokes=0, drop=True)
    pol = np.sqrt((stokes.isel(stokes=slice(1, None)) ** 2).sum('stokes'))
    with np.errstate(divide='ignore', invalid='ignore'):
        return xr.where(s0 == 0, 0., pol / s0)
