"""
Reference frames for Stokes vectors.

A Stokes vector only means something together with a reference basis vector orthogonal to its propagation direction:
"horizontal" has to be defined before light can be horizontally polarised. These bases are never stored. Instead they
are recomputed on the fly with stokes_basis(), which is deterministic, and Mueller matrices are re-expressed in new
bases with rotate_stokes_basis() and friends.

3-vectors are xr.DataArrays with dimension 'vector' (x, y, z). Bases must be unit vectors orthogonal to the
propagation direction; this is not checked.
"""
import numpy as np
import xarray as xr
from numba import njit, vectorize, f8
from pymueller.model.mueller import rotator, mueller_product, mueller_transpose


def as_vector(v):
    """
    Convert input to a 3-vector DataArray

    :param v: 3-vector(s). If not an xr.DataArray, the leading axis must have length 3 and any further axes are
        named 'dim_0', 'dim_1', ...
    :type v: list, np.ndarray, xr.DataArray
    :return: (xr.DataArray) with dimension 'vector'.
    """
    if isinstance(v, xr.DataArray):
        if 'vector' not in v.dims or v.sizes['vector'] != 3:
            raise ValueError('pymueller: vector must have a \'vector\' dimension of length 3')
        return v.astype(float)

    v = np.asarray(v, dtype=float)
    if v.ndim == 0 or v.shape[0] != 3:
        raise ValueError('pymueller: vector must have a leading axis of length 3')
    dims = ('vector', ) + tuple('dim_{}'.format(i) for i in range(v.ndim - 1))
    return xr.DataArray(v, dims=dims, )


def _components(v):
    return v.isel(vector=0, drop=True), v.isel(vector=1, drop=True), v.isel(vector=2, drop=True)


def _from_components(x, y, z):
    x, y, z = xr.broadcast(x, y, z)
    return xr.concat([x, y, z], dim='vector').transpose('vector', ...)


def dot(a, b):
    return (as_vector(a) * as_vector(b)).sum('vector')


def cross(a, b):
    return xr.cross(as_vector(a), as_vector(b), dim='vector').transpose('vector', ...)


def normalize(v):
    v = as_vector(v)
    return v / np.sqrt(dot(v, v))


def coordinate_system(n):
    """
    Complete an orthonormal frame (s, t, n) from a unit vector n

    Branchless construction from "Building an Orthonormal Basis, Revisited" by Duff et al. (2017).

    :param n: Unit vector(s).
    :type n: list, np.ndarray, xr.DataArray
    :return: (tuple) s, t
    """
    nx, ny, nz = _components(as_vector(n))

    # sign bit of n_z, so that -0.0 picks the lower hemisphere
    sign = np.copysign(1., nz)
    a = -1 / (sign + nz)
    b = nx * ny * a

    s = _from_components(sign * nx ** 2 * a + 1, sign * b, -sign * nx)
    t = _from_components(b, sign + ny ** 2 * a, -ny)
    return s, t


@njit(cache=True, )
def _unit_angle(ax, ay, az, bx, by, bz):
    if ax * bx + ay * by + az * bz >= 0:
        return 2 * np.arcsin(0.5 * np.sqrt((bx - ax) ** 2 + (by - ay) ** 2 + (bz - az) ** 2))
    return np.pi - 2 * np.arcsin(0.5 * np.sqrt((bx + ax) ** 2 + (by + ay) ** 2 + (bz + az) ** 2))


@vectorize([f8(f8, f8, f8, f8, f8, f8), ], nopython=True, cache=True, )
def _calc_unit_angle(ax, ay, az, bx, by, bz):
    return _unit_angle(ax, ay, az, bx, by, bz)


@vectorize([f8(f8, f8, f8, f8, f8, f8, f8, f8, f8), ], nopython=True, cache=True, )
def _calc_stokes_rotation_angle(fx, fy, fz, cx, cy, cz, tx, ty, tz):
    norm_c = np.sqrt(cx ** 2 + cy ** 2 + cz ** 2)
    norm_t = np.sqrt(tx ** 2 + ty ** 2 + tz ** 2)
    theta = _unit_angle(cx / norm_c, cy / norm_c, cz / norm_c, tx / norm_t, ty / norm_t, tz / norm_t)

    # right-hand rule about the direction of travel
    triple = fx * (cy * tz - cz * ty) + fy * (cz * tx - cx * tz) + fz * (cx * ty - cy * tx)
    if triple < 0:
        theta = -theta
    return theta


def unit_angle(a, b):
    """
    Angle in radians between two unit vectors, numerically stable near 0 and pi

    :param a: Unit vector(s).
    :type a: list, np.ndarray, xr.DataArray
    :param b: Unit vector(s).
    :type b: list, np.ndarray, xr.DataArray
    :return: (xr.DataArray) angle in [0, pi].
    """
    args = [*_components(as_vector(a)), *_components(as_vector(b))]
    return xr.apply_ufunc(_calc_unit_angle, *args, dask='allowed', )


def stokes_basis(w):
    """
    Reference basis vector for a Stokes vector travelling along w

    :param w: Direction of travel (normalised).
    :type w: list, np.ndarray, xr.DataArray
    :return: (xr.DataArray) basis vector, orthogonal to w.
    """
    s, _ = coordinate_system(w)
    return s


def rotate_stokes_basis(forward, basis_current, basis_target):
    """
    Mueller matrix that aligns the reference frames of two collinear Stokes vectors

    A Stokes vector s expressed in basis_current is the Stokes vector rotate_stokes_basis(...) @ s expressed in
    basis_target. e.g. travelling along +z, horizontally polarised light [1, 1, 0, 0] in basis [1, 0, 0] is +45 degree
    polarised light [1, 0, 1, 0] in basis [0.707, -0.707, 0].

    :param forward: Direction of travel (normalised).
    :param basis_current: Current (normalised) Stokes basis, orthogonal to forward.
    :param basis_target: Target (normalised) Stokes basis, orthogonal to forward.
    :return: (xr.DataArray) Mueller matrix performing the change of reference frame.
    """
    args = [*_components(as_vector(forward)), *_components(as_vector(basis_current)),
            *_components(as_vector(basis_target))]
    theta = xr.apply_ufunc(_calc_stokes_rotation_angle, *args, dask='allowed', )
    return rotator(theta)


def rotate_mueller_basis(mat, in_forward, in_basis_current, in_basis_target,
                         out_forward, out_basis_current, out_basis_target):
    """
    Re-express a Mueller matrix in new reference frames, rotating the input and output frames independently

    mat operates from in_basis_current to out_basis_current; the returned matrix operates from in_basis_target to
    out_basis_target. Needed whenever the incoming and outgoing directions differ, e.g. reflection at an interface.

    :param xr.DataArray mat: Mueller matrix.
    :param in_forward: Direction of travel of the input Stokes vector (normalised).
    :param in_basis_current: Current input basis, orthogonal to in_forward.
    :param in_basis_target: Target input basis, orthogonal to in_forward.
    :param out_forward: Direction of travel of the output Stokes vector (normalised).
    :param out_basis_current: Current output basis, orthogonal to out_forward.
    :param out_basis_target: Target output basis, orthogonal to out_forward.
    :return: (xr.DataArray) Mueller matrix.
    """
    rot_in = rotate_stokes_basis(in_forward, in_basis_current, in_basis_target)
    rot_out = rotate_stokes_basis(out_forward, out_basis_current, out_basis_target)
    return mueller_product(rot_out, mueller_product(mat, mueller_transpose(rot_in)))


def rotate_mueller_basis_collinear(mat, forward, basis_current, basis_target):
    """
    Re-express a Mueller matrix in a new reference frame, for an element that doesn't change the direction of travel

    :param xr.DataArray mat: Mueller matrix operating from basis_current to basis_current.
    :param forward: Direction of travel (normalised).
    :param basis_current: Current basis, orthogonal to forward.
    :param basis_target: Target basis, orthogonal to forward.
    :return: (xr.DataArray) Mueller matrix operating from basis_target to basis_target.
    """
    rot = rotate_stokes_basis(forward, basis_current, basis_target)
    return mueller_product(rot, mueller_product(mat, mueller_transpose(rot)))
