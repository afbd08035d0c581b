"""
Mueller matrices for specular reflection / transmission at an interface between two dielectrics or conductors, derived
from the (complex) Fresnel amplitude coefficients.

Degenerate lanes (zero amplitude, grazing incidence) are resolved with xr.where so that each lane of a broadcast
calculation gets its own outcome.
"""
import numpy as np
import xarray as xr
from pymueller.model.mueller import _as_array, assemble_mueller_matrix


def sincos_arg_diff(a, b):
    """
    Sine and cosine of the difference between the complex arguments of a and b

    Computed from a * conj(b) rather than by subtracting two atan2() results, which avoids the branch cut. NaN where
    either amplitude is zero.

    :param a: Complex amplitude(s).
    :type a: complex, xr.DataArray
    :param b: Complex amplitude(s).
    :type b: complex, xr.DataArray
    :return: (tuple) sin(arg(a) - arg(b)), cos(arg(a) - arg(b))
    """
    a = _as_array(a)
    b = _as_array(b)
    with np.errstate(divide='ignore', invalid='ignore'):
        value = a * b.conj() / np.sqrt(abs(a) ** 2 * abs(b) ** 2)
    return value.imag, value.real


def fresnel_polarized(cos_theta_i, eta):
    """
    Fresnel amplitude coefficients for the s- and p-polarised components at a planar interface

    The sign of a_p follows the "Verdet convention", which is more common in the literature than the "Fresnel
    convention" (a global 180 degree phase difference).

    :param cos_theta_i: Cosine of the angle between the surface normal and the incident ray. Negative values mean the
        ray arrives from the inside.
    :type cos_theta_i: float, xr.DataArray

    :param eta: Relative refractive index of the interface, complex for conductors. In the real case, a value greater
        than 1 means that the surface normal points into the region of lower density.
    :type eta: float, complex, xr.DataArray

    :return: (tuple) a_s, a_p, cos_theta_t, eta_it, eta_ti. a_s and a_p are complex. cos_theta_t is the (real, signed)
        cosine of the transmitted ray, 0 under total internal reflection. eta_it and eta_ti are the relative indices
        (transmitted / incident) and (incident / transmitted).
    """
    cos_theta_i = _as_array(cos_theta_i).astype(float)
    eta = _as_array(eta)

    with np.errstate(divide='ignore', invalid='ignore'):
        outside = cos_theta_i >= 0
        rcp_eta = 1 / eta
        eta_it = xr.where(outside, eta, rcp_eta)
        eta_ti = xr.where(outside, rcp_eta, eta)

        # Snell's law
        cos_theta_t_sqr = 1 - (1 - cos_theta_i ** 2) * eta_ti ** 2
        cos_theta_i_abs = abs(cos_theta_i)
        cos_theta_t = np.sqrt(cos_theta_t_sqr.astype(complex))

        if not np.iscomplexobj(eta):
            # root sign under total internal reflection, see appendix A.2 of "Stellar Polarimetry" by David Clarke
            cos_theta_t = xr.where(cos_theta_t_sqr >= 0, cos_theta_t, -cos_theta_t)

        a_s = (cos_theta_i_abs - eta_it * cos_theta_t) / (cos_theta_i_abs + eta_it * cos_theta_t)
        a_p = (cos_theta_t - eta_it * cos_theta_i_abs) / (cos_theta_t + eta_it * cos_theta_i_abs)

    # index-matched or invalid interface
    no_interface = (eta == 1) | (eta == 0)
    a_s = xr.where(no_interface, 0j, a_s)
    a_p = xr.where(no_interface, 0j, a_p)

    # transmitted ray leaves on the opposite side to the incident ray
    sign = xr.where(outside, -1., 1.)
    cos_theta_t_signed = xr.where(cos_theta_t_sqr.real >= 0, sign * cos_theta_t.real, 0.)

    return a_s, a_p, cos_theta_t_signed, eta_it, eta_ti


def specular_reflection(cos_theta_i, eta):
    """
    Mueller matrix of specular reflection at an interface between two dielectrics or conductors

    :param cos_theta_i: Cosine of the angle between the surface normal and the incident ray.
    :type cos_theta_i: float, xr.DataArray

    :param eta: Relative refractive index of the interface, complex for conductors. In the real case, a value greater
        than 1 means that the surface normal points into the region of lower density.
    :type eta: float, complex, xr.DataArray

    :return: (xr.DataArray) Mueller matrix.
    """
    a_s, a_p, _, _, _ = fresnel_polarized(cos_theta_i, eta)
    sin_delta, cos_delta = sincos_arg_diff(a_s, a_p)

    r_s = abs(a_s) ** 2
    r_p = abs(a_p) ** 2
    a = 0.5 * (r_s + r_p)
    b = 0.5 * (r_s - r_p)
    c = np.sqrt(r_s * r_p)

    # phase difference is undefined at zero amplitude
    sin_delta = xr.where(c == 0, 0., sin_delta)
    cos_delta = xr.where(c == 0, 0., cos_delta)

    return assemble_mueller_matrix([[a, b, 0, 0],
                                    [b, a, 0, 0],
                                    [0, 0, c * cos_delta, c * sin_delta],
                                    [0, 0, -c * sin_delta, c * cos_delta]])


def specular_transmission(cos_theta_i, eta):
    """
    Mueller matrix of specular transmission at an interface between two dielectrics

    :param cos_theta_i: Cosine of the angle between the surface normal and the incident ray.
    :type cos_theta_i: float, xr.DataArray

    :param eta: Real relative refractive index of the interface. A value greater than 1 means that the surface normal
        points into the region of lower density.
    :type eta: float, xr.DataArray

    :return: (xr.DataArray) Mueller matrix.
    """
    if np.iscomplexobj(_as_array(eta)):
        raise ValueError('pymueller: specular transmission requires a real relative refractive index')

    cos_theta_i = _as_array(cos_theta_i).astype(float)
    a_s, a_p, cos_theta_t, eta_it, eta_ti = fresnel_polarized(cos_theta_i, eta)

    # radiance unit conversion
    with np.errstate(divide='ignore', invalid='ignore'):
        ratio = xr.where(abs(cos_theta_i) > 1e-8, cos_theta_t / cos_theta_i, 0.)
    factor = -eta_it * ratio

    # transmission amplitudes
    a_s_r = a_s.real + 1
    a_p_r = (1 - a_p.real) * eta_ti

    t_s = a_s_r ** 2
    t_p = a_p_r ** 2
    a = 0.5 * factor * (t_s + t_p)
    b = 0.5 * factor * (t_s - t_p)
    c = factor * np.sqrt(t_s * t_p)

    return assemble_mueller_matrix([[a, b, 0, 0],
                                    [b, a, 0, 0],
                                    [0, 0, c, 0],
                                    [0, 0, 0, c]])
