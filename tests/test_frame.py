import unittest
import numpy as np
from numpy.testing import assert_almost_equal
import xarray as xr

from pymueller import as_vector, dot, cross, normalize, coordinate_system, unit_angle, stokes_basis, \
    rotate_stokes_basis, rotate_mueller_basis, rotate_mueller_basis_collinear, mueller_product, stokes_vector, \
    rotator, linear_polarizer, rotated_element, specular_reflection

mdims = ('mueller_v', 'mueller_h')

# random unit directions, one per lane
rng = np.random.default_rng(0)
directions = rng.normal(size=(3, 50))
directions /= np.linalg.norm(directions, axis=0)
directions = xr.DataArray(directions, dims=('vector', 'ray'))


def random_basis(forward):
    """ random unit vector orthogonal to forward """
    s, t = coordinate_system(forward)
    phi = np.random.uniform(0, 2 * np.pi)
    return np.cos(phi) * s + np.sin(phi) * t


class TestVectors(unittest.TestCase):

    def test_as_vector(self, ):
        v = as_vector([1, 2, 3])
        self.assertEqual(v.dims, ('vector', ))
        v = as_vector(np.ones((3, 5)))
        self.assertEqual(v.dims, ('vector', 'dim_0'))
        with self.assertRaises(ValueError):
            as_vector([1, 2])
        with self.assertRaises(ValueError):
            as_vector(xr.DataArray(np.ones(3), dims=('x', )))

    def test_cross(self, ):
        assert_almost_equal(cross([1, 0, 0], [0, 1, 0]).values, [0, 0, 1])
        assert_almost_equal(cross(directions, directions).values, np.zeros((3, 50)))

    def test_normalize(self, ):
        assert_almost_equal(normalize([3, 0, 4]).values, [0.6, 0, 0.8])

    def test_coordinate_system(self, ):
        s, t = coordinate_system(directions)
        assert_almost_equal(dot(s, s).values, np.ones(50))
        assert_almost_equal(dot(t, t).values, np.ones(50))
        assert_almost_equal(dot(s, t).values, np.zeros(50))
        assert_almost_equal(dot(s, directions).values, np.zeros(50))
        assert_almost_equal(dot(t, directions).values, np.zeros(50))
        # right-handed
        assert_almost_equal(cross(s, t).transpose('vector', 'ray').values, directions.values)

    def test_coordinate_system_poles(self, ):
        for n in [[0, 0, 1], [0, 0, -1], [1, 0, 0], [0, -1, 0]]:
            s, t = coordinate_system(n)
            assert_almost_equal(cross(s, t).values, n)

    def test_coordinate_system_negative_zero(self, ):
        """
        n = (0, 0, -0.0) gets the same frame as n = (0, 0, -1)
        """
        s, t = coordinate_system([0, 0, -0.])
        s_ref, t_ref = coordinate_system([0, 0, -1])
        assert_almost_equal(s.values, s_ref.values)
        assert_almost_equal(t.values, t_ref.values)
        assert_almost_equal(cross(s, t).values, [0, 0, -1])

        # per lane
        n = xr.DataArray([[0, 0], [0, 0], [0., -0.]], dims=('vector', 'ray'))
        s, t = coordinate_system(n)
        assert_almost_equal(cross(s, t).transpose('vector', 'ray').values, [[0, 0], [0, 0], [1, -1]])

    def test_unit_angle(self, ):
        assert_almost_equal(float(unit_angle([1, 0, 0], [1, 0, 0])), 0)
        assert_almost_equal(float(unit_angle([1, 0, 0], [0, 1, 0])), np.pi / 2)
        assert_almost_equal(float(unit_angle([1, 0, 0], [-1, 0, 0])), np.pi)
        eps = 1e-9
        assert_almost_equal(float(unit_angle([1, 0, 0], [np.cos(eps), np.sin(eps), 0])), eps, decimal=15)
        assert_almost_equal(float(unit_angle([1, 0, 0], [-np.cos(eps), np.sin(eps), 0])), np.pi - eps, decimal=15)

    def test_unit_angle_lanes(self, ):
        s, t = coordinate_system(directions)
        assert_almost_equal(unit_angle(s, t).values, np.pi / 2 * np.ones(50))


class TestStokesBasis(unittest.TestCase):

    def test_stokes_basis_deterministic(self, ):
        assert_almost_equal(stokes_basis(directions).values, stokes_basis(directions.copy()).values)
        assert_almost_equal(dot(stokes_basis(directions), directions).values, np.zeros(50))

    def test_rotate_stokes_basis_identity(self, ):
        basis = stokes_basis(directions)
        rot = rotate_stokes_basis(directions, basis, basis)
        assert_almost_equal(rot.transpose(*mdims, 'ray').values, np.identity(4)[..., np.newaxis] * np.ones(50))

    def test_rotate_stokes_basis_example(self, ):
        """
        horizontally polarised light [1, 1, 0, 0] in basis [1, 0, 0] is +45 degree polarised light [1, 0, 1, 0] in
        basis [0.707, -0.707, 0]
        """
        forward = [0, 0, 1]
        rot = rotate_stokes_basis(forward, [1, 0, 0], [np.sqrt(0.5), -np.sqrt(0.5), 0])
        assert_almost_equal(mueller_product(rot, stokes_vector(1, 1)).values, [1, 0, 1, 0])

    def test_rotate_stokes_basis_sign(self, ):
        """
        the sense of rotation follows the right-hand rule about the direction of travel
        """
        theta = 0.3
        target = [np.cos(theta), np.sin(theta), 0]
        assert_almost_equal(rotate_stokes_basis([0, 0, 1], [1, 0, 0], target).values, rotator(theta).values)
        assert_almost_equal(rotate_stokes_basis([0, 0, -1], [1, 0, 0], target).values, rotator(-theta).values)

    def test_rotate_stokes_basis_unnormalized(self, ):
        rot_1 = rotate_stokes_basis([0, 0, 1], [1, 0, 0], [1, 1, 0])
        rot_2 = rotate_stokes_basis([0, 0, 1], [2, 0, 0], [np.sqrt(0.5), np.sqrt(0.5), 0])
        assert_almost_equal(rot_1.values, rotator(np.pi / 4).values)
        assert_almost_equal(rot_2.values, rotator(np.pi / 4).values)

    def test_rotate_stokes_basis_lanes(self, ):
        basis_1 = stokes_basis(directions)
        basis_2 = cross(directions, basis_1)
        rot = rotate_stokes_basis(directions, basis_1, basis_2)
        self.assertEqual(rot.dims, ('mueller_v', 'mueller_h', 'ray'))
        for i in range(5):
            assert_almost_equal(rot.isel(ray=i).values, rotator(np.pi / 2).values)

    def test_stokes_vector_physical_invariance(self, ):
        """
        light described in two bases must agree on the physical polarisation direction
        """
        forward = as_vector([0, 0, 1])
        basis_1 = as_vector([1, 0, 0])
        basis_2 = as_vector([0, 1, 0])
        # +45 degree light in basis_1 is -45 degree light in basis_2
        s_2 = mueller_product(rotate_stokes_basis(forward, basis_1, basis_2), stokes_vector(1, 0, 1))
        assert_almost_equal(s_2.values, [1, 0, -1, 0])


class TestRotateMuellerBasis(unittest.TestCase):

    def test_collinear_round_trip(self, ):
        forward = directions.isel(ray=0)
        basis_1 = stokes_basis(forward)
        basis_2 = random_basis(forward)
        mat = xr.DataArray(np.random.rand(4, 4), dims=mdims)
        mat_2 = rotate_mueller_basis_collinear(mat, forward, basis_1, basis_2)
        mat_1 = rotate_mueller_basis_collinear(mat_2, forward, basis_2, basis_1)
        assert_almost_equal(mat_1.values, mat.values)

    def test_collinear_polarizer(self, ):
        """
        a polarizer aligned with basis [1, 0, 0] looks like a polarizer at -45 degrees in basis [0.707, 0.707, 0]
        """
        forward = [0, 0, 1]
        mat = rotate_mueller_basis_collinear(linear_polarizer(), forward, [1, 0, 0],
                                             [np.sqrt(0.5), np.sqrt(0.5), 0])
        assert_almost_equal(mat.values, rotated_element(-np.pi / 4, linear_polarizer()).values)

    def test_matches_collinear(self, ):
        forward = directions.isel(ray=3)
        basis_1 = stokes_basis(forward)
        basis_2 = random_basis(forward)
        mat = xr.DataArray(np.random.rand(4, 4), dims=mdims)
        mat_a = rotate_mueller_basis(mat, forward, basis_1, basis_2, forward, basis_1, basis_2)
        mat_b = rotate_mueller_basis_collinear(mat, forward, basis_1, basis_2)
        assert_almost_equal(mat_a.values, mat_b.values)

    def test_reflection_frames(self, ):
        """
        re-express a reflection Mueller matrix, computed in the s/p frame, in the implicit Stokes bases of the
        incident and reflected directions
        """
        normal = as_vector([0, 0, 1])
        wi = normalize([1, 0, -1])
        wo = normalize([1, 0, 1])
        # s-polarisation is perpendicular to the plane of incidence
        s_axis = normalize(cross(wi, normal))
        mat = specular_reflection(float(-dot(wi, normal)), 1.5)
        mat_world = rotate_mueller_basis(mat, wi, s_axis, stokes_basis(wi), wo, s_axis, stokes_basis(wo))

        # intensity terms don't depend on the reference frames
        assert_almost_equal(float(mat_world.isel(mueller_v=0, mueller_h=0)),
                            float(mat.isel(mueller_v=0, mueller_h=0)))

        # back to the s/p frame
        mat_back = rotate_mueller_basis(mat_world, wi, stokes_basis(wi), s_axis, wo, stokes_basis(wo), s_axis)
        assert_almost_equal(mat_back.values, mat.values)


if __name__ == '__main__':
    unittest.main()
