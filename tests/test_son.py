import unittest
import copy
import pickle
import numpy as np
from scipy.spatial.transform import Rotation

from shonan import SOn


class TestSOnCreation(unittest.TestCase):
    def test_copies_input(self):
        M = np.eye(3)
        R = SOn(M)
        M[0, 0] = 5.0
        # the element owns its matrix
        self.assertEqual(R.matrix[0, 0], 1.0)

    def test_read_only(self):
        R = SOn.identity(3)
        with self.assertRaises(ValueError):
            R.matrix[0, 0] = 2.0

    def test_accepts_lists(self):
        R = SOn([[0, -1], [1, 0]])
        self.assertEqual(R.n, 2)
        self.assertEqual(R.matrix.dtype, np.float64)

    def test_non_square_raises(self):
        with self.assertRaises(ValueError):
            SOn(np.zeros((2, 3)))
        with self.assertRaises(ValueError):
            SOn(np.zeros(4))

    def test_does_not_validate_orthogonality(self):
        R = SOn(2.0 * np.eye(3))
        self.assertFalse(R.is_orthogonal())

    def test_dimensions(self):
        R = SOn.identity(5)
        self.assertEqual(R.n, 5)
        self.assertEqual(R.dim, 10)
        self.assertEqual(SOn.dimension(4), 6)
        self.assertEqual(SOn.ambient_dim(6), 4)


class TestVec(unittest.TestCase):
    def test_column_order(self):
        M = np.arange(9.0).reshape(3, 3)
        np.testing.assert_array_equal(SOn(M).vec(), [0, 3, 6, 1, 4, 7, 2, 5, 8])

    def test_jacobian_not_supported(self):
        with self.assertRaises(NotImplementedError):
            SOn.identity(3).vec(jacobian=True)


class TestRetract(unittest.TestCase):
    def test_zero_is_identity(self):
        for n in range(2, 8):
            R = SOn.retract(np.zeros(SOn.dimension(n)))
            np.testing.assert_array_equal(R.matrix, np.eye(n))

    def test_so3_zero(self):
        np.testing.assert_array_equal(SOn.retract([0.0, 0.0, 0.0]).matrix, np.eye(3))

    def test_orthogonal(self):
        rng = np.random.default_rng(3)
        for n in range(2, 8):
            xi = rng.normal(scale=0.2, size=SOn.dimension(n))
            R = SOn.retract(xi)
            np.testing.assert_allclose(R.matrix.T @ R.matrix, np.eye(n), atol=1e-10)
            self.assertAlmostEqual(np.linalg.det(R.matrix), 1.0, places=10)
            self.assertTrue(R.is_orthogonal())

    def test_so2_angle(self):
        # Cayley maps theta to a rotation by 2 * atan(theta / 2)
        theta = 0.4
        angle = 2.0 * np.arctan(theta / 2.0)
        expected = np.array([[np.cos(angle), -np.sin(angle)],
                             [np.sin(angle), np.cos(angle)]])
        np.testing.assert_allclose(SOn.retract([theta]).matrix, expected, atol=1e-12)

    def test_so3_matches_rotation_vector(self):
        xi = np.array([0.1, -0.3, 0.2])
        norm = np.linalg.norm(xi)
        rotvec = xi / norm * 2.0 * np.arctan(norm / 2.0)
        expected = Rotation.from_rotvec(rotvec).as_matrix()
        np.testing.assert_allclose(SOn.retract(xi).matrix, expected, atol=1e-12)

    def test_first_order_agrees_with_hat(self):
        xi = 1e-6 * np.array([1.0, 2.0, -1.0, 0.5, 0.3, -0.7])
        R = SOn.retract(xi)
        np.testing.assert_allclose(R.matrix - np.eye(4), SOn.hat(xi), atol=1e-10)

    def test_jacobian_not_supported(self):
        with self.assertRaises(NotImplementedError):
            SOn.retract(np.zeros(3), jacobian=True)

    def test_bad_length_raises(self):
        with self.assertRaises(ValueError):
            SOn.retract(np.array([]))


class TestLocalCoordinates(unittest.TestCase):
    def test_inverts_retract(self):
        rng = np.random.default_rng(4)
        for n in range(2, 7):
            xi = rng.normal(scale=0.3, size=SOn.dimension(n))
            np.testing.assert_allclose(SOn.local_coordinates(SOn.retract(xi)), xi, atol=1e-10)

    def test_local_between_elements(self):
        a = SOn.random(4, rng=5)
        xi = np.array([0.01, -0.02, 0.03, 0.0, 0.05, -0.01])
        b = a @ SOn.retract(xi)
        np.testing.assert_allclose(a.local(b), xi, atol=1e-10)


class TestGroup(unittest.TestCase):
    def setUp(self):
        self.a = SOn.random(3, rng=6)
        self.b = SOn.random(3, rng=7)

    def test_compose(self):
        np.testing.assert_allclose((self.a @ self.b).matrix, self.a.matrix @ self.b.matrix)

    def test_inverse(self):
        np.testing.assert_allclose((self.a @ self.a.inverse()).matrix, np.eye(3), atol=1e-12)

    def test_between(self):
        np.testing.assert_allclose((self.a @ self.a.between(self.b)).matrix, self.b.matrix, atol=1e-12)

    def test_matmul_with_vector(self):
        v = np.array([1.0, 2.0, 3.0])
        np.testing.assert_allclose(self.a @ v, self.a.matrix @ v)

    def test_compose_size_mismatch(self):
        with self.assertRaises(ValueError):
            self.a.compose(SOn.identity(4))


class TestSOnDunders(unittest.TestCase):
    def setUp(self):
        self.R = SOn.random(4, rng=8)

    def test_eq(self):
        self.assertTrue(self.R == SOn(self.R.matrix))
        self.assertFalse(self.R == SOn.identity(4))
        self.assertFalse(self.R == self.R.matrix)

    def test_repr(self):
        r = repr(self.R)
        self.assertIn("SOn", r)
        self.assertIn("matrix=", r)

    def test_copy_and_deepcopy(self):
        c = copy.copy(self.R)
        dc = copy.deepcopy(self.R)
        self.assertIsNot(c, self.R)
        self.assertIsNot(dc, self.R)
        self.assertTrue(c == self.R)
        self.assertTrue(dc == self.R)

    def test_pickle(self):
        loaded = pickle.loads(pickle.dumps(self.R))
        self.assertIsInstance(loaded, SOn)
        self.assertTrue(loaded == self.R)
        self.assertFalse(loaded.matrix.flags.writeable)

    def test_random_is_seeded(self):
        self.assertTrue(SOn.random(5, rng=9) == SOn.random(5, rng=9))


if __name__ == "__main__":
    unittest.main()
