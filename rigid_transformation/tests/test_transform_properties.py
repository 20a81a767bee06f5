"""
Property-based tests for transform application and random rotations.
"""

import numpy as np
import pytest
from hypothesis import given, settings
from hypothesis import strategies as st
from hypothesis.extra.numpy import arrays
from scipy.spatial.transform import Rotation

from rigid_transformation import (
    PointCloud,
    RandomRotationGenerator,
    ShapeMismatch,
    apply_transform,
    invert_rigid_transform,
    make_rigid_transform,
)


coordinates = st.floats(min_value=-50.0, max_value=50.0, allow_nan=False, allow_infinity=False)


@st.composite
def cloud_strategy(draw):
    """Generate a cloud whose normals have arbitrary non-zero magnitudes."""
    n = draw(st.integers(min_value=1, max_value=40))
    positions = draw(arrays(dtype=np.float64, shape=(n, 3), elements=coordinates))
    normals = draw(arrays(dtype=np.float64, shape=(n, 3), elements=coordinates))
    normals[np.linalg.norm(normals, axis=1) < 1e-3] = [0.0, 0.0, 1.0]
    return PointCloud(positions=positions, normals=normals)


@st.composite
def rigid_transform_strategy(draw):
    rotvec = np.array(draw(st.lists(
        st.floats(min_value=-np.pi, max_value=np.pi, allow_nan=False),
        min_size=3, max_size=3,
    )))
    translation = np.array(draw(st.lists(coordinates, min_size=3, max_size=3)))
    return make_rigid_transform(Rotation.from_rotvec(rotvec).as_matrix(), translation)


# Property 1: Applying T then its inverse reproduces the cloud
@given(cloud=cloud_strategy(), transform=rigid_transform_strategy())
@settings(max_examples=100)
def test_round_trip_through_inverse(cloud, transform):
    """
    apply(apply(P, T), inverse(T)) SHALL reproduce P; normals come back
    as the unit-length versions of the input normals.
    """
    restored = apply_transform(apply_transform(cloud, transform), invert_rigid_transform(transform))

    np.testing.assert_allclose(restored.positions, cloud.positions, atol=1e-9)
    expected_normals = cloud.normals / np.linalg.norm(cloud.normals, axis=1, keepdims=True)
    np.testing.assert_allclose(restored.normals, expected_normals, atol=1e-9)


# Property 2: Output normals are unit length
@given(cloud=cloud_strategy(), transform=rigid_transform_strategy())
@settings(max_examples=100)
def test_normals_are_unit_length_after_apply(cloud, transform):
    result = apply_transform(cloud, transform)

    np.testing.assert_allclose(np.linalg.norm(result.normals, axis=1), 1.0, atol=1e-12)


@given(cloud=cloud_strategy(), seed=st.integers(min_value=0, max_value=2**32 - 1))
@settings(max_examples=50)
def test_random_rotation_normals_are_unit_length(cloud, seed):
    rotated, _ = RandomRotationGenerator(seed=seed).apply(cloud)

    np.testing.assert_allclose(np.linalg.norm(rotated.normals, axis=1), 1.0, atol=1e-12)


# Property 3: Random rotations are proper, fixed-angle and translation free
@given(
    seed=st.integers(min_value=0, max_value=2**32 - 1),
    angle=st.floats(min_value=1.0, max_value=179.0),
)
@settings(max_examples=100)
def test_random_transform_is_rotation_by_angle(seed, angle):
    transform = RandomRotationGenerator(angle_degrees=angle, seed=seed).random_transform()

    R = transform[:3, :3]
    np.testing.assert_allclose(R @ R.T, np.eye(3), atol=1e-12)
    assert abs(np.linalg.det(R) - 1.0) < 1e-12
    np.testing.assert_array_equal(transform[:3, 3], np.zeros(3))
    np.testing.assert_array_equal(transform[3], [0.0, 0.0, 0.0, 1.0])
    recovered = np.rad2deg(Rotation.from_matrix(R).magnitude())
    assert abs(recovered - angle) < 1e-6


def test_random_rotation_preserves_distances_to_origin():
    rng = np.random.default_rng(3)
    cloud = PointCloud(positions=rng.normal(size=(50, 3)), normals=rng.normal(size=(50, 3)))

    rotated, transform = RandomRotationGenerator(seed=11).apply(cloud)

    np.testing.assert_allclose(
        np.linalg.norm(rotated.positions, axis=1), np.linalg.norm(cloud.positions, axis=1)
    )
    np.testing.assert_allclose(rotated.positions, cloud.positions @ transform[:3, :3].T)


def test_random_rotation_is_reproducible_with_seed():
    first = RandomRotationGenerator(seed=42).random_transform()
    second = RandomRotationGenerator(seed=42).random_transform()

    np.testing.assert_array_equal(first, second)


def test_apply_does_not_mutate_input():
    positions = np.array([[1.0, 2.0, 3.0], [4.0, 5.0, 6.0]])
    normals = np.array([[0.0, 0.0, 2.0], [0.0, 3.0, 0.0]])
    cloud = PointCloud(positions=positions, normals=normals)
    transform = make_rigid_transform(np.eye(3), [1.0, 1.0, 1.0])

    result = apply_transform(cloud, transform)

    np.testing.assert_array_equal(cloud.positions, positions)
    np.testing.assert_array_equal(cloud.normals, normals)
    np.testing.assert_array_equal(result.positions, positions + 1.0)
    # Translation never reaches the normals
    np.testing.assert_array_equal(result.normals, [[0.0, 0.0, 1.0], [0.0, 1.0, 0.0]])


def test_apply_divides_by_homogeneous_w():
    cloud = PointCloud(positions=[[2.0, 4.0, 6.0]], normals=[[1.0, 0.0, 0.0]])
    transform = np.eye(4)
    transform[3, 3] = 2.0

    result = apply_transform(cloud, transform)

    np.testing.assert_allclose(result.positions, [[1.0, 2.0, 3.0]])


def test_zero_normal_stays_zero():
    cloud = PointCloud(positions=[[0.0, 0.0, 0.0]], normals=[[0.0, 0.0, 0.0]])

    result = apply_transform(cloud, make_rigid_transform(np.eye(3), [1.0, 0.0, 0.0]))

    np.testing.assert_array_equal(result.normals, [[0.0, 0.0, 0.0]])


def test_single_precision_is_preserved():
    cloud = PointCloud(positions=np.ones((4, 3)), normals=np.ones((4, 3))).astype("float")

    result = apply_transform(cloud, make_rigid_transform(np.eye(3), [1.0, 2.0, 3.0]))
    rotated, transform = RandomRotationGenerator(seed=1).apply(cloud)

    assert result.dtype == np.float32
    assert rotated.dtype == np.float32
    assert transform.dtype == np.float32


def test_mismatched_cloud_raises():
    with pytest.raises(ShapeMismatch):
        apply_transform(PointCloud(positions=np.zeros((3, 3)), normals=np.zeros((2, 3))), np.eye(4))
    with pytest.raises(ShapeMismatch):
        RandomRotationGenerator().apply(
            PointCloud(positions=np.zeros((1, 3)), normals=np.zeros((4, 3)))
        )


def test_non_square_transform_raises():
    cloud = PointCloud(positions=np.zeros((2, 3)), normals=np.ones((2, 3)))

    with pytest.raises(ShapeMismatch):
        apply_transform(cloud, np.eye(3))


def test_cloud_rejects_wrong_width():
    with pytest.raises(ShapeMismatch):
        PointCloud(positions=np.zeros((3, 2)), normals=np.zeros((3, 2)))


def test_cloud_is_immutable():
    positions = np.zeros((2, 3))
    cloud = PointCloud(positions=positions, normals=np.ones((2, 3)))

    positions[0, 0] = 5.0
    assert cloud.positions[0, 0] == 0.0
    with pytest.raises(ValueError):
        cloud.positions[0, 0] = 1.0


def test_invert_rigid_transform_matches_general_inverse():
    transform = make_rigid_transform(
        Rotation.from_euler("zyx", [10, 20, 30], degrees=True).as_matrix(), [4.0, -1.0, 2.5]
    )

    np.testing.assert_allclose(invert_rigid_transform(transform), np.linalg.inv(transform), atol=1e-12)
