# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import pytest
import numpy as np
from daytuner.common import errors
from daytuner.common import testing
from . import distances


@testing.parametrized(
    same=([1, 2, 3], [1, 2, 3], 0.0),
    pythagoras=([0, 0], [3, 4], 5.0),
    negative=([-1.0], [2.0], 3.0),
)
def test_euclidean_distance(point1: tp.List[float], point2: tp.List[float], expected: float) -> None:
    np.testing.assert_almost_equal(distances.euclidean_distance(point1, point2), expected)
    np.testing.assert_almost_equal(distances.euclidean_distance(point2, point1), expected)


def test_distances_to() -> None:
    points = np.array([[0.0, 0.0], [3.0, 4.0], [1.0, 0.0]])
    np.testing.assert_array_almost_equal(distances.distances_to(points, [0, 0]), [0, 5, 1])


@testing.parametrized(
    longer=([1, 2], [1, 2, 3]),
    shorter=([1, 2, 3], [1, 2]),
    matrix=([[1, 2]], [1, 2]),
)
def test_distance_mismatch(point1: tp.Any, point2: tp.Any) -> None:
    with pytest.raises(errors.DimensionMismatchError):
        distances.euclidean_distance(point1, point2)
