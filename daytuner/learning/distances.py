# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import daytuner.common.typing as tp
from daytuner.common import errors


def distances_to(points: np.ndarray, query: tp.ArrayLike) -> np.ndarray:
    """Euclidean distances from each row of points (shape (n, d)) to the query (shape (d,))"""
    query = np.asarray(query, dtype=float)
    if points.ndim != 2 or query.shape != (points.shape[1],):
        raise errors.DimensionMismatchError(
            f"Feature dimensions must match: points of shape {points.shape} and query of shape {query.shape}"
        )
    return np.sqrt(np.sum((points - query[None, :]) ** 2, axis=1))  # type: ignore


def euclidean_distance(point1: tp.ArrayLike, point2: tp.ArrayLike) -> float:
    """Euclidean distance between two points of same dimension"""
    point1 = np.asarray(point1, dtype=float)
    if point1.ndim != 1:
        raise errors.DimensionMismatchError(f"Expected a vector but got shape {point1.shape}")
    return float(distances_to(point1[None, :], point2)[0])
