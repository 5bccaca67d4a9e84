# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import daytuner.common.typing as tp
from daytuner.common import errors


class FeatureScaler:
    """Min-max normalization of each dimension to [0, 1].

    :code:`fit` does not modify the instance, it returns a new fitted scaler,
    so that several models can be fitted from the same base concurrently:

    .. code-block:: python

        scaler = FeatureScaler().fit(training_vectors)
        scaled = scaler.transform(vector)

    Parameters
    ----------
    data_min: array-like or None
        minimum of each dimension (None for an unfitted scaler)
    data_max: array-like or None
        maximum of each dimension (None for an unfitted scaler)

    Note
    ----
    - dimensions which are constant over the training data (max == min) are
      transformed to 0 whatever the input.
    - values outside of the fitted bounds are extrapolated linearly, not clipped.
    """

    def __init__(self, data_min: tp.Optional[tp.ArrayLike] = None, data_max: tp.Optional[tp.ArrayLike] = None) -> None:
        if (data_min is None) != (data_max is None):
            raise errors.DaytunerValueError("Both data_min and data_max must be provided (or none of them)")
        self._min: tp.Optional[np.ndarray] = None
        self._max: tp.Optional[np.ndarray] = None
        if data_min is not None and data_max is not None:
            self._min = np.array(data_min, dtype=float)
            self._max = np.array(data_max, dtype=float)
            if self._min.ndim != 1 or self._min.shape != self._max.shape:
                raise errors.DimensionMismatchError(
                    f"Bounds must be vectors of same size (got {self._min.shape} and {self._max.shape})"
                )
            if (self._min > self._max).any():
                raise errors.DaytunerValueError(f"Lower bounds {self._min} should be smaller than upper bounds {self._max}")
            self._min.flags.writeable = False
            self._max.flags.writeable = False

    def fit(self, data: tp.Union[np.ndarray, tp.Sequence[tp.ArrayLike]]) -> "FeatureScaler":
        """Returns a scaler fitted on the per-dimension min and max of the data.
        Fitting on an empty dataset returns an unfitted scaler.
        """
        if not len(data):  # pylint: disable=len-as-condition
            return FeatureScaler()
        try:
            array = np.array(data, dtype=float)
        except ValueError as e:  # ragged input
            raise errors.DimensionMismatchError(f"All vectors must have the same dimension: {e}")
        if array.ndim != 2:
            raise errors.DimensionMismatchError(f"Expected a sequence of vectors but got shape {array.shape}")
        return FeatureScaler(array.min(axis=0), array.max(axis=0))

    @property
    def is_fitted(self) -> bool:
        return self._min is not None

    @property
    def dimension(self) -> int:
        return self._bounds()[0].size

    @property
    def data_min(self) -> np.ndarray:
        return self._bounds()[0]

    @property
    def data_max(self) -> np.ndarray:
        return self._bounds()[1]

    @property
    def data_range(self) -> np.ndarray:
        """max - min for each dimension (0 for constant dimensions)"""
        data_min, data_max = self._bounds()
        return data_max - data_min  # type: ignore

    def _bounds(self) -> tp.Tuple[np.ndarray, np.ndarray]:
        if self._min is None or self._max is None:
            raise errors.UnfittedModelError("Scaler must be fitted before use. Call fit() first.")
        return self._min, self._max

    def _check(self, x: tp.ArrayLike) -> np.ndarray:
        data_min = self._bounds()[0]
        x = np.asarray(x, dtype=float)
        if x.shape != data_min.shape:
            raise errors.DimensionMismatchError(f"Feature dimension mismatch: expected {data_min.size}, got {x.shape}")
        return x

    def transform(self, x: tp.ArrayLike) -> np.ndarray:
        """Maps raw values to (x - min) / (max - min)"""
        x = self._check(x)
        data_min = self.data_min
        span = self.data_range
        nonzero = span > 0
        return np.where(nonzero, (x - data_min) / np.where(nonzero, span, 1.0), 0.0)  # type: ignore

    def inverse_transform(self, y: tp.ArrayLike) -> np.ndarray:
        """Maps scaled values back to y * (max - min) + min"""
        y = self._check(y)
        return y * self.data_range + self.data_min  # type: ignore

    def __repr__(self) -> str:
        if not self.is_fitted:
            return f"{self.__class__.__name__}()"
        return f"{self.__class__.__name__}(data_min={self.data_min.tolist()}, data_max={self.data_max.tolist()})"
