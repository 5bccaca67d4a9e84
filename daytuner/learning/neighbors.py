# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import numpy as np
import daytuner.common.typing as tp
from daytuner.common import errors
from daytuner.entries.core import SatisfactionEntry, Scored
from .scaler import FeatureScaler
from .distances import distances_to


class KNNRegressor:
    """Estimates satisfaction scores of unseen metric combinations, as the
    inverse-distance-weighted average of the scores of the k nearest scored days
    (in the scaled space).

    The estimate is a convex combination of observed scores, so it never
    leaves the range of previously reported scores.

    Parameters
    ----------
    num_neighbors: int
        number of neighbors k (all points are used if fewer are available)
    epsilon: float
        added to the distances before inversion, so that a query matching
        a training point exactly still gets a finite weight

    Note
    ----
    :code:`fit` returns a new fitted regressor and leaves this one untouched.
    """

    def __init__(self, num_neighbors: int = 5, epsilon: float = 1e-8) -> None:
        if num_neighbors < 1:
            raise errors.DaytunerValueError(f"num_neighbors must be at least 1 (got {num_neighbors})")
        if epsilon <= 0:
            raise errors.DaytunerValueError(f"epsilon must be strictly positive (got {epsilon})")
        self.num_neighbors = int(num_neighbors)
        self.epsilon = epsilon
        self._scaler: tp.Optional[FeatureScaler] = None
        self._points: tp.Optional[np.ndarray] = None  # scaled metrics, shape (n, d)
        self._scores: tp.Optional[np.ndarray] = None

    def fit(self, entries: tp.Iterable[SatisfactionEntry], scaler: FeatureScaler) -> "KNNRegressor":
        """Returns a regressor fitted on the scored entries (unscored ones are skipped).

        Parameters
        ----------
        entries: iterable of SatisfactionEntry
            the training population
        scaler: FeatureScaler
            a scaler already fitted on the same population

        Note
        ----
        If no entry is scored, the returned regressor is unfitted.
        """
        scored = [(e.to_array(), e.score.value) for e in entries if isinstance(e.score, Scored)]
        fitted = KNNRegressor(self.num_neighbors, self.epsilon)
        if not scored:
            return fitted
        fitted._scaler = scaler
        points = np.array([scaler.transform(x) for x, _ in scored])
        scores = np.array([s for _, s in scored], dtype=float)
        points.flags.writeable = False
        scores.flags.writeable = False
        fitted._points, fitted._scores = points, scores
        return fitted

    @property
    def is_fitted(self) -> bool:
        return self._points is not None

    @property
    def scaler(self) -> FeatureScaler:
        """The scaler the training points were transformed with"""
        if self._scaler is None:
            raise errors.UnfittedModelError("Model must be fitted before use. Call fit() first.")
        return self._scaler

    @property
    def num_samples(self) -> int:
        return 0 if self._points is None else self._points.shape[0]

    def kneighbors(self, scaled_query: tp.ArrayLike) -> tp.Tuple[np.ndarray, np.ndarray]:
        """Returns the distances and indices of the nearest training points
        (closest first, ties are kept in training order)
        """
        if self._points is None:
            raise errors.UnfittedModelError("Model must be fitted before prediction. Call fit() first.")
        distances = distances_to(self._points, scaled_query)
        indices = np.argsort(distances, kind="stable")[: self.num_neighbors]
        return distances[indices], indices

    def predict(self, scaled_query: tp.ArrayLike) -> float:
        """Predicts the satisfaction score of a query expressed in the scaled space"""
        distances, indices = self.kneighbors(scaled_query)
        assert self._scores is not None
        weights = 1.0 / (distances + self.epsilon)
        return float(np.sum(weights * self._scores[indices]) / np.sum(weights))

    def predict_metrics(self, metrics: tp.ArrayLike) -> float:
        """Predicts the satisfaction score of raw (unscaled) metrics"""
        return self.predict(self.scaler.transform(metrics))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(num_neighbors={self.num_neighbors}, num_samples={self.num_samples})"
