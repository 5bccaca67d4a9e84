# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import datetime
import typing as tp
import pytest
import numpy as np
from daytuner.common import errors
from daytuner.common import testing
from daytuner.entries.core import SatisfactionEntry, metrics_matrix, training_set
from .scaler import FeatureScaler
from .neighbors import KNNRegressor


DAY = datetime.date(2025, 11, 25)
TRAINING = [
    ([10000.0, 8.0, 1000.0, 60.0, 12.0, 8.0, 8000.0, 20.0, 60.0], 8.0),
    ([12000.0, 8.5, 1200.0, 70.0, 14.0, 9.0, 9000.0, 25.0, 58.0], 9.0),
    ([5000.0, 6.0, 500.0, 20.0, 8.0, 5.0, 4000.0, 10.0, 75.0], 5.0),
    ([6000.0, 6.5, 600.0, 25.0, 9.0, 6.0, 5000.0, 12.0, 72.0], 6.0),
    ([15000.0, 9.0, 1500.0, 80.0, 15.0, 10.0, 11000.0, 30.0, 55.0], 9.5),
]
HIGH_ACTIVITY = [11000.0, 8.2, 1100.0, 65.0, 13.0, 8.5, 8500.0, 22.0, 59.0]
LOW_ACTIVITY = [5500.0, 6.2, 550.0, 22.0, 8.5, 5.5, 4500.0, 11.0, 73.0]


def make_entries(data: tp.Sequence[tp.Tuple[tp.List[float], tp.Optional[float]]]) -> tp.List[SatisfactionEntry]:
    return [SatisfactionEntry(DAY + datetime.timedelta(days=k), m, s) for k, (m, s) in enumerate(data)]


def fit(entries: tp.List[SatisfactionEntry], num_neighbors: int = 3) -> KNNRegressor:
    scaler = FeatureScaler().fit(metrics_matrix(training_set(entries)))
    return KNNRegressor(num_neighbors=num_neighbors).fit(entries, scaler)


def test_predict_ranges() -> None:
    regressor = fit(make_entries(TRAINING))
    high = regressor.predict_metrics(HIGH_ACTIVITY)
    low = regressor.predict_metrics(LOW_ACTIVITY)
    assert 7.5 < high < 9.5, f"Got {high}"
    assert 4.5 < low < 6.5, f"Got {low}"
    assert high > low


def test_predict_on_training_point() -> None:
    regressor = fit(make_entries(TRAINING))
    for metrics, score in TRAINING:
        prediction = regressor.predict_metrics(metrics)
        assert np.isfinite(prediction)
        np.testing.assert_almost_equal(prediction, score, decimal=5)


def test_predict_scaled_query() -> None:
    entries = make_entries(TRAINING)
    regressor = fit(entries)
    scaled = regressor.scaler.transform(HIGH_ACTIVITY)
    np.testing.assert_equal(regressor.predict(scaled), regressor.predict_metrics(HIGH_ACTIVITY))


def test_inverse_distance_weighting() -> None:
    data = [([float(k)] + [0.0] * 8, float(k)) for k in [0, 1, 4]]
    regressor = fit(make_entries(data), num_neighbors=2)
    # first dimension is scaled to [0, 0.25, 1], the others are constant (scaled to 0)
    distances, indices = regressor.kneighbors([0.25] + [0.0] * 8)
    np.testing.assert_array_equal(indices, [1, 0])
    np.testing.assert_array_almost_equal(distances, [0, 0.25])
    query = [0.125] + [0.0] * 8  # distances 0.125 to both points 0 and 1
    np.testing.assert_almost_equal(regressor.predict(query), 0.5)
    # distances 0.25 to point 1 (score 1), 0.5 to points 0 and 2: the tie keeps point 0 (score 0)
    query = [0.5] + [0.0] * 8
    np.testing.assert_almost_equal(regressor.predict(query), (4 * 1 + 2 * 0) / 6.0)


def test_ties_keep_training_order() -> None:
    data = [([0.0] * 9, 1.0), ([2.0] + [0.0] * 8, 2.0), ([4.0] + [0.0] * 8, 3.0), ([2.0] + [0.0] * 8, 9.0)]
    regressor = fit(make_entries(data), num_neighbors=2)
    _, indices = regressor.kneighbors([0.5] + [0.0] * 8)
    np.testing.assert_array_equal(indices, [1, 3])
    _, indices = regressor.kneighbors([0.25] + [0.0] * 8)
    np.testing.assert_array_equal(indices, [0, 1])


def test_fewer_points_than_neighbors() -> None:
    regressor = fit(make_entries(TRAINING[:2]), num_neighbors=5)
    distances, _ = regressor.kneighbors(regressor.scaler.transform(HIGH_ACTIVITY))
    np.testing.assert_equal(distances.size, 2)
    assert 8.0 <= regressor.predict_metrics(HIGH_ACTIVITY) <= 9.0


def test_monotonic_in_scores() -> None:
    entries = make_entries(TRAINING)
    better = make_entries([(m, s + 0.5) for m, s in TRAINING])
    for query in [HIGH_ACTIVITY, LOW_ACTIVITY]:
        assert fit(better).predict_metrics(query) > fit(entries).predict_metrics(query)


def test_unscored_entries_are_skipped() -> None:
    data = TRAINING + [([20000.0, 9.0, 2000.0, 90.0, 16.0, 12.0, 15000.0, 40.0, 50.0], None)]
    regressor = fit(make_entries(data))
    np.testing.assert_equal(regressor.num_samples, len(TRAINING))


def test_fit_returns_new_instance() -> None:
    base = KNNRegressor(num_neighbors=3)
    regressor = fit(make_entries(TRAINING))
    base.fit(make_entries(TRAINING), FeatureScaler().fit(metrics_matrix(make_entries(TRAINING))))
    assert not base.is_fitted
    assert regressor.is_fitted
    assert repr(regressor) == "KNNRegressor(num_neighbors=3, num_samples=5)"


def test_unfitted_errors() -> None:
    unfitted = KNNRegressor(num_neighbors=3)
    with pytest.raises(errors.UnfittedModelError):
        unfitted.predict([0.5] * 9)
    with pytest.raises(errors.UnfittedModelError):
        unfitted.predict_metrics(HIGH_ACTIVITY)
    # no scored entry: stays unfitted
    empty = fit(make_entries([(m, None) for m, _ in TRAINING]))
    assert not empty.is_fitted
    with pytest.raises(errors.UnfittedModelError):
        empty.predict([0.5] * 9)
    # scored entries but unfitted scaler
    with pytest.raises(errors.UnfittedModelError):
        KNNRegressor().fit(make_entries(TRAINING), FeatureScaler())


@testing.parametrized(
    short=([0.5] * 8,),
    long=([0.5] * 10,),
)
def test_dimension_mismatch(query: tp.List[float]) -> None:
    regressor = fit(make_entries(TRAINING))
    with pytest.raises(errors.DimensionMismatchError):
        regressor.predict(query)
    with pytest.raises(errors.DimensionMismatchError):
        regressor.predict_metrics(query)


def test_invalid_settings() -> None:
    with pytest.raises(errors.DaytunerValueError):
        KNNRegressor(num_neighbors=0)
    with pytest.raises(errors.DaytunerValueError):
        KNNRegressor(epsilon=0)
