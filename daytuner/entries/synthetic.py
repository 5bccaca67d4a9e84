# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import datetime
import numpy as np
import daytuner.common.typing as tp
from .core import SatisfactionEntry, NUM_METRICS


# metrics of a sedentary day and of a very active day, in METRIC_NAMES order
# (resting heart rate decreases with activity)
LOW_ACTIVITY = np.array([4000.0, 5.5, 350.0, 10.0, 6.0, 4.0, 3000.0, 5.0, 78.0])
HIGH_ACTIVITY = np.array([15000.0, 9.0, 1500.0, 80.0, 15.0, 10.0, 11500.0, 30.0, 55.0])


def generate_entries(
    num_days: int = 60,
    start_day: datetime.date = datetime.date(2025, 1, 1),
    unscored_ratio: float = 0.0,
    random_state: tp.Optional[tp.Union[int, np.random.RandomState]] = None,
) -> tp.List[SatisfactionEntry]:
    """Creates a plausible history where satisfaction grows with activity.

    Each day draws an activity level in [0, 1], interpolates the metrics between
    :code:`LOW_ACTIVITY` and :code:`HIGH_ACTIVITY` (plus 3% noise of the range)
    and scores it 4 + 5 * activity (plus noise, clipped to [0, 10]).

    Parameters
    ----------
    num_days: int
        number of consecutive days to generate
    start_day: datetime.date
        first day of the history
    unscored_ratio: float
        probability for a day to be left unrated
    random_state: int or RandomState
        seed or generator, for reproducibility
    """
    rng = random_state if isinstance(random_state, np.random.RandomState) else np.random.RandomState(random_state)
    span = HIGH_ACTIVITY - LOW_ACTIVITY
    entries = []
    for k in range(num_days):
        activity = rng.uniform(0, 1)
        metrics = LOW_ACTIVITY + activity * span + 0.03 * np.abs(span) * rng.normal(size=NUM_METRICS)
        metrics = np.maximum(metrics, 0)
        score: tp.Optional[float] = float(np.clip(4 + 5 * activity + 0.3 * rng.normal(), 0, 10))
        if rng.uniform(0, 1) < unscored_ratio:
            score = None
        entries.append(SatisfactionEntry(start_day + datetime.timedelta(days=k), metrics, score))
    return entries
