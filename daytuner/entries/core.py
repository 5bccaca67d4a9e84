# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Daily records the suggestion engine learns from.

A :code:`SatisfactionEntry` holds one calendar day: its nine health metrics
(always in the :code:`METRIC_NAMES` order) and an optional satisfaction score.
The score is either :code:`Scored(value)` or :code:`UNSCORED`, so consumers
have to handle the missing case explicitly (see :code:`require_score`).
"""

import datetime
import numpy as np
import daytuner.common.typing as tp
from daytuner.common import errors


METRIC_NAMES: tp.Tuple[str, ...] = (
    "steps",
    "time_in_bed",
    "active_energy",
    "exercise_minutes",
    "stand_hours",
    "daylight_minutes",
    "walking_distance",
    "flights_climbed",
    "resting_heart_rate",
)
NUM_METRICS = len(METRIC_NAMES)


class Scored(tp.NamedTuple):
    """A known satisfaction score.

    Parameters
    ----------
    value: float
        the score, nominally in [0, 10]
    predicted: bool
        False for a rating provided by the user, True for a model estimate
    """

    value: float
    predicted: bool = False


class Unscored:
    """Score of a day which has not been rated yet"""

    _instance: tp.Optional["Unscored"] = None

    def __new__(cls) -> "Unscored":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNSCORED"

    def __reduce__(self) -> str:
        return "UNSCORED"


UNSCORED = Unscored()
Score = tp.Union[Scored, Unscored]
ScoreLike = tp.Optional[tp.Union[Score, float]]


def as_score(score: ScoreLike) -> Score:
    """Converts None/float/Score inputs to a Score"""
    if isinstance(score, (Scored, Unscored)):
        return score
    if score is None:
        return UNSCORED
    return Scored(float(score))


def as_metric_vector(metrics: tp.ArrayLike) -> tp.Tuple[float, ...]:
    """Checks the size of a metric vector and converts it to a tuple of floats"""
    array = np.asarray(metrics, dtype=float)
    if array.shape != (NUM_METRICS,):
        raise errors.DimensionMismatchError(
            f"Expected {NUM_METRICS} metrics ({', '.join(METRIC_NAMES)}), got shape {array.shape}"
        )
    return tuple(float(x) for x in array)


class SatisfactionEntry:
    """Health metrics and satisfaction score of one calendar day.

    Parameters
    ----------
    day: datetime.date
        the day of the record (unique key in the record store)
    metrics: array-like
        the 9 metrics, in :code:`METRIC_NAMES` order
    score: Scored, UNSCORED, float or None
        the satisfaction score (None and UNSCORED mean not rated yet)

    Note
    ----
    The engine only reads entries and creates new ones for its candidates,
    it never modifies an entry it was provided.
    """

    def __init__(self, day: datetime.date, metrics: tp.ArrayLike, score: ScoreLike = None) -> None:
        if isinstance(day, datetime.datetime):
            day = day.date()
        self.day = day
        self.metrics = as_metric_vector(metrics)
        self.score = as_score(score)

    @classmethod
    def from_mapping(
        cls, day: datetime.date, mapping: tp.Dict[str, float], score: ScoreLike = None
    ) -> "SatisfactionEntry":
        """Creates an entry from a {metric name: value} mapping holding all metrics"""
        missing = [name for name in METRIC_NAMES if name not in mapping]
        unknown = sorted(set(mapping) - set(METRIC_NAMES))
        if missing or unknown:
            raise errors.DimensionMismatchError(f"Missing metrics {missing} and unknown metrics {unknown}")
        return cls(day, [mapping[name] for name in METRIC_NAMES], score)

    @property
    def is_scored(self) -> bool:
        return isinstance(self.score, Scored)

    def metric(self, name: str) -> float:
        try:
            return self.metrics[METRIC_NAMES.index(name)]
        except ValueError:
            raise KeyError(f'Unknown metric "{name}", choose among {METRIC_NAMES}')

    def to_array(self) -> np.ndarray:
        return np.array(self.metrics, dtype=float)

    def to_dict(self) -> tp.Dict[str, float]:
        return dict(zip(METRIC_NAMES, self.metrics))

    def with_score(self, score: ScoreLike) -> "SatisfactionEntry":
        """Returns a new entry for the same day and metrics, with another score"""
        return SatisfactionEntry(self.day, self.metrics, score)

    def __eq__(self, other: tp.Any) -> bool:
        if not isinstance(other, SatisfactionEntry):
            return NotImplemented
        return (self.day, self.metrics, self.score) == (other.day, other.metrics, other.score)

    def __hash__(self) -> int:
        return hash((self.day, self.metrics, self.score))

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(day={self.day}, score={self.score}, metrics={list(self.metrics)})"


def require_score(entry: SatisfactionEntry) -> float:
    """Returns the score value of the entry, or raises MissingScoreError if unscored"""
    if isinstance(entry.score, Scored):
        return entry.score.value
    raise errors.MissingScoreError(f"Satisfaction score must be present (entry of {entry.day} is unscored)")


def training_set(entries: tp.Iterable[SatisfactionEntry]) -> tp.List[SatisfactionEntry]:
    """Entries with a known score, in input order"""
    return [e for e in entries if e.is_scored]


def metrics_matrix(entries: tp.Sequence[SatisfactionEntry]) -> np.ndarray:
    """Stacks the metric vectors as a (num_entries, 9) array"""
    if not entries:
        return np.zeros((0, NUM_METRICS))
    return np.array([e.metrics for e in entries], dtype=float)
