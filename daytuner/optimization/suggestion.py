# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import daytuner.common.typing as tp
from daytuner.common import errors
from daytuner.entries.core import METRIC_NAMES, SatisfactionEntry, Scored, training_set
from . import optimizerlib
from .annealing import RandomStateLike


logger = logging.getLogger(__name__)


class MetricChange(tp.NamedTuple):
    """Suggested change of one metric"""

    name: str
    current: float
    suggested: float

    @property
    def change(self) -> float:
        return self.suggested - self.current

    @property
    def direction(self) -> int:
        """1 to increase, -1 to decrease, 0 when the change is less than one unit"""
        whole = int(self.change)  # truncation towards 0
        return (whole > 0) - (whole < 0)


class Suggestion(tp.NamedTuple):
    """Suggested metrics for a day, with the search trajectory"""

    current: SatisfactionEntry
    best: SatisfactionEntry
    history: tp.List[SatisfactionEntry]

    @property
    def changes(self) -> tp.List[MetricChange]:
        return [MetricChange(*args) for args in zip(METRIC_NAMES, self.current.metrics, self.best.metrics)]

    @property
    def improvement(self) -> tp.Optional[float]:
        """Predicted gain of satisfaction (None if the current day is unscored)"""
        if not isinstance(self.current.score, Scored) or not isinstance(self.best.score, Scored):
            return None
        return self.best.score.value - self.current.score.value


def suggest(
    entries: tp.Iterable[SatisfactionEntry],
    current: SatisfactionEntry,
    optimizer: tp.Union[str, optimizerlib.ConfiguredAnnealing] = "SA",
    max_iterations: int = 50,
    random_state: RandomStateLike = None,
) -> Suggestion:
    """Suggests metrics for the current day which are predicted to increase satisfaction.

    Parameters
    ----------
    entries: iterable of SatisfactionEntry
        snapshot of the history (scored and unscored days)
    current: SatisfactionEntry
        the day to improve (eg: today, or the most recent rated day)
    optimizer: str or ConfiguredAnnealing
        registered name (see :code:`optimizerlib.registry`) or configured optimizer
    max_iterations: int
        number of transitions of each restart
    random_state: int, RandomSource or None
        seed or random source of the search

    Raises
    ------
    EmptyTrainingSetError
        if no entry is scored
    MissingScoreError
        if the optimizer starts from the reported score and the current day is unscored
    """
    entries = list(entries)
    if not training_set(entries):
        raise errors.EmptyTrainingSetError("No scored entry is available, no suggestion can be made")
    configured = optimizerlib.get(optimizer)
    run = configured(entries, random_state=random_state)
    best, history = run.optimize(current, max_iterations=max_iterations)
    suggestion = Suggestion(current, best, history)
    logger.info("%s suggests %s (improvement: %s)", configured, list(best.metrics), suggestion.improvement)
    return suggestion
