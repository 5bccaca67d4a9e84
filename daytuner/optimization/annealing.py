# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import logging
import datetime
import warnings
from enum import Enum
import numpy as np
import daytuner.common.typing as tp
from daytuner.common import errors
from daytuner.entries.core import SatisfactionEntry, Scored, metrics_matrix, require_score, training_set
from daytuner.learning.scaler import FeatureScaler
from daytuner.learning.neighbors import KNNRegressor


logger = logging.getLogger(__name__)
_AnnealingCallBack = tp.Union[
    tp.Callable[["AnnealingOptimizer"], None], tp.Callable[["AnnealingOptimizer", SatisfactionEntry], None]
]
RandomStateLike = tp.Optional[tp.Union[int, tp.RandomSource]]


class Objective(Enum):
    """Value the search starts from

    - REPORTED: the score reported by the user for the starting day (must be present)
    - PREDICTED: the regressor prediction for the starting metrics
    """

    REPORTED = "reported"
    PREDICTED = "predicted"


class ObservedBounds:
    """Realistic range of each metric, as observed over a dataset.
    Candidates are clipped to this range so that suggestions stay plausible
    (no negative step counts, no 15 hours in bed...).

    Parameters
    ----------
    lower: array-like or None
        minimum of each metric
    upper: array-like or None
        maximum of each metric

    Note
    ----
    Without bounds (empty dataset), clamping leaves vectors unchanged.
    """

    def __init__(self, lower: tp.Optional[tp.ArrayLike] = None, upper: tp.Optional[tp.ArrayLike] = None) -> None:
        self.lower = None if lower is None else np.asarray(lower, dtype=float)
        self.upper = None if upper is None else np.asarray(upper, dtype=float)
        if (self.lower is None) != (self.upper is None):
            raise errors.DaytunerValueError("Both lower and upper bounds must be provided (or none of them)")

    @classmethod
    def from_entries(cls, entries: tp.Sequence[SatisfactionEntry]) -> "ObservedBounds":
        if not entries:
            return cls()
        data = metrics_matrix(entries)
        return cls(data.min(axis=0), data.max(axis=0))

    def clamp(self, x: np.ndarray) -> np.ndarray:
        if self.lower is None or self.upper is None:
            return x
        return np.clip(x, self.lower, self.upper)  # type: ignore

    def contains(self, x: np.ndarray) -> bool:
        if self.lower is None or self.upper is None:
            return True
        return bool(np.all(x >= self.lower) and np.all(x <= self.upper))

    def __repr__(self) -> str:
        if self.lower is None or self.upper is None:
            return f"{self.__class__.__name__}()"
        return f"{self.__class__.__name__}(lower={self.lower.tolist()}, upper={self.upper.tolist()})"


class OptimizationResult(tp.NamedTuple):
    """Output of the annealing search

    - best: the best entry found, dated as the initial entry, with its score (predicted unless
      the initial entry itself was never improved with the reported objective)
    - history: every accepted candidate, in acceptance order, all restarts concatenated
    """

    best: SatisfactionEntry
    history: tp.List[SatisfactionEntry]

    @property
    def value(self) -> float:
        return require_score(self.best)


class AnnealingOptimizer:  # pylint: disable=too-many-instance-attributes
    """Simulated annealing over the 9 daily metrics, maximizing the
    satisfaction score predicted by a k-nearest-neighbor regressor.

    Each transition perturbs one random metric by a uniform delta in
    [-step_size, step_size], clamps the candidate to the observed bounds,
    and accepts it if it improves the current value, or otherwise with probability
    exp(delta / temperature) (Metropolis criterion). The temperature is multiplied
    by the cooling rate after each transition.

    The scaler and regressor are fitted once, at construction, on the provided
    snapshot of entries. Entries are never modified.

    Parameters
    ----------
    entries: sequence of SatisfactionEntry
        the history; scored entries are used for learning, all of them for the bounds
    num_neighbors: int
        k of the k-nearest-neighbor regressor
    initial_temperature: float
        temperature at the beginning of each restart
    cooling_rate: float
        multiplicative decay of the temperature, in (0, 1]
    step_size: float
        maximal perturbation of one metric at each transition
    step_units: str
        "scaled": the step is a fraction of the fitted range of the metric (constant metrics never move),
        "raw": the step is in the metric's own units
    min_temperature: float
        floor of the temperature
    num_restarts: int
        number of independent runs: the first one starts from the provided entry, the next ones
        from random scored entries (values below 1 count as 1)
    objective: str or Objective
        "reported" to start from the user score of the initial entry, "predicted" to start
        from the regressor prediction of its metrics
    random_state: int, RandomSource or None
        seed or random source for the dimension choice, the perturbations, the acceptance draws
        and the restart points (None for a non-deterministic source)
    """

    def __init__(
        self,
        entries: tp.Iterable[SatisfactionEntry],
        *,
        num_neighbors: int = 5,
        initial_temperature: float = 100.0,
        cooling_rate: float = 0.95,
        step_size: float = 0.05,
        step_units: str = "scaled",
        min_temperature: float = 1e-3,
        num_restarts: int = 1,
        objective: tp.Union[str, Objective] = Objective.REPORTED,
        random_state: RandomStateLike = None,
    ) -> None:
        if initial_temperature <= 0:
            raise errors.DaytunerValueError(f"initial_temperature must be strictly positive (got {initial_temperature})")
        if not 0 < cooling_rate <= 1:
            raise errors.DaytunerValueError(f"cooling_rate must be in (0, 1] (got {cooling_rate})")
        if step_size <= 0:
            raise errors.DaytunerValueError(f"step_size must be strictly positive (got {step_size})")
        if min_temperature < 0:
            raise errors.DaytunerValueError(f"min_temperature must be non-negative (got {min_temperature})")
        if step_units not in ("scaled", "raw"):
            raise errors.DaytunerValueError(f'Unknown step_units "{step_units}", choose among "scaled" and "raw"')
        try:
            self.objective = Objective(objective)
        except ValueError:
            choices = [o.value for o in Objective]
            raise errors.DaytunerValueError(f'Unknown objective "{objective}", choose among {choices}')
        if step_units == "scaled" and step_size > 1:
            warnings.warn(
                f"A scaled step_size of {step_size} is larger than the whole observed range of the metrics",
                errors.InefficientSettingsWarning,
            )
        self.name = self.__class__.__name__  # overriden by configured optimizers
        self.initial_temperature = initial_temperature
        self.cooling_rate = cooling_rate
        self.step_size = step_size
        self.step_units = step_units
        self.min_temperature = min_temperature
        self.num_restarts = num_restarts
        # learning
        self.entries = list(entries)
        self.training = training_set(self.entries)
        self.scaler = FeatureScaler().fit(metrics_matrix(self.training))
        self.regressor = KNNRegressor(num_neighbors=num_neighbors).fit(self.training, self.scaler)
        self.bounds = ObservedBounds.from_entries(self.entries)
        # randomness and callbacks
        self._random_state: tp.Optional[tp.RandomSource] = None
        if isinstance(random_state, (int, np.integer)):
            self._random_state = np.random.RandomState(random_state)
        elif random_state is not None:
            self._random_state = random_state
        self._callbacks: tp.Dict[str, tp.List[_AnnealingCallBack]] = {}
        # state of the current search
        self.restart_index = 0
        self.num_iterations = 0
        self.num_accepted = 0
        self.temperature = initial_temperature
        self.current_value = float("nan")
        self.best_value = float("nan")

    @property
    def random_state(self) -> tp.RandomSource:
        """Random source the search draws from. It can be seeded/replaced."""
        if self._random_state is None:
            seed = np.random.randint(2 ** 32, dtype=np.uint32)
            self._random_state = np.random.RandomState(seed)
        return self._random_state

    @random_state.setter
    def random_state(self, random_state: tp.RandomSource) -> None:
        self._random_state = random_state

    def register_callback(self, name: str, callback: _AnnealingCallBack) -> None:
        """Add a callback method called at the end of each transition or when a candidate is accepted.
        This can be useful for custom logging.

        Parameters
        ----------
        name: str
            "iteration" (called as :code:`callback(optimizer)`) or "accept"
            (called as :code:`callback(optimizer, candidate)`)
        callback: callable
            the function to call
        """
        assert name in ["iteration", "accept"], f'Only "iteration" and "accept" can have callbacks (not {name})'
        self._callbacks.setdefault(name, []).append(callback)

    def remove_all_callbacks(self) -> None:
        """Removes all registered callables"""
        self._callbacks = {}

    def _call(self, name: str, *args: tp.Any) -> None:
        for callback in self._callbacks.get(name, []):
            callback(self, *args)  # type: ignore

    def optimize(self, initial: SatisfactionEntry, max_iterations: int) -> OptimizationResult:
        """Searches for metrics with a higher predicted satisfaction than the initial entry.

        Parameters
        ----------
        initial: SatisfactionEntry
            the starting point (eg: today, or the most recent rated day)
        max_iterations: int
            number of transitions of each restart

        Returns
        -------
        OptimizationResult
            the best entry (dated as the initial entry) and the history of accepted candidates

        Raises
        ------
        MissingScoreError
            if the objective is "reported" and the initial entry is unscored (before any search)
        UnfittedModelError
            if no entry of the dataset is scored, as soon as a prediction is needed
        """
        if self.objective == Objective.REPORTED:
            require_score(initial)
        if max_iterations < 0:
            raise errors.DaytunerValueError(f"max_iterations must be non-negative (got {max_iterations})")
        if not max_iterations:
            warnings.warn("No iteration budget, the initial entry will be returned", errors.InefficientSettingsWarning)
        if not self.bounds.contains(initial.to_array()):
            warnings.warn(
                f"Initial metrics {list(initial.metrics)} are outside of the observed range, candidates will be clamped",
                errors.StartOutOfBoundsWarning,
            )
        self.num_iterations = 0
        self.num_accepted = 0
        best: tp.Optional[SatisfactionEntry] = None
        history: tp.List[SatisfactionEntry] = []
        for restart in range(max(self.num_restarts, 1)):
            start = initial if not restart else self._draw_restart_entry()
            run_best, run_history = self._anneal(start, initial.day, max_iterations, restart)
            history.extend(run_history)
            if best is None or require_score(run_best) > require_score(best):
                best = run_best
        assert best is not None
        return OptimizationResult(best, history)

    def _draw_restart_entry(self) -> SatisfactionEntry:
        if not self.training:
            raise errors.EmptyTrainingSetError("No scored entry to restart from")
        return self.training[self.random_state.randint(len(self.training))]

    def _anneal(
        self, start: SatisfactionEntry, day: datetime.date, max_iterations: int, restart: int
    ) -> tp.Tuple[SatisfactionEntry, tp.List[SatisfactionEntry]]:
        self.restart_index = restart
        self.temperature = self.initial_temperature
        current = start.to_array()
        if self.objective == Objective.PREDICTED:
            value = self.regressor.predict_metrics(current)
        else:
            value = require_score(start)
        best = start
        if restart or self.objective == Objective.PREDICTED:
            # restart points are other days of the history: the result is a new entry for the initial day
            best = SatisfactionEntry(day, start.metrics, Scored(value, predicted=True))
        self.current_value = self.best_value = value
        logger.info("Restart %s starts from %s value %.4f", restart, self.objective.value, value)
        history: tp.List[SatisfactionEntry] = []
        for iteration in range(max_iterations):
            candidate = self._propose(current)
            candidate_value = self.regressor.predict_metrics(candidate)
            if self._accept(candidate_value - value):
                current, value = candidate, candidate_value
                entry = SatisfactionEntry(day, candidate, Scored(candidate_value, predicted=True))
                history.append(entry)
                self.num_accepted += 1
                self.current_value = value
                if value > self.best_value:
                    self.best_value = value
                    best = entry
                self._call("accept", entry)
            self.temperature = max(self.temperature * self.cooling_rate, self.min_temperature)
            self.num_iterations += 1
            logger.debug(
                "Iteration %s: current = %.4f, best = %.4f, temperature = %.3g",
                iteration,
                self.current_value,
                self.best_value,
                self.temperature,
            )
            self._call("iteration")
        logger.info(
            "Restart %s ends with best value %.4f (%s accepted candidates)", restart, self.best_value, len(history)
        )
        return best, history

    def _propose(self, current: np.ndarray) -> np.ndarray:
        candidate = np.array(current, copy=True)
        dim = int(self.random_state.randint(candidate.size))
        delta = float(self.random_state.uniform(-self.step_size, self.step_size))
        if self.step_units == "scaled":
            delta *= self.scaler.data_range[dim]
        candidate[dim] += delta
        return self.bounds.clamp(candidate)

    def _accept(self, delta: float) -> bool:
        """Metropolis criterion"""
        if delta > 0:
            return True
        temperature = max(self.temperature, self.min_temperature)
        probability = np.exp(delta / temperature) if temperature > 0 else 0.0
        return bool(self.random_state.rand() < probability)

    def __repr__(self) -> str:
        return f"{self.name}(num_samples={self.regressor.num_samples}, objective={self.objective.value})"
