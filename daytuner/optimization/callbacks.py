# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import json
import time
import warnings
import datetime
import logging
from pathlib import Path
import numpy as np
import daytuner.common.typing as tp
from daytuner.common import errors
from daytuner.entries.core import METRIC_NAMES, SatisfactionEntry, require_score
from .annealing import AnnealingOptimizer

global_logger = logging.getLogger(__name__)


class AnnealingLogger:
    """Progress logger, to register as "iteration" callback of an optimizer.
    It logs the best value of the current restart every few iterations or seconds,
    and always at the first iteration of a restart.

    Parameters
    ----------
    logger: logging.Logger
        where to log
    log_level: int
        level of the records
    log_interval_iterations: int
        number of iterations between two records
    log_interval_seconds: float
        number of seconds between two records
    """

    def __init__(
        self,
        *,
        logger: logging.Logger = global_logger,
        log_level: int = logging.INFO,
        log_interval_iterations: int = 1,
        log_interval_seconds: float = 60.0,
    ) -> None:
        if log_interval_iterations < 1 or log_interval_seconds <= 0:
            raise errors.DaytunerValueError("Logging intervals must be strictly positive")
        self.logger = logger
        self.log_level = log_level
        self.log_interval_iterations = int(log_interval_iterations)
        self.log_interval_seconds = log_interval_seconds
        self._restart = -1
        self._last_iteration = 0
        self._last_time = time.time()

    def _is_due(self, optimizer: AnnealingOptimizer) -> bool:
        if optimizer.num_iterations == 1 or optimizer.num_iterations < self._last_iteration:  # new run
            self._restart = -1
            self._last_iteration = 0
        if optimizer.restart_index != self._restart:
            self._restart = optimizer.restart_index
            return True
        return (
            optimizer.num_iterations - self._last_iteration >= self.log_interval_iterations
            or time.time() - self._last_time >= self.log_interval_seconds
        )

    def __call__(self, optimizer: AnnealingOptimizer) -> None:
        if not self._is_due(optimizer):
            return
        self._last_iteration = optimizer.num_iterations
        self._last_time = time.time()
        self.logger.log(
            self.log_level,
            "After %s iterations (restart %s), best value is %.4f at temperature %.3g",
            optimizer.num_iterations,
            optimizer.restart_index,
            optimizer.best_value,
            optimizer.temperature,
        )


class AcceptedCandidatesLogger:
    """Records each accepted candidate as a json line, to register as "accept" callback.
    Each record holds the state of the search (optimizer name, restart, number of iterations
    and of accepted candidates, temperature), the day, the predicted value and the 9 metrics.

    Parameters
    ----------
    filepath: str or Path
        the json-lines file to write
    append: bool
        keep the records already in the file (otherwise the file is replaced)

    Example
    -------

    .. code-block:: python

        recorder = AcceptedCandidatesLogger("trajectory.json")
        optimizer.register_callback("accept", recorder)
        optimizer.optimize(today, max_iterations=500)
        values = [record["#value"] for record in recorder.load()]
    """

    def __init__(self, filepath: tp.PathLike, append: bool = True) -> None:
        self.filepath = Path(filepath)
        self.session = datetime.datetime.now().isoformat(timespec="seconds")
        if not append and self.filepath.exists():
            self.filepath.unlink()
        self.filepath.parent.mkdir(parents=True, exist_ok=True)

    def _record(self, optimizer: AnnealingOptimizer, candidate: SatisfactionEntry) -> tp.Dict[str, tp.Any]:
        record: tp.Dict[str, tp.Any] = {
            "#optimizer": optimizer.name,
            "#session": self.session,
            "#restart": optimizer.restart_index,
            "#num-iterations": optimizer.num_iterations,
            "#num-accepted": optimizer.num_accepted,
            "#temperature": float(optimizer.temperature),
            "#day": candidate.day.isoformat(),
            "#value": float(require_score(candidate)),
        }
        record.update(candidate.to_dict())
        return record

    def __call__(self, optimizer: AnnealingOptimizer, candidate: SatisfactionEntry) -> None:
        line = json.dumps(self._record(optimizer, candidate))
        try:  # a failing dump must not interrupt the search
            with self.filepath.open("a") as f:
                f.write(line + "\n")
        except OSError as e:
            warnings.warn(f"Could not record accepted candidate in {self.filepath}: {e}", errors.DaytunerRuntimeWarning)

    def load(self) -> tp.List[tp.Dict[str, tp.Any]]:
        """Returns the records of the file, oldest first"""
        if not self.filepath.exists():
            return []
        with self.filepath.open("r") as f:
            return [json.loads(line) for line in f if line.strip()]

    def load_trajectory(self) -> np.ndarray:
        """Returns the recorded metrics as an array of shape (num_records, 9)"""
        records = self.load()
        return np.array([[r[name] for name in METRIC_NAMES] for r in records], dtype=float).reshape(-1, len(METRIC_NAMES))
