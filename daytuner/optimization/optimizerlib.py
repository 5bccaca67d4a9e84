# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import daytuner.common.typing as tp
from daytuner.common import tools as dttools
from daytuner.common.decorators import Registry
from daytuner.entries.core import SatisfactionEntry
from .annealing import AnnealingOptimizer, Objective, RandomStateLike


registry: Registry["ConfiguredAnnealing"] = Registry("optimizer")


class ConfiguredAnnealing:
    """Creates annealing optimizers with a frozen configuration.

    Parameters
    ----------
    num_neighbors: int
        k of the k-nearest-neighbor regressor
    initial_temperature: float
        temperature at the beginning of each restart
    cooling_rate: float
        multiplicative decay of the temperature, in (0, 1]
    step_size: float
        maximal perturbation of one metric at each transition
    step_units: str
        "scaled" (fraction of the metric range) or "raw" (metric units)
    min_temperature: float
        floor of the temperature
    num_restarts: int
        number of independent runs
    objective: str
        "reported" or "predicted"

    Note
    ----
    This provides a default repr which can be bypassed through set_name

    Example
    -------

    .. code-block:: python

        optimizer = ConfiguredAnnealing(num_restarts=3)(entries, random_state=12)
        best, history = optimizer.optimize(today, max_iterations=500)
    """

    # pylint: disable=unused-argument
    def __init__(
        self,
        *,
        num_neighbors: int = 5,
        initial_temperature: float = 100.0,
        cooling_rate: float = 0.95,
        step_size: float = 0.05,
        step_units: str = "scaled",
        min_temperature: float = 1e-3,
        num_restarts: int = 1,
        objective: str = Objective.REPORTED.value,
    ) -> None:
        config = dict(locals())
        config.pop("self", None)  # self comes from "locals()"
        config.pop("__class__", None)
        self._config = config
        diff = dttools.non_default_arguments(self.__class__, config)
        self.name = dttools.short_repr(self.__class__.__name__, diff)
        # try instantiating for init checks
        self([])

    def config(self) -> tp.Dict[str, tp.Any]:
        return dict(self._config)

    def __call__(
        self, entries: tp.Iterable[SatisfactionEntry], random_state: RandomStateLike = None
    ) -> AnnealingOptimizer:
        """Creates an optimizer learning from the provided entries

        Parameters
        ----------
        entries: iterable of SatisfactionEntry
            the history to learn from
        random_state: int, RandomSource or None
            seed or random source of the search
        """
        run = AnnealingOptimizer(entries, random_state=random_state, **self._config)
        run.name = self.name
        return run

    def __repr__(self) -> str:
        return self.name

    def set_name(self, name: str, register: bool = False) -> "ConfiguredAnnealing":
        """Set a new representation for the instance"""
        self.name = name
        if register:
            registry.register_name(name, self)
        return self

    def __eq__(self, other: tp.Any) -> tp.Any:
        if self.__class__ == other.__class__:
            return self._config == other._config
        return False

    def __hash__(self) -> int:
        return hash(tuple(sorted(self._config.items())))


def get(optimizer: tp.Union[str, ConfiguredAnnealing]) -> ConfiguredAnnealing:
    """Returns a configured optimizer from its registered name (or the configured optimizer itself)"""
    if isinstance(optimizer, ConfiguredAnnealing):
        return optimizer
    return registry[optimizer]


SA = ConfiguredAnnealing().set_name("SA", register=True)
SAPredicted = ConfiguredAnnealing(objective="predicted").set_name("SAPredicted", register=True)
SARestarts = ConfiguredAnnealing(num_restarts=5).set_name("SARestarts", register=True)
SAPredictedRestarts = ConfiguredAnnealing(objective="predicted", num_restarts=5).set_name(
    "SAPredictedRestarts", register=True
)
RawStepSA = ConfiguredAnnealing(step_size=0.5, step_units="raw").set_name("RawStepSA", register=True)
