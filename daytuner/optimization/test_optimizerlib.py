# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import datetime
import pytest
import numpy as np
from daytuner.common import errors
from daytuner.entries.core import SatisfactionEntry
from daytuner.entries.synthetic import generate_entries
from . import optimizerlib
from .annealing import Objective


ENTRIES = generate_entries(40, random_state=12)
TODAY = datetime.date(2025, 12, 1)


def test_registry() -> None:
    for name in ["SA", "SAPredicted", "SARestarts", "SAPredictedRestarts", "RawStepSA"]:
        assert name in optimizerlib.registry
    assert optimizerlib.registry["SA"] is optimizerlib.SA
    with pytest.raises(RuntimeError):
        optimizerlib.ConfiguredAnnealing().set_name("SA", register=True)


@pytest.mark.parametrize("name", sorted(optimizerlib.registry))  # type: ignore
def test_registered_optimizers(name: str) -> None:
    configured = optimizerlib.registry[name]
    optimizer = configured(ENTRIES, random_state=12)
    assert optimizer.name == name
    start = SatisfactionEntry(TODAY, ENTRIES[0].metrics, ENTRIES[0].score)
    initial_value = ENTRIES[0].score.value  # type: ignore
    if optimizer.objective == Objective.PREDICTED:
        initial_value = optimizer.regressor.predict_metrics(start.metrics)
    result = optimizer.optimize(start, max_iterations=50)
    assert result.value >= initial_value
    assert all(h.day == TODAY for h in result.history)


def test_configured_repr() -> None:
    assert repr(optimizerlib.ConfiguredAnnealing()) == "ConfiguredAnnealing()"
    configured = optimizerlib.ConfiguredAnnealing(num_restarts=3, objective="predicted")
    assert repr(configured) == "ConfiguredAnnealing(num_restarts=3, objective='predicted')"
    assert repr(optimizerlib.SARestarts) == "SARestarts"
    optimizer = configured(ENTRIES)
    assert optimizer.objective == Objective.PREDICTED
    assert optimizer.num_restarts == 3
    assert repr(optimizer) == "ConfiguredAnnealing(num_restarts=3, objective='predicted')(num_samples=40, objective=predicted)"


def test_configured_equality() -> None:
    assert optimizerlib.ConfiguredAnnealing(num_restarts=5) == optimizerlib.SARestarts
    assert optimizerlib.ConfiguredAnnealing(num_restarts=4) != optimizerlib.SARestarts
    assert optimizerlib.SA != "SA"
    assert len({optimizerlib.SA, optimizerlib.ConfiguredAnnealing()}) == 1
    config = optimizerlib.RawStepSA.config()
    np.testing.assert_equal(config["step_size"], 0.5)
    config["step_size"] = 12  # copy
    np.testing.assert_equal(optimizerlib.RawStepSA.config()["step_size"], 0.5)


def test_configured_checks_at_init() -> None:
    with pytest.raises(errors.DaytunerValueError):
        optimizerlib.ConfiguredAnnealing(cooling_rate=2.0)
    with pytest.raises(errors.DaytunerValueError):
        optimizerlib.ConfiguredAnnealing(objective="mean")


def test_get() -> None:
    assert optimizerlib.get("SAPredicted") is optimizerlib.SAPredicted
    configured = optimizerlib.ConfiguredAnnealing(step_size=0.1)
    assert optimizerlib.get(configured) is configured
    with pytest.raises(KeyError):
        optimizerlib.get("CMA")
