# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp
import pytest
import numpy as np
from . import decorators
from . import tools


def test_registry() -> None:
    objects: decorators.Registry[tp.Callable[[], int]] = decorators.Registry("function")
    other: decorators.Registry[tp.Callable[[], int]] = decorators.Registry()

    def dummy() -> int:
        return 12

    assert objects.register_name("dummy", dummy) is dummy
    np.testing.assert_equal(objects["dummy"](), 12)
    assert "dummy" in objects
    np.testing.assert_array_equal(list(objects.keys()), ["dummy"])
    np.testing.assert_array_equal(list(other.keys()), [])
    objects.unregister("dummy")
    objects.unregister("other_dummy_that_does_not_exist")
    np.testing.assert_array_equal(list(objects.keys()), [])


def test_registry_errors() -> None:
    objects: decorators.Registry[int] = decorators.Registry("number")
    objects.register_name("twelve", 12)
    with pytest.raises(RuntimeError, match="name collision"):
        objects.register_name("twelve", 13)
    with pytest.raises(KeyError, match="Unknown number \"thirteen\""):
        objects["thirteen"]  # pylint: disable=pointless-statement
    np.testing.assert_equal(objects.get("thirteen", 13), 13)


def _configure(*, alpha: float = 1.0, beta: str = "reported") -> None:
    pass


def test_non_default_arguments() -> None:
    np.testing.assert_equal(tools.non_default_arguments(_configure, {"alpha": 2.0, "beta": "reported"}), {"alpha": 2.0})
    np.testing.assert_equal(tools.non_default_arguments(_configure, {"alpha": 1.0, "beta": "reported"}), {})
    with pytest.raises(RuntimeError):
        tools.non_default_arguments(_configure, {"alpha": 1.0})


def test_short_repr() -> None:
    assert tools.short_repr("SA", {}) == "SA()"
    assert tools.short_repr("SA", {"step_size": 0.5, "num_restarts": 3}) == "SA(num_restarts=3, step_size=0.5)"
