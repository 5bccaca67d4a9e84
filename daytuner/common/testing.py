# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Helpers for the test modules (they require pytest).
"""
import inspect
import typing as tp
import pytest
import numpy as np


def printed_assert_equal(actual: tp.Any, desired: tp.Any, err_msg: str = "") -> None:
    """Same as numpy.testing.assert_equal, but prints both values on failure
    (useful for long vectors of metrics)
    """
    try:
        np.testing.assert_equal(actual, desired, err_msg=err_msg)
    except AssertionError:
        print(f"\n{' DEBUG ':#^60}\nExpected: {desired}\nbut got:  {actual}")
        raise


def assert_within_bounds(
    vectors: tp.Iterable[tp.Any], lower: tp.Any, upper: tp.Any, err_msg: str = ""
) -> None:
    """Asserts that every vector lies within [lower, upper] (inclusive, per dimension)"""
    lower, upper = (np.asarray(b, dtype=float) for b in (lower, upper))
    for k, vector in enumerate(vectors):
        vector = np.asarray(vector, dtype=float)
        outside = np.logical_or(vector < lower, vector > upper)
        if outside.any():
            dims = np.nonzero(outside)[0].tolist()
            raise AssertionError(f"{err_msg}Vector #{k} {vector.tolist()} is out of bounds on dimension(s) {dims}")


class parametrized:
    """Named test cases for pytest: each keyword is the id of a case, and its tuple
    holds the arguments of the test function, in definition order.

    Example
    -------

    .. code-block:: python

        @parametrized(small=(1, 2), large=(1000, 2000))
        def test_double(value: int, expected: int) -> None:
            assert 2 * value == expected
    """

    def __init__(self, **cases: tp.Tuple[tp.Any, ...]) -> None:
        if not cases:
            raise ValueError("At least one case must be provided")
        self.cases = dict(sorted(cases.items()))
        sizes = {len(args) for args in self.cases.values()}
        if len(sizes) != 1:
            raise ValueError(f"All cases must provide the same number of arguments (got sizes {sorted(sizes)})")
        self.num_args = sizes.pop()

    def __call__(self, func: tp.Callable[..., None]) -> tp.Any:
        names = list(inspect.signature(func).parameters)
        if len(names) != self.num_args:
            raise ValueError(f"Cases provide {self.num_args} arguments for parameters {names}")
        values = [args if self.num_args > 1 else args[0] for args in self.cases.values()]
        return pytest.mark.parametrize(",".join(names), values, ids=list(self.cases))(func)
