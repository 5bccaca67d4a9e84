# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.


# base classes


class DaytunerError(Exception):
    """Base class for error raised by Daytuner"""


class DaytunerWarning(Warning):
    pass


# errors
# pylint: disable=too-many-ancestors


class DaytunerRuntimeError(RuntimeError, DaytunerError):
    """Runtime error raised by Daytuner"""


class DaytunerValueError(ValueError, DaytunerError):
    """Value error raised by Daytuner"""


class UnfittedModelError(DaytunerRuntimeError):
    """The operation requires a prior successful fit"""


class DimensionMismatchError(DaytunerValueError):
    """Vector length does not match the fitted (or expected) dimensionality"""


class MissingScoreError(DaytunerValueError):
    """A satisfaction score is required but the entry is unscored"""


class EmptyTrainingSetError(DaytunerValueError):
    """No entry carries a satisfaction score, so there is nothing to learn from"""


# warnings


class DaytunerRuntimeWarning(RuntimeWarning, DaytunerWarning):
    """Runtime warning raise by daytuner"""


class InefficientSettingsWarning(DaytunerRuntimeWarning):
    """Optimization settings are not sensible for the data"""


class StartOutOfBoundsWarning(DaytunerRuntimeWarning):
    """Starting metrics lie outside the observed range and will be clamped"""
