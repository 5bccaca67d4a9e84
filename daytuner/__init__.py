# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .common import typing as typing
from .common import errors as errors
from . import entries
from .learning.scaler import FeatureScaler
from .learning.neighbors import KNNRegressor
from .optimization import optimizerlib as optimizers
from .optimization import callbacks as callbacks
from .optimization.annealing import AnnealingOptimizer
from .optimization.suggestion import suggest


__all__ = [
    "optimizers",
    "callbacks",
    "entries",
    "errors",
    "typing",
    "FeatureScaler",
    "KNNRegressor",
    "AnnealingOptimizer",
    "suggest",
]


__version__ = "0.1.0"
