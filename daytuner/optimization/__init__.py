# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .annealing import AnnealingOptimizer
from .annealing import Objective
from . import optimizerlib
from .optimizerlib import registry
