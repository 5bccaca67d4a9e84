# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

from .core import METRIC_NAMES
from .core import SatisfactionEntry
from .core import Scored
from .core import UNSCORED
from .core import training_set
from .synthetic import generate_entries
