# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

"""Definitions of some convenient types.
"""
# pylint: disable=unused-import
# structures
from typing import Any as Any
from typing import Optional as Optional
from typing import Union as Union
from typing import TypeVar as TypeVar

# containers
from typing import Dict as Dict
from typing import Tuple as Tuple
from typing import List as List
from typing import Sequence as Sequence
from typing import NamedTuple as NamedTuple
from typing import MutableMapping as MutableMapping

# iterables
from typing import Iterator as Iterator
from typing import Iterable as Iterable

# others
from typing import Callable as Callable
from typing import Hashable as Hashable
from pathlib import Path as Path
from typing_extensions import Protocol

#
import numpy as _np


ArrayLike = Union[Tuple[float, ...], List[float], _np.ndarray]
PathLike = Union[str, Path]


# %% Protocol definition for the injected random source


class RandomSource(Protocol):
    """Subset of numpy.random.RandomState the annealing loop draws from.
    Any object providing these methods can replace it (eg: for scripted tests).
    """

    # pylint: disable=pointless-statement, unused-argument

    def randint(self, low: int) -> int:
        ...

    def uniform(self, low: float, high: float) -> float:
        ...

    def rand(self) -> float:
        ...
