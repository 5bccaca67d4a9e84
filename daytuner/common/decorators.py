# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import typing as tp


X = tp.TypeVar("X")


class Registry(tp.MutableMapping[str, X]):
    """Named objects (eg: optimizer presets) accessible as a dict.
    Unknown names raise a KeyError listing the available ones.

    Parameters
    ----------
    kind: str
        what is registered, for error messages
    """

    def __init__(self, kind: str = "object") -> None:
        super().__init__()
        self.kind = kind
        self._data: tp.Dict[str, X] = {}

    def register_name(self, name: str, obj: X) -> X:
        """Registers an object with a provided name, and returns it"""
        if name in self._data:
            raise RuntimeError(f'Encountered a name collision "{name}"')
        self._data[name] = obj
        return obj

    def unregister(self, name: str) -> None:
        """Removes a registered object (no-op if it is not registered),
        e.g. so you can re-register it in a notebook.
        """
        self._data.pop(name, None)

    def __getitem__(self, key: str) -> X:
        if key not in self._data:
            raise KeyError(f'Unknown {self.kind} "{key}", choose among {sorted(self._data)}')
        return self._data[key]

    def __setitem__(self, key: str, value: X) -> None:
        self._data[key] = value

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __iter__(self) -> tp.Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)
