# Copyright (c) Meta Platforms, Inc. and affiliates. All Rights Reserved.
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.

import inspect
import typing as tp


def non_default_arguments(func: tp.Callable[..., tp.Any], arguments: tp.Dict[str, tp.Any]) -> tp.Dict[str, tp.Any]:
    """Returns the keyword-only arguments which differ from the defaults of func

    Parameters
    ----------
    func: callable
        the function (or class) whose signature provides the defaults
    arguments: dict
        the value of each keyword-only parameter of func

    Raises
    ------
    RuntimeError
        if the keys do not match the keyword-only parameters of func

    Note
    ----
    This is convenient for short repr of configurations
    """
    defaults = {
        name: param.default
        for name, param in inspect.signature(func).parameters.items()
        if param.kind == inspect.Parameter.KEYWORD_ONLY
    }
    mismatches = set(defaults).symmetric_difference(arguments)
    if mismatches:  # this is to help during development
        raise RuntimeError(f"Mismatch between arguments and parameters of {func}: {sorted(mismatches)}")
    return {name: arguments[name] for name, default in defaults.items() if arguments[name] != default}


def short_repr(name: str, arguments: tp.Dict[str, tp.Any]) -> str:
    """Representation of a call, with sorted keyword arguments (eg: "SA(num_restarts=3)")"""
    params = ", ".join(f"{x}={y!r}" for x, y in sorted(arguments.items()))
    return f"{name}({params})"
