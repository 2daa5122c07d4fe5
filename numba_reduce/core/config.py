# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""
The config options describe the simulated device the reduction kernels run on
and turn on extra debugging output.

There are two ways of setting these config options:

- Config options can be directly set programmatically, *e.g.*,

    .. code-block:: python

        from numba_reduce.core import config

        config.SUB_GROUP_SIZE = 64

- The options can also be set globally using environment flags. The name of the
  environment variable for every config option is annotated next to its
  definition.

    .. code-block:: bash

        export NUMBA_REDUCE_SUB_GROUP_SIZE=64

Device properties are read when a :class:`numba_reduce.core.device.Device` is
constructed, so changing an option does not affect devices created earlier.
"""

from __future__ import annotations

import logging
import os
from typing import Annotated

from numba.core import config


def _readenv(name, ctor, default):
    """Read/write values from/into system environment variable list.

    This function is used to read and write values from (and into) system `env`.
    This is adapted from `process_environ()` function of `_EnvLoader` class in
    `numba/core/config.py`.

    Args:
        name (str): The name of the env variable.
        ctor (type): The type of the env variable.
        default (int,float,str): The default value of the env variable.

    Returns:
        int,float,string: The environment variable value of the specified type.
    """

    value = os.environ.get(name)
    if value is None:
        return default() if callable(default) else default
    try:
        return ctor(value)
    except Exception:
        logging.exception(
            "env variable %s defined but failed to parse '%s'" % (name, value)
        )
        return default


def __getattr__(name):
    """__getattr__ for numba_reduce's config module.

    This will be used to fallback to numba's config.

    Args:
        name (str): The name of the env variable.

    Returns:
        int,float,str: The environment variable value from numba.
    """
    return getattr(config, name)


DEBUG: Annotated[
    int,
    "Logs every reduction pass and kernel launch when set to a non-zero value",
    "default = 0",
    "ENVIRONMENT FLAG: NUMBA_REDUCE_DEBUG",
] = _readenv("NUMBA_REDUCE_DEBUG", int, config.DEBUG)

DEVICE_NAME: Annotated[
    str,
    "Filter string reported as the name of the default simulated device",
    'default = "simulator:gpu:0"',
    "ENVIRONMENT FLAG: NUMBA_REDUCE_DEVICE_NAME",
] = _readenv("NUMBA_REDUCE_DEVICE_NAME", str, "simulator:gpu:0")

SUB_GROUP_SIZE: Annotated[
    int,
    "Number of work-items of a sub-group (hardware warp width) that execute "
    "in lock-step on the simulated device",
    "default = 32",
    "ENVIRONMENT FLAG: NUMBA_REDUCE_SUB_GROUP_SIZE",
] = _readenv("NUMBA_REDUCE_SUB_GROUP_SIZE", int, 32)

MAX_WORK_GROUP_SIZE: Annotated[
    int,
    "Largest work-group (block) size a kernel may be launched with",
    "default = 1024",
    "ENVIRONMENT FLAG: NUMBA_REDUCE_MAX_WORK_GROUP_SIZE",
] = _readenv("NUMBA_REDUCE_MAX_WORK_GROUP_SIZE", int, 1024)

GLOBAL_MEM_SIZE: Annotated[
    int,
    "Size in bytes of the global memory of the simulated device. Device "
    "allocations beyond it fail with an out of memory error.",
    "default = 4294967296",
    "ENVIRONMENT FLAG: NUMBA_REDUCE_GLOBAL_MEM_SIZE",
] = _readenv("NUMBA_REDUCE_GLOBAL_MEM_SIZE", int, 4 * 1024**3)
