# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""
numba-reduce computes reductions of large arrays on a data-parallel device
with kernels written against a SYCL-like kernel API.
"""

from numba_reduce import kernel_api
from numba_reduce.core import config
from numba_reduce.core.device import (
    Device,
    DeviceStatus,
    select_default_device,
)
from numba_reduce.core.engine import ReductionEngine, ReductionResult
from numba_reduce.core.exceptions import (
    ConcurrentReductionError,
    DeviceError,
    EngineReleasedError,
    InputSizeExceedsCapacityError,
    UnsupportedBlockSizeError,
    UnsupportedSubGroupSizeError,
)
from numba_reduce.operators import BinaryOperator, identity_for
from numba_reduce.reduction import (
    HostReduction,
    ShuffleReduction,
    TreeReduction,
)

__version__ = "0.1.0"

__all__ = [
    "BinaryOperator",
    "ConcurrentReductionError",
    "Device",
    "DeviceError",
    "DeviceStatus",
    "EngineReleasedError",
    "HostReduction",
    "InputSizeExceedsCapacityError",
    "ReductionEngine",
    "ReductionResult",
    "ShuffleReduction",
    "TreeReduction",
    "UnsupportedBlockSizeError",
    "UnsupportedSubGroupSizeError",
    "config",
    "identity_for",
    "kernel_api",
    "select_default_device",
]
