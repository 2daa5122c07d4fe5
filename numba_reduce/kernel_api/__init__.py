# SPDX-FileCopyrightText: 2023 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""
The kernel_api module provides a set of Python classes and functions that are
analogous to the C++ SYCL API. Kernels written with it are executed by the
device simulator, which runs the work-items of a work-group cooperatively so
that barriers and sub-group shuffles behave as they do on an accelerator.
"""

from .barrier import group_barrier
from .group_algorithms import shift_group_left
from .index_space_ids import Group, Item, NdItem, SubGroup
from .launcher import call_kernel
from .local_accessor import LocalAccessor
from .memory_enums import MemoryScope
from .ranges import NdRange, Range

__all__ = [
    "call_kernel",
    "group_barrier",
    "shift_group_left",
    "Group",
    "Item",
    "LocalAccessor",
    "MemoryScope",
    "NdItem",
    "NdRange",
    "Range",
    "SubGroup",
]
