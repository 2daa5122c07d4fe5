# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Reduction kernels written with :mod:`numba_reduce.kernel_api`."""

from .reader import read_global_safe
from .shuffle import make_shuffle_kernel, warp_schedule
from .tree import tree_reduce_kernel

__all__ = [
    "make_shuffle_kernel",
    "read_global_safe",
    "tree_reduce_kernel",
    "warp_schedule",
]
