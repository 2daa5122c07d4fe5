# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Reduction with the paired-load, sub-group shuffle kernel.
"""

from numba_reduce import kernel_api as kapi
from numba_reduce.core.buffers import reduced_size
from numba_reduce.core.dispatch import KernelTable
from numba_reduce.core.engine import ReductionEngine
from numba_reduce.core.exceptions import (
    UnsupportedBlockSizeError,
    UnsupportedSubGroupSizeError,
)
from numba_reduce.kernels import make_shuffle_kernel

#: Block sizes shuffle kernels are specialized for.
BLOCK_SIZE_CANDIDATES = (32, 64, 128, 256, 512, 1024, 2048)

#: Sub-group sizes shuffle kernels are specialized for.
SUB_GROUP_SIZE_CANDIDATES = (32, 64)


def _make_kernel(block_size, sub_group_size):
    if block_size < sub_group_size:
        return None
    return make_shuffle_kernel(block_size, sub_group_size)


class ShuffleReduction(ReductionEngine):
    """Reduces two elements per work-item and combines partial results with
    sub-group shuffles.

    Every pass reduces ``2 * block_size`` elements into one. The kernel relies
    on the work-items of a sub-group executing in lock-step, see
    :mod:`numba_reduce.kernels.shuffle`. Kernels are specialized for every
    pair of :data:`BLOCK_SIZE_CANDIDATES` and
    :data:`SUB_GROUP_SIZE_CANDIDATES` when the engine is built.
    """

    strategy = "shuffle"

    def __init__(self, *args, **kwargs):
        self.kernels = KernelTable(
            _make_kernel, BLOCK_SIZE_CANDIDATES, SUB_GROUP_SIZE_CANDIDATES
        )
        super().__init__(*args, **kwargs)

    def _check_device(self):
        if self.device.sub_group_size not in SUB_GROUP_SIZE_CANDIDATES:
            raise UnsupportedSubGroupSizeError(
                self.device.sub_group_size, SUB_GROUP_SIZE_CANDIDATES
            )

    def check_block_size(self, block_size):
        if block_size not in BLOCK_SIZE_CANDIDATES:
            raise UnsupportedBlockSizeError(
                self.strategy,
                block_size,
                "kernels are specialized only for block sizes "
                + ", ".join(str(b) for b in BLOCK_SIZE_CANDIDATES),
            )
        if block_size < self.device.sub_group_size:
            raise UnsupportedBlockSizeError(
                self.strategy,
                block_size,
                "it is smaller than the device sub-group size "
                f"{self.device.sub_group_size}",
            )
        if block_size > self.device.max_work_group_size:
            raise UnsupportedBlockSizeError(
                self.strategy,
                block_size,
                "the device supports work-groups of up to "
                f"{self.device.max_work_group_size} work-items",
            )

    def factor(self, block_size):
        return 2 * block_size

    def launch(self, curr, block_size):
        def submit(kernel, block, sub_group):
            groups = reduced_size(self.factor(block), curr)
            return self.queue.submit(
                kernel,
                kapi.NdRange((groups * block,), (block,)),
                self.buffers.front,
                self.buffers.back,
                self.kernel_op,
                self.zero_elem,
                curr,
                kapi.LocalAccessor(kernel.warp_count, self.dtype),
            )

        return self.kernels.dispatch(
            block_size, self.device.sub_group_size, submit
        )
