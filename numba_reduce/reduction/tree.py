# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Reduction with the work-group tree reduction kernel.
"""

from numba_reduce import kernel_api as kapi
from numba_reduce.core.buffers import reduced_size
from numba_reduce.core.engine import ReductionEngine
from numba_reduce.core.exceptions import UnsupportedBlockSizeError
from numba_reduce.kernels import tree_reduce_kernel


class TreeReduction(ReductionEngine):
    """Reduces through local memory, synchronizing with work-group barriers
    only.

    Every pass reduces ``block_size`` elements into one. The kernel makes no
    assumption about lock-step execution of sub-groups, so it is the portable
    choice for devices without that guarantee. Block sizes must be powers of
    two.
    """

    strategy = "tree"

    def check_block_size(self, block_size):
        if block_size <= 0 or block_size & (block_size - 1):
            raise UnsupportedBlockSizeError(
                self.strategy, block_size, "it is not a power of two"
            )
        if block_size > self.device.max_work_group_size:
            raise UnsupportedBlockSizeError(
                self.strategy,
                block_size,
                "the device supports work-groups of up to "
                f"{self.device.max_work_group_size} work-items",
            )

    def factor(self, block_size):
        return block_size

    def launch(self, curr, block_size):
        groups = reduced_size(self.factor(block_size), curr)
        return self.queue.submit(
            tree_reduce_kernel,
            kapi.NdRange((groups * block_size,), (block_size,)),
            self.buffers.front,
            self.buffers.back,
            self.kernel_op,
            self.zero_elem,
            curr,
            kapi.LocalAccessor(block_size, self.dtype),
        )
