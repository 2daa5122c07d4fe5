# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Paired-load reduction finished with sub-group shuffles.

Compared with :func:`numba_reduce.kernels.tree_reduce_kernel`, every
work-item starts from two input elements, so a work-group consumes twice its
size per pass. Partial results are combined by shuffling private values
inside a sub-group, and local memory is only used to pass one value per
sub-group to the next stage. That needs far fewer barriers but relies on the
lock-step execution of sub-groups, so the kernel can only run on devices with
that guarantee.
"""

from functools import lru_cache

from numba_reduce import kernel_api as kapi
from numba_reduce.core.dispatch import static_for

from .reader import read_global_safe


def warp_schedule(block_size, sub_group_size):
    """Number of sub-groups holding a partial result at every stage.

    A stage reduces each active sub-group to one value, so the next stage
    has ``ceil(active / sub_group_size)`` active sub-groups. The schedule
    ends with the stage that has a single active sub-group.
    """
    return tuple(
        static_for(
            block_size // sub_group_size,
            lambda active: active != 0,
            lambda active: (
                -(-active // sub_group_size) if active != 1 else 0
            ),
        )
    )


@lru_cache(maxsize=None)
def make_shuffle_kernel(block_size, sub_group_size):
    """Builds the shuffle reduction kernel for one block and sub-group size.

    Both sizes are constants of the returned kernel; it must be launched with
    work-groups of exactly ``block_size`` work-items on a device whose
    sub-groups have ``sub_group_size`` work-items. Specializations are built
    once per process.

    Kernel arguments: ``front, back, op, zero_elem, front_size, shared``
    where ``shared`` is a local accessor with one slot per sub-group.
    """
    if block_size % sub_group_size != 0:
        raise ValueError(
            f"Block size {block_size} is not a multiple of the sub-group "
            f"size {sub_group_size}."
        )
    warp_count = block_size // sub_group_size
    schedule = warp_schedule(block_size, sub_group_size)
    deltas = tuple(
        static_for(
            sub_group_size // 2,
            lambda delta: delta != 0,
            lambda delta: delta // 2,
        )
    )

    def shuffle_reduce_kernel(
        nditem: kapi.NdItem, front, back, op, zero_elem, front_size, shared
    ):
        tid = nditem.get_local_id(0)
        gr = nditem.get_group()
        bid = gr.get_group_id(0)
        sg = nditem.get_sub_group()
        gid = bid * (block_size * 2) + tid
        wid = tid // sub_group_size
        lid = tid % sub_group_size

        # Read input from front buffer to private
        res = op(
            read_global_safe(front, gid, front_size, zero_elem),
            read_global_safe(front, gid + block_size, front_size, zero_elem),
        )

        for active_warps in schedule:
            if wid < active_warps:
                for delta in deltas:
                    res = op(res, kapi.shift_group_left(sg, res, delta))

                if lid == 0:
                    shared[wid] = res
            kapi.group_barrier(gr)

            # Only the first active_warps slots were written in this stage
            res = shared[tid] if tid < active_warps else zero_elem

        if tid == 0:
            back[bid] = res

    shuffle_reduce_kernel.__name__ = (
        f"shuffle_reduce_kernel_{block_size}_{sub_group_size}"
    )
    shuffle_reduce_kernel.__qualname__ = shuffle_reduce_kernel.__name__
    shuffle_reduce_kernel.warp_count = warp_count
    return shuffle_reduce_kernel
