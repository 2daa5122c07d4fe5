# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Work-group tree reduction through local memory.
"""

from numba_reduce import kernel_api as kapi

from .reader import read_global_safe


def tree_reduce_kernel(
    nditem: kapi.NdItem, front, back, op, zero_elem, front_size, shared
):
    """Reduces one block of ``front`` into ``back[group_id]``.

    Every work-item loads one element into ``shared``, a local accessor with
    one slot per work-item. The active half of the work-group then combines
    pairs of slots ``stride`` apart, halving ``stride`` after a barrier until
    slot 0 holds the result. The work-group size must be a power of two.
    """
    tid = nditem.get_local_id(0)
    gid = nditem.get_global_id(0)
    gr = nditem.get_group()
    bid = gr.get_group_id(0)

    # Read input from front buffer to shared
    shared[tid] = read_global_safe(front, gid, front_size, zero_elem)
    kapi.group_barrier(gr)

    stride = nditem.get_local_range(0) // 2
    while stride != 0:
        if tid < stride:
            shared[tid] = op(shared[tid], shared[tid + stride])
        kapi.group_barrier(gr)
        stride //= 2

    if tid == 0:
        back[bid] = shared[0]
