# SPDX-FileCopyrightText: 2023 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Python function that simulates SYCL's group_barrier function.
"""

from .index_space_ids import Group
from .memory_enums import MemoryScope


def group_barrier(
    group: Group, fence_scope: MemoryScope = MemoryScope.WORK_GROUP
):
    """Performs a barrier operation across all work-items in a work-group.

    The function is equivalent to the ``sycl::group_barrier`` function. It
    synchronizes work within a group of work-items. All the work-items
    of the group must execute the barrier call before any work-item
    continues execution beyond the barrier. Local memory writes issued before
    the barrier are visible to every work-item of the group after it.

    Args:
        group (Group): Indicates the work-group inside which the barrier is to
            be executed.
        fence_scope (MemoryScope) (optional): scope of any memory
            consistency operations that are performed by the barrier. The
            simulator executes work-items sequentially, so every scope
            behaves as ``MemoryScope.WORK_GROUP``.
    Raises:
        TypeError: If ``group`` is not a work-group of an executing kernel.
        TypeError: If ``fence_scope`` is not a MemoryScope.
    """
    if not isinstance(group, Group) or group._execution is None:
        raise TypeError(
            "group_barrier expects the Group of an executing work-item."
        )
    if not isinstance(fence_scope, MemoryScope):
        raise TypeError("fence_scope must be a MemoryScope.")
    group._execution.barrier()
