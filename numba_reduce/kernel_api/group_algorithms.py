# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Python functions that simulate SYCL's sub-group algorithms.
"""

from .index_space_ids import SubGroup


def shift_group_left(sub_group: SubGroup, value, delta=1):
    """Returns the ``value`` held by the work-item ``delta`` lanes after the
    caller within the same sub-group.

    The function is equivalent to ``sycl::shift_group_left`` (``__shfl_down``
    in HIP, ``__shfl_down_sync`` in CUDA). It exchanges private values from
    register to register: there is no local memory traffic and no barrier,
    the lock-step execution of a sub-group is the only synchronization. Every
    work-item of the sub-group must call the function with the same
    ``delta``. Work-items with no lane ``delta`` positions ahead receive their
    own ``value``.

    Args:
        sub_group (SubGroup): The sub-group of the calling work-item.
        value: The private value the caller contributes.
        delta (int) (optional): Distance in lanes of the work-item whose value
            is returned.
    Raises:
        TypeError: If ``sub_group`` is not a SubGroup.
    """
    if not isinstance(sub_group, SubGroup):
        raise TypeError("shift_group_left expects a SubGroup.")
    return sub_group._execution.shift_left(value, delta)
