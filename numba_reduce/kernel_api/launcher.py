# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Implementation of the simulated kernel launcher.
"""

from functools import partial
from inspect import signature
from itertools import product

from numba_reduce.core import config

from .index_space_ids import Group, Item, NdItem
from .local_accessor import LocalAccessor, _LocalAccessorMock
from .ranges import NdRange
from .work_group import WorkGroupExecution


def _check_kernel_arity(kernel_fn, kernel_args):
    try:
        nparams = len(signature(kernel_fn).parameters)
    except (TypeError, ValueError):
        return
    if nparams - len(kernel_args) != 1:
        raise ValueError(
            "Required number of kernel function arguments do not "
            "match provided number of kernel args"
        )


def _ndrange_kernel_launcher(kernel_fn, index_range, kernel_args, sub_group_size):
    """Executes a kernel function over an NdRange.

    Work-groups are executed one after another. Inside a work-group every
    work-item runs as a cooperatively scheduled task, see
    :class:`numba_reduce.kernel_api.work_group.WorkGroupExecution`.

    Args:
        kernel_fn : A callable function object
        index_range (NdRange): An instance of a NdRange object
        kernel_args (list): The arguments passed after the NdItem.
        sub_group_size (int): Number of work-items per sub-group.
    """
    global_range = index_range.global_range
    local_range = index_range.local_range
    group_range = index_range.group_range
    local_index_tuples = list(product(*(range(lr) for lr in local_range)))
    group_size = len(local_index_tuples)

    for gidx in product(*(range(gr) for gr in group_range)):
        execution = WorkGroupExecution(group_size, sub_group_size)
        group = Group(global_range, local_range, group_range, gidx, execution)

        # Local memory is private to a work-group
        group_args = [
            _LocalAccessorMock(karg) if isinstance(karg, LocalAccessor) else karg
            for karg in kernel_args
        ]

        work_items = []
        for lidx in local_index_tuples:
            global_id = tuple(
                g * lr + li for g, lr, li in zip(gidx, local_range, lidx)
            )
            nditem = NdItem(
                global_item=Item(extent=global_range, index=global_id),
                local_item=Item(extent=local_range, index=lidx),
                group=group,
            )
            work_items.append(partial(kernel_fn, nditem, *group_args))

        execution.run(work_items)


def call_kernel(kernel_fn, index_range, *kernel_args, sub_group_size=None):
    """Launches a kernel function over an NdRange on the device simulator.

    The call returns once every work-group finished executing. To submit a
    kernel asynchronously to a device, use
    :meth:`numba_reduce.core.queue.Queue.submit`.

    Args:
        kernel_fn : A callable function object written using
            :py:mod:`numba_reduce.kernel_api`. Its first parameter receives
            the :class:`NdItem` of the executing work-item.
        index_range (NdRange): The nd-range to launch the kernel over.
        kernel_args (List): The expanded list of actual arguments with which to
            launch the kernel execution.
        sub_group_size (int) (optional): Number of work-items per sub-group.
            Defaults to ``config.SUB_GROUP_SIZE``.

    Raises:
        ValueError: If the first positional argument is not callable.
        ValueError: If the second positional argument is not an NdRange.
        ValueError: If the number of kernel arguments does not match the
            kernel function.
    """
    if not callable(kernel_fn):
        raise ValueError(
            "Expected the first positional argument to be a function object"
        )
    if not isinstance(index_range, NdRange):
        raise ValueError(
            "Expected second positional argument to be an NdRange object"
        )
    _check_kernel_arity(kernel_fn, kernel_args)

    if sub_group_size is None:
        sub_group_size = config.SUB_GROUP_SIZE

    _ndrange_kernel_launcher(kernel_fn, index_range, kernel_args, sub_group_size)
