# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""The module defines the custom error classes used in numba_reduce.
"""


class DeviceError(Exception):
    """Exception raised when an operation on the simulated device fails.

    A device error is fatal for the reduction that triggered it. The engine
    never retries the failed operation and never returns a partial result.
    Once a command submitted to a :class:`numba_reduce.core.queue.Queue` has
    failed, the queue stays in the error state and every later command
    reports the same error.

    Args:
        name (str): Name of the device operation that failed.
        status (DeviceStatus): Status code of the failure.
        description (str): Human-readable description of the failure.
    """

    def __init__(self, name, status, description) -> None:
        self.name = name
        self.status = status
        self.description = description
        self.message = f"{name}({description})"
        super().__init__(self.message)


class UnsupportedBlockSizeError(Exception):
    """Exception raised when a reduction is requested with a block size its
    strategy can not execute.

    Args:
        strategy (str): Name of the reduction strategy.
        block_size (int): The requested block (work-group) size.
        reason (str): What makes the block size unsupported.
    """

    def __init__(self, strategy, block_size, reason) -> None:
        self.block_size = block_size
        self.message = (
            f'Block size {block_size} is not supported by the "{strategy}" '
            f"reduction: {reason}."
        )
        super().__init__(self.message)


class UnsupportedSubGroupSizeError(Exception):
    """Exception raised when the device sub-group (warp) size is not one of
    the sizes the shuffle kernels are specialized for.

    Args:
        sub_group_size (int): Sub-group size reported by the device.
        supported (tuple): Sub-group sizes kernels are specialized for.
    """

    def __init__(self, sub_group_size, supported) -> None:
        self.sub_group_size = sub_group_size
        supported_sizes = ", ".join(str(s) for s in supported)
        self.message = (
            f"Device sub-group size {sub_group_size} is not supported. "
            f"Kernels are specialized only for sub-group sizes "
            f"{supported_sizes}."
        )
        super().__init__(self.message)


class InputSizeExceedsCapacityError(Exception):
    """Exception raised when a reduction is called with more elements than the
    engine's device buffers were sized for.

    Args:
        size (int): Number of elements in the input.
        capacity (int): Number of elements the engine can hold.
        buffer (str): The buffer that is too small.
    """

    def __init__(self, size, capacity, buffer="front") -> None:
        self.size = size
        self.capacity = capacity
        self.message = (
            f"The {buffer} buffer holds {capacity} elements, {size} elements "
            "are needed. Declare a larger input size (or a smaller block size) "
            "when constructing the engine."
        )
        super().__init__(self.message)


class ConcurrentReductionError(Exception):
    """Exception raised when a reduction engine is called while another call on
    the same instance is still running.

    The double buffer of an engine is swapped in place during a call, so each
    concurrent caller needs its own engine instance.
    """

    def __init__(self, engine_name) -> None:
        self.message = (
            f"{engine_name} is already running a reduction. Concurrent "
            "reductions need separate engine instances."
        )
        super().__init__(self.message)


class EngineReleasedError(Exception):
    """Exception raised when a reduction engine is used after its device
    buffers were released.
    """

    def __init__(self, engine_name) -> None:
        self.message = (
            f"{engine_name} has released its device buffers and can not run "
            "further reductions."
        )
        super().__init__(self.message)


class UnmatchedNumberOfRangeDimsError(Exception):
    """Exception raised when the global range and local range have different
    number of dimensions or rank.

    Args:
        kernel_name (str): The kernel function name.
        global_ndims (int): Rank of the global range.
        local_ndims (int): Rank of the local range.
    """

    def __init__(self, kernel_name, global_ndims, local_ndims) -> None:
        self.message = (
            f"Specified global_range for kernel {kernel_name} has "
            f"{global_ndims} dimensions, "
            f"while specified local_range with dimensions of {local_ndims} "
            "doesn't match with global_range."
        )
        super().__init__(self.message)


class UnsupportedWorkItemSizeError(Exception):
    """Exception raised when the number of work items requested for a
    specific dimension exceeds the number supported by the device.

    Args:
        kernel_name (str): The kernel function name.
        requested_work_items (int): Number of requested work items.
        supported_work_items (int): Supported number of work items.
    """

    def __init__(
        self, kernel_name, dim, requested_work_items, supported_work_items
    ) -> None:
        self.message = (
            f"Attempting to launch kernel {kernel_name} with "
            f"{requested_work_items} work items in dimension {dim} is not "
            f"supported. The device supports only {supported_work_items} "
            f"work items for dimension {dim}."
        )
        super().__init__(self.message)


class UnsupportedGroupWorkItemSizeError(Exception):
    """Exception raised when the value in a specific dimension of a global
    range is not evenly divisible by the value in the corresponding dimension
    in a local range.

    Args:
        kernel_name (str): The kernel function name.
        dim (int): Dimension where the mismatch was identified.
        work_groups (int): Number of requested work groups.
        work_items (int): Number of requested work items in the errant
        dimension of the local range.
    """

    def __init__(self, kernel_name, dim, work_groups, work_items) -> None:
        self.message = (
            f"Attempting to launch kernel {kernel_name} with "
            f"{work_groups} global work groups and {work_items} local work "
            f"items in dimension {dim} is not supported. The global work "
            "groups must be evenly divisible by the local work items."
        )
        super().__init__(self.message)
