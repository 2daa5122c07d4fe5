# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Implements Python classes representing ``sycl::item``, ``sycl::nd_item``,
``sycl::group`` and ``sycl::sub_group`` for kernel functions executed by the
device simulator.
"""

from .ranges import Range


class Group:
    # pylint: disable=line-too-long
    """Analogue to the :sycl_group:`sycl::group <>` class.

    Represents a particular work-group within a parallel execution and
    provides API to extract various properties of the work-group. An instance
    of the class is not user-constructible. Users should use
    :func:`numba_reduce.kernel_api.NdItem.get_group` to access the Group to
    which a work-item belongs.
    """

    def __init__(
        self,
        global_range: Range,
        local_range: Range,
        group_range: Range,
        index: tuple,
        execution=None,
    ):
        self._global_range = global_range
        self._local_range = local_range
        self._group_range = group_range
        self._index = index
        self._execution = execution

    def get_group_id(self, dim):
        """Returns a specific coordinate of the multi-dimensional index of a group.

        Args:
            dim (int): An integral value between (0..2) for which the group
                index is returned.
        Returns:
            int: The coordinate for the ``dim`` dimension for the group's
            multi-dimensional index within an nd-range.
        Raises:
            ValueError: If the ``dim`` argument is not in the (0..2) interval.
        """
        if dim > len(self._index) - 1:
            raise ValueError(
                "Dimension value is out of bounds for the group index"
            )
        return self._index[dim]

    def get_group_linear_id(self):
        """Returns a linearized version of the work-group index.

        Returns:
            int: The linearized index for the group's position within an
            nd-range.
        """
        linear_id = 0
        for dim in range(self.dimensions):
            linear_id = linear_id * self._group_range[dim] + self._index[dim]
        return linear_id

    def get_group_range(self, dim):
        """Returns the extent of the range of groups in an nd-range for given dimension."""
        return self._group_range[dim]

    def get_local_range(self, dim):
        """Returns the extent of the range of work-items in a work-group for given dimension."""
        return self._local_range[dim]

    def get_local_linear_range(self):
        """Return the total number of work-items in the work-group."""
        return self._local_range.size()

    @property
    def dimensions(self) -> int:
        """Returns the dimensionality of the range to which the work-group belongs.

        Returns:
            int: Number of dimensions in the Group object
        """
        return self._global_range.ndim


class SubGroup:
    """Analogue to the :sycl_sub_group:`sycl::sub_group <>` class.

    A sub-group is a set of consecutive work-items of a work-group that the
    device executes in lock-step, a warp in CUDA/HIP terms. Work-items of a
    sub-group exchange private values with
    :func:`numba_reduce.kernel_api.shift_group_left` without synchronizing
    the rest of the work-group.
    """

    def __init__(self, group: Group, local_linear_id: int):
        execution = group._execution
        base, count = execution.sub_group_bounds(local_linear_id)
        self._execution = execution
        self._local_id = local_linear_id - base
        self._local_range = count
        self._group_id = local_linear_id // execution.sub_group_size
        self._group_range = -(-execution.size // execution.sub_group_size)
        self._max_local_range = execution.sub_group_size

    def get_local_id(self):
        """Returns the lane of the work-item within its sub-group."""
        return self._local_id

    def get_local_range(self):
        """Returns the number of work-items in the sub-group."""
        return self._local_range

    def get_max_local_range(self):
        """Returns the sub-group size of the device."""
        return self._max_local_range

    def get_group_id(self):
        """Returns the index of the sub-group within its work-group."""
        return self._group_id

    def get_group_range(self):
        """Returns the number of sub-groups in the work-group."""
        return self._group_range


class Item:
    """Analogue to the :sycl_item:`sycl::item <>` class.

    Identifies a work-item by its index within an extent.
    """

    def __init__(self, extent: Range, index):
        self._extent = extent
        self._index = index

    def get_linear_id(self):
        """Returns the linear id associated with this item for all dimensions.

        Returns:
            int: The linear id of the work item in the range.
        """
        linear_id = 0
        for dim in range(self.dimensions):
            linear_id = linear_id * self._extent[dim] + self._index[dim]
        return linear_id

    def get_id(self, idx):
        """Get the id for a specific dimension.

        Returns:
            int: The id
        """
        return self._index[idx]

    def get_range(self, idx):
        """Get the range size for a specific dimension.

        Returns:
            int: The size
        """
        return self._extent[idx]

    @property
    def dimensions(self) -> int:
        """Returns the number of dimensions of a Item object.

        Returns:
            int: Number of dimensions in the Item object
        """
        return self._extent.ndim


class NdItem:
    """Analogue to the :sycl_nditem:`sycl::nd_item <>` class.

    Identifies an instance of the function object executing at each point in an
    :class:`.NdRange`.
    """

    def __init__(self, global_item: Item, local_item: Item, group: Group):
        self._global_item = global_item
        self._local_item = local_item
        self._group = group
        self._sub_group = None

    def get_global_id(self, idx):
        """Get the global id for a specific dimension."""
        return self._global_item.get_id(idx)

    def get_global_linear_id(self):
        """Get the linearized global id for the item for all dimensions."""
        return self._global_item.get_linear_id()

    def get_local_id(self, idx):
        """Get the local id for a specific dimension."""
        return self._local_item.get_id(idx)

    def get_local_linear_id(self):
        """Get the local linear id associated with this item for all
        dimensions.
        """
        return self._local_item.get_linear_id()

    def get_global_range(self, idx):
        """Get the global range size for a specific dimension."""
        return self._global_item.get_range(idx)

    def get_local_range(self, idx):
        """Get the local range size for a specific dimension."""
        return self._local_item.get_range(idx)

    def get_group(self):
        """Returns the work-group the item belongs to.

        Returns:
            Group: A group object."""
        return self._group

    def get_sub_group(self):
        """Returns the sub-group the item belongs to.

        Returns:
            SubGroup: A sub-group object."""
        if self._sub_group is None:
            self._sub_group = SubGroup(
                self._group, self._local_item.get_linear_id()
            )
        return self._sub_group

    @property
    def dimensions(self) -> int:
        """Returns the rank of a NdItem object."""
        return self._global_item.dimensions
