# SPDX-FileCopyrightText: 2023 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Defines types to define the range of execution of a kernel. The types are
designed along the lines of classes defined in the SYCL 2020 spec section 4.9.
"""

from collections.abc import Iterable

from numba_reduce.core.exceptions import (
    UnmatchedNumberOfRangeDimsError,
    UnsupportedGroupWorkItemSizeError,
)


class Range(tuple):
    """Analogue to the :sycl_range:`sycl::range <>` class.

    The range is an abstraction that describes the number of elements
    in each dimension of buffers and index spaces. It can contain
    1, 2, or 3 numbers, depending on the dimensionality of the
    object it describes.
    """

    def __new__(cls, dim0, dim1=None, dim2=None):
        """Constructs a 1, 2, or 3 dimensional range.

        Args:
            dim0 (int): The range of the first dimension.
            dim1 (int, optional): The range of second dimension.
                                    Defaults to None.
            dim2 (int, optional): The range of the third dimension.
                                    Defaults to None.

        Raises:
            TypeError: If any of the dimensions is not an int.
        """
        _values = []
        for name, dim in (("dim0", dim0), ("dim1", dim1), ("dim2", dim2)):
            if dim is None:
                break
            if not isinstance(dim, int) or isinstance(dim, bool):
                raise TypeError(f"{name} of a Range must be an int.")
            _values.append(dim)
        return super(Range, cls).__new__(cls, tuple(_values))

    def get(self, index):
        """Returns the range of a single dimension.

        Args:
            index (int): The index of the dimension, i.e. [0,2]

        Returns:
            int: The range of the dimension indexed by `index`.
        """
        return self[index]

    def size(self):
        """Returns the size of a range, i.e. the product of the range of the
        individual dimensions.

        Returns:
            int: The size of a range.
        """
        n = 1
        for dim in self:
            n *= dim
        return n

    @property
    def ndim(self) -> int:
        """Returns the rank of a Range object.

        Returns:
            int: Number of dimensions in the Range object
        """
        return len(self)


class NdRange:
    """Analogue to the :sycl_ndrange:`sycl::nd_range <>` class.

    The NdRange defines the index space for a work group as well as
    the global index space. The global_range contains the global index space
    and the local_range contains the index space of a work group.
    """

    def __init__(self, global_size, local_size):
        """Constructor for NdRange class.

        Args:
            global_size (Range or tuple of int's): The values for
                the global_range.
            local_size (Range or tuple of int's): The values for
                the local_range.

        Raises:
            TypeError: If a size is neither a Range nor an iterable of ints.
            UnmatchedNumberOfRangeDimsError: If the two ranges have different
                ranks.
            UnsupportedGroupWorkItemSizeError: If the global range is not
                evenly divisible by the local range.
        """
        self._global_range = self._as_range(global_size, "global_size")
        self._local_range = self._as_range(local_size, "local_size")

        if len(self._local_range) != len(self._global_range):
            raise UnmatchedNumberOfRangeDimsError(
                kernel_name="",
                global_ndims=len(self._global_range),
                local_ndims=len(self._local_range),
            )

        for i, (gr, lr) in enumerate(
            zip(self._global_range, self._local_range)
        ):
            if lr <= 0 or gr % lr != 0:
                raise UnsupportedGroupWorkItemSizeError(
                    kernel_name="",
                    dim=i,
                    work_groups=gr,
                    work_items=lr,
                )

    @staticmethod
    def _as_range(size, argname):
        if isinstance(size, Range):
            return size
        if isinstance(size, Iterable):
            return Range(*size)
        raise TypeError(
            f"Unknown argument type for NdRange {argname}, "
            + "must be of either type Range or Iterable of int's."
        )

    @property
    def global_range(self):
        """Accessor for global_range.

        Returns:
            Range: The `global_range` `Range` object.
        """
        return self._global_range

    @property
    def local_range(self):
        """Accessor for local_range.

        Returns:
            Range: The `local_range` `Range` object.
        """
        return self._local_range

    @property
    def group_range(self):
        """Number of work-groups in every dimension.

        Returns:
            Range: A `Range` object with the number of work-groups.
        """
        return Range(
            *(gr // lr for gr, lr in zip(self._global_range, self._local_range))
        )

    def __str__(self):
        return "(" + str(self._global_range) + ", " + str(self._local_range) + ")"

    def __repr__(self):
        return self.__str__()

    def __eq__(self, other):
        if isinstance(other, NdRange):
            return (
                self.global_range == other.global_range
                and self.local_range == other.local_range
            )

        return False
