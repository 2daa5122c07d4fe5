# SPDX-FileCopyrightText: 2023 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Implements a Python analogue to SYCL's local_accessor class. A
LocalAccessor is passed to a kernel as an argument and stands for the
work-group local (shared) memory every work-group of the launch receives.
"""
import numpy

_SUPPORTED_DTYPES = [
    numpy.float32,
    numpy.float64,
    numpy.int32,
    numpy.int64,
    numpy.int16,
    numpy.int8,
    numpy.uint32,
    numpy.uint64,
    numpy.uint16,
    numpy.uint8,
]


def is_supported_dtype(dtype):
    """Checks if local memory of the given dtype can be allocated."""
    try:
        return numpy.dtype(dtype) in _SUPPORTED_DTYPES
    except TypeError:
        return False


class LocalAccessor:
    """Analogue to the :sycl_local_accessor:`sycl::local_accessor <>` class.

    The class acts as a proxy to allocating device local memory and
    accessing that memory from within a kernel function. Every work-group
    gets its own, uninitialized, allocation of the given shape.
    """

    def _verify_positive_integral_list(self, ls):
        """Checks if all members of a list are positive integers."""

        ret = False
        try:
            ret = all(int(val) > 0 for val in ls)
        except (TypeError, ValueError):
            pass

        return ret

    def __init__(self, shape, dtype) -> None:
        """Creates a new LocalAccessor instance of the given shape and dtype."""

        if isinstance(shape, (list, tuple)):
            self._shape = tuple(shape)
        elif callable(getattr(shape, "tolist", None)):
            tolist = shape.tolist()
            self._shape = (
                tuple(tolist) if isinstance(tolist, list) else (tolist,)
            )
        else:
            self._shape = (shape,)

        # Make sure shape is made up a supported types
        if not self._verify_positive_integral_list(self._shape):
            raise TypeError(
                "Argument shape must a positive integer, "
                "or a list/tuple of such integers."
            )

        # Make sure shape has a rank between (1..3)
        if len(self._shape) < 1 or len(self._shape) > 3:
            raise TypeError("LocalAccessor can only have up to 3 dimensions.")

        if not is_supported_dtype(dtype):
            raise TypeError(
                f"Argument dtype {dtype} is not supported. numpy.float32, "
                "numpy.float64, numpy.[u]int8, numpy.[u]int16, numpy.[u]int32, "
                "numpy.[u]int64 are the currently supported dtypes."
            )
        self._dtype = numpy.dtype(dtype)

    @property
    def shape(self):
        return self._shape

    @property
    def dtype(self):
        return self._dtype

    def __getitem__(self, idx_obj):
        raise NotImplementedError(
            "The data of a LocalAccessor object can only be accessed "
            "inside a kernel."
        )

    def __setitem__(self, idx_obj, val):
        raise NotImplementedError(
            "The data of a LocalAccessor object can only be accessed "
            "inside a kernel."
        )


class _LocalAccessorMock:
    """Stands for a LocalAccessor inside an executing work-group.

    A LocalAccessor has no data container of its own so that local memory is
    not accessible outside a kernel. The launcher replaces every LocalAccessor
    kernel argument with a _LocalAccessorMock backed by a fresh numpy ndarray
    for every work-group.
    """

    __slots__ = ("_data",)

    def __init__(self, local_accessor: LocalAccessor):
        self._data = numpy.empty(
            local_accessor._shape, dtype=local_accessor._dtype
        )

    def __getitem__(self, idx_obj):
        return self._data[idx_obj]

    def __setitem__(self, idx_obj, val):
        self._data[idx_obj] = val

    def __len__(self):
        return len(self._data)
