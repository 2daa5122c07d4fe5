# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import numpy
import pytest

from numba_reduce import kernel_api as kapi


def _vecadd(nditem: kapi.NdItem, a, b, c):
    idx = nditem.get_global_id(0)
    c[idx] = a[idx] + b[idx]


def test_ndrange_kernel_call1D():
    a = numpy.ones(128)
    b = numpy.ones(128)
    c = numpy.empty(128)

    kapi.call_kernel(_vecadd, kapi.NdRange((128,), (32,)), a, b, c)

    assert numpy.allclose(c, a + b)


def test_ndrange_kernel_call2D():
    def kernel(nditem: kapi.NdItem, out):
        i = nditem.get_global_id(0)
        j = nditem.get_global_id(1)
        out[i, j] = nditem.get_global_linear_id()

    out = numpy.empty((4, 6), dtype=numpy.int64)
    kapi.call_kernel(kernel, kapi.NdRange((4, 6), (2, 3)), out)

    assert numpy.array_equal(out.ravel(), numpy.arange(24))


def test_index_space_ids():
    group_ids = numpy.empty(64, dtype=numpy.int64)
    local_ids = numpy.empty(64, dtype=numpy.int64)
    ranges = numpy.empty(64, dtype=numpy.int64)

    def kernel(nditem: kapi.NdItem, group_ids, local_ids, ranges):
        gid = nditem.get_global_id(0)
        group = nditem.get_group()
        group_ids[gid] = group.get_group_linear_id()
        local_ids[gid] = nditem.get_local_linear_id()
        ranges[gid] = group.get_group_range(0) * 1000 + group.get_local_range(0)

    kapi.call_kernel(
        kernel, kapi.NdRange((64,), (16,)), group_ids, local_ids, ranges
    )

    assert numpy.array_equal(group_ids, numpy.arange(64) // 16)
    assert numpy.array_equal(local_ids, numpy.arange(64) % 16)
    assert numpy.all(ranges == 4016)


def test_call_kernel_requires_ndrange():
    a = numpy.ones(8)
    with pytest.raises(ValueError):
        kapi.call_kernel(_vecadd, kapi.Range(8), a, a, a)


def test_call_kernel_requires_callable():
    with pytest.raises(ValueError):
        kapi.call_kernel(None, kapi.NdRange((8,), (8,)))


def test_call_kernel_argument_count_mismatch():
    a = numpy.ones(8)
    with pytest.raises(ValueError):
        kapi.call_kernel(_vecadd, kapi.NdRange((8,), (8,)), a, a)


def test_kernel_exception_propagates():
    def kernel(nditem: kapi.NdItem, a):
        if nditem.get_global_id(0) == 5:
            raise ZeroDivisionError("work-item 5")
        kapi.group_barrier(nditem.get_group())

    with pytest.raises(ZeroDivisionError):
        kapi.call_kernel(kernel, kapi.NdRange((8,), (8,)), numpy.ones(8))
