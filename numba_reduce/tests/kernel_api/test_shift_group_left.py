# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import numpy
import pytest

from numba_reduce import kernel_api as kapi
from numba_reduce.core.device import Device
from numba_reduce.core.queue import Queue


def _shift_kernel(nditem: kapi.NdItem, out, delta):
    gid = nditem.get_global_id(0)
    sg = nditem.get_sub_group()
    out[gid] = kapi.shift_group_left(sg, gid * 10, delta)


def _expected_shift(global_size, local_size, sub_group_size, delta):
    expected = numpy.empty(global_size, dtype=numpy.int64)
    for gid in range(global_size):
        lid = gid % local_size
        base = lid - lid % sub_group_size
        count = min(sub_group_size, local_size - base)
        lane = lid - base
        src = gid + delta if lane + delta < count else gid
        expected[gid] = src * 10
    return expected


@pytest.mark.parametrize("delta", [0, 1, 3, 7, 8])
def test_shift_group_left(delta):
    out = numpy.empty(32, dtype=numpy.int64)

    kapi.call_kernel(
        _shift_kernel, kapi.NdRange((32,), (16,)), out, delta, sub_group_size=8
    )

    assert numpy.array_equal(out, _expected_shift(32, 16, 8, delta))


def test_shift_group_left_partial_sub_group():
    # Work-groups of 20 work-items form sub-groups of 8, 8 and 4
    out = numpy.empty(40, dtype=numpy.int64)

    kapi.call_kernel(
        _shift_kernel, kapi.NdRange((40,), (20,)), out, 2, sub_group_size=8
    )

    assert numpy.array_equal(out, _expected_shift(40, 20, 8, 2))


def test_shift_group_left_tree():
    """Halving shuffles leave the sum of each sub-group in lane 0."""

    def kernel(nditem: kapi.NdItem, a, out):
        gid = nditem.get_global_id(0)
        sg = nditem.get_sub_group()
        res = a[gid]
        delta = sg.get_max_local_range() // 2
        while delta != 0:
            res += kapi.shift_group_left(sg, res, delta)
            delta //= 2
        if sg.get_local_id() == 0:
            out[gid // sg.get_max_local_range()] = res

    a = numpy.arange(128, dtype=numpy.int64)
    out = numpy.zeros(4, dtype=numpy.int64)
    kapi.call_kernel(
        kernel, kapi.NdRange((128,), (64,)), a, out, sub_group_size=32
    )

    assert numpy.array_equal(out, a.reshape(4, 32).sum(axis=1))


def test_sub_group_ids():
    def kernel(nditem: kapi.NdItem, out):
        gid = nditem.get_global_id(0)
        sg = nditem.get_sub_group()
        out[gid] = (
            sg.get_group_id(),
            sg.get_group_range(),
            sg.get_local_id(),
            sg.get_local_range(),
            sg.get_max_local_range(),
        )

    out = numpy.empty((20, 5), dtype=numpy.int64)
    kapi.call_kernel(kernel, kapi.NdRange((20,), (20,)), out, sub_group_size=8)

    assert out[0].tolist() == [0, 3, 0, 8, 8]
    assert out[9].tolist() == [1, 3, 1, 8, 8]
    assert out[19].tolist() == [2, 3, 3, 4, 8]


def test_shift_group_left_requires_sub_group():
    with pytest.raises(TypeError):
        kapi.shift_group_left(None, 1)


@pytest.mark.parametrize("local_size", [256, 1024, 2048])
@pytest.mark.parametrize("sub_group_size", [32, 64])
def test_shift_group_left_large_work_group(local_size, sub_group_size):
    out = numpy.empty(local_size, dtype=numpy.int64)

    kapi.call_kernel(
        _shift_kernel,
        kapi.NdRange((local_size,), (local_size,)),
        out,
        5,
        sub_group_size=sub_group_size,
    )

    assert numpy.array_equal(
        out, _expected_shift(local_size, local_size, sub_group_size, 5)
    )


@pytest.mark.parametrize("local_size", [256, 1024, 2048])
def test_shuffles_and_barrier_large_work_group(local_size):
    """Sub-group sums through shuffles, then the work-group sum through local
    memory, on a device that accepts work-groups of 2048 work-items.
    """

    def kernel(nditem: kapi.NdItem, a, out, slm):
        lid = nditem.get_local_id(0)
        gr = nditem.get_group()
        sg = nditem.get_sub_group()
        res = a[nditem.get_global_id(0)]
        delta = sg.get_max_local_range() // 2
        while delta != 0:
            res += kapi.shift_group_left(sg, res, delta)
            delta //= 2
        if sg.get_local_id() == 0:
            slm[sg.get_group_id()] = res
        kapi.group_barrier(gr)
        if lid == 0:
            total = 0
            for i in range(sg.get_group_range()):
                total += slm[i]
            out[gr.get_group_id(0)] = total

    a = numpy.arange(2 * local_size, dtype=numpy.int64)
    out = numpy.zeros(2, dtype=numpy.int64)
    with Queue(Device(sub_group_size=32, max_work_group_size=2048)) as q:
        q.submit(
            kernel,
            kapi.NdRange((2 * local_size,), (local_size,)),
            a,
            out,
            kapi.LocalAccessor(local_size // 32, numpy.int64),
        ).wait()

    assert numpy.array_equal(out, a.reshape(2, local_size).sum(axis=1))
