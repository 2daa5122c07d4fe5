# SPDX-FileCopyrightText: 2023 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import numpy
import pytest

from numba_reduce import kernel_api as kapi
from numba_reduce.core.device import Device
from numba_reduce.core.queue import Queue
from numba_reduce.kernel_api.work_group import WorkItemDivergenceError


def _reverse_kernel(nditem: kapi.NdItem, a, b, slm):
    gid = nditem.get_global_id(0)
    lid = nditem.get_local_id(0)
    size = nditem.get_local_range(0)

    slm[lid] = a[gid]
    kapi.group_barrier(nditem.get_group())
    b[gid] = slm[size - 1 - lid]


def test_group_barrier():
    a = numpy.arange(64, dtype=numpy.int64)
    b = numpy.empty_like(a)
    slm = kapi.LocalAccessor(16, a.dtype)

    kapi.call_kernel(_reverse_kernel, kapi.NdRange((64,), (16,)), a, b, slm)

    expected = a.reshape(4, 16)[:, ::-1].ravel()
    assert numpy.array_equal(b, expected)


def test_group_barrier_repeated():
    """Every work-item sees the writes of all work-items of the previous
    phase, phase after phase.
    """

    def kernel(nditem: kapi.NdItem, out, slm):
        lid = nditem.get_local_id(0)
        gr = nditem.get_group()
        size = gr.get_local_linear_range()

        slm[lid] = lid
        kapi.group_barrier(gr, kapi.MemoryScope.WORK_GROUP)
        total = 0
        for phase in range(3):
            total += slm[(lid + 1) % size]
            kapi.group_barrier(gr)
            slm[lid] = slm[lid] + 1
            kapi.group_barrier(gr)
        out[nditem.get_global_id(0)] = total

    out = numpy.empty(8, dtype=numpy.int64)
    slm = kapi.LocalAccessor(8, numpy.int64)
    kapi.call_kernel(kernel, kapi.NdRange((8,), (8,)), out, slm)

    neighbour = (numpy.arange(8) + 1) % 8
    assert numpy.array_equal(out, 3 * neighbour + 3)


def test_group_barrier_divergence():
    def kernel(nditem: kapi.NdItem, a):
        if nditem.get_local_id(0) == 0:
            return
        kapi.group_barrier(nditem.get_group())
        a[nditem.get_global_id(0)] = 1

    with pytest.raises(WorkItemDivergenceError):
        kapi.call_kernel(kernel, kapi.NdRange((8,), (8,)), numpy.zeros(8))


def test_group_barrier_outside_kernel():
    with pytest.raises(TypeError):
        kapi.group_barrier(None)

    group = kapi.Group(
        kapi.Range(8), kapi.Range(8), kapi.Range(1), (0,), execution=None
    )
    with pytest.raises(TypeError):
        kapi.group_barrier(group)


def test_group_barrier_bad_fence_scope():
    def kernel(nditem: kapi.NdItem, a):
        kapi.group_barrier(nditem.get_group(), 2)

    with pytest.raises(TypeError):
        kapi.call_kernel(kernel, kapi.NdRange((4,), (4,)), numpy.zeros(4))


@pytest.mark.parametrize("local_size", [256, 1024, 2048])
def test_group_barrier_large_work_group(local_size):
    a = numpy.arange(2 * local_size, dtype=numpy.int64)
    b = numpy.empty_like(a)
    slm = kapi.LocalAccessor(local_size, a.dtype)

    kapi.call_kernel(
        _reverse_kernel,
        kapi.NdRange((2 * local_size,), (local_size,)),
        a,
        b,
        slm,
    )

    expected = a.reshape(2, local_size)[:, ::-1].ravel()
    assert numpy.array_equal(b, expected)


@pytest.mark.parametrize("local_size", [256, 1024, 2048])
def test_group_barrier_large_work_group_on_queue(local_size):
    a = numpy.arange(local_size, dtype=numpy.float64)
    b = numpy.empty_like(a)
    slm = kapi.LocalAccessor(local_size, a.dtype)

    with Queue(Device(max_work_group_size=2048)) as q:
        q.submit(
            _reverse_kernel,
            kapi.NdRange((local_size,), (local_size,)),
            a,
            b,
            slm,
        ).wait()

    assert numpy.array_equal(b, a[::-1])


def test_group_barrier_divergence_after_barrier():
    def kernel(nditem: kapi.NdItem, a):
        gr = nditem.get_group()
        kapi.group_barrier(gr)
        if nditem.get_local_id(0) == 100:
            return
        kapi.group_barrier(gr)

    with pytest.raises(WorkItemDivergenceError):
        kapi.call_kernel(kernel, kapi.NdRange((256,), (256,)), numpy.zeros(1))
