# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import numpy as np
import pytest

from numba_reduce.core.buffers import DeviceBufferPair, reduced_size
from numba_reduce.core.device import Device
from numba_reduce.core.exceptions import DeviceError


@pytest.mark.parametrize(
    "factor, size, expected",
    [
        (256, 1, 1),
        (256, 256, 1),
        (256, 257, 2),
        (512, 1_000_000, 1954),
        (256, 1_000_000, 3907),
        (64, 0, 0),
    ],
)
def test_reduced_size(factor, size, expected):
    assert reduced_size(factor, size) == expected


def test_allocate():
    device = Device()
    pair = DeviceBufferPair(np.float32, device)
    assert not pair.allocated
    assert pair.front_capacity == 0

    pair.allocate(1000, 64)

    assert pair.allocated
    assert pair.front_capacity == 1000
    assert pair.back_capacity == 16
    assert device.allocated_bytes == (1000 + 16) * 4

    pair.release()
    assert device.allocated_bytes == 0


def test_swap_and_reset():
    with DeviceBufferPair(np.int64, Device()) as pair:
        pair.allocate(100, 10)
        front, back = pair.front, pair.back

        pair.swap()
        assert pair.front is back
        assert pair.back is front

        pair.swap()
        pair.swap()
        pair.reset_to_original()
        assert pair.front is front
        assert pair.back is back

        # Capacities follow the allocations, not the roles
        assert pair.front_capacity == 100
        assert pair.back_capacity == 10


def test_release_is_idempotent():
    device = Device()
    pair = DeviceBufferPair(np.int32, device)
    pair.allocate(8, 4)

    pair.release()
    pair.release()

    assert not pair.allocated
    assert pair.front is None
    assert device.allocated_bytes == 0


def test_allocate_twice():
    with DeviceBufferPair(np.int32, Device()) as pair:
        pair.allocate(8, 4)
        with pytest.raises(ValueError):
            pair.allocate(8, 4)


@pytest.mark.parametrize("size, factor", [(0, 4), (8, 0), (-1, 4)])
def test_allocate_invalid_sizes(size, factor):
    with pytest.raises(ValueError):
        DeviceBufferPair(np.int32, Device()).allocate(size, factor)


def test_allocate_out_of_memory():
    # The front buffer fits, the back buffer does not
    device = Device(global_mem_size=1024 * 8 + 8)
    pair = DeviceBufferPair(np.int64, device)

    with pytest.raises(DeviceError):
        pair.allocate(1024, 256)

    assert not pair.allocated
    assert device.allocated_bytes == 0
