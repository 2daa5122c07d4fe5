# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Simulated accelerator device, device memory allocations and the device
error-check utility.
"""

import logging
import threading
from enum import IntEnum
from functools import cache

import numpy as np

from numba_reduce.core import config
from numba_reduce.core.exceptions import DeviceError


class DeviceStatus(IntEnum):
    """Status codes reported by failing device operations. The values follow
    the HIP runtime's ``hipError_t``.
    """

    SUCCESS = 0
    INVALID_VALUE = 1
    OUT_OF_MEMORY = 2
    INVALID_CONFIGURATION = 9
    INVALID_DEVICE_POINTER = 17
    LAUNCH_FAILURE = 719


def check(error, name):
    """Turns the outcome of a device operation into a fatal error.

    Returns normally when ``error`` is ``None``. Otherwise reports the
    operation name with the error description and raises a
    :class:`DeviceError`; callers never try to recover from it.

    Args:
        error: ``None`` on success, else a :class:`DeviceError` or the
            exception raised by the failing operation.
        name (str): Name of the device operation.

    Raises:
        DeviceError: If ``error`` is not ``None``.
    """
    if error is None:
        return
    if isinstance(error, DeviceError):
        failure = error
    elif isinstance(error, MemoryError):
        failure = DeviceError(name, DeviceStatus.OUT_OF_MEMORY, str(error))
    else:
        failure = DeviceError(
            name,
            DeviceStatus.LAUNCH_FAILURE,
            f"{type(error).__name__}: {error}",
        )
    logging.error(
        "%s(%s) failed with status %d",
        name,
        failure.description,
        int(failure.status),
    )
    if failure is error:
        raise failure
    raise failure from error


class Device:
    """A simulated SYCL GPU device.

    The device executes kernels written with :mod:`numba_reduce.kernel_api`
    through the kernel simulator. Its global memory is host memory, accounted
    against ``global_mem_size`` so that exhausting it fails the way a real
    device allocation does.

    Sub-groups of the device execute in lock-step: no barrier is needed
    between two sub-group shuffles. Kernels that can not rely on that
    guarantee synchronize with work-group barriers only.

    Args:
        name (str) (optional): Filter string of the device.
        sub_group_size (int) (optional): Work-items per sub-group (warp).
        max_work_group_size (int) (optional): Largest work-group size.
        global_mem_size (int) (optional): Global memory in bytes.

    The defaults are read from :mod:`numba_reduce.core.config`.
    """

    def __init__(
        self,
        name=None,
        sub_group_size=None,
        max_work_group_size=None,
        global_mem_size=None,
    ):
        self.name = config.DEVICE_NAME if name is None else name
        self.sub_group_size = (
            config.SUB_GROUP_SIZE if sub_group_size is None else sub_group_size
        )
        self.max_work_group_size = (
            config.MAX_WORK_GROUP_SIZE
            if max_work_group_size is None
            else max_work_group_size
        )
        self.global_mem_size = (
            config.GLOBAL_MEM_SIZE
            if global_mem_size is None
            else global_mem_size
        )
        if self.sub_group_size <= 0 or self.max_work_group_size <= 0:
            raise ValueError(
                "Sub-group and work-group sizes of a device must be positive."
            )
        self._allocated = 0
        self._lock = threading.Lock()

    @property
    def allocated_bytes(self):
        """Bytes of global memory currently allocated."""
        return self._allocated

    def malloc(self, count, dtype):
        """Allocates global memory for ``count`` elements of ``dtype``.

        Raises:
            DeviceError: If ``count`` is negative or the device is out of
                global memory.
        """
        dtype = np.dtype(dtype)
        if count < 0:
            check(
                DeviceError(
                    "malloc_device",
                    DeviceStatus.INVALID_VALUE,
                    f"negative element count {count}",
                ),
                "malloc_device",
            )
        nbytes = count * dtype.itemsize
        with self._lock:
            if self._allocated + nbytes > self.global_mem_size:
                error = DeviceError(
                    "malloc_device",
                    DeviceStatus.OUT_OF_MEMORY,
                    f"out of memory allocating {nbytes} bytes, "
                    f"{self.global_mem_size - self._allocated} bytes free "
                    f"on {self.name}",
                )
            else:
                error = None
                self._allocated += nbytes
        check(error, "malloc_device")
        try:
            data = np.empty(count, dtype=dtype)
        except MemoryError as e:
            with self._lock:
                self._allocated -= nbytes
            check(e, "malloc_device")
        return DeviceAllocation(self, data)

    def free(self, allocation):
        """Releases a device allocation.

        Raises:
            DeviceError: If the allocation does not belong to the device or
                was already released.
        """
        if allocation.device is not self or allocation._data is None:
            check(
                DeviceError(
                    "free",
                    DeviceStatus.INVALID_DEVICE_POINTER,
                    "allocation is not live on " + self.name,
                ),
                "free",
            )
        with self._lock:
            self._allocated -= allocation.nbytes
        allocation._data = None

    def __repr__(self):
        return (
            f"Device(name={self.name!r}, "
            f"sub_group_size={self.sub_group_size}, "
            f"max_work_group_size={self.max_work_group_size}, "
            f"global_mem_size={self.global_mem_size})"
        )


class DeviceAllocation:
    """A region of device global memory.

    The memory is not meant to be accessed from the host: data moves in and
    out of it with :meth:`numba_reduce.core.queue.Queue.memcpy` and kernels
    receive it as an array argument.
    """

    __slots__ = ("device", "dtype", "capacity", "nbytes", "_data")

    def __init__(self, device, data):
        self.device = device
        self.dtype = data.dtype
        self.capacity = data.size
        self.nbytes = data.nbytes
        self._data = data

    @property
    def released(self):
        return self._data is None

    def kernel_arg(self, name="call_kernel"):
        """The array a kernel reads and writes for this allocation."""
        if self._data is None:
            check(
                DeviceError(
                    name,
                    DeviceStatus.INVALID_DEVICE_POINTER,
                    "use of a released device allocation",
                ),
                name,
            )
        return self._data

    def __repr__(self):
        state = "released" if self.released else "live"
        return (
            f"<DeviceAllocation {self.capacity} x {self.dtype} on "
            f"{self.device.name} ({state})>"
        )


@cache
def select_default_device():
    """Returns the process-wide default device configured from
    :mod:`numba_reduce.core.config`.
    """
    device = Device()
    logging.debug("selected default device %r", device)
    return device
