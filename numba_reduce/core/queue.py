# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""An in-order command queue for the simulated device.

Commands (kernel launches, memory copies and timestamp markers) are submitted
asynchronously and return an :class:`Event`. A single worker thread executes
them in submission order, so a command always observes the effects of the
commands submitted before it. The host only blocks when it waits on an event.
"""

import logging
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from functools import partial

import numpy as np

from numba_reduce.core import config
from numba_reduce.core.device import (
    DeviceAllocation,
    DeviceStatus,
    check,
    select_default_device,
)
from numba_reduce.core.exceptions import (
    DeviceError,
    UnsupportedWorkItemSizeError,
)
from numba_reduce.kernel_api import NdRange, call_kernel


class Event:
    """Analogue to ``sycl::event`` with profiling enabled.

    Tracks a command submitted to a :class:`Queue`. Profiling timestamps are
    taken on the device side, when the command starts and finishes executing.
    """

    def __init__(self, name, future):
        self.name = name
        self._future = future
        self._start_ns = None
        self._end_ns = None

    def wait(self):
        """Blocks until the command finished executing.

        Raises:
            DeviceError: If the command, or a command submitted before it,
                failed.
        """
        check(self._future.exception(), self.name)
        return self

    @property
    def done(self):
        return self._future.done()

    @property
    def profiling_info_start(self):
        """Device timestamp in nanoseconds when the command started."""
        self.wait()
        return self._start_ns

    @property
    def profiling_info_end(self):
        """Device timestamp in nanoseconds when the command finished."""
        self.wait()
        return self._end_ns

    @staticmethod
    def elapsed_time(start, end):
        """Milliseconds between the completion of two events, analogous to
        ``hipEventElapsedTime``.

        Both events are waited on.
        """
        return (end.profiling_info_end - start.profiling_info_end) / 1e6


class Queue:
    """In-order queue of commands executing on a :class:`Device`.

    Once a command fails the queue enters a sticky error state, like a device
    context after a failed kernel. Commands submitted later are not executed
    and report the original error.

    Args:
        device (Device) (optional): Defaults to
            :func:`select_default_device`.
    """

    def __init__(self, device=None):
        self.device = select_default_device() if device is None else device
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="numba-reduce-queue"
        )
        self._error = None
        self._error_lock = threading.Lock()

    def _enqueue(self, name, command):
        def run(event):
            if self._error is not None:
                raise self._error
            event._start_ns = time.perf_counter_ns()
            try:
                command()
            except DeviceError as e:
                self._set_error(e)
                raise
            except Exception as e:
                error = DeviceError(
                    name,
                    DeviceStatus.LAUNCH_FAILURE,
                    f"{type(e).__name__}: {e}",
                )
                self._set_error(error)
                raise error from e
            event._end_ns = time.perf_counter_ns()

        event = Event(name, None)
        event._future = self._executor.submit(run, event)
        return event

    def _set_error(self, error):
        with self._error_lock:
            if self._error is None:
                self._error = error

    def check_last_error(self, name="call_kernel"):
        """Raises the error of an already failed command without blocking,
        the analogue of ``hipGetLastError``.
        """
        check(self._error, name)

    def submit(self, kernel_fn, index_range, *kernel_args):
        """Submits an nd-range kernel.

        :class:`DeviceAllocation` arguments are passed to the kernel as
        device arrays, every other argument is passed as is.

        Raises:
            ValueError: If ``index_range`` is not an NdRange.
            UnsupportedWorkItemSizeError: If the work-group is larger than the
                device supports.
        """
        if not isinstance(index_range, NdRange):
            raise ValueError("Kernels can only be submitted over an NdRange.")
        kernel_name = getattr(kernel_fn, "__name__", repr(kernel_fn))
        local_size = index_range.local_range.size()
        if local_size > self.device.max_work_group_size:
            raise UnsupportedWorkItemSizeError(
                kernel_name,
                0,
                local_size,
                self.device.max_work_group_size,
            )
        args = [
            karg.kernel_arg() if isinstance(karg, DeviceAllocation) else karg
            for karg in kernel_args
        ]
        if config.DEBUG:
            logging.debug("submit %s over %s", kernel_name, index_range)
        return self._enqueue(
            kernel_name,
            partial(
                call_kernel,
                kernel_fn,
                index_range,
                *args,
                sub_group_size=self.device.sub_group_size,
            ),
        )

    def memcpy(self, dst, src, count):
        """Copies the first ``count`` elements of ``src`` into ``dst``.

        Either side is a :class:`DeviceAllocation` or a host numpy array.
        """
        if count < 0 or count > _capacity(dst) or count > _capacity(src):
            check(
                DeviceError(
                    "memcpy",
                    DeviceStatus.INVALID_VALUE,
                    f"copy of {count} elements out of bounds",
                ),
                "memcpy",
            )

        def copy():
            dst_arr = _as_array(dst)
            dst_arr[:count] = _as_array(src)[:count]

        return self._enqueue("memcpy", copy)

    def record_event(self):
        """Submits a timestamp marker, the analogue of ``hipEventRecord``."""
        return self._enqueue("record_event", _noop)

    def wait(self):
        """Blocks until every submitted command finished."""
        return self.record_event().wait()

    def close(self):
        """Finishes the submitted commands and stops the worker thread."""
        self._executor.shutdown(wait=True)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()


def _noop():
    pass


def _capacity(obj):
    if isinstance(obj, DeviceAllocation):
        return obj.capacity
    return np.asarray(obj).size


def _as_array(obj):
    if isinstance(obj, DeviceAllocation):
        return obj.kernel_arg("memcpy")
    return obj
