# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Multi-pass reduction on a device.

A pass launches one kernel that reduces every block of the ``front`` buffer
to a single element of the ``back`` buffer. Passes repeat, swapping the two
buffers in between, until a single element is left. Kernel launches, copies
and timestamp markers all go to one in-order queue; the host only blocks
once, after the end marker.
"""

import logging
import threading
from typing import NamedTuple

import numpy as np

from numba_reduce.core import config
from numba_reduce.core.buffers import DeviceBufferPair, reduced_size
from numba_reduce.core.exceptions import (
    ConcurrentReductionError,
    EngineReleasedError,
    InputSizeExceedsCapacityError,
)
from numba_reduce.core.queue import Event, Queue
from numba_reduce.kernel_api.local_accessor import is_supported_dtype
from numba_reduce.operators import as_operator


class ReductionResult(NamedTuple):
    """Result of one reduction call."""

    value: object
    elapsed_ms: float


def as_input(input, dtype):
    """Returns ``input`` as a contiguous one-dimensional array of ``dtype``.

    Raises:
        ValueError: If ``input`` is not one-dimensional.
        TypeError: If the elements of ``input`` can not be converted to
            ``dtype`` without changing their kind, e.g. floats to integers.
    """
    data = np.asarray(input)
    if data.ndim != 1:
        raise ValueError(
            f"Expected a one-dimensional input, got {data.ndim} dimensions."
        )
    if data.size and not np.can_cast(data.dtype, dtype, "same_kind"):
        raise TypeError(
            f"Can not reduce {data.dtype} elements with a {dtype} engine."
        )
    return np.ascontiguousarray(data, dtype=dtype)


def _as_sizes(sizes, argname):
    sizes = [int(s) for s in sizes]
    if not sizes:
        raise ValueError(f"{argname} must contain at least one size.")
    if any(s <= 0 for s in sizes):
        raise ValueError(f"{argname} must only contain positive sizes.")
    return sizes


class ReductionEngine:
    """Base class of the device reduction engines.

    The engine owns the operator, the identity element, an in-order queue and
    a :class:`DeviceBufferPair`. The buffers are sized once for the largest
    input in ``input_sizes`` and the smallest block in ``block_sizes``, and
    reused by every call. Subclasses provide the kernel of a pass.

    An engine runs one reduction at a time; concurrent callers need their own
    instances.

    Args:
        kernel_op: The binary operator, see
            :func:`numba_reduce.operators.as_operator`.
        zero_elem: Identity element of ``kernel_op``.
        input_sizes (Iterable[int]): Input sizes the engine will be called
            with.
        block_sizes (Iterable[int]): Block sizes the engine will be called
            with.
        dtype (optional): Element type. Defaults to the type of
            ``zero_elem``.
        device (Device) (optional): Defaults to the default device.
    """

    #: Short name of the strategy used in messages.
    strategy = None

    def __init__(
        self,
        kernel_op,
        zero_elem,
        input_sizes,
        block_sizes,
        *,
        dtype=None,
        device=None,
    ):
        self.kernel_op = as_operator(kernel_op)
        self.dtype = np.dtype(
            np.asarray(zero_elem).dtype if dtype is None else dtype
        )
        if not is_supported_dtype(self.dtype):
            raise TypeError(
                f"Reductions over {self.dtype} are not supported by the device."
            )
        self.zero_elem = self.dtype.type(zero_elem)
        self.input_sizes = _as_sizes(input_sizes, "input_sizes")
        self.block_sizes = _as_sizes(block_sizes, "block_sizes")
        self._lock = threading.Lock()

        self.queue = Queue(device)
        self.device = self.queue.device
        self._buffers = DeviceBufferPair(self.dtype, self.device)
        try:
            self._check_device()
            self._buffers.allocate(
                max(self.input_sizes),
                min(self.factor(b) for b in self.block_sizes),
            )
        except BaseException:
            self.queue.close()
            raise

    def _check_device(self):
        """Checks the device can run the strategy."""

    def check_block_size(self, block_size):
        """Raises UnsupportedBlockSizeError if ``block_size`` can not be
        used by the strategy on the engine's device.
        """
        raise NotImplementedError

    def factor(self, block_size):
        """Number of elements reduced into one by a pass."""
        raise NotImplementedError

    def launch(self, curr, block_size):
        """Submits one pass over the first ``curr`` elements of ``front``."""
        raise NotImplementedError

    @property
    def buffers(self):
        return self._buffers

    @property
    def capacity(self):
        """Largest input the engine can reduce."""
        return self._buffers.front_capacity

    def _check_call(self, size, block_size):
        if not self._buffers.allocated:
            raise EngineReleasedError(type(self).__name__)
        self.check_block_size(block_size)
        if size > self._buffers.front_capacity:
            raise InputSizeExceedsCapacityError(
                size, self._buffers.front_capacity
            )
        first_output = reduced_size(self.factor(block_size), size)
        if first_output > self._buffers.back_capacity:
            raise InputSizeExceedsCapacityError(
                first_output, self._buffers.back_capacity, buffer="back"
            )

    def __call__(self, input, block_size, reserved=None) -> ReductionResult:
        """Reduces ``input`` with the operator of the engine.

        Args:
            input (array_like): One-dimensional input, converted to the
                engine's dtype.
            block_size (int): Work-group size of the kernel passes.
            reserved: Ignored, kept for symmetry with the host reduction.

        Returns:
            ReductionResult: The reduced value and the device time in
            milliseconds spent between the start and end markers.
        """
        data = as_input(input, self.dtype)
        self._check_call(data.size, block_size)
        if not self._lock.acquire(blocking=False):
            raise ConcurrentReductionError(type(self).__name__)
        try:
            return self._reduce(data, block_size)
        finally:
            self._buffers.reset_to_original()
            self._lock.release()

    reduce = __call__

    def _reduce(self, data, block_size):
        factor = self.factor(block_size)
        buffers = self._buffers
        queue = self.queue

        if data.size:
            queue.memcpy(buffers.front, data, data.size)
        start = queue.record_event()

        curr = data.size
        if curr == 1:
            # No pass runs, the input element is the result
            queue.memcpy(buffers.back, buffers.front, 1)
        elif curr == 0:
            queue.memcpy(buffers.back, np.array([self.zero_elem]), 1)

        npasses = 0
        while curr > 1:
            self.launch(curr, block_size)
            queue.check_last_error("call_kernel")
            next_size = reduced_size(factor, curr)
            if config.DEBUG:
                logging.debug(
                    "%s pass %d: %d -> %d elements",
                    self.strategy,
                    npasses,
                    curr,
                    next_size,
                )
            npasses += 1
            curr = next_size
            if curr > 1:
                buffers.swap()

        end = queue.record_event()
        end.wait()

        result = np.empty(1, dtype=self.dtype)
        queue.memcpy(result, buffers.back, 1).wait()
        elapsed = Event.elapsed_time(start, end)
        logging.debug(
            "%s reduction of %d elements: %d passes, %.3f ms",
            self.strategy,
            data.size,
            npasses,
            elapsed,
        )
        return ReductionResult(result[0], elapsed)

    def release(self):
        """Frees the device buffers and stops the queue."""
        self._buffers.release()
        self.queue.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
