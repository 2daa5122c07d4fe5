# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Double buffer of device memory used by multi-pass reductions.
"""

import logging

from numba_reduce.core.device import select_default_device


def reduced_size(factor, size):
    """Number of elements left after a pass that combines ``factor`` elements
    into one, i.e. ``ceil(size / factor)``.
    """
    return size // factor + (0 if size % factor == 0 else 1)


class DeviceBufferPair:
    """Two device allocations alternating as source (``front``) and
    destination (``back``) of the passes of a reduction.

    The pair owns both allocations. :meth:`swap` and :meth:`reset_to_original`
    are the only operations that change which allocation plays which role.

    Args:
        dtype: Element type of both buffers.
        device (Device) (optional): Device to allocate on.
    """

    def __init__(self, dtype, device=None):
        self.device = select_default_device() if device is None else device
        self.dtype = dtype
        self.front = None
        self.back = None
        self._original = None

    @property
    def allocated(self):
        return self._original is not None

    @property
    def front_capacity(self):
        return self._original[0].capacity if self.allocated else 0

    @property
    def back_capacity(self):
        return self._original[1].capacity if self.allocated else 0

    def allocate(self, max_input_size, min_factor):
        """Allocates a front buffer for ``max_input_size`` elements and a back
        buffer for the output of one pass with the smallest reduction factor.

        Raises:
            ValueError: If the pair is already allocated or the sizes are not
                positive.
            DeviceError: If the device runs out of memory.
        """
        if self.allocated:
            raise ValueError("The buffer pair is already allocated.")
        if max_input_size <= 0 or min_factor <= 0:
            raise ValueError(
                "Buffer sizes need a positive input size and reduction factor."
            )
        front = self.device.malloc(max_input_size, self.dtype)
        try:
            back = self.device.malloc(
                reduced_size(min_factor, max_input_size), self.dtype
            )
        except BaseException:
            self.device.free(front)
            raise
        self.front, self.back = front, back
        self._original = (front, back)
        logging.debug(
            "allocated front buffer of %d and back buffer of %d elements",
            front.capacity,
            back.capacity,
        )

    def release(self):
        """Frees both allocations. Calling it again is a no-op."""
        if not self.allocated:
            return
        front, back = self._original
        self.front = self.back = self._original = None
        self.device.free(front)
        self.device.free(back)

    def swap(self):
        """Exchanges the roles of the two buffers."""
        self.front, self.back = self.back, self.front

    def reset_to_original(self):
        """Restores the orientation the buffers had after :meth:`allocate`."""
        if self.allocated:
            self.front, self.back = self._original

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
