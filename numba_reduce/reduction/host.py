# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Vectorized reduction on the host, the baseline device reductions are
checked and timed against.
"""

import time

import numpy as np

from numba_reduce.core.engine import ReductionResult, as_input
from numba_reduce.operators import as_operator


class HostReduction:
    """Reduces with the numpy ufunc of the operator.

    Takes the same constructor and call arguments as the device engines; the
    size hints and the block size are ignored.
    """

    strategy = "host"

    def __init__(
        self, kernel_op, zero_elem, input_sizes=(), block_sizes=(), *, dtype=None
    ):
        self.kernel_op = as_operator(kernel_op)
        self.dtype = np.dtype(
            np.asarray(zero_elem).dtype if dtype is None else dtype
        )
        self.zero_elem = self.dtype.type(zero_elem)
        self._ufunc = self.kernel_op.host_ufunc(self.dtype)

    def __call__(self, input, block_size=None, reserved=None):
        data = as_input(input, self.dtype)
        start = time.perf_counter()
        result = self._ufunc.reduce(data, initial=self.zero_elem)
        end = time.perf_counter()
        return ReductionResult(
            self.dtype.type(result), (end - start) * 1000.0
        )

    reduce = __call__

    def release(self):
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.release()
