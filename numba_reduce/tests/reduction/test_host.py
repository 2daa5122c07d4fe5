# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import numpy as np
import pytest

from numba_reduce.operators import BinaryOperator
from numba_reduce.reduction import ENGINES, HostReduction
from numba_reduce.tests._helper import get_int_dtypes


@pytest.mark.parametrize("dtype", get_int_dtypes())
def test_host_sum(dtype):
    data = np.arange(1000, dtype=dtype)
    with HostReduction("add", dtype(0)) as host:
        result, elapsed = host(data)

    assert result == 499500
    assert result.dtype == dtype
    assert elapsed >= 0.0


def test_host_empty_input():
    host = HostReduction("minimum", np.inf)
    assert host.reduce(np.empty(0)).value == np.inf


def test_host_ignores_sizes_and_block():
    host = HostReduction("maximum", 0, [10], [64], dtype=np.int32)
    assert host([3, 9, 4], 1024).value == 9


def test_host_custom_operator():
    def absmax(a, b):
        return max(abs(a), abs(b))

    op = BinaryOperator(absmax)
    host = HostReduction(op, 0.0)

    assert host(np.array([1.5, -7.0, 3.0])).value == 7.0
    # The vectorized operator is compiled once per dtype
    assert op.host_ufunc(np.float64) is op.host_ufunc(np.float64)


def test_engines_registry():
    assert set(ENGINES) == {"host", "tree", "shuffle"}
    assert ENGINES["host"] is HostReduction


def test_host_rejects_malformed_input():
    host = HostReduction("add", np.int64(0))
    with pytest.raises(ValueError):
        host(np.ones((2, 3), dtype=np.int64))
    with pytest.raises(TypeError):
        host(np.array([0.5, 1.5]))
