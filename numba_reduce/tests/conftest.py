#! /usr/bin/env python

# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import pytest

from numba_reduce.core.device import Device
from numba_reduce.core.queue import Queue

sub_group_sizes = [32, 64]


@pytest.fixture(params=sub_group_sizes, ids=lambda w: f"sg{w}")
def device(request):
    return Device(
        name=f"simulator:gpu:sg{request.param}",
        sub_group_size=request.param,
    )


@pytest.fixture
def queue():
    q = Queue(Device(name="simulator:gpu:test"))
    yield q
    q.close()
