# SPDX-FileCopyrightText: 2023 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Memory scopes accepted by the synchronization functions of the kernel API.
"""

from enum import IntEnum


class MemoryScope(IntEnum):
    """
    Analogue of :sycl_memory_scope:`sycl::memory_scope <>` enumeration.

    The simulator executes the work-items of a work-group one at a time, so a
    barrier makes writes visible to at least the whole work-group whatever the
    scope. Narrower scopes are accepted for portability of kernels.
    """

    WORK_ITEM = 0
    SUB_GROUP = 1
    WORK_GROUP = 2
    DEVICE = 3
    SYSTEM = 4
