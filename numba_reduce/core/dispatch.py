# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Selection of kernel specializations from runtime values.

Kernels such as the sub-group shuffle reduction are specialized for a fixed
block size and sub-group size: both values are baked into the kernel function
as constants when it is built. The helpers here map the runtime values onto a
closed set of prebuilt specializations.
"""

from itertools import product


def static_switch(value, candidates, callback):
    """Calls ``callback`` with the candidate equal to ``value``.

    Candidates are tried in order. When no candidate matches, ``callback`` is
    not called and ``None`` is returned, so callers must make sure ``value``
    is always one of the candidates.

    Args:
        value: The runtime value.
        candidates (Sequence): The values specializations exist for.
        callback (Callable): Invoked with the matching candidate.

    Returns:
        The result of ``callback`` or ``None``.
    """
    for candidate in candidates:
        if value == candidate:
            return callback(candidate)
    return None


def static_for(init, predicate, step):
    """Unrolls a loop over compile-time values.

    Yields ``init``, ``step(init)``, ``step(step(init))``, ... while
    ``predicate`` holds for the value.
    """
    value = init
    while predicate(value):
        yield value
        value = step(value)


class KernelTable:
    """Dispatch table of kernel specializations built once.

    Args:
        factory (Callable): ``factory(block_size, sub_group_size)`` returns
            the kernel specialized for the pair.
        block_sizes (Sequence[int]): Block sizes to specialize for.
        sub_group_sizes (Sequence[int]): Sub-group sizes to specialize for.
    """

    def __init__(self, factory, block_sizes, sub_group_sizes):
        self.block_sizes = tuple(block_sizes)
        self.sub_group_sizes = tuple(sub_group_sizes)
        self._kernels = {
            (b, w): factory(b, w)
            for b, w in product(self.block_sizes, self.sub_group_sizes)
        }

    def __len__(self):
        return len(self._kernels)

    def __contains__(self, key):
        return key in self._kernels

    def dispatch(self, block_size, sub_group_size, callback):
        """Calls ``callback(kernel, block_size, sub_group_size)`` with the
        specialization matching the runtime values. Silently does nothing if
        there is none.
        """
        return static_switch(
            block_size,
            self.block_sizes,
            lambda b: static_switch(
                sub_group_size,
                self.sub_group_sizes,
                lambda w: callback(self._kernels[(b, w)], b, w),
            ),
        )
