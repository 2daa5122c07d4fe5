# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0


def read_global_safe(front, i, front_size, zero_elem):
    """Reads ``front[i]``, or the identity element past the end of the data.

    Padding with the identity makes the reduction of a block well-defined no
    matter how the input length divides into blocks.
    """
    return front[i] if i < front_size else zero_elem
