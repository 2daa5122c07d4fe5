# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Reduction engines."""

from .host import HostReduction
from .shuffle import (
    BLOCK_SIZE_CANDIDATES,
    SUB_GROUP_SIZE_CANDIDATES,
    ShuffleReduction,
)
from .tree import TreeReduction

ENGINES = {
    HostReduction.strategy: HostReduction,
    TreeReduction.strategy: TreeReduction,
    ShuffleReduction.strategy: ShuffleReduction,
}

__all__ = [
    "BLOCK_SIZE_CANDIDATES",
    "ENGINES",
    "HostReduction",
    "ShuffleReduction",
    "SUB_GROUP_SIZE_CANDIDATES",
    "TreeReduction",
]
