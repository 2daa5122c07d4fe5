# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

from numba_reduce.cli import app

if __name__ == "__main__":
    app()
