# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Benchmark harness for the reduction engines.

.. code-block:: bash

    python -m numba_reduce bench --strategy shuffle --size 100000 \\
        --size 1000 --block-size 256
"""

import logging
from enum import Enum
from typing import List

import numpy as np
import typer

from numba_reduce.core.device import DeviceStatus, select_default_device
from numba_reduce.core.exceptions import (
    DeviceError,
    UnsupportedBlockSizeError,
    UnsupportedSubGroupSizeError,
)
from numba_reduce.operators import BUILTIN_OPERATORS, as_operator, identity_for
from numba_reduce.reduction import ENGINES, HostReduction

app = typer.Typer(
    help="Reductions on the simulated device.", no_args_is_help=True
)


#: Exit status of ``bench`` for every device failure. Device status codes do
#: not fit the 8 bits of a process exit status; 1 is a result mismatch and 2 a
#: usage error or unsupported block or sub-group size.
EXIT_CODES = {
    DeviceStatus.INVALID_VALUE: 3,
    DeviceStatus.OUT_OF_MEMORY: 4,
    DeviceStatus.INVALID_CONFIGURATION: 5,
    DeviceStatus.INVALID_DEVICE_POINTER: 6,
    DeviceStatus.LAUNCH_FAILURE: 7,
}


class Strategy(str, Enum):
    host = "host"
    tree = "tree"
    shuffle = "shuffle"


def _generate_input(rng, size, dtype):
    if dtype.kind == "f":
        return rng.random(size, dtype=dtype)
    # Small values keep integer products and sums clear of overflow
    return rng.integers(0, 4, size=size, dtype=dtype)


def _matches(result, expected, dtype):
    if dtype.kind == "f":
        return bool(np.isclose(result, expected, rtol=1e-5))
    return result == expected


@app.command()
def bench(
    strategy: Strategy = typer.Option(Strategy.shuffle, help="Engine to run."),
    size: List[int] = typer.Option(
        [100_000], "--size", help="Input size, can be repeated."
    ),
    block_size: List[int] = typer.Option(
        [256], "--block-size", help="Block size, can be repeated."
    ),
    op: str = typer.Option(
        "add", help="One of: " + ", ".join(sorted(BUILTIN_OPERATORS)) + "."
    ),
    dtype: str = typer.Option("int64", help="Element type."),
    repeat: int = typer.Option(1, min=1, help="Runs per configuration."),
    seed: int = typer.Option(0, help="Seed of the input generator."),
    verbose: bool = typer.Option(False, "--verbose", "-v"),
):
    """Reduce random inputs and compare with the host reduction."""
    logging.basicConfig(level=logging.DEBUG if verbose else logging.WARNING)
    try:
        kernel_op = as_operator(op)
        elem_type = np.dtype(dtype)
        zero_elem = identity_for(kernel_op, elem_type)
    except (TypeError, ValueError) as e:
        raise typer.BadParameter(str(e))

    rng = np.random.default_rng(seed)
    inputs = {n: _generate_input(rng, n, elem_type) for n in size}
    baseline = HostReduction(kernel_op, zero_elem, dtype=elem_type)
    mismatches = 0

    try:
        with ENGINES[strategy.value](
            kernel_op, zero_elem, size, block_size, dtype=elem_type
        ) as engine:
            for n, data in inputs.items():
                expected = baseline(data).value
                for block in block_size:
                    for _ in range(repeat):
                        result, elapsed = engine(data, block)
                        ok = _matches(result, expected, elem_type)
                        mismatches += not ok
                        typer.echo(
                            f"{strategy.value:>8} size={n:<10} "
                            f"block={block:<5} result={result} "
                            f"expected={expected} "
                            f"{'ok' if ok else 'MISMATCH'} "
                            f"{elapsed:.3f} ms"
                        )
    except (UnsupportedBlockSizeError, UnsupportedSubGroupSizeError) as e:
        typer.echo(e.message, err=True)
        raise typer.Exit(code=2)
    except DeviceError as e:
        typer.echo(f"{e.message}: {DeviceStatus(e.status).name}", err=True)
        raise typer.Exit(code=EXIT_CODES.get(e.status, 3))

    if mismatches:
        raise typer.Exit(code=1)


@app.command()
def devices():
    """Print the properties of the default device."""
    device = select_default_device()
    typer.echo(f"name:                {device.name}")
    typer.echo(f"sub_group_size:      {device.sub_group_size}")
    typer.echo(f"max_work_group_size: {device.max_work_group_size}")
    typer.echo(f"global_mem_size:     {device.global_mem_size}")


def main():
    app()
