# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

"""Binary operators for reductions.

A :class:`BinaryOperator` wraps the scalar function called by the reduction
kernels together with a numpy ufunc computing the same operation on the host.
Operators are expected to be associative and commutative; ordering of the
partial combinations done by a device reduction is unspecified.
"""

import operator

import numba
import numpy as np


class BinaryOperator:
    """A scalar binary operator usable by device and host reductions.

    Args:
        func (Callable): ``func(a, b)`` combining two scalars. Kernels call it
            directly. If no ``ufunc`` is given, it must be compilable by
            ``numba.vectorize`` to run the host reduction.
        name (str) (optional): Defaults to the name of ``func``.
        ufunc (numpy.ufunc) (optional): Host implementation of the operator.
    """

    def __init__(self, func, name=None, ufunc=None):
        if not callable(func):
            raise TypeError("A BinaryOperator needs a callable.")
        self.func = func
        self.name = name or getattr(func, "__name__", "op")
        self._ufunc = ufunc
        self._vectorized = {}

    def __call__(self, a, b):
        return self.func(a, b)

    def host_ufunc(self, dtype):
        """Returns a numpy ufunc applying the operator to arrays of ``dtype``.

        Operators created from a plain Python function are compiled with
        ``numba.vectorize`` on first use for every dtype.
        """
        if self._ufunc is not None:
            return self._ufunc
        dtype = np.dtype(dtype)
        ufunc = self._vectorized.get(dtype)
        if ufunc is None:
            nbtype = numba.from_dtype(dtype)
            ufunc = numba.vectorize([nbtype(nbtype, nbtype)])(self.func)
            self._vectorized[dtype] = ufunc
        return ufunc

    def __repr__(self):
        return f"BinaryOperator({self.name})"


add = BinaryOperator(operator.add, "add", np.add)
multiply = BinaryOperator(operator.mul, "multiply", np.multiply)
maximum = BinaryOperator(max, "maximum", np.maximum)
minimum = BinaryOperator(min, "minimum", np.minimum)
bitwise_and = BinaryOperator(operator.and_, "bitwise_and", np.bitwise_and)
bitwise_or = BinaryOperator(operator.or_, "bitwise_or", np.bitwise_or)
bitwise_xor = BinaryOperator(operator.xor, "bitwise_xor", np.bitwise_xor)

BUILTIN_OPERATORS = {
    op.name: op
    for op in (
        add,
        multiply,
        maximum,
        minimum,
        bitwise_and,
        bitwise_or,
        bitwise_xor,
    )
}


def as_operator(op):
    """Returns ``op`` as a :class:`BinaryOperator`.

    Accepts a BinaryOperator, the name of a built-in operator, or a callable.
    """
    if isinstance(op, BinaryOperator):
        return op
    if isinstance(op, str):
        try:
            return BUILTIN_OPERATORS[op]
        except KeyError:
            raise ValueError(
                f"Unknown operator {op!r}. Built-in operators are "
                + ", ".join(sorted(BUILTIN_OPERATORS))
                + "."
            ) from None
    return BinaryOperator(op)


def identity_for(op, dtype):
    """Returns the identity element of a built-in operator for ``dtype``.

    Raises:
        ValueError: If ``op`` is not a built-in operator or has no identity
            for ``dtype``.
    """
    op = as_operator(op)
    dtype = np.dtype(dtype)
    if op is add or op is bitwise_or or op is bitwise_xor:
        return dtype.type(0)
    if op is multiply:
        return dtype.type(1)
    if op is bitwise_and:
        if dtype.kind not in "iu":
            raise ValueError("bitwise_and needs an integer dtype.")
        return dtype.type(np.iinfo(dtype).max if dtype.kind == "u" else -1)
    if op is maximum:
        if dtype.kind == "f":
            return dtype.type(-np.inf)
        return dtype.type(np.iinfo(dtype).min)
    if op is minimum:
        if dtype.kind == "f":
            return dtype.type(np.inf)
        return dtype.type(np.iinfo(dtype).max)
    raise ValueError(f"No known identity element for {op.name}.")
