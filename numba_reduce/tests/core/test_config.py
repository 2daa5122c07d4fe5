# SPDX-FileCopyrightText: 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

import logging

from numba.core import config as numba_config

from numba_reduce.core import config
from numba_reduce.core.device import Device
from numba_reduce.tests._helper import override_config


def test_readenv(monkeypatch):
    monkeypatch.setenv("NUMBA_REDUCE_TEST_VALUE", "64")
    assert config._readenv("NUMBA_REDUCE_TEST_VALUE", int, 32) == 64


def test_readenv_default(monkeypatch):
    monkeypatch.delenv("NUMBA_REDUCE_TEST_VALUE", raising=False)
    assert config._readenv("NUMBA_REDUCE_TEST_VALUE", int, 32) == 32
    assert config._readenv("NUMBA_REDUCE_TEST_VALUE", int, lambda: 7) == 7


def test_readenv_unparsable(monkeypatch, caplog):
    monkeypatch.setenv("NUMBA_REDUCE_TEST_VALUE", "warp")
    with caplog.at_level(logging.ERROR):
        assert config._readenv("NUMBA_REDUCE_TEST_VALUE", int, 32) == 32
    assert "NUMBA_REDUCE_TEST_VALUE" in caplog.text


def test_defaults():
    assert isinstance(config.SUB_GROUP_SIZE, int)
    assert isinstance(config.MAX_WORK_GROUP_SIZE, int)
    assert isinstance(config.GLOBAL_MEM_SIZE, int)
    assert isinstance(config.DEVICE_NAME, str)


def test_fallback_to_numba_config():
    assert config.DISABLE_JIT == numba_config.DISABLE_JIT


def test_device_reads_config():
    with override_config("SUB_GROUP_SIZE", 64), override_config(
        "MAX_WORK_GROUP_SIZE", 256
    ):
        device = Device()
    assert device.sub_group_size == 64
    assert device.max_work_group_size == 256
