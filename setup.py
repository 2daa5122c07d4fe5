# SPDX-FileCopyrightText: 2020 - 2024 Intel Corporation
#
# SPDX-License-Identifier: Apache-2.0

from setuptools import find_packages, setup

"""Top level setup.py file.

    Builds the numba_reduce package. Install it with pip:

        ~$ pip install -e .

    The test dependencies are installed with the `test` extra:

        ~$ pip install -e .[test]

    To uninstall:
        ~$ pip uninstall numba-reduce
"""


packages = find_packages(
    include=[
        "numba_reduce",
        "numba_reduce.*",
    ]
)

install_requires = [
    "numba >={}".format("0.57"),
    "numpy",
    "greenlet",
    "typer",
]

metadata = dict(
    name="numba-reduce",
    version="0.1.0",
    description="Multi-pass parallel reductions written against a "
    "SYCL-like kernel API",
    packages=packages,
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    python_requires=">=3.9",
    include_package_data=True,
    zip_safe=False,
    author="Intel Corporation",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: GPU",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: Implementation :: CPython",
        "Topic :: Scientific/Engineering",
    ],
    entry_points={
        "console_scripts": ["numba-reduce = numba_reduce.cli:main"],
    },
)

setup(**metadata)
