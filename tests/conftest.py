"""
Shared pytest fixtures for container tests.
"""

import pytest

from extarray import Container


@pytest.fixture
def plain_array():
    """Provide a mixed-key nested structure in a fixed insertion order."""
    return {
        "one": 1,
        0: {2: "two", 3: "three"},
        7: "four",
        8: "five",
        "six": {"temp": "long string that's not so long", "empty": None},
    }


@pytest.fixture
def container(plain_array):
    """Provide a Container built from plain_array."""
    return Container(plain_array)


@pytest.fixture
def empty_container():
    """Provide an empty Container."""
    return Container()


@pytest.fixture
def capitals():
    """Provide a string-keyed Container of four capitals."""
    return Container(
        {
            "Ireland": "Dublin",
            "France": "Paris",
            "Egypt": "Cairo",
            "Japan": "Tokyo",
        }
    )
