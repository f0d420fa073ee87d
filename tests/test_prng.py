"""Tests for the ARC4 random stream."""

import numpy as np
import pytest

from pynumeric.core.arrays import random as random_array
from pynumeric.prng import ARC4Random


def test_known_stream():
    rng = ARC4Random("hello.")
    assert rng.random() == pytest.approx(0.9282578795792454, abs=0, rel=1e-15)
    assert rng.random() == pytest.approx(0.3752569768646784, abs=0, rel=1e-15)


def test_equal_seeds_give_equal_streams():
    a = ARC4Random([1, "two", {"three": 3.0}])
    b = ARC4Random([1, "two", {"three": 3.0}])
    np.testing.assert_array_equal(a.random(20), b.random(20))


def test_different_seeds_differ():
    assert ARC4Random("a").random() != ARC4Random("b").random()


def test_reseed_restarts_stream():
    rng = ARC4Random("hello.")
    first = rng.random(5)
    key = rng.seed("hello.")
    assert isinstance(key, str) and key
    np.testing.assert_array_equal(rng.random(5), first)


def test_instances_are_independent():
    a = ARC4Random("hello.")
    b = ARC4Random("hello.")
    a.random(10)
    assert b.random() == pytest.approx(0.9282578795792454, abs=0, rel=1e-15)


def test_shapes_and_range():
    rng = ARC4Random(42)
    sample = rng.random((3, 4))
    assert sample.shape == (3, 4)
    assert np.all(sample >= 0) and np.all(sample < 1)
    assert rng.random(0).shape == (0,)


def test_entropy_seeding_differs():
    assert ARC4Random().random() != ARC4Random().random()
    assert ARC4Random("x", entropy=True).random() != ARC4Random("x", entropy=True).random()


def test_array_random_accepts_stream():
    a = random_array((2, 3), rng=ARC4Random("hello."))
    assert a.shape == (2, 3)
    assert a[0, 0] == pytest.approx(0.9282578795792454, abs=0, rel=1e-15)
