"""Tests for ArraySet storage: growth policy, typed numpy storage, logging."""

from __future__ import annotations

import logging
import pickle

import numpy as np
import pytest

from arrayset import ArraySet, ArraySetDefaults


def test_default_growth_doubles_after_first_allocation():
    s = ArraySet()
    assert s.capacity == 0
    capacities = []
    for value in range(5):
        s.add(value)
        capacities.append(s.capacity)
    assert capacities == [2, 2, 4, 4, 8]


def test_custom_growth_policy():
    s = ArraySet(defaults=ArraySetDefaults(min_grow_capacity=4, growth_factor=3))
    for value in range(5):
        s.add(value)
    assert s.capacity == 12
    assert s.to_list() == [0, 1, 2, 3, 4]


def test_with_capacity_avoids_growth():
    s = ArraySet.with_capacity(10)
    assert s.capacity == 10
    for value in range(10):
        s.add(value)
    assert s.capacity == 10
    s.add(10)
    assert s.capacity == 20


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"initial_capacity": -1}, "initial_capacity"),
        ({"min_grow_capacity": 0}, "min_grow_capacity"),
        ({"growth_factor": 1}, "growth_factor"),
    ],
)
def test_defaults_validation(kwargs, message):
    with pytest.raises(ValueError, match=message):
        ArraySetDefaults(**kwargs)


def test_next_capacity_covers_required_slots():
    defaults = ArraySetDefaults()
    assert defaults.next_capacity(0, 1) == 2
    assert defaults.next_capacity(2, 3) == 4
    assert defaults.next_capacity(4, 100) == 100


def test_typed_storage_deduplicates():
    s = ArraySet([1, 2, 2, 3], dtype=np.int32)
    assert len(s) == 3
    assert s.dtype == np.dtype("int32")
    assert 2 in s
    assert s.add(4.0)
    assert s.to_list() == [1, 2, 3, 4]
    assert all(type(value) is int for value in s.to_list())


def test_typed_storage_rejects_lossy_values():
    s = ArraySet(dtype="int64")
    with pytest.raises(ValueError, match="cannot be stored exactly"):
        s.add(2.5)
    assert s.is_empty()

    small = ArraySet(dtype="int8")
    with pytest.raises(ValueError, match="cannot be stored exactly"):
        small.add(300)
    assert small.is_empty()


def test_typed_storage_rejects_nan():
    s = ArraySet([1.5], dtype="float64")
    with pytest.raises(ValueError, match="cannot be stored exactly"):
        s.add(float("nan"))
    assert s.to_list() == [1.5]


def test_typed_storage_equality_and_hash():
    s = ArraySet([4, 3, 2, 1], dtype="int64")
    assert s == {1, 2, 3, 4}
    assert s == ArraySet([1, 2, 3, 4])
    assert hash(s) == hash(frozenset({1, 2, 3, 4}))


def test_typed_storage_clone_and_pickle():
    s = ArraySet([1, 2, 3], dtype="int16")
    twin = s.clone()
    twin.remove(1)
    assert 1 in s
    assert twin.dtype == np.dtype("int16")

    restored = pickle.loads(pickle.dumps(s))
    assert restored == s
    assert restored.dtype == np.dtype("int16")


def test_to_numpy():
    typed = ArraySet([5, 6], dtype="int32")
    array = typed.to_numpy()
    assert array.dtype == np.dtype("int32")
    np.testing.assert_array_equal(array, np.array([5, 6]))

    array[0] = 99
    assert 99 not in typed

    plain = ArraySet([1.5, 2.5]).to_numpy(dtype="float32")
    assert plain.dtype == np.dtype("float32")
    np.testing.assert_allclose(plain, [1.5, 2.5])


def test_typed_repr():
    assert repr(ArraySet([1], dtype="int64")) == "ArraySet([1], dtype='int64')"


def test_growth_is_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="arrayset.array_set")
    s = ArraySet()
    s.add(1)
    assert any("Growing storage: 0 -> 2" in record.getMessage() for record in caplog.records)


def test_large_set_warning_logged_once(caplog):
    caplog.set_level(logging.WARNING, logger="arrayset.array_set")
    s = ArraySet(defaults=ArraySetDefaults(large_set_warning_size=3))
    for value in range(10):
        s.add(value)
    warnings = [record for record in caplog.records if record.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "exceeds 3" in warnings[0].getMessage()
