import itertools

import pytest

from tallymetrics.pool import ObjectPool


def counting_alloc():
    counter = itertools.count()
    return lambda: next(counter)


def test_init_preallocates_then_allocates_new():
    pool = ObjectPool(3)
    pool.init(counting_alloc())
    taken = [pool.get() for _ in range(5)]
    assert taken == [0, 1, 2, 3, 4]


def test_put_returns_object_for_reuse():
    pool = ObjectPool(2)
    pool.init(counting_alloc())
    first = pool.get()
    pool.put(first)
    assert [pool.get(), pool.get()] == [1, first]


def test_put_drops_object_when_full():
    pool = ObjectPool(1)
    pool.init(counting_alloc())
    pool.put("extra")
    assert pool.get() == 0
    assert pool.get() == 1


def test_zero_size_pool_always_allocates():
    pool = ObjectPool(0)
    pool.init(counting_alloc())
    pool.put("ignored")
    assert [pool.get(), pool.get()] == [0, 1]


def test_get_before_init_raises_when_empty():
    pool = ObjectPool(2)
    with pytest.raises(RuntimeError):
        pool.get()


def test_put_before_init_is_returned():
    pool = ObjectPool(2)
    pool.put("kept")
    assert pool.get() == "kept"


def test_negative_size_rejected():
    with pytest.raises(ValueError):
        ObjectPool(-1)