import threading

import pytest

from stream_image.models.pixel import Pixel
from stream_image.models.pixel_stream import PixelStream


@pytest.fixture
def pixels():
    return tuple(Pixel.from_brightness(x, y, (x + y) / 10) for y in range(3) for x in range(4))


def test_stream_is_restartable(pixels):
    stream = PixelStream(pixels).map(lambda p: p.brighter(0.5))
    assert stream.collect() == stream.collect()
    assert stream.count() == len(pixels)


def test_stages_are_lazy(pixels):
    calls = []

    def spy(p):
        calls.append(p)
        return p

    stream = PixelStream(pixels).map(spy).filter(lambda p: p.x > 0)
    assert calls == []
    stream.collect()
    assert len(calls) == len(pixels)


def test_map_filter_reduce(pixels):
    total = (PixelStream(pixels)
             .filter(lambda p: p.y == 2)
             .map(lambda p: p.r)
             .reduce(lambda a, b: a + b, 0.0))
    assert total == pytest.approx((2 + 3 + 4 + 5) / 10)


def test_reduce_without_initial(pixels):
    brightest = PixelStream(pixels).reduce(lambda a, b: a if a.r >= b.r else b)
    assert (brightest.x, brightest.y) == (3, 2)


def test_reduce_empty_without_initial_raises():
    with pytest.raises(TypeError):
        PixelStream(()).reduce(lambda a, b: a)


def test_parallel_stream_same_elements(pixels):
    seen_threads = set()

    def shift(p):
        seen_threads.add(threading.get_ident())
        return p.map_xy(lambda v: v + 1)

    sequential = PixelStream(pixels).map(lambda p: p.map_xy(lambda v: v + 1)).filter(lambda p: p.r > 0.2).collect()
    parallel = PixelStream(pixels).parallel(workers=4).map(shift).filter(lambda p: p.r > 0.2).collect()
    assert parallel == sequential
    assert threading.get_ident() not in seen_threads


def test_mode_switches(pixels):
    stream = PixelStream(pixels)
    assert not stream.is_parallel
    assert stream.parallel().is_parallel
    assert not stream.parallel().sequential().is_parallel
    assert stream.parallel(workers=3).map(lambda p: p).is_parallel


def test_for_each(pixels):
    seen = []
    PixelStream(pixels).for_each(seen.append)
    assert tuple(seen) == pixels


def test_factory_source():
    stream = PixelStream(lambda: iter([Pixel(0, 0, 1, 1, 1)]))
    assert stream.count() == 1
    assert stream.count() == 1
