import numpy as np
import pytest

from stream_image.models.raster import Raster
from stream_image.pipeline.apply_transforms import apply_transforms
from stream_image.services.raster_service import RasterService
from stream_image.services.stream_image_service import StreamImageService


@pytest.fixture
def service():
    return StreamImageService(
        raster_service=RasterService(workers=2, parallel_threshold=1_000_000, origin_inclusive_bounds=True),
    )


@pytest.fixture
def image(service):
    cells = np.array([[0xFF202020, 0xFF404040, 0xFF606060],
                      [0xFF808080, 0xFFA0A0A0, 0xFFC0C0C0]], dtype=np.uint32)
    return service.from_raster(Raster(cells))


def test_steps_run_in_order(service, image):
    out = apply_transforms(
        image,
        lambda p: p.map_xy(lambda v: v * 2),
        lambda p: p.brighter(0.5),
        stream_image_service=service,
    )
    assert len(out) == len(image)
    assert (out.width, out.height) == (5, 3)
    assert out.collection[1].x == 2
    assert out.collection[0].r == pytest.approx(0x20 / 255 + 0.5)


def test_none_drops_pixels(service, image):
    out = apply_transforms(
        image,
        lambda p: p if p.y == 0 else None,
        stream_image_service=service,
    )
    assert len(out) == 3
    assert (out.raster.width, out.raster.height) == (3, 1)


def test_parallel_matches_sequential(service, image):
    steps = (lambda p: p.rotated(30), lambda p: p.gray(), lambda p: p if p.r > 0.3 else None)
    seq = apply_transforms(image, *steps, stream_image_service=service)
    par = apply_transforms(image, *steps, parallel=True, stream_image_service=service)
    assert seq.collection == par.collection
    assert np.array_equal(seq.raster.cells, par.raster.cells)


def test_source_image_untouched(service, image):
    before = image.raster.cells.copy()
    apply_transforms(image, lambda p: p.darker(1.0), stream_image_service=service)
    assert np.array_equal(image.raster.cells, before)
