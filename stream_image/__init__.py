"""
stream_image - functional-style image manipulation.

Load a raster into an immutable sequence of Pixels, transform it with
map / filter / reduce, and re-rasterize the result with bilinear splatting.

>>> from stream_image import StreamImageService
>>> svc = StreamImageService()
>>> img = svc.load("photo.png")
>>> gray = svc.from_pixels(img.pixels().map(lambda p: p.gray()))
>>> svc.save(gray, "photo_gray.png")
"""
from stream_image.models.bounds import Bounds
from stream_image.models.pixel import Pixel
from stream_image.models.pixel_stream import PixelStream
from stream_image.models.raster import Raster
from stream_image.models.stream_image import StreamImage
from stream_image.pipeline.apply_transforms import apply_transforms
from stream_image.services.raster_service import RasterService
from stream_image.services.stream_image_service import StreamImageService

__all__ = [
    "Bounds",
    "Pixel",
    "PixelStream",
    "Raster",
    "RasterService",
    "StreamImage",
    "StreamImageService",
    "apply_transforms",
]
