"""
Pixel Transform Pipeline
Runs user-supplied per-pixel steps over an image and renders the result
into a new StreamImage.  The source image is never modified.
"""
from typing import Callable, Optional

from stream_image.models.pixel import Pixel
from stream_image.models.stream_image import StreamImage
from stream_image.services.stream_image_service import StreamImageService

# A step maps one pixel to a new pixel, or to None to drop it
PixelStep = Callable[[Pixel], Optional[Pixel]]


def apply_transforms(
    image: StreamImage,
    *steps: PixelStep,
    parallel: bool = False,
    stream_image_service: StreamImageService = None,
) -> StreamImage:
    """
    Apply every step, in order, to every pixel of *image*.

    Args:
        image: Source image
        steps: Functions Pixel -> Pixel | None; None removes the pixel
        parallel: Evaluate the steps on a thread pool
        stream_image_service: Service used to render the result

    Returns:
        StreamImage: A new image built from the transformed pixels
    """
    stream_image_service = stream_image_service or StreamImageService()
    stream = image.parallel_pixels() if parallel else image.pixels()

    for step in steps:
        stream = stream.map(step).filter(lambda px: px is not None)

    return stream_image_service.from_pixels(stream)
