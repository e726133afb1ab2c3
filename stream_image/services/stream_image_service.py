from pathlib import Path
from typing import Iterable, Union
import logging

from stream_image.models.pixel import Pixel
from stream_image.models.bounds import Bounds
from stream_image.models.raster import Raster
from stream_image.models.stream_image import StreamImage
from stream_image.repositories.display_repository import DisplayRepository
from stream_image.repositories.raster_repository import RasterRepository
from stream_image.services.raster_service import RasterService

logger = logging.getLogger(__name__)


class StreamImageService:
    """
    Builds StreamImage containers and hands their rasters to the outside world.
    Decode/encode go through RasterRepository, windows through DisplayRepository.
    """

    def __init__(self,
                 raster_service: RasterService = None,
                 raster_repository: RasterRepository = None,
                 display_repository: DisplayRepository = None):
        self.raster_service = raster_service or RasterService()
        self.raster_repository = raster_repository or RasterRepository()
        self.display_repository = display_repository or DisplayRepository()

    # ─── Construction ─────────────────────────────────────────────
    def load(self, path: Union[str, Path]) -> StreamImage:
        """Decode an image file into a StreamImage (one Pixel per cell)."""
        path = Path(path)
        raster = self.raster_repository.load(path)
        image = self.from_raster(raster, path=path)
        logger.info(f"Loaded {path} ({raster.width}x{raster.height}, {len(image)} pixels)")
        return image

    def from_raster(self, raster: Raster, path: Union[str, Path] = None) -> StreamImage:
        """
        Wrap an already dense raster.  No bounds inference: the raster starts
        at (0, 0) and is cached unchanged.
        """
        return StreamImage(
            collection=self.raster_service.decode_pixels(raster),
            raster=raster,
            bounds=Bounds(0.0, 0.0, float(raster.width), float(raster.height)),
            path=Path(path) if path is not None else None,
            workers=self.raster_service.workers or None,
        )

    def from_pixels(self, source: Iterable[Pixel]) -> StreamImage:
        """
        Collect a (possibly transformed) pixel stream and render it:
        bounds inference followed by a bilinear splat.
        """
        collection = tuple(source)
        bounds = self.raster_service.infer_bounds(collection)
        raster = self.raster_service.rasterize(collection, bounds)
        logger.info(
            f"Rendered {len(collection)} pixels into {raster.width}x{raster.height} raster "
            f"(offset {bounds.offset_x:g},{bounds.offset_y:g})"
        )
        return StreamImage(
            collection=collection,
            raster=raster,
            bounds=bounds,
            workers=self.raster_service.workers or None,
        )

    # ─── Hand-off to collaborators ────────────────────────────────
    def save(self, image: StreamImage, path: Union[str, Path], fmt: str = None) -> StreamImage:
        """Encode the cached raster to `path`.  I/O errors propagate unchanged."""
        saved_to = self.raster_repository.save(image.raster, path, fmt)
        logger.info(f"Saved image to {saved_to}")
        return image

    def display(self, image: StreamImage) -> StreamImage:
        """Show the cached raster in a modal window; returns once it is closed."""
        logger.info(f"Displaying {image.raster.width}x{image.raster.height} image")
        self.display_repository.show(image.raster)
        return image
