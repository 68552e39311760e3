from __future__ import annotations

import asyncio
import io
import logging
import mimetypes
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable

from PIL import Image, ImageOps, UnidentifiedImageError

from snapshelf.services.errors import ImageProcessingError, OversizedFilesError

logger = logging.getLogger(__name__)

MAX_WIDTH = 1200
MAX_HEIGHT = 1600
JPEG_QUALITY = 85
MAX_FILE_BYTES = 10_000_000
OUTPUT_MEDIA_TYPE = "image/jpeg"


@dataclass(frozen=True)
class SelectedFile:
    name: str
    media_type: str
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_image(self) -> bool:
        return self.media_type.startswith("image/")


def read_selected_file(path: str | Path) -> SelectedFile:
    file_path = Path(path)
    media_type, _ = mimetypes.guess_type(file_path.name)
    return SelectedFile(
        name=file_path.name,
        media_type=media_type or "application/octet-stream",
        data=file_path.read_bytes(),
    )


def target_size(width: int, height: int) -> tuple[int, int]:
    """Fit (width, height) inside MAX_WIDTH x MAX_HEIGHT without upscaling."""
    scale = min(1.0, MAX_WIDTH / width, MAX_HEIGHT / height)
    if scale >= 1.0:
        return width, height
    return max(1, round(width * scale)), max(1, round(height * scale))


def compress_image(selected: SelectedFile) -> SelectedFile:
    """Downsize an image to the bounding box and re-encode it as JPEG."""
    try:
        with Image.open(io.BytesIO(selected.data)) as image:
            image.load()
            # Phone photos are often stored sideways with an Orientation tag
            upright = ImageOps.exif_transpose(image)
            size = target_size(*upright.size)
            converted = upright.convert("RGB")
    except (UnidentifiedImageError, OSError) as error:
        raise ImageProcessingError(selected.name, str(error)) from error

    if size != converted.size:
        converted = converted.resize(size, Image.Resampling.LANCZOS)

    out = io.BytesIO()
    converted.save(out, format="JPEG", quality=JPEG_QUALITY)
    logger.debug("Compressed %s: %d -> %d bytes", selected.name, selected.size, out.tell())
    return replace(selected, media_type=OUTPUT_MEDIA_TYPE, data=out.getvalue())


async def _prepare_one(selected: SelectedFile) -> SelectedFile:
    if selected.is_image:
        return await asyncio.to_thread(compress_image, selected)
    return selected


async def prepare_files(files: Iterable[SelectedFile]) -> list[SelectedFile]:
    """
    Compress every image concurrently, then reject the batch if anything
    is still above MAX_FILE_BYTES. Non-image files pass through untouched.
    """
    processed = await asyncio.gather(*(_prepare_one(selected) for selected in files))

    oversized = [selected.name for selected in processed if selected.size > MAX_FILE_BYTES]
    if oversized:
        raise OversizedFilesError(oversized, MAX_FILE_BYTES)
    return list(processed)


async def load_files(paths: Iterable[str | Path]) -> list[SelectedFile]:
    return list(await asyncio.gather(*(asyncio.to_thread(read_selected_file, path) for path in paths)))
