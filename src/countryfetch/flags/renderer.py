"""Render flag images as blocks of text.

:class:`FlagRenderer` downloads an image through
:class:`~countryfetch.client.CountriesClient`, decodes it with Pillow and
maps each pixel's luminance onto a character ramp. Terminal cells are
roughly twice as tall as they are wide, so the image is squashed
vertically by half to keep the flag's proportions.
"""

from __future__ import annotations

from io import BytesIO
from typing import TYPE_CHECKING

from PIL import Image, UnidentifiedImageError

from countryfetch.exceptions import ParseError

if TYPE_CHECKING:
    from countryfetch.client import CountriesClient

# Dark to light.
CHAR_RAMP = "@%#*+=-:. "

_CELL_ASPECT = 0.5


class FlagRenderer:
    """Turn a flag image URL into lines of text.

    Args:
        client: An open :class:`~countryfetch.client.CountriesClient` used
            to download images.
        width: Number of characters per rendered line.
    """

    def __init__(self, client: CountriesClient, width: int = 40) -> None:
        self._client = client
        self._width = width

    def render(self, image_url: str) -> list[str]:
        """Download and render one image.

        Raises:
            FetchError: If the image cannot be downloaded.
            ParseError: If the downloaded bytes are not a decodable image.
        """
        data = self._client.fetch_bytes(image_url)
        try:
            image = Image.open(BytesIO(data))
            image.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ParseError(f"Cannot decode flag image {image_url}: {exc}", source=image_url) from exc
        return image_to_lines(image, self._width)


def image_to_lines(image: Image.Image, width: int) -> list[str]:
    """Convert a Pillow image to text lines *width* characters wide."""
    w, h = image.size
    height = max(1, int(round(h / w * width * _CELL_ASPECT)))
    grey = image.convert("L").resize((width, height), Image.Resampling.LANCZOS)

    scale = len(CHAR_RAMP) - 1
    pixels = grey.tobytes()
    lines = []
    for row in range(height):
        chunk = pixels[row * width:(row + 1) * width]
        lines.append("".join(CHAR_RAMP[p * scale // 255] for p in chunk))
    return lines
