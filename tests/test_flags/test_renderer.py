"""Tests for flag image rendering."""

from __future__ import annotations

from io import BytesIO

import httpx
import pytest
from PIL import Image

from countryfetch.client import CountriesClient
from countryfetch.exceptions import FetchError, ParseError
from countryfetch.flags import FlagRenderer, image_to_lines
from countryfetch.flags.renderer import CHAR_RAMP
from countryfetch.models import Settings


def _half_black_png(width: int = 60, height: int = 40) -> bytes:
    """A flag whose left half is black and right half is white."""
    image = Image.new("RGB", (width, height), (255, 255, 255))
    for x in range(width // 2):
        for y in range(height):
            image.putpixel((x, y), (0, 0, 0))
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def _renderer(handler, width: int = 10) -> tuple[CountriesClient, FlagRenderer]:
    client = CountriesClient(Settings(), transport=httpx.MockTransport(handler))
    return client, FlagRenderer(client, width=width)


class TestImageToLines:
    def test_dimensions_follow_aspect_ratio(self) -> None:
        image = Image.new("L", (60, 40), 128)
        lines = image_to_lines(image, 10)
        # 40 / 60 * 10 * 0.5 = 3.33 -> 3 rows
        assert len(lines) == 3
        assert all(len(line) == 10 for line in lines)

    def test_dark_and_light_map_to_ramp_ends(self) -> None:
        lines = image_to_lines(Image.open(BytesIO(_half_black_png())), 10)
        for line in lines:
            assert line[0] == CHAR_RAMP[0]
            assert line[-1] == CHAR_RAMP[-1]

    def test_very_wide_image_has_at_least_one_row(self) -> None:
        lines = image_to_lines(Image.new("L", (1000, 2), 0), 10)
        assert len(lines) == 1


class TestFlagRenderer:
    def test_render_downloads_and_converts(self) -> None:
        png = _half_black_png()
        client, renderer = _renderer(lambda r: httpx.Response(200, content=png))
        with client:
            lines = renderer.render("https://flagcdn.com/w320/xx.png")
        assert len(lines) == 3
        assert lines[0].startswith(CHAR_RAMP[0])

    def test_download_failure_is_fetch_error(self) -> None:
        client, renderer = _renderer(lambda r: httpx.Response(404, text="missing"))
        with client:
            with pytest.raises(FetchError):
                renderer.render("https://flagcdn.com/w320/xx.png")

    def test_undecodable_image_is_parse_error(self) -> None:
        client, renderer = _renderer(lambda r: httpx.Response(200, content=b"<svg></svg>"))
        with client:
            with pytest.raises(ParseError) as exc_info:
                renderer.render("https://flagcdn.com/xx.svg")
        assert exc_info.value.source == "https://flagcdn.com/xx.svg"
