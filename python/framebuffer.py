"""
Linear-colour framebuffer and its conversion to an 8-bit Pillow image.
Colours stay unclamped while rendering; clamping happens here.
"""
from typing import Iterator, List, Optional, Tuple

from PIL import Image

from vecmath import Vector3, clamp01

TONE_MAPS = ("clamp", "reinhard")


def tone_map_reinhard(c: Vector3) -> Vector3:
    """Reinhard tone mapping."""
    return (c[0] / (1.0 + c[0]), c[1] / (1.0 + c[1]), c[2] / (1.0 + c[2]))

def gamma_correct(c: Vector3, gamma: float = 2.2) -> Vector3:
    """Gamma correction."""
    inv_gamma = 1.0 / gamma
    return (pow(clamp01(c[0]), inv_gamma), pow(clamp01(c[1]), inv_gamma), pow(clamp01(c[2]), inv_gamma))

def to_rgb8(c: Vector3) -> Tuple[int, int, int]:
    # Truncates, so only exactly 1.0 maps to 255
    return (int(clamp01(c[0]) * 255), int(clamp01(c[1]) * 255), int(clamp01(c[2]) * 255))


class Framebuffer:
    """Dense row-major grid of linear RGB colours; row 0 is the top of the image."""

    def __init__(self, width: int, height: int, fill: Vector3 = (0.0, 0.0, 0.0)):
        if width < 1 or height < 1:
            raise ValueError(f"Framebuffer needs a positive size, got {width}x{height}")
        self.width = width
        self.height = height
        self.pixels: List[Vector3] = [fill] * (width * height)

    def __len__(self) -> int:
        return len(self.pixels)

    def index(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self.width}x{self.height} framebuffer")
        return y * self.width + x

    def get(self, x: int, y: int) -> Vector3:
        return self.pixels[self.index(x, y)]

    def set(self, x: int, y: int, color: Vector3) -> None:
        self.pixels[self.index(x, y)] = color

    def set_rows(self, y_start: int, rows: List[List[Vector3]]) -> None:
        """Write consecutive full rows starting at y_start."""
        for offset, row in enumerate(rows):
            if len(row) != self.width:
                raise ValueError(f"Row has {len(row)} pixels, expected {self.width}")
            start = (y_start + offset) * self.width
            self.pixels[start:start + self.width] = row

    def rows(self) -> Iterator[List[Vector3]]:
        for y in range(self.height):
            yield self.pixels[y * self.width:(y + 1) * self.width]

    def to_image(self, tone_map: str = "clamp", gamma: Optional[float] = None) -> Image.Image:
        """
        Convert to an 8-bit RGB image.

        Args:
            tone_map: "clamp" clips each channel to [0, 1]; "reinhard" compresses
                highlights first
            gamma: optional display gamma (e.g. 2.2); None keeps values linear
        """
        if tone_map not in TONE_MAPS:
            raise ValueError(f"Unknown tone map {tone_map!r}, expected one of {TONE_MAPS}")

        data = []
        for color in self.pixels:
            if tone_map == "reinhard":
                color = tone_map_reinhard(color)
            if gamma is not None:
                color = gamma_correct(color, gamma)
            data.append(to_rgb8(color))

        img = Image.new("RGB", (self.width, self.height))
        img.putdata(data)
        return img

    def save(self, output_path: str, tone_map: str = "clamp", gamma: Optional[float] = None) -> None:
        """Encode and write the image; format follows the file extension."""
        self.to_image(tone_map, gamma).save(output_path)
