"""
Display Controller for the CHIP-8 Interpreter
=============================================

The CHIP-8 display is a 64 x 32 monochrome bitmap. Programs draw on it
exclusively through sprites: rows of 8 pixels that are XORed onto the
existing picture. Drawing a lit sprite pixel over a lit screen pixel
turns the screen pixel off and counts as a collision, which games use
for hit detection.

Clipping:
- The sprite origin wraps (V[X] mod 64, V[Y] mod 32).
- The sprite body does not wrap: columns past the right edge and rows
  past the bottom edge are dropped.

Rendering:
- get_text_grid() / render_text(): ASCII art for logs and dumps
- render_image(): PNG bytes via Pillow, for screenshots
"""

import io
from typing import List, Tuple

from .constants import DISPLAY_HEIGHT, DISPLAY_WIDTH

LIT_CHAR = "#"
UNLIT_CHAR = "."


class Display:
    """
    64 x 32 boolean pixel grid.

    Pixels are addressed as (x, y) with (0, 0) at the top-left corner:

        >>> display = Display()
        >>> display.draw_sprite(0, 0, bytes([0b10000000]))
        False
        >>> display[0, 0]
        True

    Attributes:
        width: Number of columns (64)
        height: Number of rows (32)
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self._width = width
        self._height = height
        self._pixels: List[List[bool]] = [[False] * width for _ in range(height)]

    # ========================================
    # Geometry and Pixel Access
    # ========================================

    @property
    def width(self) -> int:
        """Display width in pixels."""
        return self._width

    @property
    def height(self) -> int:
        """Display height in pixels."""
        return self._height

    def __getitem__(self, position: Tuple[int, int]) -> bool:
        x, y = position
        return self.get_pixel(x, y)

    def __setitem__(self, position: Tuple[int, int], lit: bool) -> None:
        x, y = position
        self.set_pixel(x, y, lit)

    def get_pixel(self, x: int, y: int) -> bool:
        """
        Get pixel state.

        Raises:
            IndexError: If (x, y) is outside the display
        """
        self._check_position(x, y)
        return self._pixels[y][x]

    def set_pixel(self, x: int, y: int, lit: bool) -> None:
        """
        Set pixel state directly (for tests and snapshot restore).

        Raises:
            IndexError: If (x, y) is outside the display
        """
        self._check_position(x, y)
        self._pixels[y][x] = bool(lit)

    def _check_position(self, x: int, y: int) -> None:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) outside {self._width}x{self._height} display")

    @property
    def lit_count(self) -> int:
        """Number of lit pixels."""
        return sum(sum(row) for row in self._pixels)

    @property
    def is_blank(self) -> bool:
        """True if no pixel is lit."""
        return not any(any(row) for row in self._pixels)

    # ========================================
    # Drawing
    # ========================================

    def clear(self) -> None:
        """Turn every pixel off."""
        for row in self._pixels:
            for x in range(self._width):
                row[x] = False

    def draw_sprite(self, x: int, y: int, sprite: bytes) -> bool:
        """
        XOR a sprite onto the display.

        Args:
            x: Origin column (wrapped modulo width)
            y: Origin row (wrapped modulo height)
            sprite: One byte per row, bit 7 = leftmost pixel

        Returns:
            True if any lit pixel was turned off (collision)
        """
        x0 = x % self._width
        y0 = y % self._height
        collision = False

        for row, bits in enumerate(sprite):
            py = y0 + row
            if py >= self._height:
                break  # clipped at the bottom edge

            line = self._pixels[py]
            for bit in range(8):
                px = x0 + bit
                if px >= self._width:
                    break  # clipped at the right edge
                if not (bits >> (7 - bit)) & 1:
                    continue
                if line[px]:
                    collision = True
                line[px] = not line[px]

        return collision

    # ========================================
    # Rendering
    # ========================================

    def get_text_grid(self, lit: str = LIT_CHAR, unlit: str = UNLIT_CHAR) -> List[str]:
        """
        Get the display as one string per row.

        Args:
            lit: Character for lit pixels
            unlit: Character for unlit pixels

        Returns:
            List of height strings, each width characters long
        """
        return ["".join(lit if p else unlit for p in row) for row in self._pixels]

    def render_text(self, ruler: bool = True) -> str:
        """
        Render the display as ASCII art.

        Args:
            ruler: Prefix a line of column digits (column mod 10)

        Returns:
            Multi-line string
        """
        lines = []
        if ruler:
            lines.append("".join(str(x % 10) for x in range(self._width)))
        lines.extend(self.get_text_grid())
        return "\n".join(lines)

    def render_image(
        self,
        scale: int = 10,
        foreground: Tuple[int, int, int] = (255, 255, 255),
        background: Tuple[int, int, int] = (0, 0, 0),
    ) -> bytes:
        """
        Render display as PNG image.

        Args:
            scale: Pixel scale factor (default 10, giving 640x320)
            foreground: RGB color of lit pixels
            background: RGB color of unlit pixels

        Returns:
            PNG image bytes
        """
        from PIL import Image

        if scale < 1:
            raise ValueError(f"Scale must be at least 1, got {scale}")

        img = Image.new("RGB", (self._width, self._height), color=background)
        for y, row in enumerate(self._pixels):
            for x, pixel in enumerate(row):
                if pixel:
                    img.putpixel((x, y), foreground)

        if scale != 1:
            img = img.resize(
                (self._width * scale, self._height * scale),
                Image.Resampling.NEAREST,
            )

        buffer = io.BytesIO()
        img.save(buffer, format="PNG")
        return buffer.getvalue()

    # ========================================
    # Snapshot Support
    # ========================================

    @property
    def snapshot_size(self) -> int:
        """Number of bytes the packed display occupies in a snapshot."""
        return (self._width + 7) // 8 * self._height

    def get_snapshot_data(self) -> List[int]:
        """
        Get display state as bytes, 8 pixels per byte, MSB leftmost.

        A 64x32 display packs into 256 bytes.
        """
        data = []
        for row in self._pixels:
            for start in range(0, self._width, 8):
                byte = 0
                for bit, pixel in enumerate(row[start:start + 8]):
                    if pixel:
                        byte |= 0x80 >> bit
                data.append(byte)
        return data

    def apply_snapshot_data(self, data: List[int], offset: int = 0) -> int:
        """
        Restore display state from snapshot.

        Returns:
            Number of bytes consumed from data
        """
        needed = self.snapshot_size
        if len(data) - offset < needed:
            raise ValueError("Snapshot truncated in display block")

        pos = offset
        for row in self._pixels:
            for start in range(0, self._width, 8):
                byte = data[pos]
                pos += 1
                for bit in range(min(8, self._width - start)):
                    row[start + bit] = bool(byte & (0x80 >> bit))
        return needed

    def __repr__(self) -> str:
        return f"Display({self._width}x{self._height}, lit={self.lit_count})"
