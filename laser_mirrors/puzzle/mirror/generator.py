"""Laser mirror puzzle generator.

Each puzzle is a square grid with clue numbers on all four edges; the
solution image adds the hidden mirrors.
"""

from __future__ import annotations

import argparse
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Collection, Dict, List, Optional, Tuple, Union

from PIL import Image, ImageDraw, ImageFont

from ..base import AbstractPuzzleGenerator, PathLike
from .level import generate_playable_level
from .session import choose_hidden_clues
from .types import SIDES, BoundaryKey, Grid, LevelData, Mirror, Side

BOARD_COLOR = (255, 255, 255)
BACKGROUND_COLOR = (245, 245, 245)
LINE_COLOR = (0, 0, 0)
CLUE_COLOR = (0, 0, 255)
MIRROR_COLOR = (220, 30, 30)


@dataclass
class LaserMirrorPuzzleRecord:
    id: str
    prompt: str
    size: int
    mirror_count: int
    cell_size: int
    canvas_size: Tuple[int, int]
    grid: List[str]
    clues: Dict[str, List[Union[int, str]]]
    hidden_clues: List[str]
    paths: List[Dict[str, Any]]
    image: str
    solution_image_path: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "prompt": self.prompt,
            "size": self.size,
            "mirror_count": self.mirror_count,
            "cell_size": self.cell_size,
            "canvas_size": list(self.canvas_size),
            "grid": list(self.grid),
            "clues": {side: list(values) for side, values in self.clues.items()},
            "hidden_clues": list(self.hidden_clues),
            "paths": list(self.paths),
            "image": self.image,
            "solution_image_path": self.solution_image_path,
        }

    def to_level(self) -> LevelData:
        return LevelData.from_dict(
            {"size": self.size, "grid": self.grid, "clues": self.clues, "paths": self.paths}
        )


class LaserMirrorGenerator(AbstractPuzzleGenerator[LaserMirrorPuzzleRecord]):
    """Generate laser mirror puzzles: place mirrors so every edge clue matches."""

    DEFAULT_OUTPUT_DIR = "data/laser_mirror"
    DEFAULT_SIZE = 5
    DEFAULT_CELL_SIZE = 48
    DEFAULT_PROMPT = (
        "Each number on the edge is the count of cells a light ray crosses from that edge position "
        "until it leaves the grid, bouncing off 45-degree mirrors. Place the mirrors so every number matches."
    )

    def __init__(
        self,
        output_dir: PathLike = DEFAULT_OUTPUT_DIR,
        *,
        size: int = DEFAULT_SIZE,
        mirror_count: Optional[int] = None,
        cell_size: int = DEFAULT_CELL_SIZE,
        hard_mode: bool = False,
        prompt: Optional[str] = None,
        seed: Optional[int] = None,
    ) -> None:
        if size < 1:
            raise ValueError("size must be at least 1")
        if mirror_count is not None and not 0 <= mirror_count <= size * size:
            raise ValueError(f"mirror_count must be within [0, {size * size}]")
        if cell_size <= 0:
            raise ValueError("cell_size must be positive")
        super().__init__(output_dir)
        self.size = size
        self.mirror_count = mirror_count
        self.cell_size = int(cell_size)
        self.hard_mode = hard_mode
        self.prompt = prompt or self.DEFAULT_PROMPT
        self._rng = random.Random(seed)
        side_px = (self.size + 2) * self.cell_size
        self.canvas_size = (side_px, side_px)
        self._font = self._resolve_font(self.cell_size)

        self.puzzle_dir = self.output_dir / "puzzles"
        self.solution_dir = self.output_dir / "solutions"
        for path in (self.puzzle_dir, self.solution_dir):
            path.mkdir(parents=True, exist_ok=True)

    def create_puzzle(self, *, puzzle_id: Optional[str] = None) -> LaserMirrorPuzzleRecord:
        puzzle_uuid = puzzle_id or self.next_id()
        hidden = choose_hidden_clues(self.size, self._rng) if self.hard_mode else frozenset()
        level = generate_playable_level(
            self.size,
            mirror_count=self.mirror_count,
            hidden=hidden,
            rng=self._rng,
        )

        puzzle_path = self.puzzle_dir / f"{puzzle_uuid}_puzzle.png"
        solution_path = self.solution_dir / f"{puzzle_uuid}_solution.png"
        self._render(level, hidden, show_mirrors=False).save(puzzle_path)
        self._render(level, hidden, show_mirrors=True).save(solution_path)

        payload = level.to_dict()
        return LaserMirrorPuzzleRecord(
            id=puzzle_uuid,
            prompt=self.prompt,
            size=self.size,
            mirror_count=level.grid.mirror_count(),
            cell_size=self.cell_size,
            canvas_size=self.canvas_size,
            grid=payload["grid"],
            clues=payload["clues"],
            hidden_clues=sorted(key.label() for key in hidden),
            paths=payload["paths"],
            image=self.relativize_path(puzzle_path),
            solution_image_path=self.relativize_path(solution_path),
        )

    # ------------------------------------------------------------------

    def _cell_box(self, row: int, col: int) -> Tuple[int, int, int, int]:
        left = (col + 1) * self.cell_size
        top = (row + 1) * self.cell_size
        return left, top, left + self.cell_size, top + self.cell_size

    def _clue_cell(self, key: BoundaryKey) -> Tuple[int, int]:
        if key.side is Side.TOP:
            return -1, key.index
        if key.side is Side.BOTTOM:
            return self.size, key.index
        if key.side is Side.LEFT:
            return key.index, -1
        return key.index, self.size

    def _render(self, level: LevelData, hidden: Collection[BoundaryKey], *, show_mirrors: bool) -> Image.Image:
        image = Image.new("RGB", self.canvas_size, BACKGROUND_COLOR)
        draw = ImageDraw.Draw(image)
        board_left, board_top, _, _ = self._cell_box(0, 0)
        board_right = board_left + self.size * self.cell_size
        board_bottom = board_top + self.size * self.cell_size
        draw.rectangle((board_left, board_top, board_right - 1, board_bottom - 1), fill=BOARD_COLOR)

        for i in range(self.size + 1):
            width_px = 3 if i in (0, self.size) else 1
            offset = i * self.cell_size
            draw.line((board_left, board_top + offset, board_right, board_top + offset), fill=LINE_COLOR, width=width_px)
            draw.line((board_left + offset, board_top, board_left + offset, board_bottom), fill=LINE_COLOR, width=width_px)

        for side in SIDES:
            for index, clue in enumerate(level.clues.side(side)):
                key = BoundaryKey(side, index)
                if key in hidden:
                    continue
                self._draw_centered_text(draw, self._cell_box(*self._clue_cell(key)), str(clue))

        if show_mirrors:
            self._draw_mirrors(draw, level.grid)
        return image

    def _draw_mirrors(self, draw: ImageDraw.ImageDraw, grid: Grid) -> None:
        inset = max(2, self.cell_size // 8)
        width_px = max(3, self.cell_size // 10)
        for (row, col), mirror in grid.mirrors().items():
            left, top, right, bottom = self._cell_box(row, col)
            if mirror is Mirror.FORWARD:
                segment = (left + inset, bottom - inset, right - inset, top + inset)
            else:
                segment = (left + inset, top + inset, right - inset, bottom - inset)
            draw.line(segment, fill=MIRROR_COLOR, width=width_px)

    def _draw_centered_text(self, draw: ImageDraw.ImageDraw, box: Tuple[int, int, int, int], text: str) -> None:
        left, top, right, bottom = box
        bbox = draw.textbbox((0, 0), text, font=self._font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        x_text = left + (right - left - text_width) / 2 - bbox[0]
        y_text = top + (bottom - top - text_height) / 2 - bbox[1]
        draw.text((x_text, y_text), text, fill=CLUE_COLOR, font=self._font)

    @staticmethod
    def _resolve_font(cell_size: int) -> ImageFont.ImageFont:
        target_size = max(12, int(cell_size * 0.5))
        for font_name in ["arial.ttf", "LiberationSans-Regular.ttf", "DejaVuSans.ttf"]:
            try:
                return ImageFont.truetype(font_name, target_size)
            except OSError:
                continue
        return ImageFont.load_default()


__all__ = ["LaserMirrorGenerator", "LaserMirrorPuzzleRecord"]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate laser mirror puzzles")
    parser.add_argument("count", type=int, help="Number of puzzles to generate")
    parser.add_argument("--output-dir", type=Path, default=Path(LaserMirrorGenerator.DEFAULT_OUTPUT_DIR), help="Where to save assets")
    parser.add_argument("--size", type=int, default=LaserMirrorGenerator.DEFAULT_SIZE, help="Grid side length")
    parser.add_argument("--mirror-count", type=int, default=None, help="Fixed mirror count (sampled per puzzle when omitted)")
    parser.add_argument("--cell-size", type=int, default=LaserMirrorGenerator.DEFAULT_CELL_SIZE, help="Cell side length in pixels")
    parser.add_argument("--hard", action="store_true", help="Hide a third of the clues")
    parser.add_argument("--prompt", type=str, default=None)
    parser.add_argument("--seed", type=int, default=None)
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)
    generator = LaserMirrorGenerator(
        output_dir=args.output_dir,
        size=args.size,
        mirror_count=args.mirror_count,
        cell_size=args.cell_size,
        hard_mode=args.hard,
        prompt=args.prompt,
        seed=args.seed,
    )
    metadata_path = generator.output_dir / "data.json"
    generator.generate_dataset(args.count, metadata_path=metadata_path)


if __name__ == "__main__":
    main()
