"""Generate laser mirror puzzles for several grid sizes in one run."""

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional

from tqdm import tqdm

from laser_mirrors.puzzle.mirror import LaserMirrorGenerator

# Grid sizes offered by the game menu, tutorial size excluded.
DEFAULT_SIZES = [3, 5, 7, 9, 10, 11]


def generate_size_data(size: int, args: argparse.Namespace, base_output_dir: Path) -> List[dict]:
    """Generate ``args.count`` puzzles of one size and write their data.json."""

    output_dir = base_output_dir / f"size_{size}"
    generator = LaserMirrorGenerator(
        output_dir=output_dir,
        size=size,
        cell_size=args.cell_size,
        hard_mode=args.hard,
        seed=None if args.seed is None else args.seed + size,
    )

    logging.info(f"Generating {args.count} {size}x{size} puzzles...")

    records = []
    for _ in tqdm(range(args.count), desc=f"{size}x{size}"):
        try:
            records.append(generator.create_random_puzzle())
        except (ValueError, RuntimeError, OSError) as e:
            logging.warning(f"Failed to generate a {size}x{size} sample: {e}")

    generator.write_metadata(records, output_dir / "data.json", append=False)
    return [record.to_dict() for record in records]


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate a laser mirror dataset")
    parser.add_argument("--sizes", nargs="+", type=int, default=DEFAULT_SIZES, help="Grid sizes to generate")
    parser.add_argument("--count", type=int, default=10, help="Number of puzzles per size")
    parser.add_argument("--output-dir", type=str, required=True, help="Root directory for output")
    parser.add_argument("--cell-size", type=int, default=LaserMirrorGenerator.DEFAULT_CELL_SIZE, help="Cell size in pixels")
    parser.add_argument("--hard", action="store_true", help="Hide a third of the clues on 3x3 and larger")
    parser.add_argument("--seed", type=int, default=42, help="Random seed")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = _parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')

    root_output = Path(args.output_dir)
    root_output.mkdir(parents=True, exist_ok=True)

    all_metadata = []
    for size in args.sizes:
        if size < 1:
            logging.warning(f"Invalid size: {size}, skipping.")
            continue
        for record in generate_size_data(size, args, root_output):
            record["task_type"] = f"laser_mirror_{size}"
            all_metadata.append(record)

    global_meta_path = root_output / "all_metadata.jsonl"
    logging.info(f"Saving global metadata to {global_meta_path}")
    with open(global_meta_path, "w", encoding="utf-8") as f:
        for item in all_metadata:
            f.write(json.dumps(item, ensure_ascii=False) + "\n")

    logging.info("Done.")


if __name__ == "__main__":
    main()
