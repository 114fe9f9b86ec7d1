#!/usr/bin/env python3
"""
Command line face shape analysis.

Usage:
    face-shape-analyzer photo.jpg
    face-shape-analyzer sample_images/ --k 5 --json-dir json_output
"""
import argparse
import sys
from pathlib import Path
from typing import List

from .utils import get_config, get_logger, load_config, save_json, setup_logging
from .utils.exceptions import FaceShapeException

logger = get_logger(__name__)

IMAGE_SUFFIXES = ('.jpg', '.jpeg', '.png', '.bmp')


def collect_images(paths: List[str]) -> List[Path]:
    """Expand directories into their image files, keep files as given"""
    images = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            images.extend(sorted(p for p in path.iterdir() if p.suffix.lower() in IMAGE_SUFFIXES))
        else:
            images.append(path)
    return images


def format_result(analysis) -> str:
    """Result card: shape, confidence, recommendation and neighbor table"""
    lines = [
        f"   Face Shape: {analysis.label}",
        f"   Confidence: {analysis.confidence * 100:.0f}% "
        f"({analysis.knn.votes.get(analysis.label, 0)}/{analysis.knn.k} neighbors)",
    ]

    if analysis.recommendation:
        frames = analysis.recommendation.frames
        if analysis.recommendation.emoji:
            frames = f"{analysis.recommendation.emoji} {frames}"
        lines.append(f"   Recommended frames: {frames}")
        lines.append(f"   {analysis.recommendation.description}")

    features = analysis.features
    lines.append(
        f"   Ratios: H/W={features.height_width_ratio:.3f} "
        f"jaw/cheek={features.jaw_cheek_ratio:.3f} "
        f"chin/jaw={features.chin_jaw_ratio:.3f} "
        f"vertical={features.vertical_ratio:.3f}"
    )

    lines.append("   Nearest neighbors:")
    for rank, neighbor in enumerate(analysis.knn.neighbors, 1):
        lines.append(f"     {rank}. {neighbor.label:<8} distance={neighbor.distance:.4f}")

    return "\n".join(lines)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='face-shape-analyzer',
        description='Classify face shape from photos and recommend eyewear frames'
    )
    parser.add_argument('images', nargs='+', help='Image files or directories')
    parser.add_argument('--k', type=int, help='Number of neighbors (default: from config)')
    parser.add_argument('--profile', help='YAML shape profile (default: from config, else built-in)')
    parser.add_argument('--json-dir', help='Write one JSON result per image to this directory')
    parser.add_argument('--save-json', action='store_true',
                        help='Write JSON results to export.json_dir from config')
    parser.add_argument('--config', help='Path to config.yaml')
    return parser


def main(argv: List[str] = None, analyzer=None) -> int:
    """
    Args:
        argv: command line arguments (None: sys.argv)
        analyzer: prebuilt FaceShapeAnalyzer (None: built from arguments)

    Returns:
        exit code: 0 when every image was classified, 1 otherwise
    """
    args = build_parser().parse_args(argv)

    try:
        if args.config:
            load_config(args.config)
            setup_logging()

        owns_analyzer = analyzer is None
        if owns_analyzer:
            from .core import FaceShapeAnalyzer, load_profile
            profile = load_profile(args.profile) if args.profile else None
            analyzer = FaceShapeAnalyzer(profile=profile, k=args.k)
    except (FaceShapeException, ValueError) as e:
        logger.error(f"Initialization failed: {e}")
        print(f"❌ {e}", file=sys.stderr)
        return 1

    images = collect_images(args.images)
    if not images:
        print("❌ No images found", file=sys.stderr)
        return 1

    json_dir = args.json_dir
    if json_dir is None and args.save_json:
        json_dir = get_config().get('export.json_dir', 'json_output')

    try:
        failed = run_batch(analyzer, images, json_dir)
    finally:
        if owns_analyzer:
            analyzer.close()

    print("\n" + "=" * 60)
    print(f"Total: {len(images)}  Classified: {len(images) - failed}  Failed: {failed}")

    return 0 if failed == 0 else 1


def run_batch(analyzer, images: List[Path], json_dir: str = None) -> int:
    """
    Analyze each image, printing its result card

    A failed analysis or JSON write is reported and the batch continues.

    Returns:
        number of failed images
    """
    failed = 0

    for idx, image_path in enumerate(images, 1):
        print(f"\n[{idx}/{len(images)}] {image_path.name}")
        print("-" * 60)

        try:
            analysis = analyzer.analyze_image(image_path)
        except FaceShapeException as e:
            logger.warning(f"{image_path}: {e}")
            print(f"❌ {e}")
            failed += 1
            continue

        print(format_result(analysis))

        if json_dir:
            output_path = Path(json_dir) / f"{image_path.stem}.json"
            try:
                save_json(analysis, str(output_path), image_path=str(image_path))
            except OSError as e:
                logger.error(f"Failed to write {output_path}: {e}")
                print(f"❌ JSON export failed: {e}")
                failed += 1
                continue
            print(f"   💾 {output_path}")

    return failed


if __name__ == "__main__":
    sys.exit(main())
