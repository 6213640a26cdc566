"""
Scanner fusion workflow

Loads a scanner report, fuses all readings into one global map and reports
the number of distinct points and the largest Manhattan distance between
any two scanners.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from scanner_fusion.preprocessing.loader import ScannerReportLoader
from scanner_fusion.fusion.fusion_engine import FusionEngine, UnresolvableConfigurationError
from scanner_fusion.utils.config import load_config, AppConfig
from scanner_fusion.utils.export import export_points_to_csv, export_fusion_summary
from scanner_fusion.utils.logging import setup_logger, set_package_log_level


def main() -> int:
    """
    Main function to run the scanner fusion workflow.
    """
    parser = argparse.ArgumentParser(description="Scanner Fusion Workflow")
    parser.add_argument(
        "report",
        nargs="?",
        default=None,
        help="Scanner report with '--- scanner N ---' blocks (defaults to paths.input_file)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument(
        "--no-fingerprint",
        action="store_true",
        help="Disable fingerprint pruning (same result, slower).",
    )
    parser.add_argument(
        "--parallel",
        action="store_true",
        help="Detect overlaps of each fusion pass in worker processes.",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Number of worker processes for --parallel (default: cpu_count - 1).",
    )
    parser.add_argument(
        "--export-dir",
        type=str,
        default=None,
        help="Write fused points (CSV) and a JSON summary into this directory.",
    )
    parser.add_argument(
        "--visualize",
        action="store_true",
        help="Open a 3D view of the fused map in the browser.",
    )
    args = parser.parse_args()

    # Load configuration and apply CLI overrides
    cfg: AppConfig = load_config(args.config)
    if args.report:
        cfg.paths.input_file = args.report
    if args.no_fingerprint:
        cfg.fusion.use_fingerprint = False
    if args.parallel:
        cfg.parallel.enabled = True
    if args.workers is not None:
        cfg.parallel.n_workers = args.workers
    if args.visualize:
        cfg.visualization.enabled = True

    log_level = getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logger = setup_logger(__name__, level=log_level, log_file=cfg.logging.file)
    set_package_log_level(log_level, cfg.logging.file)

    logger.info("Scanner Fusion Workflow")
    logger.info("=======================")

    if not cfg.paths.input_file:
        logger.error("No scanner report given (pass a path or set paths.input_file in the config).")
        return 2

    try:
        readings = ScannerReportLoader().load(cfg.paths.input_file)
    except (FileNotFoundError, ValueError) as e:
        logger.error(f"Could not load scanner report: {e}")
        return 1

    engine = FusionEngine.from_config(cfg)
    try:
        result = engine.fuse(readings)
    except UnresolvableConfigurationError as e:
        logger.error(f"Fusion failed: {e}")
        return 1

    logger.info(f"Distinct points: {result.point_count}")
    logger.info(f"Largest Manhattan distance between scanners: {result.max_manhattan_distance()}")
    for sid, pos in zip(result.scanner_ids, result.positions):
        logger.debug(f"  scanner {sid}: {pos}")

    print(result.point_count)
    print(result.max_manhattan_distance())

    if args.export_dir:
        out_dir = Path(args.export_dir)
        export_points_to_csv(result.points, out_dir / "fused_points.csv")
        export_fusion_summary(result, out_dir / "fusion_summary.json")

    if cfg.visualization.enabled:
        from scanner_fusion.visualization.point_cloud import FusionVisualizer

        FusionVisualizer(point_size=cfg.visualization.point_size).show(
            result.points, result.positions, result.scanner_ids
        )

    return 0


if __name__ == "__main__":
    sys.exit(main())
