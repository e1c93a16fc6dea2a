"""Main module for the image-cpr CLI."""

import sys
import logging
import argparse
from typing import Any, Dict

from . import __version__
from .core import (
    ImageCprError,
    ImagePipeline,
    content_type,
    get_logger,
    parse_request,
    read_config,
    set_debug,
)
from .core.codecs import SUPPORTED_TAGS
from .core.observability import MetricsCollector
from .storage import ByteStorage, uri_suffix

RECT_FIELDS = ("x", "y", "width", "height")


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the ``image-cpr`` command."""
    parser = argparse.ArgumentParser(
        prog="image-cpr",
        description="image-cpr - crop, resize and watermark a single image",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Crop a PNG and write it as WebP
  image-cpr transform --input photo.png --output photo.webp --crop 10 10 50 50

  # Resize from S3 to a local JPEG at quality 90
  image-cpr transform --input s3://bucket/in.png --output out.jpg \\
                      --size 200 200 --quality 90

  # Watermark using a JSON config for everything else
  image-cpr transform --input in.jpg --output out.jpg --config job.json \\
                      --watermark logo.png --watermark-position 0 0 64 64 --opacity 50
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    transform_parser = subparsers.add_parser(
        "transform", help="Transform one image from input to output"
    )
    transform_parser.add_argument(
        "--input", required=True, help="Input image path or s3:// URI"
    )
    transform_parser.add_argument(
        "--output", required=True, help="Output image path or s3:// URI"
    )
    transform_parser.add_argument("--config", help="JSON configuration file")
    transform_parser.add_argument(
        "--format", help="Input format tag (default: input file extension)"
    )
    transform_parser.add_argument(
        "--output-format",
        help="Output format tag (default: output file extension, else input format)",
    )
    transform_parser.add_argument(
        "--quality", type=int, help="JPEG quality 0-100 (default: 80)"
    )
    transform_parser.add_argument(
        "--crop", type=int, nargs=4, metavar=("X", "Y", "W", "H"), help="Crop rectangle"
    )
    transform_parser.add_argument(
        "--size", type=int, nargs=2, metavar=("W", "H"), help="Resize target"
    )
    transform_parser.add_argument("--watermark", help="Watermark image path or s3:// URI")
    transform_parser.add_argument(
        "--watermark-position",
        type=int,
        nargs=4,
        metavar=("X", "Y", "W", "H"),
        help="Watermark placement rectangle",
    )
    transform_parser.add_argument(
        "--opacity", type=float, help="Watermark opacity percentage 0-100 (default: 100)"
    )
    transform_parser.add_argument(
        "--use-watermark-alpha",
        action="store_true",
        help="Blend with the watermark's own alpha instead of --opacity",
    )
    transform_parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )

    subparsers.add_parser("version", help="Show version information")

    return parser


def build_config(args: argparse.Namespace, storage: ByteStorage) -> Dict[str, Any]:
    """
    Merge the JSON config file and command-line options into one mapping.

    Command-line options win over config keys. Format tags fall back to
    the input and output file extensions.
    """
    config: Dict[str, Any] = read_config(args.config) if args.config else {}

    if args.format:
        config["format"] = args.format
    elif "format" not in config and "input_format" not in config:
        config["format"] = uri_suffix(args.input)

    if args.output_format:
        config["output_format"] = args.output_format
    elif "output_format" not in config:
        suffix = uri_suffix(args.output)
        if suffix in SUPPORTED_TAGS:
            config["output_format"] = suffix

    if args.quality is not None:
        config["quality"] = args.quality
    if args.crop:
        config["crop"] = dict(zip(RECT_FIELDS, args.crop))
    if args.size:
        config["size"] = dict(zip(("width", "height"), args.size))

    watermark_options = (
        args.watermark,
        args.watermark_position,
        args.opacity,
        args.use_watermark_alpha or None,
    )
    if any(option is not None for option in watermark_options):
        watermark = dict(config.get("watermark") or {})
        if args.watermark:
            watermark["content"] = storage.read(args.watermark)
        if args.watermark_position:
            watermark["position"] = list(args.watermark_position)
        if args.opacity is not None:
            watermark["opacity"] = args.opacity
        if args.use_watermark_alpha:
            watermark["use_watermark_alpha"] = True
        config["watermark"] = watermark

    return config


def log_stage_timings(logger: logging.Logger, metrics: MetricsCollector) -> None:
    """Log per-stage durations and the run total at DEBUG level."""
    for metric in metrics.get_metrics():
        logger.debug(f"Stage {metric.operation}: {metric.duration_ms:.1f} ms")

    summary = metrics.get_summary()
    if summary:
        logger.debug(
            f"{summary['total_operations']} stages in "
            f"{summary['total_duration'] * 1000:.1f} ms "
            f"(slowest {summary['max_duration'] * 1000:.1f} ms)"
        )


def run_transform(args: argparse.Namespace, storage: ByteStorage) -> None:
    """Read, transform and write one image as described by ``args``."""
    logger = get_logger("image-cpr.cli")
    if args.debug:
        set_debug(logger)

    request = parse_request(build_config(args, storage))
    input_bytes = storage.read(args.input)

    logger.info(f"Transforming {args.input} -> {args.output}")
    metrics = MetricsCollector()
    output_bytes = ImagePipeline(metrics_collector=metrics).run(input_bytes, request)
    if args.debug:
        log_stage_timings(logger, metrics)

    storage.write(
        args.output, output_bytes, content_type(request.resolved_output_format)
    )
    logger.info(f"Wrote {len(output_bytes)} bytes to {args.output}")


def main() -> None:
    """Entry point for the ``image-cpr`` command-line interface."""
    parser = build_parser()
    args = parser.parse_args()

    if args.command == "transform":
        try:
            run_transform(args, ByteStorage())
        except KeyboardInterrupt:
            get_logger("image-cpr.cli").warning("Transform interrupted by user.")
            sys.exit(130)
        except ImageCprError as e:
            get_logger("image-cpr.cli").error(f"Transform failed: {e}")
            sys.exit(1)

    elif args.command == "version":
        print("image-cpr CLI")
        print(f"Version {__version__}")
        sys.exit(0)

    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
