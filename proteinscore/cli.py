"""
CLI interface for the ProteinScore label scanner.
"""

import argparse
import json
import logging
import math
import signal
import sys
import time
from numbers import Real
from pathlib import Path

import schedule

from .config import (
    FADE_OUT_DELAY_SECONDS,
    PROCESSING_INTERVAL_SECONDS,
    REGION_OF_INTEREST,
)
from .pipeline import (
    LabelPipeline,
    TextFragment,
    group_rows,
    is_nutrition_label,
    parse_calories,
    parse_protein,
)
from .session import ScanSession

# Global flag for graceful shutdown
running = True


def signal_handler(sig, frame):
    """Handle Ctrl+C gracefully"""
    global running
    print("\n\n🛑 Shutting down gracefully...")
    running = False


def format_result(result):
    """One-line summary of a ScanResult for the console."""
    return (
        f"{result.ratio:.1f} g protein / 100 cal "
        f"({result.reading.protein}g / {result.reading.calories} cal) "
        f"- {result.tier.label}"
    )


def scan_image(ocr_model, image_path, roi=REGION_OF_INTEREST):
    """
    Run OCR on one image and print every stage of the interpretation.

    Args:
        ocr_model: Initialized PaddleOCR model
        image_path: Path to the image
        roi: Region of interest, or None for the whole image

    Returns:
        ScanResult or None
    """
    from .ocr import load_image, recognize_fragments

    print("\n" + "=" * 80)
    print(f"Testing: {image_path.name}")
    print("=" * 80)

    try:
        image = load_image(image_path)
    except (OSError, ValueError) as e:
        print(f"❌ Failed to load image: {e}")
        return None

    fragments, ocr_stats = recognize_fragments(ocr_model, image, roi=roi)
    if not fragments:
        print("❌ No text recognized")
        return None

    print(
        f"\n📝 Raw OCR output ({len(fragments)} items, "
        f"{ocr_stats['ocr_processing_time_seconds']}s):"
    )
    for i, fragment in enumerate(fragments):
        print(f"  {i}: {fragment.text}")

    rows = group_rows(fragments)
    print(f"\n🔄 Row-Grouped output ({len(rows)} rows):")
    for i, row in enumerate(rows):
        print(f"  {i}: {row}")

    has_label = is_nutrition_label(rows)
    print(f"\n🔍 Nutrition Facts detected: {'✅ YES' if has_label else '❌ NO'}")

    calories = parse_calories(rows)
    protein = parse_protein(rows)
    print(f"🔥 Calories: {calories}" if calories is not None else "❌ Calories: NOT FOUND")
    print(f"💪 Protein: {protein}g" if protein is not None else "❌ Protein: NOT FOUND")

    # Each image is an independent label, so no smoothing across images
    result = LabelPipeline().process_lines(rows)
    if result is not None:
        print(f"\n✨ RESULT: {format_result(result)}")
    else:
        print("\n❌ FAILED: Could not extract both values")
    return result


def run_scan(paths, roi=REGION_OF_INTEREST):
    """Scan a set of images (files or directories) one by one."""
    from .ocr import init_ocr, iter_image_paths

    image_paths = list(iter_image_paths(paths))
    if not image_paths:
        print("❌ Error: No images found")
        return 1

    print(f"📁 Found {len(image_paths)} images")
    print("🔧 Initializing PaddleOCR...")
    ocr_model = init_ocr()
    print("✅ PaddleOCR initialized")

    found = 0
    for image_path in image_paths:
        if scan_image(ocr_model, image_path, roi=roi) is not None:
            found += 1

    print("\n" + "=" * 80)
    print(f"Testing complete! {found}/{len(image_paths)} labels read")
    print("=" * 80)
    return 0


def _parse_fragment(entry):
    if isinstance(entry, dict):
        return TextFragment(
            text=entry["text"],
            vertical_center=entry["vertical_center"],
            horizontal_start=entry["horizontal_start"],
        )
    text, vertical_center, horizontal_start = entry
    return TextFragment(text, vertical_center, horizontal_start)


def _parse_timestamp(value):
    if value is None:
        return None
    if not isinstance(value, Real) or isinstance(value, bool):
        raise ValueError(f"Timestamp must be a number of seconds: {value!r}")
    try:
        timestamp = float(value)
    except OverflowError as e:
        raise ValueError(f"Timestamp out of range: {value!r}") from e
    if not math.isfinite(timestamp):
        raise ValueError(f"Timestamp must be finite: {value!r}")
    return timestamp


def parse_pass(entry):
    """
    Parse one recorded OCR pass.

    A pass is either a list (of fragment objects or of pre-grouped line
    strings) or an object with "fragments" or "lines" and an optional "t"
    timestamp in seconds.

    Returns:
        Tuple of (timestamp or None, "fragments" or "lines", payload)
    """
    timestamp = None
    if isinstance(entry, dict):
        timestamp = _parse_timestamp(entry.get("t"))
        if "lines" in entry:
            return timestamp, "lines", [str(line) for line in entry["lines"]]
        entry = entry.get("fragments", [])

    if not isinstance(entry, list):
        raise ValueError(f"Unrecognized pass: {entry!r}")
    if all(isinstance(item, str) for item in entry) and entry:
        return timestamp, "lines", list(entry)
    try:
        return timestamp, "fragments", [_parse_fragment(item) for item in entry]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Malformed fragment in pass: {e}") from e


def load_passes(path):
    """Load recorded OCR passes from a JSON file."""
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("passes", [])
    if not isinstance(data, list):
        raise ValueError("Expected a list of passes")
    return [parse_pass(entry) for entry in data]


def run_replay(
    path,
    processing_interval=PROCESSING_INTERVAL_SECONDS,
    fade_out_delay=FADE_OUT_DELAY_SECONDS,
):
    """
    Feed recorded OCR passes through a scan session.

    Passes without a timestamp are spaced exactly one processing interval
    apart.
    """
    try:
        passes = load_passes(path)
    except (OSError, ValueError) as e:
        print(f"❌ Error: Could not load passes from {path}: {e}")
        return 1

    session = ScanSession(
        processing_interval=processing_interval, fade_out_delay=fade_out_delay
    )

    print(f"🎞️  Replaying {len(passes)} passes from {path}")
    clock = 0.0
    for index, (timestamp, kind, payload) in enumerate(passes):
        clock = timestamp if timestamp is not None else index * processing_interval
        if kind == "lines":
            result = session.submit_lines(payload, now=clock)
        else:
            result = session.submit(payload, now=clock)

        shown = session.current_result(now=clock)
        if result is not None:
            print(f"  [{clock:6.2f}s] ✅ {format_result(result)}")
        elif shown is not None:
            print(f"  [{clock:6.2f}s] ⏳ no reading, showing {format_result(shown)}")
        else:
            print(f"  [{clock:6.2f}s] ❌ no reading")

    final = session.current_result(now=clock)
    print(f"\n📊 Stats: {session.pipeline.stats}")
    if final is not None:
        print(json.dumps(final.to_dict(), indent=2))
    return 0


def watch_tick(session, ocr_model, roi):
    """Capture one frame, run it through the session and print the display state."""
    from .capture import capture_frame
    from .ocr import recognize_fragments

    frame, _ = capture_frame()
    if frame is None:
        return

    fragments, _ = recognize_fragments(ocr_model, frame, roi=roi)
    result = session.submit(fragments)
    if result is not None:
        print(f"✅ {format_result(result)}")
    elif session.current_result() is None:
        print("🔎 Looking for a nutrition label...")


def run_watch(
    interval=PROCESSING_INTERVAL_SECONDS,
    fade_out_delay=FADE_OUT_DELAY_SECONDS,
    roi=REGION_OF_INTEREST,
):
    """Scan the screen on a fixed cadence until interrupted."""
    from .ocr import init_ocr

    print("=" * 60)
    print("📷 ProteinScore - Watch Mode")
    print("=" * 60)
    print(f"Interval: {interval} second(s)")
    print(f"Fade-out delay: {fade_out_delay} second(s)")
    print(f"Region of interest: {roi if roi else 'full frame'}")
    print("=" * 60)

    print("🔧 Initializing PaddleOCR...")
    ocr_model = init_ocr()
    print("✅ PaddleOCR initialized")
    print("Press Ctrl+C to stop\n")

    session = ScanSession(processing_interval=interval, fade_out_delay=fade_out_delay)

    schedule.every(interval).seconds.do(watch_tick, session, ocr_model, roi)

    while running:
        schedule.run_pending()
        time.sleep(0.05)

    schedule.clear()
    print("👋 Goodbye!")
    return 0


def _roi_from_args(args):
    return None if args.no_roi else REGION_OF_INTEREST


def run(argv=None):
    """Main application entry point"""
    parser = argparse.ArgumentParser(
        description="ProteinScore - Read nutrition labels and rate grams of protein per 100 calories"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show pipeline trace logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Scan command
    scan_parser = subparsers.add_parser("scan", help="Scan label images")
    scan_parser.add_argument(
        "images",
        nargs="+",
        help="Image files or directories of images",
    )
    scan_parser.add_argument(
        "--no-roi",
        action="store_true",
        help="Process the whole image instead of the central 70%%",
    )

    # Replay command
    replay_parser = subparsers.add_parser(
        "replay", help="Replay recorded OCR passes from a JSON file"
    )
    replay_parser.add_argument("file", type=str, help="JSON file of passes")

    # Watch command
    watch_parser = subparsers.add_parser(
        "watch", help="Scan the screen continuously"
    )
    watch_parser.add_argument(
        "--no-roi",
        action="store_true",
        help="Process the whole screen instead of the central 70%%",
    )

    for subparser in (replay_parser, watch_parser):
        subparser.add_argument(
            "--interval",
            type=float,
            default=PROCESSING_INTERVAL_SECONDS,
            help=f"Seconds between OCR passes (default: {PROCESSING_INTERVAL_SECONDS})",
        )
        subparser.add_argument(
            "--fade-out",
            type=float,
            default=FADE_OUT_DELAY_SECONDS,
            help=f"Seconds a reading stays displayed (default: {FADE_OUT_DELAY_SECONDS})",
        )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "scan":
        return run_scan(args.images, roi=_roi_from_args(args))

    if args.command == "replay":
        if not Path(args.file).exists():
            print(f"❌ Error: File not found: {args.file}")
            return 1
        return run_replay(
            args.file, processing_interval=args.interval, fade_out_delay=args.fade_out
        )

    if args.command == "watch":
        signal.signal(signal.SIGINT, signal_handler)
        return run_watch(
            interval=args.interval,
            fade_out_delay=args.fade_out,
            roi=_roi_from_args(args),
        )

    return 1


def main():
    sys.exit(run())
