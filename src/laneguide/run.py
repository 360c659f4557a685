#!/usr/bin/env python3
"""
Lane Guidance Runner

Replays recorded footage through the lane guidance pipeline on a periodic
timer, the same way a live camera would drive it:
1. Pulls one encoded frame per tick from a video file or image directory
2. Runs the pipeline (or reuses the cached result on skipped ticks)
3. Shows the guidance state in a live terminal footer
4. Optionally saves annotated frames and broadcasts results over ZMQ

Usage:
    # Replay a video at 10 ticks per second
    lane-guide --input walk.mp4

    # Process a directory of images as fast as possible and keep the overlays
    lane-guide --input frames/ --interval 0 --save-dir out/

    # Publish results for out-of-process guidance consumers
    lane-guide --input walk.mp4 --broadcast tcp://*:5570
"""

import argparse
import signal
import sys
import time
from dataclasses import replace
from pathlib import Path

from laneguide.detection.core.config import ConfigManager
from laneguide.detection.pipeline import LaneGuidePipeline
from laneguide.runner import FrameTicker, PeriodicRunner
from laneguide.sources import open_source
from laneguide.utils.terminal import TerminalDisplay, create_progress_bar, format_tick_stats


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lane guidance runner")

    parser.add_argument(
        "--input",
        type=str,
        required=True,
        help="Video file or directory of images to replay",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file (default: <project-root>/config.yaml)",
    )
    parser.add_argument(
        "--interval",
        type=float,
        default=None,
        help="Tick period in seconds (default: runner.tick_interval_s from config)",
    )
    parser.add_argument(
        "--scale",
        type=float,
        default=None,
        help="Override processing scale (0 < s <= 1)",
    )
    parser.add_argument(
        "--skip-frames",
        type=int,
        default=None,
        help="Override number of skipped ticks between processed frames",
    )
    parser.add_argument(
        "--save-dir",
        type=str,
        default=None,
        help="Directory to write annotated frames to",
    )
    parser.add_argument(
        "--broadcast",
        type=str,
        default=None,
        help="ZMQ URL to publish results on (e.g. tcp://*:5570)",
    )
    parser.add_argument(
        "--no-footer",
        action="store_true",
        help="Disable the live terminal footer",
    )

    return parser


def main(argv=None):
    """Main entry point for the lane guidance runner."""
    args = build_parser().parse_args(argv)

    config = ConfigManager.load(args.config)
    print("✓ Configuration loaded")

    overrides = {}
    if args.scale is not None:
        overrides['processing_scale'] = args.scale
    if args.skip_frames is not None:
        overrides['skip_frames'] = args.skip_frames
    if overrides:
        try:
            config.processing = replace(config.processing, **overrides)
        except ValueError as e:
            print(f"✗ Invalid override: {e}")
            return 2

    interval = args.interval if args.interval is not None else config.runner.tick_interval_s

    try:
        source = open_source(args.input)
    except (FileNotFoundError, IOError) as e:
        print(f"✗ {e}")
        return 1
    total_frames = len(source)
    print(f"✓ Opened {args.input} ({total_frames} frames)")

    save_dir = None
    if args.save_dir:
        save_dir = Path(args.save_dir)
        save_dir.mkdir(parents=True, exist_ok=True)

    broadcaster = None
    broadcast_url = args.broadcast or (config.broadcast.bind_url if config.broadcast.enabled else None)
    if broadcast_url:
        from laneguide.integration.zmq import ResultBroadcaster

        broadcaster = ResultBroadcaster(
            bind_url=broadcast_url,
            send_frames=config.broadcast.send_frames,
        )
        print(f"✓ Broadcasting on {broadcast_url}")

    pipeline = LaneGuidePipeline(config)
    print(f"✓ Pipeline ready: {pipeline.get_name()}")
    print(f"  Parameters: {pipeline.get_parameters()}")

    ticker = FrameTicker(pipeline)
    runner = PeriodicRunner(ticker, source, interval_s=interval)
    display = TerminalDisplay(enable_footer=not args.no_footer)

    start_time = time.time()
    detected_count = 0
    result_count = 0

    def on_result(result):
        nonlocal detected_count, result_count
        result_count += 1
        if result.is_lane_detected:
            detected_count += 1

        if save_dir is not None:
            (save_dir / f"frame_{ticker.tick_count:06d}.jpg").write_bytes(result.processed_image)
        if broadcaster is not None:
            broadcaster.publish(result)

        elapsed = time.time() - start_time
        fps = ticker.tick_count / elapsed if elapsed > 0 else 0.0
        display.update_footer(
            result,
            format_tick_stats(
                fps,
                ticker.tick_count,
                result.processing_time_ms,
                dropped=ticker.dropped_count,
                extra_info=create_progress_bar(ticker.tick_count, total_frames) if total_frames else "",
            ),
        )

    runner.add_listener(on_result)

    def signal_handler(sig, frame):
        display.print("Received interrupt signal", prefix="\n⚠")
        runner.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    display.print("\n" + "=" * 60)
    display.print("Lane Guidance Running")
    display.print("=" * 60)
    display.print(f"Tick interval: {interval:.3f}s")
    display.print("Press Ctrl+C to stop")
    display.print("=" * 60 + "\n")

    display.init_footer()
    try:
        runner.start()
        while not runner.wait(timeout=0.2):
            pass
    finally:
        runner.stop()
        display.clear_footer()
        pipeline.dispose()
        if broadcaster is not None:
            broadcaster.close()
        if hasattr(source, 'close'):
            source.close()

    elapsed = time.time() - start_time
    print("\n" + "=" * 60)
    print("Summary")
    print("=" * 60)
    print(f"Ticks:            {ticker.tick_count}")
    print(f"Frames processed: {pipeline.processed_count}")
    print(f"Failed frames:    {pipeline.failure_count}")
    print(f"Dropped ticks:    {ticker.dropped_count}")
    print(f"Lane detected:    {detected_count}/{result_count}")
    print(f"Elapsed:          {elapsed:.1f}s")
    print("✓ Lane guidance stopped")

    return 0


if __name__ == "__main__":
    sys.exit(main())
