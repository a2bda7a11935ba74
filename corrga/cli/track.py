"""
Interactive tracking CLI.

Opens a video file (or the attached camera), lets the user select a template
region with the mouse and visualises the genetic search for it.
"""

import argparse
import sys
from pathlib import Path
from typing import Optional

from ..core.config import Config
from ..core.exceptions import CorrGAException
from ..core.logging import setup_logging, get_logger, log_with_correlation
from ..driver import FrameSource, InteractiveTracker


def _load_config(parsed_args: argparse.Namespace) -> Config:
    config = Config(config_file=parsed_args.config, env_file=parsed_args.env_file)
    if parsed_args.camera is not None:
        config.viewer.camera_index = parsed_args.camera
    if parsed_args.delay is not None:
        config.viewer.event_loop_delay_ms = parsed_args.delay
    if parsed_args.seed is not None:
        config.search.seed = parsed_args.seed
    return config


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="corrga track",
        description="Select a region in a video or camera feed and track it with a genetic search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Keys:
  x  exit
  r  reset the selection and the search
        """
    )
    parser.add_argument('--config', '-c', type=Path, help='Path to configuration file (JSON)')
    parser.add_argument('--env-file', '-e', type=Path, help='Path to .env file with overrides')

    source_group = parser.add_mutually_exclusive_group()
    source_group.add_argument('--video', type=str, help='Video file to read instead of the camera')
    source_group.add_argument('--camera', type=int, help='Camera index (default: from config, 0)')

    parser.add_argument('--delay', type=int, help='Event loop delay in milliseconds (default: 200)')
    parser.add_argument('--seed', type=int, help='Random seed for the search')
    parser.add_argument('--log-level', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], default='INFO', help='Logging level')
    return parser


@log_with_correlation
def run_tracker(parsed_args: argparse.Namespace, config: Config) -> None:
    source = FrameSource(parsed_args.video if parsed_args.video else config.viewer.camera_index)
    with source:
        InteractiveTracker(source, config=config).run()


def track_command(args: Optional[list] = None) -> None:
    parsed_args = _build_parser().parse_args(args)

    setup_logging(level=parsed_args.log_level, enable_file=False)
    logger = get_logger(__name__)

    try:
        config = _load_config(parsed_args)
        run_tracker(parsed_args, config)
    except CorrGAException as e:
        logger.error(f"Tracking failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    track_command()
