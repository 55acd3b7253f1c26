"""Command-line entry point for the directory watcher."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

from .cancel import CancelSignal
from .config import DEFAULT_REFRESH_INTERVAL, ConfigError, WatcherConfig, load_config, parse_refresh_interval
from .errors import ChannelClosedError, WatchError
from .sink import EventChannel
from .watcher import DirWatcher, WatchHandle

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Poll a directory tree and print created/removed files")
    parser.add_argument(
        "path",
        nargs="?",
        help="Directory to watch (overrides watcher.root_path from the config file)",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a YAML configuration file",
    )
    parser.add_argument(
        "--interval",
        default=None,
        help=f"Refresh interval in seconds (default: {DEFAULT_REFRESH_INTERVAL})",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )
    return parser


def resolve_settings(args: argparse.Namespace) -> Tuple[WatcherConfig, str]:
    """Merge the config file and command-line overrides."""

    log_level = "INFO"
    if args.config is not None:
        app_config = load_config(Path(args.config))
        watcher_cfg = app_config.watcher
        log_level = app_config.log_level
    elif args.path is None:
        raise ConfigError("A directory path or --config file is required")
    else:
        watcher_cfg = WatcherConfig(root_path=Path(args.path))

    if args.path is not None:
        watcher_cfg.root_path = Path(args.path)
    if args.interval is not None:
        watcher_cfg.refresh_interval = parse_refresh_interval(args.interval, field_name="--interval")
    if args.log_level is not None:
        log_level = args.log_level
    return watcher_cfg, log_level


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        watcher_cfg, log_level = resolve_settings(args)
    except ConfigError as exc:
        logging.basicConfig(format="%(asctime)s [%(levelname)s] %(name)s - %(message)s")
        logging.error("%s", exc)
        return 2

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    channel = EventChannel()
    watcher = DirWatcher(watcher_cfg.refresh_interval, sink=channel)
    cancel = CancelSignal()
    handle = watcher.start(cancel, watcher_cfg.root_path)
    try:
        _print_events(channel, handle, cancel)
        handle.result()
    except WatchError as exc:
        logging.error("%s", exc)
        return 1
    finally:
        watcher.close()
    return 0


def _print_events(channel: EventChannel, handle: WatchHandle, cancel: CancelSignal) -> None:
    while True:
        try:
            event = channel.receive(timeout=0.2)
        except TimeoutError:
            if not handle.is_alive():
                return
            continue
        except ChannelClosedError:
            return
        except KeyboardInterrupt:
            logger.info("Interrupted by user; stopping watch")
            cancel.cancel("interrupted by user")
            continue
        print(f"{event.event_type.value}\t{event.path}", flush=True)


if __name__ == "__main__":
    sys.exit(main())
