"""
Summarize a directory of pipe-delimited log files.

Usage:
    python -m app.scripts.summarize [LOGS_DIR] [--strategy counter|job_id]
        [--start REGEX] [--end REGEX] [--id-pattern REGEX] [--no-packets]

Pattern defaults come from the DEFAULT_PACKET_* settings (environment / .env).
Prints the summary, packet colors and any warnings as JSON.
"""

import argparse
import json
import sys
from typing import List, Optional

from app.core.config import settings
from app.schemas.log_entry import PacketStrategy, PacketTrackingOptions
from app.services.colors import get_packet_color_map
from app.services.log_files import LogFileRepository
from app.services.pipeline import extract_packet_ids, run_pipeline
from app.services.summary import build_log_summary


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Summarize pipe-delimited log files")
    parser.add_argument("logs_dir", nargs="?", default=settings.LOGS_DIR)
    parser.add_argument(
        "--strategy",
        choices=[s.value for s in PacketStrategy],
        default=settings.DEFAULT_PACKET_STRATEGY,
    )
    parser.add_argument("--start", default=settings.DEFAULT_PACKET_START_PATTERN, help="Packet start regex")
    parser.add_argument("--end", default=settings.DEFAULT_PACKET_END_PATTERN, help="Packet end regex")
    parser.add_argument("--id-pattern", default=settings.DEFAULT_PACKET_ID_PATTERN, help="Packet id regex")
    parser.add_argument("--no-packets", action="store_true", help="Disable packet tracking")
    return parser


def summarize(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    repo = LogFileRepository(args.logs_dir)
    if not repo.directory_exists():
        print(f"Logs directory not found: {repo.logs_dir}", file=sys.stderr)
        return 1

    options = PacketTrackingOptions(
        enable_packets=not args.no_packets,
        packet_start_pattern=args.start,
        packet_end_pattern=args.end,
        packet_id_pattern=args.id_pattern,
        strategy=PacketStrategy(args.strategy),
    )
    result = run_pipeline(repo.read_log_files(), options)

    output = {
        "summary": build_log_summary(result.entries).model_dump(),
        "packet_colors": get_packet_color_map(extract_packet_ids(result.entries)),
        "warnings": result.warnings,
    }
    print(json.dumps(output, indent=2))
    return 0


def main() -> None:
    sys.exit(summarize())


if __name__ == "__main__":
    main()
