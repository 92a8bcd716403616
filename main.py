"""api-log-analyzer: error, usage and security reports over API log files."""

import logging
import sys
from argparse import ArgumentParser
from dataclasses import replace

from log_analyzer.analyzer import LogAnalyzer
from log_analyzer.config import load_config, load_yaml_config
from log_analyzer.errors import ConfigError
from log_analyzer.formatter import USAGE_FOOTER, get_formatter
from log_analyzer.simulator import write_sample_logs

logger = logging.getLogger(__name__)

COMMANDS = ("summary", "errors", "stats", "security", "generate")


def parse_hours(value: str | None) -> float | None:
    """Lenient hours argument: anything non-numeric or non-positive means default."""
    if value is None:
        return None
    try:
        hours = float(value)
    except ValueError:
        return None
    return hours if hours > 0 else None


def build_parser() -> ArgumentParser:
    """Build the CLI argument parser."""
    parser = ArgumentParser(
        prog="log-analyzer",
        description="Summarize errors, API usage and security events from log files.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default="summary",
        choices=COMMANDS,
        help="Report to produce (default: summary)",
    )
    parser.add_argument(
        "hours",
        nargs="?",
        help="Hours to look back (default: 24)",
    )
    parser.add_argument(
        "--logs-dir",
        help="Directory holding error.log, api.log and combined.log",
    )
    parser.add_argument(
        "--config",
        help="Path to a YAML config file",
    )
    parser.add_argument(
        "--output",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument(
        "--count",
        type=int,
        default=100,
        help="Entries to write with the generate command (default: 100)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Random seed for the generate command",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log diagnostics at DEBUG level",
    )
    return parser


def run(args) -> int:
    config = load_config(load_yaml_config(args.config))
    if args.logs_dir:
        config = replace(config, logs_dir=args.logs_dir)
    logging.getLogger().setLevel(logging.DEBUG if args.verbose else config.log_level)
    logger.debug("Using logs directory %s", config.logs_dir)

    hours = parse_hours(args.hours)
    analyzer = LogAnalyzer(config)

    if args.command == "generate":
        written = write_sample_logs(config, count=args.count, hours=hours or config.default_hours,
                                    seed=args.seed)
        for name, count in written.items():
            print(f"{config.source_path(name)}: {count} lines")
        return 0

    if args.command == "errors":
        data = analyzer.get_recent_errors(hours)
    elif args.command == "stats":
        data = analyzer.get_api_usage_stats(hours)
    elif args.command == "security":
        data = analyzer.get_security_events(hours)
    else:
        data = analyzer.generate_summary_report(hours)

    formatter = get_formatter(args.command, args.output, anonymous_user=config.anonymous_user)
    output = formatter(data, analyzer.window_hours(hours))
    if args.output == "json":
        print(output)
        return 0

    print("API Log Analyzer\n")
    print(output)
    print()
    print(USAGE_FOOTER)
    return 0


def main():
    logging.basicConfig(
        level=logging.WARNING,
        format="%(asctime)s [ANALYZER] %(levelname)s %(message)s",
        stream=sys.stderr,
    )
    parser = build_parser()
    args = parser.parse_args()
    try:
        sys.exit(run(args))
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        sys.exit(0)
    except BrokenPipeError:
        sys.exit(0)
