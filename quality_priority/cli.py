from __future__ import annotations

import argparse
import logging
from pathlib import Path

from pydantic import ValidationError

from .app import QualityPriorityApp
from .commands import check as cmd_check
from .commands import profiles as cmd_profiles
from .commands import rank as cmd_rank
from .commands import table as cmd_table
from .config import Settings, find_config
from .engine import RankingRequest
from .errors import CONFIG_INVALID, ProfileNotFoundError
from .models import AxisFilters

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def __init__(self, fmt: str, *, use_color: bool = True) -> None:
        super().__init__(fmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno) if self.use_color else None
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


class WarningBufferHandler(logging.Handler):
    """Collects WARNING and above so the run can end with a summary."""

    def __init__(self) -> None:
        super().__init__(level=logging.WARNING)
        self.records: list[str] = []

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
        except Exception:  # pragma: no cover
            msg = record.getMessage()
        self.records.append(msg)

    def summary(self) -> list[str]:
        # the same unparseable rule is reported by every profile load
        return list(dict.fromkeys(self.records))


def configure_logging(level_name: str) -> WarningBufferHandler:
    log_level = getattr(logging, level_name.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)

    color_handler = logging.StreamHandler()
    color_handler.setFormatter(
        ColorFormatter(LOG_FORMAT, use_color=color_handler.stream.isatty())
    )
    root_logger.addHandler(color_handler)

    warn_buffer = WarningBufferHandler()
    warn_buffer.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(warn_buffer)
    return warn_buffer


def _load_rules_payload(args: argparse.Namespace) -> str | None:
    rules_file = getattr(args, "rules_file", None)
    if rules_file:
        try:
            return Path(rules_file).read_text(encoding="utf-8")
        except OSError as exc:
            raise SystemExit(f"Cannot read rules file {rules_file}: {exc}")
    return getattr(args, "rules", None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Quality profile priority ranking")
    parser.add_argument("--config", type=Path, help="Path to config.yaml")
    parser.add_argument("--log-level", default="INFO", help="Python logging level")

    subparsers = parser.add_subparsers(dest="command", required=True)
    rank_parser = subparsers.add_parser(
        "rank", help="Rank every attribute combination of a profile"
    )
    rank_parser.add_argument("profile", help="Quality profile name")
    for axis in ("resolution", "quality", "codec", "audio"):
        rank_parser.add_argument(
            f"--{axis}",
            default=None,
            help=f"Restrict {axis} to a single value ('all' for no restriction)",
        )
    rank_parser.add_argument(
        "--wanted-only",
        action="store_true",
        help="Only use values listed in the profile's wanted lists",
    )
    rules_group = rank_parser.add_mutually_exclusive_group()
    rules_group.add_argument(
        "--rules",
        default=None,
        help='Temporary reorder rules as JSON, e.g. \'[{"name": "1080p", "type": "resolution", "new_priority": 5}]\'',
    )
    rules_group.add_argument(
        "--rules-file", type=Path, default=None, help="Read temporary reorder rules from a JSON file"
    )
    rank_parser.add_argument(
        "--changed-only",
        action="store_true",
        help="Only show combinations whose priority differs from the persisted rules",
    )
    rank_parser.add_argument("--limit", type=int, default=None, help="Show only the top N rows")
    rank_parser.add_argument(
        "--json", action="store_true", help="Emit machine-readable JSON to stdout"
    )

    subparsers.add_parser("profiles", help="List configured quality profiles")

    table_parser = subparsers.add_parser(
        "table", help="Dump the full priority table of a profile"
    )
    table_parser.add_argument("profile", help="Quality profile name")
    table_parser.add_argument(
        "--wanted-only", action="store_true", help="Hide unwanted combinations"
    )
    table_parser.add_argument(
        "--json", action="store_true", help="Emit machine-readable JSON to stdout"
    )

    subparsers.add_parser("check", help="Validate the catalog and quality profiles")
    return parser


def main() -> None:
    parser = build_parser()
    args = parser.parse_args()
    warn_buffer = configure_logging(args.log_level)
    config_path = find_config(args.config)
    try:
        settings = Settings.load(config_path)
    except ValidationError as exc:
        raise SystemExit(f"{CONFIG_INVALID.code}: {config_path}\n{exc}")
    app = QualityPriorityApp.create(settings)
    try:
        match args.command:
            case "rank":
                request = RankingRequest(
                    profile=args.profile,
                    filters=AxisFilters(
                        resolution=args.resolution,
                        quality=args.quality,
                        codec=args.codec,
                        audio=args.audio,
                    ),
                    wanted_only=args.wanted_only,
                    ephemeral_rules=_load_rules_payload(args),
                )
                report = cmd_rank.run(
                    app.engine,
                    request,
                    json_output=args.json,
                    limit=args.limit,
                    changed_only=args.changed_only,
                )
                if not report.ok:
                    raise SystemExit(1)
            case "profiles":
                cmd_profiles.run(app.snapshot())
            case "table":
                try:
                    table = app.priority_table(args.profile)
                except ProfileNotFoundError as exc:
                    raise SystemExit(str(exc))
                cmd_table.run(table, wanted_only=args.wanted_only, json_output=args.json)
            case "check":
                report = cmd_check.run(app.snapshot())
                for line in report.checks:
                    print(line)
                if not report.ok:
                    raise SystemExit(1)
            case _:
                parser.error("Unknown command")
    finally:
        if warn_buffer.records:
            print("\n\033[33mWarnings/Errors summary:\033[0m")
            for line in warn_buffer.summary():
                print(f" - {line}")


if __name__ == "__main__":
    main()
