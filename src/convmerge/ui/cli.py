from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import replace
from signal import SIGINT, signal
from typing import TYPE_CHECKING
from uuid import UUID

from dotenv import load_dotenv

from convmerge.app import merge_conversations, merge_duplicate_conversations
from convmerge.config import (
    ConfigurationError,
    MergeConfig,
    configure_logging,
    get_merge_config,
    parse_country_code,
    parse_delete_mode,
)
from convmerge.domain.merging import (
    ConversationNotFoundError,
    NoMatchingSessionsError,
    PairMergeError,
)
from convmerge.domain.model import DeleteMode
from convmerge.ui.console import ConsoleMergeListener

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from convmerge.domain.merging import MergeReport

log = logging.getLogger(__name__)

INTERRUPTED_EXIT_CODE = 130


def _add_merge_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--session",
        type=str,
        help="Session id to restrict the merge to",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be merged without making changes",
    )
    parser.add_argument(
        "--delete-mode",
        choices=[mode.value for mode in DeleteMode],
        help="How merged duplicates are removed (defaults to config)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Merge duplicate messaging conversations")
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log debug output for every merged conversation",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    merge = subparsers.add_parser(
        "merge-duplicates",
        help="Merge conversations that share a normalized contact phone",
    )
    _add_merge_options(merge)
    merge.add_argument(
        "--country-code",
        type=str,
        help="Country code prefixed to national numbers; pass '' to disable",
    )

    pair = subparsers.add_parser(
        "merge-pair",
        help="Merge one conversation into another, both chosen by remote jid",
    )
    pair.add_argument("--from", dest="source_jid", required=True, help="Conversation to remove")
    pair.add_argument("--into", dest="target_jid", required=True, help="Conversation to keep")
    _add_merge_options(pair)

    return parser.parse_args(list(argv))


def _parse_uuid(value: str) -> UUID:
    try:
        return UUID(value)
    except ValueError as exc:
        raise ValueError(f"Invalid UUID: {value}") from exc


def _build_merge_config(args: argparse.Namespace) -> MergeConfig:
    config = get_merge_config()
    if args.delete_mode is not None:
        config = replace(config, delete_mode=parse_delete_mode(args.delete_mode))
    country_code = getattr(args, "country_code", None)
    if country_code is not None:
        config = replace(config, default_country_code=parse_country_code(country_code))
    return config


def _run_command(
    args: argparse.Namespace,
    *,
    session_id: UUID | None,
    config: MergeConfig,
) -> MergeReport:
    listener = ConsoleMergeListener()
    if args.command == "merge-duplicates":
        return merge_duplicate_conversations(
            session_id=session_id,
            simulate=args.dry_run,
            config=config,
            listener=listener,
        )
    if args.command == "merge-pair":
        return merge_conversations(
            args.source_jid,
            args.target_jid,
            session_id=session_id,
            simulate=args.dry_run,
            config=config,
            listener=listener,
        )
    raise ValueError(f"Unsupported command: {args.command}")


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    parsed_args = _parse_args(args_list)
    configure_logging(verbose=parsed_args.verbose)

    try:
        session_id = _parse_uuid(parsed_args.session) if parsed_args.session else None
        config = _build_merge_config(parsed_args)
        is_pair = parsed_args.command == "merge-pair"
        if is_pair and parsed_args.source_jid == parsed_args.target_jid:
            raise ValueError("--from and --into must name different conversations")  # noqa: TRY301
    except (ValueError, ConfigurationError):
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        report = _run_command(parsed_args, session_id=session_id, config=config)
    except (NoMatchingSessionsError, ConversationNotFoundError, PairMergeError) as exc:
        log.error("%s", exc)  # noqa: TRY400
        sys.exit(1)
    except Exception:
        log.exception("Fatal error during merge")
        sys.exit(1)

    if not report.succeeded:
        log.error("%s session(s) failed", len(report.failed_sessions))
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C); committed merges stay, the run counts as failed."""
    log.warning("Interrupted by user (Ctrl+C); rerun to finish remaining merges")
    sys.exit(INTERRUPTED_EXIT_CODE)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
