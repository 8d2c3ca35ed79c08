# src/inbox_triage/app/run.py
from __future__ import annotations

import argparse
import logging
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from inbox_triage.actions.executor import ActionExecutor, default_executor
from inbox_triage.config.settings import Settings, load_settings
from inbox_triage.exceptions import ConfigError, InboxUnavailableError
from inbox_triage.gmail.auth import GoogleClientConfig
from inbox_triage.gmail.client import GmailClient
from inbox_triage.models import Category, EmailAnalysis, LogEntry, NormalizedEmail
from inbox_triage.parsing.parser import build_normalized_email
from inbox_triage.pipeline.orchestrator import analyze_email
from inbox_triage.pipeline.policy import actions_from_analysis
from inbox_triage.rules.BaseRule import BaseRule
from inbox_triage.rules.classification import DEFAULT_RULES
from inbox_triage.sources.base import DealDirectory, InboxSource, RecordStore
from inbox_triage.storage import supabase_store

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, Dict[str, Any]], None]


@dataclass
class RunSummary:
    emails_checked: int
    processed: int
    errors: int
    urgent: int


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def process_email(
    email: NormalizedEmail,
    directory: DealDirectory,
    store: RecordStore,
    executor: ActionExecutor,
    *,
    now: Optional[datetime] = None,
    rules: Sequence[BaseRule] = DEFAULT_RULES,
) -> EmailAnalysis:
    # Keep analysis pure and delegate side effects to the executor.
    deal = directory.lookup_by_sender_address(email.sender_address)
    analysis = analyze_email(email, deal, rules)
    actions = actions_from_analysis(email, analysis, now or _utcnow())
    executor.run(store, actions)

    logger.info("TRIAGE: Categorized: %s - %s", analysis.category.value, email.subject[:50])
    return analysis


def _log_activity(store: RecordStore, action: str, details: Dict[str, Any], status: str = "info") -> None:
    # Activity logging is best effort; a failed log row never fails the run.
    try:
        store.insert_log(LogEntry(action=action, details=details, status=status, created_at=_utcnow()))
    except Exception as exc:
        logger.warning("TRIAGE: Could not write activity log %r: %s", action, exc)


def run_once(
    inbox: InboxSource,
    directory: DealDirectory,
    store: RecordStore,
    *,
    now: Optional[datetime] = None,
    lookback_hours: int = 24,
    max_results: int = 50,
    executor: Optional[ActionExecutor] = None,
    rules: Sequence[BaseRule] = DEFAULT_RULES,
    progress_cb: Optional[ProgressCallback] = None,
) -> Dict[str, Any]:
    """
    Classify unread mail from the lookback window and return a machine-readable summary.

    Emails are handled one at a time; a failure on one email is logged,
    counted and reported, and the batch moves on. Only a failure to list
    the inbox aborts the run (InboxUnavailableError).
    """
    def report(step: str, *, detail: str | None = None, **extra: Any) -> None:
        if not progress_cb:
            return
        payload: Dict[str, Any] = {"detail": detail}
        payload.update(extra)
        progress_cb(step, payload)

    now = now or _utcnow()
    executor = executor or default_executor()

    logger.info("TRIAGE: Checking inbox...")
    report("fetch_messages", detail="Listing unread messages")
    try:
        message_ids: List[str] = inbox.list_unread_since(
            now - timedelta(hours=lookback_hours), max_results=max_results
        )
    except InboxUnavailableError as exc:
        logger.error("TRIAGE: Error checking inbox: %s", exc)
        _log_activity(store, "Inbox check failed", {"error": str(exc)}, status="error")
        report("error", detail=str(exc))
        raise

    total = len(message_ids)
    processed = 0
    errors = 0
    urgent = 0

    for index, mid in enumerate(message_ids, start=1):
        email: Optional[NormalizedEmail] = None
        try:
            email = build_normalized_email(inbox.fetch_full(mid), now=now)
            analysis = process_email(email, directory, store, executor, now=now, rules=rules)
            processed += 1
            if analysis.category == Category.URGENT:
                urgent += 1
            report(
                "classified",
                detail=f"{analysis.category.value}: {email.subject[:50]}",
                result={
                    "message_id": mid,
                    "from": email.from_header,
                    "subject": email.subject,
                    "category": analysis.category.value,
                    "sentiment": analysis.sentiment.value,
                },
            )
        except Exception as exc:
            errors += 1
            logger.error("TRIAGE: Error processing email %s: %s: %s", mid, type(exc).__name__, exc)
            report(
                "error",
                detail=f"{type(exc).__name__}: {exc}",
                error={
                    "message_id": mid,
                    "from": email.from_header if email else "",
                    "subject": email.subject if email else "",
                    "error": f"{type(exc).__name__}: {exc}",
                },
            )
        finally:
            report("processing", detail=f"Processing {index}/{total}")

    summary = RunSummary(emails_checked=total, processed=processed, errors=errors, urgent=urgent)
    _log_activity(
        store,
        "Inbox check completed",
        {"emailsChecked": total, "processed": processed, "errors": errors},
    )
    report("done", detail="Run completed", metrics=asdict(summary))
    return asdict(summary)


def google_config(settings: Settings) -> GoogleClientConfig:
    return GoogleClientConfig(
        credentials_path=settings.credentials_path,
        token_path=settings.token_path,
        user_id="me",
    )


def build_collaborators(settings: Settings) -> tuple[GmailClient, supabase_store.SupabaseDealDirectory, supabase_store.SupabaseRecordStore]:
    url, key = settings.require_supabase()
    client = supabase_store.connect(url, key)

    gmail = GmailClient(google_config(settings))
    gmail.connect()
    return gmail, supabase_store.SupabaseDealDirectory(client), supabase_store.SupabaseRecordStore(client)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Classify unread inbox mail once.")
    parser.add_argument("--lookback-hours", type=int, default=None)
    parser.add_argument("--max-results", type=int, default=None)
    parser.add_argument("--dry-run", action="store_true", help="Classify without writing records")
    args = parser.parse_args(argv)

    try:
        settings = load_settings()
    except ConfigError as exc:
        configure_logging()
        logger.error("TRIAGE: Fatal error: %s", exc)
        return 1

    configure_logging(settings.log_level)

    try:
        inbox, directory, store = build_collaborators(settings)
    except (ConfigError, RuntimeError, OSError) as exc:
        logger.error("TRIAGE: Fatal error: %s", exc)
        return 1

    try:
        summary = run_once(
            inbox,
            directory,
            store,
            lookback_hours=settings.lookback_hours if args.lookback_hours is None else args.lookback_hours,
            max_results=settings.max_results if args.max_results is None else args.max_results,
            executor=default_executor(dry_run=args.dry_run),
        )
    except InboxUnavailableError:
        return 1

    logger.info("TRIAGE: Email check complete %s", summary)
    return 0
