"""
Run one reminder pass by hand and print the JSON report.

Usage examples:
  # Simulated pass for the current hour
    python scripts/run_reminders.py

  # Replay the pass that would have run at a given instant
    python scripts/run_reminders.py --now 2025-03-30T09:00:00+00:00

  # Real delivery (needs WHATSAPP_* settings)
    python scripts/run_reminders.py --provider whatsapp

Exit code is 1 when the run could not start (configuration or database
errors). Per-appointment failures are reported in the JSON and do not
change the exit code.
"""
import argparse
import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import sys

# Ensure project root is on sys.path when running as a script
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.logging_config import setup_logging
from core.exceptions import ReminderEngineError
from database import close_db
from services.reminder_config import PROVIDERS
from services.reminder_tasks import run_reminder_pass

logger = logging.getLogger(__name__)


def parse_now(value: str) -> datetime:
    """Parse an ISO-8601 instant; naive values are taken as UTC."""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 instant: {value}")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Run one appointment reminder pass")
    p.add_argument("--now", type=parse_now, help="Run instant (ISO-8601, default: current time)")
    p.add_argument("--provider", choices=PROVIDERS, help="Override REMINDER_PROVIDER")
    return p.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging()
    try:
        report = await run_reminder_pass(now=args.now, provider=args.provider)
    except ReminderEngineError as e:
        print(json.dumps(e.to_dict(), ensure_ascii=False), file=sys.stderr)
        return 1
    except Exception as e:
        logger.error(f"Unexpected error in reminder run: {e}", exc_info=True)
        error = {"error": str(e) or type(e).__name__, "category": "internal"}
        print(json.dumps(error, ensure_ascii=False), file=sys.stderr)
        return 1
    finally:
        await close_db()

    print(json.dumps(report.to_json_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
