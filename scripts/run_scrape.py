"""
Run a scrape from the CLI: either an ad-hoc URL or a stored scraping task.
"""

from __future__ import annotations

import argparse
import json
import sys
import uuid

from app.scraping.errors import InputValidationError, ScrapeError
from app.scraping.report import failure_text
from app.services.scrape_service import ScrapeService


def _run_adhoc(args: argparse.Namespace) -> int:
    service = ScrapeService()
    try:
        text = service.scrape(
            target_url=args.url,
            selectors=args.selectors,
            data_to_extract=args.label,
        )
    except InputValidationError as exc:
        print(json.dumps({"error": exc.message}, indent=2), file=sys.stderr)
        return 2
    except ScrapeError as exc:
        payload = {"error": exc.message, "scrapedText": failure_text(exc.message)}
        print(json.dumps(payload, indent=2), file=sys.stderr)
        return 1

    print(text)
    return 0


def _run_task(task_id: uuid.UUID) -> int:
    from app.services.scraping_task_service import ScrapingTaskService
    from db.repositories.errors import ScrapingTaskNotFoundError
    from db.session import SessionLocal

    service = ScrapingTaskService()
    with SessionLocal() as db:
        try:
            service.start_run(db=db, task_id=task_id)
        except ScrapingTaskNotFoundError as exc:
            print(str(exc), file=sys.stderr)
            return 2

    outcome = service.run_task(task_id)
    if outcome is None:
        print(f"Scraping task {task_id} disappeared during the run.", file=sys.stderr)
        return 1

    print(json.dumps({"task_id": str(task_id), "status": outcome.status}, indent=2))
    print(outcome.scraped_text)
    return 0 if outcome.succeeded else 1


def main() -> int:
    parser = argparse.ArgumentParser(description="Run a selector scrape.")
    parser.add_argument(
        "--task-id",
        dest="task_id",
        type=uuid.UUID,
        default=None,
        help="Run a stored scraping task and persist its result.",
    )
    parser.add_argument(
        "--url",
        dest="url",
        default=None,
        help="Target page URL.",
    )
    parser.add_argument(
        "--selectors",
        dest="selectors",
        default=None,
        help="CSS selectors separated by commas or newlines.",
    )
    parser.add_argument(
        "--label",
        dest="label",
        default=None,
        help="Free-text label of the data being extracted.",
    )
    args = parser.parse_args()

    if args.task_id is not None:
        return _run_task(args.task_id)
    return _run_adhoc(args)


if __name__ == "__main__":
    raise SystemExit(main())
