from __future__ import annotations

import json

import click
from flask import Flask

from .container import Container


def register(app: Flask, container: Container) -> None:
    @app.cli.command("recalculate-timecards")
    @click.option("--company-id", required=True, help="Company whose closed time cards are recalculated.")
    @click.option("--job-id", "job_ids", multiple=True, help="Restrict to these jobs (repeatable).")
    def recalculate_timecards(company_id: str, job_ids: tuple[str, ...]):
        """Recalculate adjusted punch times, total and overtime hours."""
        result = container.recalculation_service.recalculate(company_id=company_id, job_ids=list(job_ids) or None)
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.errors:
            raise SystemExit(1)

    @app.cli.command("backfill-costcodes")
    @click.option("--company-id", required=True)
    @click.option("--days", type=int, default=None, help="Look back this many days (default 60).")
    @click.option("--limit", type=int, default=None, help="Maximum cards to inspect (1-5000).")
    def backfill_costcodes(company_id: str, days: int | None, limit: int | None):
        """Infer missing time card cost codes from punch records."""
        result = container.backfill_service.backfill(company_id=company_id, days=days, limit=limit)
        click.echo(json.dumps(result.to_dict(), indent=2))
