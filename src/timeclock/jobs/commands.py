from __future__ import annotations

import click
from flask import Flask

from ..container import Container


def register(app: Flask, container: Container) -> None:
    """Maintenance commands, meant to be driven by cron (``flask sweep-absences``)."""

    @app.cli.command("sweep-absences")
    @click.option("--date", "work_date", default=None, help="Day to sweep (YYYY-MM-DD). Defaults to today.")
    def sweep_absences(work_date):
        result = container.absence_sweeper.run(work_date)
        click.echo(f"{result.work_date}: marked {result.inserted} of {result.candidates} employee(s) absent")

    @app.cli.command("purge-orphans")
    def purge_orphans():
        deleted = container.admin_service.purge_orphaned_attendance()
        click.echo(f"Deleted {deleted} attendance record(s) of inactive employees")
