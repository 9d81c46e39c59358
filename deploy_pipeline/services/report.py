"""Pending-deployment report"""

import html
import logging
import string
from datetime import datetime
from pathlib import Path
from typing import List

import click

from ..templates import PENDING_REPORT_TEMPLATE, load_template

logger = logging.getLogger(__name__)

REPORT_TITLE = "Projects Pending Deployment"


def render_pending_report(projects: List[str]) -> str:
    """
    Render the HTML report listing projects pending deployment

    Args:
        projects: Eligible project names, in batch order

    Returns:
        HTML document
    """
    template = string.Template(load_template("report", PENDING_REPORT_TEMPLATE))
    rows = "\n".join(f"<tr><td>{html.escape(name)}</td></tr>" for name in projects)

    return template.safe_substitute(
        title=REPORT_TITLE,
        rows=rows,
        generated=datetime.now().strftime('%Y-%m-%d %H:%M:%S')
    )


def write_pending_report(projects: List[str], path: Path) -> Path:
    """Write the report, creating its directory when needed"""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_pending_report(projects), encoding='utf-8')
    logger.info(f"Pending deployment report written to {path}")
    return path


def open_report(path: Path) -> None:
    """Open the report with the system's default application"""
    if click.launch(str(path)) != 0:
        logger.warning(f"Unable to open report {path}")
