# deploy_pipeline/templates/__init__.py
"""Built-in templates for deploy-pipeline"""

from pathlib import Path
from typing import Optional

# Template directory path
TEMPLATES_DIR = Path(__file__).parent


def get_template_path(category: str, name: str) -> Optional[Path]:
    """
    Get path to a template file

    Args:
        category: Template category (report)
        name: Template name

    Returns:
        Path to template file or None if not found
    """
    template_path = TEMPLATES_DIR / category / name

    if template_path.exists():
        return template_path

    return None


def load_template(category: str, name: str) -> Optional[str]:
    """
    Load template content

    Returns:
        Template content or None if not found
    """
    template_path = get_template_path(category, name)

    if template_path:
        return template_path.read_text(encoding='utf-8')

    return None


PENDING_REPORT_TEMPLATE = "pending.html"

__all__ = [
    'TEMPLATES_DIR',
    'get_template_path',
    'load_template',
    'PENDING_REPORT_TEMPLATE',
]
