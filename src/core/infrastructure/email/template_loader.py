"""Email template loader using Jinja2.

Templates are stored in resources/email_templates/ at the project root.
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATES_DIR = (
    Path(__file__).resolve().parents[4] / "resources" / "email_templates"
)


@lru_cache(maxsize=1)
def _get_env() -> Environment:
    if not TEMPLATES_DIR.exists():
        raise FileNotFoundError(f"Email templates directory not found: {TEMPLATES_DIR}")
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(["html", "xml"]),
        undefined=StrictUndefined,
    )


def render_template(name: str, **variables: object) -> str:
    """Render an email template file.

    Raises:
        jinja2.TemplateNotFound: If the template file does not exist
        jinja2.UndefinedError: If a template variable was not supplied
    """
    template = _get_env().get_template(name)
    return template.render(**variables)
