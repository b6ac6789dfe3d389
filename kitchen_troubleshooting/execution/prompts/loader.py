"""
Jinja2 template loader for prompts and canned safety messages.

Loads .jinja2 templates from the templates directory and renders them
with provided context variables.
"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

from .templates import Template

TEMPLATES_DIR = Path(__file__).parent / "templates"


def _validate_templates():
    """Every Template constant must have a file. Fails fast at import."""
    for name in dir(Template):
        if not name.startswith("_"):
            template_name = getattr(Template, name)
            path = TEMPLATES_DIR / f"{template_name}.jinja2"
            if not path.exists():
                raise FileNotFoundError(f"Template missing: {path}")


_validate_templates()


@lru_cache(maxsize=1)
def _get_environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(TEMPLATES_DIR),
        autoescape=select_autoescape(default=False),
        undefined=StrictUndefined,
        trim_blocks=True,
        lstrip_blocks=True,
    )


def render(template_name: str, **context) -> str:
    """
    Render a template (name without the .jinja2 extension) and strip
    surrounding whitespace.
    """
    template = _get_environment().get_template(f"{template_name}.jinja2")
    return template.render(**context).strip()
