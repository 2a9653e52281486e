from __future__ import annotations

from pathlib import Path
from string import Template
from typing import Mapping


def _templates_dir() -> Path:
    # preview_provisioner/lib/templates.py -> preview_provisioner/templates
    return Path(__file__).resolve().parents[1] / "templates"


def render_template(name: str, values: Mapping[str, object]) -> str:
    """Render a bundled template with $name placeholders.

    Missing keys raise KeyError; a template is never written half-filled.
    """

    text = (_templates_dir() / name).read_text(encoding="utf-8")
    return Template(text).substitute({k: str(v) for k, v in values.items()})
