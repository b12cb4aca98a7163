"""API Blueprint rendering pipeline."""

from .output import write_blueprint
from .render import render_document

__all__ = ["render_document", "write_blueprint"]
