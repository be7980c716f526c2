"""Allow ``python -m clean_arch``."""

from .cli import app

app()
