"""Allow running as: python -m modrelease"""

from modrelease.cli import app

app(prog_name="modrelease")
