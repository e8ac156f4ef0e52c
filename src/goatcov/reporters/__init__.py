"""Report renderers (plain text, HTML, JSON)."""

from goatcov.reporters.base import Reporter
from goatcov.reporters.html import HTMLReporter
from goatcov.reporters.json_reporter import JSONReporter
from goatcov.reporters.terminal import TextReporter

__all__ = [
    "HTMLReporter",
    "JSONReporter",
    "Reporter",
    "TextReporter",
]
