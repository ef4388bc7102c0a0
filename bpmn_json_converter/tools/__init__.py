"""
BPMN JSON Converter Tools

Command-line interface for the converter.
"""

from bpmn_json_converter.tools.cli import cli

__all__ = ["cli"]
