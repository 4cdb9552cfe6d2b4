"""Shared CLI output helpers.

Usage:
    from acm_certificate_sync.cli.output import Table

    table = Table(title="Results")
    table.add_column("Field", style="cyan")
    table.add_row("namespace", "default")
    console.print(table)
"""

from acm_certificate_sync.cli.output.table import Table

__all__ = ["Table"]
