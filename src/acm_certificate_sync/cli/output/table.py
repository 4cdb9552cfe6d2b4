"""Rich table with the CLI's defaults."""

from __future__ import annotations

from typing import Any

from rich.table import Table as RichTable


class Table(RichTable):
    """Rich Table whose columns wrap long values instead of truncating them.

    ARNs and DNS name lists are routinely wider than a terminal, so every
    column folds by default. Pass ``overflow`` or ``no_wrap`` to override.
    """

    def add_column(self, *args: Any, **kwargs: Any) -> None:
        kwargs.setdefault("overflow", "fold")
        super().add_column(*args, **kwargs)
