from __future__ import annotations

import sys
from typing import Any

from tqdm import tqdm
from tqdm.std import tqdm as TqdmType

"""Progress display with tqdm (TTY only).

One bar per phase, advanced once per sheet row. In non-TTY environments (CI,
piped output, tests) no bar is created so logs stay free of ANSI control
sequences.
"""

__all__ = [
    "PhaseProgress",
    "is_tty_enabled",
]


def is_tty_enabled() -> bool:
    """Bars are drawn only when stdout is an interactive terminal."""
    return sys.stdout.isatty()


class PhaseProgress:
    """Row progress for one phase (Groups, Students or Payments)."""

    def __init__(self, total_rows: int, *, description: str) -> None:
        self.total_rows = total_rows
        self.description = description
        self.processed = 0

        self.enabled = is_tty_enabled() and total_rows > 0
        self.pbar: TqdmType[Any] | None
        if self.enabled:
            self.pbar = tqdm(
                total=total_rows,
                desc=description,
                unit="row",
                leave=True,
                ncols=80,
                ascii=True,
            )
        else:
            self.pbar = None

    def advance(self, errors: int | None = None) -> None:
        """Mark one row as processed; ``errors`` updates the postfix when given."""
        self.processed += 1
        if self.pbar is not None:
            self.pbar.update(1)
            if errors is not None:
                self.pbar.set_postfix(errors=errors)

    def close(self) -> None:
        if self.pbar is not None:
            self.pbar.close()
            self.pbar = None

    def __enter__(self) -> PhaseProgress:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()
