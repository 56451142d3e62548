"""Bordered ASCII tables with content-sized columns."""

from typing import TextIO


class Table:
    """Rows of pre-formatted cells, the first of which is the header.

    Every row must have the same number of cells, and every cell must
    already be a display string.

    Example:
        +------+-------+
        | Name | Value |
        +------+-------+
        |  foo |    42 |
        +------+-------+
    """

    def __init__(self, *header: str) -> None:
        self._rows: list[tuple[str, ...]] = []
        if header:
            self.add(*header)

    def add(self, *cells: str) -> None:
        """Append a row.

        Raises:
            TypeError: If a cell is not a string
            ValueError: If the row length differs from the first row
        """
        for cell in cells:
            if not isinstance(cell, str):
                raise TypeError(f"Table cells must be str, got {type(cell).__name__}")
        if self._rows and len(cells) != len(self._rows[0]):
            raise ValueError(
                f"Row has {len(cells)} cells, table has {len(self._rows[0])} columns"
            )
        self._rows.append(tuple(cells))

    def __len__(self) -> int:
        return len(self._rows)

    @property
    def widths(self) -> list[int]:
        """Width of each column: its longest cell, header included."""
        if not self._rows:
            return []
        return [max(len(row[c]) for row in self._rows) for c in range(len(self._rows[0]))]

    def lines(self, prefix: str = "") -> list[str]:
        """Render the table; each line starts with ``prefix``."""
        widths = self.widths
        if not widths:
            return []

        border = prefix + "+" + "".join("-" * (w + 2) + "+" for w in widths)
        out = [border]
        for i, row in enumerate(self._rows):
            cells = "".join(f" {cell:>{w}} |" for cell, w in zip(row, widths))
            out.append(f"{prefix}|{cells}")
            if i == 0:
                out.append(border)
        out.append(border)
        return out

    def write(self, out: TextIO, prefix: str = "") -> None:
        """Write the rendered table, one newline-terminated line at a time."""
        for line in self.lines(prefix):
            out.write(line + "\n")
