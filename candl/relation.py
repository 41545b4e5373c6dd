"""Integer constraint matrices in the polyhedral relation layout."""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field


class CandlError(Exception):
    """Raised when an analysis input is malformed or inconsistent."""


class RelationType(enum.Enum):
    """Role of a relation within a statement or a scop."""

    UNDEFINED = -1
    CONTEXT = 0
    DOMAIN = 1
    SCATTERING = 2
    READ = 3
    WRITE = 4
    MAY_WRITE = 5


@dataclass
class Relation:
    """A constraint matrix.

    Each row is ``[eq/in, output dims..., input dims..., local dims...,
    parameters..., constant]``; a leading 0 marks an equality, 1 an
    inequality (``>= 0``).
    """

    rows: list[list[int]] = field(default_factory=list)
    nb_output_dims: int = 0
    nb_input_dims: int = 0
    nb_local_dims: int = 0
    nb_parameters: int = 0
    type: RelationType = RelationType.UNDEFINED
    width: int | None = None

    def __post_init__(self) -> None:
        self.rows = [[int(value) for value in row] for row in self.rows]
        if self.width is None:
            self.width = (
                len(self.rows[0])
                if self.rows
                else 2 + self.nb_output_dims + self.nb_input_dims
                + self.nb_local_dims + self.nb_parameters
            )
        if any(len(row) != self.width for row in self.rows):
            raise CandlError("relation rows do not all have the same width")

    @classmethod
    def zeros(cls, nb_rows: int, nb_columns: int) -> Relation:
        """Return a relation of the given shape filled with zeros."""
        if nb_rows < 0 or nb_columns < 0:
            raise ValueError("relation dimensions must not be negative")
        return cls(
            rows=[[0] * nb_columns for _ in range(nb_rows)], width=nb_columns
        )

    @property
    def nb_rows(self) -> int:
        return len(self.rows)

    @property
    def nb_columns(self) -> int:
        return self.width

    def get_line(self, column: int) -> int | None:
        """Return the first row whose coefficient for variable ``column`` is
        non-zero, or None.

        ``column`` counts variables from 0, so the first matrix column (the
        equality/inequality marker) is skipped.
        """
        if column < 0 or column >= self.nb_columns - 1:
            return None
        return next(
            (i for i, row in enumerate(self.rows) if row[column + 1] != 0),
            None,
        )

    def array_id(self) -> int:
        """Return the array identifier of an access relation."""
        candidates = [row for row in self.rows if row[1] != 0]
        if not candidates:
            raise CandlError("no array identifier in the access relation")
        if len(candidates) > 1:
            raise CandlError("several array identifiers in the access relation")
        row = candidates[0]
        if any(row[2:-1]):
            raise CandlError("array identifier row is not a constant equality")
        if row[1] == -1:
            return row[-1]
        if row[1] == 1:
            return -row[-1]
        raise CandlError("array identifier coefficient is not a unit")

    def copy(self) -> Relation:
        """Return an independent copy."""
        return dataclasses.replace(self, rows=[list(row) for row in self.rows])