"""Dependences between statements and the violations a schedule causes."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any

from candl.relation import Relation

UNDEFINED = -1


class DependenceType(enum.Enum):
    """Kind of a data dependence."""

    UNDEFINED = -1
    RAW = 1
    RAW_SCALPRIV = 2
    WAR = 3
    WAW = 4
    RAR = 5

    def label(self) -> str:
        """Return the short name used in reports."""
        return _LABELS.get(self, "unknown")


_LABELS = {
    DependenceType.UNDEFINED: "UNSET",
    DependenceType.RAW: "RAW",
    DependenceType.WAR: "WAR",
    DependenceType.WAW: "WAW",
    DependenceType.RAR: "RAR",
}


@dataclass(eq=False)
class Dependence:
    """A dependence polyhedron between a source and a target statement.

    The columns of ``domain`` are laid out as source output dimensions,
    target output dimensions, source local dimensions, target local
    dimensions, parameters and the constant; the counts below tell how
    each of these blocks splits between iteration domain and access.
    """

    domain: Relation
    source: Any = None
    target: Any = None
    type: DependenceType = DependenceType.UNDEFINED
    depth: int = UNDEFINED
    label_source: int = 0
    label_target: int = 0
    ref_source: int = 0
    ref_target: int = 0
    source_access: Relation | None = None
    target_access: Relation | None = None
    source_nb_output_dims_domain: int = 0
    source_nb_output_dims_access: int = 0
    target_nb_output_dims_domain: int = 0
    target_nb_output_dims_access: int = 0
    source_nb_local_dims_domain: int = 0
    source_nb_local_dims_access: int = 0
    target_nb_local_dims_domain: int = 0
    target_nb_local_dims_access: int = 0


@dataclass
class Violation:
    """A dependence broken by a transformation at a given dimension.

    ``domain`` is the violation polyhedron: the dependence system extended
    with both scatterings, equalities up to ``dimension - 1`` and the
    strict reversal at ``dimension``.
    """

    dependence: Dependence | None = None
    dimension: int = UNDEFINED
    domain: Relation | None = None
    source_nb_output_dims_scattering: int = -1
    target_nb_output_dims_scattering: int = -1
    source_nb_local_dims_scattering: int = -1
    target_nb_local_dims_scattering: int = -1