"""Statements, scops and the per-statement analysis information."""

from __future__ import annotations

import enum
import itertools
from dataclasses import dataclass, field
from typing import Any, Iterable

from candl.relation import CandlError, Relation, RelationType

MAX_LOOP_DEPTH = 128


class StatementKind(enum.Enum):
    """Statement kind as used for commutativity checks."""

    ASSIGNMENT = 1
    P_REDUCTION = 2
    M_REDUCTION = 3
    T_REDUCTION = 4


_REDUCTIONS = {
    StatementKind.P_REDUCTION,
    StatementKind.M_REDUCTION,
    StatementKind.T_REDUCTION,
}

_COMMUTING_PAIRS = {
    (StatementKind.P_REDUCTION, StatementKind.P_REDUCTION),
    (StatementKind.M_REDUCTION, StatementKind.M_REDUCTION),
    (StatementKind.T_REDUCTION, StatementKind.T_REDUCTION),
    (StatementKind.P_REDUCTION, StatementKind.M_REDUCTION),
    (StatementKind.M_REDUCTION, StatementKind.P_REDUCTION),
}


@dataclass
class StatementInfo:
    """Analysis data attached to a statement."""

    label: int
    depth: int
    kind: StatementKind = StatementKind.ASSIGNMENT
    index: list[int] = field(default_factory=list)
    backup: Any = None

    def copy(self) -> StatementInfo:
        return StatementInfo(
            label=self.label,
            depth=self.depth,
            kind=self.kind,
            index=list(self.index),
            backup=self.backup,
        )


@dataclass(eq=False)
class Statement:
    """A statement with its domain, scattering and access relation unions."""

    domains: list[Relation] = field(default_factory=list)
    scatterings: list[Relation] = field(default_factory=list)
    access: list[Relation] = field(default_factory=list)
    info: Any = None

    @property
    def domain(self) -> Relation | None:
        return self.domains[0] if self.domains else None

    @property
    def scattering(self) -> Relation | None:
        return self.scatterings[0] if self.scatterings else None

    def remove_unions(self) -> list[Statement]:
        """Split into one statement per domain/scattering union part."""
        domains = self.domains or [None]
        scatterings = self.scatterings or [None]
        return [
            Statement(
                domains=[domain.copy()] if domain is not None else [],
                scatterings=[scatt.copy()] if scatt is not None else [],
                access=[relation.copy() for relation in self.access],
            )
            for domain, scatt in itertools.product(domains, scatterings)
        ]


@dataclass(eq=False)
class Scop:
    """A static control part: a context and a list of statements."""

    context: Relation
    statements: list[Statement] = field(default_factory=list)
    extensions: list[Any] = field(default_factory=list)
    language: str | None = None
    parameters: Any = None
    registry: Any = None
    version: int = 1
    info: Any = None


def init_statement_info(scop: Scop) -> None:
    """Attach a StatementInfo to every statement of ``scop``.

    Labels follow statement order; loop indices are derived from the
    scalar dimensions of the scatterings. A statement's previous ``info``
    is kept as the backup.
    """
    maximum = 0
    cur_index = list(range(MAX_LOOP_DEPTH))
    last = [0] * MAX_LOOP_DEPTH

    for count, statement in enumerate(scop.statements):
        scattering = statement.scattering
        if scattering is None:
            raise CandlError(f"statement {count} has no scattering")
        depth = scattering.nb_output_dims // 2
        if depth > MAX_LOOP_DEPTH:
            raise CandlError(f"loop depth {depth} exceeds {MAX_LOOP_DEPTH}")

        for j in range(depth):
            row = scattering.get_line(j * 2)
            if row is None:
                raise CandlError(
                    f"statement {count} has no constraint on scattering "
                    f"dimension {j * 2}"
                )
            value = scattering.rows[row][-1]
            if last[j] < value:
                last[j] = value
                last[j + 1:] = [0] * (MAX_LOOP_DEPTH - j - 1)
                cur_index[j:] = [
                    maximum + (k - j) + 1 for k in range(j, MAX_LOOP_DEPTH)
                ]
                break

        index = cur_index[:depth]
        if depth > 0:
            maximum = max(maximum, cur_index[depth - 1])

        statement.info = StatementInfo(
            label=count,
            depth=depth,
            kind=StatementKind.ASSIGNMENT,
            index=index,
            backup=statement.info,
        )


def clear_statement_info(statement: Statement) -> None:
    """Remove the StatementInfo, restoring the value it replaced."""
    if statement.info is not None:
        statement.info = statement.info.backup


def find_label(statements: Iterable[Statement], label: int) -> Statement | None:
    """Return the first statement carrying ``label``, or None."""
    return next(
        (
            statement
            for statement in statements
            if isinstance(statement.info, StatementInfo)
            and statement.info.label == label
        ),
        None,
    )


def _count_writes(statement: Statement) -> int:
    return sum(1 for access in statement.access if access.type is RelationType.WRITE)


def statements_commute(statement1: Statement, statement2: Statement) -> bool:
    """Tell whether two statements commute, judging by their reduction kinds."""
    kind1 = statement1.info.kind
    kind2 = statement2.info.kind

    if statement1 is statement2 and kind1 in _REDUCTIONS:
        return True

    if (kind1, kind2) not in _COMMUTING_PAIRS:
        return False

    if _count_writes(statement1) > 1 or _count_writes(statement2) > 1:
        return False

    pair = next(
        (
            (access1, access2)
            for access1, access2 in zip(statement1.access, statement2.access)
            if access1.type is RelationType.WRITE
        ),
        None,
    )
    if (
        pair is None
        or pair[1].type is not RelationType.WRITE
        or pair[1].nb_output_dims != pair[0].nb_output_dims
    ):
        raise CandlError(
            "These statements haven't the same access array or access is NULL"
        )

    return pair[0].array_id() == pair[1].array_id()


def scops_comparable(s1: Scop, s2: Scop) -> bool:
    """True if both scops have the same statements' accesses and domains."""
    if len(s1.statements) != len(s2.statements):
        return False
    return all(
        st1.access == st2.access and st1.domains == st2.domains
        for st1, st2 in zip(s1.statements, s2.statements)
    )


def scop_lists_comparable(l1: list[Scop], l2: list[Scop]) -> bool:
    """Apply scops_comparable pairwise; lists must be of equal length."""
    if len(l1) != len(l2):
        return False
    return all(scops_comparable(a, b) for a, b in zip(l1, l2))