"""Quasts, their comparison and conversion, and feasibility checks.

A quast (quasi-affine solution tree) is the result of a parametric integer
program: inner nodes hold a condition on the parameters, leaves hold a
list of solution vectors (or none when the problem has no solution there).
Feasibility checks solve the corresponding mixed-integer program.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp

from candl.relation import CandlError, Relation

_STATUS_OPTIMAL = 0
_STATUS_INFEASIBLE = 2


@dataclass
class SolutionVector:
    """An affine form over the parameters: numerators and denominators.

    The last entry of ``values`` is the constant term. Denominators default
    to 1.
    """

    values: list[int]
    denominators: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.values = [int(value) for value in self.values]
        if not self.denominators:
            self.denominators = [1] * len(self.values)
        self.denominators = [int(value) for value in self.denominators]
        if len(self.denominators) != len(self.values):
            raise ValueError("values and denominators differ in length")


@dataclass
class Quast:
    """A node of a quasi-affine solution tree.

    With a ``condition``, the node branches to ``then_branch`` where the
    condition is non-negative and to ``else_branch`` otherwise. Without
    one, ``solutions`` holds the solution (None or empty if there is none).
    """

    condition: SolutionVector | None = None
    then_branch: Quast | None = None
    else_branch: Quast | None = None
    solutions: list[SolutionVector] | None = None
    new_parameters: Any = None


def _vectors_equal(v1: SolutionVector, v2: SolutionVector) -> bool:
    return v1.values == v2.values and v1.denominators == v2.denominators


def lists_equal(
    l1: list[SolutionVector | None] | None,
    l2: list[SolutionVector | None] | None,
    size: int,
) -> bool:
    """Tell whether the first ``size`` vectors of two lists are equal.

    A negative ``size`` compares all the vectors. Comparison stops at the
    end of the shorter list.
    """
    if not l1 and not l2:
        return True
    if not l1 or not l2:
        return False

    for count, (v1, v2) in enumerate(zip(l1, l2)):
        if 0 <= size <= count:
            break
        if v1 is None and v2 is None:
            return True
        if v1 is None or v2 is None:
            return False
        if len(v1.values) != len(v2.values):
            return False
        if not _vectors_equal(v1, v2):
            return False
    return True


def quasts_equal(q1: Quast | None, q2: Quast | None, size: int) -> bool:
    """Tell whether two quasts agree on their first ``size`` variables.

    A negative ``size`` requires all the variables to be equal.
    """
    if q1 is None and q2 is None:
        return True
    if q1 is None or q2 is None:
        return False

    if q1.condition is not None and q2.condition is not None:
        if not lists_equal([q1.condition], [q2.condition], size):
            return False
        return quasts_equal(q1.then_branch, q2.then_branch, size) and quasts_equal(
            q1.else_branch, q2.else_branch, size
        )
    if q1.condition is not None or q2.condition is not None:
        return False
    return lists_equal(q1.solutions, q2.solutions, size)


def _condition_row(condition: SolutionVector, nvar: int, npar: int, negate: bool) -> list[int]:
    if len(condition.values) < npar + 1:
        raise CandlError("quast condition is shorter than the parameter count")
    coefficients = condition.values[: npar + 1]
    if negate:
        coefficients = [-value for value in coefficients]
    row = [1] + [0] * nvar + coefficients
    if negate:
        # Strict negation of "condition >= 0": -condition - 1 >= 0.
        row[-1] -= 1
    return row


def _branch_union(
    quast: Quast,
    nvar: int,
    npar: int,
    convert,
) -> list[Relation]:
    then_part = convert(quast.then_branch, nvar, npar)
    else_part = convert(quast.else_branch, nvar, npar)
    for relation in then_part:
        relation.rows.append(_condition_row(quast.condition, nvar, npar, negate=False))
    for relation in else_part:
        relation.rows.append(_condition_row(quast.condition, nvar, npar, negate=True))
    return then_part + else_part


def _empty_polyhedron(nvar: int, npar: int) -> Relation:
    return Relation(
        rows=[], nb_output_dims=nvar, nb_parameters=npar, width=nvar + npar + 2
    )


def quast_no_solution_to_polyhedra(
    quast: Quast | None, nvar: int, npar: int
) -> list[Relation]:
    """Return the union of polyhedra on which the quast has no solution."""
    if quast is None:
        return []
    if quast.condition is not None:
        return _branch_union(quast, nvar, npar, quast_no_solution_to_polyhedra)
    if quast.solutions:
        return []
    return [_empty_polyhedron(nvar, npar)]


def quast_to_polyhedra(quast: Quast | None, nvar: int, npar: int) -> list[Relation]:
    """Convert a quast into a union of polyhedra.

    Each leaf yields one polyhedron binding variable ``i`` to the ``i``-th
    solution vector; conditions along the path are added as constraints.
    """
    if quast is None:
        return []
    if quast.condition is not None:
        return _branch_union(quast, nvar, npar, quast_to_polyhedra)

    polyhedron = _empty_polyhedron(nvar, npar)
    constant_at = npar + 1 if quast.new_parameters is not None else npar
    for count, vector in enumerate(quast.solutions or []):
        if vector is None or len(vector.values) <= constant_at:
            raise CandlError("quast solution vector is too short")
        row = [0] + [1 if j == count else 0 for j in range(nvar)]
        row += [-value for value in vector.values[:npar]]
        row.append(-vector.values[constant_at])
        polyhedron.rows.append(row)
    return [polyhedron]


def _is_feasible(
    system: Relation | None, context: Relation | None, integral_unknowns: bool
) -> bool:
    if system is None:
        raise CandlError("no constraint system to solve")
    npar = context.nb_columns - 2 if context is not None else 0
    nunknowns = system.nb_columns - 2 - npar
    if npar < 0 or nunknowns < 0:
        raise CandlError("system and context column counts do not match")
    nvars = nunknowns + npar

    constraints: list[tuple[int, list[int], int]] = [
        (row[0], row[1:-1], row[-1]) for row in system.rows
    ]
    if context is not None:
        constraints += [
            (row[0], [0] * nunknowns + row[1:-1], row[-1]) for row in context.rows
        ]
    if not constraints:
        return True
    if nvars == 0:
        return all(
            constant == 0 if marker == 0 else constant >= 0
            for marker, _, constant in constraints
        )

    matrix = np.array([coeffs for _, coeffs, _ in constraints], dtype=float)
    constants = np.array([constant for _, _, constant in constraints], dtype=float)
    equalities = np.array([marker == 0 for marker, _, _ in constraints])
    lower = -constants
    upper = np.where(equalities, -constants, np.inf)
    integrality = np.array(
        [1 if integral_unknowns else 0] * nunknowns + [1] * npar
    )

    result = milp(
        np.zeros(nvars),
        integrality=integrality,
        bounds=Bounds(-np.inf, np.inf),
        constraints=LinearConstraint(matrix, lower, upper),
    )
    if result.status == _STATUS_OPTIMAL:
        return True
    if result.status == _STATUS_INFEASIBLE:
        return False
    raise CandlError(f"integer programming failed: {result.message}")


def has_integer_point(system: Relation | None, context: Relation | None) -> bool:
    """Tell whether the system has an integral point for some parameters.

    The parameters are the last ``context.nb_columns - 2`` variables before
    the constant; they must satisfy ``context``. All variables may be
    negative.
    """
    return _is_feasible(system, context, integral_unknowns=True)


def has_rational_point(
    system: Relation | None, context: Relation | None, conservative: bool
) -> bool:
    """Tell whether the system has a rational point for some parameters.

    ``conservative`` is accepted for interface compatibility and unused.
    """
    return _is_feasible(system, context, integral_unknowns=False)