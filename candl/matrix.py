"""Construction of violation systems and integral-point checks."""

from __future__ import annotations

import itertools
from typing import Iterable

from candl.dependence import Dependence, Violation
from candl.pip import has_integer_point
from candl.relation import CandlError, Relation, RelationType


def _split(values: Iterable[int], sizes: Iterable[int]) -> list[list[int]]:
    """Cut ``values`` into consecutive blocks of the given sizes."""
    iterator = iter(values)
    return [list(itertools.islice(iterator, size)) for size in sizes]


def _place(row: list[int], start: int, values: list[int]) -> None:
    row[start:start + len(values)] = values


def _check_width(relation: Relation, nb_dims: int, nb_par: int, what: str) -> None:
    expected = nb_dims + nb_par + 2
    if relation.nb_columns != expected:
        raise CandlError(
            f"{what} has {relation.nb_columns} columns, expected {expected}"
        )


def build_violation(
    dependence: Dependence,
    source: Relation,
    target: Relation,
    dimension: int,
    nb_par: int,
) -> Violation:
    """Build the system describing a violation of ``dependence``.

    ``source`` and ``target`` are the scatterings of the source and target
    statements. The system holds the dependence polyhedron, both
    scatterings, equality of the scattering dimensions before
    ``dimension`` and a strict reversal (source after target) at
    ``dimension``. The returned violation has neither its dependence nor
    its dimension set.
    """
    domain = dependence.domain
    max_dimension = min(source.nb_output_dims, target.nb_output_dims)
    if not 1 <= dimension <= max_dimension:
        raise CandlError(
            f"dimension {dimension} is outside 1..{max_dimension}"
        )

    src_local = (
        dependence.source_nb_local_dims_domain
        + dependence.source_nb_local_dims_access
    )
    tgt_local = (
        dependence.target_nb_local_dims_domain
        + dependence.target_nb_local_dims_access
    )
    if src_local + tgt_local != domain.nb_local_dims:
        raise CandlError("dependence local dimension counts are inconsistent")

    _check_width(
        domain,
        domain.nb_output_dims + domain.nb_input_dims + domain.nb_local_dims,
        nb_par,
        "dependence domain",
    )
    for name, scattering in (("source scattering", source), ("target scattering", target)):
        _check_width(
            scattering,
            scattering.nb_output_dims + scattering.nb_input_dims
            + scattering.nb_local_dims,
            nb_par,
            name,
        )
    if source.nb_input_dims > domain.nb_output_dims:
        raise CandlError("source scattering has more inputs than the source domain")
    if target.nb_input_dims > domain.nb_input_dims:
        raise CandlError("target scattering has more inputs than the target domain")

    nb_local_dims = domain.nb_local_dims + source.nb_local_dims + target.nb_local_dims
    nb_output_dims = domain.nb_output_dims + source.nb_output_dims
    nb_input_dims = domain.nb_input_dims + target.nb_output_dims
    nb_columns = nb_output_dims + nb_input_dims + nb_local_dims + nb_par + 2

    source_output_scatt = 1 + domain.nb_output_dims
    target_output_scatt = (
        source_output_scatt + source.nb_output_dims + domain.nb_input_dims
    )
    source_local_scatt = target_output_scatt + target.nb_output_dims + src_local
    target_local_scatt = source_local_scatt + source.nb_local_dims + tgt_local
    params = target_local_scatt + target.nb_local_dims

    rows: list[list[int]] = []

    # The dependence polyhedron.
    domain_sizes = [
        domain.nb_output_dims, domain.nb_input_dims, src_local, tgt_local, nb_par + 1
    ]
    domain_starts = [
        1,
        source_output_scatt + source.nb_output_dims,
        target_output_scatt + target.nb_output_dims,
        source_local_scatt + source.nb_local_dims,
        params,
    ]
    for original in domain.rows:
        row = [0] * nb_columns
        row[0] = original[0]
        for start, block in zip(domain_starts, _split(original[1:], domain_sizes)):
            _place(row, start, block)
        rows.append(row)

    # The source scattering, its inputs tied to the source iterators.
    source_sizes = [
        source.nb_output_dims, source.nb_input_dims, source.nb_local_dims, nb_par + 1
    ]
    source_starts = [source_output_scatt, 1, source_local_scatt, params]
    for original in source.rows:
        row = [0] * nb_columns
        row[0] = original[0]
        for start, block in zip(source_starts, _split(original[1:], source_sizes)):
            _place(row, start, block)
        rows.append(row)

    # The target scattering, negated, its inputs tied to the target iterators.
    target_sizes = [
        target.nb_output_dims, target.nb_input_dims, target.nb_local_dims, nb_par + 1
    ]
    target_starts = [target_output_scatt, 1 + nb_output_dims, target_local_scatt, params]
    for original in target.rows:
        row = [0] * nb_columns
        row[0] = original[0]
        for start, block in zip(target_starts, _split(original[1:], target_sizes)):
            _place(row, start, [-value for value in block])
        rows.append(row)

    # Equal scattering values on the dimensions before the checked one.
    for offset in range(dimension - 1):
        row = [0] * nb_columns
        row[source_output_scatt + offset] = 1
        row[target_output_scatt + offset] = -1
        rows.append(row)

    # Source scheduled strictly after target: source - target - 1 >= 0.
    row = [0] * nb_columns
    row[0] = 1
    row[source_output_scatt + dimension - 1] = 1
    row[target_output_scatt + dimension - 1] = -1
    row[-1] = -1
    rows.append(row)

    system = Relation(
        rows=rows,
        nb_output_dims=nb_output_dims,
        nb_input_dims=nb_input_dims,
        nb_local_dims=nb_local_dims,
        nb_parameters=nb_par,
        type=RelationType.UNDEFINED,
        width=nb_columns,
    )
    return Violation(
        domain=system,
        source_nb_output_dims_scattering=source.nb_output_dims,
        target_nb_output_dims_scattering=target.nb_output_dims,
        source_nb_local_dims_scattering=source.nb_local_dims,
        target_nb_local_dims_scattering=target.nb_local_dims,
    )


def check_point(domain: Relation | None, context: Relation | None) -> bool:
    """Tell whether ``domain`` holds an integral point under ``context``."""
    return has_integer_point(domain, context)