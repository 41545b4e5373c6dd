"""Scop-level bookkeeping: analysis data, union removal and extensions.

Extensions of a scop are ``(uri, content)`` pairs.
"""

from __future__ import annotations

import copy
import logging
from dataclasses import dataclass
from typing import Any, Iterable

from candl.label_mapping import LabelMapping, LabelPair
from candl.relation import CandlError
from candl.statement import (
    Scop,
    StatementInfo,
    clear_statement_info,
    find_label,
    init_statement_info,
)

ARRAYS_URI = "<arrays>"
DEPENDENCE_URI = "<dependence>"

_log = logging.getLogger(__name__)


@dataclass
class ScopInfo:
    """Analysis data attached to a scop."""

    size: int = 0
    scalars_privatizable: list[int] | None = None
    backup: Any = None


def _scop_list(scops: Scop | Iterable[Scop]) -> list[Scop]:
    if isinstance(scops, Scop):
        return [scops]
    return list(scops)


def init_scop_info(scops: Scop | Iterable[Scop]) -> None:
    """Attach a ScopInfo to each scop and a StatementInfo to its statements."""
    for scop in _scop_list(scops):
        scop.info = ScopInfo(backup=scop.info)
        init_statement_info(scop)


def clear_scop_info(scops: Scop | Iterable[Scop]) -> None:
    """Remove the analysis data, restoring what it replaced."""
    for scop in _scop_list(scops):
        for statement in scop.statements:
            clear_statement_info(statement)
        if isinstance(scop.info, ScopInfo):
            scop.info = scop.info.backup


def remove_unions(scop: Scop) -> Scop:
    """Return a new scop with every relation-union part as its own statement.

    The scop's statements must carry StatementInfo. Each new statement's
    ``info`` is a LabelPair holding the original statement label and the
    new statement's position.
    """
    statements = []
    counter = 0
    for statement in scop.statements:
        if not isinstance(statement.info, StatementInfo):
            raise CandlError("statement analysis data is not initialised")
        label = statement.info.label
        for part in statement.remove_unions():
            part.info = LabelPair(original=label, mapped=counter)
            statements.append(part)
            counter += 1

    return Scop(
        context=scop.context.copy(),
        statements=statements,
        extensions=copy.deepcopy(scop.extensions),
        language=scop.language,
        parameters=copy.deepcopy(scop.parameters),
        registry=copy.deepcopy(scop.registry),
        version=scop.version,
    )


def copy_access(scop: Scop, nounion_scop: Scop, mapping: LabelMapping) -> None:
    """Replace the accesses of ``scop`` with those of ``nounion_scop``.

    Statements are matched through ``mapping``; every part of a split
    statement must carry identical accesses. The arrays extension of
    ``nounion_scop``, if any, replaces or is added to that of ``scop``.
    """
    for statement in scop.statements:
        statement.access = []

    for pair in mapping:
        statement = find_label(scop.statements, pair.original)
        part = find_label(nounion_scop.statements, pair.mapped)
        if statement is None or part is None:
            raise CandlError(
                f"no statement for label mapping {pair.original} -> {pair.mapped}"
            )
        if not statement.access:
            statement.access = [relation.copy() for relation in part.access]
        elif statement.access != part.access:
            raise CandlError(
                "Could not merge deunified statements back after scalar "
                "operation.  Not all parts of the statement got identical "
                "acess relations."
            )

    arrays = next(
        (content for uri, content in nounion_scop.extensions if uri == ARRAYS_URI),
        None,
    )
    if arrays is None:
        return
    entry = (ARRAYS_URI, copy.deepcopy(arrays))
    for position, (uri, _) in enumerate(scop.extensions):
        if uri == ARRAYS_URI:
            scop.extensions[position] = entry
            return
    scop.extensions.append(entry)


def add_dependence_extension(scop: Scop, dependences: list) -> None:
    """Put ``dependences`` first among the extensions, replacing older ones."""
    if not dependences:
        return
    if any(uri == DEPENDENCE_URI for uri, _ in scop.extensions):
        scop.extensions = [
            (uri, content)
            for uri, content in scop.extensions
            if uri != DEPENDENCE_URI
        ]
        _log.info("Deleting old dependences found in the dependence extension.")
    scop.extensions.insert(0, (DEPENDENCE_URI, dependences))


def label_mapping(scop: Scop) -> LabelMapping:
    """Collect the label mapping of a scop made by remove_unions.

    Its statements must carry StatementInfo whose backup is the LabelPair
    set by remove_unions; the backups are consumed.
    """
    mapping = LabelMapping()
    for statement in scop.statements:
        info = statement.info
        if not isinstance(info, StatementInfo) or not isinstance(
            info.backup, LabelPair
        ):
            raise CandlError("statement carries no label mapping")
        pair = info.backup
        info.backup = None
        mapping.add(pair.original, info.label)
    return mapping