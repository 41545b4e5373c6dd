import pytest

from candl.label_mapping import LabelMapping, LabelPair
from candl.relation import CandlError, Relation, RelationType
from candl.scop import (
    ARRAYS_URI,
    DEPENDENCE_URI,
    ScopInfo,
    add_dependence_extension,
    clear_scop_info,
    copy_access,
    init_scop_info,
    label_mapping,
    remove_unions,
)
from candl.statement import Scop, Statement, StatementInfo


def _scattering():
    return Relation(rows=[[0, -1, 0]], nb_output_dims=1)


def _domain(bound):
    return Relation(rows=[[1, 0, bound]])


def _access(array):
    return Relation(rows=[[0, -1, array]], nb_output_dims=1, type=RelationType.WRITE)


def _scop(domain_counts=(1, 1)):
    statements = [
        Statement(
            domains=[_domain(b) for b in range(count)],
            scatterings=[_scattering()],
            access=[_access(n + 1)],
        )
        for n, count in enumerate(domain_counts)
    ]
    return Scop(context=Relation.zeros(0, 2), statements=statements)


def test_init_and_clear_scop_info():
    scop = _scop()
    scop.info = "previous"
    init_scop_info(scop)
    assert isinstance(scop.info, ScopInfo)
    assert scop.info.backup == "previous"
    assert [st.info.label for st in scop.statements] == [0, 1]
    clear_scop_info(scop)
    assert scop.info == "previous"
    assert all(st.info is None for st in scop.statements)


def test_init_scop_info_on_list():
    scops = [_scop(), _scop((1,))]
    init_scop_info(scops)
    assert all(isinstance(s.info, ScopInfo) for s in scops)
    clear_scop_info(scops)
    assert all(s.info is None for s in scops)


def test_remove_unions_splits_statements():
    scop = _scop((2, 1))
    init_scop_info(scop)
    nounion = remove_unions(scop)
    assert len(nounion.statements) == 3
    assert [st.info for st in nounion.statements] == [
        LabelPair(0, 0),
        LabelPair(0, 1),
        LabelPair(1, 2),
    ]
    assert nounion.context == scop.context
    assert nounion.context is not scop.context
    assert nounion.statements[1].domains == [scop.statements[0].domains[1]]


def test_remove_unions_requires_info():
    with pytest.raises(CandlError):
        remove_unions(_scop())


def test_label_mapping_consumes_backup():
    scop = _scop((2, 1))
    init_scop_info(scop)
    nounion = remove_unions(scop)
    init_scop_info(nounion)
    mapping = label_mapping(nounion)
    assert mapping == LabelMapping([(0, 0), (0, 1), (1, 2)])
    assert all(st.info.backup is None for st in nounion.statements)
    assert mapping.find_original(2) == 1


def test_label_mapping_without_pairs_fails():
    scop = _scop()
    init_scop_info(scop)
    with pytest.raises(CandlError):
        label_mapping(scop)


def _prepared():
    scop = _scop((2, 1))
    init_scop_info(scop)
    nounion = remove_unions(scop)
    init_scop_info(nounion)
    mapping = label_mapping(nounion)
    return scop, nounion, mapping


def test_copy_access_takes_nounion_accesses():
    scop, nounion, mapping = _prepared()
    for st in nounion.statements[:2]:
        st.access = [_access(7)]
    copy_access(scop, nounion, mapping)
    assert scop.statements[0].access == [_access(7)]
    assert scop.statements[1].access == nounion.statements[2].access
    assert scop.statements[0].access[0] is not nounion.statements[0].access[0]


def test_copy_access_rejects_differing_parts():
    scop, nounion, mapping = _prepared()
    nounion.statements[1].access = [_access(9)]
    with pytest.raises(CandlError):
        copy_access(scop, nounion, mapping)


def test_copy_access_arrays_extension():
    scop, nounion, mapping = _prepared()
    scop.extensions = [("<other>", 1), (ARRAYS_URI, ["old"])]
    nounion.extensions = [(ARRAYS_URI, ["A", "B"])]
    copy_access(scop, nounion, mapping)
    assert scop.extensions == [("<other>", 1), (ARRAYS_URI, ["A", "B"])]
    assert scop.extensions[1][1] is not nounion.extensions[0][1]


def test_copy_access_adds_arrays_extension():
    scop, nounion, mapping = _prepared()
    nounion.extensions = [(ARRAYS_URI, ["A"])]
    copy_access(scop, nounion, mapping)
    assert scop.extensions == [(ARRAYS_URI, ["A"])]


def test_add_dependence_extension_empty_is_noop():
    scop = _scop()
    scop.extensions = [("<other>", 1)]
    add_dependence_extension(scop, [])
    assert scop.extensions == [("<other>", 1)]


def test_add_dependence_extension_goes_first_and_replaces():
    scop = _scop()
    scop.extensions = [("<other>", 1), (DEPENDENCE_URI, ["old"])]
    add_dependence_extension(scop, ["new"])
    assert scop.extensions == [(DEPENDENCE_URI, ["new"]), ("<other>", 1)]


def test_statement_info_survives_clear_of_split_scop():
    scop, nounion, _ = _prepared()
    clear_scop_info(nounion)
    assert all(st.info is None for st in nounion.statements)
    assert isinstance(scop.statements[0].info, StatementInfo)