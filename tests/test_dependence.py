import pytest

from candl.dependence import Dependence, DependenceType, Violation
from candl.relation import Relation


@pytest.mark.parametrize(
    "kind, text",
    [
        (DependenceType.UNDEFINED, "UNSET"),
        (DependenceType.RAW, "RAW"),
        (DependenceType.WAR, "WAR"),
        (DependenceType.WAW, "WAW"),
        (DependenceType.RAR, "RAR"),
        (DependenceType.RAW_SCALPRIV, "unknown"),
    ],
)
def test_label(kind, text):
    assert kind.label() == text


def test_dependence_defaults():
    domain = Relation(rows=[[1, 1, 0, 0]], nb_output_dims=1, nb_input_dims=1)
    dep = Dependence(domain=domain)
    assert dep.type is DependenceType.UNDEFINED
    assert dep.depth == -1
    assert dep.source is None and dep.target is None
    assert dep.domain is domain


def test_dependence_identity_equality():
    domain = Relation(rows=[[1, 1, 0]], nb_output_dims=1)
    first = Dependence(domain=domain)
    second = Dependence(domain=domain)
    assert first == first
    assert not (first == second)


def test_violation_defaults():
    violation = Violation()
    assert violation.dimension == -1
    assert violation.dependence is None
    assert violation.domain is None
    assert violation.source_nb_output_dims_scattering == -1
    assert violation.target_nb_local_dims_scattering == -1


def test_violation_holds_dependence():
    dep = Dependence(domain=Relation.zeros(1, 3), type=DependenceType.RAW)
    violation = Violation(dependence=dep, dimension=2)
    assert violation.dependence is dep
    assert violation.dependence.type.label() == "RAW"
    assert violation.dimension == 2