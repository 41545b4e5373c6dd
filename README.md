# candl

`candl` provides the data structures and building blocks used to check
whether a new schedule of a static control part (SCoP) of a program
respects its data dependences: integer constraint matrices, statements
and SCoPs with their analysis data, label mappings between SCoPs whose
relation unions were split, dependence and violation records, quast
(quasi-affine solution tree) handling, and the construction of the
constraint system that describes a dependence violation at a given
scheduling dimension, together with an integral-point test for it.

Every analysis error is raised as `candl.relation.CandlError`.

## Modules

- `candl.relation`
  - `Relation`: a constraint matrix. Each row is
    `[eq/in, output dims..., input dims..., local dims..., parameters..., constant]`,
    a leading 0 marking an equality and 1 an inequality (`>= 0`).
    `Relation.zeros(nb_rows, nb_columns)`, the `nb_rows` and `nb_columns`
    properties, `get_line(column)` (first row with a non-zero coefficient
    for variable `column`, or `None`), `array_id()` for access relations,
    and `copy()`.
  - `RelationType`: `UNDEFINED`, `CONTEXT`, `DOMAIN`, `SCATTERING`,
    `READ`, `WRITE`, `MAY_WRITE`.
  - `CandlError`.
- `candl.statement`
  - `Statement` (domain, scattering and access relation unions; the
    `domain` and `scattering` properties give the first part;
    `remove_unions()` splits it into one statement per domain/scattering
    combination) and `Scop` (context, statements, extensions and
    metadata).
  - `StatementInfo` (label, loop depth, kind, loop indices, backup of the
    previous `info`) and `StatementKind`.
  - `init_statement_info(scop)` labels statements in order and computes
    their loop indices from the scalar scattering dimensions;
    `clear_statement_info(statement)` restores the replaced value.
  - `find_label(statements, label)`, `statements_commute(s1, s2)`,
    `scops_comparable(s1, s2)` and `scop_lists_comparable(l1, l2)`.
- `candl.label_mapping`
  - `LabelMapping`: an ordered list of `(original, mapped)` pairs
    (`LabelPair`) with `add`, `extend`, `find_original`, iteration and
    `len`.
- `candl.scop`
  - `ScopInfo`, `init_scop_info(scops)` and `clear_scop_info(scops)`
    (each accepts a single `Scop` or an iterable of them).
  - `remove_unions(scop)`: a new SCoP with each relation-union part as its
    own statement, each tagged with a `LabelPair`.
  - `label_mapping(scop)`: collects those pairs into a `LabelMapping` once
    the split SCoP has been given analysis data.
  - `copy_access(scop, nounion_scop, mapping)`: copies accesses (and the
    arrays extension) back from the split SCoP.
  - `add_dependence_extension(scop, dependences)`: puts the dependences
    first among the extensions, replacing older ones.
- `candl.dependence`
  - `DependenceType` (`RAW`, `RAW_SCALPRIV`, `WAR`, `WAW`, `RAR`,
    `UNDEFINED`; `label()` gives the short report name), `Dependence` and
    `Violation`.
- `candl.pip`
  - `SolutionVector` and `Quast`.
  - `lists_equal(l1, l2, size)` and `quasts_equal(q1, q2, size)`.
  - `quast_to_polyhedra(quast, nvar, npar)` and
    `quast_no_solution_to_polyhedra(quast, nvar, npar)`, which return lists
    of `Relation`.
  - `has_integer_point(system, context)` and
    `has_rational_point(system, context, conservative)`, solved as
    mixed-integer programs with SciPy. The parameters are the last
    `context.nb_columns - 2` variables before the constant.
- `candl.matrix`
  - `build_violation(dependence, source, target, dimension, nb_par)`:
    builds the violation system from a dependence polyhedron and the
    source and target scatterings: equal scattering values on the
    dimensions before `dimension`, source strictly after target at
    `dimension`.
  - `check_point(domain, context)`: whether that system has an integral
    point.

## Example

One statement, `i' = i + 1` as dependence, scheduled once in loop order and
once reversed:

```python
from candl.dependence import Dependence
from candl.matrix import build_violation, check_point
from candl.relation import Relation

# Columns: eq/in, i (source), i' (target), constant.
dependence = Dependence(
    domain=Relation(rows=[[0, 1, -1, 1]], nb_output_dims=1, nb_input_dims=1)
)
context = Relation()  # no parameters, no constraints

# Columns: eq/in, t, i, constant.
forward = Relation(rows=[[0, -1, 1, 0]], nb_output_dims=1, nb_input_dims=1)   # t = i
reverse = Relation(rows=[[0, -1, -1, 0]], nb_output_dims=1, nb_input_dims=1)  # t = -i

legal = build_violation(dependence, forward, forward, 1, 0)
print(check_point(legal.domain, context))    # False: no violation

broken = build_violation(dependence, reverse, reverse, 1, 0)
print(check_point(broken.domain, context))   # True: the dependence is violated
```

## What the package does not do

- It does not compute dependences: `Dependence` objects must be built by
  the caller.
- It does not walk a whole dependence graph to collect violations; checks
  are made one dependence and one dimension at a time with
  `build_violation` and `check_point`.
- It has no command-line program, no option parsing, no reading or
  writing of SCoP files, and no textual or Graphviz reports.