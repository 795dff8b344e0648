"""Tests for merging raw findings into canonical findings."""

import itertools

from scanadvisor.merger import identity_key, merge_findings
from scanadvisor.models import Occurrence


def test_duplicate_function_argument_findings_merge(make_raw):
    raw = [
        make_raw(rule="R1", title="Unsafe eval on function argument `x`", file="a.js", line=1),
        make_raw(rule="R1", title="Unsafe eval on function argument `y`", file="b.js", line=2),
    ]

    merged = merge_findings(raw)

    assert len(merged) == 1
    finding = merged[0]
    assert finding.title == "Unsafe eval on function argument `<VAR>`"
    assert [o.location for o in finding.occurrences] == ["a.js:1", "b.js:2"]
    assert finding.recommendation is None


def test_first_occurrence_seeds_fields(make_raw):
    raw = [
        make_raw(description="first", cwe="CWE-1", file="a.js"),
        make_raw(description="second", cwe="CWE-2", file="b.js"),
    ]

    finding = merge_findings(raw)[0]

    assert finding.description == "first"
    assert finding.cwe == "CWE-1"
    assert finding.file == "a.js"


def test_severity_is_part_of_identity(make_raw):
    merged = merge_findings([make_raw(severity="high"), make_raw(severity="medium")])
    assert [f.severity for f in merged] == ["high", "medium"]


def test_output_follows_first_seen_order(make_raw):
    raw = [
        make_raw(rule="B"),
        make_raw(rule="A"),
        make_raw(rule="B", file="other.js"),
        make_raw(rule="C"),
    ]
    assert [f.rule for f in merge_findings(raw)] == ["B", "A", "C"]


def test_empty_snippet_and_unknown_line_are_kept(make_raw):
    raw = [make_raw(code_snippet="eval(a)"), make_raw(code_snippet="", line="?", file="b.js")]

    finding = merge_findings(raw)[0]

    assert finding.occurrences[1] == Occurrence(file="b.js", line="?", code_snippet="")


def test_every_raw_finding_maps_to_one_canonical(make_raw):
    raw = [make_raw(rule=f"R{i % 3}", file=f"f{i}.js") for i in range(7)]
    merged = merge_findings(raw)
    assert sum(len(f.occurrences) for f in merged) == len(raw)


def test_merge_is_permutation_invariant_as_a_set(make_raw):
    raw = [
        make_raw(rule="R1", file="a.js", line=1),
        make_raw(rule="R2", file="b.js", line=2),
        make_raw(rule="R1", file="c.js", line=3),
        make_raw(rule="R1", title="Other", file="d.js", line=4),
    ]

    def as_set(findings):
        return {
            (identity_key(f), frozenset(o.location for o in f.occurrences))
            for f in findings
        }

    expected = as_set(merge_findings(raw))
    for permutation in itertools.permutations(raw):
        assert as_set(merge_findings(list(permutation))) == expected


def test_empty_input():
    assert merge_findings([]) == []
