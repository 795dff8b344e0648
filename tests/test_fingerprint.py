from scanadvisor.fingerprint import fingerprint, fingerprint_input
from scanadvisor.merger import merge_findings


def test_pinned_digest(make_raw):
    finding = make_raw()
    assert fingerprint(finding) == "bee7ca620aa5f4832f4b27b65c84ca03b84479a536f2560c523494fa1757a5d2"


def test_pinned_digest_with_masked_argument(make_raw):
    finding = make_raw(
        rule="R1",
        title="Unsafe  eval on function argument `x`",
        description="  Eval of untrusted\ninput ",
    )
    assert fingerprint_input(finding) == "R1|Unsafe eval on function argument `<VAR>`|Eval of untrusted input"
    assert fingerprint(finding) == "d113953def460388a24d6f6d696fbed796c1a6246a49d90983e22e861a2355d8"


def test_empty_fields(make_raw):
    finding = make_raw(rule="", title="", description="")
    assert fingerprint(finding) == "565d240f5343e625ae579a4d45a770f1f02c6368b5ed4d06da4fbe6f47c28866"


def test_independent_of_location_and_severity(make_raw):
    first, second = merge_findings(
        [
            make_raw(severity="high", file="a.js", line=1),
            make_raw(severity="medium", file="b.js", line=99),
        ]
    )
    assert first.severity != second.severity
    assert fingerprint(first) == fingerprint(second)


def test_description_changes_fingerprint(make_raw):
    assert fingerprint(make_raw(description="one")) != fingerprint(make_raw(description="two"))


def test_canonical_and_raw_agree(make_raw):
    raw = make_raw(title="Tainted function argument `req`")
    canonical = merge_findings([raw])[0]
    assert fingerprint(raw) == fingerprint(canonical)


def test_lowercase_hex(make_raw):
    digest = fingerprint(make_raw())
    assert len(digest) == 64
    assert digest == digest.lower()
    int(digest, 16)
