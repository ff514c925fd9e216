import pytest

from promcommon.fingerprint import (
    Fingerprint,
    fast_fingerprint_of,
    fingerprint_from_string,
    fingerprint_of,
    labels_to_signature,
    parse_fingerprint,
    signature_for_labels,
    signature_without_labels,
)

EMPTY = 14695981039346656037
GARLAND = {"name": "garland, briggs", "fear": "love is not enough"}


def test_fingerprint_from_string():
    assert fingerprint_from_string("4294967295") == Fingerprint(285960729237)
    assert parse_fingerprint("4294967295") == Fingerprint(285960729237)


@pytest.mark.parametrize("bad", ["", "xyz", "0x10", "+10", "1_0", " 10", "10000000000000000"])
def test_parse_fingerprint_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        parse_fingerprint(bad)
    with pytest.raises(ValueError):
        fingerprint_from_string(bad)


def test_fingerprint_string_is_zero_padded_hex():
    assert str(Fingerprint(255)) == "00000000000000ff"
    assert str(Fingerprint(18446744073709551615)) == "ffffffffffffffff"


def test_fingerprint_string_round_trip():
    fp = Fingerprint(285960729237)
    assert parse_fingerprint(str(fp)) == fp


def test_fingerprint_out_of_range():
    with pytest.raises(ValueError):
        Fingerprint(1 << 64)
    with pytest.raises(ValueError):
        Fingerprint(-1)


def test_fingerprints_sort():
    fps = [
        Fingerprint(v)
        for v in [14695981039346656037, 285960729237, 0, 4294967295, 285960729237, 18446744073709551615]
    ]
    assert sorted(fps) == [
        0,
        4294967295,
        285960729237,
        285960729237,
        14695981039346656037,
        18446744073709551615,
    ]


@pytest.mark.parametrize(
    "labels, expected",
    [
        ({}, EMPTY),
        (None, EMPTY),
        (GARLAND, 5799056148416392346),
        ({"first-label": "first-label-value"}, 5146282821936882169),
        (
            {"first-label": "first-label-value", "second-label": "second-label-value"},
            3195800080984914717,
        ),
        (
            {
                "first-label": "first-label-value",
                "second-label": "second-label-value",
                "third-label": "third-label-value",
            },
            13843036195897128121,
        ),
    ],
)
def test_labels_to_signature_and_fingerprint(labels, expected):
    assert labels_to_signature(labels) == expected
    assert fingerprint_of(labels) == Fingerprint(expected)


@pytest.mark.parametrize(
    "labels, expected",
    [
        ({}, EMPTY),
        (None, EMPTY),
        (GARLAND, 12952432476264840823),
        ({"first-label": "first-label-value"}, 5147259542624943964),
        (
            {"first-label": "first-label-value", "second-label": "second-label-value"},
            18269973311206963528,
        ),
        (
            {
                "first-label": "first-label-value",
                "second-label": "second-label-value",
                "third-label": "third-label-value",
            },
            15738406913934009676,
        ),
    ],
)
def test_fast_fingerprint(labels, expected):
    assert fast_fingerprint_of(labels) == Fingerprint(expected)


@pytest.mark.parametrize(
    "metric, names, expected",
    [
        ({}, [], EMPTY),
        ({}, ["empty"], 7187873163539638612),
        (GARLAND, ["empty"], 7187873163539638612),
        (GARLAND, ["fear", "name"], 5799056148416392346),
        ({**GARLAND, "foo": "bar"}, ["fear", "name"], 5799056148416392346),
        (GARLAND, ["name", "fear"], 5799056148416392346),
        (GARLAND, [], EMPTY),
    ],
)
def test_signature_for_labels(metric, names, expected):
    assert signature_for_labels(metric, *names) == expected


@pytest.mark.parametrize(
    "metric, excluded, expected",
    [
        ({}, None, EMPTY),
        (GARLAND, {"fear", "name"}, EMPTY),
        ({**GARLAND, "foo": "bar"}, {"foo"}, 5799056148416392346),
        (GARLAND, set(), 5799056148416392346),
        (GARLAND, None, 5799056148416392346),
    ],
)
def test_signature_without_labels(metric, excluded, expected):
    assert signature_without_labels(metric, excluded) == expected