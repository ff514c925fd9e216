import math

import pytest

from promcommon.timestamps import Time
from promcommon.value_float import SamplePair, SampleValue, format_float


@pytest.mark.parametrize(
    "in1,in2,want",
    [
        (3.14, 3.14, True),
        (3.14, 3.1415, False),
        (math.inf, math.inf, True),
        (-math.inf, -math.inf, True),
        (math.inf, -math.inf, False),
        (42, math.inf, False),
        (42, math.nan, False),
        (math.nan, math.nan, True),
    ],
    ids=[
        "equal floats",
        "unequal floats",
        "positive infinities",
        "negative infinities",
        "different infinities",
        "number and infinity",
        "number and NaN",
        "NaNs",
    ],
)
def test_equal_values(in1, in2, want):
    assert SampleValue(in1).equal(SampleValue(in2)) is want


def test_sample_pair_json():
    value = SamplePair(timestamp=Time(1234567), value=SampleValue(123.1))
    plain = '[1234.567,"123.1"]'

    encoded = value.to_json()
    assert encoded == plain
    assert SamplePair.from_json(encoded) == value


def test_format_float_infinities():
    assert format_float(math.inf) == "+Inf"
    assert format_float(-math.inf) == "-Inf"
    assert format_float(123.12) == "123.12"


def test_sample_value_infinity_round_trip():
    encoded = SampleValue(math.inf).to_json()
    assert encoded == '"+Inf"'
    assert SampleValue.from_json(encoded) == math.inf


def test_sample_value_nan_round_trip():
    decoded = SampleValue.from_json(SampleValue(math.nan).to_json())
    assert decoded.equal(SampleValue(math.nan))


def test_sample_value_must_be_quoted():
    with pytest.raises(ValueError, match="sample value must be a quoted string"):
        SampleValue.from_json("123")


def test_sample_value_bad_float():
    with pytest.raises(ValueError):
        SampleValue.from_json('"12x"')


def test_sample_pair_wrong_length():
    with pytest.raises(ValueError):
        SamplePair.from_json("[1234.567]")


def test_sample_pair_unquoted_value():
    with pytest.raises(ValueError):
        SamplePair.from_json("[1234.567,123.1]")


def test_sample_pair_equal_with_nan():
    a = SamplePair(Time(1), SampleValue(math.nan))
    b = SamplePair(Time(1), SampleValue(math.nan))
    c = SamplePair(Time(2), SampleValue(math.nan))
    assert a.equal(b)
    assert not a.equal(c)


def test_sample_pair_string():
    pair = SamplePair(Time(1234567), SampleValue(123.1))
    assert str(pair) == "123.1 @[1234.567]"