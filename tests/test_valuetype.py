import pytest

from promcommon.valuetype import ValueType


@pytest.mark.parametrize(
    "value_type,name",
    [
        (ValueType.NONE, "<ValNone>"),
        (ValueType.SCALAR, "scalar"),
        (ValueType.VECTOR, "vector"),
        (ValueType.MATRIX, "matrix"),
        (ValueType.STRING, "string"),
    ],
)
def test_names(value_type, name):
    assert str(value_type) == name


@pytest.mark.parametrize("value_type", list(ValueType))
def test_json_round_trip(value_type):
    encoded = value_type.to_json()
    assert encoded == f'"{value_type}"'
    assert ValueType.from_json(encoded) is value_type


def test_unknown_value_type():
    with pytest.raises(ValueError, match="unknown value type"):
        ValueType.from_json('"histogram"')


def test_non_string_json():
    with pytest.raises(ValueError):
        ValueType.from_json("2")