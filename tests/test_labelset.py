import pytest

from promcommon.labelset import (
    METRIC_NAME_RE,
    LabelSet,
    Metric,
    is_valid_metric_name,
)


def test_from_json_and_string():
    ls = LabelSet.from_json('{"monitor": "codelab", "foo": "bar"}')
    assert str(ls) == '{foo="bar", monitor="codelab"}'


def test_from_json_invalid_name():
    with pytest.raises(ValueError) as exc:
        LabelSet.from_json('{"1nvalid_23name": "codelab", "foo": "bar"}')
    assert str(exc.value) == '"1nvalid_23name" is not a valid label name'


def test_from_json_not_an_object():
    with pytest.raises(ValueError):
        LabelSet.from_json('["a"]')


def test_clone():
    ls = LabelSet({"monitor": "codelab", "foo": "bar", "bar": "baz"})
    clone = ls.clone()
    assert clone == ls
    assert type(clone) is LabelSet
    clone["extra"] = "x"
    assert "extra" not in ls


def test_merge():
    ls = LabelSet({"monitor": "codelab", "foo": "bar", "bar": "baz"})
    other = LabelSet({"monitor": "codelab", "dolor": "mi", "lorem": "ipsum"})
    merged = ls.merge(other)
    assert merged == {
        "monitor": "codelab",
        "foo": "bar",
        "bar": "baz",
        "dolor": "mi",
        "lorem": "ipsum",
    }
    assert len(ls) == 3


def test_validate():
    LabelSet({"a": "b"}).validate()
    with pytest.raises(ValueError, match="invalid name"):
        LabelSet({"!bad": "x"}).validate()
    with pytest.raises(ValueError, match="invalid value"):
        LabelSet({"bad": "\udcfflabel"}).validate()


def test_before():
    assert LabelSet().before(LabelSet({"a": "b"}))
    assert not LabelSet({"a": "b"}).before(LabelSet())
    assert LabelSet({"a": "1"}).before(LabelSet({"a": "2"}))
    assert not LabelSet({"a": "2"}).before(LabelSet({"a": "1"}))
    assert LabelSet({"b": "x"}).before(LabelSet({"a": "x"}))
    assert not LabelSet({"a": "x"}).before(LabelSet({"b": "x"}))
    assert not LabelSet({"a": "x"}).before(LabelSet({"a": "x"}))


@pytest.mark.parametrize(
    "labels, fingerprint, fast",
    [
        ({}, 14695981039346656037, 14695981039346656037),
        (
            {"first_name": "electro", "occupation": "robot", "manufacturer": "westinghouse"},
            5911716720268894962,
            11310079640881077873,
        ),
        ({"x": "y"}, 8241431561484471700, 13948396922932177635),
        ({"a": "bb", "b": "c"}, 3016285359649981711, 3198632812309449502),
        ({"a": "b", "bb": "c"}, 7122421792099404749, 5774953389407657638),
    ],
)
def test_metric_fingerprints(labels, fingerprint, fast):
    metric = Metric(labels)
    assert metric.fingerprint() == fingerprint
    assert metric.fast_fingerprint() == fast


@pytest.mark.parametrize(
    "name, valid",
    [
        ("Avalid_23name", True),
        ("_Avalid_23name", True),
        ("1valid_23name", False),
        ("avalid_23name", True),
        ("Ava:lid_23name", True),
        ("a lid_23name", False),
        (":leading_colon", True),
        ("colon:in:the:middle", True),
        ("", False),
    ],
)
def test_metric_name_is_valid(name, valid):
    assert is_valid_metric_name(name) is valid
    assert (METRIC_NAME_RE.fullmatch(name) is not None) is valid


def test_metric_clone():
    m = Metric({"first_name": "electro", "occupation": "robot", "manufacturer": "westinghouse"})
    m2 = m.clone()
    assert type(m2) is Metric
    assert m2 == m


@pytest.mark.parametrize(
    "labels, expected",
    [
        (
            {"first_name": "electro", "occupation": "robot", "manufacturer": "westinghouse"},
            '{first_name="electro", manufacturer="westinghouse", occupation="robot"}',
        ),
        (
            {"__name__": "electro", "occupation": "robot", "manufacturer": "westinghouse"},
            'electro{manufacturer="westinghouse", occupation="robot"}',
        ),
        ({"__name__": "fooname"}, "fooname"),
        ({}, "{}"),
    ],
)
def test_metric_to_string(labels, expected):
    assert str(Metric(labels)) == expected