from datetime import datetime, timedelta

import pytest

from promcommon.silence import Matcher, Silence

TS = datetime(2023, 1, 2, 3, 4, 5)


@pytest.mark.parametrize(
    "matcher, err",
    [
        (Matcher(name="name", value="value"), None),
        (Matcher(name="name", value="value", is_regex=True), None),
        (Matcher(name="name!", value="value"), "invalid name"),
        (Matcher(name="", value="value"), "invalid name"),
        (Matcher(name="name", value="value\udcff"), "invalid value"),
        (Matcher(name="name", value=""), "invalid value"),
        (Matcher(name="name", value="(", is_regex=True), "invalid regular expression"),
    ],
)
def test_matcher_validate(matcher, err):
    if err is None:
        assert matcher.validate() is None
    else:
        with pytest.raises(ValueError) as exc:
            matcher.validate()
        assert err in str(exc.value)


def test_matcher_from_json():
    m = Matcher.from_json('{"name": "job", "value": "api.*", "isRegex": true}')
    assert m == Matcher(name="job", value="api.*", is_regex=True)


def test_matcher_from_json_missing_name():
    with pytest.raises(ValueError, match="label name in matcher must not be empty"):
        Matcher.from_json('{"value": "x"}')


def test_matcher_from_json_invalid_name():
    with pytest.raises(ValueError, match="is not a valid label name"):
        Matcher.from_json('{"name": "1bad", "value": "x"}')


def test_matcher_from_json_bad_regex():
    with pytest.raises(ValueError):
        Matcher.from_json('{"name": "job", "value": "(", "isRegex": true}')


def _silence(**overrides):
    fields = dict(
        matchers=[Matcher(name="name", value="value")],
        starts_at=TS,
        ends_at=TS,
        created_at=TS,
        created_by="name",
        comment="comment",
    )
    fields.update(overrides)
    return Silence(**fields)


@pytest.mark.parametrize(
    "silence, err",
    [
        (_silence(), None),
        (
            _silence(
                matchers=[
                    Matcher(name="name", value="value"),
                    Matcher(name="name", value="value"),
                    Matcher(name="name", value="value"),
                    Matcher(name="name", value="value", is_regex=True),
                ]
            ),
            None,
        ),
        (_silence(ends_at=TS - timedelta(minutes=1)), "start time must be before end time"),
        (_silence(ends_at=None), "end time missing"),
        (_silence(starts_at=None), "start time missing"),
        (_silence(matchers=[Matcher(name="!name", value="value")]), "invalid matcher"),
        (_silence(comment=""), "comment missing"),
        (_silence(created_at=None), "creation timestamp missing"),
        (_silence(created_by=""), "creator information missing"),
        (_silence(matchers=[], created_by=""), "at least one matcher required"),
    ],
)
def test_silence_validate(silence, err):
    if err is None:
        assert silence.validate() is None
    else:
        with pytest.raises(ValueError) as exc:
            silence.validate()
        assert err in str(exc.value)