import math

import pytest

from promcommon.histogram import (
    FloatString,
    HistogramBucket,
    SampleHistogram,
    SampleHistogramPair,
)
from promcommon.timestamps import Time


def gen_histogram():
    return SampleHistogram(
        count=6,
        sum=3897,
        buckets=[
            HistogramBucket(1, -4870.992343051145, -4466.7196729968955, 1),
            HistogramBucket(1, -861.0779292198035, -789.6119426088657, 1),
            HistogramBucket(1, -558.3399591246119, -512, 1),
            HistogramBucket(0, 2048, 2233.3598364984477, 1),
            HistogramBucket(0, 2896.3093757400984, 3158.4477704354626, 1),
            HistogramBucket(0, 4466.7196729968955, 4870.992343051145, 1),
        ],
    )


HIST_JSON = (
    '{"count":"6","sum":"3897","buckets":['
    '[1,"-4870.992343051145","-4466.7196729968955","1"],'
    '[1,"-861.0779292198035","-789.6119426088657","1"],'
    '[1,"-558.3399591246119","-512","1"],'
    '[0,"2048","2233.3598364984477","1"],'
    '[0,"2896.3093757400984","3158.4477704354626","1"],'
    '[0,"4466.7196729968955","4870.992343051145","1"]]}'
)


def test_sample_histogram_pair_json_round_trip():
    pair = SampleHistogramPair(timestamp=Time(1234567), histogram=gen_histogram())
    encoded = pair.to_json()
    assert encoded == f"[1234.567,{HIST_JSON}]"
    assert SampleHistogramPair.from_json(encoded) == pair


def test_sample_histogram_json_round_trip():
    hist = gen_histogram()
    assert hist.to_json() == HIST_JSON
    assert SampleHistogram.from_json(HIST_JSON) == hist


def test_histogram_without_buckets_decodes_empty():
    hist = SampleHistogram.from_json('{"count":"2","sum":"3"}')
    assert hist == SampleHistogram(count=2, sum=3)
    assert hist.buckets == ()


def test_bucket_json():
    bucket = HistogramBucket(1, -558.3399591246119, -512, 1)
    assert bucket.to_json() == '[1,"-558.3399591246119","-512","1"]'
    assert HistogramBucket.from_json(bucket.to_json()) == bucket


def test_bucket_wrong_number_of_fields():
    with pytest.raises(ValueError, match="wrong number of fields: 3 != 4"):
        HistogramBucket.from_json('[1,"1","2"]')


def test_bucket_unquoted_float_rejected():
    with pytest.raises(ValueError, match="quoted string"):
        HistogramBucket.from_json('[1,1,"2","3"]')


def test_pair_wrong_number_of_fields():
    with pytest.raises(ValueError, match="wrong number of fields: 1 != 2"):
        SampleHistogramPair.from_json("[1.5]")


def test_float_string_json():
    assert FloatString.from_json('"2.5"') == 2.5
    assert FloatString(2048).to_json() == '"2048"'
    assert FloatString(math.inf).to_json() == '"+Inf"'
    with pytest.raises(ValueError, match="quoted string"):
        FloatString.from_json("2.5")


@pytest.mark.parametrize(
    "bucket, expected",
    [
        (HistogramBucket(0, 2048, 2233.3598364984477, 1), "(2048,2233.3598364984477]:1"),
        (HistogramBucket(1, -512, 0, 3), "[-512,0):3"),
        (HistogramBucket(2, 1, 2, 1), "(1,2):1"),
        (HistogramBucket(3, 1, 2, 1), "[1,2]:1"),
        (HistogramBucket(3, 1234567, 1e21, 0.5), "[1.234567e+06,1e+21]:0.5"),
        (HistogramBucket(1, 0.00001, 0.0001, 1), "[1e-05,0.0001):1"),
    ],
)
def test_bucket_str(bucket, expected):
    assert str(bucket) == expected


def test_histogram_and_pair_str():
    hist = SampleHistogram(count=2, sum=4500, buckets=[HistogramBucket(0, 1, 2, 1)])
    assert str(hist) == "Count: 2.000000, Sum: 4500.000000, Buckets: [(1,2]:1]"
    pair = SampleHistogramPair(Time(1234567), hist)
    assert str(pair) == f"{hist} @[1234.567]"


def test_histogram_equality():
    assert gen_histogram() == gen_histogram()
    other = SampleHistogram(count=2, sum=3897, buckets=gen_histogram().buckets)
    assert other != gen_histogram()