# promcommon

Building blocks for monitoring components:

- a label and metric data model with stable FNV-1a fingerprints,
- millisecond timestamps and the `1d2h`-style duration format,
- query result values (samples, vectors, matrices, scalars, strings and
  native histograms) with their JSON encoding,
- alerts and silences with validation,
- a levelled logfmt/JSON logger and `argparse` flags to configure it,
- build version reports,
- a SigV4 configuration object,
- a prefix-aware WSGI router and a static file server.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Labels, metrics and fingerprints

```python
from promcommon.labelset import LabelSet, Metric, is_valid_metric_name
from promcommon.fingerprint import labels_to_signature, parse_fingerprint

ls = LabelSet({"foo": "bar", "monitor": "codelab"})
ls.validate()                 # raises ValueError on an invalid name or value
print(ls)                     # {foo="bar", monitor="codelab"}
print(ls.fingerprint())       # 64-bit FNV-1a hash, printed as 16 hex digits

m = Metric({"__name__": "up", "job": "node"})
print(m)                      # up{job="node"}
is_valid_metric_name("up")    # True

labels_to_signature({"name": "garland, briggs", "fear": "love is not enough"})
parse_fingerprint("4294967295")
```

`LabelSet` is a `dict` with `validate`, `before`, `clone`, `merge`,
`fingerprint`, `fast_fingerprint` and a `from_json` class method that rejects
invalid label names. `promcommon.fingerprint` also offers `fingerprint_of`,
`fast_fingerprint_of`, `signature_for_labels` and `signature_without_labels`.
`promcommon.labels` holds the well-known label names (`METRIC_NAME_LABEL`,
`JOB_LABEL`, ...), `is_valid_label_name`, `is_valid_label_value` and
`LabelPair`.

## Time and durations

```python
from promcommon.timestamps import Time, parse_duration

d = parse_duration("3w2d1h")
print(d)                      # 23d1h
t = Time.from_unix(1136239445)
print(t.to_json())            # 1136239445
print(t.to_datetime())        # aware UTC datetime
```

Durations accept `y`, `w`, `d`, `h`, `m`, `s` and `ms` units, a year being
365 days and a week 7 days; an invalid or out-of-range string raises
`ValueError`. `Duration` has `to_json`, `from_json` and `to_timedelta`.

## Query values

`promcommon.value` provides `Sample`, `Vector`, `SampleStream`, `Matrix`,
`Scalar` and `String`; `promcommon.value_float` provides `SampleValue` and
`SamplePair`; `promcommon.histogram` provides `FloatString`,
`HistogramBucket`, `SampleHistogram` and `SampleHistogramPair`. Each has
`to_json()` and a `from_json(text)` class method for the query API encoding,
for example `[1234.567,"123.1"]` for a sample pair.

```python
from promcommon.value import Vector

vec = Vector.from_json('[{"metric":{"__name__":"up"},"value":[1.5,"1"]}]')
vec.sort_samples()
print(vec.to_json())
```

`promcommon.valuetype.ValueType` names the kind of a query result
(`scalar`, `vector`, `matrix`, `string`).

## Alerts and silences

```python
from datetime import datetime, timezone
from promcommon.alert import Alert, Alerts
from promcommon.labelset import LabelSet

alert = Alert(labels=LabelSet({"alertname": "DiskFull"}),
              starts_at=datetime.now(timezone.utc))
alert.validate()
print(alert.status().value)   # firing

alerts = Alerts([alert])
alerts.sort_chronologically()
print(alerts.has_firing())    # True
```

`promcommon.silence` has `Matcher` and `Silence`, whose `validate` methods
raise `ValueError` describing the first problem found.

## Logging

```python
import sys
from promcommon.promlog import AllowedLevel, Config, new

logger = new(Config(level=AllowedLevel("info")), sys.stderr)
logger.info("msg", "started", "port", 9090)
logger.debug("msg", "not written at level info")
```

Every entry carries `ts` and `caller`. Output is logfmt by default, or JSON
with `AllowedFormat("json")`. `new_dynamic` returns a `DynamicLogger` whose
level can be changed at run time with `set_level`.
`AllowedLevel.from_yaml` reads a level from a YAML scalar.

`promcommon.promlog_flag.add_flags(parser, config)` adds `--log.level`
(default `info`) and `--log.format` (default `logfmt`) to an
`argparse.ArgumentParser`, storing the chosen values into `config`.

## Version information

```python
from promcommon.version import BuildInfo

info = BuildInfo(version="1.2.3", branch="main", revision="abc123")
print(info.info())            # (version=1.2.3, branch=main, revision=abc123)
print(BuildInfo.current().print("myapp"))
```

`BuildInfo.current()` fills in only the interpreter version and platform;
version, branch, revision and build details are whatever you pass in.

## SigV4 configuration

```python
from promcommon.sigv4_config import SigV4Config

cfg = SigV4Config.from_yaml("region: us-east-2\nprofile: default\n")
```

`from_yaml` rejects unknown and duplicate keys and raises `ValueError` when
only one of `access_key` and `secret_key` is set.

## Routing and static files

```python
from werkzeug.wrappers import Response
from promcommon.route import Router, param, file_serve

router = Router().with_prefix("/api")

def hello(request):
    return Response("hello " + param(request, "name"))

router.get("/hello/:name", hello)
router.get("/static/*filepath", file_serve("./public"))
```

`Router` is a WSGI application. Paths take `:name` parameters and a trailing
`*name` catch-all; `with_instrumentation` wraps every handler registered
afterwards, and `redirect` builds a redirect to a prefixed path.
`promcommon.static_file_server.static_file_server(root)` is a WSGI app serving
files under `root`, setting fixed content types for common web assets
(`.js`, `.css`, `.png`, ...).

## What is not included

- `SigV4Config` only holds and validates signing settings; the package does
  not sign HTTP requests or fetch credentials.
- `BuildInfo` produces text reports only; it does not export a build-info
  metric.
- There is no command-line program; the package is a library.