"""Label and metric model, query values, alerts, silences, logging, version info and WSGI routing helpers."""

__version__ = "0.1.0"