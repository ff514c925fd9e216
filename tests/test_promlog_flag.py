import argparse
import io

import pytest

from promcommon.promlog import Config, new
from promcommon.promlog_flag import add_flags


def make_parser():
    parser = argparse.ArgumentParser(prog="app")
    config = Config()
    add_flags(parser, config)
    return parser, config


def test_defaults():
    parser, config = make_parser()
    namespace = parser.parse_args([])
    assert config.level.value == "info"
    assert config.format.value == "logfmt"
    assert getattr(namespace, "log.level") is config.level


def test_values_are_set():
    parser, config = make_parser()
    parser.parse_args(["--log.level=debug", "--log.format", "json"])
    assert config.level.value == "debug"
    assert config.format.value == "json"


def test_bad_level_is_rejected(capsys):
    parser, config = make_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--log.level=loud"])
    assert 'unrecognized log level "loud"' in capsys.readouterr().err
    assert config.level.value == "info"


def test_bad_format_is_rejected(capsys):
    parser, config = make_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["--log.format=xml"])
    assert 'unrecognized log format "xml"' in capsys.readouterr().err


def test_parsed_level_filters_logger():
    parser, config = make_parser()
    parser.parse_args(["--log.level=error"])
    out = io.StringIO()
    logger = new(config, out)
    logger.warn("msg", "dropped")
    assert out.getvalue() == ""
    logger.error("msg", "kept")
    assert "msg=kept" in out.getvalue()