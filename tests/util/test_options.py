from argparse import Namespace

import pytest
from autoderef.util.options import Options

cli_options = Options.from_cli()
dict_options = Options.from_dict({"opt.bool": True})

cli_options.set("opt.string", "string")
cli_options.set("opt.int", 42)
cli_options.set("opt.bool", True)
cli_options.set("opt.list", ["one", "two"])


def test_cli_get_string():
    assert cli_options.getstring("opt.string") == "string"
    assert cli_options.getstring("opt.string", fallback="fallback") == "string"
    assert cli_options.getstring("opt.int", fallback="fallback") == "42"
    assert cli_options.getstring("opt.bool", fallback="fallback") == "true"
    assert cli_options.getstring("opt.missing", fallback="FALLBACK") == "FALLBACK"
    with pytest.raises(KeyError):
        cli_options.getstring("opt.missing")


def test_cli_get_boolean():
    assert cli_options.getboolean("opt.bool") == True
    assert cli_options.getboolean("opt.bool", fallback=False) == True
    assert cli_options.getboolean("opt.missing", fallback=False) == False
    with pytest.raises(KeyError):
        cli_options.getboolean("opt.missing")
    with pytest.raises(KeyError):
        cli_options.getboolean("opt.int")


def test_cli_get_int():
    assert cli_options.getint("opt.int") == 42
    assert cli_options.getint("opt.int", fallback=43) == 42
    assert cli_options.getint("opt.missing", fallback=43) == 43
    with pytest.raises(KeyError):
        cli_options.getint("opt.missing")
    with pytest.raises(KeyError):
        cli_options.getint("opt.string")
    with pytest.raises(KeyError):
        cli_options.getint("opt.bool")


def test_cli_get_list():
    assert cli_options.getlist("opt.list") == ["one", "two"]
    assert cli_options.getlist("opt.list", fallback=[]) == ["one", "two"]
    assert cli_options.getlist("opt.missing", fallback=["fallback"]) == ["fallback"]
    with pytest.raises(KeyError):
        cli_options.getlist("opt.missing")
    with pytest.raises(KeyError):
        cli_options.getlist("opt.int")


def test_from_dict():
    assert dict_options.getboolean("opt.bool")


def test_defaults():
    options = Options.load_default_options()
    assert options.getlist("pipeline.lint_passes") == ["dereferencing"]
    assert options.getint("pipeline.jobs") == 1
    assert options.getboolean("dereferencing.lint_ref_patterns")
    assert options.getlist("dereferencing.allowed_lints") == []
    assert options.getstring("diagnostics.min_applicability") == "maybe_incorrect"


def test_from_cli_ignores_missing_arguments():
    args = Namespace(**{"pipeline.jobs": 4, "dereferencing.allowed_lints": None})
    options = Options.from_cli(args)
    assert options.getint("pipeline.jobs") == 4
    assert options.getlist("dereferencing.allowed_lints") == []
