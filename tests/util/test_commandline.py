import json

import pytest
from autoderef.pipeline.dereferencing.stability import DEREF_MESSAGE
from autoderef.util.commandline import Colorize, main, parse_commandline
from lint import Linter


@pytest.fixture
def crate_path(tmp_path, crate_description):
    path = tmp_path / "crate.json"
    path.write_text(json.dumps(crate_description))
    return str(path)


class TestParseCommandline:
    def test_defaults(self, crate_path):
        args = parse_commandline([crate_path])
        assert args.crate == crate_path
        assert args.color is Colorize.AUTO
        assert args.verbose == 0
        assert not args.all
        assert not hasattr(args, "pipeline.jobs")

    def test_expert_options(self, crate_path):
        args = parse_commandline([crate_path, "main", "--jobs", "2", "--allow", "explicit_deref_methods", "--no-lint-ref-patterns", "-vv"])
        assert args.item == ["main"]
        assert args.verbose == 2
        assert getattr(args, "pipeline.jobs") == 2
        assert getattr(args, "dereferencing.allowed_lints") == ["explicit_deref_methods"]
        assert getattr(args, "dereferencing.lint_ref_patterns") is False

    def test_missing_crate(self, tmp_path, capsys):
        with pytest.raises(SystemExit):
            parse_commandline([str(tmp_path / "missing.json")])
        assert "no crate description found at" in capsys.readouterr().err

    def test_help_lists_color_choices(self, capsys):
        with pytest.raises(SystemExit):
            parse_commandline(["--help"])
        out = capsys.readouterr().out
        assert "type checked crate" in out
        assert "{always,never,auto}" in out
        assert str(Colorize.NEVER) == "never"

    def test_invalid_choice(self, crate_path):
        with pytest.raises(SystemExit):
            parse_commandline([crate_path, "--min-applicability", "sure"])


class TestMain:
    def test_findings_written_to_file(self, crate_path, tmp_path):
        out = tmp_path / "findings.txt"
        assert main(Linter, [crate_path, "-o", str(out), "--color", "never"]) == 0
        text = out.read_text()
        assert f"warning: {DEREF_MESSAGE}" in text
        assert "`#[warn(clippy::needless_borrow)]`" in text

    def test_allowed_on_commandline(self, crate_path, tmp_path):
        out = tmp_path / "findings.txt"
        assert main(Linter, [crate_path, "--all", "--allow", "needless_borrow", "-o", str(out)]) == 0
        assert out.read_text() == ""

    def test_print_config(self, crate_path, capsys):
        assert main(Linter, [crate_path, "--print-config", "--jobs", "3"]) == 0
        config = json.loads(capsys.readouterr().out)
        assert config["pipeline.jobs"] == 3
        assert config["pipeline.lint_passes"] == ["dereferencing"]

    def test_missing_item_fails(self, crate_path, tmp_path):
        assert main(Linter, [crate_path, "missing", "-o", str(tmp_path / "findings.txt")]) == 1
