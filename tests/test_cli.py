"""Tests for the gostub command line."""

import io

import pytest

from gostub.cli import build_parser, main

SOURCE = """package main

func a(s string, i int) {
\td(s, i, s)
}
"""


@pytest.fixture
def source(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "main.go"
    path.write_text(SOURCE)
    return path


def test_prints_stub(source, capsys):
    assert main(["d", str(source)]) == 0
    out, err = capsys.readouterr()
    assert out == "func d(s1 string, i int, s2 string) {}\n"
    assert err == ""


def test_reads_stdin(source, capsys, monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO(SOURCE))
    assert main(["d"]) == 0
    assert capsys.readouterr().out.startswith("func d(")


def test_append(source, capsys):
    assert main(["d", str(source), "--append"]) == 0
    out = capsys.readouterr().out
    assert out == SOURCE + "\nfunc d(s1 string, i int, s2 string) {}\n"


def test_naming_option(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "main.go"
    path.write_text("package main\n\nfunc a(p *int) {\n\tuse(*p)\n}\n")
    assert main(["use", str(path), "--naming", "unwrap"]) == 0
    assert capsys.readouterr().out == "func use(p int) {}\n"


def test_option_overrides_config(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    (tmp_path / "gostub.toml").write_text('naming = "type"\n')
    path = tmp_path / "main.go"
    path.write_text("package main\n\nfunc a(name string) {\n\tgreet(name)\n}\n")
    assert main(["greet", str(path)]) == 0
    assert capsys.readouterr().out == "func greet(s string) {}\n"
    assert main(["greet", str(path), "--naming", "identifier"]) == 0
    assert capsys.readouterr().out == "func greet(name string) {}\n"


def test_call_site_not_found(source, capsys):
    assert main(["missing", str(source)]) == 2
    out, err = capsys.readouterr()
    assert out == ""
    assert err == "GS3001: no call to 'missing' found\n"


def test_parse_failure_has_location(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    path = tmp_path / "bad.go"
    path.write_text("package main\n\nfunc a( {\n")
    assert main(["d", str(path)]) == 2
    err = capsys.readouterr().err
    assert err.startswith(f"GS1001: {path}:3:")


def test_diagnostics(source, capsys):
    assert main(["d", str(source), "--diagnostics", "--no-color"]) == 0
    err = capsys.readouterr().err
    assert "undefined: d" in err


def test_dump_ast(source, capsys):
    assert main(["d", str(source), "--dump-ast"]) == 0
    out, err = capsys.readouterr()
    assert "FuncDecl" in err
    assert out.startswith("func d(")


def test_missing_name(capsys):
    assert main([]) == 2
    assert "function name required" in capsys.readouterr().err


def test_unreadable_source(tmp_path, capsys, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main(["d", str(tmp_path / "nope.go")]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_bad_config(source, capsys):
    (source.parent / "gostub.toml").write_text('naming = "odd"\n')
    assert main(["d", str(source)]) == 2
    assert capsys.readouterr().err.startswith("GS4001: invalid configuration")


def test_version(capsys):
    assert main(["--version"]) == 0
    assert capsys.readouterr().out.startswith("gostub ")


def test_rejects_unknown_policy():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["d", "--naming", "clever"])
