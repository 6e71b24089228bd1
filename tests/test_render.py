"""Tests for stub declaration rendering."""

from gostub.quickfix import StubParam, render_stub
from gostub.quickfix.stub import import_qualifier
from gostub.semantics.ast import ImportSpec, Program
from gostub.semantics.typesys import (
    BasicType, ChanDir, ChanType, InterfaceType, MapType, NamedType, PointerType,
    Signature, SliceType, StructField, StructType,
)
from gostub.semantics.universe import ERROR_TYPE

REQUEST = NamedType("Request", pkg="http", underlying_type=StructType())
LOCAL = NamedType("T", underlying_type=StructType())


def program(*imports):
    return Program(None, "main", [ImportSpec(None, path, alias) for path, alias in imports], [])


def test_no_parameters():
    assert render_stub("run", []) == "func run() {}"


def test_parameters():
    params = [StubParam("s", BasicType.STRING), StubParam("err", ERROR_TYPE)]
    assert render_stub("u", params) == "func u(s string, err error) {}"


def test_type_spellings():
    params = [
        StubParam("m", MapType(BasicType.STRING, SliceType(PointerType(LOCAL)))),
        StubParam("ch", ChanType(BasicType.INT, ChanDir.RECV)),
        StubParam("fn", Signature((BasicType.INT, SliceType(BasicType.STRING)), (BasicType.BOOL,), True)),
        StubParam("v", InterfaceType()),
        StubParam("p", StructType((StructField("X", BasicType.INT),))),
    ]
    assert render_stub("g", params) == (
        "func g(m map[string][]*T, ch <-chan int, fn func(int, ...string) bool, "
        "v interface{}, p struct{X int}) {}"
    )


def test_imported_types_use_package_name_by_default():
    assert render_stub("h", [StubParam("r", PointerType(REQUEST))]) == "func h(r *http.Request) {}"


class TestImportQualifier:
    def test_plain_import(self):
        q = import_qualifier(program(("net/http", None)))
        assert q(REQUEST) == "http"
        assert q(LOCAL) is None

    def test_renamed_import(self):
        q = import_qualifier(program(("net/http", "web")))
        assert render_stub("h", [StubParam("r", PointerType(REQUEST))], q) == "func h(r *web.Request) {}"

    def test_dot_import(self):
        q = import_qualifier(program(("net/http", ".")))
        assert q(REQUEST) is None

    def test_blank_import_keeps_package_name(self):
        q = import_qualifier(program(("net/http", "_")))
        assert q(REQUEST) == "http"

    def test_package_not_imported_directly(self):
        q = import_qualifier(program(("fmt", None)))
        assert q(NamedType("URL", pkg="url")) == "url"
