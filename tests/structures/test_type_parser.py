import pytest
from autoderef.structures.hir.hir_ty import HirArray, HirBareFn, HirInfer, HirPath, HirPtr, HirRef, HirSlice, HirTup, peel_hir_ty_refs
from autoderef.structures.hir.ty import Adt, Array, FnPtr, Mutability, Param, Primitive, Projection, RawPtr, Ref, Slice, Tup, peel_refs
from autoderef.structures.hir.type_parser import TypeParser, split_top_level


@pytest.mark.parametrize(
    "text, expected",
    [
        ("u32", HirPath("u32")),
        ("&str", HirRef(HirPath("str"))),
        ("&'a str", HirRef(HirPath("str"))),
        ("&mut Vec<u8>", HirRef(HirPath("Vec", (HirPath("u8"),)), Mutability.MUT)),
        ("*const u8", HirPtr(HirPath("u8"))),
        ("[u8]", HirSlice(HirPath("u8"))),
        ("[u8; 4]", HirArray(HirPath("u8"), "4")),
        ("(u8, _)", HirTup((HirPath("u8"), HirInfer()))),
        ("fn(u8) -> bool", HirBareFn((HirPath("u8"),), HirPath("bool"))),
        ("HashMap<String, Vec<u8>>", HirPath("HashMap", (HirPath("String"), HirPath("Vec", (HirPath("u8"),))))),
    ],
)
def test_parse(text, expected):
    assert TypeParser().parse(text) == expected


@pytest.mark.parametrize("text", ["&mut Vec<u8>", "[u8; 4]", "(u8, bool)", "fn(u8) -> bool", "*mut String"])
def test_written_type_prints_as_parsed(text):
    assert str(TypeParser().parse(text)) == text


def test_parse_empty():
    with pytest.raises(ValueError):
        TypeParser().parse("  ")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("&str", Ref(Primitive("str"))),
        ("&mut T", Ref(Param("T"), Mutability.MUT)),
        ("Vec<T>", Adt("Vec", (Param("T"),))),
        ("T::Target", Projection("T::Target")),
        ("*mut u8", RawPtr(Primitive("u8"), Mutability.MUT)),
        ("[u8; 4]", Array(Primitive("u8"), 4)),
        ("[u8]", Slice(Primitive("u8"))),
        ("()", Tup()),
        ("fn(u8)", FnPtr((Primitive("u8"),), Tup())),
    ],
)
def test_lower(text, expected):
    assert TypeParser(["T"]).parse_ty(text) == expected


def test_split_top_level():
    assert split_top_level("u8, Vec<(u8, u16)>, fn(u8) -> u8") == ["u8", "Vec<(u8, u16)>", "fn(u8) -> u8"]
    assert split_top_level("u8,") == ["u8"]


def test_peel_refs():
    assert peel_refs(TypeParser().parse_ty("&&mut str")) == (Primitive("str"), 2)
    assert peel_hir_ty_refs(TypeParser().parse("&&str")) == (HirPath("str"), 2)
