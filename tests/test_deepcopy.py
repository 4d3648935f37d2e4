import pytest

from ctrlgen.context import GenerationContext
from ctrlgen.copyrules import (
    ENABLE_MARKER,
    IS_OBJECT_MARKER,
    LEGACY_ENABLE_MARKER,
)
from ctrlgen.deepcopy import (
    Generator,
    ObjectGenCtx,
    enabled_on_package,
    render_header,
    render_methods,
)
from ctrlgen.gotypes import (
    Basic,
    Field,
    Named,
    Package,
    Pointer,
    Signature,
    Slice,
    Struct,
    TypeInfo,
)
from ctrlgen.outputs import OutputToDirectory

RUNTIME = "k8s.io/apimachinery/pkg/runtime"


def make_package(markers=None):
    pkg = Package(name="cronjob", path="testdata.kubebuilder.io/cronjob",
                  markers=markers if markers is not None else {ENABLE_MARKER: [True]})
    pkg.imports[RUNTIME] = Package(name="runtime", path=RUNTIME)
    return pkg


def add_type(pkg, name, underlying, markers=None):
    named = Named(name, package=pkg, type=underlying)
    pkg.types.append(TypeInfo(name=name, type=named, markers=markers or {}))
    return named


def test_enabled_on_package_marker():
    assert enabled_on_package(make_package({ENABLE_MARKER: [True]})) is True
    assert enabled_on_package(make_package({ENABLE_MARKER: [False]})) is False
    assert enabled_on_package(make_package({})) is False


def test_enabled_on_package_legacy_marker():
    assert enabled_on_package(make_package({LEGACY_ENABLE_MARKER: ["package,register"]})) is True
    assert enabled_on_package(make_package({LEGACY_ENABLE_MARKER: ["false"]})) is False


def test_render_methods_sorted_by_name():
    assert render_methods({"b": "B\n", "a": "A\n", "c": "C\n"}) == "A\nB\nC\n"


def test_render_header_contents():
    header = render_header("cronjob", ['"k8s.io/api"', 'x "example.com/x"'], "// hdr")
    assert header.startswith("// +build !ignore_autogenerated\n\n// hdr\n")
    assert "// Code generated by controller-gen. DO NOT EDIT.\n\npackage cronjob\n" in header
    assert header.endswith('import (\n"k8s.io/api"\nx "example.com/x"\n)\n\n')


def test_object_root_struct_generates_all_methods():
    pkg = make_package()
    add_type(pkg, "Foo", Struct([Field("X", Basic("int"))]),
             markers={IS_OBJECT_MARKER: [True]})
    out = ObjectGenCtx().generate_for_package(pkg)

    assert out.startswith(
        "// +build !ignore_autogenerated\n\n"
        "// Code generated by controller-gen. DO NOT EDIT.\n\n"
        "package cronjob\n\n"
        "import (\n\t\"k8s.io/apimachinery/pkg/runtime\"\n)\n\n")
    assert ("func (in *Foo) DeepCopyInto(out *Foo) {\n"
            "\t*out = *in\n"
            "}\n") in out
    assert ("func (in *Foo) DeepCopy() *Foo {\n"
            "\tif in == nil {\n"
            "\t\treturn nil\n"
            "\t}\n"
            "\tout := new(Foo)\n"
            "\tin.DeepCopyInto(out)\n"
            "\treturn out\n"
            "}\n") in out
    assert ("func (in *Foo) DeepCopyObject() runtime.Object {\n"
            "\tif c := in.DeepCopy(); c != nil {\n"
            "\t\treturn c\n"
            "\t}\n"
            "\treturn nil\n"
            "}\n") in out
    assert out.endswith("}\n")
    assert pkg.errors == []


def test_disabled_package_generates_nothing():
    pkg = make_package({})
    add_type(pkg, "Foo", Struct([Field("X", Basic("int"))]))
    assert ObjectGenCtx().generate_for_package(pkg) is None


def test_object_root_enables_type_without_package_marker():
    pkg = make_package({})
    add_type(pkg, "Foo", Struct([Field("X", Basic("int"))]),
             markers={IS_OBJECT_MARKER: [True]})
    out = ObjectGenCtx().generate_for_package(pkg)
    assert "func (in *Foo) DeepCopyObject() runtime.Object {" in out


def test_unexported_and_disabled_types_skipped():
    pkg = make_package()
    add_type(pkg, "hidden", Struct([Field("X", Basic("int"))]))
    add_type(pkg, "Off", Struct([]), markers={ENABLE_MARKER: [False]})
    add_type(pkg, "Kept", Struct([]))
    out = ObjectGenCtx().generate_for_package(pkg)
    assert "DeepCopyInto(out *Kept)" in out
    assert "hidden" not in out
    assert "Off)" not in out


def test_basic_alias_not_copied():
    pkg = make_package()
    add_type(pkg, "Builtin", Basic("int"))
    assert ObjectGenCtx().generate_for_package(pkg) is None


def test_pointer_field_and_methods_sorted():
    pkg = make_package()
    add_type(pkg, "Zed", Struct([Field("P", Pointer(Basic("int")))]))
    add_type(pkg, "Alpha", Struct([]))
    out = ObjectGenCtx().generate_for_package(pkg)
    assert ("func (in *Zed) DeepCopyInto(out *Zed) {\n"
            "\t*out = *in\n"
            "\tif in.P != nil {\n"
            "\t\tin, out := &in.P, &out.P\n"
            "\t\t*out = new(int)\n"
            "\t\t**out = **in\n"
            "\t}\n"
            "}\n") in out
    assert out.index("DeepCopyInto(out *Alpha)") < out.index("DeepCopyInto(out *Zed)")


def test_slice_type_gets_bare_receiver():
    pkg = make_package()
    foo = add_type(pkg, "Foo", Struct([Field("X", Basic("int"))]))
    add_type(pkg, "FooSlice", Slice(foo))
    out = ObjectGenCtx().generate_for_package(pkg)
    assert ("func (in FooSlice) DeepCopyInto(out *FooSlice) {\n"
            "\t{\n"
            "\t\tin := &in\n"
            "\t\t*out = make(FooSlice, len(*in))\n"
            "\t\tcopy(*out, *in)\n"
            "\t}\n"
            "}\n") in out
    assert ("func (in FooSlice) DeepCopy() FooSlice {\n"
            "\tif in == nil {\n"
            "\t\treturn nil\n"
            "\t}\n"
            "\tout := new(FooSlice)\n"
            "\tin.DeepCopyInto(out)\n"
            "\treturn *out\n"
            "}\n") in out


def test_manual_deep_copy_is_wrapped_not_regenerated():
    pkg = make_package()
    manual = add_type(pkg, "ManualStruct", Struct([Field("StringField", Basic("string"))]))
    manual.add_method("DeepCopy", Signature(results=(manual,)))
    out = ObjectGenCtx().generate_for_package(pkg)
    assert ("func (in *ManualStruct) DeepCopyInto(out *ManualStruct) {\n"
            "\t*out = in.DeepCopy()\n"
            "}\n") in out
    assert "func (in *ManualStruct) DeepCopy()" not in out


def test_header_text_included():
    pkg = make_package()
    add_type(pkg, "Foo", Struct([]))
    out = ObjectGenCtx(header_text="// Header line").generate_for_package(pkg)
    assert out.startswith("// +build !ignore_autogenerated\n\n// Header line\n\n// Code generated")


def test_generator_writes_file_with_year(tmp_path):
    header = tmp_path / "boilerplate.txt"
    header.write_text("// Copyright YEAR Example Authors.\n")
    pkg = make_package()
    add_type(pkg, "Foo", Struct([Field("X", Basic("int"))]))
    out_dir = tmp_path / "out"
    ctx = GenerationContext(roots=[pkg], output_rule=OutputToDirectory(str(out_dir)))

    Generator(header_file=str(header), year="2024").generate(ctx)

    content = (out_dir / "zz_generated.deepcopy.go").read_text()
    assert "// Copyright 2024 Example Authors." in content
    assert "YEAR" not in content
    assert "func (in *Foo) DeepCopyInto(out *Foo) {" in content


def test_generator_skips_packages_without_output(tmp_path):
    pkg = make_package({})
    add_type(pkg, "Foo", Struct([]))
    out_dir = tmp_path / "out"
    ctx = GenerationContext(roots=[pkg], output_rule=OutputToDirectory(str(out_dir)))
    Generator().generate(ctx)
    assert not (out_dir / "zz_generated.deepcopy.go").exists()


def test_generator_missing_header_raises(tmp_path):
    ctx = GenerationContext(roots=[make_package()])
    with pytest.raises(FileNotFoundError):
        Generator(header_file=str(tmp_path / "missing.txt")).generate(ctx)