"""Generation of DeepCopy, DeepCopyInto and DeepCopyObject methods."""

from __future__ import annotations

from typing import Union

from .codewriter import CodeWriter, ImportsList, type_syntax
from .copyrules import (
    eventual_underlying_type,
    fine_to_shallow_copy,
    gen_object_interface,
    has_any_deep_copy_method,
    has_deep_copy_into_method,
    has_deep_copy_method,
    passes_by_reference,
    result_will_be_pointer,
    use_ptr_receiver,
)
from .gotypes import (
    Basic,
    GoType,
    Invalid,
    Map,
    Named,
    Package,
    Pointer,
    Slice,
    Struct,
    TypeInfo,
    err_from_node,
)

# Either a literal name to use as-is, or a type whose syntax is computed lazily
# (so that imports are only marked as needed when actually referenced).
ActualName = Union[str, GoType]

RUNTIME_PACKAGE = "k8s.io/apimachinery/pkg/runtime"


def _template(*lines: str) -> str:
    return "\n" + "\n".join(lines) + "\n"


_PTR_DEEP_COPY = _template(
    "// DeepCopy is an autogenerated deepcopy function, copying the receiver, creating a new {0}.",
    "func (in *{0}) DeepCopy() *{0} {{",
    "\tif in == nil {{ return nil }}",
    "\tout := new({0})",
    "\tin.DeepCopyInto(out)",
    "\treturn out",
    "}}",
)

_BARE_DEEP_COPY = _template(
    "// DeepCopy is an autogenerated deepcopy function, copying the receiver, creating a new {0}.",
    "func (in {0}) DeepCopy() {0} {{",
    "\tif in == nil {{ return nil }}",
    "\tout := new({0})",
    "\tin.DeepCopyInto(out)",
    "\treturn *out",
    "}}",
)

_PTR_DEEP_COPY_OBJ = _template(
    "// DeepCopyObject is an autogenerated deepcopy function, copying the receiver, creating a new runtime.Object.",
    "func (in *{0}) DeepCopyObject() {1}.Object {{",
    "\tif c := in.DeepCopy(); c != nil {{",
    "\t\treturn c",
    "\t}}",
    "\treturn nil",
    "}}",
)

_BARE_DEEP_COPY_OBJ = _template(
    "// DeepCopyObject is an autogenerated deepcopy function, copying the receiver, creating a new runtime.Object.",
    "func (in {0}) DeepCopyObject() {1}.Object {{",
    "\treturn in.DeepCopy()",
    "}}",
)


class CopyMethodMaker:
    """Writes deepcopy methods for the types of one package."""

    def __init__(self, pkg: Package, imports: ImportsList, writer: CodeWriter) -> None:
        self.pkg = pkg
        self.imports = imports
        self.writer = writer

    def _syntax(self, name: ActualName) -> str:
        if isinstance(name, str):
            return name
        return type_syntax(name, self.pkg, self.imports)

    def _line(self, text: str) -> None:
        self.writer.line(text)

    def generate_methods_for(self, info: TypeInfo) -> None:
        """Write DeepCopyInto, DeepCopy and DeepCopyObject for ``info`` where needed.

        Methods already written by hand are not generated again.
        """
        typ = info.type
        if isinstance(typ, Invalid):
            err: BaseException = ValueError(f"unknown type {info.name}")
            if info.pos is not None:
                err = err_from_node(err, info.pos)
            self.pkg.add_error(err)

        ptr_receiver = use_ptr_receiver(typ)
        has_manual_into = has_deep_copy_into_method(self.pkg, typ)
        has_manual_copy, copy_on_ptr = has_deep_copy_method(self.pkg, typ)
        name = info.name

        if not has_manual_into:
            self._line("// DeepCopyInto is an autogenerated deepcopy function, "
                       "copying the receiver, writing into out. in must be non-nil.")
            if ptr_receiver:
                self._line(f"func (in *{name}) DeepCopyInto(out *{name}) {{")
            else:
                self._line(f"func (in {name}) DeepCopyInto(out *{name}) {{")
                # an extra block lets `in` be redefined as a pointer
                self._line("{in := &in")

            if has_manual_copy:
                if copy_on_ptr:
                    self._line("clone := in.DeepCopy()")
                    self._line("*out = *clone")
                else:
                    self._line("*out = in.DeepCopy()")
            else:
                self.gen_deep_copy_into_block(name, typ)

            if not ptr_receiver:
                self._line("}")
            self._line("}")

        if not has_manual_copy:
            template = _PTR_DEEP_COPY if ptr_receiver else _BARE_DEEP_COPY
            self._line(template.format(name))

            if gen_object_interface(info):
                runtime_alias = self.imports.need_import(RUNTIME_PACKAGE)
                template = _PTR_DEEP_COPY_OBJ if ptr_receiver else _BARE_DEEP_COPY_OBJ
                self._line(template.format(name, runtime_alias))

    def gen_deep_copy_into_block(self, actual_name: ActualName, typ: GoType) -> None:
        """Write the body of a DeepCopyInto for ``typ``, without braces."""
        last = eventual_underlying_type(typ)

        if not isinstance(last, Pointer) and has_any_deep_copy_method(self.pkg, typ):
            self._line("*out = in.DeepCopy()")
            return

        if isinstance(last, Basic):
            has_method, _ = has_deep_copy_method(self.pkg, typ)
            if has_method:
                self._line("*out = in.DeepCopy()")
            self._line("*out = *in")
        elif isinstance(last, Map):
            self._gen_map(actual_name, last)
        elif isinstance(last, Slice):
            self._gen_slice(actual_name, last)
        elif isinstance(last, Struct):
            self._gen_struct(last)
        elif isinstance(last, Pointer):
            self._gen_pointer(last)
        elif isinstance(last, Named):
            self.pkg.add_error(ValueError(
                f"interface type {last} encountered directly, invalid condition"))
        else:
            self.pkg.add_error(ValueError(f"invalid type {last}"))

    def _gen_map(self, actual_name: ActualName, map_type: Map) -> None:
        if not fine_to_shallow_copy(map_type.key):
            self.pkg.add_error(ValueError(f"invalid map key type {map_type.key}"))
            return

        self._line(f"*out = make({self._syntax(actual_name)}, len(*in))")
        with self.writer.for_("key, val := range *in"):
            self._gen_map_value(map_type)

    def _gen_map_value(self, map_type: Map) -> None:
        elem = map_type.elem
        has_copy, copy_on_ptr = has_deep_copy_method(self.pkg, elem)
        has_into = has_deep_copy_into_method(self.pkg, elem)

        if has_into or has_copy:
            field_is_ptr = isinstance(elem, Pointer)
            in_is_ptr = result_will_be_pointer(elem, has_copy, copy_on_ptr)
            if has_copy:
                in_is_ptr = copy_on_ptr
            if in_is_ptr == field_is_ptr:
                self._line("(*out)[key] = val.DeepCopy()")
            elif field_is_ptr:
                self._line("{")
                self._line("x := val.DeepCopy()")
                self._line("(*out)[key] = &x")
                self._line("}")
            else:
                self._line("(*out)[key] = *val.DeepCopy()")
            return

        if fine_to_shallow_copy(elem):
            self._line("(*out)[key] = val")
            return

        underlying = eventual_underlying_type(elem)
        if passes_by_reference(underlying):
            self._line(f"var outVal {self._syntax(underlying)}")

            def copy_value() -> None:
                self._line("in, out := &val, &outVal")
                self.gen_deep_copy_into_block(elem, elem)

            self.writer.if_else("val == nil",
                                lambda: self._line("(*out)[key] = nil"),
                                copy_value)
            self._line("(*out)[key] = outVal")
            return

        if isinstance(underlying, Struct):
            self._line("(*out)[key] = *val.DeepCopy()")
        else:
            self.pkg.add_error(ValueError(f"invalid map value type {underlying}"))

    def _gen_slice(self, actual_name: ActualName, slice_type: Slice) -> None:
        elem = slice_type.elem
        underlying = eventual_underlying_type(elem)

        self._line(f"*out = make({self._syntax(actual_name)}, len(*in))")

        if has_any_deep_copy_method(self.pkg, elem):
            with self.writer.for_("i := range *in"):
                self._line("(*in)[i].DeepCopyInto(&(*out)[i])")
        elif fine_to_shallow_copy(underlying):
            self._line("copy(*out, *in)")
        else:
            with self.writer.for_("i := range *in"):
                if passes_by_reference(underlying) or has_any_deep_copy_method(self.pkg, elem):
                    with self.writer.if_("(*in)[i] != nil"):
                        self._line("in, out := &(*in)[i], &(*out)[i]")
                        self.gen_deep_copy_into_block(elem, elem)
                elif isinstance(underlying, Struct):
                    self._line("(*in)[i].DeepCopyInto(&(*out)[i])")
                else:
                    self.pkg.add_error(ValueError(f"invalid slice element type {underlying}"))

    def _gen_struct(self, struct_type: Struct) -> None:
        self._line("*out = *in")

        for fld in struct_type.fields:
            name = fld.name
            ftype = fld.type
            has_copy, copy_on_ptr = has_deep_copy_method(self.pkg, ftype)
            has_into = has_deep_copy_into_method(self.pkg, ftype)
            if has_into or has_copy:
                field_is_ptr = isinstance(ftype, Pointer)
                in_is_ptr = result_will_be_pointer(ftype, has_copy, copy_on_ptr)
                if field_is_ptr:
                    with self.writer.if_(f"in.{name} != nil"):
                        self._line(f"in, out := &in.{name}, &out.{name}")
                        self.gen_deep_copy_into_block(ftype, ftype)
                elif in_is_ptr == field_is_ptr:
                    self._line(f"out.{name} = in.{name}.DeepCopy()")
                else:
                    self._line(f"in.{name}.DeepCopyInto(&out.{name})")
                continue

            underlying = eventual_underlying_type(ftype)
            if passes_by_reference(underlying):
                with self.writer.if_(f"in.{name} != nil"):
                    self._line(f"in, out := &in.{name}, &out.{name}")
                    self.gen_deep_copy_into_block(ftype, ftype)
                continue

            if isinstance(underlying, Basic):
                continue  # the initial assignment already copied it
            if isinstance(underlying, Struct):
                if fine_to_shallow_copy(ftype):
                    self._line(f"out.{name} = in.{name}")
                else:
                    self._line(f"in.{name}.DeepCopyInto(&out.{name})")
                continue

            self.pkg.add_error(ValueError(f"invalid field type {underlying}"))
            return

    def _gen_pointer(self, pointer_type: Pointer) -> None:
        elem = pointer_type.elem
        underlying = eventual_underlying_type(elem)

        has_copy, copy_on_ptr = has_deep_copy_method(self.pkg, elem)
        has_into = has_deep_copy_into_method(self.pkg, elem)
        if has_into or has_copy:
            out_needs_ptr = result_will_be_pointer(elem, has_copy, copy_on_ptr)
            if has_copy:
                out_needs_ptr = copy_on_ptr
            if out_needs_ptr:
                self._line("*out = (*in).DeepCopy()")
            else:
                self._line("x := (*in).DeepCopy()")
                self._line("*out = &x")
            return

        if fine_to_shallow_copy(underlying):
            self._line(f"*out = new({self._syntax(elem)})")
            self._line("**out = **in")
            return

        if passes_by_reference(underlying):
            self._line(f"*out = new({self._syntax(underlying)})")
            with self.writer.if_("**in != nil"):
                self._line("in, out := *in, *out")
                self.gen_deep_copy_into_block(underlying, eventual_underlying_type(underlying))
            return

        if isinstance(underlying, Struct):
            self._line(f"*out = new({self._syntax(elem)})")
            self._line("(*in).DeepCopyInto(*out)")
        else:
            self.pkg.add_error(ValueError(f"invalid pointer element type {underlying}"))