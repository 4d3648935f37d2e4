"""Rules deciding how and whether types get deepcopy methods."""

from __future__ import annotations

from typing import Any, Optional

from .gotypes import (
    INVALID,
    Basic,
    GoType,
    Invalid,
    Map,
    Named,
    Package,
    Pointer,
    Signature,
    Slice,
    Struct,
    TypeInfo,
)

RUNTIME_OBJECT_PATH = "k8s.io/apimachinery/pkg/runtime.Object"

ENABLE_MARKER = "kubebuilder:object:generate"
IS_OBJECT_MARKER = "kubebuilder:object:root"
LEGACY_ENABLE_MARKER = "k8s:deepcopy-gen"
LEGACY_IS_OBJECT_MARKER = "k8s:deepcopy-gen:interfaces"


def _same_type(a: Optional[GoType], b: Optional[GoType]) -> bool:
    if isinstance(a, Named) or isinstance(b, Named):
        return a is b
    return a == b


def _lookup_method(typ: GoType, name: str) -> Optional[Signature]:
    """A method declared directly on ``typ`` (or on what it points to)."""
    if isinstance(typ, Pointer) and isinstance(typ.elem, Named):
        typ = typ.elem
    if isinstance(typ, Named):
        return typ.methods.get(name)
    return None


def use_ptr_receiver(typ: GoType) -> bool:
    """Whether methods on ``typ`` take a pointer receiver.

    Types that already pass by reference do not.
    """
    if isinstance(typ, (Pointer, Map, Slice)):
        return False
    if isinstance(typ, Named):
        return use_ptr_receiver(typ.underlying())
    return True


def result_will_be_pointer(typ: GoType, has_deep_copy: bool, deep_copy_on_ptr: bool) -> bool:
    """Whether deep-copying ``typ`` yields a pointer."""
    if has_deep_copy:
        return deep_copy_on_ptr
    if isinstance(typ, Pointer):
        return result_will_be_pointer(typ.elem, False, False)
    if isinstance(typ, (Map, Slice)):
        return False
    if isinstance(typ, Named):
        return result_will_be_pointer(typ.underlying(), False, False)
    return True


def should_be_copied(pkg: Package, name: str, typ: GoType) -> bool:
    """Whether deepcopy methods should be made for the declared type.

    That is the case for exported types that have a partial manual
    implementation, alias a non-basic type, or are structs.
    """
    if not name or not name[0].isupper():
        return False

    if isinstance(typ, Invalid) or typ is INVALID:
        pkg.add_error(ValueError(f"unknown type {name}"))
        return False

    # a named pointer is treated as the pointer itself
    if isinstance(typ, Named) and isinstance(typ.underlying(), Pointer):
        typ = typ.underlying()

    last = typ
    if isinstance(typ, Named):
        if has_any_deep_copy_method(pkg, typ):
            return True
        underlying = typ.underlying()
        if underlying is not last:
            if has_any_deep_copy_method(pkg, underlying):
                return True
            if not isinstance(underlying, Basic):
                return True
            last = underlying

    return isinstance(last, Struct)


def has_deep_copy_method(pkg: Package, typ: GoType) -> tuple[bool, bool]:
    """Whether ``typ`` has a manual DeepCopy, and whether its receiver is a pointer."""
    sig = _lookup_method(typ, "DeepCopy")
    if sig is None or sig.params or len(sig.results) != 1:
        return False, False

    result = sig.results[0]
    recv = sig.recv
    if isinstance(recv, Pointer):
        if not isinstance(result, Pointer) or not _same_type(recv.elem, result.elem):
            return False, False
        return True, True
    if not _same_type(result, recv):
        return False, False
    return True, False


def has_deep_copy_into_method(pkg: Package, typ: GoType) -> bool:
    """Whether ``typ`` has a manual DeepCopyInto method."""
    sig = _lookup_method(typ, "DeepCopyInto")
    if sig is None or len(sig.params) != 1:
        return False
    param = sig.params[0]
    if not isinstance(param, Pointer) or sig.results:
        return False
    recv = sig.recv
    if isinstance(recv, Pointer):
        return _same_type(param.elem, recv.elem)
    return _same_type(recv, param.elem)


def has_any_deep_copy_method(pkg: Package, typ: GoType) -> bool:
    """Whether ``typ`` has DeepCopy or DeepCopyInto (either implies the other)."""
    has_deep_copy, _ = has_deep_copy_method(pkg, typ)
    return has_deep_copy or has_deep_copy_into_method(pkg, typ)


def eventual_underlying_type(typ: GoType) -> GoType:
    """The type left after following every name."""
    return typ.underlying()


def fine_to_shallow_copy(typ: GoType) -> bool:
    """Whether a shallow copy of ``typ`` equals a deep one."""
    if isinstance(typ, Basic):
        return True
    if isinstance(typ, Named):
        return fine_to_shallow_copy(typ.underlying())
    if isinstance(typ, Struct):
        return all(fine_to_shallow_copy(f.type) for f in typ.fields)
    return False


def passes_by_reference(typ: GoType) -> bool:
    """Whether ``typ`` is a slice, map or pointer."""
    return isinstance(typ, (Slice, Map, Pointer))


def gen_object_interface(info: TypeInfo) -> bool:
    """Whether the runtime.Object implementation is wanted for the type."""
    enabled: Any = info.marker(IS_OBJECT_MARKER)
    if enabled is not None:
        return bool(enabled)
    return any(value == RUNTIME_OBJECT_PATH
               for value in info.markers.get(LEGACY_IS_OBJECT_MARKER, []))


def enabled_on_type(all_types: bool, info: TypeInfo) -> bool:
    """Whether deepcopy generation is on for the type."""
    type_marker: Any = info.marker(ENABLE_MARKER)
    if type_marker is not None:
        return bool(type_marker)
    legacy: Any = info.marker(LEGACY_ENABLE_MARKER)
    if legacy is not None:
        return str(legacy) == "true"
    return all_types or gen_object_interface(info)