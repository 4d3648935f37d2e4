import pytest

from ctrlgen.copyrules import (
    ENABLE_MARKER,
    IS_OBJECT_MARKER,
    LEGACY_ENABLE_MARKER,
    LEGACY_IS_OBJECT_MARKER,
    RUNTIME_OBJECT_PATH,
    enabled_on_type,
    eventual_underlying_type,
    fine_to_shallow_copy,
    gen_object_interface,
    has_any_deep_copy_method,
    has_deep_copy_into_method,
    has_deep_copy_method,
    passes_by_reference,
    result_will_be_pointer,
    should_be_copied,
    use_ptr_receiver,
)
from ctrlgen.gotypes import (
    INVALID,
    Basic,
    Field,
    Map,
    Named,
    Package,
    Pointer,
    Signature,
    Slice,
    Struct,
    TypeInfo,
)

STRING = Basic("string")
INT = Basic("int")


@pytest.fixture
def pkg():
    return Package("cronjob", "testdata.kubebuilder.io/cronjob")


def named(pkg, name, typ):
    return Named(name, pkg, typ)


def test_fine_to_shallow_copy(pkg):
    assert fine_to_shallow_copy(INT)
    assert fine_to_shallow_copy(named(pkg, "TotallyAString", STRING))
    assert fine_to_shallow_copy(Struct([Field("X", INT), Field("S", STRING)]))
    assert not fine_to_shallow_copy(Struct([Field("P", Pointer(INT))]))
    assert not fine_to_shallow_copy(Slice(INT))
    assert not fine_to_shallow_copy(Map(STRING, INT))


def test_passes_by_reference():
    assert passes_by_reference(Slice(INT))
    assert passes_by_reference(Map(STRING, INT))
    assert passes_by_reference(Pointer(INT))
    assert not passes_by_reference(INT)
    assert not passes_by_reference(Struct())


def test_use_ptr_receiver(pkg):
    assert use_ptr_receiver(named(pkg, "Foo", Struct([Field("X", INT)])))
    assert not use_ptr_receiver(named(pkg, "Map", Map(STRING, INT)))
    assert not use_ptr_receiver(named(pkg, "Slice", Slice(INT)))
    assert not use_ptr_receiver(Pointer(INT))
    assert use_ptr_receiver(named(pkg, "Builtin", INT))


def test_eventual_underlying_type(pkg):
    slice_type = Slice(INT)
    inner = named(pkg, "Slice", slice_type)
    outer = named(pkg, "AliasSlice", inner)
    assert eventual_underlying_type(outer) is slice_type
    assert eventual_underlying_type(INT) is INT


def test_deep_copy_ptr_receiver(pkg):
    t = named(pkg, "DeepCopyPtr", Struct())
    t.add_method("DeepCopy", Signature(results=(Pointer(t),), recv=Pointer(t)))
    assert has_deep_copy_method(pkg, t) == (True, True)
    assert has_deep_copy_method(pkg, Pointer(t)) == (True, True)
    assert has_any_deep_copy_method(pkg, t)


def test_deep_copy_non_ptr_receiver(pkg):
    t = named(pkg, "DeepCopyNonPtr", Struct())
    t.add_method("DeepCopy", Signature(results=(t,)))
    assert has_deep_copy_method(pkg, t) == (True, False)


def test_bad_deep_copies(pkg):
    no_return = named(pkg, "BadDeepCopyNoReturn", Struct())
    no_return.add_method("DeepCopy", Signature(recv=Pointer(no_return)))

    has_params = named(pkg, "BadDeepCopyHasParams", Struct())
    has_params.add_method("DeepCopy", Signature(
        params=(STRING,), results=(Pointer(has_params),), recv=Pointer(has_params)))

    ptr_val = named(pkg, "BadDeepCopyPtrVal", Struct())
    ptr_val.add_method("DeepCopy", Signature(
        results=(Pointer(no_return),), recv=Pointer(ptr_val)))

    non_ptr_val = named(pkg, "BadDeepCopyNonPtrVal", Struct())
    non_ptr_val.add_method("DeepCopy", Signature(results=(no_return,)))

    mismatch = named(pkg, "BadDeepCopyPtrMismatch", Struct())
    mismatch.add_method("DeepCopy", Signature(results=(Pointer(mismatch),)))

    for t in (no_return, has_params, ptr_val, non_ptr_val, mismatch):
        assert has_deep_copy_method(pkg, t) == (False, False)
        assert not has_any_deep_copy_method(pkg, t)


def test_deep_copy_into(pkg):
    ptr = named(pkg, "DeepCopyIntoPtr", Struct())
    ptr.add_method("DeepCopyInto", Signature(params=(Pointer(ptr),), recv=Pointer(ptr)))
    non_ptr = named(pkg, "DeepCopyIntoNonPtr", Struct())
    non_ptr.add_method("DeepCopyInto", Signature(params=(Pointer(non_ptr),)))
    ref = named(pkg, "DeepCopyIntoRef", Map(STRING, STRING))
    ref.add_method("DeepCopyInto", Signature(params=(Pointer(ref),)))
    assert has_deep_copy_into_method(pkg, ptr)
    assert has_deep_copy_into_method(pkg, non_ptr)
    assert has_deep_copy_into_method(pkg, ref)
    assert has_any_deep_copy_method(pkg, Pointer(ref))


def test_bad_deep_copy_intos(pkg):
    no_params = named(pkg, "BadDeepCopyIntoNoParams", Struct())
    no_params.add_method("DeepCopyInto", Signature())
    non_ptr_param = named(pkg, "BadDeepCopyIntoNonPtrParam", Struct())
    non_ptr_param.add_method("DeepCopyInto", Signature(params=(non_ptr_param,)))
    has_result = named(pkg, "BadDeepCopyIntoHasResult", Struct())
    has_result.add_method("DeepCopyInto", Signature(
        params=(Pointer(has_result),), results=(named(pkg, "error", STRING),)))
    for t in (no_params, non_ptr_param, has_result):
        assert not has_deep_copy_into_method(pkg, t)


def test_result_will_be_pointer(pkg):
    assert result_will_be_pointer(INT, True, True)
    assert not result_will_be_pointer(INT, True, False)
    assert not result_will_be_pointer(Map(STRING, INT), False, False)
    assert not result_will_be_pointer(Slice(INT), False, False)
    assert result_will_be_pointer(Pointer(INT), False, False)
    assert result_will_be_pointer(named(pkg, "Foo", Struct()), False, False)
    assert not result_will_be_pointer(named(pkg, "Map", Map(STRING, INT)), False, False)


def test_should_be_copied(pkg):
    assert should_be_copied(pkg, "Foo", named(pkg, "Foo", Struct([Field("X", INT)])))
    assert should_be_copied(pkg, "Map", named(pkg, "Map", Map(STRING, INT)))
    assert should_be_copied(pkg, "Slice", named(pkg, "Slice", Slice(INT)))
    assert not should_be_copied(pkg, "TotallyAString", named(pkg, "TotallyAString", STRING))
    assert not should_be_copied(pkg, "Pointer", named(pkg, "Pointer", Pointer(INT)))
    assert not should_be_copied(pkg, "foo", named(pkg, "foo", Struct()))
    assert pkg.errors == []


def test_should_be_copied_manual_basic(pkg):
    t = named(pkg, "Manual", INT)
    t.add_method("DeepCopy", Signature(results=(t,)))
    assert should_be_copied(pkg, "Manual", t)


def test_should_be_copied_invalid(pkg):
    assert not should_be_copied(pkg, "Broken", INVALID)
    assert len(pkg.errors) == 1
    assert "unknown type Broken" in pkg.errors[0].msg


def test_gen_object_interface():
    assert gen_object_interface(TypeInfo("Foo", Struct(), {IS_OBJECT_MARKER: [True]}))
    assert not gen_object_interface(TypeInfo("Foo", Struct(), {IS_OBJECT_MARKER: [False]}))
    assert gen_object_interface(
        TypeInfo("Foo", Struct(), {LEGACY_IS_OBJECT_MARKER: [RUNTIME_OBJECT_PATH]}))
    assert not gen_object_interface(
        TypeInfo("Foo", Struct(), {LEGACY_IS_OBJECT_MARKER: ["other.Thing"]}))
    assert not gen_object_interface(TypeInfo("Foo", Struct()))


def test_enabled_on_type():
    assert not enabled_on_type(True, TypeInfo("T", Struct(), {ENABLE_MARKER: [False]}))
    assert enabled_on_type(False, TypeInfo("T", Struct(), {ENABLE_MARKER: [True]}))
    assert not enabled_on_type(True, TypeInfo("T", Struct(), {LEGACY_ENABLE_MARKER: ["false"]}))
    assert enabled_on_type(False, TypeInfo("T", Struct(), {LEGACY_ENABLE_MARKER: ["true"]}))
    assert enabled_on_type(True, TypeInfo("T", Struct()))
    assert not enabled_on_type(False, TypeInfo("T", Struct()))
    assert enabled_on_type(False, TypeInfo("T", Struct(), {IS_OBJECT_MARKER: [True]}))