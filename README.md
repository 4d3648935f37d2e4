# ctrlgen

`ctrlgen` generates `DeepCopyInto`, `DeepCopy` and `DeepCopyObject` methods
for Go API types, runs generators with configurable input and output rules,
and renders marker help for the terminal.

It needs Python 3.10 or later. Its only runtime dependency is `pyyaml`. The
`test` extra adds `pytest`.

## What it does not do

`ctrlgen` does not read, parse or type-check Go source. You describe packages
and their types in Python with the model in `ctrlgen.gotypes`, and the
generator works from that model. It has no command-line entry point, and it
does not turn command-line options into a runtime. The generated code is
re-indented by block structure. It is not run through a full Go formatter.

## Describing a package

`ctrlgen.gotypes` models Go packages and types:

- `Package` has a name, a path, imports, declared `types`, package `markers`,
  source file paths in `compiled_go_files`, and recorded `errors`.
- The type classes are `Basic`, `Named`, `Pointer`, `Slice`, `Map`,
  `Struct` (made of `Field`s) and `Invalid`.
- `Named` types compare by identity. `Named.add_method(name, Signature(...))`
  declares a hand-written method. A signature with no receiver takes the
  named type as its receiver.
- `TypeInfo` pairs a declared type with the markers written on it. Markers
  are given as a dict that maps a marker name, without the leading `+`, to a
  list of values.

```python
from ctrlgen.gotypes import Basic, Field, Named, Package, Struct, TypeInfo
from ctrlgen.deepcopy import ObjectGenCtx

pkg = Package(name="cronjob", path="example.com/cronjob")
pkg.markers["kubebuilder:object:generate"] = [True]

foo = Named("Foo", package=pkg, type=Struct([Field("X", Basic("int"))]))
pkg.types.append(TypeInfo("Foo", foo, markers={"kubebuilder:object:root": [True]}))

source = ObjectGenCtx().generate_for_package(pkg)
print(source)
```

`Package.add_error` records problems as `PackageError` entries. It unrolls an
`ErrList` into single entries. `err_from_node` attaches a position to an
error, and `maybe_err_list` returns `None` when there are no errors.

## Deepcopy generation

`ObjectGenCtx(header_text=...).generate_for_package(root)` returns the
generated source for one package. It returns `None` when no type needs
methods. Methods appear in type-name order after a header, which holds the
build tag, the header text, the package clause and the imports. Any import
that the generated code uses gets a unique alias.

`ctrlgen.deepcopy.Generator(header_file=..., year=...)` has a
`generate(ctx)` method. It writes `zz_generated.deepcopy.go` for each root
package, through the context's output rule. The header file is read through
the context's input rule, and each ` YEAR` in it is replaced by the year.

These markers decide what gets generated:

- `kubebuilder:object:generate` on a package turns generation on for all of
  its types. On a single type, it overrides the package setting.
- `kubebuilder:object:root` asks for `DeepCopyObject` on a type.
- The older `k8s:deepcopy-gen` marker still works. On a package it needs a
  first value of `package`; on a type it needs `true`.
- The older `k8s:deepcopy-gen:interfaces` marker still works, with the value
  `k8s.io/apimachinery/pkg/runtime.Object`.

Methods written by hand are not generated again, and generated code calls
them. Only exported types that are structs, or that name a non-basic type, get
methods. The rules are in `ctrlgen.copyrules`: `enabled_on_type`,
`gen_object_interface`, `should_be_copied`, `has_deep_copy_method`,
`has_deep_copy_into_method`, `fine_to_shallow_copy`, `passes_by_reference`,
`use_ptr_receiver` and `result_will_be_pointer`. `enabled_on_package` is in
`ctrlgen.deepcopy`. `CopyMethodMaker` in `ctrlgen.copymethods` writes the
methods for a single type into a `CodeWriter`.

## Running generators

`ctrlgen.context.GenerationContext` holds the root packages, an output rule
and an input rule. It provides these methods:

- `open` and `open_for_read` open artifacts through the rules.
- `read_file` reads a whole artifact.
- `write_yaml(path, *objs)` writes each object as a YAML document preceded by
  `---`.

`Runtime(generators=..., context=..., output_rules=...)` runs each generator
with its own output rule. Each generator needs a `generate(ctx)` method.
`run()` prints generator failures and package errors to standard error. It
skips type errors. It returns `True` if anything was reported, or if there
were no generators to run.

`ctrlgen.outputs` provides these output rules:

| Rule | Where output goes |
| --- | --- |
| `OutputToNothing` | Discards all output. |
| `OutputToStdout` | Writes everything to standard output. |
| `OutputToDirectory(path)` | Writes every artifact into one directory and creates it if needed. |
| `OutputArtifacts(config, code)` | Sends config to `config`. Code goes to `code` if it is set, otherwise next to the package's first source file. |

`OutputRules.for_generator(gen)` matches generators by identity and falls
back to `default`. `directory_per_generator(base, generators)` gives each
named generator its own subdirectory of `base`.

`ctrlgen.inputs.InputFromFileSystem` reads artifacts from disk.

## Marker help

`ctrlgen.helpdocs` holds help data: `MarkerDoc`, `FieldHelp`, `Argument`,
`DetailedHelp` and `CategoryDoc`. `MarkerDoc.to_dict()` gives a JSON-ready
form. `ctrlgen.helpsort` provides the sorters `SortByCategory` and
`OptionsSort`.

`ctrlgen.markerhelp` renders the help:

- `markers_summary(group, markers)` gives a compact table.
- `markers_details(full_detail, group, markers)` gives field-by-field help.
- `marker_syntax_help` and `field_syntax_help` render the syntax of a
  marker or of one field.

These building blocks are in `ctrlgen.spans`:

- `Text`, `SpanWriter`, `Indented`, `FromWriter`, `line`, `newlines` and
  `Table` are spans.
- `Decoration(...).containing(span)` adds terminal styling. The styling is
  written only when standard output is a terminal and `TERM` is not `dumb`,
  and it never changes `visual_length()`.

Table widths come from `ctrlgen.table.TableCalculator`:

```python
import io

from ctrlgen.spans import Table, Text
from ctrlgen.table import TableCalculator

table = Table(TableCalculator(padding=2, max_width=0))
for name, summary in [("+optional", "marks a field optional"), ("+nullable", "allows null")]:
    table.start_row()
    table.column(Text(name))
    table.column(Text(summary))
    table.end_row()

out = io.StringIO()
table.write_to(out)
print(out.getvalue())
```

`ctrlgen.loaderutil` has `non_vendor_path`, `parse_ast_tag` and
`StructTag`. `StructTag` provides `get` and `lookup` for values in struct tags.