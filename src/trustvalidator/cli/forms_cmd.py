"""Form CLI commands: lint, check and audit."""

import importlib
import json
import os
from pathlib import Path

import click

from trustvalidator.forms import FormState, build_validator
from trustvalidator.metadata.loader import FormDefinition, load_form_file
from trustvalidator.metadata.validator import validate_forms_dir, validate_yaml_file
from trustvalidator.validation import (
    FormValidator,
    StructuralWarning,
    register_builtin_predicates,
)


def _default_forms_dir() -> Path:
    return Path(os.environ.get("TRUSTVALIDATOR_FORMS_PATH", Path.cwd() / "forms"))


def _load_predicates(modules: tuple[str, ...]) -> None:
    """Register built-in predicates, then import modules that register more."""
    register_builtin_predicates()
    for module in modules:
        importlib.import_module(module)


def _load_form(form_file: Path) -> FormDefinition:
    try:
        return load_form_file(form_file)
    except ValueError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        raise SystemExit(1)


def _build_validator(
    form: FormDefinition, warnings: list[StructuralWarning]
) -> tuple[FormValidator, FormState]:
    """Register the form's rules; invalid rule declarations exit with an error."""
    try:
        return build_validator(form, sinks=[warnings.append])
    except ValueError as e:
        click.echo(click.style(f"Error: {form.name}: {e}", fg="red"), err=True)
        raise SystemExit(1)


def _read_json(path: Path | None) -> dict:
    if path is None:
        return {}
    with path.open() as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        click.echo(f"Error: {path} must contain a JSON object", err=True)
        raise SystemExit(1)
    return data


predicates_option = click.option(
    "--predicates",
    "predicate_modules",
    multiple=True,
    help="Python module that registers custom predicates (repeatable).",
)


@click.group()
def forms():
    """Form definition commands."""
    pass


@forms.command()
@click.option(
    "--strict",
    is_flag=True,
    default=False,
    help="Treat warnings as errors.",
)
@click.option(
    "--path",
    "target_path",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="Lint a single YAML file instead of the whole forms directory.",
)
@click.option(
    "--dir",
    "forms_dir",
    default=None,
    type=click.Path(path_type=Path),
    help="Forms directory (default: $TRUSTVALIDATOR_FORMS_PATH or ./forms).",
)
@predicates_option
def lint(
    strict: bool,
    target_path: Path | None,
    forms_dir: Path | None,
    predicate_modules: tuple[str, ...],
):
    """Validate form YAML files against the form JSON Schema."""
    _load_predicates(predicate_modules)

    if target_path is not None:
        issues = validate_yaml_file(target_path)
        if strict:
            for issue in issues:
                issue.severity = "error"
    else:
        forms_dir = forms_dir or _default_forms_dir()
        if not forms_dir.exists():
            click.echo(f"Error: Forms directory not found at {forms_dir}", err=True)
            raise SystemExit(1)
        issues = validate_forms_dir(forms_dir, strict=strict)

    errors = [i for i in issues if i.severity == "error"]
    warnings = [i for i in issues if i.severity == "warning"]

    for issue in issues:
        colour = "red" if issue.severity == "error" else "yellow"
        click.echo(click.style(str(issue), fg=colour))

    if errors:
        click.echo(
            click.style(
                f"\n{len(errors)} error(s) found"
                + (f", {len(warnings)} warning(s)" if warnings else ""),
                fg="red",
                bold=True,
            )
        )
        raise SystemExit(1)

    if warnings:
        click.echo(click.style(f"{len(warnings)} warning(s) found.", fg="yellow"))

    click.echo(click.style("All forms are valid.", fg="green", bold=True))


@forms.command()
@click.argument("form_file", type=click.Path(exists=True, path_type=Path))
@click.option(
    "--values",
    "values_file",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="JSON object of field values (strings, or lists for checkbox groups).",
)
@click.option(
    "--native",
    "native_file",
    default=None,
    type=click.Path(exists=True, path_type=Path),
    help="JSON object of native validity flags per field.",
)
@click.option("--json", "as_json", is_flag=True, default=False, help="Print the result as JSON.")
@predicates_option
def check(
    form_file: Path,
    values_file: Path | None,
    native_file: Path | None,
    as_json: bool,
    predicate_modules: tuple[str, ...],
):
    """Validate field values against a form definition."""
    _load_predicates(predicate_modules)
    form = _load_form(form_file)

    warnings: list[StructuralWarning] = []
    validator, state = _build_validator(form, warnings)

    try:
        state.update(_read_json(values_file))
        for name, flags in _read_json(native_file).items():
            state.set_native_flags(name, flags)
    except KeyError as e:
        click.echo(click.style(f"Error: {e.args[0]}", fg="red"), err=True)
        raise SystemExit(1)

    result = validator.validate()

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        for warning in warnings:
            click.echo(click.style(f"Warning: {warning.message}", fg="yellow"))
        for name, field_result in result.fields.items():
            if field_result.valid:
                click.echo(f"  ✓ {name}")
            else:
                click.echo(
                    click.style(f"  ✗ {name}: {', '.join(field_result.errors)}", fg="red")
                )
        if result.valid:
            click.echo(click.style(f"\nForm '{form.name}' is valid.", fg="green", bold=True))
        else:
            invalid = len(result.errors)
            click.echo(
                click.style(f"\n{invalid} invalid field(s).", fg="red", bold=True)
            )

    if not result.valid:
        raise SystemExit(1)


@forms.command()
@click.argument("form_file", type=click.Path(exists=True, path_type=Path))
@predicates_option
def audit(form_file: Path, predicate_modules: tuple[str, ...]):
    """Show structural warnings for a form definition."""
    _load_predicates(predicate_modules)
    form = _load_form(form_file)

    warnings: list[StructuralWarning] = []
    _build_validator(form, warnings)

    if not warnings:
        click.echo(click.style("No structural warnings.", fg="green"))
        return

    for warning in warnings:
        click.echo(click.style(f"[{warning.kind.value}] {warning.message}", fg="yellow"))
    click.echo(f"\n{len(warnings)} warning(s) found.")
