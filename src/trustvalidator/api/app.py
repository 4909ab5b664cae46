"""FastAPI application.

Serves server-side validation for the forms defined under the forms
directory ($TRUSTVALIDATOR_FORMS_PATH, default ./forms). Each request
validates its own snapshot of submitted values.
"""

import logging
import os
from contextlib import asynccontextmanager
from dataclasses import replace
from pathlib import Path
from typing import Any

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, Field

from trustvalidator.forms import FormState, build_validator
from trustvalidator.metadata.loader import FormDefinition, FormLoader
from trustvalidator.metadata.validator import validate_forms_dir
from trustvalidator.validation import (
    FormValidator,
    StructuralWarning,
    register_builtin_predicates,
)

logger = logging.getLogger(__name__)


class ValidateRequest(BaseModel):
    """Submitted field values and, optionally, the client's native validity flags."""

    values: dict[str, Any] = Field(default_factory=dict)
    native: dict[str, dict[str, bool]] = Field(default_factory=dict)


def _resolve_forms_path() -> Path:
    return Path(os.environ.get("TRUSTVALIDATOR_FORMS_PATH", Path.cwd() / "forms"))


def create_app(forms_path: Path | None = None) -> FastAPI:
    """Create the API application.

    Args:
        forms_path: Directory of form YAML files (resolved from the
            environment at startup when omitted)
    """
    loader: FormLoader | None = None

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Load form definitions on startup."""
        nonlocal loader

        register_builtin_predicates()
        path = forms_path or _resolve_forms_path()

        # Report schema problems but don't block startup
        issues = validate_forms_dir(path)
        for issue in issues:
            if issue.severity == "error":
                logger.error("Form schema error: %s", issue)
            else:
                logger.warning("Form schema warning: %s", issue)

        loader = FormLoader(path)
        loader.load_all()
        logger.info("Loaded %d form(s) from %s", len(loader.forms), path)
        yield

    app = FastAPI(title="TrustValidator", lifespan=lifespan)

    def get_form(name: str) -> FormDefinition:
        form = loader.get_form(name) if loader else None
        if form is None:
            raise HTTPException(status_code=404, detail=f"Form '{name}' not found")
        return form

    def wire(form: FormDefinition, **kwargs: Any) -> tuple[FormValidator, FormState]:
        """build_validator, with invalid rule declarations reported as 422."""
        try:
            return build_validator(form, **kwargs)
        except ValueError as e:
            raise HTTPException(
                status_code=422, detail=f"Form '{form.name}' has invalid rules: {e}"
            )

    def prepare(form: FormDefinition, request: ValidateRequest) -> FormValidator:
        state = FormState.from_definition(form)
        try:
            state.update(request.values)
            for field_name, flags in request.native.items():
                state.set_native_flags(field_name, flags)
        except KeyError as e:
            raise HTTPException(status_code=422, detail=e.args[0])

        # Structural warnings are served by the warnings endpoint
        config = replace(form.options, suppress_warnings=True)
        validator, _ = wire(form, state=state, config=config)
        return validator

    @app.get("/api/health")
    def health() -> dict[str, Any]:
        return {"status": "ok", "forms": len(loader.forms) if loader else 0}

    @app.get("/api/forms")
    def list_forms() -> dict[str, Any]:
        forms = [get_form(name) for name in (loader.list_forms() if loader else [])]
        return {
            "data": [
                {
                    "name": form.name,
                    "description": form.description,
                    "fields": [f.name for f in form.fields],
                }
                for form in forms
            ]
        }

    @app.get("/api/forms/{name}")
    def get_form_definition(name: str) -> dict[str, Any]:
        form = get_form(name)
        try:
            rules = {f.name: f.rule_set().to_dict() for f in form.fields}
        except ValueError as e:
            raise HTTPException(
                status_code=422, detail=f"Form '{name}' has invalid rules: {e}"
            )
        return {
            "data": {
                "name": form.name,
                "description": form.description,
                "fields": [
                    {
                        "name": f.name,
                        "type": f.type.value,
                        "label": f.label,
                        "options": f.options,
                        "native": f.native,
                        "rules": rules[f.name],
                    }
                    for f in form.fields
                ],
            }
        }

    @app.get("/api/forms/{name}/warnings")
    def get_warnings(name: str) -> dict[str, Any]:
        form = get_form(name)
        warnings: list[StructuralWarning] = []
        wire(
            form,
            config=replace(form.options, suppress_warnings=False),
            sinks=[warnings.append],
        )
        return {"data": [w.to_dict() for w in warnings]}

    @app.post("/api/forms/{name}/validate")
    def validate_form(name: str, request: ValidateRequest) -> dict[str, Any]:
        form = get_form(name)
        result = prepare(form, request).validate()
        return {"data": result.to_dict()}

    @app.post("/api/forms/{name}/fields/{field_name}/validate")
    def validate_field(
        name: str, field_name: str, request: ValidateRequest
    ) -> dict[str, Any]:
        form = get_form(name)
        validator = prepare(form, request)
        if field_name not in validator.registry:
            raise HTTPException(
                status_code=404,
                detail=f"Field '{field_name}' has no rules in form '{name}'",
            )
        return {"data": validator.validate_one(field_name).to_dict()}

    return app


app = create_app()
