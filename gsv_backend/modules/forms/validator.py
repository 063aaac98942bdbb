"""
Response validation for dynamic forms.

A pydantic model is generated from the form's field definitions. Fields
whose conditional logic does not hold for the submitted values are hidden:
they are left out of the model, so they are never required and never stored.
"""

import re
from typing import Annotated, Any, Callable, Dict, List, Optional, Tuple

from pydantic import AfterValidator, EmailStr, Field, ValidationError, create_model

from gsv_backend.modules.forms.schemas import FormField

BASE_TYPES = {
    "text": str,
    "textarea": str,
    "date": str,
    "select": str,
    "radio": str,
    "email": EmailStr,
    "number": float,
    "multiselect": List[str],
    "checkbox": bool,
    "file": Any,
}


def slugify(title: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", title.lower()).strip("_") or "field"


def assign_keys(fields: List[FormField]) -> List[FormField]:
    """Give every field a unique key, derived from its title when not set"""
    seen = set()
    keyed = []
    for field in fields:
        base = field.key or slugify(field.title)
        key, suffix = base, 2
        while key in seen:
            key = f"{base}_{suffix}"
            suffix += 1
        seen.add(key)
        keyed.append(field.model_copy(update={"key": key}))
    return keyed


def condition_holds(condition: str, actual: Any, expected: Any) -> bool:
    if condition == "equals":
        return actual == expected
    if condition == "not_equals":
        return actual != expected
    if condition in ("contains", "not_contains"):
        if isinstance(actual, list):
            found = expected in actual
        else:
            found = str(expected) in str(actual)
        return found if condition == "contains" else not found
    try:
        if condition == "greater_than":
            return float(actual) > float(expected)
        if condition == "less_than":
            return float(actual) < float(expected)
    except (TypeError, ValueError):
        return False
    return False


def visible_keys(fields: List[FormField], values: Dict[str, Any]) -> set:
    """Single pass over the submitted values; a field depending on an absent value is hidden"""
    visible = set()
    for field in fields:
        logic = field.conditional_logic
        if logic is None:
            visible.add(field.key)
            continue
        actual = values.get(logic.depends_on)
        if actual is None:
            continue
        if condition_holds(logic.condition, actual, logic.value):
            visible.add(field.key)
    return visible


def _one_of(label: str, options: List[str]) -> Callable:
    def check(value):
        chosen = value if isinstance(value, list) else [value]
        invalid = [v for v in chosen if v not in options]
        if invalid:
            raise ValueError(f"{label} must be one of: {', '.join(options)}")
        return value
    return check


def _matches(pattern: str, message: str) -> Callable:
    compiled = re.compile(pattern)

    def check(value: str) -> str:
        if not compiled.search(value):
            raise ValueError(message)
        return value
    return check


def _not_blank(label: str) -> Callable:
    def check(value: str) -> str:
        if not value.strip():
            raise ValueError(f"{label} is required")
        return value
    return check


def field_annotation(field: FormField):
    """Type plus constraints for one field"""
    if field.field_type == "rating":
        return Annotated[int, Field(ge=1, le=5)]

    base = BASE_TYPES.get(field.field_type, str)
    metadata: List[Any] = []
    rules = field.validation
    if base is str and rules is not None:
        if rules.min_length is not None or rules.max_length is not None:
            metadata.append(Field(min_length=rules.min_length, max_length=rules.max_length))
        if rules.pattern:
            metadata.append(AfterValidator(_matches(rules.pattern, rules.custom_message or "Invalid format")))
    if base is str and field.required:
        metadata.append(AfterValidator(_not_blank(field.title)))
    if field.options and field.field_type in ("select", "radio", "multiselect"):
        metadata.append(AfterValidator(_one_of(field.title, field.options)))
    if not metadata:
        return base
    return Annotated[tuple([base] + metadata)]


def build_response_model(fields: List[FormField], visible: Optional[set] = None):
    """Model attributes are positional; each form key is the alias of its attribute"""
    definitions = {}
    for index, field in enumerate(fields):
        if visible is not None and field.key not in visible:
            continue
        annotation = field_annotation(field)
        if field.required:
            definitions[f"field_{index}"] = (annotation, Field(..., alias=field.key))
        else:
            definitions[f"field_{index}"] = (Optional[annotation], Field(None, alias=field.key))
    return create_model("FormSubmission", **definitions)


def _error_message(error: Dict[str, Any], labels: Dict[str, str]) -> Dict[str, str]:
    key = str(error["loc"][0]) if error.get("loc") else "__root__"
    label = labels.get(key, key)
    if error["type"] == "missing":
        message = f"{label} is required"
    elif error["type"] == "value_error":
        message = str(error["msg"]).replace("Value error, ", "", 1)
    else:
        message = f"{label}: {error['msg']}"
    return {"field": key, "message": message}


def validate_submission(fields: List[FormField], values: Dict[str, Any]) -> Tuple[Dict[str, Any], List[Dict[str, str]]]:
    """Validate submitted values; returns (clean values, errors)"""
    visible = visible_keys(fields, values)
    model = build_response_model(fields, visible)
    labels = {field.key: field.title for field in fields}
    submitted = {key: value for key, value in values.items() if key in visible}
    try:
        instance = model.model_validate(submitted)
    except ValidationError as e:
        seen = set()
        errors = []
        for error in e.errors():
            item = _error_message(error, labels)
            if item["field"] not in seen:
                seen.add(item["field"])
                errors.append(item)
        return {}, errors
    return instance.model_dump(mode="json", by_alias=True, exclude_unset=True), []
