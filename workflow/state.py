"""Pure session state transitions.

Every function takes a ``SessionState`` and returns a new one; nothing here
mutates shared storage or touches the network.
"""

from dataclasses import fields, replace
from typing import Any

from workflow.errors import PreconditionError
from workflow.models import Selections, SessionState

SELECTION_FIELDS = tuple(f.name for f in fields(Selections))
STATE_FIELDS = tuple(f.name for f in fields(SessionState))

# Dependency order: changing one entry invalidates everything after it.
SELECTION_CHAIN = ("state_code", "dist_code", "complex_code", "est_code", "captcha")

# Data fetched on the strength of a given selection.
DERIVED_DATA = {
    "state_code": ("districts",),
    "dist_code": ("complexes",),
    "complex_code": ("location",),
    "est_code": ("location",),
    "captcha": ("captcha",),
}

STEP_PREREQUISITES: dict[str, tuple[str, ...]] = {
    "list_districts": ("credential", "state_code"),
    "list_complexes": ("credential", "state_code", "districts", "dist_code"),
    "set_location": ("credential", "state_code", "dist_code", "complexes", "complex_code"),
    "fetch_captcha": ("credential", "state_code", "dist_code", "complex_code", "location"),
    "search_party": (
        "credential",
        "state_code",
        "dist_code",
        "complex_code",
        "location",
        "captcha",
    ),
}

PREREQUISITE_LABELS = {
    "credential": "session credential (restart the session)",
    "state_code": "state code",
    "dist_code": "district",
    "complex_code": "court complex",
    "est_code": "establishment code",
    "districts": "district list for the selected state",
    "complexes": "complex list for the selected district",
    "location": "location (run Set Location)",
    "captcha": "captcha (fetch a new one)",
}


def normalize_code(value: Any) -> str | None:
    """Map empty/whitespace values to ``None``; everything else to a stripped str."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def merge(state: SessionState, **changes: Any) -> SessionState:
    """Merge ``changes`` into ``state``.

    Keys may be top-level ``SessionState`` fields or selection field names
    (``state_code``, ``dist_code``, ...). No downstream reset happens here.
    """
    unknown = set(changes) - set(SELECTION_FIELDS) - set(STATE_FIELDS)
    if unknown:
        raise ValueError(f"Unknown session fields: {', '.join(sorted(unknown))}")

    selection_changes = {
        name: normalize_code(changes.pop(name)) for name in SELECTION_FIELDS if name in changes
    }
    if selection_changes:
        base = changes.get("selections", state.selections)
        changes["selections"] = replace(base, **selection_changes)
    return replace(state, **changes)


def reset_downstream_of(state: SessionState, field_name: str) -> SessionState:
    """Clear every selection after ``field_name`` and all data derived from it."""
    if field_name not in SELECTION_CHAIN:
        raise ValueError(f"Unknown selection: {field_name}")

    index = SELECTION_CHAIN.index(field_name)
    downstream = SELECTION_CHAIN[index + 1 :]

    selections = replace(
        state.selections, **{name: None for name in downstream if name in SELECTION_FIELDS}
    )
    cleared = {
        attr: None for name in SELECTION_CHAIN[index:] for attr in DERIVED_DATA.get(name, ())
    }
    return replace(state, selections=selections, results=None, **cleared)


def select(state: SessionState, field_name: str, value: Any) -> SessionState:
    """Set one selection, resetting downstream state only if the value changed."""
    if field_name not in SELECTION_FIELDS:
        raise ValueError(f"Unknown selection: {field_name}")

    value = normalize_code(value)
    if getattr(state.selections, field_name) == value:
        return state
    return reset_downstream_of(merge(state, **{field_name: value}), field_name)


def _present(state: SessionState, name: str) -> bool:
    if name in SELECTION_FIELDS:
        return getattr(state.selections, name) is not None
    return getattr(state, name) is not None


def missing_prerequisites(state: SessionState, step: str) -> list[str]:
    """Names of the prerequisites of ``step`` that ``state`` does not satisfy."""
    return [name for name in STEP_PREREQUISITES[step] if not _present(state, name)]


def can_run(state: SessionState, step: str) -> bool:
    return not missing_prerequisites(state, step)


def require(state: SessionState, step: str) -> None:
    """Raise ``PreconditionError`` unless every prerequisite of ``step`` is present."""
    missing = missing_prerequisites(state, step)
    if missing:
        labels = ", ".join(PREREQUISITE_LABELS.get(name, name) for name in missing)
        raise PreconditionError(step, missing, f"Cannot run {step}: missing {labels}.")
