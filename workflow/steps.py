"""Workflow steps: bootstrap -> districts -> complexes -> location -> captcha -> search.

Each step takes the current ``SessionState`` and returns a ``StepResult`` with
a new state. Failures never raise; they come back as ``StepResult.error`` with
the message also stored on ``state.error``.
"""

from dataclasses import replace
import json
from typing import Any

from pydantic import BaseModel, ValidationError
import structlog

from config import settings
from workflow.api_client import EcourtsAPIClient
from workflow.errors import (
    DomainError,
    InvalidCaptchaError,
    MalformedResponseError,
    PreconditionError,
    SetupError,
    TransportError,
    WorkflowError,
)
from workflow.models import (
    CaptchaChallenge,
    CourtComplex,
    District,
    Location,
    SearchOutcome,
    SessionState,
    StepResult,
)
from workflow.state import merge, normalize_code, require, reset_downstream_of, select

logger = structlog.get_logger(__name__)

INVALID_CAPTCHA_MARKER = "invalid captcha"


def _begin(state: SessionState, step: str) -> SessionState:
    logger.info("Workflow step started", step=step)
    return replace(state, error=None, notice=None)


def _fail(state: SessionState, step: str, error: WorkflowError) -> StepResult:
    logger.warning(
        "Workflow step failed", step=step, error=str(error), error_type=type(error).__name__
    )
    return StepResult(state=replace(state, error=str(error), notice=None), error=error)


def _succeed(state: SessionState, step: str, payload: Any, notice: str) -> StepResult:
    logger.info("Workflow step completed", step=step)
    return StepResult(state=replace(state, notice=notice), payload=payload)


def _parse_entries(data: dict[str, Any], key: str, model: type[BaseModel]) -> tuple | None:
    """Validate a list of entries; ``None`` if ``key`` is not a list at all."""
    raw = data.get(key)
    if not isinstance(raw, list):
        return None

    entries = []
    for item in raw:
        try:
            entries.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping malformed entry", key=key, error=str(e))
    return tuple(entries)


def _is_zero(status: Any) -> bool:
    if isinstance(status, bool):
        return False
    try:
        return int(status) == 0
    except (TypeError, ValueError):
        return False


def classify_results(results: dict[str, Any]) -> DomainError | None:
    """Return the domain failure embedded in a search ``results`` object, if any."""
    errormsg = results.get("errormsg")
    if not _is_zero(results.get("status")) or not errormsg:
        return None

    text = str(errormsg)
    if INVALID_CAPTCHA_MARKER in text.lower():
        return InvalidCaptchaError(text, results.get("status"))
    return DomainError(text, results.get("status"))


def bootstrap(client: EcourtsAPIClient, state: SessionState | None = None) -> StepResult:
    """Open a new backend session and start from an empty state.

    Any previous state is discarded except the captcha counter, so captcha
    serials stay unique across restarts.
    """
    step = "bootstrap"
    fresh = _begin(SessionState(captcha_serial=state.captcha_serial if state else 0), step)

    try:
        response = client.initial_data()
    except TransportError as e:
        error = SetupError(str(e))
        error.__cause__ = e
        return _fail(fresh, step, error)

    if response.credential is None:
        return _fail(fresh, step, SetupError("Initial data response missing app_token."))

    return _succeed(
        replace(fresh, credential=response.credential),
        step,
        response.data,
        "Initial data fetched. Ready for districts.",
    )


def list_districts(
    client: EcourtsAPIClient, state: SessionState, state_code: str | None
) -> StepResult:
    """Fetch the districts of ``state_code``; resets everything below the state."""
    step = "list_districts"
    state = reset_downstream_of(merge(_begin(state, step), state_code=state_code), "state_code")

    try:
        require(state, step)
        response = client.districts(state.credential, state.selections.state_code)
    except WorkflowError as e:
        return _fail(state, step, e)

    districts = _parse_entries(response.data, "districts", District)
    if districts is None:
        districts = ()
        notice = "Districts request successful, but no districts found or unexpected format."
    else:
        notice = f"Found {len(districts)} districts. Select one."

    new_state = replace(state, credential=response.credential, districts=districts)
    return _succeed(new_state, step, districts, notice)


def list_complexes(
    client: EcourtsAPIClient, state: SessionState, dist_code: str | None = None
) -> StepResult:
    """Fetch the court complexes of the selected (or given) district."""
    step = "list_complexes"
    state = _begin(state, step)
    if dist_code is not None:
        state = select(state, "dist_code", dist_code)
    state = reset_downstream_of(state, "dist_code")

    try:
        require(state, step)
        response = client.complexes(
            state.credential, state.selections.state_code, state.selections.dist_code
        )
    except WorkflowError as e:
        return _fail(state, step, e)

    complexes = _parse_entries(response.data, "complexes", CourtComplex)
    if complexes is None:
        complexes = ()
        notice = "Complexes request successful, but no complexes found or unexpected format."
    else:
        notice = f"Found {len(complexes)} complexes. Select one."

    new_state = replace(state, credential=response.credential, complexes=complexes)
    return _succeed(new_state, step, complexes, notice)


def set_location(
    client: EcourtsAPIClient,
    state: SessionState,
    complex_code: str | None = None,
    est_code: str | None = None,
) -> StepResult:
    """Establish the server-side location needed before a captcha is fetched.

    ``complex_code`` / ``est_code`` update the selections when given; ``None``
    keeps the current selection. An empty ``est_code`` clears it.
    """
    step = "set_location"
    state = _begin(state, step)
    if complex_code is not None:
        state = select(state, "complex_code", complex_code)
    if est_code is not None:
        state = select(state, "est_code", est_code)
    state = reset_downstream_of(state, "est_code")

    try:
        require(state, step)
        selections = state.selections
        response = client.set_location(
            state.credential,
            complex_code=selections.complex_code,
            state_code=selections.state_code,
            dist_code=selections.dist_code,
            est_code=selections.est_code,
        )
    except WorkflowError as e:
        return _fail(state, step, e)

    result = response.data.get("result")
    location = Location(
        complex_code=state.selections.complex_code,
        est_code=state.selections.est_code,
        result=result,
    )
    new_state = replace(state, credential=response.credential, location=location)
    return _succeed(
        new_state,
        step,
        location,
        f"Location set successfully. Result: {json.dumps(result, default=str)}",
    )


def fetch_captcha(client: EcourtsAPIClient, state: SessionState) -> StepResult:
    """Fetch a fresh captcha image. Any previous captcha is discarded first."""
    step = "fetch_captcha"
    state = reset_downstream_of(_begin(state, step), "captcha")

    try:
        require(state, step)
        response = client.fetch_captcha(state.credential)
    except WorkflowError as e:
        return _fail(state, step, e)

    state = replace(state, credential=response.credential)
    image_url = response.data.get("imageUrl")
    if not isinstance(image_url, str) or not image_url.strip():
        return _fail(state, step, MalformedResponseError("Captcha response missing imageUrl."))

    captcha = CaptchaChallenge(image_url=image_url, serial=state.captcha_serial + 1)
    new_state = replace(state, captcha=captcha, captcha_serial=captcha.serial)
    return _succeed(
        new_state, step, captcha, "Captcha image fetched. Please enter the code below."
    )


def search_party(
    client: EcourtsAPIClient,
    state: SessionState,
    party_name: str | None,
    reg_year: str | None,
    captcha_text: str | None,
    case_status: str | None = None,
) -> StepResult:
    """Run the party search with the captcha text for the current captcha.

    ``case_status`` defaults to the configured status ("Pending"); an empty
    string searches any status.
    """
    step = "search_party"
    state = replace(_begin(state, step), results=None)
    if case_status is None:
        case_status = settings.default_case_status

    inputs = {
        "party_name": normalize_code(party_name),
        "reg_year": normalize_code(reg_year),
        "captcha_text": normalize_code(captcha_text),
    }
    missing_inputs = [name for name, value in inputs.items() if value is None]

    try:
        if missing_inputs:
            raise PreconditionError(
                step,
                missing_inputs,
                "Please fill all required search fields: "
                f"{', '.join(name.replace('_', ' ') for name in missing_inputs)}.",
            )
        require(state, step)
        selections = state.selections
        response = client.search_party(
            state.credential,
            party_name=inputs["party_name"],
            reg_year=inputs["reg_year"],
            case_status=case_status,
            captcha_code=inputs["captcha_text"],
            state_code=selections.state_code,
            dist_code=selections.dist_code,
            complex_code=selections.complex_code,
            est_code=selections.est_code,
        )
    except WorkflowError as e:
        return _fail(state, step, e)

    state = replace(state, credential=response.credential)
    results = response.data.get("results")
    if not isinstance(results, dict):
        return _fail(state, step, MalformedResponseError("Search response missing results data."))

    failure = classify_results(results)
    if failure is not None:
        if isinstance(failure, InvalidCaptchaError):
            state = replace(state, captcha=None)
        return _fail(state, step, failure)

    outcome = SearchOutcome.from_results(results)
    return _succeed(replace(state, results=outcome), step, outcome, "Search successful!")
