"""Draft validation endpoint: step results, progress and the description preview."""

import json
from src.codec.description_codec import DescriptionCodec
from src.utils.errors import ListingWizardError
from src.utils.logging import correlation_context, get_structured_logger, setup_logging
from src.wizard.derivations import DerivationEngine
from src.wizard.field_store import FieldStore
from src.wizard.steps import TOTAL_STEPS, WIZARD_STEPS, validate_step

setup_logging()
logger = get_structured_logger(__name__)


def _response(status: int, payload: dict) -> dict:
    return {
        "statusCode": status,
        "headers": {"Content-Type": "application/json"},
        "body": json.dumps(payload),
    }


def handler(request):
    """
    Validate a wizard draft.

    Body: {"draft": {...}, "step": n}. Without "step" every step is checked.
    """
    with correlation_context() as correlation_id:
        if request.get("method", "POST") != "POST":
            return _response(405, {"error": "Method not allowed"})

        try:
            body = request.get("body") or "{}"
            payload = json.loads(body) if isinstance(body, str) else body
        except json.JSONDecodeError:
            return _response(400, {"error": "Body must be JSON"})

        draft = payload.get("draft") if isinstance(payload, dict) else None
        if not isinstance(draft, dict):
            return _response(400, {"error": "Missing draft object"})

        try:
            store = FieldStore(values=draft)
            DerivationEngine().bind(store).recompute_all()
        except ListingWizardError as e:
            logger.info("Rejected draft", error=str(e))
            return _response(400, {"error": str(e)})

        step = payload.get("step")
        if step is not None and (isinstance(step, bool) or not isinstance(step, int) or not 1 <= step <= TOTAL_STEPS):
            return _response(400, {"error": f"step must be an integer between 1 and {TOTAL_STEPS}"})

        snapshot = store.get_all()
        numbers = [step] if step is not None else [s.number for s in WIZARD_STEPS]
        results = [validate_step(number, snapshot).model_dump() for number in numbers]
        logger.info(
            "Draft validated",
            steps_checked=len(results),
            failures=sum(1 for r in results if not r["ok"]),
        )

        return _response(200, {
            "ok": all(r["ok"] for r in results),
            "results": results,
            "progress": (step or TOTAL_STEPS) / TOTAL_STEPS * 100,
            "description_preview": DescriptionCodec().encode(snapshot),
            "correlation_id": correlation_id,
        })
