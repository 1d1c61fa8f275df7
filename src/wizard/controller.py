"""Step-gated wizard state machine for creating and editing property listings."""

from typing import Any, Optional

from src.codec.description_codec import DescriptionCodec
from src.models.property import StepResult, SubmissionResult
from src.services.property_store import RecordStore
from src.utils.errors import PersistenceError, RecordNotFoundError, SubmitNotAllowedError
from src.utils.logging import correlation_context, get_structured_logger, mask_user_id
from src.wizard.derivations import DerivationEngine
from src.wizard.field_store import FieldStore
from src.wizard.record_mapper import record_to_values, values_to_record
from src.wizard.steps import TOTAL_STEPS, get_step, validate_step

logger = get_structured_logger(__name__)


class WizardController:
    """Owns one wizard session: the draft, its derivations and the current step.

    Forward moves are gated by the current step's validator; backward moves
    are free. ``submit`` is only available on the review step.
    """

    def __init__(
        self,
        record_store: RecordStore,
        store: Optional[FieldStore] = None,
        property_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        codec: Optional[DescriptionCodec] = None,
        engine: Optional[DerivationEngine] = None,
    ):
        self.record_store = record_store
        self.store = store if store is not None else FieldStore()
        self.property_id = property_id
        self.owner_id = owner_id
        self.codec = codec or DescriptionCodec()
        self.engine = (engine or DerivationEngine()).bind(self.store)
        self._current = 1

    @classmethod
    async def open(
        cls,
        record_store: RecordStore,
        property_id: Optional[str] = None,
        owner_id: Optional[str] = None,
        codec: Optional[DescriptionCodec] = None,
    ) -> "WizardController":
        """Start a session; in edit mode the stored row is decoded into the draft."""
        codec = codec or DescriptionCodec()
        if property_id is None:
            return cls(record_store, owner_id=owner_id, codec=codec)

        row = await record_store.fetch_by_id(property_id)
        if row is None:
            raise RecordNotFoundError(f"Property not found: {property_id}")

        # Stored column values are loaded as-is; derivations only run on later edits
        store = FieldStore(values=record_to_values(row, codec))
        logger.info("Wizard opened for editing", property_id=property_id)
        return cls(record_store, store=store, property_id=property_id, owner_id=owner_id, codec=codec)

    @classmethod
    def restore(cls, record_store: RecordStore, snapshot: dict[str, Any], current_step: int = 1, **kwargs) -> "WizardController":
        """Resume a session from a saved draft snapshot."""
        controller = cls(record_store, store=FieldStore.from_snapshot(snapshot), **kwargs)
        controller.engine.recompute_all()
        controller._current = get_step(current_step).number
        return controller

    @property
    def is_edit_mode(self) -> bool:
        return self.property_id is not None

    @property
    def current_step(self) -> int:
        return self._current

    @property
    def step(self):
        return get_step(self._current)

    @property
    def progress(self) -> float:
        """Percentage shown in the progress bar."""
        return self._current / TOTAL_STEPS * 100

    def set(self, path: str, value: Any) -> None:
        self.store.set(path, value)

    def toggle(self, path: str, value: str) -> None:
        self.store.toggle(path, value)

    def validate_current(self) -> StepResult:
        return validate_step(self._current, self.store.get_all())

    def next(self) -> StepResult:
        """Advance one step when the current step validates."""
        result = self.validate_current()
        if not result.ok:
            logger.info(
                "Wizard step incomplete",
                step=result.step,
                reason=result.reason,
            )
            return result
        self._current = min(self._current + 1, TOTAL_STEPS)
        return result

    def back(self) -> int:
        """Go back one step; no validation is required."""
        self._current = max(self._current - 1, 1)
        return self._current

    def go_to(self, step: int) -> StepResult:
        """Jump to a step. Moving forward requires every step in between to validate."""
        target = get_step(step).number
        if target <= self._current:
            self._current = target
            return StepResult.passed(target)

        snapshot = self.store.get_all()
        for number in range(self._current, target):
            result = validate_step(number, snapshot)
            if not result.ok:
                self._current = number
                return result
        self._current = target
        return StepResult.passed(target)

    def first_incomplete_step(self) -> Optional[StepResult]:
        snapshot = self.store.get_all()
        for number in range(1, TOTAL_STEPS + 1):
            result = validate_step(number, snapshot)
            if not result.ok:
                return result
        return None

    def build_record(self):
        """Encode the description and assemble the row for the record store."""
        return values_to_record(
            self.store.get_all(),
            self.codec,
            owner_id=self.owner_id,
            creating=not self.is_edit_mode,
        )

    async def submit(self) -> SubmissionResult:
        """Persist the draft. Store errors propagate; the session is kept for a retry."""
        if self._current != TOTAL_STEPS:
            raise SubmitNotAllowedError(
                f"Submit is only available on step {TOTAL_STEPS}, current step is {self._current}"
            )

        with correlation_context():
            failure = self.first_incomplete_step()
            if failure is not None:
                logger.info("Submit blocked by incomplete step", step=failure.step, reason=failure.reason)
                return SubmissionResult(ok=False, failure=failure)

            row = self.build_record().to_row()
            try:
                if self.is_edit_mode:
                    saved = await self.record_store.update(self.property_id, row)
                else:
                    saved = await self.record_store.create(row)
            except PersistenceError as e:
                logger.error(
                    "Property submit failed",
                    property_id=self.property_id,
                    owner_id=mask_user_id(self.owner_id) if self.owner_id else None,
                    error=str(e),
                )
                raise

            logger.info(
                "Property submitted",
                property_id=self.property_id or (saved or {}).get("id"),
                edit_mode=self.is_edit_mode,
            )
            return SubmissionResult(ok=True, created=not self.is_edit_mode, record=saved)
