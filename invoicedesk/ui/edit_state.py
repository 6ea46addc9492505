"""
Pending edit tracking for an entity being edited in the TUI.

The tracker keeps a sparse map of field overrides against an immutable base
snapshot. A field is pending only while its value differs from the base under
that field's comparator, so editing a value back to the original clears it.
Saving builds one minimal patch from the pending fields and hands it to an
async persistence callable.
"""

from __future__ import annotations

import logging
import operator
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Generic,
    Iterable,
    Mapping,
    Optional,
    Sequence,
    TypeVar,
)

from invoicedesk.exceptions import UnknownFieldError
from invoicedesk.models import Invoice, PatchResult
from invoicedesk.utils.datetime_utils import same_calendar_day, to_iso

logger = logging.getLogger(__name__)

E = TypeVar("E")

PersistCallable = Callable[[str, Dict[str, Any]], Awaitable[PatchResult]]


def _identity(value: Any) -> Any:
    return value


@dataclass(frozen=True)
class FieldSpec(Generic[E]):
    """How one editable field is read, compared and written into a patch.

    Attributes:
        name: Field name used by setters.
        read: Returns the field's value on the base entity.
        patch_key: Key of the value in the patch (or in its section).
        section: Name of the nested patch object the key belongs to, if any.
        equals: Comparator deciding whether an edit matches the base value.
        serialize: Converts the edited value to its patch representation.
    """

    name: str
    read: Callable[[E], Any]
    patch_key: str
    section: Optional[str] = None
    equals: Callable[[Any, Any], bool] = operator.eq
    serialize: Callable[[Any], Any] = _identity


@dataclass(frozen=True)
class PatchSection(Generic[E]):
    """A nested patch object seeded from the base entity before overlaying edits."""

    name: str
    read_base: Callable[[E], Dict[str, Any]]


@dataclass(frozen=True)
class SaveResult:
    success: bool
    error: Optional[str] = None
    nothing_to_save: bool = False
    patch: Dict[str, Any] = field(default_factory=dict)


class PendingEditTracker(Generic[E]):
    """Track field edits against ``base`` and persist them as one patch."""

    def __init__(
        self,
        base: E,
        fields: Sequence[FieldSpec[E]],
        persist: PersistCallable,
        entity_id: Callable[[E], str],
        sections: Iterable[PatchSection[E]] = (),
    ):
        self._base = base
        self._fields: Dict[str, FieldSpec[E]] = {spec.name: spec for spec in fields}
        self._sections: Dict[str, PatchSection[E]] = {s.name: s for s in sections}
        self._persist = persist
        self._entity_id = entity_id
        self._pending: Dict[str, Any] = {}
        self.is_saving = False

        for spec in self._fields.values():
            if spec.section is not None and spec.section not in self._sections:
                raise ValueError(f"Field {spec.name!r} uses undeclared section {spec.section!r}")

    @property
    def base(self) -> E:
        return self._base

    @property
    def pending_changes(self) -> Mapping[str, Any]:
        return MappingProxyType(self._pending)

    @property
    def has_changes(self) -> bool:
        return bool(self._pending)

    def _spec(self, name: str) -> FieldSpec[E]:
        try:
            return self._fields[name]
        except KeyError:
            raise UnknownFieldError(field=name) from None

    def set_field(self, name: str, value: Any) -> None:
        """Record ``value`` for ``name``, or drop the entry if it matches the base."""
        spec = self._spec(name)
        if spec.equals(value, spec.read(self._base)):
            self._pending.pop(name, None)
        else:
            self._pending[name] = value

    def value_of(self, name: str) -> Any:
        """The pending value of ``name`` if edited, else the base value."""
        spec = self._spec(name)
        if name in self._pending:
            return self._pending[name]
        return spec.read(self._base)

    def discard_changes(self) -> None:
        self._pending.clear()

    def reload(self, base: E) -> None:
        """Replace the base snapshot and drop edits the new base already contains."""
        self._base = base
        for name in list(self._pending):
            spec = self._fields[name]
            if spec.equals(self._pending[name], spec.read(base)):
                del self._pending[name]

    def build_patch(self) -> Dict[str, Any]:
        """Materialize the pending edits as a patch.

        Sectioned fields are merged into a copy of the base's nested object so
        untouched siblings are sent unchanged.
        """
        patch: Dict[str, Any] = {}
        for name, value in self._pending.items():
            spec = self._fields[name]
            if spec.section is None:
                patch[spec.patch_key] = spec.serialize(value)
                continue
            if spec.section not in patch:
                patch[spec.section] = dict(self._sections[spec.section].read_base(self._base))
            patch[spec.section][spec.patch_key] = spec.serialize(value)
        return patch

    async def save_changes(self) -> SaveResult:
        """Persist the pending edits.

        Never raises: persistence errors become a failed result and the pending
        edits are kept for another attempt. On success only the edits that were
        sent are cleared; fields set while the save was in flight stay pending.
        """
        if not self._pending:
            return SaveResult(success=True, nothing_to_save=True)

        sent = dict(self._pending)
        patch = self.build_patch()
        entity_id = self._entity_id(self._base)
        self.is_saving = True
        try:
            result = await self._persist(entity_id, patch)
        except Exception as e:
            logger.exception(f"Saving {entity_id} failed")
            return SaveResult(success=False, error=str(e) or "Failed to save changes", patch=patch)
        finally:
            self.is_saving = False

        if not result.success:
            logger.warning(f"Saving {entity_id} was rejected: {result.error}")
            return SaveResult(success=False, error=result.error or "Failed to save changes", patch=patch)

        for name, value in sent.items():
            if name in self._pending and self._fields[name].equals(self._pending[name], value):
                del self._pending[name]
        if result.invoice is not None:
            self.reload(result.invoice)
        logger.info(f"Saved {entity_id} ({', '.join(sorted(patch))})")
        return SaveResult(success=True, patch=patch)


# =============================================================================
# Invoice binding
# =============================================================================

INVOICE_SECTIONS = (
    PatchSection("paymentInformation", lambda invoice: invoice.payment_information.to_dict()),
)

INVOICE_FIELDS = (
    FieldSpec("name", lambda invoice: invoice.name, "name"),
    FieldSpec("description", lambda invoice: invoice.description, "description"),
    FieldSpec("category", lambda invoice: invoice.category, "category", serialize=int),
    FieldSpec("isImportant", lambda invoice: invoice.is_important, "isImportant"),
    FieldSpec(
        "paymentType",
        lambda invoice: invoice.payment_information.payment_type,
        "paymentType",
        section="paymentInformation",
        serialize=int,
    ),
    FieldSpec(
        "transactionDate",
        lambda invoice: invoice.payment_information.transaction_date,
        "transactionDate",
        section="paymentInformation",
        equals=same_calendar_day,
        serialize=to_iso,
    ),
)


def make_invoice_tracker(invoice: Invoice, persist: PersistCallable) -> PendingEditTracker[Invoice]:
    """Tracker for the editable fields of ``invoice``."""
    return PendingEditTracker(
        invoice,
        INVOICE_FIELDS,
        persist,
        entity_id=lambda inv: inv.id,
        sections=INVOICE_SECTIONS,
    )

