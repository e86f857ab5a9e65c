"""Draft line items ("ready orders") — an agency's unconfirmed selections.

Each ReadyOrder is one product the agency intends to order. Quantity never
drops below one and the line total always follows quantity × the price that
was snapshotted from the catalog when the draft was created.

When a draft leaves the list it is deleted and a RetiredDraft tombstone is
written in the same unit of work. A late request naming that draft (a second
promotion, a deletion, a quantity edit) finds the tombstone and fails with a
ConflictError rather than a plain "not found".
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier, Integer, String
from protean.utils.globals import current_domain

from supplychain.domain import supplychain
from supplychain.draft.events import DraftAdded, DraftQuantityAdjusted, DraftRetired
from supplychain.errors import ConflictError, NotFoundError

MIN_QUANTITY = 1


class RetirementReason(Enum):
    PROMOTED = "Promoted"
    DISCARDED = "Discarded"


@supplychain.aggregate
class ReadyOrder:
    agency_id = Identifier(required=True)
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=MIN_QUANTITY)
    unit_price = Integer(required=True, min_value=0)
    line_total = Integer(required=True, min_value=0)
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def create(cls, agency_id, product, quantity):
        """Draft ``quantity`` units of ``product`` at its current catalog price."""
        if quantity is None or quantity < MIN_QUANTITY:
            raise ValidationError({"quantity": [f"Quantity must be at least {MIN_QUANTITY}"]})

        now = datetime.now(UTC)
        draft = cls(
            agency_id=str(agency_id),
            product_id=str(product.id),
            product_name=product.name,
            quantity=quantity,
            unit_price=product.unit_price,
            line_total=quantity * product.unit_price,
            created_at=now,
            updated_at=now,
        )
        draft.raise_(
            DraftAdded(
                draft_id=str(draft.id),
                agency_id=str(agency_id),
                product_id=str(product.id),
                product_name=product.name,
                quantity=quantity,
                unit_price=product.unit_price,
                added_at=now,
            )
        )
        return draft

    def adjust_quantity(self, delta):
        """Shift the quantity by ``delta``, never below one."""
        previous = self.quantity
        new_quantity = max(previous + delta, MIN_QUANTITY)
        self.quantity = new_quantity
        self.line_total = new_quantity * self.unit_price
        self.updated_at = datetime.now(UTC)

        self.raise_(
            DraftQuantityAdjusted(
                draft_id=str(self.id),
                agency_id=str(self.agency_id),
                previous_quantity=previous,
                new_quantity=new_quantity,
                line_total=self.line_total,
            )
        )

    def as_item(self):
        """Order item data frozen from this draft."""
        return {
            "product_id": str(self.product_id),
            "product_name": self.product_name,
            "quantity": self.quantity,
            "unit_price": self.unit_price,
        }


@supplychain.aggregate
class RetiredDraft:
    draft_id = Identifier(identifier=True, required=True)
    agency_id = Identifier(required=True)
    reason = String(required=True, choices=RetirementReason)
    order_id = Identifier()
    retired_at = DateTime()

    @classmethod
    def record(cls, draft, reason, order_id=None):
        now = datetime.now(UTC)
        tombstone = cls(
            draft_id=str(draft.id),
            agency_id=str(draft.agency_id),
            reason=reason.value,
            order_id=str(order_id) if order_id else None,
            retired_at=now,
        )
        tombstone.raise_(
            DraftRetired(
                draft_id=str(draft.id),
                agency_id=str(draft.agency_id),
                reason=reason.value,
                order_id=str(order_id) if order_id else None,
                retired_at=now,
            )
        )
        return tombstone


@supplychain.repository(part_of=RetiredDraft)
class RetiredDraftRepository:
    def retired_for(self, agency_id, draft_ids) -> list:
        """Tombstones among ``draft_ids`` that belong to ``agency_id``."""
        found = []
        for draft_id in draft_ids:
            try:
                tombstone = self.get(str(draft_id))
            except ObjectNotFoundError:
                continue
            if str(tombstone.agency_id) == str(agency_id):
                found.append(tombstone)
        return found


@supplychain.repository(part_of=ReadyOrder)
class ReadyOrderRepository:
    def for_agency(self, agency_id) -> list:
        drafts = self._dao.query.filter(agency_id=str(agency_id)).all().items
        return sorted(drafts, key=lambda d: (d.created_at, str(d.id)))

    def owned(self, agency_id, draft_ids) -> list:
        """Load every listed draft owned by ``agency_id``, or fail for all of them.

        Ids that are unknown or belong to another agency raise NotFoundError.
        Ids this agency already promoted or discarded raise ConflictError.
        """
        drafts, missing = [], []
        for draft_id in draft_ids:
            try:
                draft = self.get(str(draft_id))
            except ObjectNotFoundError:
                missing.append(str(draft_id))
                continue
            if str(draft.agency_id) != str(agency_id):
                missing.append(str(draft_id))
                continue
            drafts.append(draft)

        if missing:
            retired = current_domain.repository_for(RetiredDraft).retired_for(agency_id, missing)
            retired_ids = {str(t.draft_id) for t in retired}
            unknown = [d for d in missing if d not in retired_ids]
            if unknown:
                raise NotFoundError(f"Drafts not found for agency {agency_id}: {', '.join(unknown)}")
            states = sorted({t.reason for t in retired})
            raise ConflictError(
                f"Drafts already {' / '.join(s.lower() for s in states)}: {', '.join(sorted(retired_ids))}",
                current_state=states[0] if len(states) == 1 else states,
            )

        return drafts

    def retire(self, draft, reason, order_id=None):
        """Delete the draft and leave its tombstone behind."""
        current_domain.repository_for(RetiredDraft).add(RetiredDraft.record(draft, reason, order_id))
        self._dao.delete(draft)
