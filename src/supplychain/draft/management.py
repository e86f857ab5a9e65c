"""Draft list management — commands and handler.

Adds catalog products to an agency's draft list, nudges quantities and
discards drafts in bulk. Promotion into an order lives with the order
lifecycle (``supplychain.order.promotion``).
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from supplychain.catalog.catalog import Agency, Product
from supplychain.domain import supplychain
from supplychain.draft.draft import ReadyOrder, RetirementReason
from supplychain.errors import NotFoundError


@supplychain.command(part_of="ReadyOrder")
class AddDraft:
    agency_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True)


@supplychain.command(part_of="ReadyOrder")
class AdjustDraftQuantity:
    agency_id = Identifier(required=True)
    draft_id = Identifier(required=True)
    delta = Integer(required=True)


@supplychain.command(part_of="ReadyOrder")
class DiscardDrafts:
    agency_id = Identifier(required=True)
    draft_ids = Text(required=True)  # JSON: list of draft ids


def parse_ids(raw, field_name):
    """Decode a JSON id list carried by a command; reject empties and repeats."""
    ids = json.loads(raw) if isinstance(raw, str) else list(raw or [])
    ids = [str(i) for i in ids]
    if not ids:
        raise ValidationError({field_name: ["At least one id is required"]})
    if len(set(ids)) != len(ids):
        raise ValidationError({field_name: ["Ids must not repeat"]})
    return ids


@supplychain.command_handler(part_of=ReadyOrder)
class ManageDraftsHandler:
    @handle(AddDraft)
    def add_draft(self, command):
        product = current_domain.repository_for(Product).orderable(command.product_id)
        agency = current_domain.repository_for(Agency).named(command.agency_id)
        if not agency.carries(product.id):
            raise NotFoundError(f"Product {product.id} is not in the assortment of agency {agency.id}")
        draft = ReadyOrder.create(
            agency_id=command.agency_id,
            product=product,
            quantity=command.quantity,
        )
        current_domain.repository_for(ReadyOrder).add(draft)
        return str(draft.id)

    @handle(AdjustDraftQuantity)
    def adjust_draft_quantity(self, command):
        repo = current_domain.repository_for(ReadyOrder)
        (draft,) = repo.owned(command.agency_id, [command.draft_id])
        draft.adjust_quantity(command.delta)
        repo.add(draft)
        return str(draft.id)

    @handle(DiscardDrafts)
    def discard_drafts(self, command):
        repo = current_domain.repository_for(ReadyOrder)
        drafts = repo.owned(command.agency_id, parse_ids(command.draft_ids, "draft_ids"))
        for draft in drafts:
            repo.retire(draft, RetirementReason.DISCARDED)
        return len(drafts)
