"""Draft promotion — command and handler.

Turns an agency's selected drafts into one AgencyOrder. The order is created,
the drafts are deleted and their tombstones written in a single unit of work:
either all of it becomes visible or none of it does.
"""

import structlog
from protean import handle
from protean.fields import Date, Identifier, Text
from protean.utils.globals import current_domain

from supplychain.catalog.catalog import Agency
from supplychain.domain import supplychain
from supplychain.draft.draft import ReadyOrder, RetirementReason
from supplychain.draft.management import parse_ids
from supplychain.order.order import AgencyOrder

logger = structlog.get_logger(__name__)


@supplychain.command(part_of="AgencyOrder")
class PromoteDrafts:
    agency_id = Identifier(required=True)
    draft_ids = Text(required=True)  # JSON: list of draft ids
    arrival_date = Date(required=True)


@supplychain.command_handler(part_of=AgencyOrder)
class PromoteDraftsHandler:
    @handle(PromoteDrafts)
    def promote_drafts(self, command):
        draft_repo = current_domain.repository_for(ReadyOrder)
        drafts = draft_repo.owned(command.agency_id, parse_ids(command.draft_ids, "draft_ids"))
        agency = current_domain.repository_for(Agency).named(command.agency_id)

        order = AgencyOrder.place(
            agency_id=command.agency_id,
            agency_name=agency.name,
            items_data=[draft.as_item() for draft in drafts],
            arrival_date=command.arrival_date,
        )
        current_domain.repository_for(AgencyOrder).add(order)

        for draft in drafts:
            draft_repo.retire(draft, RetirementReason.PROMOTED, order_id=order.id)

        logger.info(
            "Drafts promoted to order",
            order_id=str(order.id),
            order_number=order.order_number,
            agency_id=str(command.agency_id),
            draft_count=len(drafts),
            total_amount=order.total_amount,
        )
        return str(order.id)
