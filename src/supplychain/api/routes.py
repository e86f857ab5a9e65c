"""FastAPI endpoints for agency drafts, agency orders and drivers.

The gateway in front of this service authenticates the caller and forwards
the resolved role and tenant as headers. Tenant identity is never read from
a request body.
"""

from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query

from supplychain import workflows
from supplychain.api.schemas import (
    AddDraftRequest,
    AdjustQuantityRequest,
    AssignDriverRequest,
    CountResponse,
    DeliveryResponse,
    DraftIdsRequest,
    DraftResponse,
    DriverResponse,
    OrderIdsRequest,
    OrderResponse,
    ProductResponse,
    PromoteDraftsRequest,
    RescheduleArrivalRequest,
    StatusResponse,
)
from supplychain.context import Caller, Role
from supplychain.order.order import OrderStatus
from supplychain.projections.order_search import OrderRow, OrderSearch, SortKey
from supplychain.utils.logging import bind_caller

drafts_router = APIRouter(prefix="/drafts", tags=["drafts"])
orders_router = APIRouter(prefix="/orders", tags=["orders"])
drivers_router = APIRouter(prefix="/drivers", tags=["drivers"])


def resolve_caller(
    x_caller_role: str = Header(default=""),
    x_tenant_id: str = Header(default=""),
) -> Caller:
    try:
        role = Role(x_caller_role)
    except ValueError:
        raise HTTPException(status_code=401, detail="Missing or unknown X-Caller-Role header") from None

    if role == Role.HEAD_OFFICE:
        caller = Caller.head_office()
    elif not x_tenant_id:
        raise HTTPException(status_code=401, detail="X-Tenant-Id header is required for this role")
    else:
        caller = Caller(role=role, tenant_id=x_tenant_id)

    bind_caller(caller.role.value, caller.tenant_id)
    return caller


def search_params(
    status: list[OrderStatus] = Query(default=[]),
    ordered_from: date | None = None,
    ordered_to: date | None = None,
    arrival_from: date | None = None,
    arrival_to: date | None = None,
    product: str | None = None,
    agency: str | None = None,
    order_number: str | None = None,
    driver: str | None = None,
    quantity_min: int | None = None,
    quantity_max: int | None = None,
    amount_min: int | None = None,
    amount_max: int | None = None,
    sort_by: SortKey = SortKey.ORDERED_ON,
    direction: str = Query(default="desc", pattern="^(asc|desc)$"),
) -> OrderSearch:
    return OrderSearch(
        statuses=status,
        ordered_from=ordered_from,
        ordered_to=ordered_to,
        arrival_from=arrival_from,
        arrival_to=arrival_to,
        product=product,
        agency=agency,
        order_number=order_number,
        driver=driver,
        quantity_min=quantity_min,
        quantity_max=quantity_max,
        amount_min=amount_min,
        amount_max=amount_max,
        sort_by=sort_by,
        direction=direction,
    )


# --- Draft endpoints ---


@drafts_router.post("", status_code=201, response_model=DraftResponse)
async def add_draft(body: AddDraftRequest, caller: Caller = Depends(resolve_caller)) -> DraftResponse:
    draft = workflows.add_draft(caller, body.product_id, body.quantity)
    return DraftResponse.of(draft)


@drafts_router.get("/products", response_model=list[ProductResponse])
async def list_assortment(caller: Caller = Depends(resolve_caller)) -> list[ProductResponse]:
    return [ProductResponse.of(product) for product in workflows.list_assortment(caller)]


@drafts_router.get("", response_model=list[DraftResponse])
async def list_drafts(caller: Caller = Depends(resolve_caller)) -> list[DraftResponse]:
    return [DraftResponse.of(draft) for draft in workflows.list_drafts(caller)]


@drafts_router.patch("/{draft_id}/quantity", response_model=DraftResponse)
async def adjust_quantity(
    draft_id: str, body: AdjustQuantityRequest, caller: Caller = Depends(resolve_caller)
) -> DraftResponse:
    draft = workflows.adjust_quantity(caller, draft_id, body.delta)
    return DraftResponse.of(draft)


@drafts_router.delete("", response_model=CountResponse)
async def delete_drafts(body: DraftIdsRequest, caller: Caller = Depends(resolve_caller)) -> CountResponse:
    return CountResponse(count=workflows.delete_drafts(caller, body.draft_ids))


@drafts_router.post("/promote", status_code=201, response_model=OrderResponse)
async def promote_drafts(body: PromoteDraftsRequest, caller: Caller = Depends(resolve_caller)) -> OrderResponse:
    order = workflows.promote_to_order(caller, body.draft_ids, body.reserve_date)
    return OrderResponse.of(order)


# --- Order endpoints ---


@orders_router.get("", response_model=list[OrderRow])
async def search_orders(
    query: OrderSearch = Depends(search_params), caller: Caller = Depends(resolve_caller)
) -> list[OrderRow]:
    return workflows.search_orders(caller, query)


@orders_router.put("/approve", response_model=list[OrderResponse])
async def approve_orders(body: OrderIdsRequest, caller: Caller = Depends(resolve_caller)) -> list[OrderResponse]:
    return [OrderResponse.of(order) for order in workflows.approve_orders(caller, body.order_ids)]


@orders_router.delete("", response_model=CountResponse)
async def delete_orders(body: OrderIdsRequest, caller: Caller = Depends(resolve_caller)) -> CountResponse:
    return CountResponse(count=workflows.delete_orders(caller, body.order_ids))


@orders_router.get("/{order_id}", response_model=OrderResponse)
async def get_order(order_id: str, caller: Caller = Depends(resolve_caller)) -> OrderResponse:
    return OrderResponse.of(workflows.get_order(caller, order_id))


@orders_router.put("/{order_id}/arrival", response_model=OrderResponse)
async def reschedule_arrival(
    order_id: str, body: RescheduleArrivalRequest, caller: Caller = Depends(resolve_caller)
) -> OrderResponse:
    order = workflows.reschedule_arrival(caller, order_id, body.arrival_date)
    return OrderResponse.of(order)


@orders_router.put("/{order_id}/dispatch", response_model=DeliveryResponse)
async def assign_driver(
    order_id: str, body: AssignDriverRequest, caller: Caller = Depends(resolve_caller)
) -> DeliveryResponse:
    delivery = workflows.assign_driver(caller, order_id, body.driver_id)
    return DeliveryResponse.of(delivery)


@orders_router.put("/{order_id}/deliver", response_model=StatusResponse)
async def complete_delivery(order_id: str, caller: Caller = Depends(resolve_caller)) -> StatusResponse:
    workflows.complete_delivery(caller, order_id)
    return StatusResponse()


# --- Driver endpoints ---


@drivers_router.get("/available", response_model=list[DriverResponse])
async def list_available_drivers(caller: Caller = Depends(resolve_caller)) -> list[DriverResponse]:
    return [
        DriverResponse(driver_id=str(d.id), name=d.name, phone=d.phone, vehicle=d.vehicle)
        for d in workflows.list_available_drivers(caller)
    ]
