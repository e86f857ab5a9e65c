"""Pydantic request/response schemas for the supply-chain API."""

from __future__ import annotations

from datetime import date, datetime

from pydantic import BaseModel, Field

# --- Draft schemas ---


class AddDraftRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "product_id": "prod-001",
                    "quantity": 3,
                }
            ]
        }
    }

    product_id: str
    quantity: int


class AdjustQuantityRequest(BaseModel):
    delta: int


class DraftIdsRequest(BaseModel):
    draft_ids: list[str] = Field(..., min_length=1)


class PromoteDraftsRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "draft_ids": ["draft-001", "draft-002"],
                    "reserve_date": "2026-11-02",
                }
            ]
        }
    }

    draft_ids: list[str] = Field(..., min_length=1)
    reserve_date: date | None = None


class DraftResponse(BaseModel):
    draft_id: str
    product_id: str
    product_name: str
    quantity: int
    unit_price: int
    line_total: int
    created_at: datetime | None = None

    @classmethod
    def of(cls, draft) -> DraftResponse:
        return cls(
            draft_id=str(draft.id),
            product_id=str(draft.product_id),
            product_name=draft.product_name,
            quantity=draft.quantity,
            unit_price=draft.unit_price,
            line_total=draft.line_total,
            created_at=draft.created_at,
        )


class ProductResponse(BaseModel):
    product_id: str
    name: str
    code: str | None = None
    category: str | None = None
    unit_price: int

    @classmethod
    def of(cls, product) -> ProductResponse:
        return cls(
            product_id=str(product.id),
            name=product.name,
            code=product.code,
            category=product.category,
            unit_price=product.unit_price,
        )


# --- Order schemas ---


class OrderIdsRequest(BaseModel):
    order_ids: list[str] = Field(..., min_length=1)


class RescheduleArrivalRequest(BaseModel):
    arrival_date: date


class AssignDriverRequest(BaseModel):
    driver_id: str


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: int
    line_total: int


class DeliveryResponse(BaseModel):
    driver_id: str
    driver_name: str
    driver_phone: str | None = None
    vehicle: str | None = None
    assigned_at: datetime | None = None

    @classmethod
    def of(cls, delivery) -> DeliveryResponse:
        return cls(
            driver_id=str(delivery.driver_id),
            driver_name=delivery.driver_name,
            driver_phone=delivery.driver_phone,
            vehicle=delivery.vehicle,
            assigned_at=delivery.assigned_at,
        )


class OrderResponse(BaseModel):
    order_id: str
    order_number: str
    agency_id: str
    agency_name: str | None = None
    status: str
    items: list[OrderItemResponse]
    product_summary: str | None = None
    total_quantity: int
    total_amount: int
    arrival_date: date
    ordered_at: datetime
    approved_at: datetime | None = None
    dispatched_at: datetime | None = None
    delivered_at: datetime | None = None
    delivery: DeliveryResponse | None = None

    @classmethod
    def of(cls, order) -> OrderResponse:
        return cls(
            order_id=str(order.id),
            order_number=order.order_number,
            agency_id=str(order.agency_id),
            agency_name=order.agency_name,
            status=order.status,
            items=[
                OrderItemResponse(
                    product_id=str(item.product_id),
                    product_name=item.product_name,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    line_total=item.line_total,
                )
                for item in order.items
            ],
            product_summary=order.product_summary,
            total_quantity=order.total_quantity,
            total_amount=order.total_amount,
            arrival_date=order.arrival_date,
            ordered_at=order.ordered_at,
            approved_at=order.approved_at,
            dispatched_at=order.dispatched_at,
            delivered_at=order.delivered_at,
            delivery=DeliveryResponse.of(order.delivery) if order.delivery else None,
        )


# --- Driver schemas ---


class DriverResponse(BaseModel):
    driver_id: str
    name: str
    phone: str | None = None
    vehicle: str | None = None


# --- Shared ---


class CountResponse(BaseModel):
    count: int


class StatusResponse(BaseModel):
    status: str = "ok"
