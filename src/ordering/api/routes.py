"""FastAPI routes for the Ordering domain — orders."""

import json

from fastapi import APIRouter, BackgroundTasks, Depends
from identity.api.dependencies import require_admin, require_principal
from identity.principal import Principal
from notifications.confirmation import send_order_confirmation
from protean.utils.globals import current_domain

from ordering.api.schemas import (
    CreateOrderRequest,
    MyOrdersResponse,
    OrderListResponse,
    OrderResponse,
    OrderSchema,
    UpdateOrderStatusRequest,
)
from ordering.order.creation import PlaceOrder
from ordering.order.order import Order
from ordering.order.status import UpdateOrderStatus

order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderResponse)
async def create_order(
    body: CreateOrderRequest,
    background_tasks: BackgroundTasks,
    principal: Principal = Depends(require_principal),
) -> OrderResponse:
    """Persist a paid checkout for the caller.

    The confirmation email is queued as a background task, so it runs only
    after the response has been sent and cannot change it.
    """
    command = PlaceOrder(
        owner_id=principal.id,
        items=json.dumps([item.model_dump() for item in body.order_items]),
        shipping_address=json.dumps(body.shipping_address.model_dump()),
        total_price=body.total_price,
        is_paid=body.is_paid,
        paid_at=body.paid_at,
        payment_result=json.dumps(body.payment_result.model_dump()) if body.payment_result else None,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)

    background_tasks.add_task(
        send_order_confirmation,
        recipient=principal.email,
        customer_name=principal.name,
        order_id=order_id,
        total_price=order.total_price,
    )
    return OrderResponse(order=OrderSchema.from_order(order))


@order_router.get("/myorders", response_model=MyOrdersResponse)
async def get_my_orders(principal: Principal = Depends(require_principal)) -> MyOrdersResponse:
    orders = current_domain.repository_for(Order).find_by_owner(principal.id)
    return MyOrdersResponse(orders=[OrderSchema.from_order(o) for o in orders])


@order_router.get("", response_model=OrderListResponse)
async def list_orders(_admin: Principal = Depends(require_admin)) -> OrderListResponse:
    orders = current_domain.repository_for(Order).find_all()
    return OrderListResponse(count=len(orders), orders=[OrderSchema.from_order(o) for o in orders])


@order_router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    _admin: Principal = Depends(require_admin),
) -> OrderResponse:
    command = UpdateOrderStatus(order_id=order_id, status=body.status)
    current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return OrderResponse(order=OrderSchema.from_order(order))
