"""
Satellite Record Lookups
Fan-out / fan-in retrieval of an order's optional satellite records.

The four lookups are independent reads, so they run concurrently. Each one
may resolve to "absent" on its own (missing row, error or timeout) without
aborting the others; only a missing order row is fatal.
"""
from __future__ import annotations

import asyncio
from typing import Any, Callable, Dict, Optional

import config
from utils.logger import get_logger
from .errors import OrderNotFoundError, RecordLookupError
from .models import OrderBundle
from .store import OrderRecordStore


SATELLITE_LOOKUPS = ('shipping_address', 'billing_address', 'customer_details', 'payment_details')


async def _lookup(
    name: str,
    order_id: str,
    fn: Callable[..., Optional[Dict[str, Any]]],
    *args,
    timeout: float,
) -> Optional[Dict[str, Any]]:
    """Run one blocking lookup in a worker thread; degrade to None on failure."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(fn, *args), timeout=timeout)
    except asyncio.TimeoutError:
        get_logger().log_lookup_degraded(order_id, name, f"timed out after {timeout:.1f}s")
    except Exception as e:
        get_logger().log_lookup_degraded(order_id, name, f"{type(e).__name__}: {e}")
    return None


async def _fetch_order(store: OrderRecordStore, order_id: str, timeout: float) -> Optional[Dict[str, Any]]:
    """Read the order row; unlike satellites, a failure here is fatal."""
    try:
        return await asyncio.wait_for(asyncio.to_thread(store.get_order, order_id), timeout=timeout)
    except asyncio.TimeoutError:
        reason = f"timed out after {timeout:.1f}s"
    except Exception as e:
        reason = f"{type(e).__name__}: {e}"
    get_logger().error(f"Order {order_id} - order row lookup failed ({reason})", component="Lookup")
    raise RecordLookupError("Order", order_id, reason)


async def fetch_order_bundle(
    store: OrderRecordStore,
    order_id: str,
    timeout: float = None,
) -> OrderBundle:
    """
    Fetch an order row and its four satellite records.

    Args:
        store: Record store to read from
        order_id: Internal order record id
        timeout: Per-lookup timeout in seconds (defaults to config.LOOKUP_TIMEOUT_SECONDS)

    Returns:
        OrderBundle; satellites that could not be read are None and listed in
        bundle.degraded

    Raises:
        OrderNotFoundError: the order row does not exist
        RecordLookupError: the order row could not be read (store error or timeout)
    """
    timeout = config.LOOKUP_TIMEOUT_SECONDS if timeout is None else timeout

    satellites = (
        _lookup('shipping_address', order_id, store.get_order_address, order_id, 'shipping', timeout=timeout),
        _lookup('billing_address', order_id, store.get_order_address, order_id, 'billing', timeout=timeout),
        _lookup('customer_details', order_id, store.get_customer_details, order_id, timeout=timeout),
        _lookup('payment_details', order_id, store.get_payment_details, order_id, timeout=timeout),
    )
    order, *results = await asyncio.gather(_fetch_order(store, order_id, timeout), *satellites)

    if not order:
        raise OrderNotFoundError(order_id)

    bundle = OrderBundle(order=order)
    for name, result in zip(SATELLITE_LOOKUPS, results):
        setattr(bundle, name, result)
    bundle.degraded = [name for name, result in zip(SATELLITE_LOOKUPS, results) if result is None]
    return bundle
