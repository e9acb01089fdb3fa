"""
Order Document Data Models
Dataclasses for the canonical documents passed between normalizer and renderers.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional

import config


ADDRESS_PENDING = "Address pending"
CUSTOMER_PLACEHOLDER = "Customer"
CUSTOM_QUOTE_TITLE = "Custom Quote"
CUSTOM_QUOTE_NOTICE = "Pricing determined by contract terms."


class OrderStatus(str, Enum):
    """Lifecycle status of an order row."""
    NEW = "new"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @classmethod
    def parse(cls, value: Any) -> "OrderStatus":
        """Map a raw status value onto the enum, defaulting to NEW."""
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.NEW


class PricingMode(str, Enum):
    """The two-valued pricing branch decided once during normalization."""
    PRICED = "priced"
    CUSTOM_QUOTE = "custom_quote"


# ---------------------------------------------------------------------------
# Order document models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OrderLineItem:
    """A single normalized line item."""
    id: str = "sku"
    name: str = "Product"
    quantity: int = 1
    unit_price: Decimal = Decimal("0")
    line_total: Decimal = Decimal("0")
    customization_note: Optional[str] = None
    sku: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": str(self.unit_price),
            "line_total": str(self.line_total),
        }
        if self.customization_note is not None:
            d["customization_note"] = self.customization_note
        if self.sku is not None:
            d["sku"] = self.sku
        return d


@dataclass(frozen=True)
class OrderDocument:
    """Canonical order document consumed by every renderer."""
    id: str
    record_id: str = ""
    order_number: str = ""
    created_at: Optional[datetime] = None
    customer_name: str = CUSTOMER_PLACEHOLDER
    email: str = ""
    phone: str = ""
    company: str = ""
    gst_number: str = ""
    billing_address: str = ADDRESS_PENDING
    shipping_address: str = ADDRESS_PENDING
    status: OrderStatus = OrderStatus.NEW
    payment_status: str = "pending"
    payment_method: str = ""
    order_type: str = ""
    items: List[OrderLineItem] = field(default_factory=list)
    subtotal: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")  # reserved, never rendered
    is_custom_quote: bool = False
    internal_notes: str = ""

    @property
    def pricing_mode(self) -> PricingMode:
        return PricingMode.CUSTOM_QUOTE if self.is_custom_quote else PricingMode.PRICED

    @property
    def is_paid(self) -> bool:
        return self.payment_status.strip().lower() == "paid"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "record_id": self.record_id,
            "order_number": self.order_number,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "customer_name": self.customer_name,
            "email": self.email,
            "phone": self.phone,
            "company": self.company,
            "gst_number": self.gst_number,
            "billing_address": self.billing_address,
            "shipping_address": self.shipping_address,
            "status": self.status.value,
            "payment_status": self.payment_status,
            "payment_method": self.payment_method,
            "order_type": self.order_type,
            "items": [item.to_dict() for item in self.items],
            "subtotal": str(self.subtotal),
            "total": str(self.total),
            "is_custom_quote": self.is_custom_quote,
            "pricing_mode": self.pricing_mode.value,
        }


@dataclass
class OrderBundle:
    """An order row joined with its optional satellite records."""
    order: Dict[str, Any]
    shipping_address: Optional[Dict[str, Any]] = None
    billing_address: Optional[Dict[str, Any]] = None
    customer_details: Optional[Dict[str, Any]] = None
    payment_details: Optional[Dict[str, Any]] = None
    degraded: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Organization branding
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class OrganizationSettings:
    """Sender-side branding used on invoices, labels and quotations."""
    name: str = ""
    address: str = ""
    email: str = ""
    phone: str = ""
    logo_path: str = ""
    website: str = ""
    tagline: str = ""

    @classmethod
    def defaults(cls) -> "OrganizationSettings":
        return cls(
            name=config.ORG_NAME,
            address=config.ORG_ADDRESS,
            email=config.ORG_EMAIL,
            phone=config.ORG_PHONE,
            logo_path=config.ORG_LOGO_PATH,
            website=config.ORG_WEBSITE,
            tagline=config.ORG_TAGLINE,
        )

    @classmethod
    def label_defaults(cls) -> "OrganizationSettings":
        """Defaults for the shipping label: the dispatch unit, not head office."""
        return replace(
            cls.defaults(),
            name=config.LABEL_SENDER_NAME,
            address=config.LABEL_SENDER_ADDRESS,
        )

    @classmethod
    def from_record(
        cls,
        record: Optional[Dict[str, Any]],
        fallback: Optional["OrganizationSettings"] = None,
    ) -> "OrganizationSettings":
        """
        Build settings from a site-settings row.

        Missing or blank fields fall back to fallback (the configured
        organization defaults when None) so the sender block is never empty.
        """
        fallback = fallback or cls.defaults()
        if not record:
            return fallback

        def pick(*keys: str, default: str = "") -> str:
            for key in keys:
                value = record.get(key)
                if value is not None and str(value).strip():
                    return str(value).strip()
            return default

        return cls(
            name=pick("site_name", "name", default=fallback.name),
            address=pick("address", default=fallback.address),
            email=pick("email", default=fallback.email),
            phone=pick("phone_number", "phone", default=fallback.phone),
            logo_path=pick("logo_dark", "logo_path", default=fallback.logo_path),
            website=pick("website", default=fallback.website),
            tagline=pick("business_tagline", "tagline", default=fallback.tagline),
        )


# ---------------------------------------------------------------------------
# Quotation models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class QuotationDocument:
    """Sectioned FaaS rental quotation, mapped near 1:1 from its record."""
    quotation_number: str
    date: str
    valid_until: str
    customer_name: str
    customer_email: str
    customer_phone: str
    company_name: str
    gst_number: str
    delivery_address: str
    city: str
    state: str
    pincode: str
    product_name: str
    metal_type: str
    rental_duration: str
    quantity: int
    monthly_rental: Decimal
    setup_fee: Decimal
    deposit_amount: Decimal
    total_amount: Decimal
    special_requirements: str = ""
    status: str = ""

    @property
    def city_line(self) -> str:
        return f"{self.city}, {self.state} - {self.pincode}"
