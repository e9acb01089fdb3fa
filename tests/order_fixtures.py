"""
Sample order records shared by the order document tests.
Shapes follow the stored tables: orders, order_addresses,
order_customer_details, order_payment_details, faas_quotations.
"""
import json

ORDER_ID = "a1b2c3d4-5e6f-4a7b-8c9d-0e1f2a3b4c5d"
RENTAL_ORDER_ID = "ffee0011-2233-4455-6677-8899aabbccdd"
QUOTATION_ID = "q-0001"


def billing_address(order_id=ORDER_ID):
    return {
        "order_id": order_id,
        "address_type": "billing",
        "line1": "12 Main St",
        "city": "Pune",
        "state": "MH",
        "postal_code": "411001",
        "country": "India",
    }


def shipping_address(order_id=ORDER_ID):
    return {
        "order_id": order_id,
        "address_type": "shipping",
        "address_line_1": "Plot 7, MIDC",
        "address_line_2": "Bhosari",
        "city": "Pune",
        "state": "MH",
        "pincode": "411026",
        "country": "India",
    }


def order_row(order_id=ORDER_ID, **overrides):
    row = {
        "id": order_id,
        "order_number": None,
        "created_at": "2026-03-05T10:15:00Z",
        "customer_name": "Row Name",
        "email": "row@example.com",
        "phone": "9000000000",
        "status": "processing",
        "order_type": "standard",
        "products": json.dumps([
            {"id": "chair-01", "title": "Ergo Chair", "quantity": 2, "price": 4500},
            {"id": "desk-02", "name": "Standing Desk", "quantity": 1, "price": 18999.5,
             "selected_options": {"finish": "oak", "height": "adjustable"}},
        ]),
        "internal_notes": "call before delivery",
    }
    row.update(overrides)
    return row


def customer_details(order_id=ORDER_ID):
    return {
        "order_id": order_id,
        "name": "Asha Kulkarni",
        "email": "asha@example.com",
        "phone": "9822012345",
        "company": "Kulkarni Fabrication",
        "gst_number": "27AAAPL1234C1Z5",
    }


def payment_details(order_id=ORDER_ID, status="paid"):
    return {"order_id": order_id, "payment_status": status, "payment_method": "upi"}


def quotation_row(**overrides):
    row = {
        "id": QUOTATION_ID,
        "quotation_number": "FQ-2026-0042",
        "created_at": "2026-03-01T09:00:00Z",
        "valid_until": None,
        "customer_name": "Ravi Shah",
        "customer_email": "ravi@example.com",
        "customer_phone": "9811122233",
        "company_name": "Shah Interiors",
        "gst_number": "",
        "delivery_address": "4th Floor, Orbit Towers",
        "city": "Mumbai",
        "state": "Maharashtra",
        "pincode": "400001",
        "product_name": "Modular Workstation",
        "metal_type": None,
        "rental_duration": "monthly",
        "quantity": 10,
        "monthly_rental_amount": 25000,
        "setup_fee": 5000,
        "deposit_amount": 50000,
        "total_amount": 80000,
        "special_requirements": "Deliver after 6pm",
        "status": "sent",
    }
    row.update(overrides)
    return row


def full_store(site_settings=None):
    """InMemoryOrderStore holding one complete order, one rental order and one quotation."""
    from order_documents.store import InMemoryOrderStore

    return InMemoryOrderStore(
        orders=[
            order_row(),
            order_row(RENTAL_ORDER_ID, order_number="AIRS-2026-0007", order_type="rental"),
        ],
        addresses=[billing_address(), shipping_address(), billing_address(RENTAL_ORDER_ID)],
        customer_details=[customer_details()],
        payment_details=[payment_details()],
        quotations=[quotation_row()],
        site_settings=site_settings,
    )
