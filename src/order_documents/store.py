"""
Order Record Stores
Read-only access to the order row, its satellite rows, quotations and site
settings. Every satellite getter returns None when the row does not exist.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, List, Optional

import config


class OrderRecordStore:
    """Interface consumed by the satellite lookups and the export service"""

    def get_order(self, order_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def get_order_address(self, order_id: str, address_type: str) -> Optional[Dict[str, Any]]:
        """address_type is 'shipping' or 'billing'."""
        raise NotImplementedError

    def get_customer_details(self, order_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def get_payment_details(self, order_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def get_quotation(self, quotation_id: str) -> Optional[Dict[str, Any]]:
        raise NotImplementedError

    def get_site_settings(self) -> Optional[Dict[str, Any]]:
        raise NotImplementedError


class InMemoryOrderStore(OrderRecordStore):
    """Dictionary-backed store for tests, demos and fixtures"""

    def __init__(
        self,
        orders: List[Dict[str, Any]] = None,
        addresses: List[Dict[str, Any]] = None,
        customer_details: List[Dict[str, Any]] = None,
        payment_details: List[Dict[str, Any]] = None,
        quotations: List[Dict[str, Any]] = None,
        site_settings: Optional[Dict[str, Any]] = None,
    ):
        self.orders = {str(row['id']): row for row in orders or []}
        self.addresses = list(addresses or [])
        self.customer_details = {str(row['order_id']): row for row in customer_details or []}
        self.payment_details = {str(row['order_id']): row for row in payment_details or []}
        self.quotations = {str(row['id']): row for row in quotations or []}
        self.site_settings = site_settings

    @staticmethod
    def _copy(row):
        # Callers get their own copy so stored fixtures stay untouched
        return copy.deepcopy(row) if row is not None else None

    def get_order(self, order_id):
        return self._copy(self.orders.get(str(order_id)))

    def get_order_address(self, order_id, address_type):
        for row in self.addresses:
            if str(row.get('order_id')) == str(order_id) and row.get('address_type') == address_type:
                return self._copy(row)
        return None

    def get_customer_details(self, order_id):
        return self._copy(self.customer_details.get(str(order_id)))

    def get_payment_details(self, order_id):
        return self._copy(self.payment_details.get(str(order_id)))

    def get_quotation(self, quotation_id):
        row = self.quotations.get(str(quotation_id))
        if row is None:
            # Admins also look quotations up by their printed number
            for candidate in self.quotations.values():
                if candidate.get('quotation_number') == quotation_id:
                    row = candidate
                    break
        return self._copy(row)

    def get_site_settings(self):
        return self._copy(self.site_settings)


class SheetsOrderStore(OrderRecordStore):
    """
    Google Sheets backed store: one worksheet per table, header row first.

    The products column of the orders tab holds the line-item payload as a
    JSON string; the normalizer decodes it.
    """

    def __init__(self, sheet_id: str = None, client=None):
        """
        Args:
            sheet_id: Spreadsheet key (defaults to config.GOOGLE_SHEET_ID)
            client: Pre-authorized gspread client (built from credentials when None)
        """
        if client is None:
            client = self._authorize()
        self.spreadsheet = client.open_by_key(sheet_id or config.GOOGLE_SHEET_ID)

    @staticmethod
    def _authorize():
        import gspread
        from oauth2client.service_account import ServiceAccountCredentials

        scope = [
            'https://spreadsheets.google.com/feeds',
            'https://www.googleapis.com/auth/drive'
        ]
        creds_path = config.get_credentials_path()
        if creds_path:
            creds = ServiceAccountCredentials.from_json_keyfile_name(creds_path, scope)
            return gspread.authorize(creds)

        # Application Default Credentials (Cloud Run with Workload Identity)
        import google.auth
        credentials, _project = google.auth.default(scopes=scope)
        return gspread.authorize(credentials)

    def _records(self, tab_name: str) -> List[Dict[str, Any]]:
        return self.spreadsheet.worksheet(tab_name).get_all_records()

    def _find(self, tab_name: str, **criteria) -> Optional[Dict[str, Any]]:
        for record in self._records(tab_name):
            if all(str(record.get(key, '')) == str(value) for key, value in criteria.items()):
                # Sheets return '' for empty cells; treat them as missing
                return {key: (None if value == '' else value) for key, value in record.items()}
        return None

    def get_order(self, order_id):
        return self._find(config.ORDERS_SHEET, id=order_id)

    def get_order_address(self, order_id, address_type):
        return self._find(config.ORDER_ADDRESSES_SHEET, order_id=order_id, address_type=address_type)

    def get_customer_details(self, order_id):
        return self._find(config.ORDER_CUSTOMER_DETAILS_SHEET, order_id=order_id)

    def get_payment_details(self, order_id):
        return self._find(config.ORDER_PAYMENT_DETAILS_SHEET, order_id=order_id)

    def get_quotation(self, quotation_id):
        return (
            self._find(config.FAAS_QUOTATIONS_SHEET, id=quotation_id)
            or self._find(config.FAAS_QUOTATIONS_SHEET, quotation_number=quotation_id)
        )

    def get_site_settings(self):
        records = self._records(config.SITE_SETTINGS_SHEET)
        if not records:
            return None
        return {key: (None if value == '' else value) for key, value in records[0].items()}


def create_store(backend: str = None) -> OrderRecordStore:
    """Build the store selected by ORDER_STORE_BACKEND."""
    backend = backend or config.ORDER_STORE_BACKEND
    if backend == 'google_sheet':
        return SheetsOrderStore()
    if backend == 'memory':
        return InMemoryOrderStore()
    raise ValueError(f"Unknown order store backend: {backend}")
