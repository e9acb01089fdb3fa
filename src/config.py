"""
Configuration for AiRS Order Documents
Module-level constants read from the environment (and .env in local dev).
Runs unchanged locally, in Docker and on Cloud Run.
"""
import os
import tempfile
from pathlib import Path
from dotenv import load_dotenv

# Repository root (parent of src/)
PROJECT_ROOT = Path(__file__).parent.parent

_dotenv = PROJECT_ROOT / '.env'
if _dotenv.exists():
    load_dotenv(_dotenv)

# ═══════════════════════════════════════════════════════════════════
# RUNTIME
# ═══════════════════════════════════════════════════════════════════

def detect_environment() -> str:
    """Return 'cloud_run', 'kubernetes', 'docker' or 'local'."""
    if os.getenv('K_SERVICE'):
        return 'cloud_run'
    if os.getenv('KUBERNETES_SERVICE_HOST'):
        return 'kubernetes'
    if Path('/.dockerenv').exists():
        return 'docker'
    return 'local'

RUNTIME_ENVIRONMENT = detect_environment()

# Managed runtimes authenticate through Application Default Credentials
_ADC_ENVIRONMENTS = ('cloud_run', 'kubernetes')

# ═══════════════════════════════════════════════════════════════════
# GOOGLE SHEETS CREDENTIALS (google_sheet store backend only)
# ═══════════════════════════════════════════════════════════════════

_credentials_path = None

def resolve_credentials():
    """
    Locate the service-account key used by SheetsOrderStore.

    Checked in order:
    1. GOOGLE_SHEETS_CREDENTIALS_FILE (absolute, or relative to the repo root)
    2. config/credentials.json in the repo
    3. GOOGLE_SHEETS_CREDENTIALS_JSON, written to a temp file
    4. Application Default Credentials on Cloud Run / Kubernetes

    Returns:
        Path to a key file, or None when ADC should be used

    Raises:
        ValueError: no source is available
    """
    candidates = []
    configured = os.getenv('GOOGLE_SHEETS_CREDENTIALS_FILE')
    if configured:
        candidates.append(Path(configured) if os.path.isabs(configured) else PROJECT_ROOT / configured)
    candidates.append(PROJECT_ROOT / 'config' / 'credentials.json')

    for candidate in candidates:
        if candidate.exists():
            return str(candidate)

    inline_json = os.getenv('GOOGLE_SHEETS_CREDENTIALS_JSON')
    if inline_json:
        key_file = Path(tempfile.gettempdir()) / 'order_documents_credentials.json'
        key_file.write_text(inline_json)
        return str(key_file)

    if RUNTIME_ENVIRONMENT in _ADC_ENVIRONMENTS:
        return None

    raise ValueError(
        "Google Sheets credentials not found. Provide GOOGLE_SHEETS_CREDENTIALS_FILE, "
        "GOOGLE_SHEETS_CREDENTIALS_JSON, or config/credentials.json"
    )

def get_credentials_path():
    """Resolve credentials once and cache the result"""
    global _credentials_path
    if _credentials_path is None:
        _credentials_path = resolve_credentials()
    return _credentials_path

# ═══════════════════════════════════════════════════════════════════
# WRITABLE PATHS
# ═══════════════════════════════════════════════════════════════════

def get_writable_path(folder_name: str) -> str:
    """
    Directory for generated files, created on demand.

    <FOLDER_NAME>_FOLDER overrides the location. Read-only images (e.g. /app
    on Cloud Run) fall back to the system temp directory.
    """
    override = os.getenv(f"{folder_name.upper()}_FOLDER")
    if override:
        path = Path(override) if os.path.isabs(override) else PROJECT_ROOT / override
    else:
        path = PROJECT_ROOT / folder_name

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError:
        path = Path(tempfile.gettempdir()) / 'order_documents' / folder_name
        path.mkdir(parents=True, exist_ok=True)
    return str(path)

# ═══════════════════════════════════════════════════════════════════
# ORGANIZATION DEFAULTS (used when site settings are unavailable)
# ═══════════════════════════════════════════════════════════════════

ORG_NAME = os.getenv('ORG_NAME', 'AiRS - Ai Robo Fab Solutions')
ORG_SHORT_NAME = os.getenv('ORG_SHORT_NAME', 'AiRS')
ORG_ADDRESS = os.getenv('ORG_ADDRESS', '123 Industrial Estate, Tech City')
ORG_EMAIL = os.getenv('ORG_EMAIL', '')
ORG_PHONE = os.getenv('ORG_PHONE', '')
ORG_LOGO_PATH = os.getenv('ORG_LOGO_PATH', '')
ORG_WEBSITE = os.getenv('ORG_WEBSITE', 'www.airs.com')
ORG_CONTACT_EMAIL = os.getenv('ORG_CONTACT_EMAIL', 'contact@airs.com')
ORG_TAGLINE = os.getenv('ORG_TAGLINE', 'Industrial Excellence')

# The label uses its own sender fallback (dispatch unit rather than head office)
LABEL_SENDER_NAME = os.getenv('LABEL_SENDER_NAME', 'AiRS - Ai ROBO FAB')
LABEL_SENDER_ADDRESS = os.getenv('LABEL_SENDER_ADDRESS', 'Warehouse / Dispatch Unit')

# ═══════════════════════════════════════════════════════════════════
# DOCUMENT CONVENTIONS
# ═══════════════════════════════════════════════════════════════════

# Human-assigned order numbers carrying this prefix are printed verbatim
ORDER_ID_PREFIX = os.getenv('ORDER_ID_PREFIX', 'AIRS-')
SYNTHETIC_ORDER_ID_PREFIX = os.getenv('SYNTHETIC_ORDER_ID_PREFIX', 'ORD-')
SYNTHETIC_ORDER_ID_LENGTH = int(os.getenv('SYNTHETIC_ORDER_ID_LENGTH', '8'))

CURRENCY_SYMBOL = os.getenv('CURRENCY_SYMBOL', '₹')
QUOTATION_CURRENCY_LABEL = os.getenv('QUOTATION_CURRENCY_LABEL', 'INR')
CURRENCY_GROUPING = os.getenv('CURRENCY_GROUPING', 'en_IN')  # 'en_IN' or 'en_US'

# Order categories that are always priced through contract terms
RENTAL_ORDER_TYPE = os.getenv('RENTAL_ORDER_TYPE', 'rental')

# A zero total also marks an order as a custom quote.
# Pending confirmation from the business owner; keep true to match the console.
ZERO_TOTAL_IS_CUSTOM_QUOTE = os.getenv('ZERO_TOTAL_IS_CUSTOM_QUOTE', 'true').lower() == 'true'

QUOTATION_DEFAULT_VALIDITY = os.getenv('QUOTATION_DEFAULT_VALIDITY', '30 Days from Date')
QUOTATION_FILENAME_PREFIX = os.getenv('QUOTATION_FILENAME_PREFIX', 'AiRS-FaaS-Quotation-')

# Output folder for exported invoices, labels and quotations
DOCUMENT_OUTPUT_FOLDER = get_writable_path('documents')

# ═══════════════════════════════════════════════════════════════════
# RECORD STORE
# ═══════════════════════════════════════════════════════════════════

# 'memory' (tests / demos) or 'google_sheet'
ORDER_STORE_BACKEND = os.getenv('ORDER_STORE_BACKEND', 'memory')

# Per-lookup timeout for satellite record fan-out (seconds)
LOOKUP_TIMEOUT_SECONDS = float(os.getenv('LOOKUP_TIMEOUT_SECONDS', '5.0'))

GOOGLE_SHEET_ID = os.getenv('GOOGLE_SHEET_ID')
ORDERS_SHEET = os.getenv('ORDERS_SHEET', 'orders')
ORDER_ADDRESSES_SHEET = os.getenv('ORDER_ADDRESSES_SHEET', 'order_addresses')
ORDER_CUSTOMER_DETAILS_SHEET = os.getenv('ORDER_CUSTOMER_DETAILS_SHEET', 'order_customer_details')
ORDER_PAYMENT_DETAILS_SHEET = os.getenv('ORDER_PAYMENT_DETAILS_SHEET', 'order_payment_details')
FAAS_QUOTATIONS_SHEET = os.getenv('FAAS_QUOTATIONS_SHEET', 'faas_quotations')
SITE_SETTINGS_SHEET = os.getenv('SITE_SETTINGS_SHEET', 'site_settings')

# ═══════════════════════════════════════════════════════════════════
# REST API (FastAPI + Swagger)
# ═══════════════════════════════════════════════════════════════════

API_PORT = int(os.getenv('API_PORT', '8000'))
API_HOST = os.getenv('API_HOST', '0.0.0.0')

# Cloud Run sets PORT to the single port it routes traffic to
_cloud_run_port = os.getenv('PORT')
if _cloud_run_port:
    API_PORT = int(_cloud_run_port)

API_CORS_ORIGINS = os.getenv('API_CORS_ORIGINS', 'http://localhost:5173').split(',')

# ═══════════════════════════════════════════════════════════════════
# MONITORING
# ═══════════════════════════════════════════════════════════════════

LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
LOG_DIR = os.getenv('LOG_DIR', str(PROJECT_ROOT / 'logs'))
LOG_FILE_MAX_MB = int(os.getenv('LOG_FILE_MAX_MB', '10'))
LOG_FILE_BACKUP_COUNT = int(os.getenv('LOG_FILE_BACKUP_COUNT', '5'))


def validate_config():
    """Validate that all required configuration is present"""
    errors = []

    if ORDER_STORE_BACKEND not in ('memory', 'google_sheet'):
        errors.append(f"ORDER_STORE_BACKEND must be 'memory' or 'google_sheet', got '{ORDER_STORE_BACKEND}'")

    if ORDER_STORE_BACKEND == 'google_sheet':
        if not GOOGLE_SHEET_ID:
            errors.append("GOOGLE_SHEET_ID is not set")
        try:
            creds_path = get_credentials_path()
            if creds_path and not os.path.exists(creds_path):
                errors.append(f"Google Sheets credentials file not found: {creds_path}")
        except ValueError as e:
            errors.append(str(e))

    if CURRENCY_GROUPING not in ('en_IN', 'en_US'):
        errors.append(f"CURRENCY_GROUPING must be 'en_IN' or 'en_US', got '{CURRENCY_GROUPING}'")

    if LOOKUP_TIMEOUT_SECONDS <= 0:
        errors.append("LOOKUP_TIMEOUT_SECONDS must be positive")

    if errors:
        raise ValueError("Configuration errors:\n" + "\n".join(errors))

    return True


if __name__ == "__main__":
    try:
        validate_config()
        print("[OK] Configuration validated successfully")
    except ValueError as e:
        print(f"[FAIL] Configuration validation failed:\n{e}")
