"""
Domain constants - scanner tuning defaults and backend names.
Centralized here for easy modification.
"""

# === Debounce ===
# Gate tuning defaults; overridable from settings
DEFAULT_SCAN_COOLDOWN_SECONDS = 5.0
DEFAULT_RESET_DELAY_SECONDS = 1.0

# === Scan log ===
HISTORY_LIMIT = 50

# === Backend ===
SCAN_TICKET_RPC = "scan_ticket"
AUTHENTICATE_SCANNER_RPC = "authenticate_scanner_user"
TICKET_SCANS_TABLE = "ticket_scans"

HISTORY_SELECT = (
    "id, ticket_order_id, scanned_at, "
    "ticket_orders!inner(customer_name, quantity, "
    "tickets!inner(ticket_type, matches!inner(home_team, away_team)))"
)
CUSTOMER_NAMES_SELECT = "ticket_orders!inner(customer_name)"

# === Camera ===
REAR_CAMERA_HINTS = ("back", "rear", "environment")
CAMERA_RESOLUTION = (1280, 720)
VIDEO4LINUX_ROOT = "/sys/class/video4linux"

# === Rate limiting ===
RATE_LIMIT_COMMANDS = 30
RATE_LIMIT_INTERVAL_SECONDS = 60
