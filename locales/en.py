"""English strings for the gate scanner bot."""

EN_STRINGS = {
    # === START / LOGIN ===
    "welcome": (
        "<b>Gate Ticket Scanner</b>\n\n"
        "1. Log in with your scanner account\n"
        "2. Choose a method: manual entry or camera\n"
        "3. Enter the ticket ID or scan the barcode, the system validates it"
    ),
    "welcome_back": "Logged in as <b>{name}</b>. Send a ticket ID to scan it.",
    "login_username": "Scanner username:",
    "login_password": "Password:",
    "login_success": "Welcome, <b>{name}</b>! Send a ticket ID or pick a scan method.",
    "login_inactive": "This scanner account is disabled. Contact an administrator.",
    "logout_done": "Logged out.",
    "not_logged_in": "Please /login first.",

    # === SCANNING ===
    "scan_prompt": "Send the ticket ID...",
    "scanning": "Scanning...",
    "method_header": "<b>Scan method</b>: {mode}",
    "mode_manual": "Manual",
    "mode_camera": "Camera",
    "camera_start": "Start scanning",
    "camera_stop": "Stop scanning",
    "camera_started": "Point the camera at the ticket barcode.",
    "camera_stopped": "Camera stopped.",
    "camera_off_after_scan": "Camera paused after the scan. Tap start to scan the next ticket.",

    # === RESULT ===
    "label_name": "Name",
    "label_ticket_type": "Ticket type",
    "label_match": "Match",
    "label_quantity": "Quantity",
    "label_scanned_at": "Scanned at",

    # === HISTORY & STATS ===
    "history_title": "<b>Scan history</b>",
    "history_empty": "No scans yet.",
    "stats_title": "<b>Scan statistics</b>",
    "stats_total": "Total scans",
    "stats_successful": "Successful scans",
    "stats_today": "Scans today",
    "stats_unique": "Unique customers",

    # === PHOTO & QR ===
    "photo_no_barcode": "No barcode found in this photo. Try again closer and in better light.",
    "photo_disabled": "Photo scanning is disabled on this station.",
    "qr_usage": "Usage: /ticket_qr TICKET_ORDER_ID",
    "qr_caption": "Ticket {ticket_id}",
    "admin_only": "This command is for administrators only.",

    # === ERRORS ===
    "error_generic": "Something went wrong while scanning.",
    "error_empty_identifier": "Ticket ID is required.",
    "error_scan_in_progress": "Still validating the previous ticket, please wait.",
    "error_remote": "Error: {detail}",
    "error_login_failed": "Wrong username or password.",
    "error_history": "Could not load scan history.",
    "camera_unsupported": "Camera scanning is not supported on this station.",
    "camera_not_found": "No camera found on this station.",
    "camera_permission_denied": "Camera access denied. Check the device permissions.",
    "camera_busy": "The camera is already in use.",
    "camera_unknown": "Cannot access the camera.",
    "rate_limited": "You're sending too many requests. Please wait a moment.",
}
