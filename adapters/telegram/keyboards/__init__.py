from adapters.telegram.keyboards.inline import (
    get_scan_method_keyboard,
    get_scanner_menu_keyboard,
)

__all__ = [
    "get_scan_method_keyboard",
    "get_scanner_menu_keyboard",
]
