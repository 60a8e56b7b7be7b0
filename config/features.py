"""
Feature Flags - Easy on/off toggle for features.
Change values here to enable/disable functionality.
"""

import os


class Features:
    """Feature toggles - set via env vars or defaults"""

    # === ENTRY MODES ===
    # Local camera attached to the gate station (OpenCV + pyzbar)
    CAMERA_ENABLED: bool = os.getenv("CAMERA_ENABLED", "true").lower() == "true"
    # Operators may send a photo of the ticket barcode to the bot
    PHOTO_SCAN_ENABLED: bool = os.getenv("PHOTO_SCAN_ENABLED", "true").lower() == "true"

    # === LIVE DATA ===
    REALTIME_ENABLED: bool = os.getenv("REALTIME_ENABLED", "true").lower() == "true"
    DASHBOARD_ENABLED: bool = os.getenv("DASHBOARD_ENABLED", "true").lower() == "true"

    # === DEBUG ===
    DEBUG_MODE: bool = os.getenv("DEBUG", "false").lower() == "true"

    @classmethod
    def to_dict(cls) -> dict:
        """Get all features as dict (useful for logging)"""
        return {
            "camera_enabled": cls.CAMERA_ENABLED,
            "photo_scan_enabled": cls.PHOTO_SCAN_ENABLED,
            "realtime_enabled": cls.REALTIME_ENABLED,
            "dashboard_enabled": cls.DASHBOARD_ENABLED,
            "debug_mode": cls.DEBUG_MODE,
        }


# Shortcut
features = Features()
