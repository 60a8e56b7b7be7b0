from adapters.telegram.states.scanner import (
    LoginStates,
    ScannerStates,
)

__all__ = [
    "LoginStates",
    "ScannerStates",
]
