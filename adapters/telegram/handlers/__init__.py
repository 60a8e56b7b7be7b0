from adapters.telegram.handlers import start, scanner, history

# IMPORTANT: start router goes first so /login, /logout and the login FSM
# steps win over the scanner's plain-text handler
routers = [
    start.router,
    history.router,
    scanner.router,  # Last: plain text while scanning is a ticket ID
]

__all__ = ["routers"]
