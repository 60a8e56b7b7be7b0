"""
FSM States for Telegram bot.
"""

from aiogram.fsm.state import State, StatesGroup


class LoginStates(StatesGroup):
    """FSM states for scanner account login"""
    waiting_username = State()
    waiting_password = State()


class ScannerStates(StatesGroup):
    """FSM states while an operator is logged in"""
    scanning = State()
