from hia.services.accounts import AccountService
from hia.services.assistant import AssistantError, AssistantUnavailable, ask_census_assistant
from hia.services.payments import PaymentError, PaymentService

__all__ = [
    "AccountService",
    "AssistantError",
    "AssistantUnavailable",
    "PaymentError",
    "PaymentService",
    "ask_census_assistant",
]
