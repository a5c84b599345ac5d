from tradedesk.repositories.accounts import AccountsRepository
from tradedesk.repositories.admin_bots import AdminBotsRepository
from tradedesk.repositories.base import CollectionRepository
from tradedesk.repositories.bots import BotAssignmentsRepository
from tradedesk.repositories.careers import CareersRepository
from tradedesk.repositories.users import UsersRepository

__all__ = [
    "AccountsRepository",
    "AdminBotsRepository",
    "BotAssignmentsRepository",
    "CareersRepository",
    "CollectionRepository",
    "UsersRepository",
]
