# pocketpal/bot/commands/__init__.py

from .utils import start_command, help_command
from .records import (
    balance_command,
    expense_command,
    gig_command,
    income_command,
    recent_command,
)
from .goals import contribute_command, delete_goal_command, goals_command, new_goal_command
from .splits import delete_split_command, paid_command, splits_command
from .hustle import streak_command
from .analytics import analytics_command
from .content import insights_command, news_command

ALL_COMMANDS = {
    "start": start_command,
    "help": help_command,
    "income": income_command,
    "gig": gig_command,
    "expense": expense_command,
    "recent": recent_command,
    "balance": balance_command,
    "analytics": analytics_command,
    "goals": goals_command,
    "newgoal": new_goal_command,
    "contribute": contribute_command,
    "deletegoal": delete_goal_command,
    "splits": splits_command,
    "paid": paid_command,
    "deletesplit": delete_split_command,
    "streak": streak_command,
    "insights": insights_command,
    "news": news_command,
}
