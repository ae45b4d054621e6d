from app.models.group import Group
from app.models.group_member import GroupMember
from app.models.expense import Expense
from app.models.expense_split import ExpenseSplit

__all__ = ["Group", "GroupMember", "Expense", "ExpenseSplit"]
