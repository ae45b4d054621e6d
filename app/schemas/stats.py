from pydantic import BaseModel
from typing import List

class OverallStats(BaseModel):
    total_expenses: int
    total_amount: float
    avg_amount: float

class CategoryStats(BaseModel):
    category: str
    category_count: int
    category_amount: float

class GroupStatsOut(BaseModel):
    overall: OverallStats
    by_category: List[CategoryStats]
