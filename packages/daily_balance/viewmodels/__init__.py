from .base import ViewModel
from .expense import ExpenseViewModel, is_amount_valid, normalize_category
from .expense_records import SORT_COLUMNS, ExpenseRecordsViewModel
from .food import FOOD_ACTION, FoodViewModel
from .main import MainViewModel, Screen
from .records import BEER, CIGARETTE, RecordsViewModel
from .theme import ThemeViewModel

__all__ = [
    "BEER",
    "CIGARETTE",
    "ExpenseRecordsViewModel",
    "ExpenseViewModel",
    "FOOD_ACTION",
    "FoodViewModel",
    "MainViewModel",
    "RecordsViewModel",
    "SORT_COLUMNS",
    "Screen",
    "ThemeViewModel",
    "ViewModel",
    "is_amount_valid",
    "normalize_category",
]
