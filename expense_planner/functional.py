from abc import ABC, abstractmethod
from typing import TypeVar, Generic, Callable, Iterable, Union

from expense_planner.domain import Expense, ExpenseDraft
from expense_planner.months import is_month_key

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')


class Maybe(Generic[T], ABC):
    
    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        pass
    
    @abstractmethod
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        pass
    
    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass
    
    @abstractmethod
    def is_some(self) -> bool:
        pass
    
    @abstractmethod
    def is_none(self) -> bool:
        pass


class Some(Generic[T], Maybe[T]):
    
    def __init__(self, value: T):
        self._value = value
    
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))
    
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)
    
    def get_or_else(self, default: T) -> T:
        return self._value
    
    def is_some(self) -> bool:
        return True
    
    def is_none(self) -> bool:
        return False
    
    def __repr__(self) -> str:
        return f"Some({self._value})"
    
    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Generic[T], Maybe[T]):
    
    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()
    
    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()
    
    def get_or_else(self, default: T) -> T:
        return default
    
    def is_some(self) -> bool:
        return False
    
    def is_none(self) -> bool:
        return True
    
    def __repr__(self) -> str:
        return "Nothing()"
    
    def __eq__(self, other) -> bool:
        return isinstance(other, Nothing)


class Either(Generic[E, T], ABC):
    
    @abstractmethod
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        pass
    
    @abstractmethod
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        pass
    
    @abstractmethod
    def get_or_else(self, default: T) -> T:
        pass
    
    @abstractmethod
    def is_right(self) -> bool:
        pass
    
    @abstractmethod
    def is_left(self) -> bool:
        pass
    
    @abstractmethod
    def get_error(self) -> E:
        pass


class Right(Generic[E, T], Either[E, T]):
    
    def __init__(self, value: T):
        self._value = value
    
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))
    
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)
    
    def get_or_else(self, default: T) -> T:
        return self._value
    
    def is_right(self) -> bool:
        return True
    
    def is_left(self) -> bool:
        return False
    
    def get_error(self) -> E:
        raise ValueError("Cannot get error from Right")
    
    def __repr__(self) -> str:
        return f"Right({self._value})"
    
    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Generic[E, T], Either[E, T]):
    
    def __init__(self, error: E):
        self._error = error
    
    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)
    
    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)
    
    def get_or_else(self, default: T) -> T:
        return default
    
    def is_right(self) -> bool:
        return False
    
    def is_left(self) -> bool:
        return True
    
    def get_error(self) -> E:
        return self._error
    
    def __repr__(self) -> str:
        return f"Left({self._error})"
    
    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_expense(expenses: Iterable[Expense], expense_id: str) -> Maybe[Expense]:
    for e in expenses:
        if e.id == expense_id:
            return Some(e)
    return Nothing()


def validate_expense(
    e: Union[Expense, ExpenseDraft]
) -> Either[dict, Union[Expense, ExpenseDraft]]:
    if not e.name or not e.name.strip():
        return Left({
            "error": "empty_name",
            "message": "Expense name must not be empty",
        })

    if e.amount < 0:
        return Left({
            "error": "negative_amount",
            "message": f"Expense amount must not be negative, got {e.amount}",
            "amount": e.amount,
        })

    if not 1 <= e.due_day <= 31:
        return Left({
            "error": "invalid_due_day",
            "message": f"Due day must be between 1 and 31, got {e.due_day}",
            "due_day": e.due_day,
        })

    for field_name in ("start_month", "end_month"):
        value = getattr(e, field_name)
        if not is_month_key(value):
            return Left({
                "error": "invalid_month",
                "message": f"{field_name} must be a YYYY-MM month, got {value!r}",
                "field": field_name,
            })

    if e.start_month > e.end_month:
        # such a range would never be active in any month
        return Left({
            "error": "invalid_range",
            "message": f"Start month {e.start_month} is after end month {e.end_month}",
            "start_month": e.start_month,
            "end_month": e.end_month,
        })

    return Right(e)
