from abc import ABC, abstractmethod
from typing import Any, Callable, Generic, Iterable, TypeVar

from household_analytics.dates import parse_date
from household_analytics.domain import Account, HouseholdMember, Snapshot, Transaction

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

    def is_some(self) -> bool:
        return isinstance(self, Some)

    def is_none(self) -> bool:
        return not self.is_some()


class Some(Maybe[T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Some(f(self._value))

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def __repr__(self) -> str:
        return f"Some({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Some) and self._value == other._value


class Nothing(Maybe[T]):

    def map(self, f: Callable[[T], U]) -> 'Maybe[U]':
        return Nothing()

    def bind(self, f: Callable[[T], 'Maybe[U]']) -> 'Maybe[U]':
        return Nothing()

    def get_or_else(self, default: T) -> T:
        return default

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

    def is_right(self) -> bool:
        return isinstance(self, Right)

    def is_left(self) -> bool:
        return not self.is_right()


class Right(Either[E, T]):

    def __init__(self, value: T):
        self._value = value

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Right(f(self._value))

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return f(self._value)

    def get_or_else(self, default: T) -> T:
        return self._value

    def get_error(self) -> E:
        raise ValueError("Right carries no error")

    def __repr__(self) -> str:
        return f"Right({self._value!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Right) and self._value == other._value


class Left(Either[E, T]):

    def __init__(self, error: E):
        self._error = error

    def map(self, f: Callable[[T], U]) -> 'Either[E, U]':
        return Left(self._error)

    def bind(self, f: Callable[[T], 'Either[E, U]']) -> 'Either[E, U]':
        return Left(self._error)

    def get_or_else(self, default: T) -> T:
        return default

    def get_error(self) -> E:
        return self._error

    def __repr__(self) -> str:
        return f"Left({self._error!r})"

    def __eq__(self, other) -> bool:
        return isinstance(other, Left) and self._error == other._error


def safe_account(accs: tuple[Account, ...], acc_id: str | None) -> Maybe[Account]:
    for acc in accs:
        if acc.id == acc_id:
            return Some(acc)
    return Nothing()


def safe_member(members: tuple[HouseholdMember, ...], member_id: str | None) -> Maybe[HouseholdMember]:
    for m in members:
        if m.id == member_id:
            return Some(m)
    return Nothing()


def validate_transaction(
    t: Transaction,
    accs: tuple[Account, ...],
    members: tuple[HouseholdMember, ...],
) -> Either[dict, Transaction]:
    """Check a transaction's references and date. Issues are data, not exceptions."""
    if parse_date(t.date) is None:
        return Left({
            "error": "malformed_date",
            "message": f"Transaction {t.id} has an unreadable date and is excluded from monthly totals",
            "transaction_id": t.id,
            "date": str(t.date),
        })

    if t.account_id is not None and safe_account(accs, t.account_id).is_none():
        return Left({
            "error": "account_not_found",
            "message": f"Account with ID {t.account_id} does not exist",
            "transaction_id": t.id,
            "account_id": t.account_id,
        })

    if t.member_id is not None and safe_member(members, t.member_id).is_none():
        return Left({
            "error": "member_not_found",
            "message": f"Household member with ID {t.member_id} does not exist",
            "transaction_id": t.id,
            "member_id": t.member_id,
        })

    return Right(t)


def validate_snapshot(snapshot: Snapshot) -> list[Either[dict, Any]]:
    """Run record-level checks over a snapshot and return one Either per finding."""
    results: list[Either[dict, Any]] = [
        validate_transaction(t, snapshot.accounts, snapshot.members) for t in snapshot.transactions
    ]
    for g in snapshot.goals:
        if parse_date(g.target_date) is None:
            results.append(Left({
                "error": "malformed_date",
                "message": f"Goal {g.name} has an unreadable target date",
                "goal_id": g.id,
            }))
        else:
            results.append(Right(g))
    for v in snapshot.vesting_schedules:
        start, end = parse_date(v.start_date), parse_date(v.end_date)
        if start is None or end is None:
            results.append(Left({
                "error": "malformed_date",
                "message": f"Vesting schedule {v.id} has an unreadable start or end date",
                "vesting_id": v.id,
            }))
        elif end < start:
            results.append(Left({
                "error": "inverted_interval",
                "message": f"Vesting schedule {v.id} ends before it starts",
                "vesting_id": v.id,
            }))
        else:
            results.append(Right(v))
    return results


def errors_of(results: Iterable[Either[dict, Any]]) -> list[dict]:
    return [r.get_error() for r in results if isinstance(r, Left)]


def compose(*funcs):
    """Return a function that's the composition of the given functions.

    compose(f, g, h)(x) == f(g(h(x)))
    """
    def _composed(x):
        res = x
        for f in reversed(funcs):
            res = f(res)
        return res
    return _composed


def pipe(x, *funcs):
    """Pipe a value through a series of functions.

    pipe(x, f, g, h) == h(g(f(x)))
    """
    res = x
    for f in funcs:
        res = f(res)
    return res
