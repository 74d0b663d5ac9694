from dataclasses import dataclass
from enum import Enum

from .errors import InvalidGuessError


class Comparison(str, Enum):
    HIGHER = 'higher'
    LOWER = 'lower'
    EQUAL = 'equal'

    @classmethod
    def parse(cls, value) -> 'Comparison':
        """Accept a Comparison or its wire name, case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise InvalidGuessError(f"Unknown direction {value!r}; expected 'higher' or 'lower'")

    @classmethod
    def of(cls, first: int, second: int) -> 'Comparison':
        """How `second` relates to `first`."""
        if first < second:
            return cls.HIGHER
        if first > second:
            return cls.LOWER
        return cls.EQUAL


class GameStatus(str, Enum):
    INACTIVE = 'inactive'
    ACTIVE = 'active'
    DONE = 'done'


@dataclass(frozen=True)
class Location:
    name: str
    count: int

    def to_dict(self, include_count=True):
        data = {'name': self.name}
        if include_count:
            data['count'] = self.count
        return data
