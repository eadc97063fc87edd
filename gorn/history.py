"""Most-recently-used list of launched command lines."""

from __future__ import annotations

from typing import Callable, Iterable, Iterator


def executable_name(command_line: str) -> str:
    """Return the text before the first space of *command_line*."""
    return command_line.split(" ", 1)[0]


class HistoryList:
    """Ordered command lines, most recent first, without duplicates.

    The position lookup is rebuilt inside every mutating call, so membership
    and position queries are always consistent with the list order.
    """

    def __init__(self, max_length: int | None = None) -> None:
        self._items: list[str] = []
        self._positions: dict[str, int] = {}
        self.max_length = max_length if max_length else None

    @classmethod
    def from_iterable(
        cls,
        items: Iterable[str],
        *,
        max_length: int | None = None,
    ) -> "HistoryList":
        """Load persisted entries, keeping the first occurrence of duplicates."""

        history = cls(max_length=max_length)
        seen: set[str] = set()
        for item in items:
            if not item or item in seen:
                continue
            seen.add(item)
            history._items.append(item)
        history._truncate()
        history.build_lookup()
        return history

    def __contains__(self, command_line: object) -> bool:
        return command_line in self._positions

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> str:
        return self._items[index]

    def __repr__(self) -> str:
        return f"HistoryList({self._items!r})"

    def position(self, command_line: str) -> int | None:
        return self._positions.get(command_line)

    def to_list(self) -> list[str]:
        return list(self._items)

    def build_lookup(self) -> dict[str, int]:
        self._positions = {item: idx for idx, item in enumerate(self._items)}
        return dict(self._positions)

    def add(self, command_line: str) -> None:
        """Move *command_line* to the front, inserting it if new."""

        index = self._positions.get(command_line)
        if index is not None:
            del self._items[index]
        self._items.insert(0, command_line)
        self._truncate()
        self.build_lookup()

    def prune(self, resolver: Callable[[str], bool]) -> list[str]:
        """Drop entries whose executable *resolver* rejects; return them."""

        kept: list[str] = []
        dropped: list[str] = []
        verdicts: dict[str, bool] = {}
        for item in self._items:
            name = executable_name(item)
            if name not in verdicts:
                verdicts[name] = bool(resolver(name))
            if verdicts[name]:
                kept.append(item)
            else:
                dropped.append(item)
        if dropped:
            self._items = kept
            self.build_lookup()
        return dropped

    def clear(self) -> int:
        count = len(self._items)
        self._items = []
        self._positions = {}
        return count

    def _truncate(self) -> None:
        if self.max_length is not None and len(self._items) > self.max_length:
            del self._items[self.max_length :]
