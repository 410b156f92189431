"""
Leaderboard of popular ENS names.

The leaderboard only offers names; choosing one hands it to a callback,
which the application wires to a leaderboard search.
"""

from typing import Awaitable, Callable, Sequence, Union


DomainCallback = Callable[[str], Awaitable[object]]


class Leaderboard:
    """A fixed, ordered list of candidate names."""

    def __init__(self, names: Sequence[str], on_domain_click: DomainCallback) -> None:
        """
        Args:
            names: Candidate names, most popular first
            on_domain_click: Awaited with the chosen name
        """
        seen = set()
        self._names: list[str] = []
        for name in names:
            cleaned = name.strip()
            if cleaned and cleaned.lower() not in seen:
                seen.add(cleaned.lower())
                self._names.append(cleaned)
        self._on_domain_click = on_domain_click

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    def resolve(self, choice: Union[int, str]) -> str:
        """
        Map a 1-based position or a listed name to the name.

        Raises:
            KeyError: If the choice is not on the leaderboard
        """
        if isinstance(choice, int) or (isinstance(choice, str) and choice.strip().isdecimal()):
            position = int(choice)
            if 1 <= position <= len(self._names):
                return self._names[position - 1]
            raise KeyError(choice)

        for name in self._names:
            if name.lower() == choice.strip().lower():
                return name
        raise KeyError(choice)

    async def choose(self, choice: Union[int, str]) -> str:
        """Resolve ``choice`` and await the callback with it."""
        name = self.resolve(choice)
        await self._on_domain_click(name)
        return name
