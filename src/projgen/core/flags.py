"""
Flag tokens and per-invocation flag snapshots.

A token names either any use of a switch (``Bare("mode")`` → ``--mode``) or
one specific value of it (``ValueEquals("mode", "interactive")`` →
``--mode=interactive``). A ``FlagState`` is built once from the resolved flag
values of a command and answers whether a token is active.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType


@dataclass(frozen=True)
class Bare:
    """A switch that is active whenever it is used."""

    name: str

    def __str__(self) -> str:
        return f"--{self.name}"


@dataclass(frozen=True)
class ValueEquals:
    """A value switch that is active only for one specific value."""

    name: str
    value: str

    def __str__(self) -> str:
        return f"--{self.name}={self.value}"


FlagToken = Bare | ValueEquals


@dataclass(frozen=True)
class FlagState:
    """
    Immutable snapshot of which flags are active for one resolution pass.

    Attributes:
        active: Names of switches in use (true booleans, non-empty values)
        values: Supplied values of value switches, keyed by name
    """

    active: frozenset[str] = frozenset()
    values: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def from_flags(
        cls,
        switches: Mapping[str, bool | None] | None = None,
        values: Mapping[str, str | None] | None = None,
    ) -> FlagState:
        """
        Build a snapshot from boolean switches and value switches.

        Booleans count as active when true. A value switch counts as active
        when a non-empty value was supplied; ``None`` and ``""`` mean unset.

        Examples:
            FlagState.from_flags({"verbose": True}, {"mode": "ni"})
            # active: {"verbose", "mode"}, values: {"mode": "ni"}
        """
        active = {name for name, on in (switches or {}).items() if on}
        supplied: dict[str, str] = {}
        for name, value in (values or {}).items():
            if value:
                active.add(name)
                supplied[name] = value
        return cls(active=frozenset(active), values=MappingProxyType(supplied))

    def is_active(self, token: FlagToken) -> bool:
        """Whether ``token`` is active in this snapshot."""
        if token.name not in self.active:
            return False
        if isinstance(token, ValueEquals):
            return self.values.get(token.name) == token.value
        return True

    def active_tokens(self) -> list[str]:
        """Rendered tokens for every active switch, sorted for stable output."""
        tokens = []
        for name in sorted(self.active):
            if name in self.values:
                tokens.append(str(ValueEquals(name, self.values[name])))
            else:
                tokens.append(str(Bare(name)))
        return tokens
