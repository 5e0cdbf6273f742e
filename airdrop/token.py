"""
Fungible token collaborator.

The engine only needs ``transfer(to, amount) -> bool`` from the distribution
treasury. A False return (or an exception) fails the enclosing claim.

InMemoryToken is a plain balance table used for development and tests; its
wallets play the role of the treasury account the engine pays from.
"""

import threading
from abc import ABC, abstractmethod
from typing import Dict

from .encoding import normalize_address, validate_uint256


class FungibleToken(ABC):
    """Token interface consumed by the claim engine."""

    @abstractmethod
    def transfer(self, to: str, amount: int) -> bool:
        """
        Move ``amount`` from the holder to ``to``.

        Returns:
            True on success, False if the transfer was refused
        """
        pass


class InMemoryToken:
    """
    In-memory fungible token.

    WARNING: Not suitable for production. No persistence, no allowances.
    """

    def __init__(self, name: str = "ERC20 Token", symbol: str = "ERC"):
        self.name = name
        self.symbol = symbol
        self._balances: Dict[str, int] = {}
        self._total_supply = 0
        self._lock = threading.RLock()

    @property
    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, holder: str) -> int:
        with self._lock:
            return self._balances.get(normalize_address(holder), 0)

    def mint(self, to: str, amount: int) -> None:
        to = normalize_address(to)
        validate_uint256(amount)
        with self._lock:
            self._balances[to] = self._balances.get(to, 0) + amount
            self._total_supply += amount

    def move(self, holder: str, to: str, amount: int) -> bool:
        """Transfer between accounts; False on insufficient balance."""
        holder = normalize_address(holder)
        to = normalize_address(to)
        validate_uint256(amount)
        with self._lock:
            available = self._balances.get(holder, 0)
            if available < amount:
                return False
            self._balances[holder] = available - amount
            self._balances[to] = self._balances.get(to, 0) + amount
            return True

    def wallet(self, holder: str) -> "TokenWallet":
        return TokenWallet(self, holder)


class TokenWallet(FungibleToken):
    """FungibleToken view of one holder's balance."""

    def __init__(self, token: InMemoryToken, holder: str):
        self.token = token
        self.holder = normalize_address(holder)

    def transfer(self, to: str, amount: int) -> bool:
        return self.token.move(self.holder, to, amount)

    def balance(self) -> int:
        return self.token.balance_of(self.holder)

    def __repr__(self) -> str:
        return f"TokenWallet({self.token.symbol}, {self.holder})"
