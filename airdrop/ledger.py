"""
Airdrop Claim Ledger

Tracks, per recipient address, whether the one-time claim has been paid.

Implementations must be:
- Monotonic (UNCLAIMED -> CLAIMED, never back once committed)
- Consistent (mark_claimed is an atomic check-and-set)
- Transactional (mutations inside transaction() are discarded if the block
  raises, and transactions nest like savepoints)

Nesting matters: the token collaborator runs inside a claim's transaction
and may call back into the engine. The inner call sees the outer call's
uncommitted CLAIMED entry and is rejected, and its own failure only unwinds
its own savepoint.
"""

import sqlite3
import threading
import time
from abc import ABC, abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterator, List, Union

from .encoding import normalize_address
from .state import ClaimStatus, advance


class ClaimLedger(ABC):
    """Abstract claimed-state store."""

    @abstractmethod
    def status(self, recipient: str) -> ClaimStatus:
        pass

    @abstractmethod
    def mark_claimed(self, recipient: str) -> bool:
        """
        Move recipient to CLAIMED.

        Returns:
            True if the entry transitioned (first claim)
            False if it was already CLAIMED
        """
        pass

    @abstractmethod
    def transaction(self):
        """Context manager delimiting an all-or-nothing unit of work."""
        pass

    @abstractmethod
    def claimed_recipients(self) -> List[str]:
        pass

    def is_claimed(self, recipient: str) -> bool:
        return self.status(recipient) == ClaimStatus.CLAIMED


class InMemoryClaimLedger(ClaimLedger):
    """
    In-memory ledger for development and testing.

    Not persistent across restarts. Use SqliteClaimLedger when the claim
    history must survive the process.
    """

    def __init__(self):
        self._entries: Dict[str, ClaimStatus] = {}
        # one undo list per open transaction, innermost last
        self._journal: List[List[str]] = []
        self._lock = threading.RLock()

    def status(self, recipient: str) -> ClaimStatus:
        with self._lock:
            return self._entries.get(normalize_address(recipient), ClaimStatus.UNCLAIMED)

    def mark_claimed(self, recipient: str) -> bool:
        key = normalize_address(recipient)
        with self._lock:
            current = self._entries.get(key, ClaimStatus.UNCLAIMED)
            if current == ClaimStatus.CLAIMED:
                return False
            self._entries[key] = advance(current, ClaimStatus.CLAIMED)
            if self._journal:
                self._journal[-1].append(key)
            return True

    @contextmanager
    def transaction(self) -> Iterator["InMemoryClaimLedger"]:
        with self._lock:
            self._journal.append([])
            try:
                yield self
            except BaseException:
                # discard uncommitted entries from this savepoint only
                for key in reversed(self._journal.pop()):
                    self._entries.pop(key, None)
                raise
            else:
                applied = self._journal.pop()
                if self._journal:
                    self._journal[-1].extend(applied)

    def claimed_recipients(self) -> List[str]:
        with self._lock:
            return sorted(k for k, v in self._entries.items() if v == ClaimStatus.CLAIMED)


class SqliteClaimLedger(ClaimLedger):
    """
    SQLite-backed ledger.

    Features:
    - Persistent across restarts
    - Atomic check-and-set via INSERT OR IGNORE on the primary key
    - Nested transactions via SAVEPOINT / ROLLBACK TO

    Schema:
        CREATE TABLE claims (
            recipient TEXT PRIMARY KEY,
            claimed_at INTEGER NOT NULL
        );
    """

    def __init__(self, db_path: Union[str, Path]):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        # autocommit mode; transactions are opened explicitly with SAVEPOINT
        self._conn = sqlite3.connect(str(self.db_path), check_same_thread=False, isolation_level=None)
        self._conn.execute("PRAGMA journal_mode=WAL;")
        self._conn.execute("PRAGMA synchronous=NORMAL;")
        self._lock = threading.RLock()
        self._depth = 0
        self.init_schema()

    def init_schema(self) -> None:
        """Create the claims table. Safe to call multiple times."""
        with self._lock:
            self._conn.execute("""
            CREATE TABLE IF NOT EXISTS claims (
                recipient TEXT PRIMARY KEY,
                claimed_at INTEGER NOT NULL
            );""")

    def status(self, recipient: str) -> ClaimStatus:
        key = normalize_address(recipient)
        with self._lock:
            row = self._conn.execute(
                "SELECT 1 FROM claims WHERE recipient=?",
                (key,)
            ).fetchone()
        return ClaimStatus.CLAIMED if row else ClaimStatus.UNCLAIMED

    def mark_claimed(self, recipient: str) -> bool:
        key = normalize_address(recipient)
        with self._lock:
            cur = self._conn.execute(
                "INSERT OR IGNORE INTO claims(recipient, claimed_at) VALUES(?,?)",
                (key, int(time.time()))
            )
            return cur.rowcount == 1

    @contextmanager
    def transaction(self) -> Iterator["SqliteClaimLedger"]:
        with self._lock:
            self._depth += 1
            savepoint = f"claim_sp_{self._depth}"
            self._conn.execute(f"SAVEPOINT {savepoint}")
            try:
                yield self
            except BaseException:
                self._conn.execute(f"ROLLBACK TO SAVEPOINT {savepoint}")
                self._conn.execute(f"RELEASE SAVEPOINT {savepoint}")
                raise
            else:
                self._conn.execute(f"RELEASE SAVEPOINT {savepoint}")
            finally:
                self._depth -= 1

    def claimed_recipients(self) -> List[str]:
        with self._lock:
            rows = self._conn.execute("SELECT recipient FROM claims ORDER BY recipient").fetchall()
        return [r[0] for r in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()
