import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

from ...domain.errors import DuplicateAccount, NotFound, StoreError
from ...domain.filters import ListingFilter
from ...domain.models import Listing, Location, OwnerProfile, RatingSummary, User
from ...domain.ports.persistence import PersistenceGateway

logger = logging.getLogger(__name__)

_LISTING_SELECT = """
    SELECT
        l.*,
        u.name AS owner_name,
        u.email AS owner_email,
        u.is_verified AS owner_is_verified,
        u.ratings_average AS owner_ratings_average,
        u.ratings_count AS owner_ratings_count
    FROM listings l
    JOIN users u ON u.id = l.owner_id
"""


def build_listing_query(criteria: ListingFilter) -> Tuple[str, List[Any]]:
    """Return the WHERE clause and its parameters for ``criteria``.

    Inactive listings are never eligible.
    """
    clauses = ["l.is_active = 1"]
    params: List[Any] = []
    if criteria.owner_id is not None:
        clauses.append("l.owner_id = ?")
        params.append(criteria.owner_id)
    if criteria.category:
        clauses.append("l.category = ?")
        params.append(criteria.category)
    if criteria.condition:
        clauses.append("l.condition = ?")
        params.append(criteria.condition)
    if criteria.search:
        needle = criteria.search.lower()
        clauses.append(
            "(instr(py_lower(l.name), ?) > 0 OR instr(py_lower(l.description), ?) > 0)"
        )
        params.extend([needle, needle])
    if criteria.min_price is not None:
        clauses.append("l.price >= ?")
        params.append(criteria.min_price)
    if criteria.max_price is not None:
        clauses.append("l.price <= ?")
        params.append(criteria.max_price)
    return " WHERE " + " AND ".join(clauses), params


def _py_lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None


class SQLitePersistence(PersistenceGateway):
    """SQLite-backed implementation of the persistence gateway."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self._conn = sqlite3.connect(path, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._conn.create_function("py_lower", 1, _py_lower, deterministic=True)
        self._conn.execute("PRAGMA foreign_keys = ON")
        self._lock = threading.Lock()
        self._initialize()

    def _initialize(self) -> None:
        with self._conn:
            self._conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL UNIQUE COLLATE NOCASE,
                    phone TEXT NOT NULL,
                    password_hash TEXT NOT NULL,
                    is_verified INTEGER NOT NULL DEFAULT 0,
                    ratings_average REAL NOT NULL DEFAULT 0,
                    ratings_count INTEGER NOT NULL DEFAULT 0,
                    location TEXT,
                    created_at TEXT NOT NULL
                );

                CREATE TABLE IF NOT EXISTS listings (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    owner_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT NOT NULL,
                    price REAL NOT NULL CHECK (price > 0),
                    category TEXT NOT NULL,
                    condition TEXT NOT NULL,
                    images TEXT NOT NULL DEFAULT '[]',
                    location TEXT,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    FOREIGN KEY(owner_id) REFERENCES users(id) ON DELETE RESTRICT
                );

                CREATE INDEX IF NOT EXISTS idx_listings_active_created
                    ON listings(is_active, created_at DESC);

                CREATE INDEX IF NOT EXISTS idx_listings_owner
                    ON listings(owner_id, is_active);
                """
            )

    def close(self) -> None:
        self._conn.close()

    @contextmanager
    def _translate_errors(self, action: str) -> Iterator[None]:
        try:
            yield
        except sqlite3.Error as exc:
            logger.exception("Store failure while trying to %s", action)
            raise StoreError(f"Unable to {action}.") from exc

    # UserRepository API -----------------------------------------------------
    def create_user(
        self,
        name: str,
        email: str,
        phone: str,
        password_hash: str,
        *,
        is_verified: bool = False,
    ) -> User:
        now = self._now()
        with self._translate_errors("create user"):
            try:
                with self._lock, self._conn:
                    cur = self._conn.execute(
                        """
                        INSERT INTO users (
                            name, email, phone, password_hash, is_verified, created_at
                        )
                        VALUES (?, ?, ?, ?, ?, ?)
                        """,
                        (name, email, phone, password_hash, int(is_verified), now),
                    )
                    user_id = cur.lastrowid
            except sqlite3.IntegrityError as exc:
                if "UNIQUE" not in str(exc):
                    raise
                raise DuplicateAccount("An account with this email already exists") from exc
        user = self.get_user_by_id(user_id)
        if user is None:
            raise StoreError("Failed to persist user.")
        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        with self._translate_errors("load user"), self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE email = ?", (email,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    def get_user_by_id(self, user_id: int) -> Optional[User]:
        with self._translate_errors("load user"), self._lock:
            cur = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,))
            row = cur.fetchone()
        return self._row_to_user(row) if row else None

    # ListingRepository API --------------------------------------------------
    def create_listing(
        self,
        owner_id: int,
        name: str,
        description: str,
        price: float,
        category: str,
        condition: str,
        images: List[str],
        location: Optional[Location],
    ) -> Listing:
        now = self._now()
        location_data = json.dumps(location.to_dict()) if location else None
        with self._translate_errors("create listing"):
            try:
                with self._lock, self._conn:
                    cur = self._conn.execute(
                        """
                        INSERT INTO listings (
                            owner_id, name, description, price, category,
                            condition, images, location, is_active, created_at
                        )
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, 1, ?)
                        """,
                        (
                            owner_id,
                            name,
                            description,
                            price,
                            category,
                            condition,
                            json.dumps(images),
                            location_data,
                            now,
                        ),
                    )
                    listing_id = cur.lastrowid
            except sqlite3.IntegrityError as exc:
                if "FOREIGN KEY" not in str(exc):
                    raise
                raise NotFound(f"User {owner_id} not found") from exc
        listing = self.get_listing(listing_id)
        if listing is None:
            raise StoreError("Failed to persist listing.")
        return listing

    def get_listing(self, listing_id: int) -> Optional[Listing]:
        with self._translate_errors("load listing"), self._lock:
            cur = self._conn.execute(_LISTING_SELECT + " WHERE l.id = ?", (listing_id,))
            row = cur.fetchone()
        return self._row_to_listing(row) if row else None

    def find_listings(self, criteria: ListingFilter, limit: Optional[int]) -> List[Listing]:
        where, params = build_listing_query(criteria)
        query = _LISTING_SELECT + where + " ORDER BY l.created_at DESC, l.id DESC"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        with self._translate_errors("query listings"), self._lock:
            cur = self._conn.execute(query, params)
            rows = cur.fetchall()
        return [self._row_to_listing(row) for row in rows]

    def deactivate_listing(self, listing_id: int) -> None:
        with self._translate_errors("deactivate listing"), self._lock, self._conn:
            self._conn.execute("UPDATE listings SET is_active = 0 WHERE id = ?", (listing_id,))

    def count_listings(self) -> int:
        with self._translate_errors("count listings"), self._lock:
            cur = self._conn.execute("SELECT COUNT(*) FROM listings")
            (count,) = cur.fetchone()
        return int(count)

    # Helpers -----------------------------------------------------------------
    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat(timespec="microseconds")

    @staticmethod
    def _load_location(raw: Optional[str]) -> Optional[Location]:
        if not raw:
            return None
        data = json.loads(raw)
        return Location(address=data.get("address"), lat=data.get("lat"), lng=data.get("lng"))

    def _row_to_user(self, row: sqlite3.Row) -> User:
        return User(
            id=row["id"],
            name=row["name"],
            email=row["email"],
            phone=row["phone"],
            password_hash=row["password_hash"],
            is_verified=bool(row["is_verified"]),
            ratings=RatingSummary(
                average=float(row["ratings_average"]), count=int(row["ratings_count"])
            ),
            location=self._load_location(row["location"]),
            created_at=datetime.fromisoformat(row["created_at"]),
        )

    def _row_to_listing(self, row: sqlite3.Row) -> Listing:
        owner = OwnerProfile(
            id=row["owner_id"],
            name=row["owner_name"],
            email=row["owner_email"],
            is_verified=bool(row["owner_is_verified"]),
            ratings=RatingSummary(
                average=float(row["owner_ratings_average"]),
                count=int(row["owner_ratings_count"]),
            ),
        )
        return Listing(
            id=row["id"],
            owner_id=row["owner_id"],
            name=row["name"],
            description=row["description"],
            price=float(row["price"]),
            category=row["category"],
            condition=row["condition"],
            images=json.loads(row["images"]),
            location=self._load_location(row["location"]),
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            owner=owner,
        )
