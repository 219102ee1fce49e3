"""Adapter: SQLite-backed FactProvider."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable

from ..domain.claims import Brand, Claim, ClaimLevel, MarketOverride, Product
from ..domain.errors import NotFoundError, ProviderUnavailableError
from ..models.dataset import FactDataset

# Stay well under SQLITE_MAX_VARIABLE_NUMBER on old builds.
_IN_CHUNK = 500

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS brands (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS products (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        brand_id TEXT REFERENCES brands (id),
        description TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS ingredients (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS product_ingredients (
        product_id TEXT NOT NULL,
        ingredient_id TEXT NOT NULL,
        PRIMARY KEY (product_id, ingredient_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS claims (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL UNIQUE,
        text TEXT,
        type TEXT NOT NULL,
        level TEXT NOT NULL,
        country_scope TEXT NOT NULL,
        brand_id TEXT,
        product_id TEXT,
        ingredient_id TEXT,
        description TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS market_claim_overrides (
        seq INTEGER PRIMARY KEY AUTOINCREMENT,
        id TEXT NOT NULL UNIQUE,
        master_claim_id TEXT NOT NULL,
        target_product_id TEXT NOT NULL,
        market_scope TEXT NOT NULL,
        is_blocked INTEGER NOT NULL DEFAULT 0,
        replacement_claim_id TEXT
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_claims_owner ON claims (level, brand_id, product_id, ingredient_id)",
    "CREATE INDEX IF NOT EXISTS idx_overrides_target ON market_claim_overrides (target_product_id, master_claim_id)",
)

_CLAIM_COLUMNS = "id, text, type, level, country_scope, brand_id, product_id, ingredient_id, description"

_OWNER_COLUMN = {
    ClaimLevel.brand: "brand_id",
    ClaimLevel.product: "product_id",
    ClaimLevel.ingredient: "ingredient_id",
}


def _chunks(values: list[str]) -> Iterable[list[str]]:
    for i in range(0, len(values), _IN_CHUNK):
        yield values[i : i + _IN_CHUNK]


def _row_to_claim(row: sqlite3.Row, prefix: str = "") -> Claim:
    return Claim(
        id=row[prefix + "id"],
        text=row[prefix + "text"],
        type=row[prefix + "type"],
        level=row[prefix + "level"],
        country_scope=row[prefix + "country_scope"],
        brand_id=row[prefix + "brand_id"],
        product_id=row[prefix + "product_id"],
        ingredient_id=row[prefix + "ingredient_id"],
        description=row[prefix + "description"],
    )


class SqliteFactProvider:
    """Concrete FactProvider reading claim rows from SQLite.

    Every call opens its own connection, so one instance can serve the
    matrix worker pool without locking.
    """

    def __init__(self, db_path: str, timeout_seconds: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout_seconds
        self._ensure_parent_dir()
        self.init_schema()

    def _ensure_parent_dir(self) -> None:
        path = Path(self._db_path)
        if path.parent.exists():
            return
        path.parent.mkdir(parents=True, exist_ok=True)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_path, timeout=self._timeout)
        conn.row_factory = sqlite3.Row
        return conn

    def _fetch(self, query: str, params: Iterable[object] = ()) -> list[sqlite3.Row]:
        try:
            with self._connect() as conn:
                return conn.execute(query, tuple(params)).fetchall()
        except sqlite3.Error as exc:
            raise ProviderUnavailableError(f"claims database query failed: {exc}") from exc

    def init_schema(self) -> None:
        try:
            with self._connect() as conn:
                for statement in _SCHEMA:
                    conn.execute(statement)
        except sqlite3.Error as exc:
            raise ProviderUnavailableError(f"cannot initialise claims database: {exc}") from exc

    # ------------------------------------------------------------------
    # Seeding
    # ------------------------------------------------------------------

    def load_dataset(self, dataset: FactDataset) -> dict[str, int]:
        """Upsert every row of ``dataset``. Returns row counts per table."""
        try:
            with self._connect() as conn:
                conn.executemany(
                    "INSERT OR REPLACE INTO brands (id, name) VALUES (?, ?)",
                    [(b.id, b.name) for b in dataset.brands],
                )
                conn.executemany(
                    "INSERT OR REPLACE INTO products (id, name, brand_id, description) VALUES (?, ?, ?, ?)",
                    [(p.id, p.name, p.brand_id, p.description) for p in dataset.products],
                )
                conn.executemany(
                    "INSERT OR REPLACE INTO ingredients (id, name) VALUES (?, ?)",
                    [(i.id, i.name) for i in dataset.ingredients],
                )
                conn.executemany(
                    "INSERT OR IGNORE INTO product_ingredients (product_id, ingredient_id) VALUES (?, ?)",
                    [(link.product_id, link.ingredient_id) for link in dataset.product_ingredients],
                )
                conn.executemany(
                    "INSERT OR REPLACE INTO claims (" + _CLAIM_COLUMNS + ") "
                    "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                    [
                        (
                            c.id,
                            c.text,
                            c.type.value,
                            c.level.value,
                            c.country_scope,
                            c.brand_id,
                            c.product_id,
                            c.ingredient_id,
                            c.description,
                        )
                        for c in dataset.claims
                    ],
                )
                conn.executemany(
                    """
                    INSERT OR REPLACE INTO market_claim_overrides (
                        id, master_claim_id, target_product_id, market_scope,
                        is_blocked, replacement_claim_id
                    ) VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [
                        (
                            o.id,
                            o.master_claim_id,
                            o.target_product_id,
                            o.market_scope,
                            int(o.is_blocked),
                            o.replacement_claim_id,
                        )
                        for o in dataset.market_overrides
                    ],
                )
        except sqlite3.Error as exc:
            raise ProviderUnavailableError(f"cannot load claims dataset: {exc}") from exc
        return {
            "brands": len(dataset.brands),
            "products": len(dataset.products),
            "ingredients": len(dataset.ingredients),
            "product_ingredients": len(dataset.product_ingredients),
            "claims": len(dataset.claims),
            "market_overrides": len(dataset.market_overrides),
        }

    # ------------------------------------------------------------------
    # Reference entities
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Product:
        rows = self._fetch(
            "SELECT id, name, brand_id, description FROM products WHERE id = ?",
            (product_id,),
        )
        if not rows:
            raise NotFoundError("product", product_id)
        row = rows[0]
        return Product(
            id=row["id"], name=row["name"], brand_id=row["brand_id"], description=row["description"]
        )

    def list_products(self, brand_id: str | None = None) -> list[Product]:
        query = "SELECT id, name, brand_id, description FROM products"
        params: list[object] = []
        if brand_id is not None:
            query += " WHERE brand_id = ?"
            params.append(brand_id)
        query += " ORDER BY name, id"
        return [
            Product(id=r["id"], name=r["name"], brand_id=r["brand_id"], description=r["description"])
            for r in self._fetch(query, params)
        ]

    def get_brand(self, brand_id: str) -> Brand:
        rows = self._fetch("SELECT id, name FROM brands WHERE id = ?", (brand_id,))
        if not rows:
            raise NotFoundError("brand", brand_id)
        return Brand(id=rows[0]["id"], name=rows[0]["name"])

    def get_brand_for_product(self, product_id: str) -> str:
        rows = self._fetch(
            """
            SELECT p.brand_id AS brand_id, b.id AS found_brand_id
            FROM products p LEFT JOIN brands b ON b.id = p.brand_id
            WHERE p.id = ?
            """,
            (product_id,),
        )
        if not rows:
            raise NotFoundError("product", product_id)
        row = rows[0]
        if not row["found_brand_id"]:
            raise NotFoundError("brand", row["brand_id"] or f"<none for product {product_id}>")
        return row["found_brand_id"]

    def get_ingredients_for_product(self, product_id: str) -> list[str]:
        self.get_product(product_id)
        rows = self._fetch(
            "SELECT ingredient_id FROM product_ingredients WHERE product_id = ? ORDER BY rowid",
            (product_id,),
        )
        return list(dict.fromkeys(r["ingredient_id"] for r in rows))

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def get_claims_for_owner(
        self,
        level: ClaimLevel,
        owner_id: str,
        country_scope: str,
    ) -> list[Claim]:
        level = ClaimLevel(level)
        scope = (country_scope or "").strip().upper()
        if not scope:
            return []
        rows = self._fetch(
            "SELECT " + _CLAIM_COLUMNS + " FROM claims "
            "WHERE level = ? AND " + _OWNER_COLUMN[level] + " = ? "
            "AND UPPER(TRIM(country_scope)) = ? ORDER BY seq",
            (level.value, owner_id, scope),
        )
        return [_row_to_claim(r) for r in rows]

    def get_claims_by_ids(self, ids: Iterable[str]) -> list[Claim]:
        wanted = list(dict.fromkeys(ids))
        claims: list[Claim] = []
        for chunk in _chunks(wanted):
            placeholders = ", ".join("?" for _ in chunk)
            rows = self._fetch(
                "SELECT " + _CLAIM_COLUMNS + " FROM claims WHERE id IN (" + placeholders + ") ORDER BY seq",
                chunk,
            )
            claims.extend(_row_to_claim(r) for r in rows)
        return claims

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def get_overrides_for_master_claims(
        self,
        master_claim_ids: Iterable[str],
        product_id: str,
        market_scope: str,
    ) -> list[MarketOverride]:
        wanted = list(dict.fromkeys(master_claim_ids))
        scope = (market_scope or "").strip().upper()
        if not wanted or not scope:
            return []
        replacement_columns = ", ".join(
            f"r.{col.strip()} AS r_{col.strip()}" for col in _CLAIM_COLUMNS.split(",")
        )
        overrides: list[MarketOverride] = []
        for chunk in _chunks(wanted):
            placeholders = ", ".join("?" for _ in chunk)
            rows = self._fetch(
                "SELECT o.id, o.master_claim_id, o.target_product_id, o.market_scope, "
                "o.is_blocked, o.replacement_claim_id, " + replacement_columns + " "
                "FROM market_claim_overrides o "
                "LEFT JOIN claims r ON r.id = o.replacement_claim_id "
                "WHERE o.target_product_id = ? AND UPPER(TRIM(o.market_scope)) = ? "
                "AND o.master_claim_id IN (" + placeholders + ") ORDER BY o.seq",
                [product_id, scope, *chunk],
            )
            for row in rows:
                replacement = _row_to_claim(row, prefix="r_") if row["r_id"] else None
                overrides.append(
                    MarketOverride(
                        id=row["id"],
                        master_claim_id=row["master_claim_id"],
                        target_product_id=row["target_product_id"],
                        market_scope=row["market_scope"],
                        is_blocked=bool(row["is_blocked"]),
                        replacement_claim_id=row["replacement_claim_id"],
                        replacement_claim=replacement,
                    )
                )
        return overrides
