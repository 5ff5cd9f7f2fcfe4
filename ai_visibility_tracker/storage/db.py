"""
SQLite analysis history for AI Visibility Tracker.

This module provides database setup with schema versioning and the
operations behind the `history` commands. All timestamps are stored in
ISO 8601 format with 'Z' suffix (UTC).

The database tracks:
- analyses: One row per analysis with category, provider and totals
- brand_results: Per-brand metrics, stored in ranked order
- prompt_results: Per-prompt annotations, stored in input order
- citations: Ranked cited URLs

Example usage:
    >>> init_db_if_needed("./output/visibility.db")
    >>> with sqlite3.connect("./output/visibility.db") as conn:
    ...     analysis_id = save_analysis(conn, result, provider="openai")
    ...     recent = list_recent_analyses(conn, limit=5)

Security:
    - ALL queries use parameterized statements to prevent SQL injection
    - NO API keys are ever stored in the database
"""

import json
import logging
import sqlite3
from pathlib import Path

from ..analyzer.models import (
    AnalysisResult,
    BrandResult,
    CitationResult,
    ConfidenceLevel,
    PromptResult,
)
from ..exceptions import DatabaseInitError, DatabaseQueryError
from ..utils.time import utc_timestamp

logger = logging.getLogger(__name__)

# Current schema version - increment when migrations are added
CURRENT_SCHEMA_VERSION = 1

# Brands shown per analysis in history listings
PREVIEW_BRAND_COUNT = 3


def init_db_if_needed(db_path: str) -> None:
    """
    Initialize SQLite database with schema versioning.

    Creates the database file and parent directory if they don't exist and
    applies any needed migrations. Idempotent: a no-op when the schema is
    current.

    Args:
        db_path: Filesystem path to SQLite database file

    Raises:
        DatabaseInitError: If the file cannot be created, a migration fails,
            or the schema is newer than this software understands
    """
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        with sqlite3.connect(db_path) as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_version (
                    version INTEGER PRIMARY KEY,
                    applied_at TEXT NOT NULL
                )
            """)
            conn.commit()

            current_version = get_schema_version(conn)

            if current_version < CURRENT_SCHEMA_VERSION:
                logger.info(
                    f"Database schema upgrade needed: "
                    f"v{current_version} -> v{CURRENT_SCHEMA_VERSION}"
                )
                apply_migrations(conn, current_version, CURRENT_SCHEMA_VERSION)
            elif current_version > CURRENT_SCHEMA_VERSION:
                raise DatabaseInitError(
                    f"Database schema version {current_version} is newer than "
                    f"expected {CURRENT_SCHEMA_VERSION}. Update your software or "
                    f"use a different database file."
                )
            else:
                logger.debug(f"Database schema is current (v{CURRENT_SCHEMA_VERSION})")
    except (sqlite3.Error, OSError) as e:
        raise DatabaseInitError(f"Failed to initialize database {db_path}: {e}") from e


def get_schema_version(conn: sqlite3.Connection) -> int:
    """Return the applied schema version, 0 for a fresh database."""
    result = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]
    return result if result is not None else 0


def apply_migrations(
    conn: sqlite3.Connection, from_version: int, to_version: int
) -> None:
    """
    Apply schema migrations sequentially, each in its own transaction.

    If migration to version N fails, the database remains at version N-1.

    Raises:
        ValueError: If from_version > to_version (downgrades not supported)
        sqlite3.Error: If any migration SQL fails (transaction rolled back)
    """
    if from_version > to_version:
        raise ValueError(
            f"Cannot downgrade schema from v{from_version} to v{to_version}. "
            f"Downgrades are not supported. Use a database backup instead."
        )

    migrations = {1: _migrate_to_v1}

    for target_version in range(from_version + 1, to_version + 1):
        logger.info(f"Applying migration to schema version {target_version}")
        migrate = migrations.get(target_version)
        if migrate is None:
            raise ValueError(f"No migration defined for version {target_version}")

        try:
            conn.execute("BEGIN")
            migrate(conn)
            conn.execute(
                "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
                (target_version, utc_timestamp()),
            )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error(
                f"Migration to version {target_version} failed: {e}", exc_info=True
            )
            raise sqlite3.Error(
                f"Failed to migrate database to version {target_version}: {e}"
            ) from e


def _migrate_to_v1(conn: sqlite3.Connection) -> None:
    """
    Create the initial history tables.

    `position` columns preserve the ordering of the result lists (brand rank,
    prompt input order, citation rank) so a stored analysis reads back
    identically.
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS analyses (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            run_id TEXT,
            timestamp_utc TEXT NOT NULL,
            category TEXT NOT NULL,
            provider TEXT,
            model_name TEXT,
            total_mentions INTEGER NOT NULL,
            total_prompts INTEGER NOT NULL,
            confidence_level TEXT NOT NULL
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS brand_results (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            analysis_id INTEGER NOT NULL,
            position INTEGER NOT NULL,
            name TEXT NOT NULL,
            mentions INTEGER NOT NULL,
            prompts_with_brand INTEGER NOT NULL,
            first_mentions INTEGER NOT NULL,
            prompt_coverage REAL NOT NULL,
            mention_share REAL NOT NULL,
            mentions_per_prompt REAL NOT NULL,
            first_mention_rate REAL NOT NULL,
            missed_prompts INTEGER NOT NULL,
            contexts_json TEXT NOT NULL,
            FOREIGN KEY (analysis_id) REFERENCES analyses(id) ON DELETE CASCADE
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS prompt_results (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            analysis_id INTEGER NOT NULL,
            position INTEGER NOT NULL,
            prompt TEXT NOT NULL,
            response TEXT NOT NULL,
            brands_mentioned_json TEXT NOT NULL,
            brand_contexts_json TEXT NOT NULL,
            urls_json TEXT NOT NULL,
            first_mention TEXT,
            FOREIGN KEY (analysis_id) REFERENCES analyses(id) ON DELETE CASCADE
        )
    """)

    conn.execute("""
        CREATE TABLE IF NOT EXISTS citations (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            analysis_id INTEGER NOT NULL,
            position INTEGER NOT NULL,
            url TEXT NOT NULL,
            domain TEXT NOT NULL,
            count INTEGER NOT NULL,
            FOREIGN KEY (analysis_id) REFERENCES analyses(id) ON DELETE CASCADE
        )
    """)

    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_analyses_timestamp
        ON analyses(timestamp_utc)
    """)
    conn.execute("""
        CREATE INDEX IF NOT EXISTS idx_brand_results_name
        ON brand_results(name)
    """)
    for table in ("brand_results", "prompt_results", "citations"):
        conn.execute(
            f"CREATE INDEX IF NOT EXISTS idx_{table}_analysis ON {table}(analysis_id)"
        )

    logger.debug("Created schema v1 tables and indexes")


def save_analysis(
    conn: sqlite3.Connection,
    result: AnalysisResult,
    run_id: str | None = None,
    timestamp_utc: str | None = None,
    provider: str | None = None,
    model_name: str | None = None,
) -> int:
    """
    Store an analysis with all its brands, prompts and citations.

    Args:
        conn: Active SQLite database connection
        result: Analysis to store
        run_id: Run directory identifier, when the analysis came from `run`
        timestamp_utc: When the analysis was made (defaults to now)
        provider: Provider that produced the answers
        model_name: Model that produced the answers

    Returns:
        ID of the new analyses row

    Raises:
        DatabaseQueryError: If any insert fails

    Note:
        Call conn.commit() (or use the connection as a context manager)
        to persist the rows.
    """
    timestamp_utc = timestamp_utc or utc_timestamp()

    try:
        cursor = conn.execute(
            """
            INSERT INTO analyses (
                run_id, timestamp_utc, category, provider, model_name,
                total_mentions, total_prompts, confidence_level
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                run_id,
                timestamp_utc,
                result.category,
                provider,
                model_name,
                result.total_mentions,
                result.total_prompts,
                str(result.confidence_level),
            ),
        )
        analysis_id = cursor.lastrowid

        conn.executemany(
            """
            INSERT INTO brand_results (
                analysis_id, position, name, mentions, prompts_with_brand,
                first_mentions, prompt_coverage, mention_share,
                mentions_per_prompt, first_mention_rate, missed_prompts,
                contexts_json
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    analysis_id,
                    position,
                    brand.name,
                    brand.mentions,
                    brand.prompts_with_brand,
                    brand.first_mentions,
                    brand.prompt_coverage,
                    brand.mention_share,
                    brand.mentions_per_prompt,
                    brand.first_mention_rate,
                    brand.missed_prompts,
                    json.dumps(brand.contexts, ensure_ascii=False),
                )
                for position, brand in enumerate(result.brands)
            ],
        )

        conn.executemany(
            """
            INSERT INTO prompt_results (
                analysis_id, position, prompt, response, brands_mentioned_json,
                brand_contexts_json, urls_json, first_mention
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            [
                (
                    analysis_id,
                    position,
                    prompt.prompt,
                    prompt.response,
                    json.dumps(prompt.brands_mentioned, ensure_ascii=False),
                    json.dumps(prompt.brand_contexts, ensure_ascii=False),
                    json.dumps(prompt.urls, ensure_ascii=False),
                    prompt.first_mention,
                )
                for position, prompt in enumerate(result.prompts)
            ],
        )

        conn.executemany(
            """
            INSERT INTO citations (analysis_id, position, url, domain, count)
            VALUES (?, ?, ?, ?, ?)
            """,
            [
                (analysis_id, position, c.url, c.domain, c.count)
                for position, c in enumerate(result.citations)
            ],
        )
    except sqlite3.Error as e:
        logger.error(f"Failed to save analysis for '{result.category}': {e}", exc_info=True)
        raise DatabaseQueryError(f"Failed to save analysis: {e}") from e

    logger.debug(
        f"Saved analysis {analysis_id}: {len(result.brands)} brands, "
        f"{len(result.prompts)} prompts, {len(result.citations)} citations"
    )
    return analysis_id


def get_analysis(conn: sqlite3.Connection, analysis_id: int) -> dict | None:
    """
    Retrieve a stored analysis.

    Returns:
        The AnalysisResult wire dict (camelCase keys) extended with `id`,
        `runId`, `timestampUtc`, `provider` and `modelName`; None if no
        analysis has that ID

    Raises:
        DatabaseQueryError: If a query fails
    """
    try:
        row = conn.execute(
            """
            SELECT id, run_id, timestamp_utc, category, provider, model_name,
                   total_mentions, total_prompts, confidence_level
            FROM analyses
            WHERE id = ?
            """,
            (analysis_id,),
        ).fetchone()
        if row is None:
            return None

        brand_rows = conn.execute(
            """
            SELECT name, mentions, prompts_with_brand, first_mentions,
                   prompt_coverage, mention_share, mentions_per_prompt,
                   first_mention_rate, missed_prompts, contexts_json
            FROM brand_results
            WHERE analysis_id = ?
            ORDER BY position
            """,
            (analysis_id,),
        ).fetchall()

        prompt_rows = conn.execute(
            """
            SELECT prompt, response, brands_mentioned_json, brand_contexts_json,
                   urls_json, first_mention
            FROM prompt_results
            WHERE analysis_id = ?
            ORDER BY position
            """,
            (analysis_id,),
        ).fetchall()

        citation_rows = conn.execute(
            """
            SELECT url, domain, count
            FROM citations
            WHERE analysis_id = ?
            ORDER BY position
            """,
            (analysis_id,),
        ).fetchall()
    except sqlite3.Error as e:
        raise DatabaseQueryError(f"Failed to load analysis {analysis_id}: {e}") from e

    result = AnalysisResult(
        category=row[3],
        brands=[
            BrandResult(
                name=b[0],
                mentions=b[1],
                prompts_with_brand=b[2],
                first_mentions=b[3],
                prompt_coverage=b[4],
                mention_share=b[5],
                mentions_per_prompt=b[6],
                first_mention_rate=b[7],
                missed_prompts=b[8],
                contexts=json.loads(b[9]),
            )
            for b in brand_rows
        ],
        prompts=[
            PromptResult(
                prompt=p[0],
                response=p[1],
                brands_mentioned=json.loads(p[2]),
                brand_contexts=json.loads(p[3]),
                urls=json.loads(p[4]),
                first_mention=p[5],
            )
            for p in prompt_rows
        ],
        citations=[CitationResult(url=c[0], domain=c[1], count=c[2]) for c in citation_rows],
        total_mentions=row[6],
        total_prompts=row[7],
        confidence_level=ConfidenceLevel(row[8]),
    )

    return {
        "id": row[0],
        "runId": row[1],
        "timestampUtc": row[2],
        "provider": row[4],
        "modelName": row[5],
        **result.to_dict(),
    }


def list_recent_analyses(conn: sqlite3.Connection, limit: int = 10) -> list[dict]:
    """
    List the most recent analyses, newest first.

    Each entry carries the three most-mentioned brands as a preview plus
    prompt and brand counts.

    Returns:
        List of dicts with keys: id, run_id, timestamp_utc, category,
        provider, model_name, confidence_level, prompt_count, brand_count,
        top_brands (list of {name, mentions, prompt_coverage})

    Raises:
        DatabaseQueryError: If a query fails
    """
    try:
        rows = conn.execute(
            """
            SELECT a.id, a.run_id, a.timestamp_utc, a.category, a.provider,
                   a.model_name, a.confidence_level,
                   (SELECT COUNT(*) FROM prompt_results p WHERE p.analysis_id = a.id),
                   (SELECT COUNT(*) FROM brand_results b WHERE b.analysis_id = a.id)
            FROM analyses a
            ORDER BY a.timestamp_utc DESC, a.id DESC
            LIMIT ?
            """,
            (limit,),
        ).fetchall()

        analyses = []
        for row in rows:
            top_brands = conn.execute(
                """
                SELECT name, mentions, prompt_coverage
                FROM brand_results
                WHERE analysis_id = ?
                ORDER BY mentions DESC, position ASC
                LIMIT ?
                """,
                (row[0], PREVIEW_BRAND_COUNT),
            ).fetchall()

            analyses.append(
                {
                    "id": row[0],
                    "run_id": row[1],
                    "timestamp_utc": row[2],
                    "category": row[3],
                    "provider": row[4],
                    "model_name": row[5],
                    "confidence_level": row[6],
                    "prompt_count": row[7],
                    "brand_count": row[8],
                    "top_brands": [
                        {"name": b[0], "mentions": b[1], "prompt_coverage": b[2]}
                        for b in top_brands
                    ],
                }
            )
    except sqlite3.Error as e:
        raise DatabaseQueryError(f"Failed to list analyses: {e}") from e

    return analyses


def delete_analysis(conn: sqlite3.Connection, analysis_id: int) -> bool:
    """
    Delete an analysis and its child rows.

    Child rows are deleted explicitly; SQLite leaves foreign keys (and so
    ON DELETE CASCADE) off unless each connection enables them.

    Returns:
        True if the analysis existed and was deleted, False otherwise

    Raises:
        DatabaseQueryError: If a delete fails
    """
    try:
        for table in ("brand_results", "prompt_results", "citations"):
            conn.execute(f"DELETE FROM {table} WHERE analysis_id = ?", (analysis_id,))
        cursor = conn.execute("DELETE FROM analyses WHERE id = ?", (analysis_id,))
    except sqlite3.Error as e:
        raise DatabaseQueryError(f"Failed to delete analysis {analysis_id}: {e}") from e

    deleted = cursor.rowcount > 0
    logger.debug(f"Delete analysis {analysis_id}: {'deleted' if deleted else 'not found'}")
    return deleted
