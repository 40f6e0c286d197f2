"""Check the Alembic migrations against the configured database.

Upgrades to head, then verifies the revision, the portal tables and the
(user_id, job_id) unique constraints, and finally runs Alembic's drift check.

Requires: DATABASE_URL configured.
Usage: python scripts/check_migrations.py
"""

import sys
from pathlib import Path

# Add project root to path
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from dotenv import load_dotenv

load_dotenv()

from alembic import command
from alembic.config import Config
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import inspect

from jobportal.db.base import get_engine

EXPECTED_HEAD = "3f9a2b71c0de"
EXPECTED_TABLES = {"users", "profiles", "experiences", "education", "jobs", "applications", "saved_jobs"}
EXPECTED_UNIQUES = {
    "applications": "uq_applications_user_job",
    "saved_jobs": "uq_saved_jobs_user_job",
}


def check_revision(alembic_cfg: Config) -> list[str]:
    problems = []
    heads = ScriptDirectory.from_config(alembic_cfg).get_heads()
    if heads != [EXPECTED_HEAD]:
        problems.append(f"script heads are {heads}, expected [{EXPECTED_HEAD}]")

    with get_engine().connect() as conn:
        current = MigrationContext.configure(conn).get_current_revision()
    if current != EXPECTED_HEAD:
        problems.append(f"database is at {current}, expected {EXPECTED_HEAD}")
    return problems


def check_tables() -> list[str]:
    problems = []
    inspector = inspect(get_engine())
    missing = EXPECTED_TABLES - set(inspector.get_table_names())
    if missing:
        problems.append(f"missing tables: {', '.join(sorted(missing))}")

    for table, constraint in EXPECTED_UNIQUES.items():
        if table in missing:
            continue
        names = {u["name"] for u in inspector.get_unique_constraints(table)}
        if constraint not in names:
            problems.append(f"{table} is missing unique constraint {constraint}")
    return problems


def main() -> int:
    alembic_cfg = Config(str(ROOT / "alembic.ini"))

    print("=== Running upgrade head ===")
    command.upgrade(alembic_cfg, "head")

    print("\n=== Checking revision and tables ===")
    problems = check_revision(alembic_cfg) + check_tables()
    for problem in problems:
        print(f"[FAIL] {problem}")
    if problems:
        return 1
    print(f"[OK] At {EXPECTED_HEAD} with {len(EXPECTED_TABLES)} tables")

    # Fails if the tables module and the migrations have drifted apart
    print("\n=== Checking for schema drift ===")
    command.check(alembic_cfg)
    print("[OK] No schema drift detected")
    return 0


if __name__ == "__main__":
    sys.exit(main())
