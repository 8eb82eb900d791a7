"""Initialize the Homeschool Hub database.

This script:
1. Verifies connectivity to PostgreSQL
2. Runs all Alembic migrations
3. Seeds the default subject catalog

Run this after the database container is up to prepare the development environment.
"""

import asyncio
import subprocess
import sys
from pathlib import Path

# Add the backend directory to the path
sys.path.insert(0, str(Path(__file__).parent.parent))


def print_header(title: str) -> None:
    """Print a formatted header."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def print_success(message: str) -> None:
    print(f"[ok] {message}")


def print_error(message: str) -> None:
    print(f"[error] {message}")


def print_info(message: str) -> None:
    print(f"[info] {message}")


async def check_postgres() -> None:
    """Check PostgreSQL connectivity."""
    print_header("Checking PostgreSQL Connection")

    from sqlalchemy import text

    from app.core.database import async_engine

    try:
        async with async_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
            print_success("PostgreSQL connection successful")

            result = await conn.execute(text("SELECT current_database()"))
            db_name = result.scalar()
            if db_name:
                print_info(f"Database: {db_name}")
    except Exception as e:
        print_error(f"PostgreSQL connection failed: {e}")
        print_info("Ensure PostgreSQL is running and DATABASE_URL is set")
        raise


def run_migrations() -> None:
    """Run Alembic migrations to upgrade database schema."""
    print_header("Running Database Migrations")

    result = subprocess.run(
        ["alembic", "upgrade", "head"],
        cwd=Path(__file__).parent.parent,
        capture_output=True,
        text=True,
    )

    if result.returncode != 0:
        print_error("Database migrations failed")
        if result.stderr:
            print(result.stderr)
        raise RuntimeError("Migration failed")

    print_success("Database migrations completed successfully")
    for line in result.stdout.splitlines():
        if line.strip():
            print(f"   {line}")


async def seed_subjects() -> None:
    """Insert the default subject catalog."""
    print_header("Seeding Subjects")

    from app.core.database import async_session_maker
    from app.services.learning import seed_default_subjects

    async with async_session_maker() as session:
        added = await seed_default_subjects(session)

    if added:
        print_success(f"Added {added} subjects")
    else:
        print_info("Subject catalog already complete")


async def main() -> None:
    """Run all initialization steps."""
    try:
        await check_postgres()
        run_migrations()
        await seed_subjects()

        print_header("Initialization Complete")
        print("Start the backend server:")
        print("   uvicorn main:app --reload --port 8000")
    except Exception as e:
        print(f"\nInitialization failed: {e}")
        sys.exit(1)
    finally:
        from app.core.database import close_db

        await close_db()


if __name__ == "__main__":
    asyncio.run(main())
