"""
Script to apply Alembic migrations
Run from project root: python apply_migrations.py [revision]
"""
import os
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent
BACKEND_DIR = PROJECT_ROOT / "backend"

# alembic.ini and script_location are relative to backend/
os.chdir(BACKEND_DIR)
sys.path.insert(0, str(BACKEND_DIR))

from alembic import command
from alembic.config import Config


def main(revision: str = "head") -> int:
    alembic_cfg = Config("alembic.ini")
    print(f"Applying Alembic migrations up to {revision}...")
    try:
        command.upgrade(alembic_cfg, revision)
    except Exception as e:
        print(f"Error applying migrations: {e}")
        return 1
    print("Migrations applied successfully")
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1] if len(sys.argv) > 1 else "head"))
