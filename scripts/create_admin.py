"""
Create or promote the platform administrator.

Typical usage (from this repo root):
    python scripts/create_admin.py --email mairie@example.org --name "Mairie"

Falls back to ADMIN_EMAIL / ADMIN_NAME from the environment.
"""

from __future__ import annotations

import sys
from pathlib import Path

# Allow running the script from any working directory by ensuring the repo
# root (which contains the `app/` package) is on sys.path.
_REPO_ROOT = str(Path(__file__).resolve().parents[1])
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

import argparse

from app.config import settings
from app.db import SessionLocal
from app.logging import configure_logging
from app.services.settings_seed import seed_admin


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--email", default=settings.admin_email)
    parser.add_argument("--name", default=settings.admin_name)
    args = parser.parse_args(argv)

    if not args.email:
        parser.error("--email is required when ADMIN_EMAIL is not set")

    configure_logging()
    with SessionLocal() as db:
        person = seed_admin(db, args.email, args.name)
        db.commit()
        print(f"Admin ready: {person.email} ({person.id})")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
