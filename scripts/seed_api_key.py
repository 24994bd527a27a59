"""Seed script to insert an API key for local development/testing.

Usage:
  python scripts/seed_api_key.py
  python scripts/seed_api_key.py --key my-secret-key
  python scripts/seed_api_key.py --reset
  python scripts/seed_api_key.py --key ops-key --admin
"""

import sys
from pathlib import Path

project_root = Path(__file__).resolve().parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import argparse
from sqlmodel import Session, select
from sqlalchemy import delete

from config.settings import settings
from models.api_key import APIKey
from models.employer import Employer
from repositories.api_key_repository import APIKeyRepository, hash_api_key
from utils.database import get_engine

DEFAULT_RAW_KEY = "local-dev-key"
DEFAULT_NAME = "local-dev"
DEFAULT_EMPLOYER = "Acme Corp"


def seed_api_key(
    raw_key: str = DEFAULT_RAW_KEY,
    employer_name: str = DEFAULT_EMPLOYER,
    reset: bool = False,
    admin: bool = False,
) -> bool:
    if not settings.DATABASE_URL:
        print("ERROR: DATABASE_URL not set in environment/.env", file=sys.stderr)
        return False

    key_hash = hash_api_key(raw_key)

    try:
        with Session(get_engine()) as db:
            print("Creating/verifying employer...")
            employer = db.exec(
                select(Employer).where(Employer.name == employer_name)
            ).first()

            if not employer:
                employer = Employer(name=employer_name)
                db.add(employer)
                db.commit()
                db.refresh(employer)
                print(f"✅ Created employer '{employer_name}' (id={employer.id})")
            else:
                print(f"✅ Employer '{employer_name}' exists (id={employer.id})")

            if reset:
                res = db.exec(delete(APIKey).where(APIKey.key_hash == key_hash))
                deleted = res.rowcount or 0
                db.commit()
                print(f"Reset: removed {deleted} existing key(s)")

            existing = db.exec(
                select(APIKey).where(APIKey.key_hash == key_hash)
            ).first()

            if existing:
                print(f"API key already exists (name={existing.name}, employer_id={existing.employer_id})")
                return True

            record, _ = APIKeyRepository(db).issue(DEFAULT_NAME, employer.id, raw_key=raw_key, is_admin=admin)

            print("API key seeded successfully:")
            print(f"  Raw key:     {raw_key}")
            print(f"  Hash:        {key_hash[:16]}...")
            print(f"  Name:        {record.name}")
            print(f"  Employer ID: {employer.id}")
            print(f"  Employer:    {employer_name}")
            print(f"  Admin:       {record.is_admin}")
            return True

    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return False


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed an API key for local dev/testing")
    parser.add_argument("--key", default=DEFAULT_RAW_KEY, help=f"Raw API key value (default: {DEFAULT_RAW_KEY})")
    parser.add_argument("--employer", default=DEFAULT_EMPLOYER, help="Employer name the key belongs to")
    parser.add_argument("--reset", action="store_true", help="Remove existing key before inserting")
    parser.add_argument("--admin", action="store_true", help="Allow the key to activate and deactivate automation rules")
    args = parser.parse_args()

    ok = seed_api_key(raw_key=args.key, employer_name=args.employer, reset=args.reset, admin=args.admin)
    sys.exit(0 if ok else 1)
