#!/usr/bin/env python3
"""
Password reset script
Sets a new password for an existing Tienda Manager user
"""

import argparse
import logging
import sys

from sqlalchemy.orm import Session

from app.core.auth.security import hash_password
from app.shared.database.models import Usuario

logger = logging.getLogger("reset_password")

DEFAULT_EMAIL = "admin@tienda.com"
DEFAULT_PASSWORD = "password123"

def reset_password(db: Session, email: str, new_password: str) -> int:
    """Update the password hash for `email`; returns the number of changed rows"""
    changed = db.query(Usuario).filter(
        Usuario.email == email.strip().lower()
    ).update(
        {Usuario.password_hash: hash_password(new_password)},
        synchronize_session=False
    )
    db.commit()
    return changed

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Reset a user's password")
    parser.add_argument("--email", default=DEFAULT_EMAIL)
    parser.add_argument("--password", default=DEFAULT_PASSWORD)
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    from app.config.database import SessionLocal

    db = SessionLocal()
    try:
        logger.info(f"Updating password for {args.email}...")
        changed = reset_password(db, args.email, args.password)
        logger.info(f"Updated {changed} rows.")
        return 0 if changed else 1
    except Exception:
        db.rollback()
        logger.exception("Update failed")
        return 1
    finally:
        db.close()

if __name__ == "__main__":
    sys.exit(main())
