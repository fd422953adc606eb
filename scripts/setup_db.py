#!/usr/bin/env python3
"""
Database setup script
Creates the Tienda Manager tables from database/tienda_manager.sql
"""

import argparse
import logging
import re
import sys
from decimal import Decimal
from pathlib import Path
from typing import List

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError

logger = logging.getLogger("setup_db")

DEFAULT_SQL_PATH = Path(__file__).resolve().parent.parent / "database" / "tienda_manager.sql"

DEMO_USERS = [
    ("Administrador", "admin@tienda.com", "admin123", "admin"),
    ("Vendedor", "vendedor@tienda.com", "vendedor123", "vendedor"),
]

DEMO_PRODUCTS = [
    ("BEB-001", "Agua mineral 600ml", Decimal("12.50"), 48),
    ("BEB-002", "Refresco de cola 600ml", Decimal("18.00"), 36),
    ("SNK-001", "Papas fritas 45g", Decimal("17.00"), 30),
    ("ABR-001", "Arroz 1kg", Decimal("32.90"), 20),
    ("LIM-001", "Jabón de tocador", Decimal("14.00"), 0),
]

_DELIMITER_BLOCK = re.compile(r"DELIMITER \$\$[\s\S]*?DELIMITER ;")
_ALREADY_EXISTS = re.compile(r"already exists|duplicate", re.IGNORECASE)

def parse_sql_script(content: str) -> List[str]:
    """
    Split a SQL dump into executable statements.

    Procedure/trigger blocks wrapped in `DELIMITER $$ ... DELIMITER ;` are
    removed, as are full-line `--` and `/*` comments.
    """
    content = _DELIMITER_BLOCK.sub("", content)
    content = content.replace("DELIMITER ;", "")

    lines = [
        line for line in content.split("\n")
        if not line.strip().startswith("--") and not line.strip().startswith("/*")
    ]
    clean_content = "\n".join(lines)

    return [q.strip() for q in clean_content.split(";") if q.strip()]

def run_statements(engine: Engine, statements: List[str]) -> dict:
    """Execute each statement in its own transaction; skip objects that already exist"""
    summary = {"executed": 0, "skipped": 0, "failed": 0}

    for statement in statements:
        try:
            with engine.begin() as conn:
                conn.exec_driver_sql(statement)
            summary["executed"] += 1
        except DBAPIError as e:
            message = str(e.orig) if e.orig is not None else str(e)
            if _ALREADY_EXISTS.search(message):
                logger.info("Object exists, skipping.")
                summary["skipped"] += 1
            else:
                logger.warning(f"Query failed: {message[:100]}")
                summary["failed"] += 1

    return summary

def seed_demo_data(engine: Engine) -> dict:
    """Create demo users and sample products when missing"""
    from sqlalchemy.orm import sessionmaker

    from app.config.database import init_db
    from app.core.auth.security import hash_password
    from app.shared.database.models import Producto, Usuario

    init_db(engine)
    session = sessionmaker(bind=engine)()
    created = {"users": 0, "products": 0}
    try:
        for nombre, email, password, rol in DEMO_USERS:
            if session.query(Usuario).filter(Usuario.email == email).first():
                continue
            session.add(Usuario(
                nombre=nombre,
                email=email,
                password_hash=hash_password(password),
                rol=rol,
                avatar=nombre[:1],
                is_active=True
            ))
            created["users"] += 1

        for codigo, nombre, precio, stock in DEMO_PRODUCTS:
            if session.query(Producto).filter(Producto.codigo == codigo).first():
                continue
            session.add(Producto(codigo=codigo, nombre=nombre, precio=precio, stock=stock, is_active=True))
            created["products"] += 1

        session.commit()
    finally:
        session.close()

    return created

def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create the Tienda Manager database schema")
    parser.add_argument("--sql", type=Path, default=DEFAULT_SQL_PATH, help="SQL file to execute")
    parser.add_argument("--database-url", help="Database URL (defaults to DATABASE_URL setting)")
    parser.add_argument("--with-demo-data", action="store_true", help="Seed demo users and products")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    database_url = args.database_url
    if not database_url:
        from app.config.settings import settings
        database_url = settings.database_url

    engine = create_engine(database_url)
    try:
        logger.info(f"Reading SQL file {args.sql}...")
        statements = parse_sql_script(args.sql.read_text(encoding="utf-8"))
        logger.info(f"Found {len(statements)} queries to execute.")

        summary = run_statements(engine, statements)
        logger.info(
            f"Executed: {summary['executed']} - Skipped: {summary['skipped']} - Failed: {summary['failed']}"
        )

        if args.with_demo_data:
            created = seed_demo_data(engine)
            logger.info(f"Demo data: {created['users']} users, {created['products']} products created.")

        logger.info("Database setup complete.")
        return 0
    except Exception:
        logger.exception("Setup failed")
        return 1
    finally:
        engine.dispose()

if __name__ == "__main__":
    sys.exit(main())
