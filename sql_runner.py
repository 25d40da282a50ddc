"""
Apply a SQL script statement by statement through the ``exec_sql`` RPC.

Used for one-shot maintenance such as patching row level security policies.
Runs with the service-role key; a failing statement is logged and the run
moves on to the next one.

    python sql_runner.py fix_rls_policies.sql
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from dotenv import load_dotenv

from identity import get_supabase_admin
from settings import Settings

logger = logging.getLogger(__name__)

EXEC_SQL_FUNCTION = "exec_sql"


def split_statements(script: str) -> List[str]:
    """Split a script on ``;`` after dropping full-line ``--`` comments."""

    lines = [line for line in script.splitlines() if not line.strip().startswith("--")]
    statements = (chunk.strip() for chunk in "\n".join(lines).split(";"))
    return [statement for statement in statements if statement]


def apply_statements(client, statements: Sequence[str]) -> Tuple[int, int]:
    """Execute each statement; return ``(applied, failed)`` counts."""

    applied = failed = 0
    for statement in statements:
        logger.info("Executing: %s...", statement[:60])
        try:
            client.rpc(EXEC_SQL_FUNCTION, {"sql_statement": statement}).execute()
        except Exception:  # noqa: BLE001 - keep going with the remaining statements
            logger.exception("Statement failed")
            failed += 1
        else:
            applied += 1
    return applied, failed


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("script", type=Path, help="SQL file to apply")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    load_dotenv()
    statements = split_statements(args.script.read_text(encoding="utf-8"))
    logger.info("Applying %d statements from %s", len(statements), args.script)

    client = get_supabase_admin(Settings.from_env())
    applied, failed = apply_statements(client, statements)
    logger.info("Finished: %d applied, %d failed", applied, failed)
    return 1 if failed else 0


if __name__ == "__main__":
    sys.exit(main())
