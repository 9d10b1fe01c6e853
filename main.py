"""Encounter Builder — dev launcher and import CLI.

    python main.py                          Start the API in watch mode
    python main.py --import adversaries     Import the adversary library and exit
"""

import argparse
import asyncio
import logging
import os
import signal
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT = Path(__file__).parent
load_dotenv(ROOT / ".env")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = os.getenv("PORT", "13013")


def run_import(kind: str) -> int:
    from backend.routes.imports import run_import as _run_import
    from encounter_builder.importer import ImportFetchError

    try:
        result = asyncio.run(_run_import(kind))
    except ImportFetchError as e:
        print(f"Import failed: {e}", file=sys.stderr)
        return 1
    print(f"Imported {result.processed}/{result.attempted} {kind} ({result.stored} stored)")
    for name in result.skipped:
        print(f"  skipped (unparseable): {name}")
    for name, error in result.failures.items():
        print(f"  failed: {name}: {error}")
    return 0


def main():
    parser = argparse.ArgumentParser(description="Encounter Builder dev launcher")
    parser.add_argument("--data-dir", type=Path, default=None,
                        help="Data storage directory (default: ./data)")
    parser.add_argument("--import", dest="import_kind",
                        choices=["adversaries", "environments"],
                        help="Import a template library from the content repository and exit")
    args = parser.parse_args()

    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.import_kind:
        from backend import storage
        storage.init_storage(args.data_dir or Path(os.getenv("DATA_DIR", "data")))
        sys.exit(run_import(args.import_kind))

    # Build env for the subprocess so the backend picks up the same data dir
    env = os.environ.copy()
    if args.data_dir:
        env["DATA_DIR"] = str(args.data_dir.resolve())

    print(f"Starting backend on http://localhost:{PORT} ...")
    proc = subprocess.Popen(
        ["uv", "run", "uvicorn", "backend.app:app", "--reload", "--host", HOST, "--port", PORT],
        cwd=ROOT, env=env,
    )

    def shutdown(*_):
        print("\nShutting down...")
        proc.terminate()
        proc.wait()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)
    proc.wait()


if __name__ == "__main__":
    main()
