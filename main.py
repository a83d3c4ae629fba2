"""Day One Adventure — dev launcher. Starts the API server in watch mode."""

import argparse
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


def main():
    parser = argparse.ArgumentParser(description="Day One Adventure dev launcher")
    parser.add_argument("--host", default=HOST, help=f"Bind address (default: {HOST})")
    parser.add_argument("--port", default=PORT, help=f"Port (default: {PORT})")
    parser.add_argument("--dialect", choices=["marker", "structured"], default=None,
                        help="Reply dialect requested from the narrator (overrides REPLY_DIALECT)")
    parser.add_argument("--no-reload", action="store_true",
                        help="Run without watching for code changes")
    args = parser.parse_args()

    # Build env for the subprocess so the app picks up the same settings
    env = os.environ.copy()
    if args.dialect:
        env["REPLY_DIALECT"] = args.dialect

    cmd = ["uv", "run", "uvicorn", "adventure.app:app", "--host", args.host, "--port", str(args.port)]
    if not args.no_reload:
        cmd.append("--reload")

    procs: list[subprocess.Popen] = []

    def shutdown(*_):
        print("\nShutting down...")
        for p in procs:
            p.terminate()
        for p in procs:
            p.wait()
        sys.exit(0)

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    print(f"Starting server on http://localhost:{args.port} ...")
    procs.append(subprocess.Popen(cmd, cwd=ROOT, env=env))

    for p in procs:
        p.wait()


if __name__ == "__main__":
    main()
