#!/usr/bin/env python
"""
Run the Roof Estimator API with uvicorn (auto-reload).

Usage:
    python scripts/run_api.py [port]
"""
import os
import subprocess
import sys
from pathlib import Path


def main():
    project_root = Path(__file__).parent.parent
    port = sys.argv[1] if len(sys.argv) > 1 else "8000"

    env = os.environ.copy()
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(project_root / 'src'), env.get("PYTHONPATH")]))

    print(f"Starting Roof Estimator API on port {port}...")
    if not env.get("GOOGLE_MAPS_API_KEY"):
        print("WARNING: GOOGLE_MAPS_API_KEY is not set; address lookup endpoints will return 500")

    try:
        subprocess.run([
            sys.executable, "-m", "uvicorn",
            "roof_estimator.api.main:app",
            "--host", "0.0.0.0",
            "--port", port,
            "--reload",
        ], cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
