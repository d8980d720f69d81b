#!/usr/bin/env python
"""
Run the booking API under uvicorn with auto-reload.

Usage:
    python scripts/run_api.py
    PORT=9000 python scripts/run_api.py
"""
import os
import subprocess
import sys
from pathlib import Path


APP = "car_booking.api.main:app"


def main():
    project_root = Path(__file__).parent.parent

    env = os.environ.copy()
    src_path = str(project_root / 'src')
    env['PYTHONPATH'] = os.pathsep.join(p for p in (src_path, env.get('PYTHONPATH')) if p)

    cmd = [
        sys.executable, '-m', 'uvicorn', APP,
        '--host', env.get('HOST', '0.0.0.0'),
        '--port', env.get('PORT', '8000'),
        '--reload', '--reload-dir', src_path,
    ]
    print(f"Starting API: {' '.join(cmd)}")

    try:
        subprocess.run(cmd, cwd=str(project_root), env=env)
    except KeyboardInterrupt:
        print("\nAPI stopped.")


if __name__ == "__main__":
    main()
