from pathlib import Path


# Repository root (bus_reservation/platform/constant/path.py -> ../../..)
BASE_DIR = Path(__file__).resolve().parents[3]

LOG_DIR = BASE_DIR / 'logs'
