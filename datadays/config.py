# datadays/config.py
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

OUTPUT_DIR = Path(os.getenv("DATADAYS_OUTPUT_DIR", "outputs"))
PLOTS_DIR = OUTPUT_DIR / "plots"
DATA_DIR = Path(os.getenv("DATADAYS_DATA_DIR", "data"))

ZSCORE_THRESHOLD = float(os.getenv("DATADAYS_ZSCORE_THRESHOLD", "3.0"))
IMPUTATIONS = int(os.getenv("DATADAYS_IMPUTATIONS", "5"))
LOG_LEVEL = os.getenv("DATADAYS_LOG_LEVEL", "INFO").upper()
PORT = int(os.getenv("PORT", "8000"))

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
