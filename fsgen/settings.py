"""
Process-wide settings read from the environment (and an optional .env file).

  FSGEN_LOG_LEVEL     logging level for the CLI             (INFO)
  FSGEN_UNIT          default unit of measurement           (full-number)
  FSGEN_DECIMALS      default decimal places                (0)
  FSGEN_NUMBER_STYLE  indian | international | none | custom (indian)
  FSGEN_FIRM_NAME     preparer name printed on exports      ("")

A company's own formatting settings take precedence for display.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from fsgen.model.company import NUMBER_STYLES, UNITS_OF_MEASUREMENT

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent


@dataclass(frozen=True)
class Settings:
    log_level: str = "INFO"
    unit_of_measurement: str = "full-number"
    decimal_points: int = 0
    number_style: str = "indian"
    firm_name: str = ""


def load_settings(env_file=None) -> Settings:
    load_dotenv(env_file or BASE_DIR / ".env")

    unit = os.getenv("FSGEN_UNIT", "full-number")
    if unit not in UNITS_OF_MEASUREMENT:
        logger.warning("FSGEN_UNIT=%r is not a known unit, using full-number", unit)
        unit = "full-number"

    style = os.getenv("FSGEN_NUMBER_STYLE", "indian")
    if style not in NUMBER_STYLES:
        logger.warning("FSGEN_NUMBER_STYLE=%r is not a known style, using indian", style)
        style = "indian"

    try:
        decimals = max(0, int(os.getenv("FSGEN_DECIMALS", "0")))
    except ValueError:
        logger.warning("FSGEN_DECIMALS must be an integer, using 0")
        decimals = 0

    return Settings(
        log_level=os.getenv("FSGEN_LOG_LEVEL", "INFO").upper(),
        unit_of_measurement=unit,
        decimal_points=decimals,
        number_style=style,
        firm_name=os.getenv("FSGEN_FIRM_NAME", ""),
    )
