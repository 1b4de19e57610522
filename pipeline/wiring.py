"""pipeline.wiring

Composition root: the single place where the running application is
assembled.

- load ``.env`` into the environment
- read settings
- configure logging
- build the :class:`~pipeline.pipeline.DimensionsPipeline` facade
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv as _load_dotenv

from pipeline.config import Settings
from pipeline.core import ROOT_DIR
from pipeline.pipeline import DimensionsPipeline

ENV_PATH: Path = ROOT_DIR / ".env"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "WARNING") -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.WARNING),
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def load_settings(*, load_dotenv: bool = True, dotenv_path: Optional[Path] = None, **overrides: Any) -> Settings:
    if load_dotenv:
        # Exported variables win over .env entries.
        _load_dotenv(dotenv_path or ENV_PATH, override=False)
    return Settings.from_env().with_overrides(**overrides)


def build_pipeline(
    settings: Optional[Settings] = None,
    *,
    load_dotenv: bool = True,
) -> DimensionsPipeline:
    """Build the high-level pipeline facade."""

    if settings is None:
        settings = load_settings(load_dotenv=load_dotenv)

    configure_logging(settings.log_level)
    return DimensionsPipeline(settings)
