from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path

import structlog
from fastapi import FastAPI

from plan_advisor.addons import AddOnConfig, catalog_from_config
from plan_advisor.comparison import ScoringConfig, SimulationConfig
from plan_advisor.config import load_config, section

from .config import CONFIG_PATH
from ..services.addon_service import AddOnService
from ..services.comparison_service import ComparisonService

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    cfg_path = Path(CONFIG_PATH)
    if cfg_path.exists():
        cfg = load_config(cfg_path)
        logger.info("config_loaded", path=str(cfg_path))
    else:
        cfg = {}
        logger.warning("config_missing_using_defaults", path=str(cfg_path))

    addons_cfg = section(cfg, "addons")
    app.state.cfg = cfg
    app.state.comparison_service = ComparisonService(
        simulation=SimulationConfig.from_mapping(section(cfg, "simulation")),
        scoring=ScoringConfig.from_mapping(section(cfg, "scoring")),
    )
    app.state.addon_service = AddOnService(
        catalog=catalog_from_config(addons_cfg),
        config=AddOnConfig.from_mapping(addons_cfg),
    )

    yield

    logger.info("shutdown")
