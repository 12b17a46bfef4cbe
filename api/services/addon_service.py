from __future__ import annotations

from dataclasses import asdict
from typing import Any, Dict, List, Mapping, Optional, Sequence

import structlog

from plan_advisor.addons import (
    AddOnConfig,
    AddOnInsurance,
    load_catalog,
    preferences_from_mapping,
    risk_factors_from_mapping,
    score_add_ons,
)

logger = structlog.get_logger()


class AddOnService:
    def __init__(self, catalog: Sequence[AddOnInsurance], config: AddOnConfig):
        self.catalog = list(catalog)
        self.config = config

    def analyze(
        self,
        ages: Sequence[int],
        preferences: Optional[Mapping[str, Any]] = None,
        risk_factors: Optional[Mapping[str, Any]] = None,
        state_adjustment_factor: float = 1.0,
        catalog: Optional[Sequence[Mapping[str, Any]]] = None,
    ) -> Dict:
        products = load_catalog(catalog) if catalog is not None else self.catalog
        analysis = score_add_ons(
            products,
            ages,
            preferences_from_mapping(preferences),
            risk_factors_from_mapping(risk_factors),
            state_adjustment_factor,
            self.config,
        )
        logger.info(
            "addon_analysis",
            members=len(ages),
            custom_catalog=catalog is not None,
            recommended=len(analysis.recommendations),
        )
        return asdict(analysis)

    def list_catalog(self) -> List[Dict]:
        return [asdict(product) for product in self.catalog]
