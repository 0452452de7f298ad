from __future__ import annotations

from dataclasses import dataclass, replace
from typing import List, Optional

from .inputs import SimulationSettings, UserInputs
from .reference_data import ReferenceData
from .simulator import StateResult, calculate_results


@dataclass
class WhatIfScenario:
    allocation_percent: Optional[float] = None
    home_size: Optional[str] = None
    savings_rate: Optional[float] = None
    strategy_mode: Optional[str] = None
    selected_states: Optional[List[str]] = None

    def apply(self, inputs: UserInputs) -> UserInputs:
        """Return a copy of the inputs with every set override applied."""
        overrides = {
            name: value
            for name, value in (
                ("allocation_percent", self.allocation_percent),
                ("home_size", self.home_size),
                ("savings_rate", self.savings_rate),
                ("strategy_mode", self.strategy_mode),
            )
            if value is not None
        }
        if self.selected_states is not None:
            overrides["selected_states"] = list(self.selected_states)
            overrides["location_certainty"] = "deciding"
        return replace(inputs, **overrides)


def run_what_if(
    inputs: UserInputs,
    scenario: WhatIfScenario,
    reference: Optional[ReferenceData] = None,
    settings: Optional[SimulationSettings] = None,
) -> List[StateResult]:
    """Re-run the calculation after parameter edits without touching the original inputs."""
    return calculate_results(scenario.apply(inputs), reference=reference, settings=settings)
