# Model variants: the same simulator/aggregator pair, configured two ways

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

STRATEGIES: Tuple[str, str] = ('screen', 'no_screen')
SCREEN = 'screen'
NO_SCREEN = 'no_screen'

PERSPECTIVES: Tuple[str, str] = ('medicaid', 'societal')
SOCIETAL = 'societal'

DEATH = 'death'

DEATH_MODE_ANNUAL = 'annual'
DEATH_MODE_HORIZON_SCALED = 'horizon_scaled'


@dataclass(frozen=True)
class ModelVariant:
    """
    Describes which events a cohort experiences and how they are costed.

    `event_sequence` is the fixed draw order applied after deaths within each
    simulated year; changing it changes results.
    """
    name: str
    event_sequence: Tuple[str, ...]
    event_states: Tuple[Tuple[str, str], ...]
    severity_order: Tuple[str, ...]
    baseline_state: str
    death_mode: str = DEATH_MODE_ANNUAL
    reporting_base: float = 1.0
    preventive_care: bool = False
    medication: bool = False
    monetize_qaly: bool = False

    @property
    def event_kinds(self) -> Tuple[str, ...]:
        """Every counted kind, death first, in draw order."""
        return (DEATH,) + self.event_sequence

    def state_for_event(self, event_kind: str) -> str:
        return dict(self.event_states)[event_kind]

    def required_costs(self, perspectives: Tuple[str, ...]) -> Tuple[str, ...]:
        required = ['screening', *self.event_sequence]
        if self.medication:
            required.append('medication')
        if SOCIETAL in perspectives:
            required.extend(['productivity_loss', 'welfare_cost'])
            if self.monetize_qaly:
                required.extend(['productivity_gain', 'welfare_gain'])
        return tuple(required)


# Simple four-event model: deaths, then MACE, amputation and revascularisation.
BASIC_VARIANT = ModelVariant(
    name='basic',
    event_sequence=('mace', 'amputation', 'revasc'),
    event_states=(
        ('mace', 'mace'),
        ('amputation', 'amputation'),
        ('revasc', 'revasc'),
    ),
    severity_order=('healthy', 'revasc', 'mace', 'amputation', DEATH),
    baseline_state='healthy',
    death_mode=DEATH_MODE_ANNUAL,
    reporting_base=1000.0,
    preventive_care=True,
)

# Staged PAD progression chain plus MACE and ESRD. Deaths use the crude
# Binomial(n, p_death * years) approximation, drawn once.
STAGED_VARIANT = ModelVariant(
    name='staged',
    event_sequence=('no_pad_to_asx', 'asx_to_sx', 'sx_to_cli', 'cli_to_amp', 'mace', 'esrd'),
    event_states=(
        ('no_pad_to_asx', 'asymptomatic'),
        ('asx_to_sx', 'symptomatic'),
        ('sx_to_cli', 'cli'),
        ('cli_to_amp', 'amputation'),
        ('mace', 'mace'),
        ('esrd', 'esrd'),
    ),
    severity_order=('no_pad', 'asymptomatic', 'symptomatic', 'mace', 'cli', 'esrd', 'amputation', DEATH),
    baseline_state='no_pad',
    death_mode=DEATH_MODE_HORIZON_SCALED,
    reporting_base=1.0,
    medication=True,
    monetize_qaly=True,
)

VARIANTS: Dict[str, ModelVariant] = {
    BASIC_VARIANT.name: BASIC_VARIANT,
    STAGED_VARIANT.name: STAGED_VARIANT,
}


def get_variant(name: str) -> Optional[ModelVariant]:
    return VARIANTS.get(str(name).strip().lower())
