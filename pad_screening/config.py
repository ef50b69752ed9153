# Default configurations for the two model variants.
# Costs are in USD per event (or per person-year where noted); probabilities are annual.

basic_config = {
    'variant': 'basic',
    'cohort_size': 100000,

    # Screening starts at 50; productive years run until retirement
    'base_age': 50,
    'retirement_age': 68,

    'horizons': (5, 10, 15),
    'perspectives': ('medicaid', 'societal'),

    # Annual probabilities. Applied in order death -> mace -> amputation -> revasc,
    # each to the pool left after the previous draws of the same year.
    'transition_probabilities': {
        'screen': {
            'death': 0.028,
            'mace': 0.025,
            'amputation': 0.012,
            'revasc': 0.035,
        },
        'no_screen': {
            'death': 0.040,
            'mace': 0.035,
            'amputation': 0.020,
            'revasc': 0.030,
        },
    },

    'costs': {
        'screening': 200.0,          # ABI test and visit, per cohort member
        'preventive_care': 0.0,      # per living person-year under screening
        'mace': 25000.0,
        'amputation': 45000.0,
        'revasc': 30000.0,
        'productivity_loss': 45000.0,  # per death per remaining productive year
        'welfare_cost': 12000.0,       # per death per remaining productive year
    },

    # Societal event costs add rehabilitation and informal care
    'perspective_costs': {
        'societal': {
            'mace': 32000.0,
            'amputation': 60000.0,
            'revasc': 34000.0,
        },
    },

    'utilities': {
        'healthy': 1.0,
        'revasc': 0.85,
        'mace': 0.75,
        'amputation': 0.60,
        'death': 0.0,
    },
}


staged_config = {
    'variant': 'staged',
    'cohort_size': 100000,
    'base_age': 50,
    'retirement_age': 68,
    'horizons': (5, 10, 15),
    'perspectives': ('medicaid', 'societal'),

    # Share of the screened cohort found with PAD and put on medication
    'pad_prevalence': 0.12,
    'willingness_to_pay': 100000.0,  # USD per QALY

    # Deaths: p_death is scaled by the simulated years and drawn once.
    # Remaining draws follow the chain no_pad_to_asx -> asx_to_sx -> sx_to_cli
    # -> cli_to_amp, then mace, then esrd.
    'transition_probabilities': {
        'screen': {
            'death': 0.020,
            'no_pad_to_asx': 0.010,
            'asx_to_sx': 0.030,
            'sx_to_cli': 0.008,
            'cli_to_amp': 0.003,
            'mace': 0.018,
            'esrd': 0.004,
        },
        'no_screen': {
            'death': 0.028,
            'no_pad_to_asx': 0.010,
            'asx_to_sx': 0.045,
            'sx_to_cli': 0.015,
            'cli_to_amp': 0.006,
            'mace': 0.026,
            'esrd': 0.006,
        },
    },

    'costs': {
        'screening': 150.0,
        'medication': 600.0,          # per treated person-year
        'no_pad_to_asx': 0.0,
        'asx_to_sx': 2500.0,
        'sx_to_cli': 20000.0,
        'cli_to_amp': 45000.0,
        'mace': 25000.0,
        'esrd': 90000.0,
        'productivity_loss': 45000.0,
        'welfare_cost': 12000.0,
        'productivity_gain': 1500.0,  # per surviving person-year
        'welfare_gain': 500.0,        # per surviving person-year
    },

    'perspective_costs': {
        'societal': {
            'sx_to_cli': 26000.0,
            'cli_to_amp': 60000.0,
            'mace': 32000.0,
            'esrd': 110000.0,
        },
    },

    'utilities': {
        'no_pad': 1.0,
        'asymptomatic': 0.95,
        'symptomatic': 0.80,
        'mace': 0.75,
        'cli': 0.60,
        'esrd': 0.55,
        'amputation': 0.50,
        'death': 0.0,
    },
}
