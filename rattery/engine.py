"""
Public entry points of the genetics engine. All functions are pure: the
caller passes the full record collection on every call and nothing is cached.
"""
from .genetics.genotype import simulate_genotypes, GenotypeOutcome
from .genetics.traits import simulate_full_genetics, get_trait_summary, FullGeneticOutcome, TraitOutcome
from .pedigree.calculator import (
    simulate_breeding,
    calculate_inbreeding_coefficient,
    classify_relationship,
    BreedingSimulationResult,
)

__all__ = [
    'simulate_breeding',
    'simulate_genotypes',
    'simulate_full_genetics',
    'get_trait_summary',
    'calculate_inbreeding_coefficient',
    'classify_relationship',
    'BreedingSimulationResult',
    'GenotypeOutcome',
    'FullGeneticOutcome',
    'TraitOutcome',
]
