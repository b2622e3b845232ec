import logging
import math
from dataclasses import dataclass
from typing import Optional

from rattery.records import AnimalRecord
from .analysis import analyzer

logger = logging.getLogger(__name__)

# Each shared ancestor contributes paths_from_mother * paths_from_father / 2**4
PATH_CONTRIBUTION = 1 / 2 ** 4

FULL_SIBLINGS = "Full siblings"
HALF_SIBLINGS = "Half siblings"
PARENT_OFFSPRING = "Parent x offspring"
COUSINS_OR_CLOSER = "Cousins or closer"
DISTANT_RELATIONSHIP = "Distant relationship"
UNRELATED = "Unrelated"


@dataclass(frozen=True)
class BreedingSimulationResult:
    estimated_coi: int
    relationship_type: str
    warning: Optional[str] = None


def calculate_inbreeding_coefficient(record, records, generations=analyzer.DEFAULT_GENERATIONS):
    """
    Estimates the inbreeding coefficient (COI) of an animal from the ancestors
    its mother and father have in common, as an integer percentage in [0, 100].

    This is a simplified path model: every common ancestor adds
    (paths from mother * paths from father) / 16, regardless of path length.
    Animals with an unknown or unrecorded parent have a COI of 0.
    """
    if not record.mother_id or not record.father_id:
        return 0

    records_by_id = analyzer.index_records(records)
    mother, father = analyzer.get_parents(record, records_by_id)
    if mother is None or father is None:
        return 0

    mother_ancestors = analyzer.get_ancestors(mother, records_by_id, generations)
    father_ancestor_ids = {a.id for a in analyzer.get_ancestors(father, records_by_id, generations)}

    common_ancestors = [a for a in mother_ancestors if a.id in father_ancestor_ids]
    if not common_ancestors:
        return 0

    coi = 0.0
    for ancestor in common_ancestors:
        paths_from_mother = analyzer.count_paths_to_ancestor(mother, ancestor.id, records_by_id, generations)
        paths_from_father = analyzer.count_paths_to_ancestor(father, ancestor.id, records_by_id, generations)
        coi += paths_from_mother * paths_from_father * PATH_CONTRIBUTION
        logger.debug("Common ancestor %s: %d x %d paths", ancestor.id, paths_from_mother, paths_from_father)

    return min(math.floor(coi * 100 + 0.5), 100)


def classify_relationship(mother, father, coi):
    """
    Labels how two prospective parents are related and returns (label, warning).

    The sibling and parent/offspring labels come from comparing recorded ids,
    so they can disagree with the numeric COI; the COI thresholds are only
    consulted when no direct relationship is recorded.
    """
    if mother.mother_id and mother.father_id \
            and mother.mother_id == father.mother_id and mother.father_id == father.father_id:
        return FULL_SIBLINGS, "Full sibling mating - high risk of genetic problems!"

    if (mother.mother_id and mother.mother_id == father.mother_id) \
            or (mother.father_id and mother.father_id == father.father_id):
        return HALF_SIBLINGS, "Half sibling mating - moderate risk."

    if (mother.id and mother.id in (father.mother_id, father.father_id)) \
            or (father.id and father.id in (mother.mother_id, mother.father_id)):
        return PARENT_OFFSPRING, "Direct parent and offspring mating - very high risk!"

    if coi > 12.5:
        return COUSINS_OR_CLOSER, "Elevated COI detected - review the pedigree carefully."
    if coi > 6.25:
        return DISTANT_RELATIONSHIP, None
    return UNRELATED, None


def simulate_breeding(mother, father, records, generations=analyzer.DEFAULT_GENERATIONS):
    """
    Estimates the COI of a hypothetical offspring of mother and father and
    classifies their relationship. Nothing is stored; the offspring only
    exists for the duration of the call.
    """
    if not mother.id or not father.id:
        return BreedingSimulationResult(0, UNRELATED, None)

    # Parents missing from the collection end the walk like any other lookup miss
    records_by_id = analyzer.index_records(records)
    offspring = AnimalRecord(id="simulated-offspring", name="Simulation",
                             mother_id=mother.id, father_id=father.id)
    coi = calculate_inbreeding_coefficient(offspring, records_by_id, generations)
    relationship_type, warning = classify_relationship(mother, father, coi)

    logger.debug("Simulated %s x %s: COI %d%%, %s", mother.id, father.id, coi, relationship_type)
    return BreedingSimulationResult(coi, relationship_type, warning)
