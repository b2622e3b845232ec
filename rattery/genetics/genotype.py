import math
from collections import namedtuple
from itertools import product

Locus = namedtuple('Locus', ['first', 'second'])
AlleleCrossOutcome = namedtuple('AlleleCrossOutcome', ['pair', 'probability'])
GenotypeOutcome = namedtuple('GenotypeOutcome', ['genotype', 'phenotype', 'probability'])

UNKNOWN_ALLELE = "?"
NO_GENOTYPE = "Genotype not recorded"
NO_PREDICTION = "Cannot be calculated"


def round_half_up(value, digits=0):
    """Rounds .5 away from zero for positive values, unlike the built-in round()."""
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


# --- Parsing ---

def parse_genotype(genotype):
    """
    Splits a genotype string such as "aa Bb Dd" into loci.
    A single character is read as homozygous ("a" -> a/a), two characters as a
    pair, and anything longer keeps the first character as one allele and the
    rest as a compound allele ("Brb" -> B/rb).
    Returns an empty list when there is nothing to parse.
    """
    if not genotype or not genotype.strip():
        return []

    loci = []
    for gene in genotype.split():
        if len(gene) == 1:
            loci.append(Locus(gene, gene))
        elif len(gene) == 2:
            loci.append(Locus(gene[0], gene[1]))
        else:
            loci.append(Locus(gene[0], gene[1:]))
    return loci


# --- Crossing ---

def canonical_pair(allele1, allele2):
    # Code point order puts the uppercase (dominant) allele first
    return Locus(*sorted((allele1, allele2)))


def cross_alleles(parent1, parent2):
    """
    Crosses two loci as a Punnett square: each of the four gamete combinations
    has probability 0.25, combinations with the same canonical pair are merged.
    Outcomes keep the order in which they were first produced.
    """
    probabilities = {}
    for allele1 in parent1:
        for allele2 in parent2:
            pair = canonical_pair(allele1, allele2)
            probabilities[pair] = probabilities.get(pair, 0.0) + 0.25

    return [AlleleCrossOutcome(pair, probability) for pair, probability in probabilities.items()]


# --- Phenotype ---

def determine_phenotype(loci):
    """
    Derives the coat colour from the first three loci only: A (agouti),
    B (black/brown) and D (dense/dilute). Missing B and D loci count as
    dominant; loci after the third are ignored. Alleles are compared whole,
    so a compound allele such as "Dx" or "Am" does not count as dominant.
    """
    if not loci:
        return "Unknown"

    has_agouti = "A" in loci[0]
    has_black = "B" in (loci[1] if len(loci) > 1 else ("B", "B"))
    has_dense = "D" in (loci[2] if len(loci) > 2 else ("D", "D"))

    if has_agouti:
        if has_black and has_dense:
            return "Agouti"
        if has_black:
            return "Blue Agouti"
        if has_dense:
            return "Cinnamon"
        return "Fawn"

    if has_black and has_dense:
        return "Black"
    if has_black:
        return "Blue"
    if has_dense:
        return "Mink"
    return "Russian Blue"


# --- Simulation ---

def simulate_genotypes(mother_genotype, father_genotype):
    """
    Predicts the offspring genotypes of a mating, one outcome per distinct
    genotype, sorted from most to least likely. Probabilities are percentages
    with one decimal.

    When either parent has no recorded genotype a single placeholder outcome
    with probability 100 is returned instead.
    """
    mother_loci = parse_genotype(mother_genotype)
    father_loci = parse_genotype(father_genotype)

    if not mother_loci or not father_loci:
        return [GenotypeOutcome(NO_GENOTYPE, NO_PREDICTION, 100)]

    # Genotype strings of different length are padded with unknown loci
    max_loci = max(len(mother_loci), len(father_loci))
    padding = Locus(UNKNOWN_ALLELE, UNKNOWN_ALLELE)
    mother_loci += [padding] * (max_loci - len(mother_loci))
    father_loci += [padding] * (max_loci - len(father_loci))

    all_crosses = [cross_alleles(m, f) for m, f in zip(mother_loci, father_loci)]

    outcomes = {}
    for combination in product(*all_crosses):
        loci = [outcome.pair for outcome in combination]
        genotype = " ".join("".join(pair) for pair in loci)
        phenotype = determine_phenotype(loci)
        probability = math.prod(outcome.probability for outcome in combination)

        key = (genotype, phenotype)
        outcomes[key] = outcomes.get(key, 0.0) + probability

    results = [
        GenotypeOutcome(genotype, phenotype, round_half_up(probability * 100, 1))
        for (genotype, phenotype), probability in outcomes.items()
    ]
    return sorted(results, key=lambda outcome: outcome.probability, reverse=True)
