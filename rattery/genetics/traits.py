"""
Inheritance of the declared, discrete traits: ear type, eye colour, coat type
and marking. Each trait is reduced to a single illustrative locus through a
fixed table, crossed like any other locus and mapped back to a label.
"""
from collections import namedtuple
from itertools import product

from rattery.records import CoatType, EarType, EyeColor, Marking
from .genotype import Locus, cross_alleles, round_half_up

TraitOutcome = namedtuple('TraitOutcome', ['phenotype', 'probability'])

FullGeneticOutcome = namedtuple('FullGeneticOutcome', [
    'coat_color', 'coat_color_probability',
    'coat_type', 'coat_type_probability',
    'marking', 'marking_probability',
    'eye_color', 'eye_color_probability',
    'ear_type', 'ear_type_probability',
    'probability',
])

MIN_COMBINED_PROBABILITY = 0.01
MAX_COMBINED_OUTCOMES = 20


class TraitModel:
    """
    One trait: the enumeration it is declared with, the allele code for every
    member, the code used for unrecognised values, and an ordered list of
    (predicate, label) rules that turn a crossed pair back into a label.
    """

    def __init__(self, attribute, enum, codes, default_code, rules, fallback):
        missing = [member.value for member in enum if member not in codes]
        if missing:
            raise RuntimeError(f"No allele code for {enum.__name__} values: {missing}")
        self.attribute = attribute
        self.enum = enum
        self.codes = codes
        self.default_code = default_code
        self.rules = rules
        self.fallback = fallback

    def code_for(self, value):
        try:
            return self.codes[self.enum(value)]
        except ValueError:
            return self.default_code

    def locus_for(self, value):
        code = self.code_for(value)
        return Locus(code[0], code[1] if len(code) > 1 else code[0])

    def phenotype_for(self, pair):
        alleles = "".join(pair)
        for predicate, label in self.rules:
            if predicate(alleles):
                return label
        return self.fallback


def _is(code):
    return lambda alleles: alleles == code


def _has(allele):
    return lambda alleles: allele in alleles


EAR_TYPE = TraitModel(
    'ear_type', EarType,
    codes={
        EarType.STANDARD: "DD",
        EarType.DUMBO: "dd",
        EarType.TOP: "Tt",
    },
    default_code="DD",
    rules=[
        (lambda alleles: "d" in alleles and "D" not in alleles, EarType.DUMBO),
        (_has("T"), EarType.TOP),
    ],
    fallback=EarType.STANDARD,
)

EYE_COLOR = TraitModel(
    'eye_color', EyeColor,
    codes={
        EyeColor.BLACK: "BB",
        EyeColor.RUBY: "rr",
        EyeColor.RED: "rr",
        EyeColor.PINK: "pp",
        EyeColor.ODD_EYED: "Oo",
    },
    default_code="BB",
    rules=[
        (_is("pp"), EyeColor.PINK),
        (_is("rr"), EyeColor.RUBY),
        (_has("O"), EyeColor.ODD_EYED),
    ],
    fallback=EyeColor.BLACK,
)

COAT_TYPE = TraitModel(
    'coat_type', CoatType,
    codes={
        CoatType.STANDARD: "++",
        CoatType.REX: "rr",
        CoatType.VELVETEEN: "vv",
        CoatType.HAIRLESS: "hh",
        CoatType.DOUBLE_REX: "RR",
        CoatType.SATIN: "ss",
        CoatType.HARLEY: "hh",
    },
    default_code="++",
    rules=[
        (_is("rr"), CoatType.REX),
        (_is("RR"), CoatType.DOUBLE_REX),
        (_is("hh"), CoatType.HAIRLESS),
        (_is("vv"), CoatType.VELVETEEN),
        (_is("ss"), CoatType.SATIN),
    ],
    fallback=CoatType.STANDARD,
)

MARKING = TraitModel(
    'marking', Marking,
    codes={
        Marking.SELF: "ss",
        Marking.BERKSHIRE: "bb",
        Marking.IRISH: "ii",
        Marking.HOODED: "hh",
        Marking.BLAZED: "BB",
        Marking.VARIEGATED: "vv",
        Marking.CAPPED: "cc",
        Marking.BAREBACK: "bb",
        Marking.ESSEX: "ee",
        Marking.MASKED: "mm",
        Marking.DALMATIAN: "dd",
        Marking.ROAN: "rr",
    },
    default_code="ss",
    rules=[
        (_is("bb"), Marking.BERKSHIRE),
        (_is("ii"), Marking.IRISH),
        (_is("hh"), Marking.HOODED),
        (_has("B"), Marking.BLAZED),
        (_is("vv"), Marking.VARIEGATED),
        (_is("cc"), Marking.CAPPED),
        (_is("dd"), Marking.DALMATIAN),
        (_is("rr"), Marking.ROAN),
    ],
    fallback=Marking.SELF,
)

TRAITS = {
    'ear_type': EAR_TYPE,
    'eye_color': EYE_COLOR,
    'coat_type': COAT_TYPE,
    'marking': MARKING,
}


def simulate_trait(trait, mother, father):
    """
    Crosses the declared values of one trait and returns the label
    distribution as integer percentages, in order of first appearance.
    """
    model = TRAITS[trait] if isinstance(trait, str) else trait
    mother_locus = model.locus_for(getattr(mother, model.attribute))
    father_locus = model.locus_for(getattr(father, model.attribute))

    results = {}
    for outcome in cross_alleles(mother_locus, father_locus):
        label = model.phenotype_for(outcome.pair).value
        results[label] = results.get(label, 0.0) + outcome.probability

    return [TraitOutcome(label, int(round_half_up(probability * 100))) for label, probability in results.items()]


def get_trait_summary(mother, father):
    return {trait: simulate_trait(model, mother, father) for trait, model in TRAITS.items()}


def simulate_full_genetics(mother, father):
    """
    Combines the four trait distributions into whole-animal outcomes.

    Every combination is generated, those below 1% combined probability are
    dropped and the 20 most likely are returned. The coat colour is taken
    from the mother as declared; colour predictions come from the genotype
    simulator instead.
    """
    summary = get_trait_summary(mother, father)

    combined = []
    for ear, eye, coat, marking in product(summary['ear_type'], summary['eye_color'],
                                           summary['coat_type'], summary['marking']):
        probability = (ear.probability / 100) * (eye.probability / 100) \
            * (coat.probability / 100) * (marking.probability / 100)
        if probability < MIN_COMBINED_PROBABILITY:
            continue

        combined.append(FullGeneticOutcome(
            coat_color=mother.coat_color,
            coat_color_probability=0,
            coat_type=coat.phenotype,
            coat_type_probability=coat.probability,
            marking=marking.phenotype,
            marking_probability=marking.probability,
            eye_color=eye.phenotype,
            eye_color_probability=eye.probability,
            ear_type=ear.phenotype,
            ear_type_probability=ear.probability,
            probability=round_half_up(probability * 100, 1),
        ))

    combined.sort(key=lambda outcome: outcome.coat_type_probability * outcome.marking_probability
                  * outcome.eye_color_probability * outcome.ear_type_probability, reverse=True)
    return combined[:MAX_COMBINED_OUTCOMES]
