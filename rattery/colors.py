"""
Named coat colours and the genotype each one implies. Used to pre-fill the
genotype of a new animal; "-" marks an allele that the colour does not fix.
"""
from collections import namedtuple

ColorVariant = namedtuple('ColorVariant', ['name', 'genotype', 'description', 'group'])

COLOR_GROUPS = {
    "Base colours": [
        ("Black", "aa BB DD", "Solid black, not diluted"),
        ("Agouti", "A- B- D-", "Wild type colour"),
        ("Blue", "aa BB dd", "Dilution of black"),
    ],
    "Black dilutions": [
        ("Russian Blue", "aa bb dd", "Double dilution of black"),
        ("Mink", "aa bb DD", "Dark brown"),
        ("Powder Blue", "aa Brb dd", "Soft light blue"),
    ],
    "Agouti dilutions": [
        ("Blue Agouti", "A- B- dd", "Agouti with blue dilution"),
        ("Cinnamon", "A- bb DD", "Brown agouti"),
        ("Fawn", "A- bb dd", "Light beige brown"),
        ("Lynx", "A- Brb dd", "Silvery grey"),
    ],
    "Albino and extreme dilutions": [
        ("PEW (Pink Eyed White)", "aa/A- -- cc", "White with red eyes (albino)"),
        ("Champagne", "aa bb dd pp", "Very light pinkish beige"),
        ("Beige", "aa BB dd pp", "Light greyish beige"),
        ("Platinum", "aa bb DD pp", "Light silvery grey"),
    ],
    "Other colours": [
        ("Siamese", "aa/A- -- ch", "Light body with dark points"),
        ("Himalayan", "aa/A- -- chch", "White body with coloured points"),
        ("Burmese", "aa/A- -- cb", "Even sepia tone"),
        ("Topaz", "A- -- rr", "Orange and honey"),
        ("Amber", "A- bb rr", "Dark golden"),
    ],
}


def all_colors():
    return [ColorVariant(name, genotype, description, group)
            for group, colors in COLOR_GROUPS.items()
            for name, genotype, description in colors]


def get_color_by_name(name):
    for color in all_colors():
        if color.name == name:
            return color
    return None


def get_genotype_by_color(name):
    color = get_color_by_name(name)
    return color.genotype if color else None
