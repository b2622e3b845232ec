import random

from rattery.records import CoatType, EarType, EyeColor, Marking

GENOTYPES = ["aa BB DD", "aa BB dd", "aa bb dd", "aa bb DD", "Aa Bb Dd", "AA BB DD", "Aa bb dd", "aa Bb Dd"]
NAMES = ["Luna", "Mochi", "Pepper", "Biscuit", "Nutmeg", "Oreo", "Pip", "Willow", "Ziggy", "Clover"]


def generate_rattery(num_rats=60):
    """
    Generates and prints a random, partly inbred rattery in CSV format,
    ready to be uploaded to /rats/upload.
    """
    print("id,name,sex,mother_id,father_id,genotype,coat_type,marking,eye_color,ear_type")

    sexes = {}

    def print_rat(rat_id, mother_id, father_id):
        sex = random.choice(['M', 'F'])
        sexes[rat_id] = sex
        row = [
            rat_id,
            f"{random.choice(NAMES)} {rat_id}",
            sex,
            mother_id or '',
            father_id or '',
            random.choice(GENOTYPES),
            random.choice(list(CoatType)).value,
            random.choice(list(Marking)).value,
            random.choice(list(EyeColor)).value,
            random.choice(list(EarType)).value,
        ]
        print(",".join(str(value) for value in row))

    # --- Generation 1: Founders ---
    for rat_id in range(1, 9):
        print_rat(rat_id, None, None)

    # --- Subsequent Generations ---
    next_id = 9
    while next_id <= num_rats:
        mothers = [rat_id for rat_id, sex in sexes.items() if sex == 'F']
        fathers = [rat_id for rat_id, sex in sexes.items() if sex == 'M']

        if not mothers or not fathers:
            # Founders happened to share one sex; add another founder
            print_rat(next_id, None, None)
        else:
            print_rat(next_id, random.choice(mothers), random.choice(fathers))
        next_id += 1


if __name__ == "__main__":
    # To run this from command line and save to a file:
    # python generate_pedigree.py > rattery.csv
    generate_rattery()
