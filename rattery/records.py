import datetime
from dataclasses import dataclass, field, asdict, fields
from enum import Enum
from typing import Optional, List, Dict, Any


class CoatType(str, Enum):
    STANDARD = "Standard"
    REX = "Rex"
    VELVETEEN = "Velveteen"
    HAIRLESS = "Hairless"
    DOUBLE_REX = "Double Rex"
    SATIN = "Satin"
    HARLEY = "Harley"


class Marking(str, Enum):
    SELF = "Self"
    BERKSHIRE = "Berkshire"
    IRISH = "Irish"
    HOODED = "Hooded"
    BLAZED = "Blazed"
    VARIEGATED = "Variegated"
    CAPPED = "Capped"
    BAREBACK = "Bareback"
    ESSEX = "Essex"
    MASKED = "Masked"
    DALMATIAN = "Dalmatian"
    ROAN = "Roan"


class EyeColor(str, Enum):
    BLACK = "Black"
    RUBY = "Ruby"
    RED = "Red"
    ODD_EYED = "Odd-eyed"
    PINK = "Pink"


class EarType(str, Enum):
    STANDARD = "Standard"
    DUMBO = "Dumbo"
    TOP = "Top"


@dataclass(frozen=True)
class AnimalRecord:
    """
    A single animal of the registry. The genetics engine only reads the
    pedigree links, the genotype string and the four declared traits; the
    remaining fields belong to the record keeping side.
    Trait fields hold plain strings so unrecognised values survive a
    round-trip through storage; the trait simulator decides what to do with them.
    """
    id: str
    name: str = ""
    sex: Optional[str] = None
    mother_id: Optional[str] = None
    father_id: Optional[str] = None
    genotype: Optional[str] = None
    coat_color: str = ""
    coat_type: str = CoatType.STANDARD.value
    marking: str = Marking.SELF.value
    eye_color: str = EyeColor.BLACK.value
    ear_type: str = EarType.STANDARD.value
    date_of_birth: Optional[str] = None
    status: str = "Alive"
    breeding_approved: bool = False
    litter_id: Optional[str] = None
    registration_number: Optional[str] = None
    notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnimalRecord":
        """
        Builds a record from a plain dict. Unknown keys are ignored and None
        values fall back to the field default.
        """
        known = {f.name for f in fields(cls)}
        values = {key: value for key, value in data.items() if key in known and value is not None}
        values['id'] = str(values['id'])
        # Empty strings coming from forms or CSV cells mean "no parent recorded"
        for key in ('mother_id', 'father_id'):
            if values.get(key) in ('', None):
                values[key] = None
            else:
                values[key] = str(values[key])
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Litter:
    id: str
    mother_id: str
    father_id: str
    birth_date: str
    litter_code: Optional[str] = None
    mating_date: Optional[str] = None
    offspring_ids: List[str] = field(default_factory=list)
    total_offspring: int = 0
    males_count: int = 0
    females_count: int = 0
    survived_count: int = 0
    estimated_coi: Optional[int] = None
    predicted_phenotypes: List[Dict[str, Any]] = field(default_factory=list)
    health_notes: Optional[str] = None
    general_notes: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Litter":
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_age(birth_date, today=None):
    """
    Returns the age as a (years, months, days) tuple. A negative day count
    borrows the length of the previous month, a negative month count borrows a year.
    """
    if isinstance(birth_date, str):
        birth_date = datetime.date.fromisoformat(birth_date[:10])
    today = today or datetime.date.today()

    years = today.year - birth_date.year
    months = today.month - birth_date.month
    days = today.day - birth_date.day

    if days < 0:
        months -= 1
        last_of_previous_month = today.replace(day=1) - datetime.timedelta(days=1)
        days += last_of_previous_month.day

    if months < 0:
        years -= 1
        months += 12

    return years, months, days


def _plural(count, word):
    return f"{count} {word}{'s' if count != 1 else ''}"


def format_age(birth_date, today=None):
    """Human readable age, e.g. '1 year and 2 months' or '21 days'."""
    years, months, days = calculate_age(birth_date, today)

    if years > 0:
        if months > 0:
            return f"{_plural(years, 'year')} and {_plural(months, 'month')}"
        return _plural(years, 'year')

    if months > 0:
        if days > 0:
            return f"{_plural(months, 'month')} and {_plural(days, 'day')}"
        return _plural(months, 'month')

    return _plural(days, 'day')
