import json
import logging
import os
import uuid

import pandas as pd

from .records import AnimalRecord, Litter

logger = logging.getLogger(__name__)

RATS_KEY = 'rats'
LITTERS_KEY = 'litters'

# Pedigree exports from other tools use animal/dam/sire naming
COLUMN_ALIASES = {
    'animal_id': 'id',
    'dam_id': 'mother_id',
    'sire_id': 'father_id',
}
REQUIRED_COLUMNS = {'id', 'mother_id', 'father_id'}


class RecordNotFound(KeyError):
    pass


class RatteryRepository:
    """
    Owns the animal and litter records. Everything is kept in memory and,
    when a path is given, written back to a single JSON document after each
    change. The genetics engine never talks to the repository; callers read
    the records from here and pass them in.
    """

    def __init__(self, path=None):
        self.path = path
        self._rats = {}
        self._litters = {}
        if path and os.path.exists(path):
            self._load()

    def _load(self):
        with open(self.path, 'r') as f:
            document = json.load(f)
        for data in document.get(RATS_KEY, []):
            rat = AnimalRecord.from_dict(data)
            self._rats[rat.id] = rat
        for data in document.get(LITTERS_KEY, []):
            litter = Litter.from_dict(data)
            self._litters[litter.id] = litter
        logger.info("Loaded %d rats and %d litters from %s", len(self._rats), len(self._litters), self.path)

    def _save(self):
        if not self.path:
            return
        directory = os.path.dirname(self.path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        document = {
            RATS_KEY: [rat.to_dict() for rat in self._rats.values()],
            LITTERS_KEY: [litter.to_dict() for litter in self._litters.values()],
        }
        with open(self.path, 'w') as f:
            json.dump(document, f, indent=2)

    # --- Rats ---

    def all_rats(self):
        return list(self._rats.values())

    def get_rat(self, rat_id):
        return self._rats.get(str(rat_id))

    def add_rat(self, data):
        """Stores a new rat. A missing id is generated, as is the registration number."""
        data = dict(data)
        data['id'] = str(data.get('id') or uuid.uuid4())
        if not data.get('registration_number'):
            data['registration_number'] = f"R{len(self._rats) + 1:04d}"
        rat = AnimalRecord.from_dict(data)
        self._rats[rat.id] = rat
        self._save()
        return rat

    def update_rat(self, rat_id, changes):
        current = self.get_rat(rat_id)
        if current is None:
            raise RecordNotFound(rat_id)
        data = current.to_dict()
        data.update(changes)
        data['id'] = current.id
        rat = AnimalRecord.from_dict(data)
        self._rats[rat.id] = rat
        self._save()
        return rat

    def import_csv(self, file):
        """
        Bulk-imports rats from a CSV file or path. Column names are
        normalised (trimmed, lower case, spaces to underscores) and
        animal_id/dam_id/sire_id are accepted for id/mother_id/father_id.
        Raises ValueError if an id or parent column is missing.
        """
        df = pd.read_csv(file, dtype=str)
        df = df.rename(columns=lambda x: x.strip().lower().replace(" ", "_"))
        df = df.rename(columns=COLUMN_ALIASES)

        if not REQUIRED_COLUMNS.issubset(df.columns):
            missing = sorted(list(REQUIRED_COLUMNS - set(df.columns)))
            raise ValueError(f"Missing columns: {', '.join(missing)}")

        df = df.dropna(subset=['id'])
        if 'breeding_approved' in df.columns:
            df['breeding_approved'] = df['breeding_approved'].fillna('').str.strip().str.lower().isin(['1', 'true', 'yes'])

        df = df.astype(object).where(pd.notna(df), None)
        imported = [self.add_rat(row) for row in df.to_dict(orient='records')]
        logger.info("Imported %d rats from CSV", len(imported))
        return imported

    # --- Litters ---

    def all_litters(self):
        return list(self._litters.values())

    def get_litter(self, litter_id):
        return self._litters.get(str(litter_id))

    def add_litter(self, data):
        data = dict(data)
        data['id'] = str(data.get('id') or uuid.uuid4())
        litter = Litter.from_dict(data)
        self._litters[litter.id] = litter
        self._save()
        return litter
