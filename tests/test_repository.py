import io
import json
import os
import tempfile
import unittest

from rattery.repository import RatteryRepository, RecordNotFound


class TestRatteryRepository(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmp_dir.name, 'rattery.json')
        self.repository = RatteryRepository(self.path)

    def tearDown(self):
        self.tmp_dir.cleanup()

    def test_add_rat_generates_id_and_registration_number(self):
        rat = self.repository.add_rat({'name': 'Luna'})
        self.assertTrue(rat.id)
        self.assertEqual(rat.registration_number, "R0001")
        self.assertEqual(self.repository.add_rat({'id': 'b'}).registration_number, "R0002")
        self.assertIs(self.repository.get_rat(rat.id), rat)

    def test_records_are_persisted_under_fixed_keys(self):
        self.repository.add_rat({'id': 'm', 'name': 'Mother'})
        self.repository.add_litter({'mother_id': 'm', 'father_id': 'f', 'birth_date': '2024-01-01'})

        with open(self.path) as f:
            document = json.load(f)
        self.assertEqual(set(document), {'rats', 'litters'})

        reloaded = RatteryRepository(self.path)
        self.assertEqual(reloaded.get_rat('m').name, 'Mother')
        self.assertEqual(len(reloaded.all_litters()), 1)

    def test_in_memory_repository_writes_nothing(self):
        repository = RatteryRepository()
        repository.add_rat({'id': 'a'})
        self.assertEqual(len(repository.all_rats()), 1)
        self.assertFalse(os.path.exists(self.path))

    def test_update_rat(self):
        self.repository.add_rat({'id': 'a', 'name': 'Old'})
        rat = self.repository.update_rat('a', {'name': 'New', 'id': 'ignored'})
        self.assertEqual(rat.id, 'a')
        self.assertEqual(self.repository.get_rat('a').name, 'New')

    def test_update_unknown_rat(self):
        with self.assertRaises(RecordNotFound):
            self.repository.update_rat('missing', {'name': 'x'})

    def test_import_csv_with_pedigree_column_names(self):
        csv = io.StringIO(
            "Animal ID,Dam ID,Sire ID,Name,Genotype,Breeding Approved\n"
            "1,,,Founder Dam,aa BB DD,yes\n"
            "2,,,Founder Sire,aa bb dd,no\n"
            "3,1,2,Kit,,\n"
        )
        imported = self.repository.import_csv(csv)
        self.assertEqual([rat.id for rat in imported], ["1", "2", "3"])

        kit = self.repository.get_rat("3")
        self.assertEqual((kit.mother_id, kit.father_id), ("1", "2"))
        self.assertIsNone(kit.genotype)
        self.assertIsNone(self.repository.get_rat("1").mother_id)
        self.assertTrue(self.repository.get_rat("1").breeding_approved)
        self.assertFalse(self.repository.get_rat("2").breeding_approved)

    def test_import_csv_missing_columns(self):
        with self.assertRaises(ValueError):
            self.repository.import_csv(io.StringIO("id,name\n1,Luna\n"))


if __name__ == '__main__':
    unittest.main()
