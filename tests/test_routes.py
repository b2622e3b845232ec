import io
import json
import unittest
from unittest import mock

from rattery import create_app


class RatteryApiTestCase(unittest.TestCase):

    def setUp(self):
        self.app = create_app({'TESTING': True, 'RATTERY_DATA_FILE': None, 'PEDIGREE_GENERATIONS': 5})
        self.client = self.app.test_client()

    def add_rat(self, **data):
        rv = self.client.post('/rats', json=data)
        self.assertEqual(rv.status_code, 201)
        return json.loads(rv.data)

    def add_siblings(self):
        self.add_rat(id='dam', name='Dam', sex='F', genotype='Aa BB Dd')
        self.add_rat(id='sire', name='Sire', sex='M', genotype='aa bb dd')
        self.add_rat(id='sister', name='Sister', sex='F', mother_id='dam', father_id='sire',
                     genotype='aa Bb Dd', ear_type='Dumbo')
        self.add_rat(id='brother', name='Brother', sex='M', mother_id='dam', father_id='sire',
                     genotype='Aa bb dd', ear_type='Top')

    def test_status(self):
        rv = self.client.get('/')
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(json.loads(rv.data)['rats'], 0)

    def test_add_rat_prefills_genotype_from_colour(self):
        rat = self.add_rat(name='Mocha', coat_color='Mink', date_of_birth='2024-01-01')
        self.assertEqual(rat['genotype'], 'aa bb DD')
        self.assertEqual(rat['inbreeding_coefficient'], 0)
        self.assertTrue(rat['age'])

    def test_add_rat_without_data(self):
        rv = self.client.post('/rats', json={})
        self.assertEqual(rv.status_code, 400)

    def test_get_and_update_rat(self):
        self.add_rat(id='a', name='Luna')
        rv = self.client.put('/rats/a', json={'name': 'Stella'})
        self.assertEqual(rv.status_code, 200)
        rv = self.client.get('/rats/a')
        self.assertEqual(json.loads(rv.data)['name'], 'Stella')

        self.assertEqual(self.client.get('/rats/missing').status_code, 404)
        self.assertEqual(self.client.put('/rats/missing', json={'name': 'x'}).status_code, 404)

    def test_list_rats_with_filters(self):
        self.add_siblings()
        rats = json.loads(self.client.get('/rats?sex=F').data)
        self.assertEqual({rat['id'] for rat in rats}, {'dam', 'sister'})
        rats = json.loads(self.client.get('/rats?search=bro').data)
        self.assertEqual([rat['id'] for rat in rats], ['brother'])

    def test_ancestors(self):
        self.add_siblings()
        rv = self.client.get('/rats/sister/ancestors')
        self.assertEqual([a['id'] for a in json.loads(rv.data)], ['dam', 'sire'])
        self.assertEqual(self.client.get('/rats/missing/ancestors').status_code, 404)

    def test_ancestors_generations_are_clamped(self):
        self.app.config['MAX_PEDIGREE_GENERATIONS'] = 2
        self.add_rat(id='g1', name='Founder')
        for n in range(2, 6):
            self.add_rat(id=f'g{n}', name=f'Generation {n}', mother_id=f'g{n - 1}')

        rv = self.client.get('/rats/g5/ancestors?generations=50')
        self.assertEqual([a['id'] for a in json.loads(rv.data)], ['g4', 'g3'])
        rv = self.client.get('/rats/g5/ancestors?generations=-3')
        self.assertEqual(json.loads(rv.data), [])

    def test_simulate_sibling_mating(self):
        self.add_siblings()
        rv = self.client.post('/simulate', json={'mother_id': 'sister', 'father_id': 'brother'})
        self.assertEqual(rv.status_code, 200)
        data = json.loads(rv.data)

        self.assertEqual(data['breeding']['relationship_type'], 'Full siblings')
        self.assertEqual(data['breeding']['estimated_coi'], 13)
        self.assertTrue(data['breeding']['warning'])

        genotypes = {o['genotype']: o for o in data['genotypes']}
        self.assertEqual(genotypes['Aa Bb Dd']['probability'], 12.5)
        self.assertEqual(genotypes['Aa Bb Dd']['phenotype'], 'Agouti')

        self.assertEqual(data['traits']['ear_type'], [{'phenotype': 'Dumbo', 'probability': 100}])
        self.assertTrue(data['full_genetics'])

    def test_simulate_without_genotypes(self):
        self.add_rat(id='a')
        self.add_rat(id='b')
        data = json.loads(self.client.post('/simulate', json={'mother_id': 'a', 'father_id': 'b'}).data)
        self.assertEqual(len(data['genotypes']), 1)
        self.assertEqual(data['genotypes'][0]['probability'], 100)
        self.assertEqual(data['breeding'], {'estimated_coi': 0, 'relationship_type': 'Unrelated', 'warning': None})

    def test_simulate_bad_requests(self):
        self.add_rat(id='a')
        self.assertEqual(self.client.post('/simulate', json={'mother_id': 'a'}).status_code, 400)
        self.assertEqual(self.client.post('/simulate', json={'mother_id': 'a', 'father_id': 'x'}).status_code, 404)

    def test_add_litter_records_predictions(self):
        self.add_siblings()
        rv = self.client.post('/litters', json={
            'litter_code': 'L001-2024', 'mother_id': 'sister', 'father_id': 'brother',
            'birth_date': '2024-03-01', 'total_offspring': 8,
        })
        self.assertEqual(rv.status_code, 201)
        litter = json.loads(rv.data)
        self.assertEqual(litter['estimated_coi'], 13)
        self.assertAlmostEqual(sum(p['probability'] for p in litter['predicted_phenotypes']), 100.0, delta=0.1)

        litters = json.loads(self.client.get('/litters').data)
        self.assertEqual(len(litters), 1)

    def test_add_litter_requires_birth_date(self):
        self.add_siblings()
        rv = self.client.post('/litters', json={'mother_id': 'sister', 'father_id': 'brother'})
        self.assertEqual(rv.status_code, 400)

    def test_upload_csv(self):
        csv = b"id,name,mother_id,father_id\n1,Dam,,\n2,Sire,,\n3,Kit,1,2\n"
        rv = self.client.post('/rats/upload', data={'pedigree_file': (io.BytesIO(csv), 'rats.csv')},
                              content_type='multipart/form-data')
        self.assertEqual(rv.status_code, 201)
        self.assertEqual(json.loads(rv.data)['imported'], 3)
        self.assertEqual(json.loads(self.client.get('/rats/3').data)['mother_id'], '1')

    def test_upload_without_file(self):
        rv = self.client.post('/rats/upload', data={}, content_type='multipart/form-data')
        self.assertEqual(rv.status_code, 400)

    def test_upload_missing_columns(self):
        rv = self.client.post('/rats/upload', data={'pedigree_file': (io.BytesIO(b"id,name\n1,x\n"), 'rats.csv')},
                              content_type='multipart/form-data')
        self.assertEqual(rv.status_code, 400)

    def test_colors(self):
        colors = json.loads(self.client.get('/colors').data)
        self.assertIn({'name': 'Blue', 'genotype': 'aa BB dd', 'description': 'Dilution of black',
                       'group': 'Base colours'}, colors)

    def test_export(self):
        self.add_siblings()
        rv = self.client.post('/simulate/export', data={'mother_ids': 'sister,dam', 'father_ids': 'brother'})
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(rv.mimetype, 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet')
        self.assertTrue(rv.data.startswith(b'PK'))

    def test_export_uses_configured_generations(self):
        self.add_siblings()
        self.app.config['PEDIGREE_GENERATIONS'] = 3
        with mock.patch('rattery.routes.calculate_inbreeding_coefficient', return_value=0) as coi:
            rv = self.client.post('/simulate/export', data={'mother_ids': 'sister', 'father_ids': 'brother'})
        self.assertEqual(rv.status_code, 200)
        self.assertEqual(coi.call_count, 2)
        for call in coi.call_args_list:
            self.assertEqual(call.args[2], 3)

    def test_export_requires_selection(self):
        rv = self.client.post('/simulate/export', data={'mother_ids': 'sister'})
        self.assertEqual(rv.status_code, 400)


if __name__ == '__main__':
    unittest.main()
