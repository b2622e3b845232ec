from dataclasses import asdict
from flask import Blueprint, request, jsonify, current_app, send_file
import pandas as pd
import logging
from io import BytesIO

from rattery.colors import all_colors, get_genotype_by_color
from rattery.engine import (
    simulate_breeding,
    simulate_genotypes,
    simulate_full_genetics,
    get_trait_summary,
    calculate_inbreeding_coefficient,
)
from rattery.pedigree.analysis.analyzer import get_ancestors
from rattery.records import format_age
from rattery.repository import RecordNotFound

# Blueprints
main_blueprint = Blueprint('main', __name__)

# General app configuration
logging.basicConfig(level=logging.INFO)


def _repository():
    return current_app.repository


def _generations():
    """
    Traversal depth for this request. Path counting doubles its work with each
    generation, so the value is clamped to MAX_PEDIGREE_GENERATIONS.
    """
    generations = request.args.get('generations', current_app.config['PEDIGREE_GENERATIONS'], type=int)
    return min(max(generations, 0), current_app.config['MAX_PEDIGREE_GENERATIONS'])


def _rat_to_json(rat, all_rats):
    data = rat.to_dict()
    data['inbreeding_coefficient'] = calculate_inbreeding_coefficient(rat, all_rats, _generations())
    data['age'] = format_age(rat.date_of_birth) if rat.date_of_birth else None
    return data


def _find_parents(mother_id, father_id):
    """Returns (mother, father, error_response); error_response is None when both exist."""
    repository = _repository()
    if not mother_id or not father_id:
        return None, None, (jsonify({"error": "Both mother_id and father_id are required."}), 400)
    mother = repository.get_rat(mother_id)
    father = repository.get_rat(father_id)
    if mother is None or father is None:
        missing = mother_id if mother is None else father_id
        return None, None, (jsonify({"error": f"Unknown rat: {missing}"}), 404)
    return mother, father, None


# --- Status ---

@main_blueprint.route('/', methods=['GET'])
def index():
    repository = _repository()
    return jsonify({
        "status": "Rattery Pedigree operational",
        "rats": len(repository.all_rats()),
        "litters": len(repository.all_litters()),
    })


# --- Rats ---

@main_blueprint.route('/rats', methods=['GET'])
def list_rats():
    all_rats = _repository().all_rats()
    search = request.args.get('search', '').lower()
    sex = request.args.get('sex')
    breeding = request.args.get('breeding', 'all')

    rats = [
        rat for rat in all_rats
        if (search in rat.name.lower() or search in rat.coat_color.lower())
        and (not sex or rat.sex == sex)
        and (breeding == 'all'
             or (breeding == 'approved' and rat.breeding_approved)
             or (breeding == 'not-approved' and not rat.breeding_approved))
    ]
    return jsonify([_rat_to_json(rat, all_rats) for rat in rats])


@main_blueprint.route('/rats', methods=['POST'])
def add_rat():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "No rat data received."}), 400

    # A known coat colour implies a genotype when none was given
    if not data.get('genotype') and data.get('coat_color'):
        data['genotype'] = get_genotype_by_color(data['coat_color'])

    try:
        rat = _repository().add_rat(data)
    except Exception as e:
        current_app.logger.error(f"Error adding rat: {e}", exc_info=True)
        return jsonify({"error": "Could not store the rat."}), 500

    return jsonify(_rat_to_json(rat, _repository().all_rats())), 201


@main_blueprint.route('/rats/<rat_id>', methods=['GET'])
def get_rat(rat_id):
    rat = _repository().get_rat(rat_id)
    if rat is None:
        return jsonify({"error": f"Unknown rat: {rat_id}"}), 404
    return jsonify(_rat_to_json(rat, _repository().all_rats()))


@main_blueprint.route('/rats/<rat_id>', methods=['PUT'])
def update_rat(rat_id):
    changes = request.get_json(silent=True)
    if not changes:
        return jsonify({"error": "No changes received."}), 400

    try:
        rat = _repository().update_rat(rat_id, changes)
    except RecordNotFound:
        return jsonify({"error": f"Unknown rat: {rat_id}"}), 404
    except Exception as e:
        current_app.logger.error(f"Error updating rat {rat_id}: {e}", exc_info=True)
        return jsonify({"error": "Could not update the rat."}), 500

    return jsonify(_rat_to_json(rat, _repository().all_rats()))


@main_blueprint.route('/rats/<rat_id>/ancestors', methods=['GET'])
def rat_ancestors(rat_id):
    repository = _repository()
    rat = repository.get_rat(rat_id)
    if rat is None:
        return jsonify({"error": f"Unknown rat: {rat_id}"}), 404

    ancestors = get_ancestors(rat, repository.all_rats(), _generations())
    return jsonify([ancestor.to_dict() for ancestor in ancestors])


@main_blueprint.route('/rats/upload', methods=['POST'])
def upload_rats():
    if 'pedigree_file' not in request.files or not request.files['pedigree_file'].filename:
        return jsonify({"error": "No file selected."}), 400

    file = request.files['pedigree_file']
    try:
        imported = _repository().import_csv(file)
    except ValueError as e:
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        current_app.logger.error(f"File processing error: {e}", exc_info=True)
        return jsonify({"error": f"Error while processing the file: {e}"}), 500

    return jsonify({"imported": len(imported), "ids": [rat.id for rat in imported]}), 201


@main_blueprint.route('/colors', methods=['GET'])
def colors():
    return jsonify([color._asdict() for color in all_colors()])


# --- Litters ---

@main_blueprint.route('/litters', methods=['GET'])
def list_litters():
    return jsonify([litter.to_dict() for litter in _repository().all_litters()])


@main_blueprint.route('/litters', methods=['POST'])
def add_litter():
    data = request.get_json(silent=True)
    if not data:
        return jsonify({"error": "No litter data received."}), 400
    if not data.get('birth_date'):
        return jsonify({"error": "birth_date is required."}), 400

    mother, father, error = _find_parents(data.get('mother_id'), data.get('father_id'))
    if error:
        return error

    repository = _repository()
    breeding = simulate_breeding(mother, father, repository.all_rats(), _generations())

    phenotypes = {}
    for outcome in simulate_genotypes(mother.genotype, father.genotype):
        phenotypes[outcome.phenotype] = phenotypes.get(outcome.phenotype, 0) + outcome.probability
    data['estimated_coi'] = breeding.estimated_coi
    data['predicted_phenotypes'] = [
        {"phenotype": phenotype, "probability": round(probability, 1)}
        for phenotype, probability in phenotypes.items()
    ]

    try:
        litter = repository.add_litter(data)
    except Exception as e:
        current_app.logger.error(f"Error adding litter: {e}", exc_info=True)
        return jsonify({"error": "Could not store the litter."}), 500

    return jsonify(litter.to_dict()), 201


# --- Breeding simulation ---

def _simulation_payload(mother, father, all_rats):
    breeding = simulate_breeding(mother, father, all_rats, _generations())
    summary = get_trait_summary(mother, father)
    return {
        'mother_id': mother.id,
        'father_id': father.id,
        'breeding': asdict(breeding),
        'genotypes': [outcome._asdict() for outcome in simulate_genotypes(mother.genotype, father.genotype)],
        'traits': {trait: [o._asdict() for o in outcomes] for trait, outcomes in summary.items()},
        'full_genetics': [outcome._asdict() for outcome in simulate_full_genetics(mother, father)],
    }


@main_blueprint.route('/simulate', methods=['POST'])
def simulate():
    data = request.get_json(silent=True) or {}
    mother, father, error = _find_parents(data.get('mother_id'), data.get('father_id'))
    if error:
        return error

    try:
        return jsonify(_simulation_payload(mother, father, _repository().all_rats()))
    except Exception as e:
        current_app.logger.error(f"Error in breeding simulation: {e}", exc_info=True)
        return jsonify({"error": "Error while running the breeding simulation."}), 500


@main_blueprint.route('/simulate/export', methods=['POST'])
def export_simulations():
    repository = _repository()
    mother_ids = [i for i in request.form.get('mother_ids', '').split(',') if i]
    father_ids = [i for i in request.form.get('father_ids', '').split(',') if i]
    if not mother_ids or not father_ids:
        return jsonify({"error": "Select at least one mother and one father."}), 400

    try:
        all_rats = repository.all_rats()
        mothers = [rat for rat in map(repository.get_rat, mother_ids) if rat is not None]
        fathers = [rat for rat in map(repository.get_rat, father_ids) if rat is not None]

        export_data = []
        for father in fathers:
            father_coi = calculate_inbreeding_coefficient(father, all_rats, _generations())
            for mother in mothers:
                mother_coi = calculate_inbreeding_coefficient(mother, all_rats, _generations())
                breeding = simulate_breeding(mother, father, all_rats, _generations())
                top_genotype = simulate_genotypes(mother.genotype, father.genotype)[0]
                export_data.append({
                    'Father ID': father.id,
                    'Father Name': father.name,
                    'Father COI (%)': father_coi,
                    'Mother ID': mother.id,
                    'Mother Name': mother.name,
                    'Mother COI (%)': mother_coi,
                    'Expected Offspring COI (%)': breeding.estimated_coi,
                    'Relationship': breeding.relationship_type,
                    'Warning': breeding.warning or '',
                    'Most Likely Colour': top_genotype.phenotype,
                    'Colour Probability (%)': top_genotype.probability,
                })

        output_df = pd.DataFrame(export_data)

        output = BytesIO()
        with pd.ExcelWriter(output, engine='openpyxl') as writer:
            output_df.to_excel(writer, index=False, sheet_name='Mating Results')
        output.seek(0)

        return send_file(
            output,
            mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
            as_attachment=True,
            download_name='simulation_results.xlsx'
        )

    except Exception as e:
        current_app.logger.error(f"Error exporting results: {e}", exc_info=True)
        return jsonify({"error": "Error during export."}), 500
