from collections.abc import Mapping

DEFAULT_GENERATIONS = 5


def index_records(records):
    """Builds an id -> record map; an existing mapping is returned as is."""
    if isinstance(records, Mapping):
        return records
    return {record.id: record for record in records}


def get_parents(record, records_by_id):
    """
    Returns the (mother, father) records of an animal. A parent that is not
    recorded, or whose id is not in the collection, is None.
    """
    mother = records_by_id.get(record.mother_id) if record.mother_id else None
    father = records_by_id.get(record.father_id) if record.father_id else None
    return mother, father


# --- Distinct ancestors ---

def get_ancestors(record, records, max_generations=DEFAULT_GENERATIONS):
    """
    Collects every distinct ancestor of an animal up to max_generations back.

    The walk is depth first, mother before father. Each record is expanded at
    most once, so malformed data with cycles (an animal being its own
    ancestor) still terminates. Ancestors are returned in discovery order.
    """
    records_by_id = index_records(records)
    ancestors = []
    seen_ids = set()
    visited = set()

    # Stack of (record, generation); the start record is generation 1
    stack = [(record, 1)]
    while stack:
        current, generation = stack.pop()
        if generation > max_generations or current.id in visited:
            continue
        visited.add(current.id)

        mother, father = get_parents(current, records_by_id)
        for parent in (mother, father):
            if parent is not None and parent.id not in seen_ids:
                seen_ids.add(parent.id)
                ancestors.append(parent)

        # Father pushed first so the maternal line is walked first
        for parent in (father, mother):
            if parent is not None:
                stack.append((parent, generation + 1))

    return ancestors


# --- Path counting ---

def count_paths_to_ancestor(record, ancestor_id, records, max_depth=DEFAULT_GENERATIONS):
    """
    Counts the distinct lines of descent from an animal up to one ancestor.

    Unlike get_ancestors there is no visited set: an ancestor reached through
    two different parents is counted twice. The depth bound is the only limit,
    and the number of explored paths grows as 2**max_depth.
    """
    records_by_id = index_records(records)
    paths = 0

    stack = [(record, 0)]
    while stack:
        current, depth = stack.pop()
        if depth > max_depth:
            continue
        if current.id == ancestor_id:
            paths += 1
            continue

        for parent in get_parents(current, records_by_id):
            if parent is not None:
                stack.append((parent, depth + 1))

    return paths
