"""
CV Layout Module - Section ordering and item sorting for rendered CVs
"""

from datetime import date

SECTION_KEYS = ('experience', 'project', 'skill', 'education')
DEFAULT_SECTION_ORDER = list(SECTION_KEYS)

SECTION_TITLES = {
    'experience': 'Experience',
    'project': 'Projects',
    'skill': 'Skills',
    'education': 'Education',
}


def parse_section_order(value):
    """
    Normalize a stored section order into a list of known section keys

    Args:
        value: comma separated string or list of keys

    Returns:
        list: known keys in the given order, duplicates dropped; the default
        order only when no value is stored
    """
    if value is None:
        return list(DEFAULT_SECTION_ORDER)
    parts = value.split(',') if isinstance(value, str) else value

    # Unknown keys are skipped, so an order made only of them renders nothing
    order = []
    for part in parts:
        key = str(part).strip().lower()
        if key in SECTION_KEYS and key not in order:
            order.append(key)
    return order


def _by_start_date_desc(rows):
    # Undated rows go last, keeping their stored position among themselves
    dated = [row for row in rows if row.start_date is not None]
    undated = [row for row in rows if row.start_date is None]
    dated.sort(key=lambda row: (row.start_date or date.min), reverse=True)
    undated.sort(key=lambda row: row.order_index)
    return dated + undated


def _by_order_index(rows):
    return sorted(rows, key=lambda row: row.order_index)


def _section_items(cv, key):
    if key == 'experience':
        return [item.to_dict() for item in _by_start_date_desc(
            [link.experience for link in cv.experience_links])]
    if key == 'project':
        return [item.to_dict() for item in _by_order_index(
            [link.project for link in cv.project_links])]
    if key == 'skill':
        return [item.to_dict() for item in _by_order_index(
            [link.skill for link in cv.skill_links])]
    return [item.to_dict() for item in _by_start_date_desc(
        [link.education for link in cv.education_links])]


def compose_cv(cv):
    """
    Build the render model of a CV version

    Returns:
        dict: ``cv`` (serialized version) and ``sections``, a list of
        ``{key, title, items}`` in the CV's section order
    """
    sections = []
    for key in parse_section_order(cv.section_order):
        sections.append({
            'key': key,
            'title': SECTION_TITLES[key],
            'items': _section_items(cv, key),
        })
    return {'cv': cv.to_dict(), 'sections': sections}
