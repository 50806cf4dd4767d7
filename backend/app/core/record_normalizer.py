# Field aliases for raw Airtable records, in precedence order.
# The first alias holding a usable value wins ("Provider Name" before "Name").
# Base editors rename columns from time to time; add the new column name here
# rather than renaming the old one, so older views keep resolving.

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("Provider Name", "Name"),
    "category": ("Provider Type", "Category"),
    "regions": ("Regions Served",),
    "mobilization_window": ("Mobilization Window",),
    "badges": ("Badges Earned",),
    "phone": ("Primary Contact Phone", "Phone"),
    "email": ("Primary Contact Email", "Email"),
    "website": ("Website",),
}

DEFAULT_CATEGORY = "Service Provider"

REGION_SEPARATOR = ", "


def _render_number(value: int | float) -> str:
    # Very long ints exceed the interpreter's int-to-str digit limit.
    try:
        return str(value)
    except ValueError:
        return ""


def coerce_text(value: object) -> str:
    """Coerce a scalar field value to a stripped string.

    Numbers are rendered with str(); anything else that is not a string
    (None, bools, lists, mappings) yields an empty string.
    """
    if isinstance(value, bool):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float)):
        return _render_number(value)
    return ""


def _list_item(value: object) -> str | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return _render_number(value) or None
    return None


def coerce_list(value: object) -> list[str]:
    """Coerce a list-typed field value to a list of strings.

    String elements are kept exactly as supplied, in order; numbers are
    rendered with str() and any other element type is dropped. A non-empty
    scalar becomes a one-element list; anything else becomes [].
    """
    if isinstance(value, (list, tuple)):
        items = [_list_item(v) for v in value]
        return [item for item in items if item is not None]
    item = _list_item(value)
    return [item] if item else []


def resolve_text(fields: dict, field: str, default: str = "") -> str:
    """Return the first usable text value across the aliases of `field`."""
    for alias in FIELD_ALIASES[field]:
        text = coerce_text(fields.get(alias))
        if text:
            return text
    return default


def resolve_list(fields: dict, field: str) -> list[str]:
    """Return the first non-empty list value across the aliases of `field`."""
    for alias in FIELD_ALIASES[field]:
        items = coerce_list(fields.get(alias))
        if items:
            return items
    return []


def record_fields(record: object) -> dict:
    """Return the `fields` mapping of a raw record, or {} if there is none."""
    if not isinstance(record, dict):
        return {}
    fields = record.get("fields")
    return fields if isinstance(fields, dict) else {}


def extract_records(payload: object) -> list:
    """Return the `records` list of an Airtable payload, or [] for any other shape."""
    if not isinstance(payload, dict):
        return []
    records = payload.get("records")
    return records if isinstance(records, list) else []
