"""Provider normalization and search logic — pure functions, no network access."""

from app.core.record_normalizer import (
    DEFAULT_CATEGORY,
    REGION_SEPARATOR,
    record_fields,
    resolve_list,
    resolve_text,
)
from app.models.providers import (
    EditQuery,
    Provider,
    SearchAction,
    SearchQuery,
    SearchState,
    SubmitSearch,
)


def to_provider(record: object) -> Provider | None:
    """Normalize one raw record; returns None when no name alias resolves."""
    fields = record_fields(record)
    name = resolve_text(fields, "name")
    if not name:
        return None
    return Provider(
        name=name,
        category=resolve_text(fields, "category", DEFAULT_CATEGORY),
        regions=REGION_SEPARATOR.join(resolve_list(fields, "regions")),
        mobilization_window=resolve_text(fields, "mobilization_window"),
        badges=resolve_list(fields, "badges"),
        phone=resolve_text(fields, "phone"),
        email=resolve_text(fields, "email"),
        website=resolve_text(fields, "website"),
    )


def normalize_providers(records: list | None) -> list[Provider]:
    """Map raw Airtable records to Provider objects.

    Input order is preserved. Records without a usable name are dropped
    silently; records with identical names are all kept. Malformed values
    degrade to defaults rather than failing the batch.
    """
    if not isinstance(records, (list, tuple)):
        return []
    providers = []
    for record in records:
        provider = to_provider(record)
        if provider is not None:
            providers.append(provider)
    return providers


def evaluate_query(providers: list[Provider], query: SearchQuery) -> list[Provider]:
    """Filter providers for one search submission.

    The disaster category does not restrict results yet: every category,
    including "Other", matches every provider. Location is a case-insensitive
    substring check against `regions`; blank location matches everything.
    Relative order of `providers` is preserved.
    """
    location = query.location_text.strip().lower()
    if not location:
        return list(providers)
    return [p for p in providers if location in p.regions.lower()]


def reduce_search(
    state: SearchState, action: SearchAction, providers: list[Provider]
) -> SearchState:
    """Apply one search interaction to `state` and return the next state.

    Editing the draft never re-runs the evaluator; only an explicit submit
    does, against the providers loaded at that moment.
    """
    if isinstance(action, EditQuery):
        return state.model_copy(update={"draft": action.query})
    if isinstance(action, SubmitSearch):
        return state.model_copy(
            update={
                "status": "evaluated",
                "results": evaluate_query(providers, state.draft),
            }
        )
    return state
