"""Target filter construction utilities.

This module translates CLI arguments into a TargetFilter. It centralizes
validation of flag combinations so that the core only ever sees filters
that make sense.
"""

from typing import Iterable

from kschema.core.catalog import compile_name_pattern
from kschema.core.errors import InvalidFilterError
from kschema.core.filters import FilterMode, TargetFilter


def build_filter(
    *,
    db: str | None,
    dbs: Iterable[str],
    webhook: str | None,
    label: str | None,
    select_all: bool = False,
) -> TargetFilter:
    """
    Build a TargetFilter from user-provided criteria.

    Validation is performed to ensure that:
    - At most one of --db, --dbs, --webhook is given
    - --label is only used together with --webhook
    - --webhook is an http(s) URL
    - --db is a valid regular expression
    - --all is not combined with a filter

    Args:
        db: Optional regular expression matched against database names.
        dbs: Explicit database names (empty entries are ignored).
        webhook: Optional lookup service URL.
        label: Optional label for the lookup service.
        select_all: True when the user explicitly asked for every database.

    Returns:
        A TargetFilter describing the selection.

    Raises:
        InvalidFilterError: If the combination of flags is not valid.
    """
    names = tuple(n.strip() for n in dbs if n and n.strip())
    target_filter = TargetFilter(
        db=db or "", dbs=names, webhook=webhook or "", label=label or ""
    )

    modes = target_filter.populated_modes()
    if len(modes) > 1:
        raise InvalidFilterError(
            "Use only one of --db, --dbs or --webhook "
            f"(got {', '.join(m.value for m in modes)})."
        )
    if label and not webhook:
        raise InvalidFilterError("--label can only be used together with --webhook.")
    if webhook and not webhook.startswith(("http://", "https://")):
        raise InvalidFilterError(f"--webhook must be an http(s) URL: {webhook!r}")
    if db:
        compile_name_pattern(db)
    if select_all and target_filter.mode != FilterMode.ALL:
        raise InvalidFilterError("--all cannot be combined with --db, --dbs or --webhook.")

    return target_filter
