import pytest

from kschema.core.errors import InvalidFilterError
from kschema.core.filters import FilterMode, TargetFilter


def test_empty_filter_selects_all():
    assert TargetFilter().mode == FilterMode.ALL
    assert TargetFilter().populated_modes() == []


@pytest.mark.parametrize(
    ("target_filter", "mode"),
    [
        (TargetFilter(db="x", dbs=("a",), webhook="https://h"), FilterMode.SINGLE_DB),
        (TargetFilter(dbs=("a",), webhook="https://h"), FilterMode.EXPLICIT_LIST),
        (TargetFilter(webhook="https://h", label="prod"), FilterMode.WEBHOOK),
    ],
)
def test_filter_mode_follows_precedence(target_filter, mode):
    assert target_filter.mode == mode


def test_label_alone_does_not_select_webhook_mode():
    assert TargetFilter(label="prod").mode == FilterMode.ALL


def test_from_mapping_reads_crd_style_keys():
    target_filter = TargetFilter.from_mapping(
        {"dbs": ["db1", "db2"], "webhook": "https://h", "label": "prod"}
    )

    assert target_filter.dbs == ("db1", "db2")
    assert target_filter.populated_modes() == [
        FilterMode.EXPLICIT_LIST,
        FilterMode.WEBHOOK,
    ]


def test_from_mapping_rejects_string_dbs():
    with pytest.raises(InvalidFilterError):
        TargetFilter.from_mapping({"dbs": "db1"})
