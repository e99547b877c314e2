import pytest
import typer

from kschema.cli.common.exits import exit_code_for, exit_from_error
from kschema.core.errors import (
    BuildError,
    ClusterUriError,
    ExecutionError,
    InvalidFilterError,
    QueryError,
)


@pytest.mark.parametrize(
    ("error", "code"),
    [
        (InvalidFilterError("bad regex"), 2),
        (ClusterUriError("no scheme"), 2),
        (QueryError("down"), 1),
        (BuildError("gen"), 1),
        (ExecutionError("apply"), 1),
    ],
)
def test_exit_code_for_error_kinds(error, code):
    assert exit_code_for(error) == code


def test_exit_from_error_chains_the_error():
    error = QueryError("down")

    with pytest.raises(typer.Exit) as excinfo:
        exit_from_error(error)

    assert excinfo.value.exit_code == 1
    assert excinfo.value.__cause__ is error
