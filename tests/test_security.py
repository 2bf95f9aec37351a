import pytest

from coursetrack.services.errors import Unauthorized
from coursetrack.utils.security import resolve_user_id


def test_query_param_wins_over_body():
    assert resolve_user_id({"userId": "alice"}, {"userId": "bob"}) == "alice"


def test_falls_back_to_body_then_nested_data():
    assert resolve_user_id({}, {"userId": "bob"}) == "bob"
    assert resolve_user_id({}, {"data": {"userId": "carol"}}) == "carol"
    # top-level gana sobre data.userId
    assert resolve_user_id({}, {"userId": "bob", "data": {"userId": "carol"}}) == "bob"


def test_blank_query_value_falls_through():
    assert resolve_user_id({"userId": "  "}, {"userId": "bob"}) == "bob"


def test_identity_is_stripped():
    assert resolve_user_id({"userId": "  alice "}) == "alice"


@pytest.mark.parametrize(
    "query, body",
    [
        ({}, None),
        ({}, {}),
        ({"userId": ""}, {"userId": ""}),
        ({}, {"userId": 42}),
        ({}, {"data": "alice"}),
        ({}, ["userId", "alice"]),
    ],
)
def test_missing_identity_is_unauthorized(query, body):
    with pytest.raises(Unauthorized):
        resolve_user_id(query, body)


def test_identity_that_is_not_valid_utf8_counts_as_missing():
    with pytest.raises(Unauthorized):
        resolve_user_id({}, {"userId": "\ud800"})
    assert resolve_user_id({"userId": "\ud800"}, {"userId": "bob"}) == "bob"
