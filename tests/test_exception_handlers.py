"""Exception handler tests: status mapping and error body shape."""

import importlib
import warnings

from workout_tracker.api import exception_handlers
from workout_tracker.api.exception_handlers import STATUS_BY_KIND, create_error_response


def test_status_by_kind():
    assert STATUS_BY_KIND == {
        "validation_error": 422,
        "not_found": 404,
        "duplicate_key": 409,
        "unauthorized": 401,
        "store_unavailable": 503,
    }


def test_module_imports_without_deprecation_warnings():
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always")
        importlib.reload(exception_handlers)

    assert not [w for w in caught if issubclass(w.category, DeprecationWarning)]


def test_error_body_shape():
    response = create_error_response(404, "not_found", "Workout not found")

    assert response.status_code == 404
    assert response.body == b'{"error":"not_found","message":"Workout not found","details":null}'
