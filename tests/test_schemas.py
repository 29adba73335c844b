from __future__ import annotations

import pytest

from edge_cors import CorsConfigurationError, CorsOptions, load_cors_options
from edge_cors.options import DEFAULT_ALLOW_METHODS


def test_load_from_comma_separated_strings():
    options = load_cors_options(
        {
            "CORS_ALLOWED_ORIGINS": "https://a.com, https://b.com,,",
            "CORS_ALLOWED_METHODS": "GET,POST",
            "CORS_ALLOWED_HEADERS": "Content-Type, Authorization",
            "CORS_EXPOSE_HEADERS": "X-Total",
            "CORS_MAX_AGE": "600",
            "CORS_ALLOW_CREDENTIALS": "true",
            "SECRET_KEY": "ignored",
        }
    )

    assert isinstance(options, CorsOptions)
    assert options.origin == ("https://a.com", "https://b.com")
    assert options.allow_methods == ("GET", "POST")
    assert options.allow_headers == ("Content-Type", "Authorization")
    assert options.expose_headers == ("X-Total",)
    assert options.max_age == 600
    assert options.credentials is True


def test_load_from_lists_and_defaults():
    options = load_cors_options({"CORS_ALLOWED_ORIGINS": ["https://a.com"]})

    assert options.origin == ("https://a.com",)
    assert options.allow_methods == DEFAULT_ALLOW_METHODS
    assert options.allow_headers == ()
    assert options.max_age is None
    assert options.credentials is False


def test_wildcard_entry_collapses_to_wildcard():
    options = load_cors_options({"CORS_ALLOWED_ORIGINS": "https://a.com,*"})
    assert options.origin == "*"


def test_blank_values_are_treated_as_absent():
    options = load_cors_options(
        {"CORS_ALLOWED_ORIGINS": "https://a.com", "CORS_MAX_AGE": "", "CORS_ALLOWED_HEADERS": " "}
    )
    assert options.max_age is None
    assert options.allow_headers == ()


@pytest.mark.parametrize("config", [{}, {"CORS_ALLOWED_ORIGINS": ""}, {"CORS_ALLOWED_ORIGINS": " , "}])
def test_missing_origins_disable_cors(config):
    assert load_cors_options(config) is None


@pytest.mark.parametrize(
    "config",
    [
        {"CORS_ALLOWED_ORIGINS": "https://a.com", "CORS_MAX_AGE": "-1"},
        {"CORS_ALLOWED_ORIGINS": "https://a.com", "CORS_MAX_AGE": "soon"},
        {"CORS_ALLOWED_ORIGINS": "https://a.com", "CORS_ALLOW_CREDENTIALS": "maybe"},
        {"CORS_ALLOWED_ORIGINS": 5},
    ],
)
def test_invalid_values_raise_configuration_error(config):
    with pytest.raises(CorsConfigurationError) as exc_info:
        load_cors_options(config)
    assert exc_info.value.payload["errors"]
