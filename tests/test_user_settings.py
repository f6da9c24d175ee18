"""Tests for resolving per-user extraction options"""

from songvocab.user_settings import default_options, options_from_row, resolve_options


class TestResolveOptions:
    """Test lookup, defaults and coercion"""

    def test_missing_row_returns_defaults(self):
        options = resolve_options("user-1", lambda user_id: None)

        assert options.model_dump() == {
            "language": "en",
            "level": "intermediate",
            "max_words": 30,
            "min_length": 2,
        }

    def test_no_lookup_returns_defaults(self):
        assert resolve_options("user-1", None) == default_options()

    def test_lookup_failure_returns_defaults(self):
        def broken(user_id):
            raise RuntimeError("db down")

        assert resolve_options("user-1", broken) == default_options()

    def test_defaults_are_fresh_objects(self):
        first = default_options()
        first.max_words = 5
        assert default_options().max_words == 30

    def test_valid_row_is_used(self):
        row = {"language": "ko", "level": "advanced", "max_words": 50, "min_length": 3}

        options = resolve_options("user-1", lambda user_id: row)

        assert options.model_dump() == row

    def test_lookup_receives_user_id(self):
        seen = []
        resolve_options("user-42", lambda user_id: seen.append(user_id))
        assert seen == ["user-42"]


class TestOptionsFromRow:
    """Test field-by-field coercion"""

    def test_invalid_enums_fall_back(self):
        options = options_from_row({"language": "fr", "level": "expert", "max_words": 10, "min_length": 2})

        assert options.language == "en"
        assert options.level == "intermediate"

    def test_out_of_range_numbers_fall_back(self):
        options = options_from_row({"language": "en", "level": "beginner", "max_words": 500, "min_length": 0})

        assert options.max_words == 30
        assert options.min_length == 2

    def test_numeric_strings_are_accepted(self):
        options = options_from_row({"max_words": "200", "min_length": "20"})

        assert options.max_words == 200
        assert options.min_length == 20

    def test_garbage_numbers_fall_back(self):
        options = options_from_row({"max_words": "lots", "min_length": None})

        assert options.max_words == 30
        assert options.min_length == 2

    def test_huge_numbers_fall_back(self):
        row = {"language": "en", "level": "beginner", "max_words": 10**400, "min_length": -10**400}

        options = resolve_options("user-1", lambda user_id: row)

        assert options.max_words == 30
        assert options.min_length == 2

    def test_fractional_numbers_fall_back(self):
        assert options_from_row({"max_words": 12.5}).max_words == 30
