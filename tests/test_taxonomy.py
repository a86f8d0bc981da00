import json

import pytest

from finance_insights.taxonomy import (
    DEFAULT_TAXONOMY,
    TaxonomyError,
    build_taxonomy,
    load_taxonomy,
)


def test_default_tables():
    assert "GROCERIES" in DEFAULT_TAXONOMY.essential_categories
    assert "FOOD_AND_DRINK" not in DEFAULT_TAXONOMY.essential_categories
    assert DEFAULT_TAXONOMY.income_categories == {"INCOME", "TRANSFER_IN"}
    assert DEFAULT_TAXONOMY.is_transfer_category("TRANSFER_OUT")
    assert not DEFAULT_TAXONOMY.is_transfer_category("INCOME")


def test_snapshot_essentials_cover_classifier_essentials():
    assert DEFAULT_TAXONOMY.essential_categories <= DEFAULT_TAXONOMY.snapshot_essential_categories


def test_statement_mapping():
    mapping = DEFAULT_TAXONOMY.statement_mapping("FOOD_AND_DRINK")
    assert mapping.bucket == "discretionary"
    assert mapping.subcategory == "dining_out"
    assert DEFAULT_TAXONOMY.statement_mapping("UNKNOWN") is None


def test_taxonomy_is_immutable():
    with pytest.raises(Exception):
        DEFAULT_TAXONOMY.salary_category = "OTHER"


def test_build_taxonomy_overrides_one_table():
    taxonomy = build_taxonomy({"card_issuers": ["acme bank"]})
    assert taxonomy.card_issuers == ("acme bank",)
    assert taxonomy.essential_categories == DEFAULT_TAXONOMY.essential_categories


def test_build_taxonomy_rejects_unknown_keys():
    with pytest.raises(TaxonomyError, match="Unknown taxonomy keys: bogus"):
        build_taxonomy({"bogus": []})


def test_build_taxonomy_rejects_bad_values():
    with pytest.raises(TaxonomyError, match="Invalid taxonomy"):
        build_taxonomy({"statement_category_map": {"X": {"bucket": "nowhere", "subcategory": "y"}}})


def test_load_without_path_is_default():
    assert load_taxonomy(None) is DEFAULT_TAXONOMY
    assert load_taxonomy("") is DEFAULT_TAXONOMY


def test_load_from_file(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text(json.dumps({
        "essential_categories": ["GROCERIES", "CHILDCARE"],
        "statement_category_map": {
            "CHILDCARE": {"bucket": "essential", "subcategory": "other"},
        },
    }), encoding="utf-8")

    taxonomy = load_taxonomy(str(path))
    assert taxonomy.essential_categories == {"GROCERIES", "CHILDCARE"}
    assert taxonomy.statement_mapping("CHILDCARE").bucket == "essential"
    assert taxonomy.statement_mapping("GROCERIES") is None


def test_load_missing_file_raises(tmp_path):
    with pytest.raises(TaxonomyError, match="Could not read"):
        load_taxonomy(str(tmp_path / "missing.json"))


def test_load_invalid_json_raises(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(TaxonomyError):
        load_taxonomy(str(path))


def test_load_non_object_raises(tmp_path):
    path = tmp_path / "taxonomy.json"
    path.write_text("[]", encoding="utf-8")
    with pytest.raises(TaxonomyError, match="JSON object"):
        load_taxonomy(str(path))
