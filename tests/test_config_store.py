"""
Tests for settings loading and book persistence.
"""

import json
from datetime import date

import pytest
import yaml
from fintracklab import (
    ConfigError,
    DateFilter,
    FilterError,
    FilterType,
    FinanceBook,
    TrackerSettings,
    TransactionType,
    load_book,
    load_settings,
    save_book,
)


class TestLoadSettings:
    def test_defaults(self):
        s = load_settings()
        assert s.emergency_fund_goal == 10000.0
        assert s.projection_months == 60
        assert s.unclassified_label == "unclassified"
        assert s.language == "en"
        assert s.theme == "dark"

    def test_mapping_merged_over_defaults(self):
        s = load_settings({"emergency_fund_goal": 15000, "theme": "light"})
        assert s.emergency_fund_goal == 15000.0
        assert s.theme == "light"
        assert s.projection_months == 60

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("projection_months: 120\nlanguage: pt\n", encoding="utf-8")

        s = load_settings(path)
        assert s.projection_months == 120
        assert s.language == "pt"

    def test_json_file(self, tmp_path):
        path = tmp_path / "settings.json"
        path.write_text(json.dumps({"unclassified_label": "Other"}), encoding="utf-8")
        assert load_settings(path).unclassified_label == "Other"

    def test_empty_yaml_gives_defaults(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("", encoding="utf-8")
        assert load_settings(path) == TrackerSettings()

    @pytest.mark.parametrize(
        "mapping, match",
        [
            ({"emergency_goal": 1}, "unknown settings"),
            ({"projection_months": 0}, "projection_months"),
            ({"projection_months": "12"}, "projection_months"),
            ({"language": "de"}, "language"),
            ({"theme": "blue"}, "theme"),
            ({"emergency_fund_goal": "a lot"}, "emergency_fund_goal"),
            ({"unclassified_label": ""}, "unclassified_label"),
        ],
    )
    def test_invalid_settings(self, mapping, match):
        with pytest.raises(ConfigError, match=match):
            load_settings(mapping)

    def test_non_mapping_root(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_settings(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "settings.yaml"
        path.write_text("key: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="invalid YAML"):
            load_settings(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.yaml")


class TestBookStore:
    @pytest.fixture
    def book(self):
        b = FinanceBook(today=date(2024, 4, 15))
        b.add_transaction(date(2024, 3, 5), "Salary", 5000.0, TransactionType.INCOME)
        b.add_recurring("Rent", 1200.0, TransactionType.EXPENSE, date(2024, 1, 1))
        b.apply_catch_up()
        return b

    @pytest.mark.parametrize("name", ["book.json", "book.yaml"])
    def test_save_and_load(self, tmp_path, book, name):
        path = tmp_path / name
        save_book(book, path)

        restored = load_book(path, today=date(2024, 4, 15))
        assert restored.to_dict() == book.to_dict()
        assert not restored.apply_catch_up().changed

    def test_yaml_is_plain_mapping(self, tmp_path, book):
        path = tmp_path / "book.yml"
        save_book(book, path)
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
        assert set(data) == {
            "transactions",
            "allocations",
            "recurringTransactions",
            "receivables",
            "reminders",
            "filter",
        }
        assert data["recurringTransactions"][0]["lastProcessedDate"] == "2024-04-01"

    def test_unsupported_suffix(self, tmp_path, book):
        with pytest.raises(ConfigError, match="Unsupported"):
            save_book(book, tmp_path / "book.csv")

    def test_bad_record_rejected_on_load(self, tmp_path):
        path = tmp_path / "book.json"
        path.write_text(
            json.dumps({"transactions": [{"id": "t1", "date": "2024-02-30", "amount": 1,
                                          "type": "income"}]}),
            encoding="utf-8",
        )
        with pytest.raises(ConfigError, match="invalid ISO date"):
            load_book(path)


class TestHandWrittenYamlBooks:
    """Books edited by hand carry unquoted scalars that YAML types for us."""

    def _write(self, tmp_path, text):
        path = tmp_path / "book.yaml"
        path.write_text(text, encoding="utf-8")
        return path

    def test_unquoted_year_filter(self, tmp_path):
        path = self._write(tmp_path, "filter:\n  type: year\n  value: 2024\n")
        book = load_book(path)
        assert book.date_filter == DateFilter(FilterType.YEAR, "2024")

    def test_unquoted_day_filter(self, tmp_path):
        path = self._write(tmp_path, "filter:\n  type: day\n  value: 2024-03-15\n")
        assert load_book(path).date_filter == DateFilter(FilterType.DAY, "2024-03-15")

    def test_non_string_filter_value_rejected(self, tmp_path):
        path = self._write(tmp_path, "filter:\n  type: month\n  value: [2024, 3]\n")
        with pytest.raises(FilterError, match="must be a string"):
            load_book(path)

    def test_unquoted_transaction_date(self, tmp_path):
        path = self._write(
            tmp_path,
            "transactions:\n"
            "  - id: t1\n"
            "    date: 2024-03-05\n"
            "    amount: 100\n"
            "    type: income\n",
        )
        assert load_book(path).transactions[0].date == date(2024, 3, 5)
