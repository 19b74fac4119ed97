"""Unit tests for evaluation options and SQL fragment helpers."""

import pytest

from configurable_list.common.exceptions import ErrorCode, ListError
from configurable_list.query_builder import EvaluateOptions, ListQuery
from configurable_list.utils.sql import interpolate_sql_template, is_blank


class TestEvaluateOptions:
    """Test option defaults and validation."""

    def test_defaults(self):
        options = EvaluateOptions.build()
        assert options.page == 1
        assert options.page_size is None
        assert options.filters == {}
        assert options.sorts == []
        assert not options.paged
        assert options.limit is None and options.offset is None

    def test_paging(self):
        options = EvaluateOptions.build(page=3, page_size=50)
        assert (options.limit, options.offset) == (50, 100)

    def test_page_from_text(self):
        assert EvaluateOptions.build(page=" 4 ").page == 4

    def test_none_values_fall_back_to_defaults(self):
        options = EvaluateOptions.build(page=None, filters=None, sorts=None)
        assert (options.page, options.filters, options.sorts) == (1, {}, [])

    def test_single_sort_token(self):
        assert EvaluateOptions.build(sorts="name desc").sorts == ["name desc"]

    def test_zero_page_size_is_unpaged(self):
        options = EvaluateOptions.build(page=2, page_size=0)
        assert not options.paged
        assert options.limit is None

    @pytest.mark.parametrize("options", [{"page": 0}, {"page": "first"}, {"page_size": -5}, {"sorts": 3}])
    def test_invalid(self, options):
        with pytest.raises(ListError) as exc_info:
            EvaluateOptions.build(**options)
        assert exc_info.value.error_code == ErrorCode.INVALID_OPTIONS


class TestListQuery:
    """Test statement rendering from fragments."""

    def test_full_statement(self):
        query = ListQuery(
            table_name="t",
            fields=["t.a AS a", "t.b AS b"],
            joins=["JOIN u ON u.id = t.u_id"],
            qualifiers=["t.x = 1", "u.y = 2"],
            filters=["a ILIKE '%q%'", "(b = 1 OR b = 2)"],
            sorts=["a ASC NULLS LAST", "b DESC"],
            limit=10,
            offset=20,
        )
        assert query.to_sql() == "\n".join([
            "SELECT *, count(*) OVER() AS total_row_count FROM (",
            "  SELECT t.a AS a,",
            "         t.b AS b",
            "  FROM t",
            "  JOIN u ON u.id = t.u_id",
            "  WHERE t.x = 1",
            "    AND u.y = 2",
            ") AS intermediate_result",
            "WHERE (a ILIKE '%q%') AND ((b = 1 OR b = 2))",
            "ORDER BY a ASC NULLS LAST, b DESC",
            "LIMIT 10 OFFSET 20",
        ])


class TestSqlHelpers:
    """Test template interpolation."""

    def test_every_placeholder_gets_the_escaped_value(self):
        rendered = interpolate_sql_template("BETWEEN '%s' AND '%s'", "x'y", lambda v: v.replace("'", "''"))
        assert rendered == "BETWEEN 'x''y' AND 'x''y'"

    def test_literal_percent(self):
        assert interpolate_sql_template("LIKE '%%%s'", "abc", str) == "LIKE '%abc'"

    def test_none_value_renders_empty(self):
        assert interpolate_sql_template("= '%s'", None, str) == "= ''"

    def test_numeric_placeholders_receive_numbers(self):
        assert interpolate_sql_template("> %d", "5", str) == "> 5"
        assert interpolate_sql_template("> %d", "7.9", str) == "> 7"
        assert interpolate_sql_template("BETWEEN %.2f AND %d", "3", str) == "BETWEEN 3.00 AND 3"

    @pytest.mark.parametrize("value", ["abc", "1 OR 1=1", "NaN", ""])
    def test_numeric_placeholder_rejects_non_numeric_values(self, value):
        with pytest.raises(ListError) as exc_info:
            interpolate_sql_template("> %d", value, str)
        assert exc_info.value.error_code == ErrorCode.INVALID_OPTIONS

    @pytest.mark.parametrize("template", ["LIKE 'a%'", "= %c", "= %(value)s"])
    def test_unsupported_placeholder_is_a_configuration_error(self, template):
        with pytest.raises(ListError) as exc_info:
            interpolate_sql_template(template, "x", str)
        assert exc_info.value.error_code == ErrorCode.CONFIG_INVALID

    @pytest.mark.parametrize("value, blank", [(None, True), ("", True), ("  ", True), ([], True), (0, False), ("x", False)])
    def test_is_blank(self, value, blank):
        assert is_blank(value) is blank
