"""Unit tests for the demo report generator."""

import time

import httpx
import pytest

from java_code_analyzer.analysis.demo import generate_demo_result
from java_code_analyzer.analysis.models import AnalysisOptions

USER_DAO = """public class UserDao {
    public User find(Connection conn, String id) throws Exception {
        String sql = "SELECT * FROM users WHERE id = " + id;
        try {
            Statement st = conn.createStatement();
            return map(st.executeQuery(sql));
        } catch (SQLException e) {
            e.printStackTrace();
        }
        System.out.println("not found");
        return null;
    }
}"""

REPORT_BUILDER = """public class Report {
    String build(List<String> items) {
        String result = "";
        for (String item : items) {
            result += item;
        }
        if (result == "") {
            return null;
        }
        return result;
    }
}"""

PLAIN = "public class Empty {\n}\n"


@pytest.fixture(autouse=True)
def no_network(monkeypatch):
    """Fail loudly if anything tries to reach the network."""

    async def refuse(*args, **kwargs):
        raise AssertionError("demo generator must not perform network I/O")

    monkeypatch.setattr(httpx.AsyncClient, "send", refuse)
    monkeypatch.setattr(httpx.Client, "send", refuse)


class TestRuleFindings:
    def test_findings_point_at_matching_lines(self):
        data = generate_demo_result(USER_DAO).to_dict()

        found = [(i["line"], i["severity"], i["title"]) for i in data["issues"]]
        assert found == [
            (3, "critical", "SQL query built by string concatenation"),
            (8, "low", "printStackTrace() used for error reporting"),
            (10, "low", "Console output instead of logger"),
        ]
        assert data["summary"] == {
            "critical": 1,
            "high": 0,
            "medium": 0,
            "low": 2,
            "total": 3,
        }

    def test_snippet_is_the_matching_line(self):
        data = generate_demo_result(USER_DAO).to_dict()

        assert data["issues"][0]["codeSnippet"] == (
            'String sql = "SELECT * FROM users WHERE id = " + id;'
        )

    def test_loop_and_equality_rules(self):
        data = generate_demo_result(REPORT_BUILDER).to_dict()

        titles = {i["title"]: i["line"] for i in data["issues"]}
        assert titles["String concatenation inside loop"] == 5
        assert titles["String compared with =="] == 7

    def test_options_restrict_categories(self):
        options = AnalysisOptions(
            security=True, performance=False, bugs=False, style=False
        )

        data = generate_demo_result(USER_DAO, options).to_dict()

        assert [i["severity"] for i in data["issues"]] == ["critical"]
        assert len(data["suggestions"]) == 1

    def test_all_options_disabled_means_all_categories(self):
        options = AnalysisOptions(
            security=False, performance=False, bugs=False, style=False
        )

        with_none = generate_demo_result(USER_DAO, options).to_dict()
        with_all = generate_demo_result(USER_DAO).to_dict()

        assert with_none == with_all


class TestSampleFindings:
    def test_sample_findings_when_no_rule_matches(self):
        data = generate_demo_result(PLAIN).to_dict()

        assert 1 <= len(data["issues"]) <= 3
        for issue in data["issues"]:
            assert issue["title"].startswith("Example: ")
            assert 1 <= issue["line"] <= data["metrics"]["lines"]

    def test_same_code_same_report(self):
        assert generate_demo_result(PLAIN).to_dict() == generate_demo_result(
            PLAIN
        ).to_dict()


class TestInvariants:
    @pytest.mark.parametrize("code", [USER_DAO, REPORT_BUILDER, PLAIN, "x" * 10_000])
    def test_summary_matches_issues(self, code):
        data = generate_demo_result(code).to_dict()
        summary = data["summary"]

        assert summary["total"] == len(data["issues"])
        assert summary["total"] == sum(
            summary[level] for level in ("critical", "high", "medium", "low")
        )
        assert 0 <= data["metrics"]["maintainability"] <= 100
        assert 0 <= data["metrics"]["security"] <= 100
        assert 1 <= data["metrics"]["complexity"] <= 50

    def test_bounded_runtime_on_maximum_input(self):
        code = ("if (a == \"b\") { System.out.println(x); }\n" * 400)[:10_000]

        start = time.perf_counter()
        generate_demo_result(code)

        assert time.perf_counter() - start < 2.0
