#!/usr/bin/env python3
"""
Integration tests for the database CLI (blogdb).

Runs the CLI against a temporary database seeded with the shared blog graph.
"""
import pytest
import yaml
from click.testing import CliRunner

from blogdata.database.cli import cli
from blogdata.database.manager import BlogDB


class TestDatabaseCLI:
    """Test database CLI commands with a temporary database."""

    @pytest.fixture
    def runner(self):
        """Create Click test runner."""
        return CliRunner()

    @pytest.fixture
    def test_dirs(self, test_db_path, tmp_dir):
        """Paths handed to the CLI."""
        return {"db_path": test_db_path, "log_dir": tmp_dir / "logs"}

    @pytest.fixture
    def seeded(self, test_dirs, blog_graph):
        """Seeded database at test_dirs["db_path"]."""
        return blog_graph

    def invoke_cli(self, runner, test_dirs, args, **kwargs):
        """Helper to invoke CLI with test configuration."""
        base_args = [
            "--db-path", str(test_dirs["db_path"]),
            "--log-dir", str(test_dirs["log_dir"]),
        ]
        return runner.invoke(cli, base_args + args, obj={}, **kwargs)

    def test_cli_help(self, runner):
        """CLI help lists the command groups."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "query" in result.output
        assert "assign" in result.output

    def test_init_command(self, runner, tmp_dir):
        """'init' creates the database file and schema."""
        dirs = {"db_path": tmp_dir / "fresh.db", "log_dir": tmp_dir / "logs"}

        result = self.invoke_cli(runner, dirs, ["init"])

        assert result.exit_code == 0
        assert "Initializing database schema" in result.output
        assert dirs["db_path"].exists()

    def test_stats(self, runner, test_dirs, seeded):
        """'stats' reports post and taxonomy counts."""
        result = self.invoke_cli(runner, test_dirs, ["stats"])

        assert result.exit_code == 0
        assert "Published: 5" in result.output
        assert "Unpublished: 1" in result.output
        assert "Categories: 5 (3 in use)" in result.output
        assert "Tags: 3" in result.output

    def test_latest(self, runner, test_dirs, seeded):
        """'query latest' pages through published posts."""
        result = self.invoke_cli(runner, test_dirs, ["query", "latest", "--count", "2"])

        assert result.exit_code == 0
        assert "(2 of 5)" in result.output
        lines = [line for line in result.output.splitlines() if line.startswith("  ")]
        assert "new-year" in lines[0]
        assert "same-day" in lines[1]

    def test_latest_for_category(self, runner, test_dirs, seeded):
        """'query latest --category' scopes the listing."""
        result = self.invoke_cli(runner, test_dirs, ["query", "latest", "--category", "python"])

        assert result.exit_code == 0
        assert "Category: Python (1 of 1)" in result.output
        assert "orm-intro" in result.output

    def test_latest_unpublished(self, runner, test_dirs, seeded):
        """'query latest --unpublished' lists drafts."""
        result = self.invoke_cli(runner, test_dirs, ["query", "latest", "--unpublished"])

        assert result.exit_code == 0
        assert "draft" in result.output
        assert "orm-intro" not in result.output

    def test_latest_rejects_both_scopes(self, runner, test_dirs, seeded):
        """--category and --tag cannot be combined."""
        result = self.invoke_cli(
            runner, test_dirs, ["query", "latest", "--category", "python", "--tag", "sql"]
        )
        assert result.exit_code == 2

    def test_latest_negative_count(self, runner, test_dirs, seeded):
        """Invalid paging is reported as an error."""
        result = self.invoke_cli(runner, test_dirs, ["query", "latest", "--count", "-1"])

        assert result.exit_code == 1
        assert "ValidationError" in result.output

    def test_month(self, runner, test_dirs, seeded):
        """'query month' lists the month including the boundary post."""
        result = self.invoke_cli(runner, test_dirs, ["query", "month", "2024", "1"])

        assert result.exit_code == 0
        assert "2024-01 (4 of 4)" in result.output
        assert "new-year" in result.output

    def test_month_invalid(self, runner, test_dirs, seeded):
        """An invalid month exits with an error."""
        result = self.invoke_cli(runner, test_dirs, ["query", "month", "2024", "13"])
        assert result.exit_code == 1

    def test_post_yaml(self, runner, test_dirs, seeded):
        """'query post' prints the post graph as YAML."""
        result = self.invoke_cli(runner, test_dirs, ["query", "post", "orm-intro"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["slug"] == "orm-intro"
        assert data["main_category"] == {
            "slug": "python",
            "title": "Python",
            "parent": "technology",
        }
        assert data["categories"] == ["python", "technology"]
        assert data["tags"] == ["orm", "sql"]
        assert data["date"] == "2024-01-10T09:30:00+00:00"

    def test_post_not_found(self, runner, test_dirs, seeded):
        """A missing slug exits with 1 and a short message."""
        result = self.invoke_cli(runner, test_dirs, ["query", "post", "missing"])

        assert result.exit_code == 1
        assert "NotFoundError" in result.output

    def test_category_yaml(self, runner, test_dirs, seeded):
        """'query category' lists the category's posts newest first."""
        result = self.invoke_cli(runner, test_dirs, ["query", "category", "technology"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert data["parent"] is None
        assert [p["slug"] for p in data["posts"]] == ["same-day", "sql-tips", "orm-intro"]

    def test_tag_yaml(self, runner, test_dirs, seeded):
        """'query tag' lists the tag's posts."""
        result = self.invoke_cli(runner, test_dirs, ["query", "tag", "sql"])

        assert result.exit_code == 0
        data = yaml.safe_load(result.output)
        assert [p["slug"] for p in data["posts"]] == ["sql-tips", "orm-intro"]

    def test_categories_in_use(self, runner, test_dirs, seeded):
        """'query categories --in-use' hides unused categories."""
        result = self.invoke_cli(runner, test_dirs, ["query", "categories", "--in-use"])

        assert result.exit_code == 0
        assert "Categories (3)" in result.output
        assert "archive" not in result.output

    def test_tags(self, runner, test_dirs, seeded):
        """'query tags' lists every tag."""
        result = self.invoke_cli(runner, test_dirs, ["query", "tags"])

        assert result.exit_code == 0
        assert "Tags (3)" in result.output

    def test_archive(self, runner, test_dirs, seeded):
        """'query archive' prints counts per year and month."""
        result = self.invoke_cli(runner, test_dirs, ["query", "archive"])

        assert result.exit_code == 0
        assert "2024:    4 posts" in result.output
        assert "2023:    1 posts" in result.output

    def test_assign_tags(self, runner, test_dirs, seeded):
        """'assign tags' replaces the post's tags."""
        misc = seeded["tags"]["misc"]

        result = self.invoke_cli(
            runner, test_dirs, ["assign", "tags", "orm-intro", str(misc.id), "999"]
        )

        assert result.exit_code == 0
        assert "1 tags assigned" in result.output

        db = BlogDB(db_path=test_dirs["db_path"])
        with db.session_scope() as session:
            repo = db.content(session)
            tags = repo.tags_for_post(repo.get_by_slug("orm-intro"))
            assert [t.slug for t in tags] == ["misc"]
        db.dispose()

    def test_assign_categories_clear(self, runner, test_dirs, seeded):
        """'assign categories' with no ids clears the set."""
        result = self.invoke_cli(runner, test_dirs, ["assign", "categories", "first-post"])

        assert result.exit_code == 0
        assert "0 categories assigned" in result.output

    def test_assign_unknown_post(self, runner, test_dirs, seeded):
        """Assigning to a missing post fails cleanly."""
        result = self.invoke_cli(runner, test_dirs, ["assign", "tags", "missing", "1"])
        assert result.exit_code == 1
