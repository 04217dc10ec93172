"""Tests for CLI command wiring."""

import duckdb
import pytest
from typer.testing import CliRunner

from gridsort import __version__
from gridsort.cli import app

runner = CliRunner()

CONFIG = """
connection:
  type: duckdb
  path: teams.db
entities:
  - name: Team
    table: Team
    fields: [Name, City]
    relations:
      - name: Cheerleader
        target: Cheerleader
  - name: Cheerleader
    table: Cheerleader
    fields: [Name]
listings:
  - name: teams
    entity: Team
    sortable:
      City: City
      Cheerleader Name: Cheerleader.Name
"""


@pytest.fixture
def config_path(tmp_path):
    conn = duckdb.connect(str(tmp_path / "teams.db"))
    conn.execute("""CREATE TABLE "Team" ("ID" INTEGER, "Name" VARCHAR, "City" VARCHAR, "CheerleaderID" INTEGER)""")
    conn.execute("""CREATE TABLE "Cheerleader" ("ID" INTEGER, "Name" VARCHAR)""")
    conn.execute("""INSERT INTO "Team" VALUES (1, 'Cats', 'Auckland', 2), (2, 'Dogs', 'Cologne', 1)""")
    conn.execute("""INSERT INTO "Cheerleader" VALUES (1, 'Alice'), (2, 'Bella')""")
    conn.close()

    path = tmp_path / "gridsort.yaml"
    path.write_text(CONFIG)
    return path


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert f"gridsort {__version__}" in result.output


def test_info(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "info"])

    assert result.exit_code == 0
    assert "● teams" in result.output
    assert "Sortable: Cheerleader Name -> Cheerleader.Name" in result.output


def test_sql(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "sql", "teams", "Cheerleader Name", "-d", "DESC"])

    assert result.exit_code == 0
    assert 'LEFT JOIN "Cheerleader" AS "cheerleader_Cheerleader"' in result.output
    assert 'ORDER BY "cheerleader_Cheerleader"."Name" DESC' in result.output


def test_sql_invalid_column(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "sql", "teams", "INVALID"])

    assert result.exit_code == 1
    assert "Invalid SortColumn: INVALID" in result.output


def test_plan(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "plan", "teams", "Cheerleader Name"])

    assert result.exit_code == 0
    assert "Join Plan" in result.output
    assert 'ON "cheerleader_Cheerleader"."ID" = "Team"."CheerleaderID"' in result.output


def test_query(config_path):
    """Test rows come back in sorted order as CSV."""
    result = runner.invoke(app, ["--config", str(config_path), "query", "teams", "Cheerleader Name"])

    assert result.exit_code == 0
    assert result.output.index("Cologne") < result.output.index("Auckland")


def test_query_to_file(config_path, tmp_path):
    output = tmp_path / "teams.csv"

    result = runner.invoke(
        app, ["--config", str(config_path), "query", "teams", "City", "--direction", "desc", "-o", str(output)]
    )

    assert result.exit_code == 0
    lines = output.read_text().splitlines()
    assert lines[0] == "ID,Name,City,CheerleaderID"
    assert lines[1].startswith("2,Dogs,Cologne")


def test_unknown_listing(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "sql", "players", "City"])

    assert result.exit_code == 1
    assert "Listing players not found" in result.output


def test_validate(config_path):
    result = runner.invoke(app, ["--config", str(config_path), "validate"])

    assert result.exit_code == 0
    assert "1 listing(s) valid" in result.output


def test_validate_reports_broken_paths(tmp_path):
    path = tmp_path / "gridsort.yaml"
    path.write_text(CONFIG.replace("Cheerleader Name: Cheerleader.Name", "Coach Name: Coach.Name"))

    result = runner.invoke(app, ["--config", str(path), "validate"])

    assert result.exit_code == 1
    assert "Listing 'teams': Sort field 'Coach Name': Relation 'Coach' not found on entity 'Team'" in result.output


def test_missing_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    result = runner.invoke(app, ["info"])

    assert result.exit_code == 1
    assert "No config file found" in result.output
