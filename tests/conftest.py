"""Pytest configuration and fixtures."""

import duckdb
import pytest

from gridsort import EntityDef, RelationDef, SchemaProvider


def team_entities() -> list[EntityDef]:
    """Teams with cheerleaders, hats and moms.

    Team <- TeamGroup and Cheerleader <- Mom are class-table-inheritance
    hierarchies sharing the ID column.
    """
    return [
        EntityDef(
            name="Team",
            table="Team",
            discriminator="ClassName",
            fields=["Name", "City"],
            relations=[
                RelationDef(name="Cheerleader", target="Cheerleader"),
                RelationDef(name="CheerleadersMom", target="Mom"),
                RelationDef(name="Players", target="Player", kind="has_many", foreign_key="TeamID"),
                RelationDef(
                    name="Sponsors",
                    target="Sponsor",
                    kind="many_many",
                    join_table="Team_Sponsors",
                    foreign_key="TeamID",
                    target_key="SponsorID",
                ),
            ],
        ),
        EntityDef(name="TeamGroup", table="TeamGroup", extends="Team", fields=["GroupName"]),
        EntityDef(
            name="Cheerleader",
            table="Cheerleader",
            discriminator="ClassName",
            fields=["Name"],
            relations=[RelationDef(name="Hat", target="CheerleaderHat")],
        ),
        EntityDef(name="Mom", table="Mom", extends="Cheerleader", fields=["NickName"]),
        EntityDef(name="CheerleaderHat", table="CheerleaderHat", fields=["Colour"]),
        EntityDef(name="Player", table="Player", fields=["Name"]),
        EntityDef(name="Sponsor", table="Sponsor", fields=["Title"]),
    ]


@pytest.fixture
def provider():
    return SchemaProvider.from_entities(team_entities())


@pytest.fixture
def team_db():
    """In-memory database with four team groups.

    Cities sort Auckland, Cologne, Melbourne, Wellington; cheerleader names
    sort in the reverse order; hat colours sort Cologne, Auckland,
    Wellington, Melbourne for both cheerleaders and moms.
    """
    conn = duckdb.connect(":memory:")

    conn.execute(
        """CREATE TABLE "Team" ("ID" INTEGER, "ClassName" VARCHAR, "Name" VARCHAR, "City" VARCHAR,
        "CheerleaderID" INTEGER, "CheerleadersMomID" INTEGER)"""
    )
    conn.execute("""CREATE TABLE "TeamGroup" ("ID" INTEGER, "GroupName" VARCHAR)""")
    conn.execute("""CREATE TABLE "Cheerleader" ("ID" INTEGER, "ClassName" VARCHAR, "Name" VARCHAR, "HatID" INTEGER)""")
    conn.execute("""CREATE TABLE "Mom" ("ID" INTEGER, "NickName" VARCHAR)""")
    conn.execute("""CREATE TABLE "CheerleaderHat" ("ID" INTEGER, "Colour" VARCHAR)""")

    conn.execute(
        """INSERT INTO "Team" VALUES
        (3, 'TeamGroup', 'Bears', 'Melbourne', 3, 7),
        (1, 'TeamGroup', 'Cats', 'Auckland', 1, 5),
        (4, 'TeamGroup', 'Owls', 'Wellington', 4, 8),
        (2, 'TeamGroup', 'Dogs', 'Cologne', 2, 6)"""
    )
    conn.execute("""INSERT INTO "TeamGroup" VALUES (1, 'North'), (2, 'South'), (3, 'East'), (4, 'West')""")
    conn.execute(
        """INSERT INTO "Cheerleader" VALUES
        (1, 'Cheerleader', 'Dana', 1), (2, 'Cheerleader', 'Clara', 2),
        (3, 'Cheerleader', 'Bella', 3), (4, 'Cheerleader', 'Alice', 4),
        (5, 'Mom', 'Erin', 5), (6, 'Mom', 'Fay', 6), (7, 'Mom', 'Gina', 7), (8, 'Mom', 'Hope', 8)"""
    )
    conn.execute("""INSERT INTO "Mom" VALUES (5, 'E'), (6, 'F'), (7, 'G'), (8, 'H')""")
    conn.execute(
        """INSERT INTO "CheerleaderHat" VALUES
        (1, 'Blue'), (2, 'Amber'), (3, 'Denim'), (4, 'Crimson'),
        (5, 'Blue'), (6, 'Amber'), (7, 'Denim'), (8, 'Crimson')"""
    )

    yield conn
    conn.close()


@pytest.fixture
def entities():
    return team_entities()
