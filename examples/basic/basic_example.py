"""Basic example of using gridsort."""

from gridsort import EntityDef, Listing, RelationDef, SchemaProvider

# Describe the entities
provider = SchemaProvider.from_entities(
    [
        EntityDef(
            name="Team",
            table="Team",
            fields=["Name", "City"],
            relations=[RelationDef(name="Cheerleader", target="Cheerleader")],
        ),
        EntityDef(
            name="Cheerleader",
            table="Cheerleader",
            fields=["Name"],
            relations=[RelationDef(name="Hat", target="CheerleaderHat")],
        ),
        EntityDef(name="CheerleaderHat", table="CheerleaderHat", fields=["Colour"]),
    ]
)

# Create a listing with its sortable fields
teams = Listing(
    provider,
    "Team",
    sortable={
        "City": "City",
        "Cheerleader": "Cheerleader.Name",
        "Hat": "Cheerleader.Hat.Colour",
    },
    columns={"Name": "Team", "City": "City"},
)

teams.conn.execute("""CREATE TABLE "Team" ("ID" INTEGER, "Name" VARCHAR, "City" VARCHAR, "CheerleaderID" INTEGER)""")
teams.conn.execute("""CREATE TABLE "Cheerleader" ("ID" INTEGER, "Name" VARCHAR, "HatID" INTEGER)""")
teams.conn.execute("""CREATE TABLE "CheerleaderHat" ("ID" INTEGER, "Colour" VARCHAR)""")
teams.conn.execute("""INSERT INTO "Team" VALUES (1, 'Cats', 'Auckland', 2), (2, 'Dogs', 'Cologne', 1)""")
teams.conn.execute("""INSERT INTO "Cheerleader" VALUES (1, 'Alice', 2), (2, 'Bella', 1)""")
teams.conn.execute("""INSERT INTO "CheerleaderHat" VALUES (1, 'Blue'), (2, 'Amber')""")

# Example 1: Sort by a column of the listed entity
print("=" * 80)
print("Example 1: Sort by City")
print("=" * 80)
print(teams.compile("City"))
print(teams.sort("City").column("City"))
print()

# Example 2: Sort through two relations
print("=" * 80)
print("Example 2: Sort by the cheerleader's hat colour, descending")
print("=" * 80)
print(teams.applier.plan("Team", teams.applier.validate("Hat")))
print(teams.sort("Hat", "desc").column("City"))
print()

# Example 3: Header state
print("=" * 80)
print("Example 3: Header columns for the current sort")
print("=" * 80)
for header in teams.headers("City", "asc"):
    print(header.title, header.sortable, header.direction, header.action_name)
