#!/usr/bin/env python3
"""Seed the Bible Map database with a starter dataset.

Creates the location registry, the persons who have footsteps, a handful of
events, journeys with stops, verses, themes and relationships.

Run from the repository root:

    python -m scripts.seed           # seed an empty database
    python -m scripts.seed --reset   # drop every table and seed again

Seeding is skipped when the registry already holds locations.
"""

import argparse

from database import drop_db, init_db, session_scope
from logic.reference_data import known_place
from models import (
    BibleVerse,
    Event,
    Journey,
    JourneyStop,
    Location,
    Person,
    PersonRelationship,
    Theme,
)

# name, hebrew, greek, country, type, description, significance
LOCATIONS = [
    ("Jerusalem", "ירושלים", "Ἱεροσόλυμα", "Israel", "city",
     "City of David and site of the temple.", "Centre of worship, crucifixion and resurrection."),
    ("Bethlehem", "בית לחם", "Βηθλεέμ", "Palestine", "town",
     "Small town in the hills of Judah.", "Birthplace of David and of Jesus."),
    ("Nazareth", None, "Ναζαρέτ", "Israel", "town",
     "Village in lower Galilee.", "Home town of Jesus."),
    ("Hebron", "חברון", None, "Palestine", "city",
     "Ancient city in the Judean hills.", "Home of Abraham and burial place of the patriarchs."),
    ("Ur", "אור", None, "Iraq", "city",
     "Sumerian city near the Euphrates.", "Abraham's birthplace."),
    ("Haran", "חרן", None, "Turkey", "city",
     "Trading city in upper Mesopotamia.", "Where Abraham's family settled on the way to Canaan."),
    ("Shechem", "שכם", None, "Palestine", "city",
     "City between Mount Ebal and Mount Gerizim.", "First place Abraham built an altar in Canaan."),
    ("Bethel", "בית אל", None, "Palestine", "town",
     "Town north of Jerusalem.", "Where Abraham and later Jacob worshipped."),
    ("Egypt", "מצרים", "Αἴγυπτος", "Egypt", "region",
     "Kingdom of the Nile valley.", "Place of Israel's slavery and of the Exodus."),
    ("Red Sea", "ים סוף", None, "Egypt", "sea",
     "Sea crossed by Israel leaving Egypt.", "Site of the parting of the waters."),
    ("Mount Sinai", "הר סיני", None, "Egypt", "mountain",
     "Mountain in the Sinai peninsula.", "Where the law was given to Moses."),
    ("Kadesh Barnea", "קדש ברנע", None, "Egypt", "oasis",
     "Oasis on the southern edge of Canaan.", "Base of Israel during the wilderness years."),
    ("Mount Nebo", "הר נבו", None, "Jordan", "mountain",
     "Peak overlooking the Jordan valley.", "Where Moses saw the promised land and died."),
    ("Jordan River", "ירדן", "Ἰορδάνης", "Israel", "river",
     "River flowing from Galilee to the Dead Sea.", "Site of the baptism of Jesus."),
    ("Capernaum", None, "Καφαρναούμ", "Israel", "town",
     "Fishing town on the Sea of Galilee.", "Centre of Jesus' Galilean ministry."),
    ("Sea of Galilee", "ים כנרת", None, "Israel", "lake",
     "Freshwater lake in northern Israel.", "Where Jesus called his first disciples."),
    ("Golgotha", "גלגלתא", "Γολγοθᾶ", "Israel", "site",
     "Hill outside the walls of Jerusalem.", "Place of the crucifixion."),
    ("Damascus", "דמשק", "Δαμασκός", "Syria", "city",
     "Capital of Aram.", "Where Paul was converted."),
    ("Tarsus", None, "Ταρσός", "Turkey", "city",
     "Chief city of Cilicia.", "Paul's birthplace."),
    ("Antioch", None, "Ἀντιόχεια", "Turkey", "city",
     "Capital of Roman Syria.", "Where believers were first called Christians."),
    ("Cyprus", None, "Κύπρος", "Cyprus", "island",
     "Island in the eastern Mediterranean.", "First stop of Paul's first journey."),
    ("Pisidian Antioch", None, None, "Turkey", "city",
     "Roman colony in Pisidia.", "Paul's sermon in the synagogue."),
    ("Iconium", None, "Ἰκόνιον", "Turkey", "city",
     "City of Lycaonia.", "Many Jews and Greeks believed."),
    ("Lystra", None, "Λύστρα", "Turkey", "town",
     "Roman colony in Lycaonia.", "Paul healed a lame man and was stoned."),
    ("Derbe", None, "Δέρβη", "Turkey", "town",
     "Frontier town of Lycaonia.", "Turning point of the first journey."),
    ("Ephesus", None, "Ἔφεσος", "Turkey", "city",
     "Port city of Asia Minor.", "Paul's three-year ministry."),
    ("Corinth", None, "Κόρινθος", "Greece", "city",
     "Commercial city on the isthmus.", "Paul stayed eighteen months."),
    ("Rome", None, "Ῥώμη", "Italy", "city",
     "Capital of the empire.", "Where Paul and Peter were martyred."),
]

# name, hebrew, greek, testament, gender, birth, death, birth place, death place, description
PERSONS = [
    ("Abraham", "אברהם", None, "OLD", "MALE", -2000, -1825, "Ur", "Hebron",
     "Father of many nations, called by God to leave Ur."),
    ("Sarah", "שרה", None, "OLD", "FEMALE", -1990, -1860, "Ur", "Hebron",
     "Wife of Abraham and mother of Isaac."),
    ("Isaac", "יצחק", None, "OLD", "MALE", -1900, -1720, "Hebron", "Hebron",
     "Son of the promise, born to Abraham and Sarah."),
    ("Moses", "משה", "Μωϋσῆς", "OLD", "MALE", -1526, -1406, "Egypt", "Mount Nebo",
     "Led Israel out of Egypt and received the law at Sinai."),
    ("Aaron", "אהרן", None, "OLD", "MALE", -1529, -1407, "Egypt", None,
     "Brother of Moses and first high priest."),
    ("King David", "דוד", None, "OLD", "MALE", -1040, -970, "Bethlehem", "Jerusalem",
     "Shepherd, psalmist and king of Israel."),
    ("Solomon", "שלמה", None, "OLD", "MALE", -990, -931, "Jerusalem", "Jerusalem",
     "Son of David who built the temple."),
    ("Jesus Christ", "ישוע", "Ἰησοῦς", "NEW", "MALE", -4, 30, "Bethlehem", "Golgotha",
     "Teacher and healer from Nazareth, crucified and risen."),
    ("Mary (Mother of Jesus)", "מרים", "Μαρία", "NEW", "FEMALE", -18, None, "Nazareth", None,
     "Mother of Jesus."),
    ("John the Baptist", None, "Ἰωάννης", "NEW", "MALE", -4, 29, None, None,
     "Prophet who prepared the way and baptised in the Jordan."),
    ("Peter", None, "Πέτρος", "NEW", "MALE", 1, 64, None, "Rome",
     "Fisherman from Galilee and leader of the twelve."),
    ("Paul the Apostle", None, "Παῦλος", "NEW", "MALE", 5, 67, "Tarsus", "Rome",
     "Pharisee turned apostle to the Gentiles."),
]

# book, chapter, start, end, text
VERSES = [
    ("Genesis", 12, 1, None,
     "Now the LORD had said unto Abram, Get thee out of thy country, and from thy kindred, "
     "and from thy father's house, unto a land that I will shew thee."),
    ("Exodus", 20, 2, 3,
     "I am the LORD thy God, which have brought thee out of the land of Egypt, out of the "
     "house of bondage. Thou shalt have no other gods before me."),
    ("Psalms", 23, 1, None, "The LORD is my shepherd; I shall not want."),
    ("John", 3, 16, None,
     "For God so loved the world, that he gave his only begotten Son, that whosoever "
     "believeth in him should not perish, but have everlasting life."),
    ("Romans", 5, 8, None,
     "But God commendeth his love toward us, in that, while we were yet sinners, Christ "
     "died for us."),
    ("Hebrews", 11, 8, None,
     "By faith Abraham, when he was called to go out into a place which he should after "
     "receive for an inheritance, obeyed; and he went out, not knowing whither he went."),
    ("Acts", 9, 4, None,
     "And he fell to the earth, and heard a voice saying unto him, Saul, Saul, why "
     "persecutest thou me?"),
]

# title, year, year range, testament, category, location, persons, verses, description
EVENTS = [
    ("Call of Abraham", -1921, None, "OLD", "PATRIARCHS", "Haran", ["Abraham"],
     ["Genesis 12:1"], "God calls Abram to leave his country for a promised land."),
    ("Birth of Isaac", -1900, None, "OLD", "PATRIARCHS", "Hebron", ["Abraham", "Sarah", "Isaac"],
     [], "The son of the promise is born."),
    ("The Burning Bush", -1447, None, "OLD", "EXODUS", "Mount Sinai", ["Moses"],
     [], "God speaks to Moses from a bush that is not consumed."),
    ("Crossing of the Red Sea", -1446, None, "OLD", "EXODUS", "Red Sea", ["Moses", "Aaron"],
     [], "Israel passes through the sea on dry ground."),
    ("Song of Moses", None, "c. 1446 BC", "OLD", "EXODUS", "Red Sea", ["Moses"],
     [], "Moses and Israel sing after the crossing."),
    ("Giving of the Law", -1446, None, "OLD", "EXODUS", "Mount Sinai", ["Moses"],
     ["Exodus 20:2-3"], "The ten commandments are given at Sinai."),
    ("Dedication of the Temple", -959, None, "OLD", "MONARCHY", "Jerusalem", ["Solomon"],
     [], "Solomon dedicates the first temple."),
    ("Birth of Jesus", -4, None, "NEW", "MINISTRY", "Bethlehem",
     ["Jesus Christ", "Mary (Mother of Jesus)"], [], "Jesus is born in Bethlehem."),
    ("Baptism of Jesus", 27, None, "NEW", "MINISTRY", "Jordan River",
     ["Jesus Christ", "John the Baptist"], [], "John baptises Jesus in the Jordan."),
    ("Calling of the Fishermen", 28, None, "NEW", "MINISTRY", "Sea of Galilee",
     ["Jesus Christ", "Peter"], [], "Peter and Andrew leave their nets."),
    ("Crucifixion", 30, None, "NEW", "CRUCIFIXION", "Golgotha",
     ["Jesus Christ", "Mary (Mother of Jesus)"], ["John 3:16", "Romans 5:8"],
     "Jesus is crucified outside Jerusalem."),
    ("Conversion of Saul", 34, None, "NEW", "CHURCH", "Damascus", ["Paul the Apostle"],
     ["Acts 9:4"], "Saul meets the risen Jesus on the road to Damascus."),
]

# title, person, start, end, distance km, duration, purpose, stop names
JOURNEYS = [
    ("Abraham's Journey to Canaan", "Abraham", -1925, -1921, 1600.0, "Several years",
     "Obedience to God's call", ["Ur", "Haran", "Shechem", "Bethel", "Hebron"]),
    ("The Exodus", "Moses", -1446, -1406, 600.0, "40 years",
     "Deliverance from Egypt", ["Egypt", "Red Sea", "Mount Sinai", "Kadesh Barnea", "Mount Nebo"]),
    ("First Missionary Journey", "Paul the Apostle", 46, 48, 2200.0, "About 2 years",
     "Preaching to Jews and Gentiles",
     ["Antioch", "Cyprus", "Pisidian Antioch", "Iconium", "Lystra", "Derbe"]),
]

# title, category, summary, verse refs, applications
THEMES = [
    ("Faith", "FAITH", "Trusting God's promises before they are seen.",
     ["Hebrews 11:8", "Genesis 12:1"], ["Step out when called", "Trust in waiting"]),
    ("Love of God", "LOVE", "God's self-giving love for the world.",
     ["John 3:16", "Romans 5:8"], ["Love others as you are loved"]),
    ("Covenant", "COVENANT", "God binding himself to his people by promise.",
     ["Exodus 20:2-3"], ["Remember God's faithfulness"]),
    ("Salvation", "SALVATION", "Rescue from sin and death.",
     ["John 3:16"], ["Receive grace", "Share the good news"]),
]

THEME_LINKS = [
    ("Faith", "Covenant"),
    ("Love of God", "Salvation"),
    ("Salvation", "Faith"),
]

# from, to, type
RELATIONSHIPS = [
    ("Abraham", "Isaac", "PARENT"),
    ("Abraham", "Sarah", "SPOUSE"),
    ("Isaac", "Abraham", "CHILD"),
    ("Moses", "Aaron", "SIBLING"),
    ("King David", "Solomon", "PARENT"),
    ("Mary (Mother of Jesus)", "Jesus Christ", "PARENT"),
    ("Jesus Christ", "Peter", "MENTOR"),
    ("John the Baptist", "Jesus Christ", "ALLY"),
    ("Paul the Apostle", "Peter", "ALLY"),
]


def _reference(book: str, chapter: int, start: int, end) -> str:
    ref = f"{book} {chapter}:{start}"
    if end and end != start:
        ref += f"-{end}"
    return ref


def seed(db) -> bool:
    """Insert the starter dataset into an empty database.

    Args:
        db: Database session.

    Returns:
        True if data was inserted, False if the registry was not empty.
    """
    if db.query(Location).count() > 0:
        print("Database already seeded, skipping (use --reset to start over)")
        return False

    locations = {}
    for name, hebrew, greek, country, loc_type, description, significance in LOCATIONS:
        place = known_place(name)
        locations[name] = Location(
            name=name,
            name_hebrew=hebrew,
            name_greek=greek,
            modern_name=place.modern_name,
            country=country,
            location_type=loc_type,
            latitude=place.latitude,
            longitude=place.longitude,
            description=description,
            significance=significance,
        )
    db.add_all(locations.values())

    persons = {}
    for name, hebrew, greek, testament, gender, born, died, born_at, died_at, description in PERSONS:
        persons[name] = Person(
            name=name,
            name_hebrew=hebrew,
            name_greek=greek,
            testament=testament,
            gender=gender,
            birth_year=born,
            death_year=died,
            birth_place=locations.get(born_at),
            death_place=locations.get(died_at),
            description=description,
        )
    db.add_all(persons.values())

    verses = {}
    for book, chapter, start, end, text in VERSES:
        verses[_reference(book, chapter, start, end)] = BibleVerse(
            book=book, chapter=chapter, verse_start=start, verse_end=end, text=text
        )
    db.add_all(verses.values())

    for title, year, year_range, testament, category, at, who, refs, description in EVENTS:
        db.add(
            Event(
                title=title,
                year=year,
                year_range=year_range,
                testament=testament,
                category=category,
                location=locations[at],
                persons=[persons[p] for p in who],
                verses=[verses[r] for r in refs],
                description=description,
            )
        )

    for title, who, start, end, distance, duration, purpose, stop_names in JOURNEYS:
        db.add(
            Journey(
                title=title,
                person=persons[who],
                start_year=start,
                end_year=end,
                distance=distance,
                duration=duration,
                purpose=purpose,
                description=f"{title}: {' to '.join([stop_names[0], stop_names[-1]])}.",
                stops=[
                    JourneyStop(order_index=index, location=locations[stop])
                    for index, stop in enumerate(stop_names)
                ],
            )
        )

    themes = {}
    for title, category, summary, refs, applications in THEMES:
        themes[title] = Theme(
            title=title,
            category=category,
            summary=summary,
            description=summary,
            applications=applications,
            verses=[verses[r] for r in refs],
        )
    db.add_all(themes.values())
    for source, target in THEME_LINKS:
        themes[source].related_themes.append(themes[target])

    for source, target, rel_type in RELATIONSHIPS:
        db.add(
            PersonRelationship(
                person_from=persons[source],
                person_to=persons[target],
                relationship_type=rel_type,
            )
        )

    db.commit()
    print(
        f"Seeded {len(locations)} locations, {len(persons)} persons, {len(EVENTS)} events, "
        f"{len(JOURNEYS)} journeys, {len(themes)} themes, {len(verses)} verses"
    )
    return True


def main():
    parser = argparse.ArgumentParser(description="Seed the Bible Map database")
    parser.add_argument("--reset", action="store_true", help="drop all tables before seeding")
    args = parser.parse_args()

    if args.reset:
        print("Dropping all tables...")
        drop_db()
    init_db()

    with session_scope() as db:
        seed(db)


if __name__ == "__main__":
    main()
