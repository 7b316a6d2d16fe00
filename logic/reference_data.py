"""
Static biblical reference data.

This module holds the hand-authored footsteps of a small set of major
figures and the coordinates of the ancient places those footsteps name.
Everything here is immutable and loaded once at import time; callers go
through ``canonical_name`` and ``footsteps_for``.
"""

from types import MappingProxyType
from typing import Dict, NamedTuple, Optional, Tuple

DATASET_VERSION = "1.0.0"


class Footstep(NamedTuple):
    """One biographical milestone.

    Attributes:
        year: Signed year, negative is BCE.
        location: Place name, resolved against the location map.
        title: Short event title.
        description: One sentence summary.
        verse: Scripture reference.
    """

    year: int
    location: str
    title: str
    description: str
    verse: str


class KnownPlace(NamedTuple):
    latitude: float
    longitude: float
    modern_name: str


DEFAULT_PLACE_NAME = "Jerusalem"
DEFAULT_LATITUDE = 31.7683
DEFAULT_LONGITUDE = 35.2137


_FOOTSTEPS: Dict[str, Tuple[Footstep, ...]] = {
    "Abraham": (
        Footstep(-2000, "Ur", "Birth", "Born in Ur of the Chaldeans", "Genesis 11:27-28"),
        Footstep(-1925, "Haran", "Move to Haran", "Travels to Haran with his father Terah", "Genesis 11:31"),
        Footstep(-1921, "Shechem", "Arrival in Canaan", "Reaches Shechem and builds an altar", "Genesis 12:6"),
        Footstep(-1920, "Bethel", "Altar at Bethel", "Moves to the hills east of Bethel and builds an altar", "Genesis 12:8"),
        Footstep(-1920, "Egypt", "Refuge in Egypt", "Goes down to Egypt because of the famine", "Genesis 12:10"),
        Footstep(-1919, "Bethel", "Return from Egypt", "Comes back from Egypt to Bethel", "Genesis 13:3"),
        Footstep(-1918, "Hebron", "Settles in Hebron", "Settles by the oaks of Mamre", "Genesis 13:18"),
        Footstep(-1913, "Dan", "Rescue of Lot", "Pursues the kings as far as Dan and rescues Lot", "Genesis 14:14"),
        Footstep(-1913, "Salem", "Meets Melchizedek", "Blessed by Melchizedek, king of Salem", "Genesis 14:18"),
        Footstep(-1900, "Hebron", "Birth of Isaac", "Isaac is born when Abraham is a hundred", "Genesis 21:2-3"),
        Footstep(-1876, "Moriah", "Binding of Isaac", "Offers Isaac on a mountain in Moriah", "Genesis 22:2"),
        Footstep(-1860, "Hebron", "Death of Sarah", "Sarah dies in Hebron aged 127", "Genesis 23:2"),
        Footstep(-1860, "Machpelah", "Cave of Machpelah", "Buys the cave as a burial place for Sarah", "Genesis 23:19"),
        Footstep(-1825, "Hebron", "Death", "Dies aged 175 and is buried at Machpelah", "Genesis 25:8"),
    ),
    "Moses": (
        Footstep(-1526, "Egypt", "Birth", "Born in Egypt into the house of Levi", "Exodus 2:1-2"),
        Footstep(-1526, "Nile River", "Set on the Nile", "Found and adopted by Pharaoh's daughter", "Exodus 2:3"),
        Footstep(-1486, "Egypt", "Kills an Egyptian", "Kills an Egyptian beating a Hebrew", "Exodus 2:11-12"),
        Footstep(-1486, "Midian", "Flight to Midian", "Flees to Midian and helps Reuel's daughters", "Exodus 2:15"),
        Footstep(-1447, "Horeb", "Burning bush", "Called by God at Horeb", "Exodus 3:2"),
        Footstep(-1446, "Egypt", "Return to Egypt", "Goes to Pharaoh with Aaron", "Exodus 4:20"),
        Footstep(-1446, "Rameses", "The Exodus begins", "Sets out from Rameses toward Succoth", "Exodus 12:37"),
        Footstep(-1446, "Red Sea", "Crossing the Red Sea", "Parts the sea and crosses on dry ground", "Exodus 14:22"),
        Footstep(-1446, "Marah", "Bitter water of Marah", "The bitter water is made sweet", "Exodus 15:23"),
        Footstep(-1446, "Elim", "Arrival at Elim", "Twelve springs and seventy palm trees", "Exodus 15:27"),
        Footstep(-1446, "Wilderness of Sin", "Manna and quail", "God provides manna and quail", "Exodus 16:13-14"),
        Footstep(-1446, "Rephidim", "Battle at Rephidim", "Israel defeats Amalek", "Exodus 17:8"),
        Footstep(-1446, "Mount Sinai", "The Ten Commandments", "Receives the law on Mount Sinai", "Exodus 19:20"),
        Footstep(-1445, "Mount Sinai", "The golden calf", "Judges Israel for the golden calf", "Exodus 32:19"),
        Footstep(-1445, "Kadesh Barnea", "Spies sent out", "Sends twelve spies into Canaan", "Numbers 13:26"),
        Footstep(-1407, "Kadesh", "Death of Miriam", "Miriam dies at Kadesh", "Numbers 20:1"),
        Footstep(-1407, "Mount Hor", "Death of Aaron", "Aaron dies on Mount Hor", "Numbers 20:28"),
        Footstep(-1406, "Mount Nebo", "Death", "Dies on Mount Nebo looking over Canaan", "Deuteronomy 34:5"),
    ),
    "David": (
        Footstep(-1040, "Bethlehem", "Birth", "Born in Bethlehem, son of Jesse", "1 Samuel 16:1"),
        Footstep(-1025, "Bethlehem", "Anointing", "Anointed by Samuel", "1 Samuel 16:13"),
        Footstep(-1024, "Gibeah", "Saul's court", "Becomes Saul's armour-bearer", "1 Samuel 16:21"),
        Footstep(-1023, "Valley of Elah", "Goliath", "Defeats Goliath in the Valley of Elah", "1 Samuel 17:49"),
        Footstep(-1020, "Wilderness", "Flight into the wilderness", "Flees from Saul into the wilderness", "1 Samuel 22:1"),
        Footstep(-1018, "En Gedi", "Cave at En Gedi", "Spares Saul's life in the cave", "1 Samuel 24:3"),
        Footstep(-1015, "Ziklag", "Settles at Ziklag", "Settles at Ziklag in Philistine land", "1 Samuel 27:6"),
        Footstep(-1010, "Hebron", "King of Judah", "Anointed king over Judah at Hebron", "2 Samuel 2:4"),
        Footstep(-1003, "Jerusalem", "Capture of Jerusalem", "Takes Jerusalem from the Jebusites", "2 Samuel 5:7"),
        Footstep(-1002, "Jerusalem", "The ark comes to Jerusalem", "Brings the ark of the covenant to Jerusalem", "2 Samuel 6:12"),
        Footstep(-995, "Jerusalem", "Plans for the temple", "Plans a temple but is told his son will build it", "2 Samuel 7:2"),
        Footstep(-985, "Jerusalem", "Bathsheba", "Sins with Bathsheba and has Uriah killed", "2 Samuel 11:2"),
        Footstep(-982, "Jerusalem", "Absalom's revolt", "Flees Jerusalem during Absalom's rebellion", "2 Samuel 15:14"),
        Footstep(-982, "Jordan", "Crossing the Jordan", "Crosses the Jordan to escape Absalom", "2 Samuel 17:22"),
        Footstep(-970, "Jerusalem", "Solomon crowned", "Makes Solomon king", "1 Kings 1:39"),
        Footstep(-970, "Jerusalem", "Death", "Dies in Jerusalem aged seventy", "1 Kings 2:10"),
    ),
    "Jesus": (
        Footstep(-4, "Bethlehem", "Birth", "Born in Bethlehem and laid in a manger", "Luke 2:4-7"),
        Footstep(-4, "Jerusalem", "Presentation in the temple", "Presented in the temple after forty days", "Luke 2:22"),
        Footstep(-3, "Egypt", "Flight to Egypt", "Taken to Egypt to escape Herod", "Matthew 2:14"),
        Footstep(-1, "Nazareth", "Settles in Nazareth", "Returns from Egypt and settles in Nazareth", "Matthew 2:23"),
        Footstep(8, "Jerusalem", "In the temple at twelve", "Talks with the teachers at Passover", "Luke 2:42"),
        Footstep(27, "Jordan River", "Baptism", "Baptised by John in the Jordan", "Matthew 3:13"),
        Footstep(27, "Wilderness", "Temptation", "Tempted for forty days in the wilderness", "Matthew 4:1"),
        Footstep(27, "Cana", "First miracle", "Turns water into wine at the wedding", "John 2:1-11"),
        Footstep(27, "Capernaum", "Ministry in Capernaum", "Makes Capernaum the centre of his ministry", "Matthew 4:13"),
        Footstep(28, "Sea of Galilee", "Calling the disciples", "Calls the first disciples by the sea", "Matthew 4:18-22"),
        Footstep(28, "Mount", "Sermon on the Mount", "Teaches the Beatitudes", "Matthew 5:1"),
        Footstep(29, "Bethsaida", "Feeding the five thousand", "Feeds five thousand near Bethsaida", "John 6:5-13"),
        Footstep(29, "Caesarea Philippi", "Peter's confession", "Peter confesses him as the Messiah", "Matthew 16:13"),
        Footstep(29, "Mount Tabor", "Transfiguration", "Transfigured on the mountain", "Matthew 17:1-2"),
        Footstep(30, "Jericho", "Through Jericho", "Meets Zacchaeus in Jericho", "Luke 19:1"),
        Footstep(30, "Bethany", "Raising of Lazarus", "Raises Lazarus at Bethany", "John 11:43-44"),
        Footstep(30, "Jerusalem", "Triumphal entry", "Enters Jerusalem on Palm Sunday", "Matthew 21:9"),
        Footstep(30, "Jerusalem", "Cleansing the temple", "Drives the traders out of the temple", "Matthew 21:12"),
        Footstep(30, "Upper Room", "Last Supper", "Shares the last meal in the upper room", "Matthew 26:26"),
        Footstep(30, "Gethsemane", "Prayer in Gethsemane", "Prays in the garden before his arrest", "Matthew 26:36"),
        Footstep(30, "Golgotha", "Crucifixion", "Crucified at Golgotha", "Matthew 27:33"),
        Footstep(30, "Jerusalem", "Resurrection", "Rises from the tomb", "Matthew 28:6"),
        Footstep(30, "Mount of Olives", "Ascension", "Taken up from the Mount of Olives", "Acts 1:9"),
    ),
    "Paul": (
        Footstep(5, "Tarsus", "Birth", "Born in Tarsus of Cilicia", "Acts 22:3"),
        Footstep(30, "Jerusalem", "Stoning of Stephen", "Witnesses Stephen's martyrdom", "Acts 7:58"),
        Footstep(34, "Damascus", "Road to Damascus", "Meets the risen Jesus on the road", "Acts 9:3-4"),
        Footstep(34, "Damascus", "Meets Ananias", "Ananias lays hands on him and his sight returns", "Acts 9:17"),
        Footstep(34, "Arabia", "Time in Arabia", "Withdraws to Arabia", "Galatians 1:17"),
        Footstep(37, "Jerusalem", "Visit to Jerusalem", "Barnabas introduces him to the apostles", "Acts 9:26"),
        Footstep(37, "Tarsus", "Return to Tarsus", "Sent home to Tarsus", "Acts 9:30"),
        Footstep(43, "Antioch", "Ministry in Antioch", "Teaches a year in Antioch with Barnabas", "Acts 11:26"),
        Footstep(46, "Antioch", "First journey begins", "Sets out on the first missionary journey", "Acts 13:3"),
        Footstep(46, "Cyprus", "Preaching in Cyprus", "Preaches at Salamis and Paphos", "Acts 13:4"),
        Footstep(47, "Pisidian Antioch", "Pisidian Antioch", "Preaches in the synagogue", "Acts 13:14"),
        Footstep(47, "Iconium", "Iconium", "Many Jews and Greeks believe", "Acts 14:1"),
        Footstep(48, "Lystra", "Healing at Lystra", "Heals a man lame from birth", "Acts 14:8-10"),
        Footstep(48, "Derbe", "Derbe", "Preaches the gospel in Derbe", "Acts 14:20"),
        Footstep(49, "Jerusalem", "Council of Jerusalem", "Attends the council on circumcision", "Acts 15:2"),
        Footstep(50, "Antioch", "Second journey begins", "Sets out again with Silas", "Acts 15:40"),
        Footstep(50, "Philippi", "Philippi", "Lydia and the jailer believe", "Acts 16:12"),
        Footstep(51, "Thessalonica", "Thessalonica", "Reasons in the synagogue for three Sabbaths", "Acts 17:1"),
        Footstep(51, "Athens", "Sermon in Athens", "Speaks to the philosophers at the Areopagus", "Acts 17:22"),
        Footstep(51, "Corinth", "Eighteen months in Corinth", "Stays a year and a half in Corinth", "Acts 18:11"),
        Footstep(53, "Ephesus", "Third journey", "Ministers three years in Ephesus", "Acts 19:1"),
        Footstep(56, "Ephesus", "Riot in Ephesus", "Demetrius stirs up the silversmiths", "Acts 19:23"),
        Footstep(57, "Jerusalem", "Arrest", "Seized in the temple", "Acts 21:33"),
        Footstep(59, "Caesarea", "Imprisoned in Caesarea", "Held two years in Caesarea", "Acts 24:27"),
        Footstep(59, "Mediterranean", "Voyage to Rome", "Sails for Rome under guard", "Acts 27:1"),
        Footstep(60, "Malta", "Shipwreck on Malta", "Spends three months on Malta", "Acts 28:1"),
        Footstep(60, "Rome", "Arrival in Rome", "Two years under house arrest", "Acts 28:16"),
        Footstep(67, "Rome", "Martyrdom", "Martyred under Nero", "2 Timothy 4:6"),
    ),
    "John the Baptist": (
        Footstep(-4, "Judean Hills", "Birth", "Born to Zechariah and Elizabeth", "Luke 1:57"),
        Footstep(26, "Jordan River", "Baptising ministry", "Begins baptising in the Jordan", "Matthew 3:1"),
        Footstep(27, "Jordan River", "Baptism of Jesus", "Baptises Jesus", "Matthew 3:13-17"),
        Footstep(29, "Machaerus", "Martyrdom", "Beheaded by Herod Antipas", "Matthew 14:10"),
    ),
    "Peter": (
        Footstep(1, "Bethsaida", "Birth", "Born in Bethsaida of Galilee", "John 1:44"),
        Footstep(28, "Sea of Galilee", "Called by Jesus", "Called from his nets by the sea", "Matthew 4:18-20"),
        Footstep(29, "Caesarea Philippi", "Confession", "Confesses Jesus as the Messiah", "Matthew 16:16"),
        Footstep(30, "Jerusalem", "Denial", "Denies Jesus three times", "Matthew 26:69-75"),
        Footstep(30, "Jerusalem", "Pentecost sermon", "Preaches after the Spirit comes", "Acts 2:14"),
        Footstep(44, "Jerusalem", "Escape from prison", "Freed from Herod Agrippa's prison by an angel", "Acts 12:7-11"),
        Footstep(50, "Jerusalem", "Council of Jerusalem", "Speaks on the mission to the Gentiles", "Acts 15:7-11"),
        Footstep(64, "Rome", "Martyrdom", "Crucified in Rome", "1 Peter 5:13"),
    ),
    "Mary": (
        Footstep(-18, "Nazareth", "Birth", "Born in Nazareth", "Luke 1:26"),
        Footstep(-5, "Nazareth", "Annunciation", "Gabriel announces the birth of Jesus", "Luke 1:26-38"),
        Footstep(-4, "Bethlehem", "Birth of Jesus", "Gives birth to Jesus in Bethlehem", "Luke 2:6-7"),
        Footstep(30, "Golgotha", "At the cross", "Stands by the cross", "John 19:25"),
        Footstep(30, "Jerusalem", "Pentecost", "Waits with the disciples for the Spirit", "Acts 1:14"),
    ),
}

_KNOWN_PLACES: Dict[str, KnownPlace] = {
    "Ur": KnownPlace(30.9626, 46.1025, "Tell el-Muqayyar, Iraq"),
    "Haran": KnownPlace(36.8650, 39.0317, "Harran, Turkey"),
    "Shechem": KnownPlace(32.2137, 35.2821, "Nablus"),
    "Bethel": KnownPlace(31.9305, 35.2214, "Beitin"),
    "Hebron": KnownPlace(31.5246, 35.1108, "Al-Khalil"),
    "Dan": KnownPlace(33.2486, 35.6525, "Tel Dan"),
    "Salem": KnownPlace(31.7683, 35.2137, "Jerusalem"),
    "Moriah": KnownPlace(31.7767, 35.2354, "Temple Mount, Jerusalem"),
    "Machpelah": KnownPlace(31.5246, 35.1108, "Hebron"),
    "Horeb": KnownPlace(28.5395, 33.9751, "Mount Sinai"),
    "Mount Sinai": KnownPlace(28.5395, 33.9751, "Jebel Musa, Egypt"),
    "Red Sea": KnownPlace(29.5469, 34.9529, "Gulf of Suez"),
    "Rameses": KnownPlace(30.8074, 31.8238, "Qantir, Egypt"),
    "Marah": KnownPlace(29.2000, 33.0667, "Ain Hawarah"),
    "Elim": KnownPlace(29.1589, 33.0856, "Wadi Gharandel"),
    "Wilderness of Sin": KnownPlace(29.0000, 33.3333, "Debbet er-Ramleh"),
    "Rephidim": KnownPlace(28.7247, 33.8456, "Wadi Refayid"),
    "Kadesh Barnea": KnownPlace(30.6875, 34.4947, "Ein Qadis"),
    "Kadesh": KnownPlace(30.6875, 34.4947, "Ein Qadis"),
    "Mount Hor": KnownPlace(30.3172, 35.4072, "Jebel Harun, Jordan"),
    "Mount Nebo": KnownPlace(31.7683, 35.7253, "Siyagha, Jordan"),
    "Bethlehem": KnownPlace(31.7054, 35.2024, "Bethlehem"),
    "Jerusalem": KnownPlace(31.7683, 35.2137, "Jerusalem"),
    "Nazareth": KnownPlace(32.6996, 35.3035, "Nazareth"),
    "Damascus": KnownPlace(33.5138, 36.2765, "Damascus, Syria"),
    "Valley of Elah": KnownPlace(31.6903, 34.9639, "Wadi es-Sunt"),
    "Gibeah": KnownPlace(31.8239, 35.2308, "Tell el-Ful"),
    "En Gedi": KnownPlace(31.4614, 35.3922, "Ein Gedi"),
    "Ziklag": KnownPlace(31.3778, 34.8736, "Tell esh-Sharia"),
    "Jordan": KnownPlace(31.8567, 35.5500, "Jordan River"),
    "Jordan River": KnownPlace(32.3094, 35.5547, "Yardenit"),
    "Cana": KnownPlace(32.7469, 35.3394, "Kafr Kanna"),
    "Sea of Galilee": KnownPlace(32.8258, 35.5908, "Lake Kinneret"),
    "Capernaum": KnownPlace(32.8808, 35.5753, "Tel Hum"),
    "Mount": KnownPlace(32.7279, 35.3658, "Mount of Beatitudes"),
    "Bethsaida": KnownPlace(32.9097, 35.6308, "Et-Tell"),
    "Caesarea Philippi": KnownPlace(33.2483, 35.6944, "Banias"),
    "Mount Tabor": KnownPlace(32.6868, 35.3907, "Har Tavor"),
    "Jericho": KnownPlace(31.8571, 35.4442, "Ariha"),
    "Bethany": KnownPlace(31.7717, 35.2561, "Al-Eizariya"),
    "Upper Room": KnownPlace(31.7717, 35.2292, "Mount Zion, Jerusalem"),
    "Gethsemane": KnownPlace(31.7794, 35.2397, "Garden of Gethsemane"),
    "Golgotha": KnownPlace(31.7786, 35.2294, "Church of the Holy Sepulchre"),
    "Mount of Olives": KnownPlace(31.7767, 35.2428, "Har HaZeitim"),
    "Tarsus": KnownPlace(36.9177, 34.8948, "Tarsus, Turkey"),
    "Arabia": KnownPlace(30.3285, 35.4444, "Petra region"),
    "Antioch": KnownPlace(36.2012, 36.1608, "Antakya, Turkey"),
    "Cyprus": KnownPlace(35.1264, 33.4299, "Cyprus"),
    "Pisidian Antioch": KnownPlace(38.3063, 31.1891, "Yalvaç, Turkey"),
    "Iconium": KnownPlace(37.8746, 32.4932, "Konya, Turkey"),
    "Lystra": KnownPlace(37.5781, 32.4534, "Hatunsaray, Turkey"),
    "Derbe": KnownPlace(37.3489, 33.3878, "Kerti Hüyük, Turkey"),
    "Philippi": KnownPlace(41.0136, 24.2886, "Filippoi, Greece"),
    "Thessalonica": KnownPlace(40.6401, 22.9444, "Thessaloniki, Greece"),
    "Athens": KnownPlace(37.9838, 23.7275, "Athens, Greece"),
    "Corinth": KnownPlace(37.9058, 22.8797, "Korinthos, Greece"),
    "Ephesus": KnownPlace(37.9493, 27.3681, "Selçuk, Turkey"),
    "Caesarea": KnownPlace(32.4989, 34.8925, "Caesarea Maritima"),
    "Malta": KnownPlace(35.9375, 14.3754, "Malta"),
    "Rome": KnownPlace(41.9028, 12.4964, "Rome, Italy"),
    "Mediterranean": KnownPlace(35.0000, 18.0000, "Mediterranean Sea"),
    "Nile River": KnownPlace(30.0444, 31.2357, "Cairo, Egypt"),
    "Egypt": KnownPlace(30.0444, 31.2357, "Cairo, Egypt"),
    "Wilderness": KnownPlace(30.5852, 34.7668, "Negev Desert"),
    "Midian": KnownPlace(28.3969, 34.8613, "Northwest Saudi Arabia"),
    "Judean Hills": KnownPlace(31.7500, 35.2000, "Judean Hills, Israel"),
    "Machaerus": KnownPlace(31.5397, 35.6653, "Mukawir, Jordan"),
}

# Display-name variants that map onto a footsteps key.
_NAME_ALIASES: Dict[str, str] = {
    "Jesus Christ": "Jesus",
    "Jesus of Nazareth": "Jesus",
    "Paul the Apostle": "Paul",
    "Apostle Paul": "Paul",
    "Paul (Saul)": "Paul",
    "Saul of Tarsus": "Paul",
    "King David": "David",
    "Abram": "Abraham",
    "Peter (Simon)": "Peter",
    "Simon Peter": "Peter",
    "Mary (Mother of Jesus)": "Mary",
    "Mary, Mother of Jesus": "Mary",
    "Virgin Mary": "Mary",
}

FOOTSTEPS = MappingProxyType(_FOOTSTEPS)
KNOWN_PLACES = MappingProxyType(_KNOWN_PLACES)
NAME_ALIASES = MappingProxyType(_NAME_ALIASES)


def _normalize(name: str) -> str:
    return " ".join(name.split()).casefold()


_LOOKUP: Dict[str, str] = {_normalize(key): key for key in _FOOTSTEPS}
_LOOKUP.update({_normalize(alias): key for alias, key in _NAME_ALIASES.items()})


def canonical_name(name: Optional[str]) -> Optional[str]:
    """Map a person's display name onto a footsteps key.

    Matching ignores case and repeated whitespace. Canonical names map to
    themselves; the variants in NAME_ALIASES map to their canonical form.

    Args:
        name: Display name as stored on the person.

    Returns:
        The canonical key, or None when the person has no biography.
    """
    if not name:
        return None
    return _LOOKUP.get(_normalize(name))


def footsteps_for(name: Optional[str]) -> Tuple[Footstep, ...]:
    """Get the footsteps for a person's display name.

    Args:
        name: Display name as stored on the person.

    Returns:
        Tuple of footsteps, empty when the name is not recognised.
    """
    key = canonical_name(name)
    if key is None:
        return ()
    return FOOTSTEPS[key]


def known_place(name: str) -> Optional[KnownPlace]:
    return KNOWN_PLACES.get(name)
