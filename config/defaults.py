"""Feste Werte und Beispieldaten des Kursplaners."""

from models.course import Course, Unit
from models.plan import PlanData
from models.teacher import Teacher

# ─── Administrator ───
# Fest eingebautes Admin-Login (Klartext).
ADMIN_USERNAME = "Frazadmin"
ADMIN_PASSWORD = "Frazadmin"
# Anzeigename im Sitzungszeiger
ADMIN_DISPLAY_NAME = "Admin"

# ─── Backup ───
BACKUP_FORMAT_VERSION = "2.0"

# ─── Speicherschlüssel ───
SESSION_KEY = "planner_current_user"
USERS_KEY = "planner_users"
USER_DATA_PREFIX = "planner_data_"


# ─── Beispieldaten ───

# Lehrkraft-Kürzel → Stundenkontingent
DEMO_TEACHERS: dict[str, float] = {
    "AB": 18.4, "AH": 23, "AI": 23, "AS": 23, "FA": 9, "GM": 23,
    "IK": 13, "JK": 23, "MA": 23, "MR": 23, "NM": 3, "PC": 18.4,
    "RG": 23, "SS": 23, "V-TA": 23, "VAC-2": 0, "VAC-3": 0,
}

# (Kurs-ID, Name, Soll) → [(Einheit-ID, Name, Zuweisungen)]
DEMO_COURSES: list[tuple[str, str, float | None, list[tuple[str, str, dict[str, float]]]]] = [
    ("c1", "BTEC Level 2 - Gp1", 360, [
        ("c1u1", "The Online World", {"SS": 2}),
        ("c1u2", "Technology Systems", {}),
        ("c1u3", "Digital Portfolio", {"FA": 1.5}),
        ("c1u4", "Spreadsheet Development", {}),
        ("c1u5", "Database Development", {"JK": 1.5}),
        ("c1u6", "Software Development", {"RG": 2}),
        ("c1u7", "Installing & Maintaining Hardware", {"AI": 2, "SS": 2}),
        ("c1u8", "Computer Networks", {"IK": 1}),
    ]),
    ("c2", "AAQ - IT", 360, [
        ("c2u1", "Information Technology Systems", {"AH": 4, "MA": 4}),
        ("c2u2", "Cybersecurity & Incident Management", {}),
        ("c2u3", "Website Development", {"AB": 1.5}),
        ("c2u4", "Relational Database Development", {"RG": 3, "IK": 1}),
    ]),
    ("c3", "Other", None, [
        ("c3u1", "Lead IV", {"FA": 3}),
        ("c3u2", "FEYA", {"AH": 2}),
        ("c3u3", "Coordination", {"GM": 2, "MA": 2}),
        ("c3u4", "Union", {"AI": 2}),
        ("c3u5", "Hackney WD L5", {"AB": 5}),
        ("c3u6", "Hackney SD L3", {"PC": 6}),
    ]),
]


def demo_plan() -> PlanData:
    """Beispielplanung für neue Benutzer (17 Lehrkräfte, 3 Kurse)."""
    teachers = [
        Teacher(id=tid, name=tid, allowance=allowance)
        for tid, allowance in DEMO_TEACHERS.items()
    ]
    courses = [
        Course(
            id=cid, name=name, target_hours=target,
            units=[Unit(id=uid, name=uname, assignments=dict(assignments))
                   for uid, uname, assignments in units],
        )
        for cid, name, target, units in DEMO_COURSES
    ]
    return PlanData(teachers=teachers, courses=courses)


def empty_plan() -> PlanData:
    return PlanData(teachers=[], courses=[])
