"""
Name/age input validation shared by the add form and the inline row editor.
"""
import re

from app.errors import PersonInputError

MISSING_FIELDS = "Please fill in both name and age"
INVALID_AGE = "Please enter a valid age"

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")


def parse_person_input(name: str, age: str) -> tuple[str, int]:
    """
    Validate raw form text and return the cleaned (name, age) pair.

    Checks run in order:
    1. trimmed name and trimmed age must both be non-empty
    2. age must be a plain base-10 integer >= 0

    Raises:
        PersonInputError: on the first failing check
    """
    clean_name = (name or "").strip()
    raw_age = (age or "").strip()

    if not clean_name or not raw_age:
        raise PersonInputError(MISSING_FIELDS, fields=("name", "age"))

    if not _INTEGER_RE.fullmatch(raw_age):
        raise PersonInputError(INVALID_AGE, fields=("age",))

    parsed_age = int(raw_age)
    if parsed_age < 0:
        raise PersonInputError(INVALID_AGE, fields=("age",))

    return clean_name, parsed_age
