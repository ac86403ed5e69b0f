"""
Synthetic employee generation for the S3 Select demo.

Records get sequential ids starting at 1, a random "First Last" name and a
random age in ``[min_age, max_age)``. Pass a seed for reproducible output;
without one every run produces different data.
"""

from __future__ import annotations

import random
from typing import List, Optional

from s3select.domain.models import Employee, Employees
from s3select.utils.logging import get_logger

log = get_logger(__name__)

DEFAULT_MIN_AGE = 21
DEFAULT_MAX_AGE = 58

FIRST_NAMES = [
    "Aaliyah", "Adrian", "Alice", "Amara", "Andre", "Beatriz", "Bruno", "Camila",
    "Carlos", "Chloe", "Daniel", "Diana", "Elena", "Emeka", "Farah", "Felix",
    "Grace", "Hana", "Hugo", "Ines", "Ivan", "Jamal", "Julia", "Kenji", "Laila",
    "Lucas", "Maya", "Mateo", "Nadia", "Noah", "Olivia", "Omar", "Priya", "Rafael",
    "Sara", "Sofia", "Tomas", "Uma", "Victor", "Wei", "Yara", "Zoe",
]

LAST_NAMES = [
    "Adams", "Almeida", "Bauer", "Brown", "Chen", "Costa", "Dubois", "Edwards",
    "Fernandes", "Garcia", "Hansen", "Ibrahim", "Ito", "Jensen", "Kim", "Kowalski",
    "Lopez", "Martin", "Moreau", "Nakamura", "Novak", "Okafor", "Olsen", "Patel",
    "Quinn", "Rossi", "Santos", "Schmidt", "Silva", "Singh", "Tanaka", "Walker",
    "Weber", "Williams", "Yilmaz", "Zhang",
]


def _full_name(rng: random.Random) -> str:
    return f"{rng.choice(FIRST_NAMES)} {rng.choice(LAST_NAMES)}"


def generate_employees(
    count: int,
    min_age: int = DEFAULT_MIN_AGE,
    max_age: int = DEFAULT_MAX_AGE,
    seed: Optional[int] = None,
) -> Employees:
    """
    Generate ``count`` employees with ids ``1..count`` in order.

    Parameters
    ----------
    count : int
        Number of records to produce; zero yields an empty collection.
    min_age : int
        Inclusive lower bound for ages.
    max_age : int
        Exclusive upper bound for ages.
    seed : int | None
        Optional RNG seed.

    Raises
    ------
    ValueError
        If ``count`` is negative or the age range is empty.
    """
    if count < 0:
        raise ValueError(f"count must be >= 0, got {count}")
    if min_age >= max_age:
        raise ValueError(f"empty age range [{min_age}, {max_age})")

    rng = random.Random(seed)
    records: List[Employee] = [
        Employee(id=i, name=_full_name(rng), age=rng.randrange(min_age, max_age))
        for i in range(1, count + 1)
    ]
    log.debug(
        "Generated employees",
        extra={"count": count, "min_age": min_age, "max_age": max_age, "seed": seed},
    )
    return Employees(employees=records)


__all__ = ["DEFAULT_MAX_AGE", "DEFAULT_MIN_AGE", "generate_employees"]
