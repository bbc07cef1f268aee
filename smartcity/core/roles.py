"""The closed set of roles recognised by both services."""

from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    CITY_PLANNER = "CityPlanner"
    CITIZEN = "Citizen"


VALID_ROLE_NAMES = tuple(r.value for r in Role)
