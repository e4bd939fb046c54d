from __future__ import annotations

from enum import Enum
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class ResourceKind(str, Enum):
    PERSON = "Person"
    SPECIALIST = "Specialist"
    ENCLOSURE = "Enclosure"
    TRACKED_ANIMAL = "TrackedAnimal"


class Gender(str, Enum):
    MALE = "Macho"
    FEMALE = "Hembra"


class Severity(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


class RecordBase(BaseModel):
    """Fields shared by every record variant.

    `id` is assigned by the remote service and is never generated locally.
    Wire names are camelCase; unknown fields sent by the service are ignored.
    Range and enum rules are the service's business, so read models only
    insist on the keys being present.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str
    name: str


class Person(RecordBase):
    email: str


class Specialist(RecordBase):
    email: str
    specialization: str
    years_of_experience: int = Field(alias="yearsOfExperience")


class Enclosure(RecordBase):
    type: str
    capacity: int
    location: str


class TrackedAnimal(RecordBase):
    species: str
    age: int
    # Plain text on read: the service owns the allowed values.
    gender: str


Record = Union[Person, Specialist, Enclosure, TrackedAnimal]
