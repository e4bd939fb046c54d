"""Tests for form defaults, prefill and payload shaping."""

import pytest

from zoo_console.errors import FormError
from zoo_console.forms import blank_form, form_from_record, payload_from_form
from zoo_console.models import Gender, ResourceKind, Specialist, TrackedAnimal


class TestBlankForm:
    def test_animal_gender_defaults_to_first_value(self):
        assert blank_form(ResourceKind.TRACKED_ANIMAL) == {
            "name": "",
            "species": "",
            "age": "",
            "gender": Gender.MALE.value,
        }

    def test_person_form(self):
        assert blank_form(ResourceKind.PERSON) == {"name": "", "email": ""}


class TestFormFromRecord:
    def test_numbers_become_text(self):
        rec = Specialist(id="s1", name="Eva", email="eva@zoo.test", specialization="Birds", yearsOfExperience=7)

        form = form_from_record(ResourceKind.SPECIALIST, rec)

        assert form == {"name": "Eva", "email": "eva@zoo.test", "specialization": "Birds", "yearsOfExperience": "7"}

    def test_enum_becomes_wire_value(self):
        rec = TrackedAnimal(id="a1", name="Kiki", species="Giraffe", age=4, gender="Hembra")

        assert form_from_record(ResourceKind.TRACKED_ANIMAL, rec)["gender"] == "Hembra"


class TestPayloadFromForm:
    def test_parses_numeric_fields_and_strips_text(self):
        payload = payload_from_form(
            ResourceKind.ENCLOSURE,
            {"name": " Plains ", "type": "Savanna", "capacity": "15", "location": "North"},
        )

        assert payload == {"name": "Plains", "type": "Savanna", "capacity": 15, "location": "North"}

    def test_missing_fields_reported_together(self):
        with pytest.raises(FormError) as exc:
            payload_from_form(ResourceKind.SPECIALIST, {"name": "Eva", "email": "  "})

        assert exc.value.fields == ["email", "specialization", "yearsOfExperience"]
        assert "Years of Experience" in str(exc.value)

    def test_non_numeric_value(self):
        with pytest.raises(FormError) as exc:
            payload_from_form(
                ResourceKind.TRACKED_ANIMAL,
                {"name": "Kiki", "species": "Giraffe", "age": "four", "gender": "Hembra"},
            )

        assert exc.value.fields == ["age"]

    def test_id_never_part_of_payload(self):
        payload = payload_from_form(ResourceKind.PERSON, {"id": "p1", "name": "Ana", "email": "a@zoo.test"})

        assert "id" not in payload
