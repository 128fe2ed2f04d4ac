from datetime import date

import pytest
from pydantic import ValidationError

from democrat.drucksache.models import Category, Drucksache, RegistryPage
from democrat.drucksache.registry import drucksache_from_record
from tests.democrat.fakes import make_drucksache, make_record


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Gesundheit", Category.GESUNDHEIT),
        ("  umwelt und klimaschutz ", Category.UMWELT_KLIMASCHUTZ),
        ("Außenpolitik und Verteidigung", Category.AUSSENPOLITIK_VERTEIDIGUNG),
        ("Raumfahrt", Category.SONSTIGES),
        ("", Category.SONSTIGES),
        (None, Category.SONSTIGES),
        (7, Category.SONSTIGES),
        (Category.WOHNEN_BAUEN, Category.WOHNEN_BAUEN),
    ],
)
def test_category_coerce(value, expected):
    assert Category.coerce(value) == expected


def test_taxonomy_has_fifteen_labels_ending_with_catch_all():
    labels = [c.value for c in Category]
    assert len(labels) == 15
    assert labels[-1] == "Sonstiges"


class TestDrucksacheFromRecord:
    def test_maps_registry_fields(self):
        doc = drucksache_from_record(make_record("271234"))

        assert doc.dip_id == "271234"
        assert doc.titel == "Entwurf eines Gesetzes Nr. 271234"
        assert doc.drucksachetyp == "Gesetzentwurf"
        assert doc.datum == date(2024, 3, 15)
        assert doc.pdf_url == "https://dserver.bundestag.de/btd/20/271234.pdf"
        assert doc.dokumentnummer == "20/271234"
        assert doc.ressort == "Bundesministerium der Finanzen"
        assert doc.urheber == ["Bundesregierung"]
        assert doc.wahlperiode == 20
        assert doc.ai_processed is False
        assert doc.summary is None

    def test_first_ressort_only(self):
        record = make_record(
            "1",
            ressort=[{"titel": "Bundesministerium für Gesundheit"}, {"titel": "Auswärtiges Amt"}],
        )
        assert drucksache_from_record(record).ressort == "Bundesministerium für Gesundheit"

    def test_missing_optional_sections(self):
        record = {"id": "5", "titel": "Gesetzentwurf ohne Fundstelle"}
        doc = drucksache_from_record(record)

        assert doc.pdf_url is None
        assert doc.ressort is None
        assert doc.urheber == []
        assert doc.datum is None
        assert not doc.has_pdf

    def test_integer_id_is_stringified(self):
        assert drucksache_from_record(make_record(42)).dip_id == "42"

    def test_missing_titel_is_rejected(self):
        record = make_record("9")
        del record["titel"]
        with pytest.raises(ValidationError):
            drucksache_from_record(record)


class TestDrucksache:
    @pytest.mark.parametrize(
        "pdf_url,expected",
        [(None, False), ("", False), ("  ", False), ("https://x/1.pdf", True)],
    )
    def test_has_pdf(self, pdf_url, expected):
        assert make_drucksache("1", pdf_url=pdf_url).has_pdf is expected

    def test_registry_fields_exclude_ai_fields(self):
        fields = make_drucksache("1", summary="s", ai_processed=True).registry_fields()

        for key in ("summary", "category", "qdrant_point_id", "ai_processed", "ai_processed_at"):
            assert key not in fields
        assert "created_at" not in fields
        assert fields["titel"] == "Entwurf eines Gesetzes Nr. 1"

    def test_vector_payload(self):
        doc = make_drucksache("1234", summary="Kurzfassung", category=Category.GESUNDHEIT)

        assert doc.vector_payload() == {
            "dipId": "1234",
            "titel": "Entwurf eines Gesetzes Nr. 1234",
            "category": "Gesundheit",
            "datum": "2024-03-15",
            "ressort": "Bundesministerium der Finanzen",
            "summary": "Kurzfassung",
        }

    def test_timestamps_are_timezone_aware(self):
        doc = Drucksache(dip_id="1", titel="t", created_at="2024-01-01T10:00:00")
        assert doc.created_at.tzinfo is not None
        assert doc.updated_at.tzinfo is not None


def test_registry_page_reads_dip_field_names():
    page = RegistryPage.model_validate(
        {"numFound": 2, "cursor": "AoE", "documents": [{"id": "1"}, {"id": "2"}]}
    )
    assert page.num_found == 2
    assert page.cursor == "AoE"
    assert len(page.documents) == 2


@pytest.mark.parametrize("record", [None, "1234", 42, [{"id": "1"}]])
def test_non_object_record_is_rejected(record):
    with pytest.raises(TypeError):
        drucksache_from_record(record)
