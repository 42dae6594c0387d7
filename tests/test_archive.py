"""Tests for the audio and document archives."""

import pytest

from fakes import add_event, add_person, add_woman
from family_tree.modules.archive.service import count_words, format_duration, parse_duration
from family_tree.modules.members.mapping import Tables, AUDIO_FIELDS, DOCUMENT_FIELDS


@pytest.fixture
def archive(backend):
    add_person(backend, 1, "Saleh")
    add_woman(backend, 10, "Noura")
    add_event(backend, 7, "Wedding", person_id=1)
    backend.seed(Tables.AUDIO_FILES, AUDIO_FIELDS.to_row({
        "id": 1, "title": "Grandfather's story", "recording_type": "قصة_شفهية",
        "file_path": "audio/story.mp3", "duration": "12:05", "person_id": 1, "importance": "عالية",
        "keywords": ["history", "migration"],
    }))
    backend.seed(Tables.TEXT_DOCUMENTS, DOCUMENT_FIELDS.to_row({
        "id": 1, "title": "Letter", "document_type": "رسائل_شخصية", "full_text": "Dear brother", "woman_id": 10,
    }))
    return backend


class TestDurations:

    @pytest.mark.parametrize("seconds,text", [(0, "0:00"), (65, "1:05"), (3600, "60:00")])
    def test_format(self, seconds, text):
        assert format_duration(seconds) == text

    @pytest.mark.parametrize("text,seconds", [("1:05", 65), ("00:12:05", 725), ("", None), ("soon", None)])
    def test_parse(self, text, seconds):
        assert parse_duration(text) == seconds

    def test_count_words(self):
        assert count_words("  one two\nthree\tfour ") == 4
        assert count_words(None) == 0


class TestAudioFiles:

    def test_list_converts_values(self, client, archive):
        data = client.get("/api/v1/audio-files").json()
        assert len(data) == 1
        assert data[0]["duration_seconds"] == 725
        assert data[0]["importance"] == "high"
        assert data[0]["keywords"] == ["history", "migration"]

    def test_filter_by_person(self, client, archive):
        assert len(client.get("/api/v1/audio-files", params={"person_id": 1}).json()) == 1
        assert client.get("/api/v1/audio-files", params={"woman_id": 10}).json() == []

    def test_create_stores_duration_text(self, client, archive):
        response = client.post("/api/v1/audio-files", json={
            "title": "Poem", "recording_type": "شعر_وأدب", "file_path": "audio/poem.wav",
            "duration_seconds": 185, "woman_id": 10, "event_id": 7, "attendees": ["Saleh", "Noura"],
        })
        assert response.status_code == 201
        data = response.json()
        assert data["duration"] == "3:05"
        assert data["duration_seconds"] == 185
        assert data["attendees"] == ["Saleh", "Noura"]
        row = next(r for r in archive.rows(Tables.AUDIO_FILES) if r[AUDIO_FIELDS.column("id")] == data["id"])
        assert row[AUDIO_FIELDS.column("duration")] == "3:05"
        assert row[AUDIO_FIELDS.column("importance")] == "عادية"

    def test_unknown_event(self, client, archive):
        response = client.post("/api/v1/audio-files", json={
            "title": "Poem", "recording_type": "شعر_وأدب", "file_path": "audio/poem.wav", "event_id": 99,
        })
        assert response.status_code == 400

    def test_file_path_required(self, client, archive):
        response = client.post("/api/v1/audio-files", json={"title": "Poem", "recording_type": "شعر_وأدب"})
        assert response.status_code == 422

    def test_update_and_delete(self, client, archive):
        response = client.put("/api/v1/audio-files/1", json={"duration_seconds": 60, "title": "Story"})
        assert response.json()["duration"] == "1:00"
        assert response.json()["title"] == "Story"
        assert client.delete("/api/v1/audio-files/1").status_code == 200
        assert client.get("/api/v1/audio-files/1").status_code == 404

    def test_writer_cannot_delete(self, client_as, writer, archive):
        assert client_as(writer).delete("/api/v1/audio-files/1").status_code == 403


class TestDocuments:

    def test_create_counts_words_and_excerpts(self, client, archive):
        text = "word " * 60
        response = client.post("/api/v1/documents", json={
            "title": "Memoir", "document_type": "مذكرات_شخصية", "full_text": text, "person_id": 1,
            "closing_words": "the end",
        })
        assert response.status_code == 201
        data = response.json()
        assert data["word_count"] == 60
        assert data["opening_words"] == text[:100]
        assert data["closing_words"] == "the end"

    def test_update_recounts_words(self, client, archive):
        data = client.put("/api/v1/documents/1", json={"full_text": "Dear brother, greetings from home"}).json()
        assert data["word_count"] == 5

    def test_update_without_text_keeps_count(self, client, archive):
        data = client.put("/api/v1/documents/1", json={"notes": "Found in a trunk"}).json()
        assert data["notes"] == "Found in a trunk"
        assert data["full_text"] == "Dear brother"

    def test_unknown_woman(self, client, archive):
        response = client.post("/api/v1/documents", json={
            "title": "Deed", "document_type": "وثيقة_رسمية", "full_text": "text", "woman_id": 99,
        })
        assert response.status_code == 400

    def test_list_by_woman(self, client, archive):
        data = client.get("/api/v1/documents", params={"woman_id": 10}).json()
        assert [d["title"] for d in data] == ["Letter"]

    def test_missing_document(self, client, archive):
        assert client.get("/api/v1/documents/99").status_code == 404
        assert client.delete("/api/v1/documents/99").status_code == 404
