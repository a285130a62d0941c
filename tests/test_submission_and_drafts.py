import json

import pytest
import requests

from event_planner.core.errors import CollaboratorError, InvalidArgument
from event_planner.core.models.wizard import Attachment, WizardRecord
from event_planner.core.services.drafts import JsonDraftStore
from event_planner.core.services.submission import HttpSubmissionSink, serialize_record


def _record():
    record = WizardRecord(
        {"title": "DJ night", "base_price": 15000, "featured": True, "service_area": ["Mumbai", "Thane"], "hours": {"start": "18:00"}},
        ("images",),
    )
    record.add_attachment("images", Attachment("deck.jpg", "image/jpeg", data=b"\xff\xd8"))
    return record


def test_serialize_record_splits_fields_and_files():
    data, files = serialize_record(_record())

    assert data["title"] == "DJ night"
    assert data["base_price"] == "15000"
    assert data["featured"] == "true"
    assert json.loads(data["service_area"]) == ["Mumbai", "Thane"]
    assert json.loads(data["hours"]) == {"start": "18:00"}
    assert files == [("images", ("deck.jpg", b"\xff\xd8", "image/jpeg"))]


def test_attachment_reads_from_path(tmp_path):
    path = tmp_path / "poster.png"
    path.write_bytes(b"png")
    attachment = Attachment.from_path(path, "image/png")
    assert attachment.size == 3
    assert attachment.read() == b"png"


def test_record_rejects_non_attachments_in_file_fields():
    record = WizardRecord({}, ("images",))
    with pytest.raises(InvalidArgument):
        record.set("images", ["not-a-file"])
    with pytest.raises(InvalidArgument):
        record.add_attachment("title", Attachment("x"))


def test_multipart_submission_success(fake_session, make_response):
    session = fake_session(make_response(status=201, body={"success": True, "data": {"id": 77}}))
    sink = HttpSubmissionSink("http://api.test", "/api/vendor-cards", session, extra_fields={"vendor_id": "ven-1"})

    result = sink.submit(_record())

    assert result.success and result.id == "77"
    method, url, kwargs = session.calls[0]
    assert url == "http://api.test/api/vendor-cards"
    assert kwargs["data"]["vendor_id"] == "ven-1"
    assert kwargs["files"][0][0] == "images"


def test_json_submission_sends_fields(fake_session, make_response):
    session = fake_session(make_response(body={"id": "svc-1"}))
    sink = HttpSubmissionSink("http://api.test", "api/vendor/services", session, json_body=True)

    result = sink.submit(WizardRecord({"category_id": "catering-food"}))

    assert result.id == "svc-1"
    assert session.calls[0][2]["json"] == {"category_id": "catering-food"}


def test_rejected_submission_returns_message(fake_session, make_response):
    session = fake_session(make_response(status=422, body={"message": "Title already exists"}))
    result = HttpSubmissionSink("http://api.test", "/x", session).submit(_record())
    assert not result.success
    assert result.message == "Title already exists"


def test_success_false_body_is_a_failure(fake_session, make_response):
    session = fake_session(make_response(body={"success": False, "error": "Vendor not approved"}))
    result = HttpSubmissionSink("http://api.test", "/x", session).submit(_record())
    assert not result.success
    assert result.message == "Vendor not approved"


def test_network_failure_raises_collaborator_error(fake_session):
    session = fake_session(requests.exceptions.Timeout("slow"))
    with pytest.raises(CollaboratorError) as exc:
        HttpSubmissionSink("http://api.test", "/x", session).submit(_record())
    assert exc.value.error_type == "network"


def test_missing_attachment_file_raises_storage_error(fake_session, tmp_path):
    record = WizardRecord({}, ("images",))
    record.add_attachment("images", Attachment("gone.jpg", path=str(tmp_path / "gone.jpg")))
    with pytest.raises(CollaboratorError) as exc:
        HttpSubmissionSink("http://api.test", "/x", fake_session()).submit(record)
    assert exc.value.error_type == "storage"


def test_draft_store_writes_metadata_only(tmp_path):
    store = JsonDraftStore(tmp_path / "drafts", "service_card")
    store.save_draft(_record())

    saved = json.loads(store.path.read_text(encoding="utf-8"))
    assert saved["fields"]["title"] == "DJ night"
    assert saved["attachments"]["images"][0]["name"] == "deck.jpg"
    assert "data" not in saved["attachments"]["images"][0]

    loaded = store.load_draft()
    assert loaded.get("service_area") == ["Mumbai", "Thane"]
    store.discard()
    assert store.load_draft() is None


def test_unreadable_draft_is_ignored(tmp_path):
    store = JsonDraftStore(tmp_path, "broken")
    store.path.write_text("{oops", encoding="utf-8")
    assert store.load_draft() is None


@pytest.mark.parametrize(
    "payload",
    [
        {"fields": {}, "attachments": {"images": ["a.jpg"]}},
        {"fields": {}, "attachments": {"images": "a.jpg"}},
        {"fields": ["title"], "attachments": {}},
        {"fields": {}, "attachments": {"images": [{"name": "a.jpg", "size": "big"}]}},
    ],
)
def test_draft_with_wrong_shape_is_ignored(tmp_path, payload):
    (tmp_path / "service_card.json").write_text(json.dumps(payload), encoding="utf-8")
    assert JsonDraftStore(tmp_path, "service_card").load_draft() is None


def test_from_dict_reports_wrong_shape():
    with pytest.raises(ValueError):
        WizardRecord.from_dict({"attachments": {"images": ["a.jpg"]}})
