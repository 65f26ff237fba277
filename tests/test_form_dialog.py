"""
Tests for the create/edit form dialog.
"""
import pytest

from portfolio.core.errors import RemoteError, ValidationError
from portfolio.modules.resources.form_dialog import FormDialog, FormMode, FormState
from portfolio.modules.resources.repository import ResourceRepository
from portfolio.modules.certificates.schemas import CERTIFICATE_RESOURCE
from portfolio.modules.experiences.schemas import EXPERIENCE_RESOURCE
from portfolio.modules.projects.schemas import PROJECT_RESOURCE
from conftest import make_experience


def open_dialog(fake_supabase, notifier, schema, existing=None, on_close=None, **kwargs):
    repository = ResourceRepository(fake_supabase, schema)
    return FormDialog(repository, notifier, existing=existing, on_close=on_close, **kwargs)


@pytest.fixture
def project_dialog(fake_supabase, notifier):
    return open_dialog(fake_supabase, notifier, PROJECT_RESOURCE)


def fill_project(dialog):
    dialog.update_fields({
        "title": "Packet sniffer",
        "description": "Captures traffic on an interface",
        "category": "networks",
    })


def test_new_dialog_starts_empty(project_dialog):
    assert project_dialog.mode == FormMode.CREATE
    assert project_dialog.state == FormState.EDITING
    assert project_dialog.draft["technologies"] == []
    assert project_dialog.draft["featured"] is False


def test_duplicate_technology_is_ignored(project_dialog):
    assert project_dialog.add_item("technologies", "React")
    assert not project_dialog.add_item("technologies", "React")
    assert project_dialog.draft["technologies"] == ["React"]


def test_distinct_technologies_keep_order(project_dialog):
    project_dialog.add_item("technologies", "React")
    project_dialog.add_item("technologies", "Go")
    assert project_dialog.draft["technologies"] == ["React", "Go"]


def test_blank_item_is_ignored(project_dialog):
    assert not project_dialog.add_item("technologies", "   ")
    assert project_dialog.draft["technologies"] == []


def test_enter_key_commits_pending_input(project_dialog):
    project_dialog.type_pending("technologies", "  Rust ")
    assert not project_dialog.handle_key("technologies", "Tab")
    assert project_dialog.pending["technologies"] == "  Rust "

    assert project_dialog.handle_key("technologies", "Enter")
    assert project_dialog.draft["technologies"] == ["Rust"]
    assert project_dialog.pending["technologies"] == ""


def test_remove_technology_by_value(project_dialog):
    project_dialog.set_field("technologies", ["React", "Go", "Rust"])
    project_dialog.remove_item("technologies", value="Go")
    assert project_dialog.draft["technologies"] == ["React", "Rust"]


def test_achievements_allow_duplicates_and_remove_by_position(fake_supabase, notifier):
    dialog = open_dialog(fake_supabase, notifier, EXPERIENCE_RESOURCE)
    dialog.add_item("achievements", "Shipped v1")
    dialog.add_item("achievements", "Mentored interns")
    dialog.add_item("achievements", "Shipped v1")
    assert dialog.draft["achievements"] == ["Shipped v1", "Mentored interns", "Shipped v1"]

    dialog.remove_item("achievements", index=2)
    assert dialog.draft["achievements"] == ["Shipped v1", "Mentored interns"]


def test_certificate_without_image_is_rejected_locally(fake_supabase, notifier):
    dialog = open_dialog(fake_supabase, notifier, CERTIFICATE_RESOURCE)
    dialog.update_fields({"title": "CCNA", "institution": "Cisco", "date": "2024-02-01"})

    assert dialog.submit() is None
    assert isinstance(dialog.error, ValidationError)
    assert dialog.error.errors == ["Image is required"]
    assert fake_supabase.calls == []
    assert dialog.state == FormState.EDITING
    assert [n.message for n in notifier.items] == ["Image is required"]


def test_missing_required_fields_are_all_reported(project_dialog, fake_supabase):
    assert project_dialog.submit() is None
    assert project_dialog.error.errors == [
        "Title is required",
        "Description is required",
        "Category is required",
    ]
    assert fake_supabase.calls == []


def test_unknown_category_is_rejected(project_dialog):
    fill_project(project_dialog)
    project_dialog.set_field("category", "cooking")
    assert project_dialog.submit() is None
    assert "Category must be one of" in project_dialog.error.errors[0]


def test_invalid_date_is_rejected(fake_supabase, notifier):
    dialog = open_dialog(fake_supabase, notifier, CERTIFICATE_RESOURCE)
    dialog.update_fields({
        "title": "CCNA",
        "institution": "Cisco",
        "date": "last spring",
        "image_url": "https://images.example.com/ccna.png",
    })
    assert dialog.submit() is None
    assert dialog.error.errors == ["Date must be a date (YYYY-MM-DD)"]


def test_create_success_closes_and_notifies(fake_supabase, notifier):
    closed = []
    dialog = open_dialog(fake_supabase, notifier, PROJECT_RESOURCE, on_close=closed.append)
    fill_project(dialog)
    dialog.add_item("technologies", "Python")

    record = dialog.submit()

    assert record is not None
    assert record.title == "Packet sniffer"
    assert record.technologies == ["Python"]
    assert record.image_url is None
    assert dialog.state == FormState.CLOSED
    assert closed == [dialog]
    assert notifier.items[-1].message == "Project created successfully"
    assert fake_supabase.calls_for("projects", "insert") == [("projects", "insert")]


def test_edit_success_updates_existing_record(fake_supabase, notifier):
    fake_supabase.tables["experiences"] = [make_experience()]
    existing = ResourceRepository(fake_supabase, EXPERIENCE_RESOURCE).get("experience-1")
    dialog = open_dialog(fake_supabase, notifier, EXPERIENCE_RESOURCE, existing=existing)

    assert dialog.mode == FormMode.EDIT
    assert dialog.draft["start_date"] == "2022-01-15"
    assert dialog.draft["end_date"] == ""

    dialog.set_field("end_date", "2024-03-31")
    record = dialog.submit()

    assert record.id == "experience-1"
    assert record.end_date.isoformat() == "2024-03-31"
    assert record.company == "Acme"
    assert notifier.items[-1].message == "Experience updated successfully"


def test_remote_failure_keeps_dialog_open_with_draft(fake_supabase, notifier, project_dialog):
    fill_project(project_dialog)
    project_dialog.add_item("technologies", "Wireshark")
    fake_supabase.fail("projects", "insert")

    assert project_dialog.submit() is None
    assert isinstance(project_dialog.error, RemoteError)
    assert project_dialog.state == FormState.EDITING
    assert project_dialog.draft["title"] == "Packet sniffer"
    assert project_dialog.draft["technologies"] == ["Wireshark"]
    assert notifier.items[-1].message == "Error saving project"

    fake_supabase.recover()
    assert project_dialog.submit() is not None


def test_submit_is_ignored_while_submitting(project_dialog, fake_supabase):
    fill_project(project_dialog)
    project_dialog.state = FormState.SUBMITTING
    assert project_dialog.is_busy
    assert project_dialog.submit() is None
    assert fake_supabase.calls == []


def test_submit_after_close_is_ignored(project_dialog, fake_supabase):
    fill_project(project_dialog)
    project_dialog.cancel()
    assert project_dialog.submit() is None
    assert fake_supabase.calls == []


def test_close_callback_runs_once(fake_supabase, notifier):
    closed = []
    dialog = open_dialog(fake_supabase, notifier, PROJECT_RESOURCE, on_close=closed.append)
    dialog.cancel()
    dialog.close()
    assert len(closed) == 1


def test_chosen_file_becomes_data_uri(project_dialog):
    uri = project_dialog.choose_file("shot.png", "image/png", b"\x89PNG")
    assert uri == "data:image/png;base64,iVBORw=="
    assert project_dialog.draft["image_url"] == ""
    assert project_dialog.effective_draft()["image_url"] == uri


def test_url_replaces_chosen_file(project_dialog):
    project_dialog.choose_file("shot.png", "image/png", b"\x89PNG")
    project_dialog.set_image_url("https://images.example.com/shot.png")
    assert project_dialog.image_file is None
    assert project_dialog.effective_draft()["image_url"] == "https://images.example.com/shot.png"


def test_non_image_file_is_rejected(project_dialog, notifier):
    with pytest.raises(ValidationError):
        project_dialog.choose_file("notes.pdf", "application/pdf", b"%PDF")
    assert project_dialog.image_file is None
    assert notifier.items[-1].message == "Please choose a valid image file"


def test_oversized_file_is_rejected(fake_supabase, notifier):
    dialog = open_dialog(fake_supabase, notifier, PROJECT_RESOURCE, max_image_bytes=1024 * 1024)
    with pytest.raises(ValidationError) as exc_info:
        dialog.choose_file("big.png", "image/png", b"0" * (1024 * 1024 + 1))
    assert exc_info.value.errors == ["Image must be smaller than 1MB"]
    assert dialog.image_file is None


def test_certificate_with_uploaded_file_submits(fake_supabase, notifier):
    dialog = open_dialog(fake_supabase, notifier, CERTIFICATE_RESOURCE)
    dialog.update_fields({"title": "CCNA", "institution": "Cisco", "date": "2024-02-01"})
    dialog.choose_file("ccna.jpg", "image/jpeg", b"jpegdata")

    record = dialog.submit()

    assert record.image_url.startswith("data:image/jpeg;base64,")
    assert record.description is None


def test_unknown_field(project_dialog):
    with pytest.raises(ValidationError):
        project_dialog.set_field("stars", 5)
