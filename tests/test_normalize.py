"""Unit tests for payload normalization and field aliasing."""

from dateutil import tz

from conftest import FIXED_NOW
from egw_mcp.domain.schemas import NOT_PROVIDED
from egw_mcp.services.normalize import normalize, pick, to_contact, to_event, to_task


class TestNormalize:
    def test_list_is_returned_unchanged(self):
        a, b = {"title": "a"}, {"title": "b"}
        raw = [a, b]
        assert normalize(raw) is raw

    def test_single_record_is_wrapped(self):
        assert normalize({"x": 1}) == [{"x": 1}]

    def test_none_is_empty(self):
        assert normalize(None) == []

    def test_text_payload_is_empty(self):
        assert normalize("<xml/>") == []
        assert normalize('<?xml version="1.0"?><d:multistatus xmlns:d="DAV:"/>') == []

    def test_empty_list_stays_empty(self):
        assert normalize([]) == []


class TestPick:
    def test_first_present_name_wins(self):
        assert pick({"mail": "b@x.org", "email": "a@x.org"}, ("email", "mail")) == "a@x.org"

    def test_empty_values_are_skipped(self):
        assert pick({"email": "", "mail": "b@x.org"}, ("email", "mail")) == "b@x.org"

    def test_nothing_present(self):
        assert pick({}, ("email", "mail")) is None


class TestContact:
    def test_egroupware_names(self):
        c = to_contact({"n_given": "John", "n_family": "Doe", "org_name": "Sample Corp"})
        assert (c.first_name, c.last_name, c.company) == ("John", "Doe", "Sample Corp")
        assert c.email == NOT_PROVIDED

    def test_vcard_style_names(self):
        c = to_contact({"given-name": "Ada", "family-name": "Lovelace", "mail": "ada@example.com", "org": "AE"})
        assert (c.first_name, c.last_name, c.email, c.company) == ("Ada", "Lovelace", "ada@example.com", "AE")

    def test_full_name_is_split(self):
        c = to_contact({"fn": "Jane Smith"})
        assert (c.first_name, c.last_name) == ("Jane", "Smith")

    def test_full_name_keeps_compound_last_name(self):
        c = to_contact({"fn": "Ludwig van Beethoven"})
        assert (c.first_name, c.last_name) == ("Ludwig", "van Beethoven")

    def test_explicit_name_beats_full_name(self):
        c = to_contact({"n_given": "Janet", "fn": "Jane Smith"})
        assert (c.first_name, c.last_name) == ("Janet", "Smith")

    def test_no_name_at_all(self):
        c = to_contact({})
        assert (c.first_name, c.last_name) == ("Unknown", "Unknown")

    def test_every_field_is_populated(self):
        c = to_contact({"n_given": "A"})
        assert all(v for v in c.model_dump().values())


class TestEvent:
    def test_epoch_start_and_summary_alias(self):
        e = to_event({"summary": "Standup", "dtstart": int(FIXED_NOW.timestamp())}, tz.UTC)
        assert e.title == "Standup"
        assert e.start == FIXED_NOW
        assert e.end is None
        assert e.location == NOT_PROVIDED

    def test_single_participant_string(self):
        assert to_event({"attendees": "a@example.com"}).participants == ["a@example.com"]


class TestTask:
    def test_infolog_fields(self):
        t = to_task({"info_subject": "Sample Task", "info_status": "open", "info_priority": "HIGH"})
        assert (t.subject, t.status, t.priority) == ("Sample Task", "open", "high")
        assert t.due is None
        assert t.assignee == NOT_PROVIDED

    def test_unknown_priority_becomes_normal(self):
        assert to_task({"priority": "critical"}).priority == "normal"
