import json
from unittest.mock import MagicMock

from offer_radar.models import Offer
from offer_radar.state import OfferStateStore
from offer_radar.stores.base import StoredContent


def make_store(stored=None):
    content_store = MagicMock()
    content_store.get.return_value = stored
    return content_store, OfferStateStore(content_store, "last-offer.json")


class TestReadLastOffer:
    def test_missing_state_is_first_run(self):
        _, store = make_store(None)
        assert store.read_last_offer() is None

    def test_reads_offer(self):
        body = json.dumps({"title": "Crete", "link": "https://x/c"})
        _, store = make_store(StoredContent(body=body, version="abc"))
        assert store.read_last_offer() == Offer(title="Crete", link="https://x/c")

    def test_unparsable_state(self):
        _, store = make_store(StoredContent(body="{not json", version="abc"))
        assert store.read_last_offer() is None

    def test_non_object_state(self):
        _, store = make_store(StoredContent(body="[1, 2]", version="abc"))
        assert store.read_last_offer() is None

    def test_read_error_is_treated_as_absent(self):
        content_store, store = make_store()
        content_store.get.side_effect = RuntimeError("boom")
        assert store.read_last_offer() is None


class TestWriteOffer:
    def test_write_guarded_by_current_version(self):
        content_store, store = make_store(StoredContent(body="{}", version="sha-1"))
        offer = Offer(title="Crete 5 nights", link="https://x/c")

        assert store.write_offer(offer) is True

        content_store.put.assert_called_once()
        path, body, message = content_store.put.call_args.args
        assert path == "last-offer.json"
        assert json.loads(body) == {"title": "Crete 5 nights", "link": "https://x/c"}
        assert message == "Update last offer: Crete 5 nights"
        assert content_store.put.call_args.kwargs["version"] == "sha-1"

    def test_first_write_has_no_version(self):
        content_store, store = make_store(None)
        assert store.write_offer(Offer(title="A", link="https://x/a")) is True
        assert content_store.put.call_args.kwargs["version"] is None

    def test_write_failure_reported(self):
        content_store, store = make_store(None)
        content_store.put.side_effect = RuntimeError("409 conflict")
        assert store.write_offer(Offer(title="A", link="https://x/a")) is False

    def test_version_read_error_writes_without_version(self):
        content_store, store = make_store()
        content_store.get.side_effect = RuntimeError("502 bad gateway")

        assert store.write_offer(Offer(title="A", link="https://x/a")) is True
        content_store.put.assert_called_once()
        assert content_store.put.call_args.kwargs["version"] is None
