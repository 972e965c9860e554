from offer_radar.models import Offer, RunOutcome, RunReport


class TestOffer:
    def test_valid_offer(self):
        assert Offer(title="Crete 5 nights", link="https://x/y").is_valid is True

    def test_missing_fields_are_invalid(self):
        assert Offer().is_valid is False
        assert Offer(title="Crete").is_valid is False
        assert Offer(link="https://x/y").is_valid is False
        assert Offer(title="", link="https://x/y").is_valid is False

    def test_from_dict_ignores_non_strings(self):
        offer = Offer.from_dict({"title": "Rhodes", "link": 42, "extra": True})
        assert offer.title == "Rhodes"
        assert offer.link is None

    def test_to_dict(self):
        offer = Offer(title="Rhodes", link="https://x/r")
        assert offer.to_dict() == {"title": "Rhodes", "link": "https://x/r"}


def test_run_report_summary():
    report = RunReport(
        outcome=RunOutcome.dispatched,
        targets_count=2,
        success_count=1,
        failure_count=1,
        persisted=True,
    )
    summary = report.summary()
    assert "outcome=dispatched" in summary
    assert "sent=1" in summary
    assert "failed=1" in summary
