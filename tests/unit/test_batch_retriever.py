"""
Unit tests for BatchRetriever.

Covers normalization, resume-skip, checkpoints and the politeness delay.
The sleep function is replaced by a recorder so no test waits.
"""

import random
from unittest.mock import patch

import pytest

from pacer_network.exceptions import NoValidCasesError
from pacer_network.models.requests import RetrievalSettings
from pacer_network.models.retrieval import RetrievalStatus
from pacer_network.parsers.association_parser import extract_associations
from pacer_network.services.batch_retriever import BatchRetriever


@pytest.fixture
def make_retriever(tmp_path, pacer_session, sleep_recorder):
    """Factory: (retriever, portal) over the given dockets."""

    def make(dockets, broken=(), **settings):
        session, portal = pacer_session(dockets, broken=broken)
        settings.setdefault('output_dir', tmp_path / "xml")
        retriever = BatchRetriever(
            session,
            RetrievalSettings(**settings),
            sleep=sleep_recorder,
            rng=random.Random(7),
        )
        return retriever, portal

    return make


class TestBatchRetriever:

    def test_duplicates_and_blanks_processed_once(self, make_retriever, docket_xml):
        retriever, portal = make_retriever({
            "20-1234": docket_xml("20-1234"),
            "20-1235": docket_xml("20-1235"),
        })

        log = retriever.retrieve(["20-1234", "20-1234", "  ", "20-1235"])

        assert [entry.case_number for entry in log] == ["20-1234", "20-1235"]
        assert portal.cases_requested() == ["20-1234", "20-1235"]

    def test_empty_input_raises_before_any_request(self, make_retriever):
        retriever, portal = make_retriever({})

        with pytest.raises(NoValidCasesError):
            retriever.retrieve(["", None])

        assert portal.calls == []

    def test_success_saves_xml_and_logs_path(self, make_retriever, docket_xml, tmp_path):
        xml = docket_xml("20-1234")
        retriever, _ = make_retriever({"20-1234": xml})

        log = retriever.retrieve(["20-1234"])

        saved = tmp_path / "xml" / "docket_20_1234.xml"
        assert log[0].status == RetrievalStatus.SUCCESS
        assert log[0].xml_path == str(saved)
        assert log[0].error is None
        assert saved.read_text(encoding='utf-8') == xml

    def test_failures_write_no_xml(self, make_retriever, docket_xml, tmp_path):
        retriever, _ = make_retriever(
            {"20-1": None, "20-3": docket_xml("20-3")},
            broken=["20-3"],
        )

        log = retriever.retrieve(["20-1", "20-2", "20-3"])

        assert [entry.status for entry in log] == [
            RetrievalStatus.NO_DOCKET,
            RetrievalStatus.NOT_FOUND,
            RetrievalStatus.ERROR,
        ]
        assert all(entry.xml_path is None for entry in log)
        assert log[2].error
        assert list((tmp_path / "xml").glob("docket_*.xml")) == []

    def test_resume_skip_makes_no_network_call(self, make_retriever, docket_xml, tmp_path):
        retriever, portal = make_retriever({"20-1234": docket_xml("20-1234")})
        existing = tmp_path / "xml" / "docket_20_1234.xml"
        existing.write_text("<old/>", encoding='utf-8')

        log = retriever.retrieve(["20-1234"])

        assert log[0].status == RetrievalStatus.SKIPPED_EXISTS
        assert log[0].xml_path == str(existing)
        assert portal.calls == []
        assert existing.read_text(encoding='utf-8') == "<old/>"

    def test_resume_disabled_refetches(self, make_retriever, docket_xml, tmp_path):
        retriever, portal = make_retriever(
            {"20-1234": docket_xml("20-1234")},
            resume_if_exists=False,
        )
        (tmp_path / "xml" / "docket_20_1234.xml").write_text("<old/>", encoding='utf-8')

        log = retriever.retrieve(["20-1234"])

        assert log[0].status == RetrievalStatus.SUCCESS
        assert portal.cases_requested() == ["20-1234"]

    def test_final_log_written(self, make_retriever, tmp_path):
        retriever, _ = make_retriever({})

        retriever.retrieve(["20-1", "20-2"])

        assert (tmp_path / "xml" / "retrieval_log_final.csv").is_file()

    def test_checkpoint_every_interval(self, make_retriever, tmp_path):
        retriever, _ = make_retriever({}, checkpoint_interval=2)

        retriever.retrieve(["20-1", "20-2", "20-3", "20-4", "20-5"])

        checkpoints = sorted(p.name for p in (tmp_path / "xml").glob("progress_log_*.csv"))
        assert len(checkpoints) == 2
        assert checkpoints[0].startswith("progress_log_2_")
        assert checkpoints[1].startswith("progress_log_4_")

    def test_checkpoints_disabled(self, make_retriever, tmp_path):
        retriever, _ = make_retriever({}, checkpoint_interval=None)

        retriever.retrieve(["20-1", "20-2", "20-3"])

        assert list((tmp_path / "xml").glob("progress_log_*.csv")) == []


class TestRateLimit:

    def test_range_delays_are_integers_within_bounds(self, make_retriever, sleep_recorder):
        retriever, _ = make_retriever({}, rate_limit=(5, 10))

        retriever.retrieve([f"20-{n}" for n in range(30)])

        assert len(sleep_recorder.delays) == 29
        assert all(isinstance(d, int) and 5 <= d <= 10 for d in sleep_recorder.delays)

    def test_no_sleep_after_last_case(self, make_retriever, sleep_recorder):
        retriever, _ = make_retriever({}, rate_limit=3)

        retriever.retrieve(["20-1"])

        assert sleep_recorder.delays == []

    def test_fixed_delay(self, make_retriever, sleep_recorder):
        retriever, _ = make_retriever({}, rate_limit=3)

        retriever.retrieve(["20-1", "20-2", "20-3"])

        assert sleep_recorder.delays == [3, 3]

    def test_skipped_cases_do_not_wait(self, make_retriever, sleep_recorder, tmp_path):
        retriever, _ = make_retriever({}, rate_limit=1)
        (tmp_path / "xml" / "docket_20_1.xml").write_text("<x/>", encoding='utf-8')

        retriever.retrieve(["20-1", "20-2", "20-3"])

        # 20-1 skipped: no wait; 20-2 fetched: wait before 20-3
        assert sleep_recorder.delays == [1]

    def test_non_ascii_docket_survives_save_and_reparse(self, make_retriever, docket_xml):
        xml = docket_xml("20-1234", [("20-5678", "Société Müller", None)])
        retriever, _ = make_retriever({"20-1234": xml})

        log = retriever.retrieve(["20-1234"])

        with open(log[0].xml_path, 'rb') as f:
            assert f.read() == xml.encode('utf-8')
        associations = extract_associations(log[0].xml_path)
        assert associations[0].association_type == "Société Müller"

    def test_save_failure_recorded_as_error(self, make_retriever, docket_xml, tmp_path):
        retriever, _ = make_retriever({
            "20-1": docket_xml("20-1"),
            "20-2": docket_xml("20-2"),
        })
        real_save = retriever.storage.save_xml

        def save(case_number, xml):
            if case_number == "20-1":
                raise OSError("No space left on device")
            return real_save(case_number, xml)

        with patch.object(retriever.storage, 'save_xml', side_effect=save):
            log = retriever.retrieve(["20-1", "20-2"])

        assert [entry.status for entry in log] == [RetrievalStatus.ERROR, RetrievalStatus.SUCCESS]
        assert "No space left on device" in log[0].error
        assert log[0].xml_path is None
        assert (tmp_path / "xml" / "retrieval_log_final.csv").exists()
