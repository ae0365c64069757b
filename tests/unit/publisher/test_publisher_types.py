"""Tests for outbound message types and the exchange-name cache."""

import json
import threading

from rabbitmq_build_trigger.core.types import BuildRecord, BuildResult
from rabbitmq_build_trigger.publisher.exchange import ExchangeNameCache
from rabbitmq_build_trigger.publisher.types import BuildOutcome, MessageProperties


class TestBuildOutcome:
    def test_from_record(self):
        outcome = BuildOutcome.from_record(BuildRecord("app", 7, BuildResult.NOT_BUILT))

        assert outcome.to_dict() == {"project": "app", "number": 7, "status": "NOT_BUILT"}

    def test_to_bytes_is_utf8_json(self):
        body = BuildOutcome("プロジェクト", 1, "SUCCESS").to_bytes()

        assert json.loads(body.decode("utf-8"))["project"] == "プロジェクト"

    def test_host_specific_result_word(self):
        assert BuildRecord("app", 1, "cancelled").status == "CANCELLED"


class TestMessageProperties:
    def test_defaults(self):
        properties = MessageProperties()

        assert properties.app_id == "remote-build"
        assert properties.content_type == "application/json"
        assert properties.headers == {}

    def test_for_build_sets_root_url_header(self):
        assert MessageProperties.for_build("http://ci/").headers == {"jenkins-url": "http://ci/"}


class TestExchangeNameCache:
    def test_unresolved_is_none(self):
        assert ExchangeNameCache().get("q") is None

    def test_set_and_get(self):
        cache = ExchangeNameCache()
        cache.set("q", "remote-build.q")

        assert cache.get("q") == "remote-build.q"
        assert len(cache) == 1

    def test_clear(self):
        cache = ExchangeNameCache()
        cache.set("q", "x")
        cache.clear()

        assert cache.get("q") is None

    def test_concurrent_writers(self):
        cache = ExchangeNameCache()

        def fill(offset):
            for i in range(100):
                cache.set(f"q{i}", f"x{offset}")

        threads = [threading.Thread(target=fill, args=(n,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 100
