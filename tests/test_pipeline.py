"""Tests for wikirag.pipeline — the four-stage run and its failure modes."""

from __future__ import annotations

import httpx
import pytest

from conftest import wiki_handler
from wikirag.config import Settings
from wikirag.errors import NoMatchesError, NotFoundError, StageError, TransportError
from wikirag.llm.providers import ChatReply, Usage
from wikirag.pipeline import NO_KEYWORD_FALLBACK, Stage, run_pipeline

QUESTION = "What is the capital of France?"
ANSWER = "The capital of France is Paris."
PARIS_SEARCH = [{"title": "Paris", "pageid": 1}]
PARIS_EXTRACT = {"1": "Paris is the capital of France."}


class TestRunPipeline:
    async def test_end_to_end(self, wiki_api, settings: Settings, scripted_provider) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(
            settings, ChatReply(content="Paris"), ChatReply(content=ANSWER)
        )

        result = await run_pipeline(QUESTION + "\n", settings, provider)

        assert result.question == QUESTION
        assert result.keyword == "Paris"
        assert [r.page_id for r in result.results] == ["1"]
        assert [p.text for p in result.pages] == ["Paris is the capital of France."]
        assert result.answer == ANSWER

        # The answer request carries the extract and the trimmed question.
        answer_messages, _ = provider.calls[1]
        assert answer_messages[0].content == "Paris is the capital of France."
        assert answer_messages[-1].content.endswith(QUESTION)

    async def test_search_uses_keyword(self, wiki_api, settings: Settings, scripted_provider) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(settings, ChatReply(content="Paris"), ChatReply(content=ANSWER))

        await run_pipeline(QUESTION, settings, provider)

        first = wiki_api.calls[0].request.url.params
        assert first["srsearch"] == "Paris"

    async def test_missing_page_stops_before_answer(
        self, wiki_api, settings: Settings, scripted_provider
    ) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, {}))
        provider = scripted_provider(settings, ChatReply(content="Paris"), ChatReply(content=ANSWER))

        with pytest.raises(StageError) as excinfo:
            await run_pipeline(QUESTION, settings, provider)

        assert excinfo.value.stage is Stage.FETCH
        assert excinfo.value.exit_code == 3
        assert isinstance(excinfo.value.cause, NotFoundError)
        assert "Page not found" in str(excinfo.value)
        assert len(provider.calls) == 1

    async def test_keyword_failure_exits_1(self, wiki_api, settings: Settings, scripted_provider) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(settings, TransportError("model server unreachable"))

        with pytest.raises(StageError) as excinfo:
            await run_pipeline(QUESTION, settings, provider)

        assert excinfo.value.exit_code == 1
        assert wiki_api.call_count == 0

    async def test_search_failure_exits_2(self, wiki_api, settings: Settings, scripted_provider) -> None:
        wiki_api.mock(return_value=httpx.Response(500, text="down"))
        provider = scripted_provider(settings, ChatReply(content="Paris"))

        with pytest.raises(StageError) as excinfo:
            await run_pipeline(QUESTION, settings, provider)

        assert excinfo.value.stage is Stage.SEARCH
        assert excinfo.value.exit_code == 2

    async def test_answer_failure_exits_4(self, wiki_api, settings: Settings, scripted_provider) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(
            settings, ChatReply(content="Paris"), TransportError("connection reset")
        )

        with pytest.raises(StageError) as excinfo:
            await run_pipeline(QUESTION, settings, provider)

        assert excinfo.value.stage is Stage.ANSWER
        assert excinfo.value.exit_code == 4

    async def test_no_matches_skips_fetch_and_answer(
        self, wiki_api, settings: Settings, scripted_provider
    ) -> None:
        wiki_api.mock(side_effect=wiki_handler([], {}))
        provider = scripted_provider(settings, ChatReply(content="Qwxzy"))

        with pytest.raises(NoMatchesError, match="Qwxzy"):
            await run_pipeline("Who is Qwxzy?", settings, provider)

        assert wiki_api.call_count == 1
        assert len(provider.calls) == 1

    async def test_empty_keyword_reply_searches_fallback(
        self, wiki_api, settings: Settings, scripted_provider
    ) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(settings, ChatReply(content=None), ChatReply(content=ANSWER))

        result = await run_pipeline(QUESTION, settings, provider)

        assert result.keyword == NO_KEYWORD_FALLBACK
        assert wiki_api.calls[0].request.url.params["srsearch"] == NO_KEYWORD_FALLBACK

    async def test_empty_answer_is_none(self, wiki_api, settings: Settings, scripted_provider) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(settings, ChatReply(content="Paris"), ChatReply(content=None))

        result = await run_pipeline(QUESTION, settings, provider)

        assert result.answer is None

    async def test_fetches_configured_page_count(self, wiki_api, scripted_provider) -> None:
        settings = Settings(openai_api_key="sk-test", wiki_pages=2)
        search = [{"title": f"T{i}", "pageid": i} for i in (1, 2, 3)]
        extracts = {"1": "one", "2": "two", "3": "three"}
        wiki_api.mock(side_effect=wiki_handler(search, extracts))
        provider = scripted_provider(settings, ChatReply(content="T"), ChatReply(content=ANSWER))

        result = await run_pipeline(QUESTION, settings, provider)

        assert [p.text for p in result.pages] == ["one", "two"]
        assert wiki_api.call_count == 3  # one search + two fetches

    async def test_usage_is_reported(
        self, wiki_api, settings: Settings, scripted_provider, capsys
    ) -> None:
        wiki_api.mock(side_effect=wiki_handler(PARIS_SEARCH, PARIS_EXTRACT))
        provider = scripted_provider(
            settings,
            ChatReply(content="Paris", usage=Usage(input_tokens=20, output_tokens=1)),
            ChatReply(content=ANSWER, usage=Usage(input_tokens=300, output_tokens=8)),
        )

        await run_pipeline(QUESTION, settings, provider)

        err = capsys.readouterr().err
        assert "Tokens in: 20" in err
        assert "Tokens in: 300" in err
        assert "Keyword found: Paris" in err
