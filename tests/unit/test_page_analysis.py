from __future__ import annotations

import pytest

from fakes import FakeGeminiClient, prompt_text, text_response
from lesson_studio.ai.contracts import ANALYSIS_PARSE_ERROR_MARKER, PAGE_ANALYSIS_RESPONSE_SCHEMA, PageImage
from lesson_studio.ai.stages.analysis import ROADMAP_FALLBACK, analyze_course_map, analyze_page, parse_page_analysis


def test_parse_page_analysis_reads_all_three_fields():
  result = parse_page_analysis('{"analysis": "Goal", "text": "Lesson 3", "description": "A red apple"}')

  assert result.is_fallback is False
  assert (result.analysis, result.text, result.description) == ("Goal", "Lesson 3", "A red apple")


@pytest.mark.parametrize("raw", ["not json at all", "[1, 2, 3]", '{"analysis": 5, "text": "x", "description": "y"}', '"just a string"'])
def test_parse_page_analysis_returns_fallback_instead_of_raising(raw):
  result = parse_page_analysis(raw)

  assert result.is_fallback is True
  assert result.analysis == ANALYSIS_PARSE_ERROR_MARKER
  assert result.text == ""
  assert result.description == ""
  assert result.fallback_reason


def test_parse_page_analysis_treats_missing_body_as_empty_object():
  result = parse_page_analysis(None)

  assert result.is_fallback is False
  assert (result.analysis, result.text, result.description) == ("", "", "")


def test_parse_page_analysis_missing_fields_read_as_empty():
  result = parse_page_analysis('{"analysis": "only the goal"}')

  assert result.is_fallback is False
  assert (result.analysis, result.text, result.description) == ("only the goal", "", "")


@pytest.mark.parametrize(
  "raw",
  [
    'Sure! Here is the analysis: {"analysis": "a", "text": "t", "description": "d"} Hope it helps.',
    '```json\n{"analysis": "a", "text": "t", "description": "d"}\n```',
    '{"analysis": "a", "text": "t", "description": "d",}',
  ],
)
def test_parse_page_analysis_rejects_wrapped_or_lenient_json(raw):
  result = parse_page_analysis(raw)

  assert result.is_fallback is True
  assert result.analysis == ANALYSIS_PARSE_ERROR_MARKER
  assert (result.text, result.description) == ("", "")


@pytest.mark.anyio
async def test_analyze_page_requests_structured_output(session):
  client = FakeGeminiClient([text_response('{"analysis": "A", "text": "T", "description": "D"}')])

  result = await analyze_page(session, b"image-bytes", mime_type="image/png", client=client)

  assert result.text == "T"
  call = client.calls[0]
  assert call["model"] == session.text_model
  assert call["config"]["response_mime_type"] == "application/json"
  assert call["config"]["response_schema"] == PAGE_ANALYSIS_RESPONSE_SCHEMA
  assert call["contents"][0].inline_data.data == b"image-bytes"
  assert call["contents"][0].inline_data.mime_type == "image/png"
  assert "Persian" in prompt_text(call)


@pytest.mark.anyio
async def test_analyze_page_degrades_on_malformed_response(session):
  client = FakeGeminiClient([text_response("Sorry, I cannot help with that.")])

  result = await analyze_page(session, b"image-bytes", client=client)

  assert result.is_fallback is True
  assert result.analysis == ANALYSIS_PARSE_ERROR_MARKER


@pytest.mark.anyio
async def test_course_map_labels_each_page_before_its_image(session):
  client = FakeGeminiClient([text_response("Roadmap")])
  pages = [PageImage(page_number=1, data=b"one"), PageImage(page_number=2, data=b"two", mime_type="image/png")]

  roadmap = await analyze_course_map(session, context="Grade 2 science", pages=pages, client=client)

  assert roadmap == "Roadmap"
  call = client.calls[0]
  assert call["config"] == {"temperature": 0.2}
  contents = call["contents"]
  assert "Grade 2 science" in contents[0].text
  assert "Number of pages: 2" in contents[0].text
  assert "page 1" in contents[1].text
  assert contents[2].inline_data.data == b"one"
  assert "page 2" in contents[3].text
  assert contents[4].inline_data.mime_type == "image/png"


@pytest.mark.anyio
async def test_course_map_falls_back_when_response_has_no_text(session):
  client = FakeGeminiClient([text_response(None)])

  assert await analyze_course_map(session, context="", pages=[], client=client) == ROADMAP_FALLBACK
