"""Instruction templates shared by the studio stages."""

from __future__ import annotations

import re

_PLACEHOLDER_RE = re.compile(r"\{\{([A-Z_]+)\}\}")

DIALOGUE_SPEAKERS: tuple[str, str] = ("Ali", "Reza")

PAGE_ANALYSIS_TEMPLATE = """
Analyze the image of this textbook page with great care.

Every output must be written in {{LANGUAGE}}:
1. **Teaching analysis:** What is the learning goal of this page? List the key points.
2. **Text:** Extract all text in the image word for word. Numbers and headings must be exact.
3. **Image description:** Describe the visuals in full detail (colors, objects, characters, setting). Assume the reader cannot see the image.

Output format (JSON):
{
  "analysis": "...",
  "text": "...",
  "description": "..."
}
"""

COURSE_MAP_TEMPLATE = """
Role: You are a senior curriculum planner.
Task: Analyze the page images of one textbook chapter and produce a "teaching roadmap".

Teacher context: "{{CONTEXT}}"
Number of pages: {{PAGE_COUNT}}

Instructions:
1. Review every image below in order.
2. Find the semantic links between the pages.
3. Define a concrete strategy for **each page**.

The output must be written in **{{LANGUAGE}}** using exactly this format:

--- Chapter strategy ---
(one paragraph overview)

--- Page by page analysis ---
Page 1: [title] - [role of the page] - [media suggestion]
...
"""

COURSE_MAP_PAGE_LABEL = "\n--- Image of page {{PAGE_NUMBER}} ---"

TEACHER_SCRIPT_TEMPLATE = """
Overall lesson context: {{CONTEXT}}
Analysis of this page: {{PAGE_ANALYSIS}}

*** CRITICAL INFORMATION CONFIRMED BY THE OPERATOR (SOURCE OF TRUTH): ***
- Exact page text: "{{VERIFIED_TEXT}}"
- Exact image description: "{{VERIFIED_DESCRIPTION}}"

Warning: Teach ONLY from the critical information above. If something is not in the confirmed text, do not invent it.
If a page number or heading appears in the confirmed text, that value is correct.

Task: You are a primary school teacher. Write an engaging teaching script.

Rules:
1. Tone: energetic and friendly.
2. Diacritics: fully vocalize the words so text-to-speech pronounces them correctly.
3. Teach from the confirmed text and image description.

Output: only the teaching script, written in {{LANGUAGE}}.
"""

STORYBOARD_PROMPT_TEMPLATE = """
Source of truth (confirmed image description): "{{VERIFIED_DESCRIPTION}}"

Role: Art director.
Task: Write a storyboard prompt for an educational illustration based on the description above.

Rules:
1. Use the confirmed description to make sure the subject is correct. Do not add subjects that are not in it.
2. Suggest a metaphor or a vector-art style for visual appeal.
3. Write the output in {{LANGUAGE}}.
4. Stress that the image must be text-free.
"""

STORYBOARD_IMAGE_SUFFIX = " . (Create a clean educational vector illustration. Important: NO TEXT, NO LETTERS, NO NUMBERS inside the image. Visuals only.)"

VIDEO_PROMPT_TEMPLATE = """
Source of truth (confirmed description): "{{VERIFIED_DESCRIPTION}}"

Role: Animation director.
Task: Write a video prompt based on the description above.

Take the core concept from the description above and bring it to life. Do not introduce elements that are not in it.
Output: a scene description written in {{LANGUAGE}}.
"""

TRANSLATION_TEMPLATE = "Translate the following text to English for a video generation prompt. Keep it concise and visual.\n\nText: {{TEXT}}"

DIALOGUE_TEMPLATE = """
Confirmed page information: "{{VERIFIED_TEXT}}"
Teacher's script: "{{TEACHER_SCRIPT}}"

Task: Write a conversation between two students ({{SPEAKER_A}} and {{SPEAKER_B}}) about the topic of the lesson.
Use the confirmed information so their discussion is accurate. Do not invent facts that are not in it.
Write the conversation in {{LANGUAGE}}.

Format:
{{SPEAKER_A}}: ...
{{SPEAKER_B}}: ...
"""

MULTI_SPEAKER_TTS_TEMPLATE = "TTS the following conversation:\n{{SCRIPT}}"


def render_prompt(template: str, values: dict[str, str]) -> str:
  """Substitute {{PLACEHOLDER}} markers in one pass so inserted values are never rewritten."""
  missing = {name for name in _PLACEHOLDER_RE.findall(template) if name not in values}
  if missing:
    raise KeyError(f"Missing prompt values: {', '.join(sorted(missing))}")
  return _PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], template)


def build_page_analysis_prompt(*, language: str) -> str:
  return render_prompt(PAGE_ANALYSIS_TEMPLATE, {"LANGUAGE": language})


def build_course_map_prompt(*, context: str, page_count: int, language: str) -> str:
  return render_prompt(COURSE_MAP_TEMPLATE, {"CONTEXT": context, "PAGE_COUNT": str(page_count), "LANGUAGE": language})


def build_course_map_page_label(page_number: int) -> str:
  return render_prompt(COURSE_MAP_PAGE_LABEL, {"PAGE_NUMBER": str(page_number)})


def build_teacher_script_prompt(*, context: str, page_analysis: str, verified_text: str, verified_description: str, language: str) -> str:
  """Embed the confirmed page text and description verbatim as the source of truth."""
  values = {"CONTEXT": context, "PAGE_ANALYSIS": page_analysis, "VERIFIED_TEXT": verified_text, "VERIFIED_DESCRIPTION": verified_description, "LANGUAGE": language}
  return render_prompt(TEACHER_SCRIPT_TEMPLATE, values)


def build_storyboard_prompt(*, verified_description: str, language: str) -> str:
  return render_prompt(STORYBOARD_PROMPT_TEMPLATE, {"VERIFIED_DESCRIPTION": verified_description, "LANGUAGE": language})


def build_storyboard_image_prompt(prompt_text: str) -> str:
  return prompt_text + STORYBOARD_IMAGE_SUFFIX


def build_video_prompt(*, verified_description: str, language: str) -> str:
  return render_prompt(VIDEO_PROMPT_TEMPLATE, {"VERIFIED_DESCRIPTION": verified_description, "LANGUAGE": language})


def build_translation_prompt(text: str) -> str:
  return render_prompt(TRANSLATION_TEMPLATE, {"TEXT": text})


def build_dialogue_prompt(*, verified_text: str, teacher_script: str, language: str) -> str:
  speaker_a, speaker_b = DIALOGUE_SPEAKERS
  values = {"VERIFIED_TEXT": verified_text, "TEACHER_SCRIPT": teacher_script, "SPEAKER_A": speaker_a, "SPEAKER_B": speaker_b, "LANGUAGE": language}
  return render_prompt(DIALOGUE_TEMPLATE, values)


def build_multi_speaker_tts_prompt(script: str) -> str:
  return render_prompt(MULTI_SPEAKER_TTS_TEMPLATE, {"SCRIPT": script})
