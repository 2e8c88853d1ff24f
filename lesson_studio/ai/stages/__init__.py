"""Remote call stages, one per generated artifact."""

from lesson_studio.ai.stages.analysis import analyze_course_map, analyze_page
from lesson_studio.ai.stages.dialogue import generate_dialogue
from lesson_studio.ai.stages.speech import synthesize_dialogue_speech, synthesize_speech
from lesson_studio.ai.stages.storyboard import generate_storyboard_image, generate_storyboard_prompt
from lesson_studio.ai.stages.teacher import generate_teacher_script
from lesson_studio.ai.stages.video import generate_video, generate_video_prompt, translate_to_english, wait_for_video

__all__ = [
  "analyze_course_map",
  "analyze_page",
  "generate_dialogue",
  "generate_storyboard_image",
  "generate_storyboard_prompt",
  "generate_teacher_script",
  "generate_video",
  "generate_video_prompt",
  "synthesize_dialogue_speech",
  "synthesize_speech",
  "translate_to_english",
  "wait_for_video",
]
