"""Prompt builders for scenario and storyboard generation."""

from ..models import Language, Scenario

MUSIC_GENRES = [
    "Alternative & Punk",
    "Ambient",
    "Children's",
    "Cinematic",
    "Classical",
    "Country & Folk",
    "Dance & Electronic",
    "Hip-Hop & Rap",
    "Holiday",
    "Jazz & Blues",
    "Pop",
    "R&B & Soul",
    "Reggae",
    "Rock",
]

MOODS = [
    "Angry",
    "Bright",
    "Calm",
    "Dark",
    "Dramatic",
    "Funky",
    "Happy",
    "Inspirational",
    "Romantic",
    "Sad",
]

_CHARACTER_RULES = (
    "Always use the FULL character(s) description(s) in your prompts. "
    "Do NOT use the character(s) name(s) in your prompts. "
    "Always use indefinite articles when describing character(s). No children."
)


def _scene_guidelines(num_scenes: int, style: str, language: Language, localize_prompts: bool) -> list[str]:
    prompt_language = f" in {language.name}" if localize_prompts else ""
    return [
        f"Generate {num_scenes} creative scenes to create a storyboard illustrating the scenario.",
        "For each scene, provide:",
        f" 1. A detailed visual description for AI image generation (imagePrompt){prompt_language}, "
        f"the style should be {style}. {_CHARACTER_RULES}",
        f" 2. A video prompt{prompt_language}, focusing on the movement of the characters and objects "
        f"in the scene (videoPrompt). {_CHARACTER_RULES}",
        f" 3. A scene description in {language.name} explaining what happens (description). "
        "You can use the character(s) name(s) in your descriptions.",
        f" 4. A short narrator voiceover text in {language.name}. One full sentence, 6s max (voiceover). "
        "You can use the character(s) name(s) in your voiceovers.",
        " 5. The names of the characters visually present in the scene (charactersPresent).",
        "Each image prompt should describe a key scene or moment from the scenario.",
        "Viewed in sequence, the image prompts must tell a coherent story.",
        "Keep descriptions of characters, settings and actions consistent across all image prompts.",
        "Make each image prompt vivid and detailed enough to guide a storyboard illustration.",
        "Each image prompt should reuse the full characters and settings descriptions every time.",
    ]


_SCENE_SHAPE = """  {
   "imagePrompt": "...",
   "videoPrompt": "...",
   "description": "...",
   "voiceover": "...",
   "charactersPresent": ["..."]
  }"""


def scenario_prompt(pitch: str, num_scenes: int, style: str, language: Language) -> str:
    """Build the prompt that turns a pitch into a full scenario."""
    prompt_parts = [
        "You are tasked with generating a creative scenario for a short movie and creating prompts "
        "for storyboard illustrations. Follow these instructions carefully:",
        "",
        "1. This story pitch is the foundation for your scenario:",
        "<pitch>",
        pitch,
        "</pitch>",
        "",
        f"2. Generate a scenario in {language.name} for an ad movie based on the story pitch. "
        "Stick as close as possible to the pitch. Do not include children in your scenario.",
        "",
        "3. Pick the music genre that best fits this video from:",
        *[f"- {genre}" for genre in MUSIC_GENRES],
        "",
        "4. Pick the mood of this video from:",
        *[f"- {mood}" for mood in MOODS],
        "",
        "5. Write a short description of the music, in English only. "
        "No references to the story, known artists or songs.",
        "",
        "6. " + "\n".join(_scene_guidelines(num_scenes, style, language, localize_prompts=False)),
        "",
        "7. Describe each character and each setting of the story in "
        f"{language.name} inside the characters and settings keys, then list the {num_scenes} scenes.",
        "",
        "Format the response as a JSON object with this structure:",
        "{",
        ' "scenario": "...",',
        ' "genre": "...",',
        ' "mood": "...",',
        ' "music": "...",',
        f' "language": {{"name": "{language.name}", "code": "{language.code}"}},',
        ' "characters": [{"name": "...", "description": "..."}],',
        ' "settings": [{"name": "...", "description": "..."}],',
        ' "scenes": [',
        _SCENE_SHAPE,
        " ]",
        "}",
        "",
        "Remember, your goal is a compelling, visually interesting story that can be illustrated "
        "through a storyboard. Be creative, consistent, and detailed.",
    ]
    return "\n".join(prompt_parts)


def storyboard_prompt(scenario: Scenario, num_scenes: int, style: str, language: Language) -> str:
    """Build the prompt that expands an existing scenario into scenes."""
    prompt_parts = [
        "You are tasked with generating creative scenes for a short movie and creating prompts "
        "for storyboard illustrations. Follow these instructions carefully:",
        "",
        f"1. This scenario, written in {scenario.language.name}, is the foundation for your storyboard:",
        "<scenario>",
        scenario.scenario,
        "</scenario>",
        "",
        "<characters>",
        *[f"{character.name}: {character.description}" for character in scenario.characters],
        "</characters>",
        "",
        "<settings>",
        *[f"{setting.name}: {setting.description}" for setting in scenario.settings],
        "</settings>",
        "",
        "<music>",
        scenario.music,
        "</music>",
        "",
        "<mood>",
        scenario.mood,
        "</mood>",
        "",
        "2. " + "\n".join(_scene_guidelines(num_scenes, style, language, localize_prompts=True)),
        f"Include the style {style} in every image and video prompt.",
        "",
        "Format the response as a JSON object with this structure:",
        "{",
        ' "scenes": [',
        _SCENE_SHAPE,
        " ]",
        "}",
        "",
        "Do not include any additional text or explanations.",
    ]
    return "\n".join(prompt_parts)
