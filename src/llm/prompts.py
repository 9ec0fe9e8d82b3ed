"""Prompt templates for content generation and the offline fallback."""

import zlib
from dataclasses import dataclass

SYSTEM_PROMPT = (
    "You are a helpful writing assistant that only produces Halal, Islamic-appropriate content. "
    "If a request asks for something impermissible, politely explain why it is not permitted, "
    "give references, and suggest a Halal alternative together with related Halal topics. "
    "Otherwise, simply generate the requested content."
)

DEFAULT_TONE = "professional"
DEFAULT_MIN_WORDS = 500
DEFAULT_MAX_WORDS = 1000
DEFAULT_TOOL = "general"


@dataclass(frozen=True)
class GenerationOptions:
    negative_prompt: str | None = None
    min_words: int | None = None
    max_words: int | None = None
    tone: str | None = None
    tool: str | None = None

    @property
    def resolved_tone(self) -> str:
        return self.tone or DEFAULT_TONE

    @property
    def resolved_min_words(self) -> int:
        return self.min_words or DEFAULT_MIN_WORDS

    @property
    def resolved_max_words(self) -> int:
        return self.max_words or max(DEFAULT_MAX_WORDS, self.resolved_min_words)

    @property
    def resolved_tool(self) -> str:
        return self.tool or DEFAULT_TOOL


def build_instruction(prompt: str, options: GenerationOptions) -> str:
    """Fold the user prompt and every generation option into one instruction."""
    lines = [
        "Generate a Halal and Islamic-appropriate response for the following request.",
        f"Use a {options.resolved_tone} tone.",
        f"Target length: between {options.resolved_min_words} and {options.resolved_max_words} words.",
    ]
    if options.negative_prompt:
        lines.append(f"Avoid the following aspects: {options.negative_prompt}")
    lines.append(f"Tool context: {options.resolved_tool} content generation.")
    lines.append("")
    lines.append(f"User request: {prompt}")
    return "\n".join(lines)


FALLBACK_OPENERS = [
    'Thank you for your question about "{prompt}". As a halal AI assistant, I\'m happy to provide an informative response that adheres to Islamic principles.',
    'Your question about "{prompt}" is an interesting one. Let me offer some insights that are beneficial and in line with Islamic values.',
    'I\'ve considered your query regarding "{prompt}" and would like to share some thoughts that are both helpful and appropriate from an Islamic perspective.',
]

FALLBACK_BODY = """{opener}

Requested style: a {tone} tone, roughly {min_words}-{max_words} words, for {tool} content.{avoid}

In addressing this topic, it's important to approach it with wisdom and consideration for ethical principles. Islam encourages seeking knowledge and understanding the world around us, while maintaining our moral compass.

The Prophet Muhammad (peace be upon him) said: "Seeking knowledge is an obligation upon every Muslim." This hadith reminds us of the importance of education and continuous learning.

When we consider "{prompt}" specifically, we should look at it through the lens of benefit and harm. Does it bring good to ourselves and our community? Does it align with the principles of justice, compassion, and integrity that Islam promotes?

I hope this provides some guidance on your question. If you need more specific information or have follow-up questions, please feel free to ask.

May Allah grant us all beneficial knowledge and guide us to what is best."""


def render_fallback(prompt: str, options: GenerationOptions) -> str:
    """Deterministic templated response used when no hosted model answers."""
    opener = FALLBACK_OPENERS[zlib.crc32(prompt.encode("utf-8")) % len(FALLBACK_OPENERS)]
    avoid = f" Avoiding: {options.negative_prompt}." if options.negative_prompt else ""
    return FALLBACK_BODY.format(
        opener=opener.format(prompt=prompt),
        prompt=prompt,
        tone=options.resolved_tone,
        min_words=options.resolved_min_words,
        max_words=options.resolved_max_words,
        tool=options.resolved_tool,
        avoid=avoid,
    )
