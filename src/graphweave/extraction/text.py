# ABOUTME: Markup to plain text normalization and sentence splitting
# ABOUTME: Tolerates malformed markup; never raises, always returns a string

import re

SCRIPT_BLOCK = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
STYLE_BLOCK = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.IGNORECASE)
TAG = re.compile(r"<[^>]+>")
WHITESPACE = re.compile(r"\s+")

# Order matters: &amp; is decoded last so "&amp;lt;" stays literal "&lt;"
HTML_ENTITIES = (
    ("&nbsp;", " "),
    ("&lt;", "<"),
    ("&gt;", ">"),
    ("&quot;", '"'),
    ("&amp;", "&"),
)

# Terminal punctuation followed by whitespace or end of text, except after title abbreviations
SENTENCE_BOUNDARY = re.compile(r"(?<!\bDr)(?<!\bMr)(?<!\bMs)(?<!\bMrs)(?<!\bProf)(?<!\bSt)[.!?]+(?=\s|$)")


def normalize_html(html: str) -> str:
    """Strip markup down to a single line of plain text.

    Removes script and style blocks, replaces remaining tags with spaces,
    decodes a small set of HTML entities and collapses whitespace.

    Args:
        html: Raw page markup (may be malformed or empty)

    Returns:
        Normalized text, possibly empty
    """
    if not html:
        return ""

    text = SCRIPT_BLOCK.sub("", html)
    text = STYLE_BLOCK.sub("", text)
    text = TAG.sub(" ", text)

    for entity, replacement in HTML_ENTITIES:
        text = text.replace(entity, replacement)

    return WHITESPACE.sub(" ", text).strip()


def split_sentences(text: str, min_length: int = 20) -> list[str]:
    """Split normalized text into sentences, dropping short fragments.

    Args:
        text: Normalized text
        min_length: Fragments with this many characters or fewer are discarded

    Returns:
        Stripped sentences without their terminal punctuation
    """
    sentences = []
    for fragment in SENTENCE_BOUNDARY.split(text):
        fragment = fragment.strip()
        if len(fragment) > min_length:
            sentences.append(fragment)
    return sentences
