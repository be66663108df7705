"""
Markdown rendering and content formatting helpers.

``render_markdown`` is a handful of ordered regex substitutions covering the
subset of markdown used in blog posts. It is not a parser: nested or
malformed markup renders on a best-effort basis.
"""
import re
from datetime import datetime
from typing import Dict, List, Union

from portfolio.utils.text import generate_slug

_SUBSTITUTIONS = [
    # Headers
    (re.compile(r"^### (.*)$", re.MULTILINE), r"<h3>\1</h3>"),
    (re.compile(r"^## (.*)$", re.MULTILINE), r"<h2>\1</h2>"),
    (re.compile(r"^# (.*)$", re.MULTILINE), r"<h1>\1</h1>"),
    # Bold and italic
    (re.compile(r"\*\*(.*?)\*\*"), r"<strong>\1</strong>"),
    (re.compile(r"\*(.*?)\*"), r"<em>\1</em>"),
    # Code
    (re.compile(r"```([\s\S]*?)```"), r"<pre><code>\1</code></pre>"),
    (re.compile(r"`([^`]+)`"), r"<code>\1</code>"),
    # Links
    (
        re.compile(r"\[([^\]]+)\]\(([^)]+)\)"),
        r'<a href="\2" target="_blank" rel="noopener noreferrer">\1</a>',
    ),
    # List items
    (re.compile(r"^\* (.*)$", re.MULTILINE), r"<li>\1</li>"),
    (re.compile(r"^- (.*)$", re.MULTILINE), r"<li>\1</li>"),
    (re.compile(r"^\d+\. (.*)$", re.MULTILINE), r"<li>\1</li>"),
    # Horizontal rules, before line breaks consume the line boundaries
    (re.compile(r"^---$", re.MULTILINE), "<hr>"),
    # Paragraphs and line breaks
    (re.compile(r"\n\n"), "</p><p>"),
    (re.compile(r"\n"), "<br>"),
]

_LIST_RUN = re.compile(r"(?:<li>.*?</li>(?:<br>)?)+")
_LIST_ITEM = re.compile(r"<li>.*?</li>")
_TOC_HEADER = re.compile(r"^(#{1,6})\s+(.+)$")


def render_markdown(markdown: str) -> str:
    if not markdown:
        return ""

    html = markdown.replace("\r\n", "\n")
    for pattern, replacement in _SUBSTITUTIONS:
        html = pattern.sub(replacement, html)

    # Consecutive list items become one <ul>
    html = _LIST_RUN.sub(lambda m: "<ul>" + "".join(_LIST_ITEM.findall(m.group(0))) + "</ul>", html)

    if not html.startswith("<"):
        html = f"<p>{html}</p>"
    return html


def generate_toc(content: str) -> List[Dict[str, Union[str, int]]]:
    toc = []
    for line in (content or "").split("\n"):
        match = _TOC_HEADER.match(line)
        if match:
            title = match.group(2).strip()
            toc.append({"id": generate_slug(title), "title": title, "level": len(match.group(1))})
    return toc


def extract_excerpt(content: str, max_length: int = 160) -> str:
    """Plain-text summary of ``content``, cut on a word boundary."""
    text = content or ""
    text = re.sub(r"```[\s\S]*?```", "", text)
    text = re.sub(r"#{1,6}\s+", "", text)
    text = re.sub(r"\*\*(.*?)\*\*", r"\1", text)
    text = re.sub(r"\*(.*?)\*", r"\1", text)
    text = re.sub(r"`([^`]+)`", r"\1", text)
    text = re.sub(r"\[([^\]]+)\]\([^)]+\)", r"\1", text)
    text = re.sub(r"\n+", " ", text).strip()

    if len(text) <= max_length:
        return text
    return re.sub(r"\s+\S*$", "", text[:max_length]) + "..."


def format_read_time(minutes: int) -> str:
    if minutes < 1:
        return "Less than 1 min read"
    if minutes == 1:
        return "1 min read"
    return f"{minutes} min read"


def format_display_date(value: datetime) -> str:
    # "September 18, 2024"
    return f"{value:%B} {value.day}, {value.year}"
