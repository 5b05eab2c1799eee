"""Turns a rendered DOM snapshot into the labeled text sent to the LLM.

The output has three sections, and the extraction prompt relies on their
labels:

    URL: <final page url>

    STRUCTURED DATA:
    <application/ld+json bodies>

    PAGE CONTENT:
    <event-biased text, or main/body text as a fallback>

Elements matching several keywords (or nested inside another matching
element) are appended once per match. The duplication is kept as is.
"""
import logging
from typing import List, Union

from bs4 import BeautifulSoup
from bs4.element import NavigableString, PreformattedString, Tag

logger = logging.getLogger(__name__)

BLOCK_TAGS = frozenset({
    "div", "p", "h1", "h2", "h3", "h4", "h5", "h6",
    "li", "tr", "article", "section",
})

EVENT_KEYWORDS = (
    "events", "calendar", "shows", "concerts",
    "schedule", "upcoming", "performances", "gigs",
)

NON_CONTENT_TAGS = ["script", "style", "noscript"]

# Elements with this much text content or less are ignored by the keyword scan
MIN_SECTION_LENGTH = 50


def text_with_structure(element: Union[BeautifulSoup, Tag]) -> str:
    """Flatten an element to text, with newlines around block-level children."""
    text = ""
    for child in element.children:
        if isinstance(child, Tag):
            is_block = child.name in BLOCK_TAGS
            if is_block:
                text += "\n"
            text += text_with_structure(child)
            if is_block:
                text += "\n"
        elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
            # Comments, doctypes and CDATA are not text nodes
            node_text = child.strip()
            if node_text:
                text += node_text + " "
    return text


def extract_structured_data(soup: BeautifulSoup) -> str:
    """Return all linked-data script bodies, verbatim, separated by blank lines."""
    blocks = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        body = script.string or script.get_text()
        if body and body.strip():
            blocks.append(body)
    return "\n\n".join(blocks)


def _matches_keyword(element: Tag, text: str, keyword: str) -> bool:
    class_name = " ".join(element.get("class") or []).lower()
    element_id = (element.get("id") or "").lower()
    return keyword in text or keyword in class_name or keyword in element_id


def extract_event_sections(soup: BeautifulSoup) -> str:
    """Collect the structured text of every element that looks event-related."""
    elements: List[Tag] = soup.find_all(True)
    # textContent per element, computed once for all keywords
    texts = [element.get_text() for element in elements]
    lowered = [text.lower() for text in texts]

    content = ""
    for keyword in EVENT_KEYWORDS:
        for element, text, text_lower in zip(elements, texts, lowered):
            if len(text) <= MIN_SECTION_LENGTH:
                continue
            if _matches_keyword(element, text_lower, keyword):
                content += text_with_structure(element) + "\n\n"
    return content


def shape_content(html: str, url: str) -> str:
    """Shape a page's HTML into labeled text for event extraction."""
    soup = BeautifulSoup(html, "html.parser")

    # Linked data lives in script tags, so read it before they are removed
    structured_data = extract_structured_data(soup)

    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()

    event_content = extract_event_sections(soup)
    if not event_content:
        logger.info(f"No event-related sections found on {url}, using main content")
        container = soup.find("main") or soup.body or soup
        event_content = text_with_structure(container)

    return f"URL: {url}\n\nSTRUCTURED DATA:\n{structured_data}\n\nPAGE CONTENT:\n{event_content}"
