"""Detection of sustainability claims that need substantiation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from storybranch.domain.blocks import TextContent, VideoContent
from storybranch.domain.story import Story

SUSTAINABILITY_TERMS: tuple[str, ...] = (
    "carbon neutral",
    "carbon negative",
    "net zero",
    "recycled",
    "recyclable",
    "biodegradable",
    "compostable",
    "organic",
    "sustainable",
    "eco-friendly",
    "green",
    "renewable",
    "zero waste",
    "circular",
    "upcycled",
    "fair trade",
    "ethical",
    "climate positive",
    "offsetting",
    "emissions",
)


@dataclass(frozen=True, slots=True)
class UnsubstantiatedClaim:
    branch_id: str
    block_id: str
    terms: tuple[str, ...]


def detect_green_claims(text: str) -> List[str]:
    """Return the sustainability terms found in ``text``, in term-list order."""
    lowered = text.lower()
    return [term for term in SUSTAINABILITY_TERMS if term in lowered]


def find_unsubstantiated_claims(story: Story) -> List[UnsubstantiatedClaim]:
    """List text and video blocks making claims without a substantiation record."""
    findings: List[UnsubstantiatedClaim] = []
    for branch, block in story.iter_blocks():
        content = block.content
        if isinstance(content, TextContent):
            text = f"{content.title} {content.body_text}"
        elif isinstance(content, VideoContent):
            text = f"{content.title} {content.description}"
        else:
            continue
        if content.substantiation is not None:
            continue
        terms = detect_green_claims(text)
        if terms:
            findings.append(UnsubstantiatedClaim(branch_id=branch.id, block_id=block.id, terms=tuple(terms)))
    return findings
