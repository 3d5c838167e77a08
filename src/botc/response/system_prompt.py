"""Assemble the system prompt for the main reply completion."""

from __future__ import annotations

from botc.config import prompt


def build_system_prompt(persona: str = "", grounding: str = "", base: str | None = None) -> str:
    sections = [base if base is not None else prompt.SYSTEM_PROMPT]
    if persona:
        sections.append(f"<Sender Persona>\n{persona}\n</Sender Persona>")
    if grounding:
        sections.append(f"<Grounding Context>\n{grounding}\n</Grounding Context>")
    return "\n".join(sections)


__all__ = ["build_system_prompt"]
