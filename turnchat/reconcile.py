from __future__ import annotations

from dataclasses import replace
from typing import Sequence

from .models import InputTurn, Template


def reconcile(
    turns: Sequence[InputTurn],
    templates: Sequence[Template],
) -> tuple[list[InputTurn], list[Template]]:
    """Apply pending delete/move flags and return fresh lists.

    Flagged templates and turns are dropped. Move requests are collected as
    swap indices (``i`` for up, ``i + 1`` for down, skipped at the list
    boundaries) and then applied in order as swaps with the preceding
    element, so requests made in the same pass can cancel each other. Every
    returned turn has its move flags cleared. The inputs are left untouched.
    """

    kept_templates = [replace(template) for template in templates if not template.delete]
    kept_turns = [
        replace(turn, move_up=False, move_down=False)
        for turn in turns
        if not turn.delete
    ]

    swaps: list[int] = []
    last_index = len(kept_turns) - 1
    for index, turn in enumerate(turn for turn in turns if not turn.delete):
        if turn.move_up and index != 0:
            swaps.append(index)
        if turn.move_down and index != last_index:
            swaps.append(index + 1)

    for index in swaps:
        kept_turns[index - 1], kept_turns[index] = kept_turns[index], kept_turns[index - 1]

    return kept_turns, kept_templates
