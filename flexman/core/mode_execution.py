from __future__ import annotations

from pydantic import BaseModel, Field

from flexman.core.mode import ModeId

__all__ = ["ModeExecution", "add_mode_execution_to_sequence", "format_sequence"]


class ModeExecution(BaseModel):
    """A mode applied `times` consecutive steps; the atomic unit of a schedule."""

    mode: ModeId = Field(ge=0, description="Identifier of the mode to execute")
    # Zero only for the seed entries the search starts from.
    times: int = Field(default=1, ge=0, description="Number of consecutive executions")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ModeExecution):
            return NotImplemented
        return self.mode == other.mode and self.times == other.times

    def __hash__(self) -> int:
        return hash((self.mode, self.times))

    def __str__(self) -> str:
        return f"{self.mode:>2}*{self.times:<3}"


def add_mode_execution_to_sequence(mode: ModeId, sequence: list[ModeExecution]) -> None:
    """Append one step of `mode`, merging it into the last entry when the mode repeats.

    A trailing zero-count entry only marks the active mode of a fresh
    partial solution and is replaced.
    """
    if sequence and sequence[-1].times == 0:
        sequence.pop()
    if not sequence or sequence[-1].mode != mode:
        sequence.append(ModeExecution(mode=mode, times=1))
    else:
        sequence[-1].times += 1


def format_sequence(sequence: list[ModeExecution]) -> str:
    return "[ " + "".join(f"{execution} " for execution in sequence) + " ]"
