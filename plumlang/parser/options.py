"""Parser modes and configuration options."""

from dataclasses import dataclass
from enum import StrEnum


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    RECOVER = "recover"
    STRICT = "strict"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Flags controlling how the parser reacts to malformed input."""

    mode: ParseMode = ParseMode.RECOVER
    recover_delimited_groups: bool = True
    recover_statements: bool = True

    @property
    def stop_at_first_error(self) -> bool:
        return self.mode == ParseMode.STRICT

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        if mode == ParseMode.STRICT:
            return ParserOptions(
                mode=mode,
                recover_delimited_groups=False,
                recover_statements=False,
            )

        return ParserOptions(
            mode=mode,
            recover_delimited_groups=True,
            recover_statements=True,
        )
