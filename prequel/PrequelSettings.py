"""
Prequel Settings - Configuration for a checker run.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from prequel.PrequelErrors import InvalidWarningLevelError
from prequel.PrequelWarnings import DEFAULT_WARNING_LEVEL, WarningLevel

# Environment variable holding the warning level (0-3)
WARN_LEVEL_ENV = "PREQUEL_WARN_LEVEL"


def parse_warning_level(text: str) -> WarningLevel:
    """
    Convert '0'..'3' to a WarningLevel.
    0 = syntax errors only, 1 = critical, 2 = serious, 3 = all warnings.
    """
    try:
        level = int(str(text).strip())
    except ValueError:
        raise InvalidWarningLevelError(f"Invalid Warning Level '{text}'") from None
    if level < 0 or level > WarningLevel.MAX:
        raise InvalidWarningLevelError(f"Invalid Warning Level '{text}'")
    return WarningLevel(level)


@dataclass(frozen=True)
class Settings:
    warning_level: WarningLevel = DEFAULT_WARNING_LEVEL

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        environ = os.environ if environ is None else environ
        text = environ.get(WARN_LEVEL_ENV)
        if not text:
            return cls()
        return cls(warning_level=parse_warning_level(text))
