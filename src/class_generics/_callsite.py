from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Optional

_PACKAGE = __name__.rsplit(".", 1)[0]


@dataclass(frozen=True)
class CallSite:
    """File, line and function of the user code that called into the package."""
    filename: str
    lineno: int
    function: str = "<unknown>"

    def __str__(self) -> str:
        return f"file {self.filename}, line {self.lineno}, in {self.function}"


def _is_internal(module_name: str) -> bool:
    return module_name == _PACKAGE or module_name.startswith(_PACKAGE + ".")


def caller_location() -> Optional[CallSite]:
    """
    Locate the first stack frame outside this package.

    Frames belonging to class_generics itself (including the metaclass) are
    skipped so errors point at the user's declaration or configuration line.

    Returns:
        CallSite of the caller, or None when no frame information is available
        (e.g. interpreters without frame support).
    """
    frame = inspect.currentframe()
    if frame is None:
        return None
    try:
        frame = frame.f_back
        while frame is not None and _is_internal(frame.f_globals.get("__name__", "")):
            frame = frame.f_back
        if frame is None:
            return None
        return CallSite(
            filename=frame.f_code.co_filename,
            lineno=frame.f_lineno,
            function=frame.f_code.co_name,
        )
    finally:
        # Break the reference cycle between this frame and its locals
        del frame
