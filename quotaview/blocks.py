"""Fixed-size text blocks: every renderer hands back lines cut to an exact box."""

from typing import Sequence

from rich.text import Text

from .palette import Palette

NO_DATA = "No data available"


def fit_line(line: Text | str, width: int, overflow: str = "crop") -> Text:
    """Copy of ``line`` cropped (or ellipsized) and padded to ``width`` cells.

    Strings are taken literally; brackets are never read as markup.
    """
    if width <= 0:
        return Text()
    text = Text(line) if isinstance(line, str) else line.copy()
    text.truncate(width, overflow=overflow, pad=True)
    return text


def fit_lines(lines: Sequence[Text | str], width: int, height: int, overflow: str = "crop") -> list[Text]:
    height = max(height, 0)
    fitted = [fit_line(line, width, overflow) for line in lines[:height]]
    while len(fitted) < height:
        fitted.append(Text(" " * max(width, 0)))
    return fitted


def placeholder(width: int, height: int, palette: Palette, message: str = NO_DATA) -> list[Text]:
    return fit_lines([Text(f"  {message}", style=palette("dim"))], width, max(height, 1))
