# facelabel/core/wrap.py
"""
Split a label over a number of lines so that line widths are as even as possible.
Dynamic programming over (line, word): minimise the sum of squared deviations of
each line's character width from the ideal even split.
"""

from __future__ import annotations

import numpy as np


def text_line_wrap(text: str, num_lines: int) -> list[str]:
    """
    Return the words of text distributed over at most num_lines non-empty lines.
    Fewer lines are returned when there are fewer words than num_lines.
    """
    words = text.split()
    n_words = len(words)
    if n_words == 0:
        return []
    n_lines = max(1, min(int(num_lines), n_words))
    if n_lines == 1:
        return [" ".join(words)]

    cum = np.zeros(n_words + 1, dtype=np.float64)
    cum[1:] = np.cumsum([len(w) for w in words])
    total_width = cum[-1] + (n_words - 1)
    ideal = (total_width - (n_lines - 1)) / n_lines

    def cost(i: int, j: int) -> float:
        # words[i:j] on one line, joined by single spaces
        width = (j - i - 1) + cum[j] - cum[i]
        return float((ideal - width) ** 2)

    best = np.full((n_lines + 1, n_words + 1), np.inf)
    back = np.zeros((n_lines + 1, n_words + 1), dtype=np.int64)
    best[0, 0] = 0.0
    for line in range(1, n_lines + 1):
        for j in range(line, n_words + 1):
            for k in range(line - 1, j):
                if not np.isfinite(best[line - 1, k]):
                    continue
                c = best[line - 1, k] + cost(k, j)
                if c < best[line, j]:
                    best[line, j] = c
                    back[line, j] = k

    lines: list[str] = []
    end = n_words
    for line in range(n_lines, 0, -1):
        start = int(back[line, end])
        lines.append(" ".join(words[start:end]))
        end = start
    lines.reverse()
    return lines


def wrapped_text(text: str, num_lines: int) -> str:
    """text_line_wrap joined with newlines, as passed to the text measurement oracle."""
    return "\n".join(text_line_wrap(text, num_lines))
