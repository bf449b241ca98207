"""Progressive masked hints: first letter of every word, the rest masked."""


def build_hint(answer: str) -> str:
    """
    ``"cat"`` -> ``"c _ _"``; ``"ok go"`` -> ``"o _  g _"``.

    Single-character answers and single-character words are shown as-is.
    """
    trimmed = (answer or '').strip()
    if len(trimmed) <= 1:
        return trimmed

    hints = []
    for word in trimmed.split():
        if len(word) <= 1:
            hints.append(word)
        else:
            hints.append(' '.join([word[0]] + ['_'] * (len(word) - 1)))
    return '  '.join(hints)
