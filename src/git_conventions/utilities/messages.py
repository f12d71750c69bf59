SCISSORS_LINE = "# ------------------------ >8 ------------------------"


def clean_commit_message(text: str, comment_char: str = "#") -> str:
    """Remove what `git commit` strips from an edited message: comment lines, everything below the scissors line
    of a verbose commit and leading blank lines."""

    kept_lines: list[str] = []

    for line in text.splitlines():
        if line.rstrip() == SCISSORS_LINE:
            break

        if line.startswith(comment_char):
            continue

        if not kept_lines and not line.strip():
            continue

        kept_lines.append(line)

    return "\n".join(kept_lines)
