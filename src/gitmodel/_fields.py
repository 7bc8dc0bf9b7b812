"""Field-block parsing.

A field block is the `label: value` text that git emits for one record when
given one of the format templates in this package, for example::

    commitHash: 49c28cc
    commitMessage: Add README
    commitDate: 2022-01-26T02:51:21-05:00
    committerName: Adam Charron
    committerEmail: adam@charrondev.com
"""

from typing import Final

from gitmodel.exceptions import MalformedRecordError

FIELD_SEPARATOR: Final = ": "


def parse_field_block(text: str) -> dict[str, str]:
    """Parse a `label: value` block into a mapping.

    Lines are split on the first separator only, so values may themselves
    contain `": "`. Blank lines are skipped and later duplicate labels win.

    Args:
        text: The raw block of git output.

    Returns:
        Mapping of field label to trimmed value, in first-seen order.

    Raises:
        MalformedRecordError: If a line has no `": "` separator.
    """
    fields: dict[str, str] = {}
    for line in text.strip().split("\n"):
        if not line.strip():
            continue

        name, separator, value = line.partition(FIELD_SEPARATOR)
        if not separator:
            # Trimming the block removes the blank after a trailing empty label.
            if not line.endswith(":"):
                msg = f"Failed to parse field line. Expected 'name: value':\n{line}"
                raise MalformedRecordError(msg, record=line, expected="name: value")
            name, value = line[:-1], ""

        name = name.strip()
        value = value.strip()
        if "email" in name.lower():
            # git's :trim modifier is not applied consistently to emails.
            value = value.strip("<>")

        fields[name] = value
    return fields
