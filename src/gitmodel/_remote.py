"""Remote model, parsed from `git remote -v` output."""

import re
from dataclasses import dataclass
from typing import Final, Self

from gitmodel.exceptions import MalformedRecordError

# vanilla-oss	git@github.com:vanilla/vanilla.git (fetch)
_REMOTE_LINE: Final = re.compile(r"^(\S+)\s+(\S+)\s+\((.*)\)$")

MODE_FETCH: Final = "fetch"
MODE_PUSH: Final = "push"


@dataclass(frozen=True, slots=True)
class Remote:
    """A configured git remote.

    Attributes:
        name: Remote name, e.g. "origin".
        uri: Fetch URL (or path) of the remote.
        can_fetch: Whether a fetch URL is configured.
        can_push: Whether a push URL is configured.
    """

    name: str
    uri: str
    can_fetch: bool = False
    can_push: bool = False

    @classmethod
    def from_output(cls, output: str) -> list[Self]:
        """Build remotes from `git remote -v` output.

        Each remote normally appears twice, once per direction. Lines are
        grouped by name; the first line for a name supplies the uri.

        Args:
            output: Everything git printed for `git remote -v`.

        Returns:
            Remotes in the order their names first appear.

        Raises:
            MalformedRecordError: If a non-blank line is not `name uri (mode)`.
        """
        uris: dict[str, str] = {}
        modes: dict[str, set[str]] = {}
        for line in output.split("\n"):
            if not line.strip():
                continue

            match = _REMOTE_LINE.match(line.strip())
            if match is None:
                msg = (
                    "Failed to parse remote output. "
                    f"Expected 'name uri (mode)':\n{line}"
                )
                raise MalformedRecordError(msg, record=line, expected="name uri (mode)")

            name, uri, mode = (group.strip() for group in match.groups())
            _ = uris.setdefault(name, uri)
            modes.setdefault(name, set()).add(mode)

        return [
            cls(
                name=name,
                uri=uri,
                can_fetch=MODE_FETCH in modes[name],
                can_push=MODE_PUSH in modes[name],
            )
            for name, uri in uris.items()
        ]
