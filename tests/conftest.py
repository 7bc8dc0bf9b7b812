"""Shared test fixtures for gitmodel tests."""

import pytest

COMMIT_BLOCK = """\
commitHash: 49c28cc
commitMessage: Add README
commitDate: 2022-01-26T02:51:21-05:00
committerName: Adam Charron
committerEmail: adam@charrondev.com
"""

ANNOTATED_TAG_BLOCK = """\
tag: v1.0
ref: refs/tags/v1.0
commitHash: cd9d41b677056f9bfd71014e1118b5a1de0f4345
commitMessage: File 4
commitDate: 2022-01-26T02:51:21-05:00
committerName: Adam Charron
committerEmail: adam@charrondev.com
tagMessage: Annotated tag
tagDate: 2022-01-26T01:20:54-05:00
taggerName: Tag Person
taggerEmail: <tagger@example.com>
"""

LIGHTWEIGHT_TAG_BLOCK = """\
tag: v0.9
ref: refs/tags/v0.9
commitHash: 8f2b1e07a1c9d3e4f5a6b7c8d9e0f1a2b3c4d5e6
commitMessage: File 3
commitDate: 2022-01-25T10:00:00+00:00
committerName: Adam Charron
committerEmail: <adam@charrondev.com>
"""


@pytest.fixture
def commit_block() -> str:
    """A single COMMIT_LOG_FORMAT record."""
    return COMMIT_BLOCK


@pytest.fixture
def annotated_tag_block() -> str:
    """A single TAG_REF_FORMAT record for an annotated tag."""
    return ANNOTATED_TAG_BLOCK


@pytest.fixture
def lightweight_tag_block() -> str:
    """A single TAG_REF_FORMAT record for a lightweight tag."""
    return LIGHTWEIGHT_TAG_BLOCK
