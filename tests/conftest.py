"""Shared fixtures for the optimizer test-suite"""

from types import SimpleNamespace

import pytest

from storage import LocalCache


METADATA_BLOCK = (
    '```json\n'
    '{"title":"x","description":"y","tags":["a"],'
    '"defaultLanguage":"en","defaultAudioLanguage":"en-US","categoryId":"27"}\n'
    '```'
)

SAMPLE_RESPONSE = f"""Here is your YouTube package.

### Primary Objective
Educate

### Hook
Stop saying yes when you mean no.

### Thumbnail Text
SAY NO FIRST

### Title
How to Stop People-Pleasing Without Feeling Guilty

### Description
People-pleasing habits keep you stuck. Learn boundaries that stick.

### Tags
people pleasing, boundaries, self respect

### Chapters
00:00 Intro
01:10 Why we say yes

### Script Outline
Beat 1: story, insight, fix.

### Pinned Comment
What is the hardest no you ever said?

### Metadata JSON
{METADATA_BLOCK}
"""


@pytest.fixture
def sample_response():
    return SAMPLE_RESPONSE


@pytest.fixture
def metadata_block():
    return METADATA_BLOCK


@pytest.fixture
def cache(tmp_path):
    return LocalCache(tmp_path / "cache" / "cache.json")


class FakeCompletions:
    """Stands in for client.chat.completions; replays queued outcomes"""

    def __init__(self, outcomes):
        self.outcomes = list(outcomes)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return SimpleNamespace(
            choices=[SimpleNamespace(message=SimpleNamespace(content=outcome))],
            usage=SimpleNamespace(prompt_tokens=100, completion_tokens=50, total_tokens=150),
        )


def make_fake_client(*outcomes):
    completions = FakeCompletions(outcomes)
    return SimpleNamespace(chat=SimpleNamespace(completions=completions))


@pytest.fixture
def fake_client():
    return make_fake_client
