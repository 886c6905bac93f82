"""Shared fixtures for core unit tests"""

import pytest

from mdvdom.config import Settings


SAMPLE_MD = """\
---
title: Sample
---

# Heading 1

A paragraph with [a link][site] and a note[^n].

- [x] done
- [ ] todo

| left | right |
|:-----|------:|
| 1    | 2     |

```python
print("hello")
```

[site]: /site "Site"

[^n]: The note.
"""


@pytest.fixture(name="strict_settings")
def strict_settings_fixture():
    return Settings(strict_references=True)


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD
