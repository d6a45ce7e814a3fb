"""Shared fixtures for core unit tests"""

import pytest

from mdblocks.crud.memory_store import MemoryStore


SAMPLE_MD = """\
# Heading 1

A paragraph of text.

## Heading 2

- item one
- [ ] open task
- [x] done task

> A quote.

```python
def f():
    return 1
```

---

![A cat](https://example.com/cat.png)
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD


@pytest.fixture(name="store")
def store_fixture():
    return MemoryStore()
