"""Shared fixtures for core unit tests"""

import pytest

from mdfolio.config import Settings


ABOUT_MD = """\
---
layout: page
title: About Me
permalink: /about/
---

I write about Swift.
"""

POST_MD = """\
---
layout: post
title: Understanding Swift Optionals 🤔
---

An optional holds a value or nothing.

```swift
var nickname: String? = nil
```

## Unwrapping

~~~swift
if let name = nickname { print(name) }
~~~
"""

DUPLICATED_MD = """\
---
layout: post
title: Custom Operators
---

Declare your own operators.

Use them sparingly.

---
layout: post
title: Custom Operators
---

Declare your own operators!

Use them sparingly.
"""


@pytest.fixture(name="settings")
def settings_fixture():
    return Settings()


@pytest.fixture(name="write_site")
def write_site_fixture(tmp_path):
    """Write {relative_path: text} into tmp_path/site and return the site root."""
    root = tmp_path / "site"

    def _write(files: dict[str, str]):
        for rel, text in files.items():
            p = root / rel
            p.parent.mkdir(parents=True, exist_ok=True)
            p.write_text(text, encoding="utf-8")
        return root

    return _write


@pytest.fixture(name="about_md")
def about_md_fixture():
    return ABOUT_MD


@pytest.fixture(name="post_md")
def post_md_fixture():
    return POST_MD


@pytest.fixture(name="duplicated_md")
def duplicated_md_fixture():
    return DUPLICATED_MD
