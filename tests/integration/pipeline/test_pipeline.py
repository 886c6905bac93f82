"""End-to-end tests: markdown text -> element tree -> HTML"""

from mdvdom.core.export import to_html
from mdvdom.core.render import render


DOC = """\
# Title

See [the site][site] and a note[^1].

| a | b |
|:-:|--:|
| 1 | 2 |

```js
const x = "<b>";
```

<aside>raw</aside>

[site]: https://example.com "Example"

[^1]: Footnote text.
"""


def test_full_document_html():
    """A document with references, tables, code, html and footnotes renders to HTML."""
    result = render(DOC)
    assert result.ok, result.error
    out = to_html(result.element)

    assert out.startswith("<div><h1>Title</h1>")
    assert '<a title="Example" href="https://example.com">the site</a>' in out
    assert '<a href="#1"><sup>1</sup></a>' in out
    assert '<th style="text-align:center">a</th>' in out
    assert '<td style="text-align:right">2</td>' in out
    assert '<pre><code class="lang-js">const x = "&lt;b&gt;";</code></pre>' in out
    assert "<div><aside>raw</aside></div>" in out
    assert out.endswith('<footer><div id="1"><p>[1]: Footnote text.</p></div></footer></div>')


def test_tables_keep_body_rows():
    """Every markdown body row lands in tbody."""
    result = render("| h |\n|---|\n| 1 |\n| 2 |\n| 3 |\n")
    table = result.element.children[0]
    tbody = next(c for c in table.children if c.tag == "tbody")
    assert len(tbody.children) == 3
