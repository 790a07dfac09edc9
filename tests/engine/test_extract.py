"""HTML page context extraction tests."""

from __future__ import annotations

from cargomatch.engine.extract import page_context_from_html

HTML = """
<html>
  <head>
    <title> Apple AirPods 4 : Amazon.com.au </title>
    <meta name="description" content="Apple AirPods 4 wireless earbuds">
    <meta property="og:title" content="AirPods 4">
    <meta property="og:description" content="">
  </head>
  <body><h1>AirPods</h1></body>
</html>
"""


def test_extracts_title_and_meta():
    context = page_context_from_html("https://WWW.Amazon.com.au/dp/B0", HTML)

    assert context.hostname == "www.amazon.com.au"
    assert context.title == "Apple AirPods 4 : Amazon.com.au"
    assert context.meta == {
        "description": "Apple AirPods 4 wireless earbuds",
        "og:title": "AirPods 4",
    }


def test_empty_document():
    context = page_context_from_html("not a url", "")
    assert context.hostname == ""
    assert context.title == ""
    assert context.meta == {}
