from sitegen.llm_parsing import extract_code


def test_fenced_html_block_interior_is_returned_trimmed():
    raw = "```html\n<!DOCTYPE html><html><body>Bakery</body></html>\n```"
    assert extract_code(raw) == "<!DOCTYPE html><html><body>Bakery</body></html>"


def test_untagged_fence_is_accepted():
    raw = "Here you go:\n```\n  <div>plain</div>  \n```\nEnjoy!"
    assert extract_code(raw) == "<div>plain</div>"


def test_first_fenced_block_wins():
    raw = (
        "Explanation first:\n```html\n<p>first</p>\n```\n"
        "and another:\n```html\n<!DOCTYPE html><html>second</html>\n```"
    )
    assert extract_code(raw) == "<p>first</p>"


def test_surrounding_prose_does_not_leak_into_fenced_result():
    raw = "Sure! Below is the page.\n\n```html\n<main>ok</main>\n```\n\nLet me know if you need changes."
    assert extract_code(raw) == "<main>ok</main>"


def test_doctype_span_used_when_no_fence():
    doc = "<!DOCTYPE html>\n<html><head></head><body>Hi</body></html>"
    raw = f"Here is your site:\n{doc}\nHope it helps."
    assert extract_code(raw) == doc


def test_doctype_span_matching_is_case_insensitive():
    doc = "<!doctype HTML><HTML><body>x</body></HTML>"
    assert extract_code("prefix " + doc + " suffix") == doc


def test_doctype_span_stops_at_nearest_close_tag():
    raw = "<!DOCTYPE html><html>one</html> trailing <html>two</html>"
    assert extract_code(raw) == "<!DOCTYPE html><html>one</html>"


def test_plain_prose_is_returned_trimmed():
    assert extract_code("  Sorry, I cannot help with that.\n") == "Sorry, I cannot help with that."


def test_fallback_is_idempotent():
    once = extract_code("\n\t just some words \n")
    assert extract_code(once.strip()) == once


def test_empty_and_none_degrade_to_empty_string():
    assert extract_code("") == ""
    assert extract_code(None) == ""
    assert extract_code("   \n ") == ""


def test_unclosed_fence_falls_through_to_doctype():
    raw = "```html\n<!DOCTYPE html><html>half</html>"
    assert extract_code(raw) == "<!DOCTYPE html><html>half</html>"
