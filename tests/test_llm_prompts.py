from sitegen.llm_client import GenerationRequest, ReferenceImage
from sitegen.llm_prompts import TAILWIND_CDN_URL, compose, compose_for


def test_creation_mode_embeds_prompt_verbatim():
    prompt = "Create a landing page for a bakery\n  with {braces} and ```fences```"
    text = compose(prompt)
    assert prompt in text


def test_creation_mode_states_structure_and_format():
    text = compose("portfolio site")
    assert TAILWIND_CDN_URL in text
    assert "single file" in text
    assert "responsive" in text.lower()
    assert "pastel" in text.lower()
    assert text.rstrip().endswith("No explanations and no code blocks (```).")


def test_creation_mode_without_images_has_no_image_note():
    assert "REFERENCE IMAGES" not in compose("shop")


def test_creation_mode_mentions_image_count():
    text = compose("shop", image_count=3)
    assert "REFERENCE IMAGES" in text
    assert "3 image(s)" in text
    assert "mood" in text
    assert "Do not embed the images" in text


def test_revision_mode_embeds_prior_document_and_request():
    text = compose("make the button blue", prior_document="<html>OLD</html>")
    assert "<html>OLD</html>" in text
    assert "make the button blue" in text
    assert "change only what is requested" in text
    assert "Keep everything that was not requested" in text
    assert "REFERENCE IMAGES" not in text
    assert text.rstrip().endswith("No explanations and no code blocks (```).")


def test_empty_prior_document_means_creation_mode():
    assert "EXISTING CODE" not in compose("blog", prior_document="")


def test_compose_for_reads_request_fields():
    req = GenerationRequest(
        prompt="cafe menu",
        provider_id="gemini",
        credential="k",
        reference_images=(ReferenceImage("a.png", "image/png", "AAAA"), ReferenceImage("b.jpg", "image/jpeg", "BBBB")),
    )
    text = compose_for(req)
    assert "cafe menu" in text
    assert "2 image(s)" in text
    # Image bytes never reach the instruction
    assert "AAAA" not in text and "BBBB" not in text
