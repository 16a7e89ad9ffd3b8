from __future__ import annotations

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from sitegen.llm_client import GenerationRequest

TAILWIND_CDN_URL = "https://cdn.tailwindcss.com"

SYSTEM_PROMPT = (
    "You are an excellent web developer. "
    "Build a beautiful website that matches what the user asks for."
)

_OUTPUT_FORMAT = """[OUTPUT FORMAT]
Output only the HTML code. No explanations and no code blocks (```)."""

_CREATION_REQUIREMENTS = f"""[REQUIREMENTS]
- Put HTML5, CSS and JavaScript together in a single file
- Load Tailwind CSS from the CDN (<script src="{TAILWIND_CDN_URL}"></script>)
- Support responsive design
- Use a modern design (rounded shapes, soft colors)
- Base the color scheme on pastel colors (light blue tones)"""


def _reference_image_note(image_count: int) -> str:
    if image_count <= 0:
        return ""
    return f"""
[REFERENCE IMAGES]
The user uploaded {image_count} image(s). Reflect the mood of these images in the design.
Do not embed the images themselves in the HTML; use them only as design reference.
"""


def compose(prompt: str, image_count: int = 0, prior_document: Optional[str] = None) -> str:
    """Build the single instruction sent to the model.

    A non-empty prior_document switches to revision mode. The user prompt and
    the prior document are embedded verbatim.
    """
    if prior_document:
        return f"""You are a web developer improving an existing website.
Using the existing HTML code below as the base, revise and improve it according to the user's request.

[EXISTING CODE]
{prior_document}

[USER'S REVISION REQUEST]
{prompt}

[IMPORTANT RULES]
- Use the existing code as the foundation and change only what is requested
- Keep everything that was not requested as it is
- Output a complete HTML file
- Keep using Tailwind CSS

{_OUTPUT_FORMAT}"""

    return f"""The user is describing a website they want to build.
Create a complete, practical HTML file (a single file including CSS and JavaScript) that meets the requirements below.

{_CREATION_REQUIREMENTS}

[USER'S REQUEST]
{prompt}
{_reference_image_note(image_count)}
{_OUTPUT_FORMAT}"""


def compose_for(request: "GenerationRequest") -> str:
    return compose(
        request.prompt,
        image_count=len(request.reference_images),
        prior_document=request.prior_document,
    )
