from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from sitegen.llm_parsing import extract_code
from sitegen.llm_prompts import compose_for
from sitegen.llm_providers import PROVIDERS, get_adapter

log = logging.getLogger(__name__)

"""
One generation = compose the instruction, make exactly one upstream call,
extract the HTML. Nothing is cached between calls; the caller's credential is
only ever held by the adapter for the duration of that call.
"""


@dataclass(frozen=True)
class ReferenceImage:
    name: str
    mime_type: str
    data: str


@dataclass(frozen=True)
class GenerationRequest:
    prompt: str
    provider_id: str
    credential: str
    reference_images: Tuple[ReferenceImage, ...] = ()
    prior_document: Optional[str] = None

    @property
    def is_revision(self) -> bool:
        return bool(self.prior_document)


CallPolicy = Callable[[Callable[[], str]], str]


def direct(call: Callable[[], str]) -> str:
    """Default call policy: a single attempt, no retry, no extra timeout."""
    return call()


def generate(request: GenerationRequest, transport: Any = None, policy: Optional[CallPolicy] = None) -> str:
    """Return the HTML document for `request`.

    Raises UnsupportedProviderError before any network traffic when the
    provider id is unknown; UpstreamError and transport exceptions propagate
    unchanged. `policy` wraps the upstream call and is the place to add retry
    or deadline behavior.
    """
    adapter = get_adapter(request.provider_id, transport=transport)
    instruction = compose_for(request)
    run = policy or direct

    start = time.time()
    raw = run(lambda: adapter.invoke(request.credential, instruction))
    dur_ms = int((time.time() - start) * 1000)

    code = extract_code(raw)
    log.info(
        "llm provider=%s mode=%s images=%d raw_chars=%d code_chars=%d dur_ms=%d",
        adapter.name,
        "revise" if request.is_revision else "create",
        len(request.reference_images),
        len(raw),
        len(code),
        dur_ms,
    )
    return code


def provider_catalog() -> List[Dict[str, str]]:
    return [
        {"id": pid, "label": cls.label, "model": cls.model}
        for pid, cls in PROVIDERS.items()
    ]

