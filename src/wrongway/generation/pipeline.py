"""
Single-call joke pipeline.

    params -> validate_params -> build_prompt -> UpstreamInvoker.invoke
           -> extract_json -> validate_contract -> enforce_ending -> JokeArtifact

Example:
    from wrongway.common.config import load_settings
    from wrongway.generation.pipeline import JokePipeline

    pipeline = JokePipeline(load_settings())
    artifact = pipeline.run({"scenario": "Queue", "roles": ["Visitor"], "tone": "Dry"})
    print(artifact.joke)
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from wrongway.common.config import Settings
from wrongway.errors import ContractError
from wrongway.generation.contract import validate_contract
from wrongway.generation.endings import enforce_ending, pick_ending
from wrongway.generation.extract import extract_json
from wrongway.generation.params import JokeRequest, validate_params
from wrongway.generation.prompts import build_prompt
from wrongway.generation.upstream import UpstreamInvoker, completion_text

logger = logging.getLogger(__name__)


STUB_TAGS = ("debug", "stub")


@dataclass
class JokeArtifact:
    joke: str
    scenario: str
    roles: List[str]
    tone: str
    length: str
    ending_phrase: str
    tags: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "joke": self.joke,
            "scenario": self.scenario,
            "roles": list(self.roles),
            "tone": self.tone,
            "length": self.length,
            "ending_phrase": self.ending_phrase,
            "tags": list(self.tags),
        }


def build_stub_artifact(request: JokeRequest, rng: Optional[random.Random] = None) -> JokeArtifact:
    """
    Synthetic artifact for integration tests; no network involved.
    """
    text = f"{' & '.join(request.roles)} at the {request.scenario} try a {request.tone.lower()} bit..."
    joke, ending = enforce_ending(text, pick_ending(rng), request.tone, rng)
    return JokeArtifact(
        joke=joke,
        ending_phrase=ending,
        tags=list(STUB_TAGS),
        **request.to_dict(),
    )


class JokePipeline:
    """
    Turns request params into a contract-valid JokeArtifact.

    The pipeline keeps no per-request state; `run` can be called from many
    threads at once.

    Attributes:
        settings: Runtime configuration
        invoker: Upstream caller (built from settings when not given)
    """

    def __init__(
        self,
        settings: Settings,
        invoker: Optional[UpstreamInvoker] = None,
        rng: Optional[random.Random] = None,
    ):
        self.settings = settings
        self.invoker = invoker if invoker is not None else UpstreamInvoker.from_settings(settings)
        self.rng = rng

        logger.info(
            f"Initialized JokePipeline: model={settings.model} stub={settings.use_stub} "
            f"timeout={settings.timeout_ms}ms retries={settings.retries}"
        )

    def generate(self, request: JokeRequest) -> JokeArtifact:
        """
        Generate one artifact for an already-validated request.

        Raises:
            UpstreamError: Backend failed after all retries
            ContractError: Backend output broke the JSON contract
        """
        if self.settings.use_stub:
            logger.debug(f"Stub mode: skipping upstream for {request}")
            return build_stub_artifact(request, self.rng)

        prompt = build_prompt(request)
        logger.debug(f"Prompt length: {len(prompt)} chars")

        body = self.invoker.invoke(prompt)
        text = completion_text(body)

        try:
            fields = validate_contract(extract_json(text), request, raw=text)
        except ContractError as e:
            logger.warning(f"Model output failed validation: {e}\nRaw: {text}")
            raise

        joke, ending = enforce_ending(fields["joke"], fields["ending_phrase"], request.tone, self.rng)
        if joke != fields["joke"]:
            logger.debug(f"Ending repaired to '{ending}'")

        fields.update(joke=joke, ending_phrase=ending)
        return JokeArtifact(**fields)

    def run(self, params: Any) -> JokeArtifact:
        """
        Validate raw params and generate.

        Raises:
            RequestError: Params are structurally invalid
            UpstreamError / ContractError: See generate()
        """
        request = validate_params(params)
        artifact = self.generate(request)
        logger.info(
            f"Joke ready for {request.scenario}/{request.tone} - {len(artifact.joke)} chars"
        )
        return artifact
