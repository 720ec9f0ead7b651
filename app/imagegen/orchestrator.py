"""
Fan-out Orchestrator
Sends one expanded prompt to every enabled image provider and merges the
outcomes into a single AggregateResult.
"""
import asyncio
import logging
import os
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from fastapi.concurrency import run_in_threadpool

from .clients import PROVIDER_PRECEDENCE, BaseGenerator, Failure, ProviderResult, Success, get_generator
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PROVIDERS = "IMAGE_PROVIDERS"
ENV_READY_PROVIDERS = "IMAGE_READY_PROVIDERS"
DEFAULT_PROVIDERS = "gemini,bytedance"


@dataclass
class AggregateResult:
    """Outcome of one fan-out. Built per request, never shared."""
    expanded_prompt: str
    results: Dict[str, ProviderResult] = field(default_factory=dict)
    legacy_image: Optional[str] = None
    ready: bool = False


def parse_provider_list(value: Optional[str]) -> List[str]:
    """Split a comma separated provider list, validated and ordered by precedence."""
    names = [n.strip().lower() for n in (value or "").split(",") if n.strip()]
    unknown = [n for n in names if n not in PROVIDER_PRECEDENCE]
    if unknown:
        raise ConfigurationError(f"Unknown image provider(s): {', '.join(unknown)}")
    return [n for n in PROVIDER_PRECEDENCE if n in names]


def pick_legacy_image(results: Dict[str, ProviderResult]) -> Optional[str]:
    """
    Choose the single image older clients read from `imageData`.

    Walks PROVIDER_PRECEDENCE rather than completion order so the choice is
    stable however the concurrent calls happen to finish. Pending jobs carry
    no image and are skipped.
    """
    for name in PROVIDER_PRECEDENCE:
        result = results.get(name)
        if isinstance(result, Success) and result.image:
            return result.image
    return None


class ImageOrchestrator:
    """
    Runs the enabled generators for a request.

    Args:
        generators: Generators keyed by provider name. Defaults to the
            providers listed in IMAGE_PROVIDERS.
        ready_providers: Providers that must succeed for the response to be
            flagged ready. Defaults to IMAGE_READY_PROVIDERS, or the first
            enabled provider by precedence.
    """

    def __init__(
        self,
        generators: Optional[Dict[str, BaseGenerator]] = None,
        ready_providers: Optional[Sequence[str]] = None,
    ):
        if generators is None:
            names = parse_provider_list(os.getenv(ENV_PROVIDERS, DEFAULT_PROVIDERS))
            generators = {name: get_generator(name) for name in names}
        if not generators:
            raise ConfigurationError("No image providers enabled")

        order = {name: i for i, name in enumerate(PROVIDER_PRECEDENCE)}
        self.generators = dict(sorted(generators.items(), key=lambda item: order.get(item[0], len(order))))

        if ready_providers is None:
            ready_providers = parse_provider_list(os.getenv(ENV_READY_PROVIDERS)) or list(self.generators)[:1]
        missing = [name for name in ready_providers if name not in self.generators]
        if missing:
            raise ConfigurationError(f"Readiness requires providers that are not enabled: {', '.join(missing)}")
        self.ready_providers = list(ready_providers)

    @property
    def provider_names(self) -> List[str]:
        return list(self.generators)

    def any_configured(self) -> bool:
        return any(g.is_configured() for g in self.generators.values())

    @staticmethod
    def _invoke(name: str, generator: BaseGenerator, prompt: str) -> ProviderResult:
        # Anything a generator lets escape is recorded as a Failure
        try:
            return generator.generate(prompt)
        except Exception as e:
            logger.exception(f"{name}: unexpected error during generation")
            return Failure(str(e) or e.__class__.__name__)

    async def orchestrate(self, expanded_prompt: str) -> AggregateResult:
        """Run every enabled generator and wait for all of them to settle."""
        names = self.provider_names

        if len(names) == 1:
            name = names[0]
            outcomes = [await run_in_threadpool(self._invoke, name, self.generators[name], expanded_prompt)]
        else:
            logger.info(f"Fanning out to {', '.join(names)}")
            outcomes = await asyncio.gather(*(
                run_in_threadpool(self._invoke, name, self.generators[name], expanded_prompt)
                for name in names
            ))

        results = dict(zip(names, outcomes))
        for name, result in results.items():
            if not isinstance(result, Success):
                logger.warning(f"{name}: {result.reason}")

        return AggregateResult(
            expanded_prompt=expanded_prompt,
            results=results,
            legacy_image=pick_legacy_image(results),
            ready=all(isinstance(results[name], Success) for name in self.ready_providers),
        )
