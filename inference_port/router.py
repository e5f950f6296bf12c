"""Router for selecting among named inference services."""

from __future__ import annotations

import asyncio
import logging

from .adapters.mock import MockInferenceService
from .errors import InferenceError, unsupported_model
from .service import InferenceService
from .types import HealthCheckResult, InferenceRequest, InferenceResponse

logger = logging.getLogger(__name__)


class InferenceRouter:
    """Routes requests to named inference services.

    Examples:
        router = InferenceRouter()  # "mock" is registered by default

        router.register(
            "gpt4o",
            OpenAICompatibleAdapter(api_key=os.getenv("OPENAI_API_KEY")),
        )
        router.register(
            "claude",
            AnthropicAdapter(api_key=os.getenv("ANTHROPIC_API_KEY")),
        )

        response = await router.infer(request, service_name="claude")
    """

    def __init__(self, load_mock: bool = True):
        self.services: dict[str, InferenceService] = {}
        self.default_service: str | None = None

        if load_mock:
            self.register("mock", MockInferenceService())

    def register(
        self, name: str, service: InferenceService, default: bool = False
    ) -> None:
        """Register a service under ``name``.

        The first non-mock service becomes the default unless one was chosen
        explicitly.
        """
        if not isinstance(service, InferenceService):
            raise TypeError(f"{type(service).__name__} is not an InferenceService")

        self.services[name] = service
        if default or not self.default_service or (
            self.default_service == "mock" and name != "mock"
        ):
            self.default_service = name
        logger.debug("Registered inference service %s", name)

    def get(self, name: str | None = None) -> InferenceService:
        """Return the named service, or the default one.

        Raises:
            InvalidRequest: If no such service is registered.
        """
        name = name or self.default_service
        if not name or name not in self.services:
            raise unsupported_model(
                f"{name} (available: {', '.join(self.services) or 'none'})"
            )
        return self.services[name]

    async def infer(
        self, request: InferenceRequest, service_name: str | None = None
    ) -> InferenceResponse:
        return await self.get(service_name).infer(request)

    def list_services(self) -> list[str]:
        return list(self.services)

    def supported_models(self) -> dict[str, list[str]]:
        return {name: svc.supported_models() for name, svc in self.services.items()}

    async def health_check_all(self) -> dict[str, HealthCheckResult]:
        """Probe every registered service concurrently.

        A service whose probe raises is reported as unhealthy.
        """
        names = list(self.services)
        results = await asyncio.gather(
            *(self.services[name].health_check() for name in names),
            return_exceptions=True,
        )

        report: dict[str, HealthCheckResult] = {}
        for name, result in zip(names, results, strict=True):
            if isinstance(result, InferenceError):
                report[name] = HealthCheckResult.unhealthy(
                    result.message, kind=result.kind.value
                )
            elif isinstance(result, BaseException):
                raise result
            else:
                report[name] = result
        return report
